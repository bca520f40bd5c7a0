"""Base record model shared by every QuickBooks resource kind.

These are QuickBooks-specific models that map to the platform's JSON schema.
Field names are snake_case in Python and PascalCase on the wire; the few keys
the platform spells differently carry explicit aliases on their fields.
"""

import json
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from connectors.quickbooks.qb_lines import (
    DETAIL_KEYS,
    as_decode_error,
    ensure_encodable,
    iter_line_items,
)
from connectors.quickbooks.qb_registry import find_descriptor
from core.errors import DecodeError
from core.models.refs import MetaData, QBBaseModel
from core.models.values import compact
from core.observability.logging import get_logger

logger = get_logger(__name__)


class QBEntity(QBBaseModel):
    """One QuickBooks record.

    ``id`` and ``sync_token`` are both set on records read from the platform
    and both unset on records not created yet. ``meta_data`` is read only and
    is never written back.
    """
    id: Optional[str] = None
    sync_token: Optional[str] = None
    meta_data: Optional[MetaData] = None

    @classmethod
    def kind_name(cls) -> str:
        """Canonical kind name, e.g. "SalesReceipt"."""
        descriptor = find_descriptor(cls)
        return descriptor.name if descriptor else cls.__name__

    @classmethod
    def api_id(cls) -> str:
        """Lowercase id used in request paths, e.g. "salesreceipt"."""
        descriptor = find_descriptor(cls)
        return descriptor.api_id if descriptor else cls.__name__.lower()

    @classmethod
    def from_wire(cls, data: dict):
        """Decode a wire object into a record.

        Raises:
            DecodeError: If the payload is not an object or is malformed
        """
        if not isinstance(data, dict):
            raise DecodeError(
                f"{cls.kind_name()} payload must be an object, got {type(data).__name__}"
            )
        try:
            return cls.model_validate(data)
        except PydanticValidationError as exc:
            error = as_decode_error(exc, cls.kind_name(), payload=data)
            logger.debug(
                "Record decode failed",
                extra_fields={"kind": cls.kind_name(), "error": error.message},
            )
            raise error from exc

    def to_wire(self) -> dict:
        """Encode a write payload.

        Unset and empty values are omitted. Metadata is never included.

        Raises:
            ValidationError: If any line item still has no detail
        """
        for i, line in enumerate(iter_line_items(self)):
            ensure_encodable(line, f"{self.kind_name()}.Line[{i}]")
        data = self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude={"meta_data"},
        )
        return compact(data, keep=DETAIL_KEYS)

    def __str__(self) -> str:
        body = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        return f"{self.kind_name()} : {json.dumps(compact(body), indent=2)}"
