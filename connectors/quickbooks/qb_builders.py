"""Field-by-field construction of QuickBooks records and lines.

Usage:
    invoice = (
        RecordBuilder("Invoice")
        .set(customer_ref=Reference(target_id="1"))
        .add_line(
            LineBuilder()
            .amount("100.00")
            .sales_item(item_ref=Reference(target_id="5"), qty=1, unit_price=100)
            .build()
        )
        .build()
    )

Builders check required fields and the kind's structural rules at ``build()``.
They never contact the platform; use the capability predicates to decide
whether the result is ready for a given operation.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from connectors.quickbooks.qb_base import QBEntity
from connectors.quickbooks.qb_lines import (
    EMPTY_DETAIL,
    DETAIL_TYPES,
    LineDetailBase,
    LineItem,
    PaymentLine,
)
from connectors.quickbooks.qb_registry import KindDescriptor, get_descriptor
from core.errors import MissingField, ValidationError
from core.models.values import is_blank
from core.observability.logging import get_logger

logger = get_logger(__name__)


class RecordBuilder:
    """Accumulates fields for one record kind and validates them on build."""

    def __init__(self, kind: Union[str, type, KindDescriptor]):
        self._descriptor = get_descriptor(kind)
        self._fields: Dict[str, Any] = {}
        self._lines: List[Union[LineItem, PaymentLine]] = []

    @classmethod
    def from_record(cls, record: QBEntity) -> "RecordBuilder":
        """Start from an existing record, e.g. to change a few fields."""
        builder = cls(type(record))
        for name in type(record).model_fields:
            value = getattr(record, name)
            if name == "line":
                builder._lines = list(value)
            elif value is not None:
                builder._fields[name] = value
        return builder

    @property
    def kind(self) -> str:
        return self._descriptor.name

    def set(self, **fields) -> "RecordBuilder":
        """Set one or more fields by their Python names.

        Raises:
            ValidationError: If the kind has no such field
        """
        model_fields = self._descriptor.model.model_fields
        for name, value in fields.items():
            if name not in model_fields:
                raise ValidationError(f"{self.kind} has no field {name!r}")
            if name == "line":
                self._lines = list(value or [])
            else:
                self._fields[name] = value
        return self

    def add_line(self, line: Union[LineItem, PaymentLine]) -> "RecordBuilder":
        """Append a line to the record's ``Line`` collection.

        Raises:
            ValidationError: If the kind has no line collection
        """
        if "line" not in self._descriptor.model.model_fields:
            raise ValidationError(f"{self.kind} has no line collection")
        self._lines.append(line)
        return self

    def build(self) -> QBEntity:
        """Create the record.

        Raises:
            MissingField: If a field required for the kind is unset
            ValidationError: If the values are malformed or break a rule of the kind
        """
        for name in self._descriptor.required_fields:
            if is_blank(self._fields.get(name)):
                raise MissingField(name, self.kind)

        data = dict(self._fields)
        if self._lines:
            data["line"] = list(self._lines)

        try:
            record = self._descriptor.model.model_validate(data)
        except PydanticValidationError as exc:
            raise ValidationError(f"invalid {self.kind}: {exc}") from exc

        if self._descriptor.validate is not None:
            self._descriptor.validate(record)

        logger.debug(
            "Built record",
            extra_fields={"kind": self.kind, "fields": sorted(data)},
        )
        return record


class LineBuilder:
    """Builds one document line with exactly one detail payload."""

    def __init__(self):
        self._fields: Dict[str, Any] = {}
        self._detail: LineDetailBase = EMPTY_DETAIL

    def amount(self, value) -> "LineBuilder":
        self._fields["amount"] = value
        return self

    def description(self, text: str) -> "LineBuilder":
        self._fields["description"] = text
        return self

    def line_num(self, number: int) -> "LineBuilder":
        self._fields["line_num"] = number
        return self

    def detail(self, detail: LineDetailBase) -> "LineBuilder":
        """Set the detail payload, replacing any earlier one."""
        self._detail = detail
        return self

    def detail_of(self, detail_type: str, **fields) -> "LineBuilder":
        """Set the detail payload by canonical variant name.

        Raises:
            ValidationError: If the name is not a known variant or a value is malformed
        """
        detail_cls = DETAIL_TYPES.get(detail_type)
        if detail_cls is None:
            raise ValidationError(f"Unknown line detail type: {detail_type}")
        try:
            self._detail = detail_cls(**fields)
        except PydanticValidationError as exc:
            raise ValidationError(f"invalid {detail_type}: {exc}") from exc
        return self

    def sales_item(self, **fields) -> "LineBuilder":
        return self.detail_of("SalesItemLineDetail", **fields)

    def account_expense(self, **fields) -> "LineBuilder":
        return self.detail_of("AccountBasedExpenseLineDetail", **fields)

    def item_expense(self, **fields) -> "LineBuilder":
        return self.detail_of("ItemBasedExpenseLineDetail", **fields)

    def build(self) -> LineItem:
        """Create the line.

        Raises:
            MissingField: If the amount or the detail is unset
            ValidationError: If a value is malformed
        """
        if self._fields.get("amount") is None:
            raise MissingField("amount", "Line")
        if self._detail.is_empty:
            raise MissingField("detail", "Line")
        try:
            return LineItem(detail=self._detail, **self._fields)
        except PydanticValidationError as exc:
            raise ValidationError(f"invalid line: {exc}") from exc


def payment_line(amount, linked_txn: Optional[list] = None) -> PaymentLine:
    """Line of a payment or bill payment applied to the given transactions."""
    try:
        return PaymentLine(amount=amount, linked_txn=linked_txn or [])
    except PydanticValidationError as exc:
        raise ValidationError(f"invalid payment line: {exc}") from exc
