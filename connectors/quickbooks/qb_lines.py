"""QuickBooks line items and the line-detail codec.

Every row of a multi-line document (invoice, bill, receipt, ...) carries one
detail payload out of a fixed set of shapes. On the wire the payload sits under
a key named after its variant, next to a redundant ``DetailType`` tag:

    {
        "Amount": 100.0,
        "DetailType": "SalesItemLineDetail",
        "SalesItemLineDetail": {"ItemRef": {"value": "1"}, "Qty": 1}
    }

Encoding always writes both keys. Decoding ignores ``DetailType`` and picks the
variant from whichever known payload key is present. A row without any detail
key decodes to ``EMPTY_DETAIL``; such a row cannot be encoded.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar, Dict, Iterable, Iterator, List, Optional, Type, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializationInfo,
    SerializerFunctionWrapHandler,
    ValidationError as PydanticValidationError,
    model_serializer,
    model_validator,
)

from core.config import get_settings
from core.errors import DecodeError, ValidationError
from core.models.refs import LinkedTxn, MarkupInfo, QBBaseModel, Reference
from core.models.values import Money, WireDate, compact
from core.observability.logging import get_logger

logger = get_logger(__name__)

DETAIL_TYPE_KEY = "DetailType"


class BillableStatus(str, Enum):
    """Whether an expense line can be billed to a customer."""
    BILLABLE = "Billable"
    NOT_BILLABLE = "NotBillable"
    HAS_BEEN_BILLED = "HasBeenBilled"


# =============================================================================
# Line Detail Variants
# =============================================================================

class LineDetailBase(QBBaseModel):
    """Base for line detail payloads. Variants are immutable."""
    model_config = ConfigDict(frozen=True)

    detail_type: ClassVar[str] = ""

    @property
    def is_empty(self) -> bool:
        return False


class EmptyLineDetail(LineDetailBase):
    """No detail set yet. Valid while building a line, never on the wire."""

    @property
    def is_empty(self) -> bool:
        return True


EMPTY_DETAIL = EmptyLineDetail()


class SalesItemLineDetail(LineDetailBase):
    detail_type: ClassVar[str] = "SalesItemLineDetail"

    item_ref: Optional[Reference] = None
    class_ref: Optional[Reference] = None
    tax_code_ref: Optional[Reference] = None
    item_account_ref: Optional[Reference] = None
    price_level_ref: Optional[Reference] = None
    tax_classification_ref: Optional[Reference] = None
    service_date: Optional[WireDate] = None
    qty: Optional[Money] = None
    unit_price: Optional[Money] = None
    discount_amt: Optional[Money] = None
    discount_rate: Optional[Money] = None
    tax_inclusive_amt: Optional[Money] = None
    markup_info: Optional[MarkupInfo] = None


class GroupLineDetail(LineDetailBase):
    """A bundle row; its component rows use the same codec."""
    detail_type: ClassVar[str] = "GroupLineDetail"

    group_item_ref: Optional[Reference] = None
    quantity: Optional[Money] = None
    line: List[LineItem] = Field(default_factory=list)


class DescriptionLineDetail(LineDetailBase):
    """Description-only row."""
    detail_type: ClassVar[str] = "DescriptionLineDetail"

    tax_code_ref: Optional[Reference] = None
    service_date: Optional[WireDate] = None


class DiscountLineDetail(LineDetailBase):
    detail_type: ClassVar[str] = "DiscountLineDetail"

    class_ref: Optional[Reference] = None
    tax_code_ref: Optional[Reference] = None
    discount_account_ref: Optional[Reference] = None
    percent_based: Optional[bool] = None
    discount_percent: Optional[Money] = None


class SubTotalLineDetail(LineDetailBase):
    detail_type: ClassVar[str] = "SubTotalLineDetail"

    item_ref: Optional[Reference] = None


class ItemBasedExpenseLineDetail(LineDetailBase):
    detail_type: ClassVar[str] = "ItemBasedExpenseLineDetail"

    item_ref: Optional[Reference] = None
    customer_ref: Optional[Reference] = None
    price_level_ref: Optional[Reference] = None
    class_ref: Optional[Reference] = None
    tax_code_ref: Optional[Reference] = None
    billable_status: Optional[BillableStatus] = None
    qty: Optional[Money] = None
    unit_price: Optional[Money] = None
    tax_inclusive_amt: Optional[Money] = None
    markup_info: Optional[MarkupInfo] = None


class AccountBasedExpenseLineDetail(LineDetailBase):
    detail_type: ClassVar[str] = "AccountBasedExpenseLineDetail"

    account_ref: Optional[Reference] = None
    tax_code_ref: Optional[Reference] = None
    class_ref: Optional[Reference] = None
    customer_ref: Optional[Reference] = None
    billable_status: Optional[BillableStatus] = None
    tax_amount: Optional[Money] = None
    tax_inclusive_amt: Optional[Money] = None
    markup_info: Optional[MarkupInfo] = None


class TaxLineDetail(LineDetailBase):
    detail_type: ClassVar[str] = "TaxLineDetail"

    tax_rate_ref: Optional[Reference] = None
    percent_based: Optional[bool] = None
    tax_percent: Optional[Money] = None
    net_amount_taxable: Optional[Money] = None
    tax_inclusive_amount: Optional[Money] = None
    override_delta_amount: Optional[Money] = None


LineDetail = Union[
    SalesItemLineDetail,
    GroupLineDetail,
    DescriptionLineDetail,
    DiscountLineDetail,
    SubTotalLineDetail,
    ItemBasedExpenseLineDetail,
    AccountBasedExpenseLineDetail,
    TaxLineDetail,
    EmptyLineDetail,
]

DETAIL_TYPES: Dict[str, Type[LineDetailBase]] = {
    cls.detail_type: cls
    for cls in (
        SalesItemLineDetail,
        GroupLineDetail,
        DescriptionLineDetail,
        DiscountLineDetail,
        SubTotalLineDetail,
        ItemBasedExpenseLineDetail,
        AccountBasedExpenseLineDetail,
        TaxLineDetail,
    )
}

DETAIL_KEYS = frozenset(DETAIL_TYPES)


# =============================================================================
# Line Item
# =============================================================================

class LineItem(QBBaseModel):
    """One row of a multi-line document.

    ``detail`` holds one variant instance (never a plain dict). It is written
    to the wire by the codec, not as a regular field.
    """
    id: Optional[str] = None
    line_num: Optional[int] = None
    amount: Optional[Money] = None
    description: Optional[str] = None
    linked_txn: List[LinkedTxn] = Field(default_factory=list)
    detail: LineDetail = Field(default=EMPTY_DETAIL, exclude=True)

    @model_validator(mode="before")
    @classmethod
    def _select_detail(cls, data):
        if isinstance(data, dict) and "detail" not in data:
            return _split_detail(data)
        return data

    @model_serializer(mode="wrap")
    def _serialize_detail(
        self,
        handler: SerializerFunctionWrapHandler,
        info: SerializationInfo,
    ):
        data = handler(self)
        if not self.detail.is_empty:
            name = self.detail.detail_type
            data[name] = self.detail.model_dump(
                mode=info.mode,
                by_alias=info.by_alias,
                exclude_none=info.exclude_none,
            )
            data[DETAIL_TYPE_KEY] = name
        return data

    @property
    def detail_type(self) -> Optional[str]:
        """Canonical variant name, or None for an empty detail."""
        return None if self.detail.is_empty else self.detail.detail_type

    def can_create(self) -> bool:
        """An amount and a concrete detail are required to send a line."""
        return self.amount is not None and not self.detail.is_empty


class PaymentLine(QBBaseModel):
    """Row of a payment or bill payment: an amount applied to linked transactions.

    Payment rows carry no detail payload and are encoded as plain objects.
    """
    amount: Optional[Money] = None
    linked_txn: List[LinkedTxn] = Field(default_factory=list)

    def can_create(self) -> bool:
        return self.amount is not None


GroupLineDetail.model_rebuild()


# =============================================================================
# Decoding
# =============================================================================

def as_decode_error(exc: PydanticValidationError, what: str, payload=None) -> DecodeError:
    """Pull a DecodeError back out of a pydantic error, or wrap the error."""
    for err in exc.errors():
        original = (err.get("ctx") or {}).get("error")
        if isinstance(original, DecodeError):
            return original
    return DecodeError(f"Malformed {what}: {exc}", payload=payload)


def _split_detail(data: dict) -> dict:
    """Replace the wire detail key of a row with a ``detail`` variant instance."""
    found = [key for key in data if key in DETAIL_TYPES]
    if len(found) > 1:
        raise DecodeError(
            f"Ambiguous line detail, found {', '.join(sorted(found))}",
            payload=data,
        )

    data = dict(data)
    data.pop(DETAIL_TYPE_KEY, None)

    if found:
        key = found[0]
        payload = data.pop(key)
        if payload is None:
            data["detail"] = EMPTY_DETAIL
            return data
        if not isinstance(payload, (dict, LineDetailBase)):
            raise DecodeError(
                f"{key} must be an object, got {type(payload).__name__}",
                payload=data,
            )
        try:
            data["detail"] = DETAIL_TYPES[key].model_validate(payload)
        except PydanticValidationError as exc:
            raise as_decode_error(exc, key) from exc
        return data

    unknown = sorted(key for key in data if key.endswith("Detail"))
    if unknown:
        if get_settings().unknown_detail_policy == "fail":
            raise DecodeError(
                f"Unknown line detail: {', '.join(unknown)}",
                payload=data,
            )
        logger.warning(
            "Unknown line detail treated as empty",
            extra_fields={"detail_keys": unknown},
        )
        for key in unknown:
            data.pop(key)

    data["detail"] = EMPTY_DETAIL
    return data


def decode_line(data: dict) -> LineItem:
    """Decode one wire row.

    Args:
        data: Wire object for the row

    Returns:
        LineItem with its detail variant selected

    Raises:
        DecodeError: Not an object, ambiguous detail keys, unknown detail key
            (under the "fail" policy) or a malformed payload
    """
    if not isinstance(data, dict):
        raise DecodeError(f"Line must be an object, got {type(data).__name__}")
    try:
        return LineItem.model_validate(data)
    except PydanticValidationError as exc:
        error = as_decode_error(exc, "line", payload=data)
        logger.debug("Line decode failed", extra_fields={"error": error.message})
        raise error from exc


def decode_lines(data: Optional[Iterable[dict]]) -> List[LineItem]:
    """Decode a wire ``Line`` array; a missing array is an empty list."""
    if data is None:
        return []
    if not isinstance(data, list):
        raise DecodeError(f"Line collection must be an array, got {type(data).__name__}")
    return [decode_line(item) for item in data]


# =============================================================================
# Encoding
# =============================================================================

def ensure_encodable(line: LineItem, path: str = "Line") -> None:
    """Reject lines (including group components) that still have no detail.

    Raises:
        ValidationError: If any line has an empty detail
    """
    if line.detail.is_empty:
        raise ValidationError(f"{path} has no line detail and cannot be encoded")
    if isinstance(line.detail, GroupLineDetail):
        for i, child in enumerate(line.detail.line):
            ensure_encodable(child, f"{path}.GroupLineDetail.Line[{i}]")


def encode_line(line: LineItem) -> dict:
    """Encode one row with its detail payload and ``DetailType`` tag.

    Raises:
        ValidationError: If the line (or a group component) has no detail
    """
    ensure_encodable(line)
    data = line.model_dump(mode="json", by_alias=True, exclude_none=True)
    return compact(data, keep=DETAIL_KEYS)


def encode_lines(lines: Iterable[LineItem]) -> List[dict]:
    return [encode_line(line) for line in lines]


def iter_line_items(value) -> Iterator[LineItem]:
    """Yield every top-level LineItem held anywhere inside a model."""
    if isinstance(value, LineItem):
        yield value
    elif isinstance(value, BaseModel):
        for name in type(value).model_fields:
            yield from iter_line_items(getattr(value, name))
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from iter_line_items(item)


# =============================================================================
# Create Preconditions
# =============================================================================

def lines_can_create(lines: Optional[List[Union[LineItem, PaymentLine]]]) -> bool:
    """At least one line, and every line ready to be sent."""
    if not lines:
        return False
    return all(line.can_create() for line in lines)


# =============================================================================
# Taxable Marker
# =============================================================================

def set_taxable(
    target: Union[LineItem, List[LineItem], None],
    tax_code: Optional[str] = None,
) -> None:
    """Force the tax code of every sales-item row to the taxable marker.

    Mutates the given line(s) in place, descending into group rows. Rows of
    other variants are left alone.

    Args:
        target: A line, a list of lines, or None (no-op)
        tax_code: Tax code id to set; defaults to settings.taxable_tax_code
    """
    if target is None:
        return
    lines = [target] if isinstance(target, LineItem) else target
    code = Reference(target_id=tax_code or get_settings().taxable_tax_code)

    for line in lines:
        detail = line.detail
        if isinstance(detail, SalesItemLineDetail):
            line.detail = detail.model_copy(update={"tax_code_ref": code})
        elif isinstance(detail, GroupLineDetail):
            set_taxable(detail.line, tax_code)
