"""Annotated value types for QuickBooks wire payloads.

Amounts are fixed-point ``Decimal`` on the Python side and JSON numbers on the
wire. Dates use ``YYYY-MM-DD``; metadata timestamps are ISO 8601 with an offset.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Optional

from pydantic import PlainSerializer
from pydantic.functional_validators import BeforeValidator
from typing_extensions import Annotated


# =============================================================================
# Value Parsers
# =============================================================================

# Every decimal with at most this many significant digits survives the trip
# through an IEEE double and back to its shortest repr.
AMOUNT_DIGITS = 15


def _check_amount(amount: Decimal) -> Decimal:
    """Reject amounts a JSON number cannot carry exactly."""
    if not amount.is_finite():
        raise ValueError(f"Amount is not a finite number: {amount}")
    if amount.is_zero():
        return amount
    normalized = amount.normalize()
    if (
        len(normalized.as_tuple().digits) > AMOUNT_DIGITS
        or not -AMOUNT_DIGITS <= normalized.adjusted() < AMOUNT_DIGITS
    ):
        raise ValueError(
            f"Amount {amount} exceeds {AMOUNT_DIGITS} significant digits"
        )
    return amount


def _parse_decimal(value):
    """Parse a decimal from wire numbers or numeric strings.

    Amounts are limited to ``AMOUNT_DIGITS`` significant digits within
    a magnitude between 10^-15 and 10^15, which wire floats hold exactly.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"Cannot parse amount from boolean: {value}")
    if isinstance(value, Decimal):
        return _check_amount(value)
    if isinstance(value, (int, float)):
        # str() keeps 0.1 as 0.1 instead of the binary expansion
        return _check_amount(Decimal(str(value)))
    if isinstance(value, str):
        s = value.strip()
        if s == "":
            return None
        try:
            amount = Decimal(s.replace(",", ""))
        except InvalidOperation:
            raise ValueError(f"Cannot parse amount: {value}")
        return _check_amount(amount)
    return value


def _serialize_decimal(value: Optional[Decimal]):
    """Emit integral amounts as ints, everything else as floats."""
    if value is None:
        return None
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def _parse_date(value):
    """Parse a calendar date; the platform sends ``YYYY-MM-DD``."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        s = value.strip()
        if s == "":
            return None
        try:
            return date.fromisoformat(s[:10])
        except ValueError:
            raise ValueError(f"Cannot parse date: {s}")
    return value


def _parse_datetime(value):
    """Parse a metadata timestamp, assuming UTC when no offset is given."""
    if value is None:
        return None
    if isinstance(value, str):
        s = value.strip()
        if s == "":
            return None
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(s)
        except ValueError:
            raise ValueError(f"Cannot parse timestamp: {s}")
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _blank_to_none(value):
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


# Annotated types for automatic parsing
Money = Annotated[
    Optional[Decimal],
    BeforeValidator(_parse_decimal),
    PlainSerializer(_serialize_decimal, when_used="json"),
]
WireDate = Annotated[Optional[date], BeforeValidator(_parse_date)]
WireDateTime = Annotated[Optional[datetime], BeforeValidator(_parse_datetime)]
OptionalText = Annotated[Optional[str], BeforeValidator(_blank_to_none)]


def is_blank(value) -> bool:
    """True for None and whitespace-only strings."""
    return value is None or (isinstance(value, str) and value.strip() == "")


def compact(value, keep=frozenset()):
    """Drop None, empty strings, empty lists and empty dicts, recursively.

    Booleans and zero amounts are kept, as are values under a key in ``keep``
    (their contents are still compacted).
    """
    if isinstance(value, dict):
        out = {}
        for k, v in value.items():
            v = compact(v, keep)
            if k not in keep and (v is None or v == "" or v == [] or v == {}):
                continue
            out[k] = v
        return out
    if isinstance(value, list):
        return [compact(v, keep) for v in value]
    return value
