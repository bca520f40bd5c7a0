"""Reference and shared value objects exchanged with QuickBooks Online.

``Reference`` is the platform's ``{"name": ..., "value": ...}`` pointer (also
carrying an optional ``type``). It links one record to another by id and display
name without embedding it.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_pascal

from core.models.values import Money, OptionalText, WireDateTime


# =============================================================================
# Base Model
# =============================================================================

class QBBaseModel(BaseModel):
    """Base model for QuickBooks wire objects (PascalCase keys)."""
    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        extra="ignore",
    )


# =============================================================================
# Reference
# =============================================================================

class Reference(BaseModel):
    """Pointer to another QuickBooks record.

    Attributes:
        kind_type: Canonical kind name of the target (wire ``type``), rarely sent
        display_name: Human-readable name of the target (wire ``name``)
        target_id: Id of the target record (wire ``value``)

    Decode accepts ``Name`` / ``Value`` / ``Type`` as well as the lowercase keys.
    A bare string decodes as a reference carrying only the id.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    kind_type: OptionalText = Field(
        default=None,
        validation_alias=AliasChoices("type", "Type", "kind_type"),
        serialization_alias="type",
    )
    display_name: OptionalText = Field(
        default=None,
        validation_alias=AliasChoices("name", "Name", "display_name"),
        serialization_alias="name",
    )
    target_id: OptionalText = Field(
        default=None,
        validation_alias=AliasChoices("value", "Value", "target_id"),
        serialization_alias="value",
    )

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_id(cls, data):
        if isinstance(data, (str, int)) and not isinstance(data, bool):
            return {"value": str(data)}
        return data

    @classmethod
    def from_value(cls, target_id: str, display_name: Optional[str] = None) -> "Reference":
        """Build a reference from an id (and optional name)."""
        return cls(target_id=target_id, display_name=display_name)

    @property
    def is_empty(self) -> bool:
        return self.target_id is None and self.display_name is None


# =============================================================================
# Status Enums
# =============================================================================

class EmailStatus(str, Enum):
    """Email delivery status of a sales document."""
    NOT_SET = "NotSet"
    NEED_TO_SEND = "NeedToSend"
    EMAIL_SENT = "EmailSent"


class PrintStatus(str, Enum):
    """Print status of a sales document."""
    NOT_SET = "NotSet"
    NEED_TO_PRINT = "NeedToPrint"
    PRINT_COMPLETE = "PrintComplete"


class GlobalTaxCalculation(str, Enum):
    """How tax is applied to document amounts."""
    TAX_EXCLUDED = "TaxExcluded"
    TAX_INCLUSIVE = "TaxInclusive"
    NOT_APPLICABLE = "NotApplicable"


# =============================================================================
# Shared Value Objects
# =============================================================================

class MetaData(QBBaseModel):
    """Creation and last-update timestamps set by the platform (read only)."""
    create_time: Optional[WireDateTime] = None
    last_updated_time: Optional[WireDateTime] = None


class LinkedTxn(QBBaseModel):
    """Link from a line or document to another transaction."""
    txn_id: Optional[str] = None
    txn_type: Optional[str] = None
    txn_line_id: Optional[str] = None


class Email(QBBaseModel):
    address: OptionalText = None

    @property
    def is_empty(self) -> bool:
        return self.address is None


class PhoneNumber(QBBaseModel):
    free_form_number: Optional[str] = None


class WebAddr(QBBaseModel):
    uri: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("URI", "URL", "uri"),
        serialization_alias="URI",
    )


class Addr(QBBaseModel):
    """Postal address."""
    id: Optional[str] = None
    line1: Optional[str] = None
    line2: Optional[str] = None
    line3: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    country_sub_division_code: Optional[str] = None
    postal_code: Optional[str] = None
    lat: Optional[str] = None
    long: Optional[str] = None

    def __str__(self) -> str:
        parts = [self.line1, self.city, self.country_sub_division_code]
        street = ", ".join(p for p in parts if p)
        tail = " ".join(p for p in (self.country, self.postal_code) if p)
        return f"{street}, {tail}" if tail else street


class CustomField(QBBaseModel):
    definition_id: Optional[str] = None
    name: Optional[str] = None
    field_type: Optional[str] = Field(default=None, alias="Type")
    string_value: Optional[str] = None


class MarkupInfo(QBBaseModel):
    percent_based: Optional[bool] = None
    value: Optional[Money] = None
    percent: Optional[Money] = None
    price_level_ref: Optional[Reference] = None


class DeliveryInfo(QBBaseModel):
    delivery_type: Optional[str] = None
    delivery_time: Optional[WireDateTime] = None
