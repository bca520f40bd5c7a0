"""Core data models - wire value types shared by every resource kind."""

from core.models.values import (
    Money,
    OptionalText,
    WireDate,
    WireDateTime,
    compact,
    is_blank,
)

from core.models.refs import (
    QBBaseModel,
    Reference,

    # Status enums
    EmailStatus,
    PrintStatus,
    GlobalTaxCalculation,

    # Shared value objects
    Addr,
    CustomField,
    DeliveryInfo,
    Email,
    LinkedTxn,
    MarkupInfo,
    MetaData,
    PhoneNumber,
    WebAddr,
)

__all__ = [
    # Values
    "Money",
    "OptionalText",
    "WireDate",
    "WireDateTime",
    "compact",
    "is_blank",

    # References
    "QBBaseModel",
    "Reference",

    # Status enums
    "EmailStatus",
    "PrintStatus",
    "GlobalTaxCalculation",

    # Shared value objects
    "Addr",
    "CustomField",
    "DeliveryInfo",
    "Email",
    "LinkedTxn",
    "MarkupInfo",
    "MetaData",
    "PhoneNumber",
    "WebAddr",
]
