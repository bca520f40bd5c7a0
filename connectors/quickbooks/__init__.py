"""QuickBooks Online resource types.

Record models for every supported kind, the line-item codec, capability
predicates and reference resolution. Importing the package registers all
kinds.

Key Design Principle:
- Nothing here performs I/O; a transport layer calls the predicates before
  issuing the matching request and uses each kind's ``api_id`` in its paths
"""

from connectors.quickbooks.qb_lines import (
    EMPTY_DETAIL,
    AccountBasedExpenseLineDetail,
    BillableStatus,
    DescriptionLineDetail,
    DiscountLineDetail,
    EmptyLineDetail,
    GroupLineDetail,
    ItemBasedExpenseLineDetail,
    LineItem,
    PaymentLine,
    SalesItemLineDetail,
    SubTotalLineDetail,
    TaxLineDetail,
    decode_line,
    decode_lines,
    encode_line,
    encode_lines,
    lines_can_create,
    set_taxable,
)
from connectors.quickbooks.qb_registry import (
    KindDescriptor,
    Operation,
    find_descriptor,
    get_descriptor,
    list_kinds,
    register_kind,
)
from connectors.quickbooks.qb_base import QBEntity
from connectors.quickbooks.qb_capabilities import (
    allowed_operations,
    can_create,
    can_delete,
    can_full_update,
    can_get_pdf,
    can_produce_document,
    can_query,
    can_read,
    can_send,
    can_sparse_update,
    can_void,
    has_read,
    is_allowed,
    supports,
)
from connectors.quickbooks.qb_models import (
    Account,
    Attachable,
    Bill,
    BillPayment,
    Budget,
    CompanyCurrency,
    CompanyInfo,
    CreditMemo,
    Customer,
    Department,
    Employee,
    Estimate,
    Invoice,
    Item,
    ItemType,
    Payment,
    PaymentMethod,
    PayType,
    Preferences,
    QBClass,
    RecurringTransaction,
    SalesReceipt,
    TaxAgency,
    TaxCode,
    TaxRate,
    Term,
    TxnTaxDetail,
    Vendor,
)
from connectors.quickbooks.qb_refs import linked, linked_fields, to_reference
from connectors.quickbooks.qb_builders import LineBuilder, RecordBuilder, payment_line

__all__ = [
    # Lines
    "EMPTY_DETAIL",
    "AccountBasedExpenseLineDetail",
    "BillableStatus",
    "DescriptionLineDetail",
    "DiscountLineDetail",
    "EmptyLineDetail",
    "GroupLineDetail",
    "ItemBasedExpenseLineDetail",
    "LineItem",
    "PaymentLine",
    "SalesItemLineDetail",
    "SubTotalLineDetail",
    "TaxLineDetail",
    "decode_line",
    "decode_lines",
    "encode_line",
    "encode_lines",
    "lines_can_create",
    "set_taxable",

    # Registry
    "KindDescriptor",
    "Operation",
    "find_descriptor",
    "get_descriptor",
    "list_kinds",
    "register_kind",

    # Capabilities
    "allowed_operations",
    "can_create",
    "can_delete",
    "can_full_update",
    "can_get_pdf",
    "can_produce_document",
    "can_query",
    "can_read",
    "can_send",
    "can_sparse_update",
    "can_void",
    "has_read",
    "is_allowed",
    "supports",

    # Records
    "QBEntity",
    "Account",
    "Attachable",
    "Bill",
    "BillPayment",
    "Budget",
    "CompanyCurrency",
    "CompanyInfo",
    "CreditMemo",
    "Customer",
    "Department",
    "Employee",
    "Estimate",
    "Invoice",
    "Item",
    "ItemType",
    "Payment",
    "PaymentMethod",
    "PayType",
    "Preferences",
    "QBClass",
    "RecurringTransaction",
    "SalesReceipt",
    "TaxAgency",
    "TaxCode",
    "TaxRate",
    "Term",
    "TxnTaxDetail",
    "Vendor",

    # References
    "linked",
    "linked_fields",
    "to_reference",

    # Builders
    "LineBuilder",
    "RecordBuilder",
    "payment_line",
]
