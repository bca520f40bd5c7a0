"""QuickBooks Online resource kinds.

Maps to: https://developer.intuit.com/app/developer/qbo/docs/api/accounting

Every class here is a registered kind: its decorator declares the operations
the platform supports for it and any rule that differs from the shared
defaults in qb_capabilities.py. All fields are optional so a record can be
built up field by field or decoded from a partial payload.
"""

from enum import Enum
from typing import List, Optional

from pydantic import Field

from connectors.quickbooks.qb_base import QBEntity
from connectors.quickbooks.qb_capabilities import (
    any_set,
    document_can_create,
    emailed_document_full_update,
    has_read,
    is_set,
    lines_can_create,
    person_can_create,
    ref_is_set,
)
from connectors.quickbooks.qb_lines import LineItem, PaymentLine
from connectors.quickbooks.qb_registry import Operation, register_kind
from core.errors import ValidationError
from core.models.refs import (
    Addr,
    CustomField,
    DeliveryInfo,
    Email,
    EmailStatus,
    GlobalTaxCalculation,
    LinkedTxn,
    PhoneNumber,
    PrintStatus,
    QBBaseModel,
    Reference,
    WebAddr,
)
from core.models.values import Money, WireDate, WireDateTime

C = Operation.CREATE
R = Operation.READ
Q = Operation.QUERY
F = Operation.FULL_UPDATE
S = Operation.SPARSE_UPDATE
D = Operation.DELETE
V = Operation.VOID
SEND = Operation.SEND
PDF = Operation.PDF


def _wire(key: str):
    """Optional field whose wire key does not follow PascalCase."""
    return Field(default=None, alias=key)


# =============================================================================
# Enums
# =============================================================================

class ItemType(str, Enum):
    INVENTORY = "Inventory"
    SERVICE = "Service"
    NON_INVENTORY = "NonInventory"
    CATEGORY = "Category"
    GROUP = "Group"


class PayType(str, Enum):
    CHECK = "Check"
    CREDIT_CARD = "CreditCard"


class PaymentMethodType(str, Enum):
    CREDIT_CARD = "CREDIT_CARD"
    NON_CREDIT_CARD = "NON_CREDIT_CARD"


class TermType(str, Enum):
    STANDARD = "STANDARD"
    DATE_DRIVEN = "DATE_DRIVEN"


class RecurType(str, Enum):
    AUTOMATED = "Automated"
    REMINDED = "Reminded"
    UNSCHEDULED = "UnScheduled"


class IntervalType(str, Enum):
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    YEARLY = "Yearly"


# =============================================================================
# Shared Nested Objects
# =============================================================================

class TxnTaxDetail(QBBaseModel):
    """Document-level tax summary; its tax lines use the line codec."""
    txn_tax_code_ref: Optional[Reference] = None
    total_tax: Optional[Money] = None
    tax_line: List[LineItem] = Field(default_factory=list)


class CreditChargeInfo(QBBaseModel):
    name_on_acct: Optional[str] = None
    cc_expiry_month: Optional[int] = _wire("CCExpiryMonth")
    cc_expiry_year: Optional[int] = _wire("CCExpiryYear")
    bill_addr_street: Optional[str] = None
    postal_code: Optional[str] = None
    amount: Optional[Money] = None
    process_payment: Optional[bool] = None


class CreditChargeResponse(QBBaseModel):
    status: Optional[str] = None
    auth_code: Optional[str] = None
    txn_authorization_time: Optional[WireDateTime] = None
    cc_trans_id: Optional[str] = _wire("CCTransId")


class CreditCardPayment(QBBaseModel):
    credit_charge_info: Optional[CreditChargeInfo] = None
    credit_charge_response: Optional[CreditChargeResponse] = None


class CheckBillPayment(QBBaseModel):
    bank_account_ref: Optional[Reference] = None
    print_status: Optional[PrintStatus] = None


class CreditCardBillPayment(QBBaseModel):
    cc_account_ref: Optional[Reference] = _wire("CCAccountRef")


# =============================================================================
# Catalog Kinds
# =============================================================================

def _account_can_create(e) -> bool:
    return is_set(e.name) and any_set(e, ("account_type", "account_sub_type"))


def _account_full_update(e) -> bool:
    return has_read(e) and is_set(e.name)


@register_kind(
    "Account",
    operations=(C, R, Q, F),
    naming_fields=("fully_qualified_name", "name"),
    links={"Account": "parent_ref"},
    create=_account_can_create,
    full_update=_account_full_update,
)
class Account(QBEntity):
    """Chart of accounts entry."""
    name: Optional[str] = None
    acct_num: Optional[str] = None
    description: Optional[str] = None
    active: Optional[bool] = None
    sub_account: Optional[bool] = None
    parent_ref: Optional[Reference] = None
    fully_qualified_name: Optional[str] = None
    classification: Optional[str] = None
    account_type: Optional[str] = None
    account_sub_type: Optional[str] = None
    account_alias: Optional[str] = None
    txn_location_type: Optional[str] = None
    currency_ref: Optional[Reference] = None
    tax_code_ref: Optional[Reference] = None
    current_balance: Optional[Money] = None
    current_balance_with_sub_accounts: Optional[Money] = None
    domain: Optional[str] = _wire("domain")
    sparse: Optional[bool] = _wire("sparse")


def _sub_node_can_create(flag_field: str):
    def rule(e) -> bool:
        return is_set(e.name) and (not getattr(e, flag_field) or ref_is_set(e.parent_ref))
    return rule


def _sub_node_validate(flag_field: str):
    def validate(e) -> None:
        if getattr(e, flag_field) and not ref_is_set(e.parent_ref):
            raise ValidationError(f"{flag_field} is set but parent_ref is missing")
    return validate


@register_kind(
    "Class",
    operations=(C, R, Q, F),
    naming_fields=("fully_qualified_name", "name"),
    links={"Class": "parent_ref"},
    required_fields=("name",),
    validate=_sub_node_validate("sub_class"),
    create=_sub_node_can_create("sub_class"),
)
class QBClass(QBEntity):
    """Classification used to segment transactions (wire kind ``Class``)."""
    name: Optional[str] = None
    sub_class: Optional[bool] = None
    parent_ref: Optional[Reference] = None
    fully_qualified_name: Optional[str] = None
    active: Optional[bool] = None


@register_kind(
    "Department",
    operations=(C, R, Q, F),
    naming_fields=("fully_qualified_name", "name"),
    links={"Department": "parent_ref"},
    required_fields=("name",),
    validate=_sub_node_validate("sub_department"),
    create=_sub_node_can_create("sub_department"),
)
class Department(QBEntity):
    """Location or business unit."""
    name: Optional[str] = None
    sub_department: Optional[bool] = None
    parent_ref: Optional[Reference] = None
    fully_qualified_name: Optional[str] = None
    active: Optional[bool] = None


def _item_can_create(e) -> bool:
    if not is_set(e.name):
        return False
    item_type = e.item_type or ItemType.NON_INVENTORY
    if item_type == ItemType.INVENTORY:
        return (
            ref_is_set(e.income_account_ref)
            and ref_is_set(e.expense_account_ref)
            and ref_is_set(e.asset_account_ref)
            and e.inv_start_date is not None
            and e.qty_on_hand is not None
        )
    if item_type == ItemType.SERVICE:
        return ref_is_set(e.income_account_ref)
    if item_type == ItemType.NON_INVENTORY:
        return ref_is_set(e.income_account_ref) or ref_is_set(e.expense_account_ref)
    return True


def _item_full_update(e) -> bool:
    return has_read(e) and is_set(e.name)


@register_kind(
    "Item",
    operations=(C, R, Q, F),
    naming_fields=("fully_qualified_name", "name"),
    links={
        "Item": "parent_ref",
        "Vendor": "pref_vendor_ref",
        "Class": "class_ref",
        "Account": "income_account_ref",
    },
    required_fields=("name",),
    create=_item_can_create,
    full_update=_item_full_update,
)
class Item(QBEntity):
    """Product or service sold or purchased."""
    name: Optional[str] = None
    sku: Optional[str] = None
    description: Optional[str] = None
    purchase_desc: Optional[str] = None
    active: Optional[bool] = None
    item_type: Optional[ItemType] = _wire("Type")
    item_category_type: Optional[str] = None
    sub_item: Optional[bool] = None
    parent_ref: Optional[Reference] = None
    level: Optional[int] = None
    fully_qualified_name: Optional[str] = None
    income_account_ref: Optional[Reference] = None
    expense_account_ref: Optional[Reference] = None
    asset_account_ref: Optional[Reference] = None
    pref_vendor_ref: Optional[Reference] = None
    class_ref: Optional[Reference] = None
    sales_tax_code_ref: Optional[Reference] = None
    purchase_tax_code_ref: Optional[Reference] = None
    tax_classification_ref: Optional[Reference] = None
    sales_tax_included: Optional[bool] = None
    purchase_tax_included: Optional[bool] = None
    taxable: Optional[bool] = None
    track_qty_on_hand: Optional[bool] = None
    qty_on_hand: Optional[Money] = None
    reorder_point: Optional[Money] = None
    inv_start_date: Optional[WireDate] = None
    unit_price: Optional[Money] = None
    purchase_cost: Optional[Money] = None
    source: Optional[str] = None
    domain: Optional[str] = _wire("domain")
    sparse: Optional[bool] = _wire("sparse")


@register_kind(
    "PaymentMethod",
    operations=(C, R, Q, F),
    naming_fields=("name",),
    required_fields=("name",),
    create=lambda e: is_set(e.name),
)
class PaymentMethod(QBEntity):
    name: Optional[str] = None
    active: Optional[bool] = None
    payment_type: Optional[PaymentMethodType] = _wire("Type")


def _term_can_create(e) -> bool:
    return is_set(e.name) and (e.due_days is not None or e.day_of_month_due is not None)


@register_kind(
    "Term",
    operations=(C, R, Q, F),
    naming_fields=("name",),
    required_fields=("name",),
    create=_term_can_create,
)
class Term(QBEntity):
    """Payment terms, either a fixed number of days or a day of the month."""
    name: Optional[str] = None
    active: Optional[bool] = None
    term_type: Optional[TermType] = _wire("Type")
    due_days: Optional[int] = None
    day_of_month_due: Optional[int] = None
    due_next_month_days: Optional[int] = None
    discount_percent: Optional[Money] = None
    discount_days: Optional[int] = None
    discount_day_of_month: Optional[int] = None


@register_kind(
    "CompanyCurrency",
    operations=(C, R, Q, F),
    naming_fields=("name",),
    required_fields=("code",),
    create=lambda e: is_set(e.code),
)
class CompanyCurrency(QBEntity):
    """A currency enabled for the company (multicurrency)."""
    code: Optional[str] = None
    name: Optional[str] = None
    active: Optional[bool] = None
    custom_field: List[CustomField] = Field(default_factory=list)


# =============================================================================
# Tax Kinds
# =============================================================================

@register_kind(
    "TaxAgency",
    operations=(C, R, Q),
    naming_fields=("display_name",),
    required_fields=("display_name",),
    create=lambda e: is_set(e.display_name),
)
class TaxAgency(QBEntity):
    display_name: Optional[str] = None
    tax_tracked_on_sales: Optional[bool] = None
    tax_tracked_on_purchases: Optional[bool] = None
    tax_registration_number: Optional[str] = None
    last_file_date: Optional[WireDate] = None
    tax_agency_config: Optional[str] = None


class TaxRateDetail(QBBaseModel):
    tax_rate_ref: Optional[Reference] = None
    tax_type_applicable: Optional[str] = None
    tax_order: Optional[int] = None


class TaxRateList(QBBaseModel):
    tax_rate_detail: List[TaxRateDetail] = Field(default_factory=list)


@register_kind("TaxCode", operations=(R, Q), naming_fields=("name",))
class TaxCode(QBEntity):
    """Tax code; read only through the accounting API."""
    name: Optional[str] = None
    description: Optional[str] = None
    active: Optional[bool] = None
    hidden: Optional[bool] = None
    taxable: Optional[bool] = None
    tax_group: Optional[bool] = None
    sales_tax_rate_list: Optional[TaxRateList] = None
    purchase_tax_rate_list: Optional[TaxRateList] = None
    tax_code_config_type: Optional[str] = None


class EffectiveTaxRate(QBBaseModel):
    rate_value: Optional[Money] = None
    effective_date: Optional[WireDateTime] = None
    end_date: Optional[WireDateTime] = None


@register_kind(
    "TaxRate",
    operations=(R, Q),
    naming_fields=("name",),
    links={"TaxAgency": "agency_ref"},
)
class TaxRate(QBEntity):
    """Tax rate; read only through the accounting API."""
    name: Optional[str] = None
    description: Optional[str] = None
    active: Optional[bool] = None
    rate_value: Optional[Money] = None
    agency_ref: Optional[Reference] = None
    tax_return_line_ref: Optional[Reference] = None
    display_type: Optional[str] = None
    special_tax_type: Optional[str] = None
    effective_tax_rate: List[EffectiveTaxRate] = Field(default_factory=list)


# =============================================================================
# Company
# =============================================================================

def _company_info_full_update(e) -> bool:
    return has_read(e) and is_set(e.company_name) and e.company_addr is not None


@register_kind(
    "CompanyInfo",
    operations=(R, Q, F, S),
    naming_fields=("company_name",),
    full_update=_company_info_full_update,
)
class CompanyInfo(QBEntity):
    """Settings of the connected company; exists once per realm."""
    company_name: Optional[str] = None
    legal_name: Optional[str] = None
    company_addr: Optional[Addr] = None
    customer_communication_addr: Optional[Addr] = None
    legal_addr: Optional[Addr] = None
    company_start_date: Optional[WireDate] = None
    country: Optional[str] = None
    email: Optional[Email] = None
    primary_phone: Optional[PhoneNumber] = None
    web_addr: Optional[WebAddr] = None
    fiscal_year_start_month: Optional[str] = None
    supported_languages: Optional[str] = None
    name_value: List[Reference] = Field(default_factory=list)
    domain: Optional[str] = _wire("domain")
    sparse: Optional[bool] = _wire("sparse")


class EmailMessageType(QBBaseModel):
    subject: Optional[str] = None
    message: Optional[str] = None


class EmailMessagePrefs(QBBaseModel):
    invoice_message: Optional[EmailMessageType] = None
    estimate_message: Optional[EmailMessageType] = None
    sales_receipt_message: Optional[EmailMessageType] = None
    statement_message: Optional[EmailMessageType] = None


class ProductAndServicesPrefs(QBBaseModel):
    quantity_with_price_and_rate: Optional[bool] = None
    for_purchase: Optional[bool] = None
    quantity_on_hand: Optional[bool] = None
    for_sales: Optional[bool] = None


class ReportPrefs(QBBaseModel):
    report_basis: Optional[str] = None
    calc_aging_report_from_txn_date: Optional[bool] = None


class AccountingInfoPrefs(QBBaseModel):
    first_month_of_fiscal_year: Optional[str] = None
    use_account_numbers: Optional[bool] = None
    tax_year_month: Optional[str] = None
    class_tracking_per_txn: Optional[bool] = None
    track_departments: Optional[bool] = None
    tax_form: Optional[str] = None
    customer_terminology: Optional[str] = None
    book_close_date: Optional[WireDate] = None
    department_terminology: Optional[str] = None
    class_tracking_per_txn_line: Optional[bool] = None


class SalesFormsPrefs(QBBaseModel):
    sales_email_bcc: Optional[Email] = None
    sales_email_cc: Optional[Email] = None
    using_progress_invoicing: Optional[bool] = None
    custom_field: List[CustomField] = Field(default_factory=list)
    allow_service_date: Optional[bool] = None
    estimate_message: Optional[str] = None
    email_copy_to_company: Optional[bool] = None
    default_customer_message: Optional[str] = None
    allow_shipping: Optional[bool] = None
    default_discount_account: Optional[bool] = None
    ipn_support_enabled: Optional[bool] = _wire("IPNSupportEnabled")
    e_transaction_payment_enabled: Optional[bool] = None
    default_terms: Optional[Reference] = None
    allow_deposit: Optional[bool] = None
    using_price_levels: Optional[bool] = None
    default_shipping_account: Optional[bool] = None
    e_transaction_attach_pdf: Optional[bool] = _wire("ETransactionAttachPDF")
    custom_txn_numbers: Optional[bool] = None
    e_transaction_enabled_status: Optional[str] = None
    allow_estimates: Optional[bool] = None
    allow_discount: Optional[bool] = None
    auto_apply_credit: Optional[bool] = None


class VendorAndPurchasesPrefs(QBBaseModel):
    po_custom_field: List[CustomField] = Field(default_factory=list, alias="POCustomField")
    default_markup_account: Optional[Reference] = None
    tracking_by_customer: Optional[bool] = None
    default_terms: Optional[Reference] = None
    billable_expense_tracking: Optional[bool] = None
    default_markup: Optional[Money] = None
    tpar_enabled: Optional[bool] = _wire("TPAREnabled")


class TaxPrefs(QBBaseModel):
    partner_tax_enabled: Optional[bool] = None
    tax_group_code_ref: Optional[str] = None
    using_sales_tax: Optional[bool] = None


class OtherPrefs(QBBaseModel):
    name_value: List[Reference] = Field(default_factory=list)


class TimeTrackingPrefs(QBBaseModel):
    work_week_start_date: Optional[str] = None
    mark_time_entries_billable: Optional[bool] = None
    show_bill_rate_to_all: Optional[bool] = None
    use_services: Optional[bool] = None
    bill_customers: Optional[bool] = None


class CurrencyPrefs(QBBaseModel):
    home_currency: Optional[Reference] = None
    multi_currency_enabled: Optional[bool] = None


@register_kind(
    "Preferences",
    operations=(R, Q, F),
    links={
        "Term": "sales_forms_prefs.default_terms",
        "Account": "vendor_and_purchases_prefs.default_markup_account",
        "CompanyCurrency": "currency_prefs.home_currency",
    },
    full_update=has_read,
)
class Preferences(QBEntity):
    """Company preferences; exists once per realm and has no name."""
    email_message_prefs: Optional[EmailMessagePrefs] = None
    product_and_services_prefs: Optional[ProductAndServicesPrefs] = None
    report_prefs: Optional[ReportPrefs] = None
    accounting_info_prefs: Optional[AccountingInfoPrefs] = None
    sales_forms_prefs: Optional[SalesFormsPrefs] = None
    vendor_and_purchases_prefs: Optional[VendorAndPurchasesPrefs] = None
    tax_prefs: Optional[TaxPrefs] = None
    other_prefs: Optional[OtherPrefs] = None
    time_tracking_prefs: Optional[TimeTrackingPrefs] = None
    currency_prefs: Optional[CurrencyPrefs] = None


# =============================================================================
# People
# =============================================================================

class PersonEntity(QBEntity):
    """Name and contact fields shared by customers, vendors and employees."""
    title: Optional[str] = None
    given_name: Optional[str] = None
    middle_name: Optional[str] = None
    family_name: Optional[str] = None
    suffix: Optional[str] = None
    display_name: Optional[str] = None
    print_on_check_name: Optional[str] = None
    primary_email_addr: Optional[Email] = None
    primary_phone: Optional[PhoneNumber] = None
    alternate_phone: Optional[PhoneNumber] = None
    mobile: Optional[PhoneNumber] = None
    fax: Optional[PhoneNumber] = None
    active: Optional[bool] = None


@register_kind(
    "Customer",
    operations=(C, R, Q, F, S),
    naming_fields=("display_name",),
    links={
        "Customer": "parent_ref",
        "Term": "sales_term_ref",
        "PaymentMethod": "payment_method_ref",
        "Account": "ar_account_ref",
    },
    create=person_can_create,
)
class Customer(PersonEntity):
    company_name: Optional[str] = None
    fully_qualified_name: Optional[str] = None
    notes: Optional[str] = None
    web_addr: Optional[WebAddr] = None
    bill_addr: Optional[Addr] = None
    ship_addr: Optional[Addr] = None
    parent_ref: Optional[Reference] = None
    job: Optional[bool] = None
    is_project: Optional[bool] = None
    bill_with_parent: Optional[bool] = None
    level: Optional[int] = None
    taxable: Optional[bool] = None
    resale_num: Optional[str] = None
    secondary_tax_identifier: Optional[str] = None
    tax_exemption_reason_id: Optional[int] = None
    default_tax_code_ref: Optional[Reference] = None
    ar_account_ref: Optional[Reference] = _wire("ARAccountRef")
    sales_term_ref: Optional[Reference] = None
    payment_method_ref: Optional[Reference] = None
    currency_ref: Optional[Reference] = None
    preferred_delivery_method: Optional[str] = None
    balance: Optional[Money] = None
    balance_with_jobs: Optional[Money] = None
    open_balance_date: Optional[WireDate] = None
    source: Optional[str] = None
    domain: Optional[str] = _wire("domain")
    sparse: Optional[bool] = _wire("sparse")


class VendorPaymentBankDetail(QBBaseModel):
    bank_account_name: Optional[str] = None
    bank_branch_identifier: Optional[str] = None
    bank_account_number: Optional[str] = None
    statement_text: Optional[str] = None


@register_kind(
    "Vendor",
    operations=(C, R, Q, F),
    naming_fields=("display_name",),
    links={"Term": "term_ref", "Account": "ap_account_ref"},
    create=person_can_create,
)
class Vendor(PersonEntity):
    company_name: Optional[str] = None
    web_addr: Optional[WebAddr] = None
    bill_addr: Optional[Addr] = None
    acct_num: Optional[str] = None
    tax_identifier: Optional[str] = None
    business_number: Optional[str] = None
    gstin: Optional[str] = _wire("GSTIN")
    gst_registration_type: Optional[str] = _wire("GSTRegistrationType")
    t4a_eligible: Optional[bool] = _wire("T4AEligible")
    t5018_eligible: Optional[bool] = _wire("T5018Eligible")
    has_tpar: Optional[bool] = _wire("HasTPAR")
    vendor_1099: Optional[bool] = _wire("Vendor1099")
    tax_reporting_basis: Optional[str] = None
    ap_account_ref: Optional[Reference] = _wire("APAccountRef")
    term_ref: Optional[Reference] = None
    currency_ref: Optional[Reference] = None
    vendor_payment_bank_detail: Optional[VendorPaymentBankDetail] = None
    cost_rate: Optional[Money] = None
    bill_rate: Optional[Money] = None
    balance: Optional[Money] = None
    source: Optional[str] = None


@register_kind(
    "Employee",
    operations=(C, R, Q, F),
    naming_fields=("display_name",),
    create=person_can_create,
)
class Employee(PersonEntity):
    primary_addr: Optional[Addr] = None
    employee_number: Optional[str] = None
    ssn: Optional[str] = _wire("SSN")
    gender: Optional[str] = None
    birth_date: Optional[WireDate] = None
    hired_date: Optional[WireDate] = None
    released_date: Optional[WireDate] = None
    billable_time: Optional[bool] = None
    organization: Optional[bool] = None
    cost_rate: Optional[Money] = None
    bill_rate: Optional[Money] = None
    v4id_pseudonym: Optional[str] = _wire("V4IDPseudonym")


# =============================================================================
# Sales Documents
# =============================================================================

class SalesDocument(QBEntity):
    """Fields shared by invoices, estimates, sales receipts and credit memos."""
    doc_number: Optional[str] = None
    txn_date: Optional[WireDate] = None
    customer_ref: Optional[Reference] = None
    currency_ref: Optional[Reference] = None
    exchange_rate: Optional[Money] = None
    line: List[LineItem] = Field(default_factory=list)
    txn_tax_detail: Optional[TxnTaxDetail] = None
    global_tax_calculation: Optional[GlobalTaxCalculation] = None
    apply_tax_after_discount: Optional[bool] = None
    total_amt: Optional[Money] = None
    home_total_amt: Optional[Money] = None
    private_note: Optional[str] = None
    customer_memo: Optional[Reference] = None
    bill_email: Optional[Email] = None
    email_status: Optional[EmailStatus] = None
    print_status: Optional[PrintStatus] = None
    bill_addr: Optional[Addr] = None
    ship_addr: Optional[Addr] = None
    ship_from_addr: Optional[Addr] = None
    free_form_address: Optional[bool] = None
    class_ref: Optional[Reference] = None
    department_ref: Optional[Reference] = None
    sales_term_ref: Optional[Reference] = None
    project_ref: Optional[Reference] = None
    recur_data_ref: Optional[Reference] = None
    tax_exemption_ref: Optional[Reference] = None
    custom_field: List[CustomField] = Field(default_factory=list)
    linked_txn: List[LinkedTxn] = Field(default_factory=list)
    domain: Optional[str] = _wire("domain")
    sparse: Optional[bool] = _wire("sparse")


_SALES_LINKS = {
    "Customer": "customer_ref",
    "Class": "class_ref",
    "Department": "department_ref",
    "Term": "sales_term_ref",
}


@register_kind(
    "Invoice",
    operations=(C, R, Q, D, V, F, S, SEND, PDF),
    naming_fields=("doc_number",),
    links={**_SALES_LINKS, "Account": "deposit_to_account_ref"},
    create=document_can_create("customer_ref"),
    full_update=emailed_document_full_update,
)
class Invoice(SalesDocument):
    due_date: Optional[WireDate] = None
    ship_date: Optional[WireDate] = None
    ship_method_ref: Optional[Reference] = None
    tracking_num: Optional[str] = None
    balance: Optional[Money] = None
    home_balance: Optional[Money] = None
    deposit: Optional[Money] = None
    deposit_to_account_ref: Optional[Reference] = None
    allow_online_ach_payment: Optional[bool] = _wire("AllowOnlineACHPayment")
    allow_online_credit_card_payment: Optional[bool] = None
    bill_email_cc: Optional[Email] = None
    bill_email_bcc: Optional[Email] = None
    delivery_info: Optional[DeliveryInfo] = None
    invoice_link: Optional[str] = None
    txn_source: Optional[str] = None


@register_kind(
    "Estimate",
    operations=(C, R, Q, D, F, S, SEND, PDF),
    naming_fields=("doc_number",),
    links=dict(_SALES_LINKS),
    create=document_can_create("customer_ref"),
    full_update=emailed_document_full_update,
)
class Estimate(SalesDocument):
    txn_status: Optional[str] = None
    accepted_by: Optional[str] = None
    accepted_date: Optional[WireDate] = None
    expiration_date: Optional[WireDate] = None
    due_date: Optional[WireDate] = None
    ship_date: Optional[WireDate] = None
    ship_method_ref: Optional[Reference] = None


@register_kind(
    "SalesReceipt",
    operations=(C, R, Q, D, V, F, S, SEND, PDF),
    naming_fields=("doc_number",),
    links={
        **_SALES_LINKS,
        "PaymentMethod": "payment_method_ref",
        "Account": "deposit_to_account_ref",
    },
    create=document_can_create("customer_ref"),
    full_update=emailed_document_full_update,
)
class SalesReceipt(SalesDocument):
    payment_method_ref: Optional[Reference] = None
    payment_ref_num: Optional[str] = None
    deposit_to_account_ref: Optional[Reference] = None
    credit_card_payment: Optional[CreditCardPayment] = None
    ship_date: Optional[WireDate] = None
    ship_method_ref: Optional[Reference] = None
    tracking_num: Optional[str] = None
    balance: Optional[Money] = None
    home_balance: Optional[Money] = None
    delivery_info: Optional[DeliveryInfo] = None
    txn_source: Optional[str] = None


@register_kind(
    "CreditMemo",
    operations=(C, R, Q, D, F, SEND, PDF),
    naming_fields=("doc_number",),
    links={**_SALES_LINKS, "PaymentMethod": "payment_method_ref"},
    create=document_can_create("customer_ref"),
    full_update=emailed_document_full_update,
)
class CreditMemo(SalesDocument):
    payment_method_ref: Optional[Reference] = None
    balance: Optional[Money] = None
    home_balance: Optional[Money] = None
    remaining_credit: Optional[Money] = None


# =============================================================================
# Payments and Bills
# =============================================================================

@register_kind(
    "Payment",
    operations=(C, R, Q, D, V, F, SEND, PDF),
    naming_fields=("payment_ref_num",),
    links={
        "Customer": "customer_ref",
        "PaymentMethod": "payment_method_ref",
        "Account": "deposit_to_account_ref",
    },
    create=lambda e: e.total_amt is not None and ref_is_set(e.customer_ref),
)
class Payment(QBEntity):
    """Customer payment applied to invoices or credit memos."""
    customer_ref: Optional[Reference] = None
    total_amt: Optional[Money] = None
    unapplied_amt: Optional[Money] = None
    txn_date: Optional[WireDate] = None
    payment_ref_num: Optional[str] = None
    payment_method_ref: Optional[Reference] = None
    deposit_to_account_ref: Optional[Reference] = None
    ar_account_ref: Optional[Reference] = _wire("ARAccountRef")
    currency_ref: Optional[Reference] = None
    exchange_rate: Optional[Money] = None
    line: List[PaymentLine] = Field(default_factory=list)
    credit_card_payment: Optional[CreditCardPayment] = None
    private_note: Optional[str] = None
    txn_source: Optional[str] = None
    transaction_location_type: Optional[str] = None
    tax_exemption_ref: Optional[Reference] = None


@register_kind(
    "Bill",
    operations=(C, R, Q, D, F),
    naming_fields=("doc_number",),
    links={
        "Vendor": "vendor_ref",
        "Account": "ap_account_ref",
        "Term": "sales_term_ref",
        "Department": "department_ref",
    },
    create=document_can_create("vendor_ref"),
)
class Bill(QBEntity):
    """Payable owed to a vendor."""
    vendor_ref: Optional[Reference] = None
    ap_account_ref: Optional[Reference] = _wire("APAccountRef")
    doc_number: Optional[str] = None
    txn_date: Optional[WireDate] = None
    due_date: Optional[WireDate] = None
    sales_term_ref: Optional[Reference] = None
    department_ref: Optional[Reference] = None
    currency_ref: Optional[Reference] = None
    exchange_rate: Optional[Money] = None
    global_tax_calculation: Optional[GlobalTaxCalculation] = None
    line: List[LineItem] = Field(default_factory=list)
    txn_tax_detail: Optional[TxnTaxDetail] = None
    linked_txn: List[LinkedTxn] = Field(default_factory=list)
    total_amt: Optional[Money] = None
    balance: Optional[Money] = None
    home_balance: Optional[Money] = None
    private_note: Optional[str] = None
    include_in_annual_tpar: Optional[bool] = _wire("IncludeInAnnualTPAR")


def _bill_payment_can_create(e) -> bool:
    if not (ref_is_set(e.vendor_ref) and e.total_amt is not None):
        return False
    if not lines_can_create(e.line):
        return False
    if e.pay_type == PayType.CHECK:
        return e.check_payment is not None
    if e.pay_type == PayType.CREDIT_CARD:
        return e.credit_card_payment is not None
    return False


@register_kind(
    "BillPayment",
    operations=(C, R, Q, D, V, F),
    naming_fields=("doc_number",),
    links={
        "Vendor": "vendor_ref",
        "Account": "ap_account_ref",
        "Department": "department_ref",
    },
    create=_bill_payment_can_create,
)
class BillPayment(QBEntity):
    """Payment of one or more bills, by check or credit card."""
    vendor_ref: Optional[Reference] = None
    pay_type: Optional[PayType] = None
    check_payment: Optional[CheckBillPayment] = None
    credit_card_payment: Optional[CreditCardBillPayment] = None
    total_amt: Optional[Money] = None
    txn_date: Optional[WireDate] = None
    doc_number: Optional[str] = None
    private_note: Optional[str] = None
    ap_account_ref: Optional[Reference] = _wire("APAccountRef")
    department_ref: Optional[Reference] = None
    currency_ref: Optional[Reference] = None
    exchange_rate: Optional[Money] = None
    line: List[PaymentLine] = Field(default_factory=list)
    domain: Optional[str] = _wire("domain")
    sparse: Optional[bool] = _wire("sparse")


# =============================================================================
# Planning and Attachments
# =============================================================================

class BudgetDetail(QBBaseModel):
    budget_date: Optional[WireDate] = None
    amount: Optional[Money] = None
    account_ref: Optional[Reference] = None
    class_ref: Optional[Reference] = None
    customer_ref: Optional[Reference] = None
    department_ref: Optional[Reference] = None


def _budget_validate(e) -> None:
    if e.start_date and e.end_date and e.end_date < e.start_date:
        raise ValidationError(
            f"Budget end_date {e.end_date} is before start_date {e.start_date}"
        )


@register_kind(
    "Budget",
    operations=(C, R, Q, D, F),
    naming_fields=("name",),
    required_fields=("start_date", "end_date"),
    validate=_budget_validate,
    create=lambda e: is_set(e.name) and e.start_date is not None and e.end_date is not None,
)
class Budget(QBEntity):
    name: Optional[str] = None
    start_date: Optional[WireDate] = None
    end_date: Optional[WireDate] = None
    budget_type: Optional[str] = None
    budget_entry_type: Optional[str] = None
    budget_detail: List[BudgetDetail] = Field(default_factory=list)
    active: Optional[bool] = None


class AttachableRef(QBBaseModel):
    """Record an attachment is linked to."""
    entity_ref: Optional[Reference] = None
    line_info: Optional[str] = None
    include_on_send: Optional[bool] = None
    custom_field: List[CustomField] = Field(default_factory=list)


def _attachable_validate(e) -> None:
    if not (is_set(e.note) or is_set(e.file_name)):
        raise ValidationError("Attachable needs a note or a file name")


@register_kind(
    "Attachable",
    operations=(C, R, Q, D, F),
    naming_fields=("file_name",),
    validate=_attachable_validate,
    create=lambda e: is_set(e.note) or is_set(e.file_name),
)
class Attachable(QBEntity):
    """Note or uploaded file attached to other records."""
    file_name: Optional[str] = None
    note: Optional[str] = None
    category: Optional[str] = None
    content_type: Optional[str] = None
    size: Optional[Money] = None
    attachable_ref: List[AttachableRef] = Field(default_factory=list)
    file_access_uri: Optional[str] = None
    temp_download_uri: Optional[str] = None
    thumbnail_file_access_uri: Optional[str] = None
    lat: Optional[str] = None
    long: Optional[str] = None
    place_name: Optional[str] = None
    tag: Optional[str] = None


class RecurringScheduleInfo(QBBaseModel):
    interval_type: Optional[IntervalType] = None
    num_interval: Optional[int] = None
    day_of_month: Optional[int] = None
    day_of_week: Optional[str] = None
    week_of_month: Optional[int] = None
    month_of_year: Optional[str] = None
    days_before: Optional[int] = None
    remind_days: Optional[int] = None
    max_occurrences: Optional[int] = None
    start_date: Optional[WireDate] = None
    end_date: Optional[WireDate] = None
    next_date: Optional[WireDate] = None
    previous_date: Optional[WireDate] = None


class RecurringInfo(QBBaseModel):
    name: Optional[str] = None
    recur_type: Optional[RecurType] = None
    active: Optional[bool] = None
    schedule_info: Optional[RecurringScheduleInfo] = None


@register_kind(
    "RecurringTransaction",
    operations=(R, Q, D),
    naming_fields=("name",),
)
class RecurringTransaction(QBEntity):
    """Schedule template that creates or reminds about a transaction."""
    name: Optional[str] = None
    entity_type: Optional[str] = _wire("Type")
    recur_data_ref: Optional[Reference] = None
    recurring_info: Optional[RecurringInfo] = None
