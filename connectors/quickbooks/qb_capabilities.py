"""Capability evaluation for QuickBooks records.

Decides, before any network call, whether a record is structurally ready for
a lifecycle operation. Every public predicate is pure and never raises: an
operation the kind does not support, or a value that is not a registered
record, evaluates to False.

Shared rules (each kind may override through its descriptor):
- read: id set
- query: kind membership only
- delete, void: id and sync token set (``has_read``)
- full update: ``has_read`` and the kind's create rule
- sparse update: full update allowed and ``sparse`` is exactly True
- send: kind membership only (a kind may add its own rule)
- pdf: kind membership only
"""

from typing import Dict, FrozenSet, Iterable, Optional, Union

from connectors.quickbooks.qb_lines import lines_can_create
from connectors.quickbooks.qb_registry import Operation, Rule, find_descriptor
from core.models.refs import EmailStatus, Reference
from core.models.values import is_blank
from core.observability.logging import get_logger

logger = get_logger(__name__)

PERSON_NAME_FIELDS = (
    "display_name",
    "given_name",
    "family_name",
    "middle_name",
    "title",
    "suffix",
)


# =============================================================================
# Shape Helpers
# =============================================================================

def is_set(value) -> bool:
    """True when a field holds something other than None or a blank string."""
    return not is_blank(value)


def ref_is_set(ref: Optional[Reference]) -> bool:
    return ref is not None and not ref.is_empty


def has_read(entity) -> bool:
    """Id and sync token both set: the record was read from the platform."""
    return is_set(getattr(entity, "id", None)) and is_set(getattr(entity, "sync_token", None))


def id_is_set(entity) -> bool:
    return is_set(getattr(entity, "id", None))


def any_set(entity, fields: Iterable[str]) -> bool:
    return any(is_set(getattr(entity, name, None)) for name in fields)


def person_can_create(entity) -> bool:
    """People and organisations need at least one name field."""
    return any_set(entity, PERSON_NAME_FIELDS)


def has_billing_email(entity) -> bool:
    email = getattr(entity, "bill_email", None)
    return email is not None and not email.is_empty


def email_clause(entity) -> bool:
    """A document queued for emailing must carry a billing email."""
    if getattr(entity, "email_status", None) != EmailStatus.NEED_TO_SEND:
        return True
    return has_billing_email(entity)


def document_can_create(party_field: str) -> Rule:
    """Create rule for line-bearing documents.

    The counterparty reference must be set and every line must be ready.
    """
    def rule(entity) -> bool:
        return ref_is_set(getattr(entity, party_field, None)) and lines_can_create(
            getattr(entity, "line", None)
        )
    return rule


def emailed_document_full_update(entity) -> bool:
    return has_read(entity) and can_create(entity) and email_clause(entity)


# =============================================================================
# Default Rules
# =============================================================================

def _never(entity) -> bool:
    return False


def _always(entity) -> bool:
    return True


def _default_full_update(entity) -> bool:
    return has_read(entity) and can_create(entity)


def _default_sparse_update(entity) -> bool:
    return can_full_update(entity) and getattr(entity, "sparse", None) is True


_DEFAULT_RULES: Dict[Operation, Rule] = {
    Operation.CREATE: _never,
    Operation.READ: id_is_set,
    Operation.QUERY: _always,
    Operation.FULL_UPDATE: _default_full_update,
    Operation.SPARSE_UPDATE: _default_sparse_update,
    Operation.DELETE: has_read,
    Operation.VOID: has_read,
    Operation.SEND: _always,
    Operation.PDF: _always,
}


def _evaluate(entity, op: Operation) -> bool:
    descriptor = find_descriptor(type(entity))
    if descriptor is None:
        logger.debug(
            "Capability check on unregistered value",
            extra_fields={"operation": op.value, "type": type(entity).__name__},
        )
        return False
    if not descriptor.supports(op):
        return False
    rule = descriptor.rule_for(op) or _DEFAULT_RULES[op]
    return bool(rule(entity))


# =============================================================================
# Public Predicates
# =============================================================================

def can_create(entity) -> bool:
    return _evaluate(entity, Operation.CREATE)


def can_read(entity) -> bool:
    return _evaluate(entity, Operation.READ)


def can_query(entity) -> bool:
    return _evaluate(entity, Operation.QUERY)


def can_full_update(entity) -> bool:
    return _evaluate(entity, Operation.FULL_UPDATE)


def can_sparse_update(entity) -> bool:
    return _evaluate(entity, Operation.SPARSE_UPDATE)


def can_delete(entity) -> bool:
    return _evaluate(entity, Operation.DELETE)


def can_void(entity) -> bool:
    return _evaluate(entity, Operation.VOID)


def can_send(entity) -> bool:
    return _evaluate(entity, Operation.SEND)


def can_produce_document(entity) -> bool:
    """Can the platform render the record as a PDF document?"""
    return _evaluate(entity, Operation.PDF)


can_get_pdf = can_produce_document


def _as_operation(op: Union[Operation, str]) -> Optional[Operation]:
    if isinstance(op, Operation):
        return op
    try:
        return Operation(str(op).lower())
    except ValueError:
        return None


def is_allowed(entity, op: Union[Operation, str]) -> bool:
    """Evaluate one operation by value, e.g. ``is_allowed(invoice, "void")``."""
    operation = _as_operation(op)
    if operation is None:
        return False
    return _evaluate(entity, operation)


def supports(kind, op: Union[Operation, str]) -> bool:
    """Static membership: does the kind support the operation at all?

    Args:
        kind: Kind name, api id, record class or record instance
        op: Operation or its value
    """
    operation = _as_operation(op)
    descriptor = find_descriptor(kind) if kind is not None else None
    if operation is None or descriptor is None:
        return False
    return descriptor.supports(operation)


def allowed_operations(entity) -> FrozenSet[Operation]:
    """Every operation currently allowed for the record."""
    return frozenset(op for op in Operation if _evaluate(entity, op))
