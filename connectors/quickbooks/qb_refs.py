"""Reference construction and link navigation between QuickBooks records.

``to_reference`` turns a saved record into the pointer other records embed
(e.g. an invoice's ``CustomerRef``). ``linked`` reads a pointer a record
already holds without building anything.
"""

from typing import Dict, Optional

from connectors.quickbooks.qb_registry import find_descriptor, get_descriptor
from core.errors import ToRefError
from core.models.refs import Reference
from core.models.values import is_blank
from core.observability.logging import get_logger, with_correlation

logger = get_logger(__name__)


def display_name_of(entity) -> Optional[str]:
    """First non-blank naming field of the record's kind, if any."""
    descriptor = find_descriptor(entity)
    if descriptor is None:
        return None
    for name in descriptor.naming_fields:
        value = getattr(entity, name, None)
        if not is_blank(value):
            return value
    return None


def to_reference(entity) -> Reference:
    """Build a reference to a saved record.

    Args:
        entity: Registered record with an id

    Returns:
        Reference carrying the kind name, the display name and the id

    Raises:
        ToRefError: If the record has no id, or its kind has no naming field
    """
    descriptor = find_descriptor(entity)
    kind = descriptor.name if descriptor else type(entity).__name__

    with with_correlation(entity_kind=kind, entity_id=getattr(entity, "id", None)):
        if descriptor is None or not descriptor.naming_fields:
            logger.debug("Reference refused: kind has no naming field")
            raise ToRefError(kind, "kind has no naming field")

        target_id = getattr(entity, "id", None)
        if is_blank(target_id):
            logger.debug("Reference refused: record has no id")
            raise ToRefError(kind)

        return Reference(
            kind_type=descriptor.name,
            display_name=display_name_of(entity),
            target_id=target_id,
        )


def linked_fields(kind) -> Dict[str, str]:
    """Target kind name -> reference field, for every link a kind declares.

    Raises:
        ValueError: If the kind is not registered
    """
    return dict(get_descriptor(kind).links)


def linked(entity, target_kind) -> Optional[Reference]:
    """Return the stored reference from a record to a target kind.

    Args:
        entity: Registered record
        target_kind: Target kind name, api id or record class

    Returns:
        The stored reference, or None when the field is unset

    Raises:
        ValueError: If the record's kind declares no link to the target kind
    """
    descriptor = get_descriptor(entity)
    target = find_descriptor(target_kind)
    target_name = target.name if target else str(target_kind)

    path = descriptor.links.get(target_name)
    if path is None:
        raise ValueError(f"{descriptor.name} declares no link to {target_name}")
    # Dotted paths reach into nested objects; an unset step means no link
    value = entity
    for step in path.split("."):
        value = getattr(value, step)
        if value is None:
            return None
    return value
