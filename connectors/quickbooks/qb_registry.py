"""Registry of QuickBooks resource kinds.

Each record class registers itself with a descriptor that bundles its canonical
name, lowercase API id, supported operations and per-kind rules. The registry
is filled once, at import of ``qb_models``, and is read-only afterwards.

To add a kind:
1. Define a ``QBEntity`` subclass in qb_models.py
2. Decorate it with ``@register_kind("Name", operations=...)``
3. Pass rule overrides (create, full_update, ...) where the defaults differ
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Tuple, Type

from core.observability.logging import get_logger

logger = get_logger(__name__)


class Operation(str, Enum):
    """Lifecycle operations a transport may issue against a record."""
    CREATE = "create"
    READ = "read"
    QUERY = "query"
    FULL_UPDATE = "full_update"
    SPARSE_UPDATE = "sparse_update"
    DELETE = "delete"
    VOID = "void"
    SEND = "send"
    PDF = "pdf"


Rule = Callable[[Any], bool]


@dataclass(frozen=True)
class KindDescriptor:
    """Everything the type layer knows about one resource kind.

    Attributes:
        name: Canonical kind name (e.g. "SalesReceipt")
        api_id: Lowercase id used in request paths (e.g. "salesreceipt")
        model: Record class
        operations: Operations the platform supports for the kind
        naming_fields: Fields tried in order for a reference display name
        links: Target kind name -> reference field holding the link, dotted
            for fields inside nested objects
        required_fields: Fields a builder refuses to leave unset
        rules: Operation -> predicate overriding the shared default
        validate: Structural check run by builders, raises ValidationError
    """
    name: str
    api_id: str
    model: Type
    operations: FrozenSet[Operation]
    naming_fields: Tuple[str, ...] = ()
    links: Dict[str, str] = field(default_factory=dict)
    required_fields: Tuple[str, ...] = ()
    rules: Dict[Operation, Rule] = field(default_factory=dict)
    validate: Optional[Callable[[Any], None]] = None

    def supports(self, op: Operation) -> bool:
        return op in self.operations

    def rule_for(self, op: Operation) -> Optional[Rule]:
        return self.rules.get(op)


# Registry of kinds, keyed by canonical name
_kind_registry: Dict[str, KindDescriptor] = {}


def register_kind(
    name: str,
    operations: Iterable[Operation],
    naming_fields: Iterable[str] = (),
    links: Optional[Dict[str, str]] = None,
    required_fields: Iterable[str] = (),
    validate: Optional[Callable[[Any], None]] = None,
    **rules: Rule,
):
    """Decorator to register a record class as a resource kind.

    Rule overrides are passed by operation value, e.g. ``create=...`` or
    ``full_update=...``.

    Raises:
        ValueError: If the name is already registered or a rule names an
            unknown operation
    """
    ops = frozenset(Operation(op) for op in operations)
    rule_map = {Operation(op): fn for op, fn in rules.items()}

    def decorator(cls):
        if name in _kind_registry:
            raise ValueError(f"Kind already registered: {name}")
        descriptor = KindDescriptor(
            name=name,
            api_id=name.lower(),
            model=cls,
            operations=ops,
            naming_fields=tuple(naming_fields),
            links=dict(links or {}),
            required_fields=tuple(required_fields),
            rules=rule_map,
            validate=validate,
        )
        _kind_registry[name] = descriptor
        cls.__kind_descriptor__ = descriptor
        logger.debug(
            "Registered kind",
            extra_fields={"kind": name, "operations": sorted(op.value for op in ops)},
        )
        return cls

    return decorator


def find_descriptor(kind) -> Optional[KindDescriptor]:
    """Look up a descriptor by name, api id, record class or record instance.

    Returns None for anything that is not a registered kind.
    """
    if isinstance(kind, KindDescriptor):
        return kind
    if isinstance(kind, str):
        descriptor = _kind_registry.get(kind)
        if descriptor is not None:
            return descriptor
        lowered = kind.lower()
        for candidate in _kind_registry.values():
            if candidate.api_id == lowered:
                return candidate
        return None
    cls = kind if isinstance(kind, type) else type(kind)
    descriptor = cls.__dict__.get("__kind_descriptor__")
    if isinstance(descriptor, KindDescriptor):
        return descriptor
    return None


def get_descriptor(kind) -> KindDescriptor:
    """Look up a descriptor, failing for unregistered kinds.

    Raises:
        ValueError: If the kind is not registered
    """
    descriptor = find_descriptor(kind)
    if descriptor is None:
        available = list(_kind_registry.keys())
        raise ValueError(f"Unknown kind: {kind!r}. Available: {available}")
    return descriptor


def list_kinds() -> List[str]:
    """List all registered kind names."""
    return list(_kind_registry.keys())
