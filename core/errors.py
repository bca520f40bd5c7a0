"""Error types for QuickBooks resource models.

Capability predicates never raise; these errors cover value construction,
wire decoding and reference resolution.
"""

from typing import Optional


class QBTypeError(Exception):
    """Base exception for QuickBooks type errors."""
    pass


class ValidationError(QBTypeError):
    """A structural precondition was violated while building or encoding a value."""
    def __init__(self, message: str):
        super().__init__(f"Error validating QB object: {message}")
        self.message = message


class MissingField(QBTypeError):
    """A field required by an operation is absent."""
    def __init__(self, field_name: str, kind: Optional[str] = None):
        where = f" on {kind}" if kind else ""
        super().__init__(f"Missing required field{where}: {field_name}")
        self.field_name = field_name
        self.kind = kind


class ToRefError(QBTypeError):
    """A reference was requested for a record that cannot be referenced."""
    def __init__(self, kind: str, reason: str = "record has no id"):
        super().__init__(f"Cannot build a reference to {kind}: {reason}")
        self.kind = kind
        self.reason = reason


class DecodeError(QBTypeError, ValueError):
    """Malformed wire payload.

    Also a ValueError: pydantic wraps it when it is raised inside a model
    validator, and the public decoders unwrap it again.
    """
    def __init__(self, message: str, payload: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.payload = payload
