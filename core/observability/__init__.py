"""
Observability Module for the QuickBooks type layer

Provides:
- Structured logging with correlation IDs (record kind, id, operation, request)
"""

from core.observability.logging import (
    get_logger,
    configure_logging,
    CorrelationContext,
    with_correlation,
)

__all__ = [
    "get_logger",
    "configure_logging",
    "CorrelationContext",
    "with_correlation",
]
