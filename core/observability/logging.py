"""
Structured Logging with Correlation IDs

Provides logging utilities that automatically include:
- entity_kind: Canonical kind of the record being handled (e.g. "Invoice")
- entity_id: Id of the record, when it has one
- operation: Lifecycle operation being evaluated (create, sparse_update, ...)
- request_id: Caller-supplied id linking logs to one transport request
- realm_id: Company (realm) the record belongs to

Usage:
    from core.observability.logging import get_logger, with_correlation

    logger = get_logger(__name__)

    with with_correlation(entity_kind="Invoice", request_id="req-123"):
        logger.info("Decoding invoice")  # Automatically includes correlation IDs
"""

import json
import logging
import sys
from contextvars import ContextVar
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Optional, Dict, Any
from contextlib import contextmanager

from core.config import get_settings


# =============================================================================
# Correlation Context
# =============================================================================

@dataclass
class CorrelationContext:
    """Context for correlating logs across one record's handling."""
    entity_kind: Optional[str] = None
    entity_id: Optional[str] = None
    operation: Optional[str] = None
    request_id: Optional[str] = None
    realm_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict, excluding None values."""
        return {k: v for k, v in asdict(self).items() if v is not None}

    def merge(self, **kwargs) -> "CorrelationContext":
        """Create a new context with merged values."""
        data = self.to_dict()
        data.update({k: v for k, v in kwargs.items() if v is not None})
        return CorrelationContext(**data)


# Context variable for async/thread-safe correlation
_correlation_context: ContextVar[CorrelationContext] = ContextVar(
    "correlation_context",
    default=CorrelationContext()
)


def get_correlation_context() -> CorrelationContext:
    """Get the current correlation context."""
    return _correlation_context.get()


def set_correlation_context(ctx: CorrelationContext) -> None:
    """Set the current correlation context."""
    _correlation_context.set(ctx)


@contextmanager
def with_correlation(**kwargs):
    """
    Context manager to set correlation IDs for logging.

    Usage:
        with with_correlation(entity_kind="Invoice", entity_id="130"):
            logger.info("Evaluating")  # Will include entity_kind and entity_id
    """
    old_ctx = get_correlation_context()
    new_ctx = old_ctx.merge(**kwargs)
    token = _correlation_context.set(new_ctx)
    try:
        yield new_ctx
    finally:
        _correlation_context.reset(token)


# =============================================================================
# Structured JSON Formatter
# =============================================================================

class StructuredFormatter(logging.Formatter):
    """
    JSON formatter that includes correlation context.

    Output format:
    {
        "timestamp": "2024-01-09T12:00:00.000000Z",
        "level": "WARNING",
        "logger": "connectors.quickbooks.qb_lines",
        "message": "Unknown line detail treated as empty",
        "entity_kind": "Invoice",
        "detail_key": "ProjectLineDetail"
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        ctx = get_correlation_context()
        log_data.update(ctx.to_dict())

        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class HumanReadableFormatter(logging.Formatter):
    """
    Human-readable formatter that includes key correlation IDs.

    Output format:
    2024-01-09 12:00:00 [INFO ] connectors.quickbooks.qb_refs [Invoice:130]: Built reference
    """

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_correlation_context()

        correlation_parts = []
        if ctx.entity_kind:
            if ctx.entity_id:
                correlation_parts.append(f"{ctx.entity_kind}:{ctx.entity_id}")
            else:
                correlation_parts.append(ctx.entity_kind)
        if ctx.operation:
            correlation_parts.append(ctx.operation)
        if ctx.request_id:
            # Truncate request_id for readability
            correlation_parts.append(ctx.request_id[:12])

        correlation = "/".join(correlation_parts) if correlation_parts else "-"

        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

        msg = f"{timestamp} [{record.levelname:5}] {record.name} [{correlation}]: {record.getMessage()}"

        extra = getattr(record, "extra_fields", None)
        if extra:
            msg += " " + " ".join(f"{k}={v}" for k, v in extra.items())

        if record.exc_info:
            msg += "\n" + self.formatException(record.exc_info)

        return msg


# =============================================================================
# Logger with Correlation Support
# =============================================================================

class CorrelatedLogger:
    """
    Logger wrapper that automatically includes correlation context.

    Also supports adding extra fields to individual log calls.
    """

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def _log(self, level: int, msg: str, *args, **kwargs):
        """Log with extra fields support."""
        extra_fields = kwargs.pop("extra_fields", {})
        exc_info = kwargs.pop("exc_info", None)
        if exc_info is True:
            exc_info = sys.exc_info()

        record = self._logger.makeRecord(
            self._logger.name,
            level,
            "(unknown file)",
            0,
            msg,
            args,
            exc_info,
        )
        record.extra_fields = extra_fields

        self._logger.handle(record)

    def debug(self, msg: str, *args, **kwargs):
        if self._logger.isEnabledFor(logging.DEBUG):
            self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        if self._logger.isEnabledFor(logging.INFO):
            self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        if self._logger.isEnabledFor(logging.WARNING):
            self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        if self._logger.isEnabledFor(logging.ERROR):
            self._log(logging.ERROR, msg, *args, **kwargs)


# =============================================================================
# Logger Factory
# =============================================================================

_loggers: Dict[str, CorrelatedLogger] = {}
_configured = False


def configure_logging(
    level: int = logging.INFO,
    json_format: bool = False,
):
    """
    Configure logging for applications embedding the type layer.

    Args:
        level: Logging level
        json_format: If True, use JSON format; otherwise human-readable
    """
    global _configured

    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    if json_format:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(HumanReadableFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)

    for logger_name in ["core", "connectors"]:
        logging.getLogger(logger_name).setLevel(level)

    _configured = True


def get_logger(name: str) -> CorrelatedLogger:
    """
    Get a correlated logger for the given name.

    Handlers are installed only when settings.configure_logging is on; otherwise
    records go to whatever the host application configured.

    Args:
        name: Logger name (typically __name__)

    Returns:
        CorrelatedLogger instance
    """
    if name not in _loggers:
        settings = get_settings()
        if settings.configure_logging and not _configured:
            configure_logging(
                level=logging.getLevelName(settings.log_level),
                json_format=settings.log_json,
            )

        base_logger = logging.getLogger(name)
        _loggers[name] = CorrelatedLogger(base_logger)

    return _loggers[name]
