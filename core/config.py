"""Runtime settings for the QuickBooks type layer.

Settings come from environment variables (optionally from a ``.env`` file at the
project root) and can be overridden in code:

    from core.config import get_settings, override_settings

    settings = get_settings()
    with override_settings(unknown_detail_policy="empty"):
        ...

Environment variables:
- QB_UNKNOWN_DETAIL_POLICY: "fail" (default) or "empty"
- QB_TAXABLE_TAX_CODE: tax code forced by set_taxable (default "TAX")
- QB_LOG_LEVEL: logging level name (default "INFO")
- QB_LOG_JSON: "1"/"true" for JSON log lines
- QB_CONFIGURE_LOGGING: "1"/"true" to install a stdout handler on first use
"""

import os
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


ENV_PATH = Path(__file__).resolve().parent.parent / ".env"

UnknownDetailPolicy = Literal["fail", "empty"]


class TypesSettings(BaseModel):
    """Settings for decoding, encoding and logging."""
    unknown_detail_policy: UnknownDetailPolicy = Field(
        default="fail",
        description="What to do with a line carrying an unrecognised detail key",
    )
    taxable_tax_code: str = Field(
        default="TAX",
        description="Tax code id written by set_taxable",
    )
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)
    configure_logging: bool = Field(
        default=False,
        description="Install a stdout handler the first time a logger is requested",
    )

    model_config = {"frozen": True}


# Default settings
DEFAULT_SETTINGS = TypesSettings()


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_settings(env_path: Optional[Path] = None) -> TypesSettings:
    """Build settings from the environment.

    Args:
        env_path: Optional .env file; defaults to the project root .env

    Returns:
        TypesSettings populated from environment variables

    Raises:
        pydantic.ValidationError: If a variable holds an invalid value
    """
    path = env_path or ENV_PATH
    if path.exists():
        load_dotenv(path)

    return TypesSettings(
        unknown_detail_policy=os.getenv(
            "QB_UNKNOWN_DETAIL_POLICY", DEFAULT_SETTINGS.unknown_detail_policy
        ).strip().lower(),
        taxable_tax_code=os.getenv("QB_TAXABLE_TAX_CODE", DEFAULT_SETTINGS.taxable_tax_code),
        log_level=os.getenv("QB_LOG_LEVEL", DEFAULT_SETTINGS.log_level).upper(),
        log_json=_env_flag("QB_LOG_JSON", DEFAULT_SETTINGS.log_json),
        configure_logging=_env_flag("QB_CONFIGURE_LOGGING", DEFAULT_SETTINGS.configure_logging),
    )


_settings: Optional[TypesSettings] = None

# Scoped overrides live per thread / async task; None means "use the process settings"
_override: ContextVar[Optional[TypesSettings]] = ContextVar("types_settings_override", default=None)


def get_settings() -> TypesSettings:
    """Get the settings in effect, loading the process settings on first use."""
    global _settings
    override = _override.get()
    if override is not None:
        return override
    if _settings is None:
        _settings = load_settings()
    return _settings


def set_settings(settings: Optional[TypesSettings]) -> None:
    """Replace the process settings (None forces a reload on next use)."""
    global _settings
    _settings = settings


@contextmanager
def override_settings(**changes):
    """
    Context manager to change settings for the current thread or task only.

    Usage:
        with override_settings(unknown_detail_policy="empty"):
            line = decode_line(payload)

    Raises:
        pydantic.ValidationError: If a changed value is invalid
    """
    settings = TypesSettings.model_validate({**get_settings().model_dump(), **changes})
    token = _override.set(settings)
    try:
        yield settings
    finally:
        _override.reset(token)
