"""Shared pytest fixtures."""

import pytest


@pytest.fixture(autouse=True)
def default_settings():
    """Run every test against default settings, whatever the local .env says."""
    from core.config import TypesSettings, set_settings

    set_settings(TypesSettings())
    yield
    set_settings(None)
