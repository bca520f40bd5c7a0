"""Core module - platform-neutral value types and ambient services.

This module contains the shared value models, the error hierarchy,
configuration and structured logging. It is intentionally platform-agnostic.

Platform-specific models (QuickBooks Online) belong in /connectors/.
"""

__version__ = "1.0.0"
