"""Connectors - platform-specific resource models.

Each subpackage models one remote platform's resources. Core value types,
errors, configuration and logging are platform-neutral and live in /core/.

To add a platform:
1. Create a new folder (e.g. xero/)
2. Define its record models on top of core.models
3. Register each kind with that platform's registry decorator
"""
