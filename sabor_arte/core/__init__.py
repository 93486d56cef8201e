"""
Core module initialization.
Exports configuration, logging utilities and the error taxonomy.
"""

from sabor_arte.core.config import get_settings, Settings, EnvironmentMode
from sabor_arte.core.exceptions import StorefrontError, ConfigurationError

__all__ = [
    "get_settings",
    "Settings",
    "EnvironmentMode",
    "StorefrontError",
    "ConfigurationError",
]
