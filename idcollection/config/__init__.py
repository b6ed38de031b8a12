"""
Configuration module for idcollection.

This module provides configuration management including
loading settings from YAML files and environment variables.

Example:
    >>> from idcollection.config import Settings, load_config
    >>>
    >>> # Load default config
    >>> settings = load_config()
    >>>
    >>> # Access settings
    >>> print(settings.pagination_limit)
"""

from .settings import (
    Settings,
    load_config,
    get_default_config_path,
    get_config,
    set_config,
)

__all__ = [
    "Settings",
    "load_config",
    "get_default_config_path",
    "get_config",
    "set_config",
]
