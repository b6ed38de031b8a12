"""
Configuration management for idcollection.

Provides a dataclass for the tunable defaults and utilities for loading
them from YAML files and environment variables.
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional
import yaml


ENV_PREFIX = "IDCOLLECTION_"


@dataclass
class Settings:
    """
    Settings container for idcollection.

    Attributes:
        pagination_limit: Default page size
        pagination_validate: Reject out-of-range pages instead of clamping
        search_min_length: Shortest query word that counts as a match
        search_words: Match whole words only
        group_case_insensitive: Fold group keys to lower case by default
        log_level: Logging level
    """
    pagination_limit: int = 20
    pagination_validate: bool = True
    search_min_length: int = 2
    search_words: bool = False
    group_case_insensitive: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """Create Settings from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from ``IDCOLLECTION_*`` environment variables."""
        defaults = cls()
        return cls(
            pagination_limit=int(os.getenv(
                f"{ENV_PREFIX}PAGINATION_LIMIT", defaults.pagination_limit
            )),
            pagination_validate=_env_bool(
                f"{ENV_PREFIX}PAGINATION_VALIDATE", defaults.pagination_validate
            ),
            search_min_length=int(os.getenv(
                f"{ENV_PREFIX}SEARCH_MIN_LENGTH", defaults.search_min_length
            )),
            search_words=_env_bool(f"{ENV_PREFIX}SEARCH_WORDS", defaults.search_words),
            group_case_insensitive=_env_bool(
                f"{ENV_PREFIX}GROUP_CASE_INSENSITIVE", defaults.group_case_insensitive
            ),
            log_level=os.getenv(f"{ENV_PREFIX}LOG_LEVEL", defaults.log_level),
        )

    def to_dict(self) -> dict:
        """Convert Settings to dictionary."""
        from dataclasses import asdict
        return asdict(self)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def get_default_config_path() -> Path:
    """Get path to default configuration file."""
    # Check environment variable
    env_config = os.environ.get(f"{ENV_PREFIX}CONFIG")
    if env_config:
        return Path(env_config)

    # Fall back to the file shipped with the package
    return Path(__file__).parent / "default_config.yaml"


def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default.

    Returns:
        Settings object with loaded configuration

    Example:
        >>> settings = load_config()
        >>> settings = load_config("./my_config.yaml")
    """
    if config_path is None:
        path = get_default_config_path()
    else:
        path = Path(config_path)

    if not path.exists():
        # Return default settings if no config file
        return Settings()

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        return Settings()

    return Settings.from_dict(data)


# Global configuration
_config: Optional[Settings] = None


def get_config() -> Settings:
    """Get the process-wide settings (environment variables on first use)."""
    global _config
    if _config is None:
        _config = Settings.from_env()
    return _config


def set_config(config: Optional[Settings]) -> None:
    """Set the process-wide settings (None resets to environment defaults)."""
    global _config
    _config = config
