"""Configuration module for loading and managing application settings"""
from dataclasses import dataclass
from functools import lru_cache
from typing import FrozenSet
from .lib.load_settings_conf import load_settings_conf, SettingsError

__all__ = ['Settings', 'get_settings', 'SettingsError']

@dataclass(frozen=True)
class Settings:
    """Read-only application settings, loaded once per process."""
    db_url: str
    api_keys: FrozenSet[str]
    private_prefix: str = '/api/private'
    pool_min_size: int = 1
    pool_max_size: int = 10
    command_timeout: float = 60.0

    def is_valid_api_key(self, key: str) -> bool:
        """Check membership of a supplied key in the allow-set."""
        return bool(key) and key in self.api_keys

    def is_private_path(self, path: str) -> bool:
        """Check whether a request path falls under the private prefix."""
        return path == self.private_prefix or path.startswith(self.private_prefix + '/')

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from settings.conf and the environment.

    Returns:
        The process-wide Settings value

    Raises:
        SettingsError: If configuration is missing or invalid
    """
    try:
        settings = load_settings_conf()
    except SettingsError as e:
        # Re-raise the error but provide more context
        raise SettingsError(
            f"Configuration Error\n"
            "=================\n\n"
            f"{str(e)}\n\n"
            "Please provide settings.conf or the LOOTBOX_* environment variables.\n"
            "See settings.conf.example for configuration requirements."
        )

    return Settings(
        db_url=settings['db_url'],
        api_keys=settings['api_keys'],
        private_prefix=settings['private_prefix'],
        pool_min_size=settings['pool_min_size'],
        pool_max_size=settings['pool_max_size'],
        command_timeout=settings['command_timeout']
    )
