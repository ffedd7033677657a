"""Configuration – settings dataclasses, loaders and errors."""
from sqrepo.config.errors import ConfigError, InvalidSettingValueError, MissingRequiredSettingError
from sqrepo.config.settings import EnvSettingsLoader, RepositorySettings, Settings, SettingsLoader

__all__ = [
    "ConfigError",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "RepositorySettings",
    "Settings",
    "SettingsLoader",
]
