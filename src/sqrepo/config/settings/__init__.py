"""Config settings – 12-factor env-based configuration."""
from sqrepo.config.settings.base import Settings
from sqrepo.config.settings.loaders import EnvSettingsLoader, SettingsLoader
from sqrepo.config.settings.repository import RepositorySettings

__all__ = ["EnvSettingsLoader", "RepositorySettings", "Settings", "SettingsLoader"]
