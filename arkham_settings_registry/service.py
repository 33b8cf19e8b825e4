"""
SettingsService - startup wiring for the settings registry.
"""

import logging
from typing import Any, Callable, Optional

from .cache import CachedSettings
from .config import RegistryConfig, load_config
from .registry import SettingsRegistry
from .storage import SettingsModel
from .utils import get_log_level

logger = logging.getLogger(__name__)


class SettingsService:
    """
    Owns the persistent model, the cached store and the registry.

    Usage:
        service = SettingsService()
        service.initialize()
        service.declare(declare_account_settings, declare_email_settings)
        service.get("Accounts_AllowUserProfileChange")
    """

    def __init__(self, config: Optional[RegistryConfig] = None, database_url: Optional[str] = None):
        self._config = config if config is not None else load_config()
        self._database_url = database_url or self._config.database_url
        self._store = CachedSettings()
        self._model: Optional[SettingsModel] = None
        self._registry: Optional[SettingsRegistry] = None

    def initialize(self) -> None:
        """Connect to the database, load stored settings and build the registry."""
        logging.getLogger(__package__).setLevel(get_log_level(self._config.log_level))

        self._model = SettingsModel(self._database_url)
        self._model.create_schema()

        count = self._store.load(self._model)
        self._registry = SettingsRegistry(self._store, self._model, self._config)

        logger.info(f"Settings service initialized with {count} stored settings")

    def shutdown(self) -> None:
        """Clean up resources."""
        if self._model:
            self._model.dispose()

        self._model = None
        self._registry = None

        logger.info("Settings service shut down")

    @property
    def config(self) -> RegistryConfig:
        return self._config

    @property
    def store(self) -> CachedSettings:
        return self._store

    @property
    def model(self) -> SettingsModel:
        if not self._model:
            raise RuntimeError("Settings service not initialized")
        return self._model

    @property
    def registry(self) -> SettingsRegistry:
        if not self._registry:
            raise RuntimeError("Settings service not initialized")
        return self._registry

    def declare(self, *declarations: Callable[[SettingsRegistry], None]) -> None:
        """
        Run declaration functions against the registry, then refresh the cache.

        The registry only writes updates of existing settings to the database,
        so the cache is reloaded once all declarations ran.
        """
        registry = self.registry
        for declaration in declarations:
            declaration(registry)
        self.reload()

    def reload(self) -> int:
        """Re-read every stored setting into the cache."""
        return self._store.load(self.model)

    def get(self, setting_id: str, default: Any = None) -> Any:
        """Current value of a setting."""
        return self._store.get(setting_id, default)
