import pytest
from unittest.mock import MagicMock

from arkham_settings_registry.cache import CachedSettings
from arkham_settings_registry.config import RegistryConfig
from arkham_settings_registry.registry import SettingsRegistry
from arkham_settings_registry.storage import SettingsModel


@pytest.fixture
def model():
    """
    Fixture for a settings model on an in-memory SQLite database.
    Creates a new database for each test, ensuring isolation.
    """
    settings_model = SettingsModel("sqlite://")
    settings_model.create_schema()
    try:
        yield settings_model
    finally:
        settings_model.dispose()


@pytest.fixture
def store():
    """Empty settings cache."""
    return CachedSettings()


@pytest.fixture
def config():
    return RegistryConfig()


@pytest.fixture
def registry(store, model, config):
    """Registry writing to the in-memory model."""
    return SettingsRegistry(store, model, config)


@pytest.fixture
def spy_model(model):
    """The in-memory model wrapped so writes can be asserted."""
    return MagicMock(wraps=model)


@pytest.fixture
def reboot(spy_model):
    """
    Simulate a new process: fresh cache loaded from storage and a fresh
    sorter state. Writes go through ``spy_model``.
    """
    def _reboot(config=None):
        spy_model.reset_mock()
        boot_store = CachedSettings()
        boot_store.load(spy_model)
        return boot_store, SettingsRegistry(boot_store, spy_model, config or RegistryConfig())

    return _reboot
