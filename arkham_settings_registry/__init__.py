"""
Settings Registry - Declared application settings reconciled with storage.

Application code declares settings and groups with defaults, types and sort
order; the registry merges each declaration with the stored document and
serves the result through the settings cache.
"""

__version__ = "0.1.0"

from .cache import CachedSettings
from .config import RegistryConfig, load_config
from .exceptions import (
    DuplicateSettingError,
    EnterpriseSettingError,
    InvalidArgumentsError,
    RegistryError,
    SettingValidationError,
    StorageError,
)
from .models import UNSET, Setting, SettingGroup, SettingType, ValueSource
from .registry import GroupBuilder, SectionBuilder, SettingsRegistry, SorterState
from .service import SettingsService
from .storage import SettingsModel

__all__ = [
    "CachedSettings",
    "RegistryConfig",
    "load_config",
    "RegistryError",
    "InvalidArgumentsError",
    "EnterpriseSettingError",
    "SettingValidationError",
    "StorageError",
    "DuplicateSettingError",
    "UNSET",
    "Setting",
    "SettingGroup",
    "SettingType",
    "ValueSource",
    "SettingsRegistry",
    "SorterState",
    "GroupBuilder",
    "SectionBuilder",
    "SettingsService",
    "SettingsModel",
]
