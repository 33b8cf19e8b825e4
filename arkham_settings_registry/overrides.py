"""
Environment overrides for declared settings.

Two variables can change a setting's value at boot:

- ``OVERWRITE_SETTING_<id>`` replaces the value on every boot, including the
  value already stored.
- ``<id>`` only seeds the value the first time the setting is inserted.
"""

import logging
import os
from typing import Any, Mapping, Optional

from .models import Setting, SettingType, ValueSource

logger = logging.getLogger(__name__)

OVERWRITE_PREFIX = "OVERWRITE_SETTING_"


def convert_value(raw: str, setting_type: str) -> Any:
    """Convert an environment string to the setting's value type."""
    if raw.lower() == "true":
        return True
    if raw.lower() == "false":
        return False
    if setting_type == SettingType.INT.value:
        try:
            return int(raw)
        except ValueError:
            logger.warning(f"Cannot convert {raw!r} to int, keeping the raw string")
    return raw


def _apply_env_value(setting: Setting, raw: Optional[str]) -> Setting:
    if not raw:
        return setting

    value = convert_value(raw, setting.type)
    if value == setting.value and type(value) is type(setting.value):
        return setting

    updated = setting.copy()
    updated.value = value
    updated.process_env_value = value
    updated.value_source = ValueSource.PROCESS_ENV.value
    return updated


def overwrite_setting(setting: Setting, environ: Optional[Mapping[str, str]] = None) -> Setting:
    """
    Apply ``OVERWRITE_SETTING_<id>`` to a declared setting.

    Returns the same object when no overwrite applies, so callers can detect
    an overwrite by identity.
    """
    environ = os.environ if environ is None else environ
    return _apply_env_value(setting, environ.get(f"{OVERWRITE_PREFIX}{setting.id}"))


def override_setting(setting: Setting, environ: Optional[Mapping[str, str]] = None) -> Setting:
    """Apply ``<id>`` to a setting about to be inserted for the first time."""
    environ = os.environ if environ is None else environ
    return _apply_env_value(setting, environ.get(setting.id))
