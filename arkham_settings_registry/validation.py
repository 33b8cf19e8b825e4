"""Type checks for setting values."""

from datetime import datetime
from typing import Any

from .exceptions import SettingValidationError
from .models import SettingType

STRING_TYPES = frozenset({
    SettingType.STRING.value,
    SettingType.RELATIVE_URL.value,
    SettingType.PASSWORD.value,
    SettingType.LANGUAGE.value,
    SettingType.COLOR.value,
    SettingType.FONT.value,
    SettingType.CODE.value,
    SettingType.ACTION.value,
    SettingType.TIMEZONE.value,
})

LIST_TYPES = frozenset({
    SettingType.MULTI_SELECT.value,
    SettingType.ROOM_PICK.value,
})


def validate_setting(setting_id: str, setting_type: str, value: Any) -> None:
    """
    Check a value against a setting type.

    Types without a rule (select, lookup, ...) accept anything.

    Raises:
        SettingValidationError: If the value does not fit the type
    """
    if setting_type in STRING_TYPES:
        if not isinstance(value, str):
            raise SettingValidationError(setting_id, "must be a string")
    elif setting_type == SettingType.INT.value:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise SettingValidationError(setting_id, "must be a number")
    elif setting_type == SettingType.BOOLEAN.value:
        if not isinstance(value, bool):
            raise SettingValidationError(setting_id, "must be a boolean")
    elif setting_type in LIST_TYPES:
        if not isinstance(value, list):
            raise SettingValidationError(setting_id, "must be an array")
    elif setting_type == SettingType.ASSET.value:
        if not isinstance(value, dict):
            raise SettingValidationError(setting_id, "must be an object")
    elif setting_type == SettingType.DATE.value:
        if not isinstance(value, datetime):
            raise SettingValidationError(setting_id, "must be a date")
