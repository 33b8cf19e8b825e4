"""
Settings Registry - Declaration Defaults

Fills in everything a raw declaration leaves out before it is compared
against storage.
"""

import json
from datetime import datetime
from typing import AbstractSet, Any, Dict, Optional

from .models import Setting, SettingGroup, SettingType, ValueSource

# Keys kept even when given as None
_NONE_ALLOWED = ("invalid_value",)


def _as_stored(value: Any) -> Any:
    """Give sequences the shape they have after a storage round trip."""
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    if isinstance(value, (list, tuple)):
        return [_as_stored(item) for item in value]
    if isinstance(value, dict):
        return {key: _as_stored(item) for key, item in value.items()}
    return value


def _serialize_query(query: Any) -> str:
    """Display/enable queries are stored as JSON strings."""
    return query if isinstance(query, str) else json.dumps(query, sort_keys=True)


def get_setting_defaults(
    setting: Dict[str, Any],
    blocked_settings: AbstractSet[str] = frozenset(),
    hidden_settings: AbstractSet[str] = frozenset(),
    wizard_required_settings: AbstractSet[str] = frozenset(),
) -> Setting:
    """
    Build a fully-defaulted setting from a raw declaration.

    Args:
        setting: Declaration dict with at least "id" and "value"
        blocked_settings: Ids forced to blocked
        hidden_settings: Ids forced to hidden
        wizard_required_settings: Ids the setup wizard must ask for

    Returns:
        Setting with every field filled in
    """
    raw = dict(setting)
    setting_id = raw.pop("id")
    value = _as_stored(raw.pop("value"))
    sorter = raw.pop("sorter", None)
    options = {
        key: _as_stored(option) for key, option in raw.items()
        if option is not None or key in _NONE_ALLOWED
    }

    now = datetime.utcnow()
    data: Dict[str, Any] = {
        "id": setting_id,
        "value": value,
        "package_value": value,
        "value_source": ValueSource.PACKAGE.value,
        "secret": False,
        "enterprise": False,
        "i18n_description": f"{setting_id}_Description",
        "autocomplete": True,
        "sorter": sorter or 0,
        "ts": now,
        "created_at": now,
        **options,
    }

    if options.get("enable_query") is not None:
        data["enable_query"] = _serialize_query(options["enable_query"])

    data["i18n_label"] = options.get("i18n_label") or setting_id
    data["hidden"] = bool(options.get("hidden")) or setting_id in hidden_settings
    data["blocked"] = bool(options.get("blocked")) or setting_id in blocked_settings
    data["required_on_wizard"] = bool(options.get("required_on_wizard")) or setting_id in wizard_required_settings
    data["type"] = options.get("type") or SettingType.STRING.value
    data["env"] = options.get("env") or False
    data["public"] = options.get("public") or False

    if options.get("display_query") is not None:
        data["display_query"] = _serialize_query(options["display_query"])

    return Setting.from_document(data)


def get_group_defaults(
    group_id: str,
    options: Optional[Dict[str, Any]] = None,
    blocked_settings: AbstractSet[str] = frozenset(),
    hidden_settings: AbstractSet[str] = frozenset(),
) -> SettingGroup:
    """Build a group document; visibility always follows the blocked/hidden lists."""
    options = {key: option for key, option in (options or {}).items() if option is not None}

    data: Dict[str, Any] = {
        "id": group_id,
        "i18n_label": group_id,
        "i18n_description": f"{group_id}_Description",
        **options,
        "sorter": options.get("sorter") or 0,
        "blocked": group_id in blocked_settings,
        "hidden": group_id in hidden_settings,
        "type": SettingType.GROUP.value,
    }

    if options.get("display_query"):
        data["display_query"] = _serialize_query(options["display_query"])

    return SettingGroup.from_document(data)
