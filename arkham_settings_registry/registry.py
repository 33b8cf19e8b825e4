"""
Settings Registry - declaration and reconciliation of settings.

Application code declares settings with ``add`` and groups with ``add_group``.
Each declaration is reconciled against the stored document:

- structural drift (type, group, label, ...) re-syncs every field but the value
- an environment overwrite replaces a stored value that differs from it
- otherwise an existing stored value always wins
- unknown settings are inserted and mirrored into the cache
"""

import logging
from datetime import datetime
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Union

from .config import RegistryConfig
from .defaults import get_group_defaults, get_setting_defaults
from .exceptions import EnterpriseSettingError, InvalidArgumentsError, SettingValidationError
from .models import UNSET, SettingDocument, SettingType
from .overrides import override_setting, overwrite_setting
from .utils import format_error_message
from .validation import validate_setting

logger = logging.getLogger(__name__)

# Fields allowed to differ between code and storage without a re-sync
IGNORED_COMPARE_KEYS = frozenset({
    "value",
    "ts",
    "created_at",
    "value_source",
    "package_value",
    "process_env_value",
    "updated_at",
})


def compare_settings_ignoring_keys(keys: Iterable[str]) -> Callable[[SettingDocument, SettingDocument], bool]:
    """Build an equality check over the union of both documents' keys, minus ``keys``."""
    ignored = frozenset(keys)

    def compare(a: SettingDocument, b: SettingDocument) -> bool:
        doc_a, doc_b = a.to_document(), b.to_document()
        return all(
            doc_a.get(key, UNSET) == doc_b.get(key, UNSET)
            for key in doc_a.keys() | doc_b.keys()
            if key not in ignored
        )

    return compare


compare_settings = compare_settings_ignoring_keys(IGNORED_COMPARE_KEYS)


class SorterState:
    """
    Next sort index per scope.

    Setting scopes are keyed by group or ``group_section``; group scopes by
    group id. Both start at 0 and only ever grow.
    """

    def __init__(self):
        self._settings: Dict[str, int] = {}
        self._groups: Dict[str, int] = {}

    def next_setting(self, key: str) -> int:
        self._settings[key] = self._settings.get(key, -1) + 1
        return self._settings[key]

    def next_group(self, key: str) -> int:
        self._groups[key] = self._groups.get(key, -1) + 1
        return self._groups[key]


class SettingsRegistry:
    """
    Declares settings and reconciles them with the stored documents.

    Not thread-safe: declarations run once, serially, during startup.
    """

    def __init__(
        self,
        store,
        model,
        config: Optional[RegistryConfig] = None,
        *,
        sorter: Optional[SorterState] = None,
        defaults_builder: Callable[..., Any] = get_setting_defaults,
        overwrite: Callable[[Any], Any] = overwrite_setting,
        override: Callable[[Any], Any] = override_setting,
        validator: Callable[[str, str, Any], None] = validate_setting,
    ):
        self._store = store
        self._model = model
        self._config = config if config is not None else RegistryConfig()
        self._sorter = sorter or SorterState()
        self._defaults_builder = defaults_builder
        self._overwrite = overwrite
        self._override = override
        self._validator = validator

    @property
    def config(self) -> RegistryConfig:
        return self._config

    @property
    def sorter(self) -> SorterState:
        return self._sorter

    def add(self, setting_id: str, value: Any, **options: Any) -> None:
        """
        Declare a setting.

        Args:
            setting_id: Unique setting id
            value: Code default, must not be None
            **options: Any Setting field (group, section, sorter, type, ...)
                or type-specific metadata

        Raises:
            InvalidArgumentsError: If the id is empty or the value is None
            EnterpriseSettingError: If an enterprise setting has no invalid_value
        """
        if not setting_id or value is None:
            raise InvalidArgumentsError("add", setting_id)

        sorter = options.pop("sorter", None)
        group = options.pop("group", None)
        section = options.pop("section", None)

        sorter_key = f"{group}_{section}" if group and section else group
        if sorter_key:
            position = self._sorter.next_setting(sorter_key)
            if sorter is None:
                sorter = position

        setting_from_code = self._defaults_builder(
            {
                "type": SettingType.STRING.value,
                **options,
                "id": setting_id,
                "value": value,
                "group": group,
                "section": section,
                "sorter": sorter,
            },
            self._config.blocked_settings,
            self._config.hidden_settings,
            self._config.wizard_required_settings,
        )

        if setting_from_code.is_enterprise and not setting_from_code.has_invalid_value:
            error = EnterpriseSettingError(setting_id)
            logger.error(str(error))
            raise error

        setting_stored = self._store.get_setting(setting_id)
        setting_overwritten = self._overwrite(setting_from_code)
        self._diagnose("Invalid setting code", setting_from_code.id, setting_from_code.type, setting_from_code.value)

        is_overwritten = setting_overwritten is not setting_from_code

        if setting_stored is not None and not compare_settings(setting_stored, setting_overwritten):
            fields = setting_overwritten.to_document()
            fields.pop("id")
            fields.pop("value")
            logger.debug(f"Setting {setting_id} changed in code, updating stored metadata")
            self._model.upsert(setting_id, fields)
            return

        if setting_stored is not None and is_overwritten:
            if setting_stored.value != setting_overwritten.value:
                fields = setting_overwritten.to_document()
                fields.pop("id")
                logger.debug(f"Setting {setting_id} overwritten from environment")
                self._model.upsert(setting_id, fields)
            return

        if setting_stored is not None:
            self._diagnose("Invalid setting stored", setting_id, setting_from_code.type, setting_stored.value)
            return

        setting_overwritten_default = self._override(setting_from_code)
        setting = setting_overwritten if is_overwritten else setting_overwritten_default

        self._model.insert(setting)
        self._store.set(setting)

    def add_group(
        self,
        group_id: str,
        group_options: Union[Mapping[str, Any], Callable[["GroupBuilder"], None], None] = None,
        callback: Optional[Callable[["GroupBuilder"], None]] = None,
    ) -> "GroupBuilder":
        """
        Declare a group and, optionally, its settings.

        Either ``add_group(id, callback)`` or ``add_group(id, options, callback)``.
        The callback receives a GroupBuilder whose ``add`` presets ``group=id``.

        Returns:
            The GroupBuilder, so settings can also be added after the call

        Raises:
            InvalidArgumentsError: If the id is empty or two callbacks are given
        """
        if not group_id or (callable(group_options) and callback is not None):
            raise InvalidArgumentsError("add_group", group_id)

        if callable(group_options):
            callback, group_options = group_options, None

        position = self._sorter.next_group(group_id)
        group = get_group_defaults(
            group_id,
            {"sorter": position, **(group_options or {})},
            self._config.blocked_settings,
            self._config.hidden_settings,
        )

        # Stored groups are never re-synced with the declaration
        if not self._store.has(group_id):
            group.ts = datetime.utcnow()
            self._model.insert(group)
            self._store.set(group)

        builder = GroupBuilder(self, {"group": group_id})
        if callback is not None:
            callback(builder)
        return builder

    def _diagnose(self, message: str, setting_id: str, setting_type: str, value: Any) -> None:
        """Validate a value; failures are development-mode log lines only."""
        try:
            self._validator(setting_id, setting_type, value)
        except SettingValidationError as e:
            if self._config.development:
                logger.error(format_error_message(message, e, setting_id=setting_id, type=setting_type))


class _PresetBuilder:
    """Adds settings with a fixed set of preset options."""

    def __init__(self, registry: SettingsRegistry, preset: Mapping[str, Any]):
        self._registry = registry
        self._preset = MappingProxyType(dict(preset))

    @property
    def preset(self) -> Mapping[str, Any]:
        return self._preset

    def add(self, setting_id: str, value: Any, **options: Any) -> None:
        """Declare a setting; explicit options win over the preset."""
        self._registry.add(setting_id, value, **{**self._preset, **options})

    def _merged(self, options: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        return {**self._preset, **(options or {})}


class SectionBuilder(_PresetBuilder):
    """Builder scoped to one section of a group."""

    def with_options(
        self,
        options: Optional[Mapping[str, Any]] = None,
        callback: Optional[Callable[["SectionBuilder"], None]] = None,
    ) -> "SectionBuilder":
        """Nested builder sharing extra options across several ``add`` calls."""
        builder = SectionBuilder(self._registry, self._merged(options))
        if callback is not None:
            callback(builder)
        return builder


class GroupBuilder(_PresetBuilder):
    """Builder scoped to a group."""

    def section(
        self,
        name: str,
        callback: Optional[Callable[[SectionBuilder], None]] = None,
    ) -> SectionBuilder:
        builder = SectionBuilder(self._registry, {**self._preset, "section": name})
        if callback is not None:
            callback(builder)
        return builder

    def with_options(
        self,
        options: Optional[Mapping[str, Any]] = None,
        callback: Optional[Callable[["GroupBuilder"], None]] = None,
    ) -> "GroupBuilder":
        """Nested builder sharing extra options across several ``add`` calls."""
        builder = GroupBuilder(self._registry, self._merged(options))
        if callback is not None:
            callback(builder)
        return builder
