"""Tests for settings registry data models."""

from datetime import datetime

from arkham_settings_registry.models import (
    UNSET,
    Setting,
    SettingGroup,
    SettingType,
    ValueSource,
    document_to_model,
)


class TestEnums:
    """Test enum values used in documents."""

    def test_setting_type_values(self):
        assert SettingType.STRING.value == "string"
        assert SettingType.BOOLEAN.value == "boolean"
        assert SettingType.INT.value == "int"
        assert SettingType.SELECT.value == "select"
        assert SettingType.MULTI_SELECT.value == "multiSelect"
        assert SettingType.GROUP.value == "group"

    def test_value_source_values(self):
        assert ValueSource.PACKAGE.value == "packageValue"
        assert ValueSource.PROCESS_ENV.value == "processEnvValue"
        assert ValueSource.STORED.value == "storedValue"

    def test_enums_are_unwrapped(self):
        """Enum members passed in are stored as plain strings."""
        setting = Setting(id="X", value=True, type=SettingType.BOOLEAN, value_source=ValueSource.PROCESS_ENV)

        assert type(setting.type) is str
        assert setting.to_document()["type"] == "boolean"
        assert setting.to_document()["value_source"] == "processEnvValue"


class TestUnset:
    """Test the UNSET marker."""

    def test_singleton(self):
        assert type(UNSET)() is UNSET

    def test_falsy_and_repr(self):
        assert not UNSET
        assert repr(UNSET) == "UNSET"


class TestSetting:
    """Test Setting dataclass."""

    def test_defaults(self):
        setting = Setting(id="Site_Name", value="Arkham")

        assert setting.type == "string"
        assert setting.sorter == 0
        assert setting.autocomplete is True
        assert setting.invalid_value is UNSET
        assert setting.meta == {}

    def test_to_document_omits_unset_fields(self):
        doc = Setting(id="Site_Name", value="Arkham").to_document()

        assert doc["id"] == "Site_Name"
        assert doc["value"] == "Arkham"
        assert "group" not in doc
        assert "section" not in doc
        assert "invalid_value" not in doc
        assert "meta" not in doc

    def test_to_document_keeps_none_invalid_value(self):
        doc = Setting(id="X", value=1, enterprise=True, invalid_value=None).to_document()

        assert "invalid_value" in doc
        assert doc["invalid_value"] is None

    def test_meta_lifted_to_top_level(self):
        doc = Setting(id="X", value="a", meta={"multiline": True}).to_document()

        assert doc["multiline"] is True

    def test_from_document_collects_meta(self):
        setting = Setting.from_document({
            "id": "Theme",
            "value": "dark",
            "type": "select",
            "values": [{"key": "dark"}],
        })

        assert setting.type == "select"
        assert setting.meta == {"values": [{"key": "dark"}]}
        assert setting.invalid_value is UNSET

    def test_enterprise_properties(self):
        plain = Setting(id="X", value=1)
        enterprise = Setting(id="Y", value=1, enterprise=True, invalid_value=0)

        assert not plain.is_enterprise
        assert not plain.has_invalid_value
        assert enterprise.is_enterprise
        assert enterprise.has_invalid_value

    def test_copy_has_own_meta(self):
        setting = Setting(id="X", value=1, meta={"alert": "careful"})
        clone = setting.copy()
        clone.meta["alert"] = "changed"

        assert setting.meta["alert"] == "careful"
        assert clone == Setting(id="X", value=1, meta={"alert": "changed"})


class TestSettingGroup:
    """Test SettingGroup dataclass."""

    def test_group_document(self):
        now = datetime(2024, 1, 1)
        doc = SettingGroup(id="Accounts", i18n_label="Accounts", ts=now).to_document()

        assert doc == {
            "id": "Accounts",
            "type": "group",
            "i18n_label": "Accounts",
            "i18n_description": "",
            "sorter": 0,
            "hidden": False,
            "blocked": False,
            "ts": now,
        }


class TestDocumentToModel:
    """Test dispatch between settings and groups."""

    def test_group_document(self):
        assert isinstance(document_to_model({"id": "Accounts", "type": "group"}), SettingGroup)

    def test_setting_document(self):
        model = document_to_model({"id": "Accounts_Enabled", "type": "boolean", "value": True})

        assert isinstance(model, Setting)
        assert model.value is True
