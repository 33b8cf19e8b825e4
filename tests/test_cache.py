"""Tests for the settings cache."""

from unittest.mock import MagicMock

from arkham_settings_registry.cache import CachedSettings
from arkham_settings_registry.models import Setting, SettingGroup


class TestCachedSettings:
    """Test CachedSettings lookups."""

    def test_initial_state(self, store):
        assert len(store) == 0
        assert store.initialized is False

    def test_set_and_get(self, store):
        store.set(Setting(id="Site_Name", value="Arkham"))

        assert store.has("Site_Name")
        assert "Site_Name" in store
        assert store.get("Site_Name") == "Arkham"
        assert store.get_setting("Site_Name").id == "Site_Name"

    def test_missing_setting(self, store):
        assert not store.has("Nope")
        assert store.get_setting("Nope") is None
        assert store.get("Nope") is None
        assert store.get("Nope", "fallback") == "fallback"

    def test_group_has_no_value(self, store):
        store.set(SettingGroup(id="General"))

        assert store.has("General")
        assert store.get("General", "fallback") == "fallback"

    def test_set_replaces(self, store):
        store.set(Setting(id="Site_Name", value="Arkham"))
        store.set(Setting(id="Site_Name", value="Shattered"))

        assert store.get("Site_Name") == "Shattered"
        assert len(store) == 1


class TestCacheLoad:
    """Test loading from the persistent model."""

    def test_load_from_model(self, model):
        model.insert(SettingGroup(id="General"))
        model.insert(Setting(id="Site_Name", value="Arkham", group="General"))
        cache = CachedSettings()

        count = cache.load(model)

        assert count == 2
        assert cache.initialized is True
        assert "General" in cache
        assert "Site_Name" in cache
        assert cache.get("Site_Name") == "Arkham"

    def test_load_replaces_contents(self):
        model = MagicMock()
        model.find.return_value = [Setting(id="Fresh", value=1)]
        cache = CachedSettings()
        cache.set(Setting(id="Stale", value=0))

        cache.load(model)

        assert not cache.has("Stale")
        assert cache.get("Fresh") == 1
