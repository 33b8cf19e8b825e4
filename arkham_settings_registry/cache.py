"""
CachedSettings - in-process read path for current setting values.
"""

import logging
from typing import Any, Dict, Optional

from .models import Setting, SettingDocument

logger = logging.getLogger(__name__)


class CachedSettings:
    """
    Current settings and groups keyed by id.

    Filled from the persistent model at startup and by the registry when a
    setting is inserted for the first time.
    """

    def __init__(self):
        self._settings: Dict[str, SettingDocument] = {}
        self.initialized = False

    def has(self, setting_id: str) -> bool:
        return setting_id in self._settings

    def get_setting(self, setting_id: str) -> Optional[SettingDocument]:
        return self._settings.get(setting_id)

    def get(self, setting_id: str, default: Any = None) -> Any:
        """Get the current value of a setting (groups have no value)."""
        setting = self._settings.get(setting_id)
        if not isinstance(setting, Setting):
            return default
        return setting.value

    def set(self, setting: SettingDocument) -> None:
        self._settings[setting.id] = setting

    def load(self, model) -> int:
        """
        Replace the cache contents with every document in the model.

        Returns:
            Number of documents loaded
        """
        documents = model.find()
        self._settings = {doc.id: doc for doc in documents}
        self.initialized = True
        logger.debug(f"Loaded {len(documents)} settings into cache")
        return len(documents)

    def __contains__(self, setting_id: str) -> bool:
        return self.has(setting_id)

    def __len__(self) -> int:
        return len(self._settings)
