"""
Settings Registry - Data Models

Dataclasses and enums for declared and stored settings.

Settings and groups share one document shape: ``to_document`` flattens a
dataclass into a plain dict (type-specific ``meta`` keys are lifted to the top
level) and ``from_document`` turns such a dict back into a dataclass, collecting
unknown keys into ``meta``.
"""

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class _Unset:
    """Marker for an option that was never given (``None`` is a real value)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()


# === Enums ===

class SettingType(str, Enum):
    """Type tags a setting can be declared with."""
    BOOLEAN = "boolean"
    STRING = "string"
    INT = "int"
    SELECT = "select"
    MULTI_SELECT = "multiSelect"
    PASSWORD = "password"
    RELATIVE_URL = "relativeUrl"
    LANGUAGE = "language"
    COLOR = "color"
    FONT = "font"
    CODE = "code"
    ACTION = "action"
    ASSET = "asset"
    ROOM_PICK = "roomPick"
    TIMEZONE = "timezone"
    DATE = "date"
    TIMESPAN = "timespan"
    LOOKUP = "lookup"
    GROUP = "group"           # Only used by SettingGroup documents


class ValueSource(str, Enum):
    """Where the current value of a setting came from."""
    PACKAGE = "packageValue"          # Default declared in code
    PROCESS_ENV = "processEnvValue"   # Environment variable
    STORED = "storedValue"            # Edited and persisted by an administrator


def _plain(value: Any) -> Any:
    """Unwrap str-enums so documents only hold plain values."""
    return value.value if isinstance(value, Enum) else value


# === Dataclasses ===

class DocumentMixin:
    """Conversion between dataclasses and flat storage documents."""

    # Optional fields where None is a meaningful value and must survive
    KEEP_NONE: frozenset = frozenset()

    def to_document(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {}
        for f in fields(self):
            if f.name == "meta":
                continue
            value = getattr(self, f.name)
            if value is UNSET or (value is None and f.name not in self.KEEP_NONE):
                continue
            doc[f.name] = _plain(value)
        for key, value in self.meta.items():
            doc.setdefault(key, value)
        return doc

    @classmethod
    def from_document(cls, doc: Dict[str, Any]):
        known = {f.name for f in fields(cls)} - {"meta"}
        kwargs = {key: value for key, value in doc.items() if key in known}
        meta = {key: value for key, value in doc.items() if key not in known}
        return cls(**kwargs, meta=meta)

    def copy(self):
        """Shallow copy with its own meta dict."""
        return replace(self, meta=dict(self.meta))


@dataclass
class Setting(DocumentMixin):
    """
    A declared or stored setting.
    """
    id: str                                   # Unique identifier (e.g., "Accounts_Enabled")
    value: Any                                # Current value
    type: str = SettingType.STRING.value      # Type tag

    # Provenance
    package_value: Any = None                 # Default declared in code
    value_source: str = ValueSource.PACKAGE.value
    process_env_value: Any = None             # Value taken from the environment

    # Placement
    group: Optional[str] = None
    section: Optional[str] = None             # Scoped within the group
    sorter: int = 0                           # Display order within group/section

    # Display
    i18n_label: str = ""
    i18n_description: str = ""
    public: bool = False
    env: bool = False
    secret: bool = False
    autocomplete: bool = True
    enable_query: Optional[str] = None        # Serialized JSON query
    display_query: Optional[str] = None       # Serialized JSON query

    # Licensing and visibility
    enterprise: bool = False
    invalid_value: Any = UNSET                # Value served when the license is missing
    modules: Optional[List[str]] = None
    required_on_wizard: bool = False
    hidden: bool = False
    blocked: bool = False

    # Tracking
    ts: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Type-specific metadata (values, multiline, placeholder, ...)
    meta: Dict[str, Any] = field(default_factory=dict)

    KEEP_NONE = frozenset({"invalid_value"})

    def __post_init__(self):
        self.type = _plain(self.type)
        self.value_source = _plain(self.value_source)

    @property
    def is_enterprise(self) -> bool:
        return self.enterprise is True

    @property
    def has_invalid_value(self) -> bool:
        return self.invalid_value is not UNSET


@dataclass
class SettingGroup(DocumentMixin):
    """
    A named collection of settings, stored next to them as a pseudo-setting.
    """
    id: str
    type: str = SettingType.GROUP.value
    i18n_label: str = ""
    i18n_description: str = ""
    sorter: int = 0
    hidden: bool = False
    blocked: bool = False
    display_query: Optional[str] = None
    ts: Optional[datetime] = None
    meta: Dict[str, Any] = field(default_factory=dict)


SettingDocument = Union[Setting, SettingGroup]


def document_to_model(doc: Dict[str, Any]) -> SettingDocument:
    """Build a SettingGroup or Setting from a stored document."""
    if doc.get("type") == SettingType.GROUP.value:
        return SettingGroup.from_document(doc)
    return Setting.from_document(doc)
