"""
SettingsModel - persistent settings collection on SQLAlchemy.

Every setting and group is one row. A handful of fields are copied into
columns for querying; the full document lives in a JSON column.
"""

import json
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import JSON, Column, DateTime, Integer, String, create_engine, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .exceptions import DuplicateSettingError
from .models import SettingDocument, SettingType, document_to_model

logger = logging.getLogger(__name__)

Base = declarative_base()

TIMESTAMP_KEYS = ("ts", "created_at", "updated_at")


class SettingRecord(Base):
    """
    Stored setting or group document.
    """
    __tablename__ = "settings"

    id = Column(String(255), primary_key=True)
    type = Column(String(50), nullable=False, default=SettingType.STRING.value)
    group_id = Column(String(255), index=True)
    section = Column(String(255))
    sorter = Column(Integer, default=0)
    value = Column(JSON)
    document = Column(JSON, nullable=False, default=dict)
    ts = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)


# Tagged JSON encoding so dates survive a save and reload
DATETIME_TAG = "$datetime"
DATE_TAG = "$date"


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return {DATETIME_TAG: value.isoformat()}
    if isinstance(value, date):
        return {DATE_TAG: value.isoformat()}
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _json_object_hook(obj: Dict[str, Any]) -> Any:
    if len(obj) == 1:
        if DATETIME_TAG in obj:
            return datetime.fromisoformat(obj[DATETIME_TAG])
        if DATE_TAG in obj:
            return date.fromisoformat(obj[DATE_TAG])
    return obj


def _json_dumps(value: Any) -> str:
    return json.dumps(value, default=_json_default)


def _json_loads(text: str) -> Any:
    return json.loads(text, object_hook=_json_object_hook)


def _as_document(setting: Union[SettingDocument, Dict[str, Any]]) -> Dict[str, Any]:
    return dict(setting) if isinstance(setting, dict) else setting.to_document()


class SettingsModel:
    """
    Persistent settings collection.

    Supports insert and partial upsert by id, plus the lookups the cache
    needs at startup.
    """

    def __init__(self, database_url: str = "sqlite://", engine=None):
        self.database_url = database_url
        if engine is None:
            engine = self._create_engine(database_url)
        self._engine = engine
        self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)

    @staticmethod
    def _create_engine(database_url: str):
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise each session sees an empty database
            return create_engine(
                database_url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
                json_serializer=_json_dumps,
                json_deserializer=_json_loads,
            )
        return create_engine(
            database_url,
            pool_pre_ping=True,
            json_serializer=_json_dumps,
            json_deserializer=_json_loads,
        )

    def create_schema(self) -> None:
        """Create the settings table if missing."""
        Base.metadata.create_all(self._engine)
        logger.info(f"Settings schema ready: {self.database_url.split('@')[-1]}")

    def dispose(self) -> None:
        """Close database connections."""
        self._engine.dispose()

    # === Writes ===

    def insert(self, setting: Union[SettingDocument, Dict[str, Any]]) -> None:
        """
        Insert a new document.

        Raises:
            DuplicateSettingError: If the id is already stored
        """
        doc = _as_document(setting)
        setting_id = doc["id"]

        with self._session_factory() as session:
            record = SettingRecord(id=setting_id, document={})
            self._apply(record, doc)
            session.add(record)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise DuplicateSettingError(setting_id) from e

        logger.debug(f"Inserted setting {setting_id}")

    def upsert(self, setting_id: str, fields: Dict[str, Any]) -> None:
        """
        Merge fields into a stored document, creating it when missing.

        Args:
            setting_id: Document id
            fields: Document keys to set; keys not given are left untouched
        """
        with self._session_factory() as session:
            record = session.get(SettingRecord, setting_id)
            if record is None:
                record = SettingRecord(id=setting_id, document={})
                session.add(record)
            self._apply(record, fields)
            record.updated_at = datetime.utcnow()
            session.commit()

        logger.debug(f"Upserted setting {setting_id}: {sorted(fields)}")

    def remove(self, setting_id: str) -> bool:
        """Delete a document. Returns False if it did not exist."""
        with self._session_factory() as session:
            record = session.get(SettingRecord, setting_id)
            if record is None:
                return False
            session.delete(record)
            session.commit()
        return True

    # === Reads ===

    def find_one(self, setting_id: str) -> Optional[SettingDocument]:
        with self._session_factory() as session:
            record = session.get(SettingRecord, setting_id)
            return self._to_model(record) if record is not None else None

    def find(self) -> List[SettingDocument]:
        """All documents ordered by group, section and sorter."""
        with self._session_factory() as session:
            records = session.scalars(
                select(SettingRecord).order_by(
                    SettingRecord.group_id, SettingRecord.section, SettingRecord.sorter, SettingRecord.id
                )
            ).all()
            return [self._to_model(record) for record in records]

    # === Private Methods ===

    @staticmethod
    def _apply(record: SettingRecord, fields: Dict[str, Any]) -> None:
        """Merge document fields into a record and refresh the indexed columns."""
        document = dict(record.document or {})
        for key, value in fields.items():
            if key == "id":
                continue
            if key in TIMESTAMP_KEYS:
                setattr(record, key, value)
                continue
            document[key] = value

        # Assign a new dict so the JSON column is flagged as changed
        record.document = document
        record.type = document.get("type") or SettingType.STRING.value
        record.group_id = document.get("group")
        record.section = document.get("section")
        record.sorter = document.get("sorter", 0)
        record.value = document.get("value")

    @staticmethod
    def _to_model(record: SettingRecord) -> SettingDocument:
        doc = dict(record.document or {})
        doc["id"] = record.id
        if doc.get("type") != SettingType.GROUP.value:
            doc.setdefault("value", None)

        model = document_to_model(doc)
        # Groups only track ts
        for key in TIMESTAMP_KEYS:
            stamp = getattr(record, key)
            if stamp is not None and hasattr(model, key):
                setattr(model, key, stamp)
        return model
