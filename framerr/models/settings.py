"""System configuration key/value store."""

import json
from typing import Any

from sqlalchemy import Column, String, Text

from framerr.models import Base

# Setting keys
SETTING_NOTIFICATION_RETENTION_DAYS = "notification_retention_days"
DEFAULT_NOTIFICATION_RETENTION_DAYS = 30


class Settings(Base):
    """
    Key/value rows backing the system configuration.

    Structured sections (``integrations``, ``auth`` ...) are stored as JSON
    documents under their top-level key. Scalar settings use the typed
    helpers.
    """

    __tablename__ = "system_config"

    key = Column(String(50), primary_key=True)
    value = Column(Text, nullable=False, default="")

    @classmethod
    def get(cls, db, key: str, default: str = "") -> str:
        setting = db.get(cls, key)
        return setting.value if setting else default

    @classmethod
    def set(cls, db, key: str, value: str, commit: bool = True) -> None:
        """
        Insert or update a setting.

        Args:
            db: Database session.
            key: The setting key.
            value: The value to store.
            commit: Whether to commit the transaction.
        """
        setting = db.get(cls, key)
        if setting:
            setting.value = value
        else:
            db.add(cls(key=key, value=value))
        if commit:
            db.commit()

    @classmethod
    def get_int(cls, db, key: str, default: int = 0) -> int:
        value = cls.get(db, key, str(default))
        try:
            return int(value)
        except ValueError:
            return default

    @classmethod
    def set_int(cls, db, key: str, value: int, commit: bool = True) -> None:
        cls.set(db, key, str(value), commit=commit)

    @classmethod
    def get_json(cls, db, key: str, default: Any = None) -> Any:
        """Decode a JSON setting, falling back to ``default`` on bad data."""
        raw = cls.get(db, key)
        if not raw:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return default

    @classmethod
    def set_json(cls, db, key: str, value: Any, commit: bool = True) -> None:
        cls.set(db, key, json.dumps(value), commit=commit)

    @classmethod
    def all_json(cls, db) -> dict[str, Any]:
        """Every row decoded as JSON; rows that aren't JSON are skipped."""
        result = {}
        for setting in db.query(cls).all():
            try:
                result[setting.key] = json.loads(setting.value)
            except json.JSONDecodeError:
                continue
        return result
