"""
Key-Value Store

String slots persisted in the `storage_entries` table. Each call opens
its own session, so every write is a whole-value replacement that is
either committed or rolled back.
"""

from typing import Optional, Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .database import SessionLocal
from .models import StorageEntry


class KeyValueStore:
    """
    Durable key-value store backed by SQLAlchemy

    Usage:
        store = KeyValueStore()
        store.set_item("frsc_user", '{"email": "...", "role": "admin"}')
        raw = store.get_item("frsc_user")
        store.remove_item("frsc_user")
    """

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        """
        Args:
            session_factory: Callable returning a new SQLAlchemy session
        """
        self._session_factory = session_factory

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the slot is empty"""
        db = self._session_factory()
        try:
            entry = db.get(StorageEntry, key)
            return entry.value if entry else None
        finally:
            db.close()

    def set_item(self, key: str, value: str):
        """Replace the slot's value"""
        db = self._session_factory()
        try:
            entry = db.get(StorageEntry, key)
            if entry:
                entry.value = value
            else:
                db.add(StorageEntry(key=key, value=value))
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            print(f"[WARN] Could not write storage slot '{key}': {e}")
            raise
        finally:
            db.close()

    def remove_item(self, key: str):
        """Clear the slot (no-op if already empty)"""
        db = self._session_factory()
        try:
            entry = db.get(StorageEntry, key)
            if entry:
                db.delete(entry)
                db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            print(f"[WARN] Could not clear storage slot '{key}': {e}")
            raise
        finally:
            db.close()

    def keys(self) -> list:
        """List occupied slot names"""
        db = self._session_factory()
        try:
            return [row.key for row in db.query(StorageEntry).order_by(StorageEntry.key).all()]
        finally:
            db.close()
