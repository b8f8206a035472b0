"""
Database Package

SQLAlchemy engine/session setup and the key-value store that
holds the session identity and the offence collection.
"""

from .database import Base, engine, SessionLocal, init_db
from .models import StorageEntry
from .kv_store import KeyValueStore

__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "init_db",
    "StorageEntry",
    "KeyValueStore",
]
