"""
SQLAlchemy ORM Models

The application keeps its state the way a browser keeps local storage:
one row per named slot, holding a JSON string.
"""

from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from .database import Base


class StorageEntry(Base):
    """
    Durable key-value slot

    Keys in use: `frsc_user` (session identity) and
    `frsc_offences` (ordered offence collection).
    """
    __tablename__ = "storage_entries"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<StorageEntry {self.key} ({len(self.value or '')} chars)>"
