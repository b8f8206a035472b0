"""
Database Configuration and Session Management

This module provides the SQLAlchemy engine, session factory
and database initialization for the durable key-value store.
"""

import os
from pathlib import Path
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

# Ensure data directory exists
DATA_DIR = Path(__file__).parent.parent.parent / "data"
DATA_DIR.mkdir(exist_ok=True)

# Database URL - SQLite by default
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"sqlite:///{DATA_DIR}/frsc_offences.db"
)

# Create SQLAlchemy engine
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},
    echo=False  # Set to True for SQL debugging
)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for ORM models
Base = declarative_base()


def init_db(bind=None):
    """
    Initialize database - create all tables

    Called on application startup to ensure the storage table exists.

    Args:
        bind: Engine to create tables on (default: module engine)
    """
    # Import all models to ensure they're registered with Base
    from offence_system.database import models  # noqa: F401

    target = bind if bind is not None else engine
    Base.metadata.create_all(bind=target)

    print(f"[OK] Database initialized at: {target.url}")
