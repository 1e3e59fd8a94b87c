"""
Database configuration and session management for the maintenance tracker.
Uses SQLite during local development and any SQLAlchemy URL (PostgreSQL) in production.
"""

import sqlite3
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from typing import Generator

from app.config import settings

# Database URL
DATABASE_URL = settings.DATABASE_URL

# SQLite requires a specific connection argument
connect_args = (
    {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
)

# Create engine
engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,
    pool_pre_ping=True,        # Safely recycle DB connections
    echo=settings.DATABASE_ECHO
)


@event.listens_for(Engine, "connect")
def _configure_sqlite_connection(dbapi_connection, connection_record):
    """
    SQLite ships with foreign keys off and a case-insensitive LIKE.
    Turn on both behaviours PostgreSQL already has.
    """
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA case_sensitive_like=ON")
        cursor.close()


# Base class for models
class Base(DeclarativeBase):
    pass

# Session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

def get_db() -> Generator:
    """
    FastAPI dependency that provides a database session.
    Ensures proper cleanup after request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """
    Initialize the database by creating all defined tables.
    Called during application startup.
    """
    import app.models  # Import all ORM models
    Base.metadata.create_all(bind=engine)
