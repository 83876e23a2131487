"""
Database connection management for the plugin catalog.

Provides database session management, connection handling, and transaction support.
The engine is created on first use so that importing the package does not
require a database driver.
"""

import logging
from contextlib import contextmanager
from functools import lru_cache
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from plugin_catalog.config import settings

logger = logging.getLogger(__name__)


def enable_sqlite_savepoints(engine: Engine) -> None:
    """
    Let pysqlite run SAVEPOINTs inside the session transaction.

    pysqlite defers BEGIN until the first DML statement, so a SAVEPOINT issued
    earlier opens (and its RELEASE commits) a transaction of its own. Turning
    off the driver's transaction handling and emitting BEGIN ourselves keeps
    savepoints nested in the outer transaction.
    """

    @event.listens_for(engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """
    Get the process-wide engine for the configured database.

    Returns:
        Engine: SQLAlchemy engine (created once)
    """
    if settings.database_url.startswith("sqlite"):
        engine = create_engine(
            settings.database_url,
            echo=False,
            connect_args={"check_same_thread": False},
            pool_pre_ping=True,
        )
        enable_sqlite_savepoints(engine)
        return engine

    return create_engine(
        settings.database_url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before using
    )


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker:
    """Get the session factory bound to the process-wide engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


@contextmanager
def db_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions with automatic cleanup.

    Commits on success, rolls back on exception.

    Yields:
        Session: A SQLAlchemy session

    Example:
        >>> with db_session() as db:
        >>>     repo = PluginRepository(db)
        >>>     repo.list_all()
    """
    session = get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db() -> None:
    """
    Initialize the database.

    Creates tables programmatically. Prefer Alembic migrations outside
    development: `alembic upgrade head`
    """
    from plugin_catalog.models.db import Base

    Base.metadata.create_all(bind=get_engine())


def check_connection() -> bool:
    """
    Check if database connection is working.

    Returns:
        bool: True if connection successful, False otherwise
    """
    try:
        with db_session() as db:
            db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(f"Database connection failed: {e}")
        return False
