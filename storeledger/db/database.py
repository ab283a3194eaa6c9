"""
==============================================================================
Database Module
==============================================================================

Engine and session handling for the store ledger.

One DatabaseManager per process owns the engine. Request handlers get their
session through get_db(); the retention task opens its own session for each
daily run.

    request ──► get_db() ──┐
                           ├──► DatabaseManager ──► Engine ──► SQLite / server DB
    05:00 sweep ───────────┘

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Generator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from storeledger.config import get_settings


# Module logger
logger = logging.getLogger(__name__)

# Declarative base shared by stores, users, time cards and inventory records
Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # Time card and record cascades rely on SQLite enforcing foreign keys.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _engine_options(database_url: str, echo: bool) -> Dict[str, Any]:
    """Keyword arguments for create_engine, per backend."""
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}, "echo": echo}

    return {
        "pool_size": 5,
        "max_overflow": 10,
        "pool_recycle": 1800,
        "pool_pre_ping": True,
        "echo": echo,
    }


class DatabaseManager:
    """
    Process-wide owner of the ledger engine.

    Nothing connects until the engine is first used, so tests can point
    DATABASE_URL elsewhere before the app starts.
    """

    _instance: Optional[DatabaseManager] = None

    def __new__(cls) -> DatabaseManager:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._engine = None
            cls._instance._session_factory = None
        return cls._instance

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            settings = get_settings()
            url = settings.database_url

            self._engine = create_engine(url, **_engine_options(url, settings.debug))
            if url.startswith("sqlite"):
                event.listen(self._engine, "connect", _enable_sqlite_foreign_keys)

            logger.info(f"Ledger database engine created: {url}")
        return self._engine

    def get_session(self) -> Session:
        """
        Open a new session; the caller closes it.

        Sessions keep loaded attributes after commit, so snapshots can be
        built from a row right after it is stored.
        """
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.engine,
                autoflush=False,
                expire_on_commit=False,
            )
        return self._session_factory()

    def create_tables(self) -> None:
        """Create the ledger tables that are missing."""
        Base.metadata.create_all(bind=self.engine)
        logger.info("Ledger tables created/verified")

    def verify_connection(self) -> bool:
        """True when a trivial query succeeds."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error(f"Ledger database unreachable: {e}")
            return False
        return True

    def dispose(self) -> None:
        """Release pooled connections on shutdown."""
        if self._engine is not None:
            self._engine.dispose()
            logger.info("Ledger database connections released")


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: one session per request, closed afterwards."""
    session = DatabaseManager().get_session()
    try:
        yield session
    finally:
        session.close()
