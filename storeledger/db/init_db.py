"""
Startup schema check for the ledger database.

Called from the application lifespan before any request is served. Stores
and staff accounts are provisioned by the sign-up flow, so nothing is seeded
here.
"""

from __future__ import annotations

import logging
from typing import Optional

from storeledger.core.exceptions import StorageError
from storeledger.db.database import DatabaseManager

# Registers the ledger tables on Base.metadata
from storeledger.db import models  # noqa: F401


logger = logging.getLogger(__name__)


class DatabaseInitializer:

    def __init__(self, db_manager: Optional[DatabaseManager] = None) -> None:
        self._db_manager = db_manager or DatabaseManager()

    def initialize(self) -> None:
        """
        Raises:
            StorageError: If the ledger database does not answer
        """
        if not self._db_manager.verify_connection():
            raise StorageError("Ledger database is not reachable")

        self._db_manager.create_tables()
        logger.info(f"🗄️ Ledger schema ready ({', '.join(sorted(models.Base.metadata.tables))})")


def init_db() -> None:
    DatabaseInitializer().initialize()
