"""
==============================================================================
Store Ledger - Application Entry Point
==============================================================================

Startup creates the ledger schema and, unless RETENTION_ENABLED is false,
schedules the daily retention sweep. Shutdown cancels the sweep and releases
database connections.

Usage:
------
    uvicorn storeledger.main:app --reload
    python -m storeledger.main

==============================================================================
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from storeledger import __version__
from storeledger.api.router import api_router
from storeledger.config import Settings, get_settings
from storeledger.core.exceptions import register_exception_handlers
from storeledger.db import init_db
from storeledger.db.database import DatabaseManager
from storeledger.services.retention_service import RetentionTaskManager


settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

logger = logging.getLogger(__name__)


class Application:
    """Builds the FastAPI app and ties the retention task to its lifespan."""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._retention = RetentionTaskManager()
        self.app = FastAPI(
            title=settings.app_name,
            version=__version__,
            description="Shift time cards and inventory logs for convenience stores",
            lifespan=self._lifespan,
        )

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins_list,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
        register_exception_handlers(self.app)
        self.app.include_router(api_router)
        self.app.add_api_route("/", self._docs_redirect, include_in_schema=False)

    @staticmethod
    async def _docs_redirect():
        return RedirectResponse(url="/docs")

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        logger.info(f"🚀 {self._settings.app_name} starting ({self._settings.app_env}, {self._settings.timezone})")
        init_db()

        if self._settings.retention_enabled:
            self._retention.start()
        else:
            logger.info("⏸️ Retention sweep disabled")

        yield

        self._retention.stop()
        DatabaseManager().dispose()
        logger.info("🛑 Store ledger stopped")


app = Application(settings).app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storeledger.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
