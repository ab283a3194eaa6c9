"""
==============================================================================
Health Check Endpoints
==============================================================================

Liveness, readiness and a status report covering the ledger database and
the daily retention task.

==============================================================================
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storeledger.config import get_settings
from storeledger.db.database import get_db
from storeledger.services.retention_service import RetentionTaskManager
from storeledger.utils.clock import now_local


router = APIRouter(prefix="/health", tags=["Health"])


class HealthController:
    """Collects the status of the parts a store depends on."""

    def __init__(self, db: Session):
        self._db = db
        self._settings = get_settings()

    def database_ok(self) -> bool:
        try:
            self._db.execute(text("SELECT 1"))
        except SQLAlchemyError:
            return False
        return True

    def report(self) -> dict:
        retention = RetentionTaskManager()
        db_ok = self.database_ok()

        return {
            "status": "healthy" if db_ok else "degraded",
            "store_time": now_local(self._settings.tzinfo).isoformat(timespec="seconds"),
            "timezone": self._settings.timezone,
            "components": {
                "database": "healthy" if db_ok else "unhealthy",
                "retention_task": "running" if retention.is_running else "stopped",
            },
            "retention": {
                "days": self._settings.retention_days,
                "next_run_in_seconds": int(retention.seconds_until_next_run()),
            },
        }


@router.get("")
async def health_check(db: Session = Depends(get_db)):
    """Database and retention task status, with the store clock."""
    return HealthController(db).report()


@router.get("/ready")
async def readiness_check(db: Session = Depends(get_db)):
    """Ready once the ledger database answers."""
    if not HealthController(db).database_ok():
        return JSONResponse(status_code=503, content={"ready": False})
    return {"ready": True}


@router.get("/live")
async def liveness_check():
    """The process is up."""
    return {"alive": True}
