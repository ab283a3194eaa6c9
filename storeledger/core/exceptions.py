"""
Store Ledger Errors

Everything the API reports as an error is an AppException carrying a
machine-readable code and an HTTP status. Services raise the subclasses
below; one FastAPI handler renders them all as

    {"success": false, "error": {"code", "message", "timestamp", "details"?}}

    AppException          401 TOKEN_EXPIRED / TOKEN_INVALID, 403 MANAGER_REQUIRED
    ├── NotFoundError     404 USER_NOT_FOUND / STORE_NOT_FOUND / TIME_CARD_NOT_FOUND
    ├── ParseError        422 INVALID_WORK_TIME
    └── StorageError      500 STORAGE_ERROR
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class AppException(Exception):

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Error envelope returned to clients."""
        error: Dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "timestamp": self.timestamp,
        }
        if self.details:
            error["details"] = self.details
        return {"success": False, "error": error}


class NotFoundError(AppException):
    """A user, a user's store or a time card is missing."""

    def __init__(
        self,
        message: str,
        code: str = "NOT_FOUND",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code, 404, details)


class ParseError(AppException):
    """A time card's work time or date cannot be turned into a shift window."""

    def __init__(
        self,
        message: str,
        work_time: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        details = dict(details or {})
        if work_time is not None:
            details["work_time"] = work_time
        super().__init__(message, "INVALID_WORK_TIME", 422, details)
        self.work_time = work_time


class StorageError(AppException):
    """The database rejected a write or query; the transaction was rolled back."""

    def __init__(
        self,
        message: str = "Storage operation failed",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, "STORAGE_ERROR", 500, details)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)


# ============================================
# FACTORY FUNCTIONS
# ============================================

def token_expired() -> AppException:
    return AppException("Access token has expired", "TOKEN_EXPIRED", 401)


def token_invalid() -> AppException:
    return AppException("Missing or invalid access token", "TOKEN_INVALID", 401)


def manager_required() -> AppException:
    return AppException("Only store managers may do this", "MANAGER_REQUIRED", 403)


def user_not_found(kakao_email: Optional[str] = None) -> NotFoundError:
    details = {"kakao_email": kakao_email} if kakao_email else {}
    return NotFoundError("No staff account for this token", "USER_NOT_FOUND", details)


def store_not_assigned(kakao_email: Optional[str] = None) -> NotFoundError:
    details = {"kakao_email": kakao_email} if kakao_email else {}
    return NotFoundError("User is not assigned to a store", "STORE_NOT_FOUND", details)


def time_card_not_found(time_card_id: Optional[int] = None) -> NotFoundError:
    details = {"time_card_id": time_card_id} if time_card_id is not None else {}
    return NotFoundError("Time card not found in this store", "TIME_CARD_NOT_FOUND", details)
