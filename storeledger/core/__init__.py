"""
Errors and access tokens.

``storeledger.core.dependencies`` is not re-exported here because it needs
the database layer; routers import it directly.
"""

from .exceptions import (
    AppException,
    NotFoundError,
    ParseError,
    StorageError,
    register_exception_handlers,
)
from .security import SecurityManager, get_security_manager

__all__ = [
    "AppException",
    "NotFoundError",
    "ParseError",
    "StorageError",
    "register_exception_handlers",
    "SecurityManager",
    "get_security_manager",
]
