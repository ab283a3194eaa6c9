"""
==============================================================================
FastAPI Dependencies Module
==============================================================================

Turns the bearer token on a request into the calling staff member.

        get_db()  +  Authorization: Bearer <token>
                 │
        ┌────────▼────────┐
        │get_current_user │  token subject (Kakao e-mail) → User + Store
        └────────┬────────┘
                 │
        ┌────────▼────────┐
        │ require_manager │  retention and other store maintenance
        └─────────────────┘

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from storeledger.core.exceptions import manager_required, token_invalid
from storeledger.core.security import SecurityManager, get_security_manager
from storeledger.db.database import get_db
from storeledger.db.models import User
from storeledger.services.user_service import UserService


# Module logger
logger = logging.getLogger(__name__)

# auto_error is off so a missing header yields our TOKEN_INVALID envelope
bearer_scheme = HTTPBearer(auto_error=False)


class AuthenticationManager:
    """
    Maps access tokens to staff accounts.

    Example:
        >>> auth = AuthenticationManager(get_security_manager(), db_session)
        >>> user = auth.resolve_user(credentials)
    """

    def __init__(self, security: SecurityManager, db: Session) -> None:
        self._security = security
        self._users = UserService(db)

    def resolve_user(self, credentials: Optional[HTTPAuthorizationCredentials]) -> User:
        """
        Raises:
            AppException: TOKEN_INVALID / TOKEN_EXPIRED for a missing or bad token
            NotFoundError: USER_NOT_FOUND if nobody has the token's Kakao e-mail
        """
        if credentials is None:
            raise token_invalid()

        kakao_email = self._security.verify_token(credentials.credentials)
        return self._users.get_by_email(kakao_email)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """The staff member making the request, with their store loaded."""
    return AuthenticationManager(get_security_manager(), db).resolve_user(credentials)


async def require_manager(user: User = Depends(get_current_user)) -> User:
    """Like get_current_user, but only for store managers."""
    if not user.is_manager:
        logger.warning(f"Manager-only call refused for {user.kakao_email}")
        raise manager_required()
    return user
