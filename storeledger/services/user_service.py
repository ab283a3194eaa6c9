"""
==============================================================================
User Service Module
==============================================================================

Lookup of store employees.

Accounts are created through the external sign-up flow; this service only
reads them, most importantly to turn an access token subject into a User.

==============================================================================
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session, joinedload

from storeledger.core.exceptions import store_not_assigned, user_not_found
from storeledger.db.models import Store, User


# Module logger
logger = logging.getLogger(__name__)


class UserService:
    """
    Read-side user operations.

    Example:
        >>> user = UserService(db_session).get_by_email("worker@kakao.com")
        >>> store = UserService(db_session).get_store(user)
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def get_by_email(self, kakao_email: str) -> User:
        """
        Load a user with its store.

        Raises:
            NotFoundError: USER_NOT_FOUND if no user has this e-mail
        """
        user = (
            self._db.query(User)
            .options(joinedload(User.store))
            .filter(User.kakao_email == kakao_email)
            .first()
        )

        if not user:
            logger.warning(f"User not found: {kakao_email}")
            raise user_not_found(kakao_email)

        return user

    def get_store(self, user: User) -> Store:
        """
        The store the user works at.

        Raises:
            NotFoundError: STORE_NOT_FOUND if the user has no store yet
        """
        if user.store is None:
            raise store_not_assigned(user.kakao_email)
        return user.store
