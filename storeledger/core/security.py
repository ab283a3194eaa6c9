"""
==============================================================================
Security Module - Access Tokens
==============================================================================

Staff sign in through Kakao; this service only deals with its own signed
access tokens. A token's subject is the staff member's Kakao e-mail, which
is how every request is mapped back to a User and, through the user, to a
store.

    {"sub": "worker@kakao.com", "type": "access", "iat": ..., "exp": ...}

==============================================================================
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from storeledger.config import get_settings
from storeledger.core.exceptions import token_expired, token_invalid


# Module logger
logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"


class SecurityManager:
    """
    Signs and checks access tokens for Kakao-authenticated staff.

    Example:
        >>> security = SecurityManager()
        >>> token = security.create_access_token("worker@kakao.com")
        >>> security.verify_token(token)
        'worker@kakao.com'
    """

    def __init__(self) -> None:
        self._settings = get_settings()

    def create_access_token(
        self,
        kakao_email: str,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        issued_at = datetime.now(timezone.utc)
        lifetime = expires_delta or timedelta(minutes=self._settings.access_token_expire_minutes)

        claims: Dict[str, Any] = {
            "sub": kakao_email,
            "type": ACCESS_TOKEN_TYPE,
            "iat": issued_at,
            "exp": issued_at + lifetime,
        }
        return jwt.encode(
            claims,
            self._settings.jwt_secret_key,
            algorithm=self._settings.jwt_algorithm
        )

    def verify_token(self, token: str) -> str:
        """
        Check signature, expiry and type, and return the Kakao e-mail.

        Raises:
            AppException: TOKEN_EXPIRED, or TOKEN_INVALID for anything else
                wrong with the token (including a missing subject)
        """
        try:
            claims = jwt.decode(
                token,
                self._settings.jwt_secret_key,
                algorithms=[self._settings.jwt_algorithm]
            )
        except ExpiredSignatureError:
            logger.debug("Rejected expired access token")
            raise token_expired()
        except JWTError as e:
            logger.warning(f"Rejected malformed access token: {e}")
            raise token_invalid()

        if claims.get("type") != ACCESS_TOKEN_TYPE or not claims.get("sub"):
            logger.warning(f"Rejected token with type={claims.get('type')!r} sub={claims.get('sub')!r}")
            raise token_invalid()

        return claims["sub"]


@lru_cache(maxsize=1)
def get_security_manager() -> SecurityManager:
    return SecurityManager()
