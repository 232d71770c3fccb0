"""
E-mart - Security Utilities
============================
Verification of the identity provider's JWT access tokens.

The provider signs tokens with a shared secret; the `sub` claim is the user id.
"""

import logging
from datetime import timedelta
from typing import Optional

from jose import jwt, JWTError

from config.settings import (
    AUTH_JWT_SECRET, AUTH_JWT_AUDIENCE, AUTH_JWT_ALGORITHM,
    ACCESS_TOKEN_EXPIRE_MINUTES,
)
from common.helpers import now_utc

logger = logging.getLogger("emart.security")


def create_token(user_id: str, extra: dict = None) -> str:
    """Create a token the way the identity provider does (tests and local dev)."""
    to_encode = dict(extra or {})
    to_encode["sub"] = str(user_id)
    to_encode["exp"] = now_utc() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    if AUTH_JWT_AUDIENCE:
        to_encode["aud"] = AUTH_JWT_AUDIENCE
    return jwt.encode(to_encode, AUTH_JWT_SECRET, algorithm=AUTH_JWT_ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify a token. Returns payload or None."""
    options = {} if AUTH_JWT_AUDIENCE else {"verify_aud": False}
    try:
        return jwt.decode(
            token,
            AUTH_JWT_SECRET,
            algorithms=[AUTH_JWT_ALGORITHM],
            audience=AUTH_JWT_AUDIENCE or None,
            options=options,
        )
    except JWTError as e:
        logger.debug(f"Rejected token: {e}")
        return None
