"""
Auth Module - Dependencies
===========================
FastAPI dependencies resolving the caller's identity.
Authentication itself belongs to the hosted identity provider; here we only
verify its token and hand the user id to the services explicitly.
"""

from typing import Optional

from fastapi import Request

from common.exceptions import UnauthenticatedError
from common.security import decode_token


def _extract_token(request: Request) -> Optional[str]:
    auth = request.headers.get("Authorization", "")
    if auth.lower().startswith("bearer "):
        return auth[7:].strip() or None
    return request.cookies.get("auth_token")


def get_current_user_id(request: Request) -> Optional[str]:
    """
    Identify the caller from the Bearer header or the auth_token cookie.
    Returns the provider's user id (`sub` claim) or None.
    """
    token = _extract_token(request)
    if not token:
        return None

    payload = decode_token(token)
    if not payload:
        return None

    return payload.get("sub") or None


def require_user(request: Request) -> str:
    """Require an authenticated caller. Raises 401 if not logged in."""
    user_id = get_current_user_id(request)
    if not user_id:
        raise UnauthenticatedError()
    return user_id
