"""
KeepNotes Backend — Identity Dependency
=========================================

What:  Turns the request's bearer token into the caller's user id.
Why:   Every note operation is scoped to its owner. The owner id is resolved
       here, once per request, and passed explicitly to the service layer.
How:   Verifies an HS256 JWT (python-jose) against JWT_SECRET / JWT_AUDIENCE
       and returns its `sub` claim.
Who:   Route handlers depend on `get_current_user_id`.

Token issuance belongs to the auth service. `create_access_token` mirrors
what that service signs and is used by operators and the test suite.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from keepnotes.config import settings
from keepnotes.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(
    user_id: str,
    expires_delta: Optional[timedelta] = None,
    extra_claims: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Create a signed access token for `user_id`.

    Args:
        user_id: Value for the `sub` claim
        expires_delta: Lifetime; defaults to ACCESS_TOKEN_EXPIRE_MINUTES
        extra_claims: Additional claims to embed

    Returns:
        Encoded JWT
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    to_encode: Dict[str, Any] = dict(extra_claims or {})
    to_encode.update({
        "sub": user_id,
        "exp": datetime.now(timezone.utc) + expires_delta,
        "aud": settings.jwt_audience,
    })
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a JWT.

    Raises:
        AuthenticationError: If the token is invalid, expired, or for another audience
    """
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
        )
    except JWTError as e:
        logger.warning("Token decode failed: %s", str(e))
        raise AuthenticationError("Invalid or expired token")


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """
    FastAPI dependency returning the authenticated user id.

    Raises:
        AuthenticationError: No bearer token, bad token, or no `sub` claim (→ 401)
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authentication required")

    payload = decode_token(credentials.credentials)
    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Token has no subject")
    return str(user_id)
