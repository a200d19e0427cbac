"""Authentication utilities.

Sessions are owned by the hosted auth provider; this service only verifies
the provider-issued bearer JWT and reads the user id from its ``sub`` claim.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from rbm.core.config import settings
from rbm.exceptions import AuthError

# Security scheme
security = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT shaped like the auth provider's access tokens"""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=1))
    to_encode.update({"exp": expire, "aud": settings.jwt_audience})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    """Decode and verify JWT token"""
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
        )
    except JWTError:
        raise AuthError("Invalid user token")


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """
    Resolve the caller from the ``Authorization: Bearer`` header.

    Returns:
        dict with user_id and email

    Raises:
        AuthError: If the token is missing, invalid, or has no subject
    """
    if credentials is None or not credentials.credentials:
        raise AuthError("Missing Bearer token")

    payload = decode_access_token(credentials.credentials)
    user_id: Optional[str] = payload.get("sub")
    if not user_id:
        raise AuthError("Invalid user token")

    return {
        "user_id": str(user_id),
        "email": payload.get("email"),
    }
