"""Unit tests for authentication utilities"""
from datetime import timedelta

import pytest
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt

from rbm.core.auth import create_access_token, decode_access_token, get_current_user
from rbm.core.config import settings
from rbm.exceptions import AuthError


class TestTokens:
    """Tests for JWT verification"""

    def test_decode_access_token_valid(self):
        token = create_access_token({"sub": "user-123", "email": "a@example.com"})

        payload = decode_access_token(token)

        assert payload["sub"] == "user-123"
        assert payload["aud"] == "authenticated"
        assert "exp" in payload

    def test_decode_access_token_invalid(self):
        with pytest.raises(AuthError) as exc_info:
            decode_access_token("invalid.token.here")
        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Invalid user token"

    def test_expired_token_rejected(self):
        token = create_access_token({"sub": "user-123"}, expires_delta=timedelta(seconds=-10))

        with pytest.raises(AuthError):
            decode_access_token(token)

    def test_wrong_audience_rejected(self):
        token = jwt.encode(
            {"sub": "user-123", "aud": "someone-else"},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(AuthError):
            decode_access_token(token)

    def test_wrong_signature_rejected(self):
        token = jwt.encode(
            {"sub": "user-123", "aud": settings.jwt_audience},
            "not-the-server-secret",
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(AuthError):
            decode_access_token(token)


class TestCurrentUser:
    """Tests for the get_current_user dependency"""

    @pytest.mark.asyncio
    async def test_missing_credentials(self):
        with pytest.raises(AuthError) as exc_info:
            await get_current_user(None)
        assert exc_info.value.message == "Missing Bearer token"

    @pytest.mark.asyncio
    async def test_resolves_subject(self):
        token = create_access_token({"sub": "user-123", "email": "a@example.com"})
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)

        user = await get_current_user(credentials)

        assert user == {"user_id": "user-123", "email": "a@example.com"}

    @pytest.mark.asyncio
    async def test_token_without_subject_rejected(self):
        token = create_access_token({"email": "a@example.com"})
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)

        with pytest.raises(AuthError):
            await get_current_user(credentials)
