"""
Tests for password hashing, JWT helpers and the auth dependencies.
"""

import asyncio
from datetime import timedelta

import pytest
from jose import JWTError

from jobly.core.deps import get_admin_user
from jobly.core.exceptions import UnauthorizedError
from jobly.core.security import create_access_token, decode_token, get_password_hash, verify_password
from jobly.models.user import User


class TestPasswords:

    def test_hash_and_verify(self):
        hashed = get_password_hash("password1")

        assert hashed != "password1"
        assert verify_password("password1", hashed)
        assert not verify_password("password2", hashed)


class TestTokens:

    def test_round_trip_claims(self):
        token = create_access_token({"sub": "u1", "is_admin": True})

        payload = decode_token(token)
        assert payload["sub"] == "u1"
        assert payload["is_admin"] is True
        assert "exp" in payload

    def test_expired_token_rejected(self):
        token = create_access_token({"sub": "u1"}, expires_delta=timedelta(seconds=-1))

        with pytest.raises(JWTError):
            decode_token(token)

    def test_tampered_token_rejected(self):
        header, payload, signature = create_access_token({"sub": "u1"}).split(".")
        forged = f"{header}.{payload}.{'A' * len(signature)}"

        with pytest.raises(JWTError):
            decode_token(forged)


class TestAdminDependency:

    def test_anonymous_rejected(self):
        with pytest.raises(UnauthorizedError):
            asyncio.run(get_admin_user(None))

    def test_non_admin_rejected(self):
        user = User(username="u1", is_admin=False)

        with pytest.raises(UnauthorizedError):
            asyncio.run(get_admin_user(user))

    def test_admin_passes(self):
        user = User(username="admin", is_admin=True)

        assert asyncio.run(get_admin_user(user)) is user

    def test_expired_admin_token_is_anonymous(self, client):
        token = create_access_token({"sub": "admin", "is_admin": True}, expires_delta=timedelta(seconds=-1))

        response = client.delete("/api/v1/companies/c1", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
