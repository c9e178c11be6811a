"""
Tests for token handling and admin enforcement.

Tests:
- Token encode/decode
- Expired and tampered tokens
- Admin-only routes reject anonymous, non-admin and invalid tokens
"""

from datetime import timedelta

import pytest
from jose import JWTError, jwt

from app.core.config import settings
from app.core.security import create_access_token, decode_token


class TestTokens:
    """Token round trip and rejection"""

    def test_decode_returns_claims(self):
        token = create_access_token({"username": "u1", "isAdmin": False})

        claims = decode_token(token)

        assert claims["username"] == "u1"
        assert claims["isAdmin"] is False
        assert "exp" in claims

    def test_expired_token_rejected(self):
        token = create_access_token({"username": "u1"}, expires_delta=timedelta(seconds=-10))

        with pytest.raises(JWTError):
            decode_token(token)

    def test_token_signed_with_other_key_rejected(self):
        token = jwt.encode({"username": "u1", "isAdmin": True}, "not-the-secret", algorithm=settings.ALGORITHM)

        with pytest.raises(JWTError):
            decode_token(token)


class TestAdminEnforcement:
    """Admin-only endpoints"""

    def test_invalid_token_is_anonymous_on_public_route(self, client, seeded_jobs):
        response = client.get("/jobs", headers={"Authorization": "Bearer not-a-token"})

        assert response.status_code == 200

    def test_invalid_token_rejected_on_admin_route(self, client, seeded_jobs):
        response = client.delete(
            f"/jobs/{seeded_jobs[0]}", headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == 401

    def test_expired_admin_token_rejected(self, client, seeded_jobs):
        token = create_access_token({"username": "admin", "isAdmin": True}, expires_delta=timedelta(seconds=-10))

        response = client.delete(f"/jobs/{seeded_jobs[0]}", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_admin_flag_must_be_true(self, client, seeded_jobs):
        token = create_access_token({"username": "sneaky", "isAdmin": "yes"})

        response = client.delete(f"/jobs/{seeded_jobs[0]}", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
