"""
Unit tests for the security module.

Tests password hashing and JWT issuance/validation.
"""

import os
from datetime import datetime, timedelta, timezone

import jwt
import pytest

# Set test environment
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-testing-purposes-only-32chars")


class TestPasswordHashing:
    """Tests for password hashing functions."""

    @pytest.mark.unit
    def test_hash_password_creates_bcrypt_hash(self):
        from app.core.security import hash_password

        hashed = hash_password("SecurePass123!")

        assert hashed != "SecurePass123!"
        assert hashed.startswith("$2b$")

    @pytest.mark.unit
    def test_verify_password(self):
        from app.core.security import hash_password, verify_password

        hashed = hash_password("SecurePass123!")

        assert verify_password("SecurePass123!", hashed) is True
        assert verify_password("WrongPass!", hashed) is False

    @pytest.mark.unit
    def test_verify_password_with_malformed_hash(self):
        from app.core.security import verify_password

        assert verify_password("anything", "not-a-hash") is False

    @pytest.mark.unit
    def test_needs_rehash_false_for_fresh_hash(self):
        from app.core.security import hash_password, needs_rehash

        assert needs_rehash(hash_password("SecurePass123!")) is False


class TestJWTokenFactory:
    """Tests for token creation and validation."""

    @pytest.mark.unit
    def test_create_and_validate(self, mock_jwt_secret):
        from app.core.security import JWTokenFactory
        from app.models.account import UserGroupMapping

        token = JWTokenFactory.create_token(
            mock_jwt_secret, UserGroupMapping("jdoe", UserGroupMapping.REGULAR_USER_ROLE_ID)
        )
        mapping = JWTokenFactory.validate_token(mock_jwt_secret, token)

        assert mapping is not None
        assert mapping.login == "jdoe"
        assert mapping.group_name == "users"

    @pytest.mark.unit
    def test_payload_claims(self, mock_jwt_secret):
        from app.core.security import JWTokenFactory
        from app.models.account import UserGroupMapping

        token = JWTokenFactory.create_token(
            mock_jwt_secret, UserGroupMapping("jdoe", "users"), expire_minutes=5
        )
        payload = jwt.decode(token, mock_jwt_secret, algorithms=["HS256"])

        assert payload["sub"] == "jdoe"
        assert payload["groups"] == "users"
        assert "jti" in payload
        assert payload["exp"] - payload["iat"] == 300

    @pytest.mark.unit
    def test_wrong_key_is_rejected(self, mock_jwt_secret):
        from app.core.security import JWTokenFactory
        from app.models.account import UserGroupMapping

        token = JWTokenFactory.create_token(mock_jwt_secret, UserGroupMapping("jdoe", "users"))

        assert JWTokenFactory.validate_token("x" * 40, token) is None

    @pytest.mark.unit
    def test_expired_token_is_rejected(self, mock_jwt_secret):
        from app.core.security import JWTokenFactory

        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": "jdoe", "groups": "users", "iat": now - timedelta(hours=3), "exp": now - timedelta(hours=1)},
            mock_jwt_secret,
            algorithm="HS256",
        )

        assert JWTokenFactory.validate_token(mock_jwt_secret, token) is None

    @pytest.mark.unit
    def test_token_without_groups_is_rejected(self, mock_jwt_secret):
        from app.core.security import JWTokenFactory

        token = jwt.encode(
            {"sub": "jdoe", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            mock_jwt_secret,
            algorithm="HS256",
        )

        assert JWTokenFactory.validate_token(mock_jwt_secret, token) is None

    @pytest.mark.unit
    def test_module_level_create_token_uses_settings_key(self):
        from app.core.config import settings
        from app.core.security import JWTokenFactory, create_token

        token = create_token("jdoe", "admin")

        mapping = JWTokenFactory.validate_token(settings.JWT_SECRET_KEY, token)
        assert mapping.login == "jdoe"
        assert mapping.group_name == "admin"
