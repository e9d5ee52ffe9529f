"""JWT token issuance and validation.

Tokens identify an account login and its security group; they are returned
to clients in the ``jwt`` response header and presented back as
``Authorization: Bearer <token>``.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from app.core.config import settings
from app.core.logging import get_auth_logger
from app.models.account import UserGroupMapping

logger = get_auth_logger()

JWT_HEADER = "jwt"


class JWTokenFactory:
    """Creates and validates signed tokens for a login/group pair."""

    @staticmethod
    def create_token(
        key: str,
        user_group_mapping: UserGroupMapping,
        expire_minutes: Optional[int] = None,
    ) -> str:
        now = datetime.now(timezone.utc)
        lifetime = expire_minutes or settings.JWT_EXPIRE_MINUTES
        payload = {
            "sub": user_group_mapping.login,
            "groups": user_group_mapping.group_name,
            "jti": str(uuid.uuid4()),
            "iat": now,
            "exp": now + timedelta(minutes=lifetime),
        }
        return jwt.encode(payload, key, algorithm=settings.JWT_ALGORITHM)

    @staticmethod
    def validate_token(key: str, token: str) -> Optional[UserGroupMapping]:
        """Return the token's login/group, or None when invalid or expired."""
        try:
            payload = jwt.decode(token, key, algorithms=[settings.JWT_ALGORITHM])
        except jwt.ExpiredSignatureError:
            logger.info("JWT rejected: expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.warning("JWT rejected: invalid", error=str(e))
            return None

        login = payload.get("sub")
        group_name = payload.get("groups")
        if not login or not group_name:
            logger.warning("JWT rejected: incomplete payload")
            return None

        return UserGroupMapping(login, group_name)


def create_token(login: str, group_name: str) -> str:
    """Issue a token signed with the configured key."""
    return JWTokenFactory.create_token(
        settings.JWT_SECRET_KEY, UserGroupMapping(login, group_name)
    )
