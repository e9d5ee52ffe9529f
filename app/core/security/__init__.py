"""Security module for authentication and authorization.

This module provides:
- Password hashing and verification (bcrypt)
- JWT token issuance and validation

FastAPI caller dependencies live in ``app.core.security.dependencies``; they
depend on the account service and are imported from there directly.

Usage:
    from app.core.security import hash_password, verify_password, create_token
"""

from .password import (
    hash_password,
    verify_password,
    needs_rehash,
    pwd_context,
)

from .tokens import (
    JWT_HEADER,
    JWTokenFactory,
    create_token,
)

__all__ = [
    # Password
    "hash_password",
    "verify_password",
    "needs_rehash",
    "pwd_context",
    # Tokens
    "JWT_HEADER",
    "JWTokenFactory",
    "create_token",
]
