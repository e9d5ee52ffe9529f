"""FastAPI security dependencies.

Provides:
- Bearer (JWT) and Basic security schemes
- get_current_caller: resolves the caller from a JWT, Basic credentials or
  the server-side session, and enforces the regular user/admin roles
- require_admin: restricts a route to administrators
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import (
    HTTPAuthorizationCredentials,
    HTTPBasic,
    HTTPBasicCredentials,
    HTTPBearer,
)

from app.core.config import settings
from app.core.exceptions import AccessRightError
from app.core.logging import bind_caller, get_auth_logger
from app.core.sessions import session_store
from app.models.account import UserGroupMapping
from app.services.account_service import account_service
from .tokens import JWTokenFactory

logger = get_auth_logger()

bearer_security = HTTPBearer(auto_error=False)
basic_security = HTTPBasic(auto_error=False)


@dataclass(frozen=True)
class CallerContext:
    """Identity of the authenticated caller for the current request."""

    login: str
    groups: Tuple[str, ...]
    auth_method: str

    def is_caller_in_role(self, role: str) -> bool:
        return role in self.groups

    @property
    def is_admin(self) -> bool:
        return self.is_caller_in_role(UserGroupMapping.ADMIN_ROLE_ID)


def _split_groups(groups) -> Tuple[str, ...]:
    if not groups:
        return ()
    if isinstance(groups, str):
        return tuple(g.strip() for g in groups.split(",") if g.strip())
    return tuple(groups)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_caller(
    request: Request,
    bearer: Optional[HTTPAuthorizationCredentials] = Depends(bearer_security),
    basic: Optional[HTTPBasicCredentials] = Depends(basic_security),
) -> CallerContext:
    """
    Resolve the caller, trying a JWT bearer token, then Basic credentials,
    then the session cookie.

    Raises:
        HTTPException 401: No valid credentials
        HTTPException 403: Caller has neither the regular user nor the admin role
    """
    caller: Optional[CallerContext] = None

    if bearer is not None and settings.JWT_ENABLED:
        mapping = JWTokenFactory.validate_token(settings.JWT_SECRET_KEY, bearer.credentials)
        if mapping is None:
            raise _unauthorized("Invalid or expired token")
        caller = CallerContext(mapping.login, _split_groups(mapping.group_name), "jwt")

    elif basic is not None and settings.BASIC_AUTH_ENABLED:
        account = await account_service.check_credentials(basic.username, basic.password)
        caller = CallerContext(account.login, tuple(account.groups), "basic")

    elif settings.SESSION_AUTH_ENABLED:
        session = session_store.get_session(
            request.cookies.get(settings.SESSION_COOKIE_NAME)
        )
        if session is not None and session.get_attribute("login"):
            caller = CallerContext(
                session.get_attribute("login"),
                _split_groups(session.get_attribute("groups")),
                "session",
            )

    if caller is None:
        raise _unauthorized("Not authenticated")

    if not any(caller.is_caller_in_role(role) for role in UserGroupMapping.ALLOWED_ROLES):
        logger.warning("Caller has no allowed role", login=caller.login, groups=caller.groups)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient role"
        )

    request.state.caller_login = caller.login
    bind_caller(caller.login, caller.auth_method)
    logger.debug("Caller authenticated", login=caller.login, method=caller.auth_method)
    return caller


async def require_admin(
    caller: CallerContext = Depends(get_current_caller),
) -> CallerContext:
    if not caller.is_admin:
        raise AccessRightError(caller.login)
    return caller
