from typing import List

from app.core.db_client import db
from app.core.exceptions import AccountNotFoundError
from app.core.logging import get_service_logger
from app.models.db_models import AccountModel
from app.models.workspace import Workspace
from app.services.workspace_service import workspace_service

logger = get_service_logger("user")


class UserService:
    """Caller-centric queries across workspaces."""

    def __init__(self):
        self.logger = logger

    async def get_workspaces_where_caller_is_active(self, caller_login: str) -> List[Workspace]:
        """
        Workspaces the caller administers or is a member of.

        Returns an empty list when the caller belongs to no workspace.

        Raises:
            AccountNotFoundError: If the caller has no account
        """
        async with db.session() as session:
            if await session.get(AccountModel, caller_login) is None:
                raise AccountNotFoundError(caller_login)

        workspaces = await workspace_service.get_workspaces_where_user_is_active(
            caller_login
        )
        self.logger.debug(
            "Workspaces listed", login=caller_login, count=len(workspaces)
        )
        return workspaces


# Global service instance
user_service = UserService()
