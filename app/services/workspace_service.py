import re
from datetime import datetime, timezone
from typing import List

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db_client import db
from app.core.exceptions import (
    AccessRightError,
    AccountNotFoundError,
    CreationError,
    WorkspaceAlreadyExistsError,
    WorkspaceNotFoundError,
)
from app.core.logging import get_service_logger
from app.models.db_models import (
    AccountModel,
    WorkspaceModel,
    WorkspaceUserMembershipModel,
)
from app.models.workspace import Workspace, WorkspaceAdmin

logger = get_service_logger("workspace")

WORKSPACE_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")


class WorkspaceService:
    """Workspace creation, membership and access checks."""

    def __init__(self):
        self.logger = logger

    def _model_to_pydantic(self, model: WorkspaceModel) -> Workspace:
        return Workspace(
            id=model.id,
            description=model.description or "",
            admin=WorkspaceAdmin(
                login=model.admin.login,
                name=model.admin.name or "",
                email=model.admin.email or "",
            ),
            folder_locked=model.folder_locked,
            enabled=model.enabled,
            creation_date=model.creation_date,
        )

    async def load_workspace(self, session: AsyncSession, workspace_id: str) -> WorkspaceModel:
        workspace_model = await session.get(WorkspaceModel, workspace_id)
        if workspace_model is None:
            raise WorkspaceNotFoundError(workspace_id)
        return workspace_model

    async def check_read_access(
        self, session: AsyncSession, workspace_id: str, login: str
    ) -> WorkspaceModel:
        """Admin or any member may read. Raises WorkspaceNotFoundError/AccessRightError."""
        workspace_model = await self.load_workspace(session, workspace_id)
        if workspace_model.admin_login == login:
            return workspace_model

        membership = await session.get(
            WorkspaceUserMembershipModel, (workspace_id, login)
        )
        if membership is None or not workspace_model.enabled:
            raise AccessRightError(login)
        return workspace_model

    async def check_write_access(
        self, session: AsyncSession, workspace_id: str, login: str
    ) -> WorkspaceModel:
        """Admin or a non read-only member may write."""
        workspace_model = await self.load_workspace(session, workspace_id)
        if workspace_model.admin_login == login:
            return workspace_model

        membership = await session.get(
            WorkspaceUserMembershipModel, (workspace_id, login)
        )
        if membership is None or membership.read_only or not workspace_model.enabled:
            raise AccessRightError(login)
        return workspace_model

    async def create_workspace(
        self,
        admin_login: str,
        workspace_id: str,
        description: str = "",
        folder_locked: bool = False,
    ) -> Workspace:
        """
        Create a workspace administered by the caller.

        Raises:
            CreationError: If the identifier contains forbidden characters
            AccountNotFoundError: If the caller has no account
            WorkspaceAlreadyExistsError: If the identifier is taken
        """
        if not WORKSPACE_ID_PATTERN.match(workspace_id):
            raise CreationError(details={"field": "id", "value": workspace_id})

        try:
            async with db.session() as session:
                admin = await session.get(AccountModel, admin_login)
                if admin is None:
                    raise AccountNotFoundError(admin_login)

                if await session.get(WorkspaceModel, workspace_id) is not None:
                    raise WorkspaceAlreadyExistsError(workspace_id, locale=admin.language)

                workspace_model = WorkspaceModel(
                    id=workspace_id,
                    description=description,
                    admin_login=admin_login,
                    folder_locked=folder_locked,
                    enabled=True,
                    creation_date=datetime.now(timezone.utc),
                )
                workspace_model.admin = admin
                session.add(workspace_model)
                await session.flush()

                workspace = self._model_to_pydantic(workspace_model)

        except IntegrityError:
            raise WorkspaceAlreadyExistsError(workspace_id)

        self.logger.info("Workspace created", workspace_id=workspace_id, admin=admin_login)
        return workspace

    async def add_user_to_workspace(
        self,
        caller_login: str,
        workspace_id: str,
        member_login: str,
        read_only: bool = False,
    ) -> None:
        """
        Add (or update) a member. Only the workspace admin may do this.

        Raises:
            WorkspaceNotFoundError, AccessRightError, AccountNotFoundError
        """
        async with db.session() as session:
            workspace_model = await self.load_workspace(session, workspace_id)
            if workspace_model.admin_login != caller_login:
                raise AccessRightError(caller_login)

            if await session.get(AccountModel, member_login) is None:
                raise AccountNotFoundError(member_login)

            membership = await session.get(
                WorkspaceUserMembershipModel, (workspace_id, member_login)
            )
            if membership is None:
                session.add(
                    WorkspaceUserMembershipModel(
                        workspace_id=workspace_id,
                        member_login=member_login,
                        read_only=read_only,
                    )
                )
            else:
                membership.read_only = read_only

        self.logger.info(
            "User added to workspace",
            workspace_id=workspace_id,
            member=member_login,
            read_only=read_only,
        )

    async def get_workspaces_where_user_is_active(self, login: str) -> List[Workspace]:
        """Enabled workspaces administered by, or shared with, ``login``."""
        async with db.session() as session:
            member_of = select(WorkspaceUserMembershipModel.workspace_id).where(
                WorkspaceUserMembershipModel.member_login == login
            )
            stmt = (
                select(WorkspaceModel)
                .where(
                    WorkspaceModel.enabled == True,
                    or_(
                        WorkspaceModel.admin_login == login,
                        WorkspaceModel.id.in_(member_of),
                    ),
                )
                .order_by(WorkspaceModel.id)
            )
            result = await session.execute(stmt)
            return [self._model_to_pydantic(m) for m in result.scalars().unique().all()]


# Global service instance
workspace_service = WorkspaceService()
