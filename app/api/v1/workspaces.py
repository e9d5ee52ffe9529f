from fastapi import APIRouter, Depends, Path, Response, status

from app.api.v1.accounts import workspace_to_dto
from app.core.logging import get_service_logger
from app.core.security.dependencies import CallerContext, get_current_caller
from app.models.schemas import (
    BadRequestErrorResponse,
    ForbiddenErrorResponse,
    InternalServerErrorResponse,
    NotFoundErrorResponse,
    UnauthorizedErrorResponse,
    WorkspaceCreateDTO,
    WorkspaceDTO,
    WorkspaceMemberDTO,
)
from app.services.workspace_service import workspace_service

logger = get_service_logger("workspace_api")

router = APIRouter()


@router.post(
    "/workspaces",
    response_model=WorkspaceDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Create a workspace",
    operation_id="createWorkspace",
    description="Create a workspace administered by the authenticated user.",
    responses={
        201: {"description": "Workspace created"},
        400: {"model": BadRequestErrorResponse, "description": "Workspace already exists or identifier not allowed"},
        401: {"model": UnauthorizedErrorResponse, "description": "Unauthorized"},
        500: {"model": InternalServerErrorResponse, "description": "Internal server error"},
    },
)
async def create_workspace(
    workspace_data: WorkspaceCreateDTO,
    caller: CallerContext = Depends(get_current_caller),
) -> WorkspaceDTO:
    workspace = await workspace_service.create_workspace(
        caller.login,
        workspace_data.id,
        description=workspace_data.description,
        folder_locked=workspace_data.folder_locked,
    )
    logger.info("Workspace created via API", workspace_id=workspace.id, admin=caller.login)
    return workspace_to_dto(workspace)


@router.put(
    "/workspaces/{workspace_id}/add-user",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Add a user to a workspace",
    operation_id="addUserInWorkspace",
    responses={
        204: {"description": "User added to the workspace"},
        401: {"model": UnauthorizedErrorResponse, "description": "Unauthorized"},
        403: {"model": ForbiddenErrorResponse, "description": "Caller is not the workspace administrator"},
        404: {"model": NotFoundErrorResponse, "description": "Workspace or account not found"},
        500: {"model": InternalServerErrorResponse, "description": "Internal server error"},
    },
)
async def add_user_in_workspace(
    member: WorkspaceMemberDTO,
    workspace_id: str = Path(..., description="Workspace id"),
    caller: CallerContext = Depends(get_current_caller),
) -> Response:
    await workspace_service.add_user_to_workspace(
        caller.login, workspace_id, member.login, read_only=member.read_only
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
