from typing import List

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.exceptions import AuthenticationError, create_error_response, resolve_locale
from app.core.logging import get_service_logger
from app.core.security import JWT_HEADER, create_token
from app.core.security.dependencies import CallerContext, get_current_caller
from app.core.sessions import session_store
from app.models.account import Account, UserGroupMapping
from app.models.schemas import (
    AccountDTO,
    BadRequestErrorResponse,
    ForbiddenErrorResponse,
    GCMAccountDTO,
    InternalServerErrorResponse,
    NotFoundErrorResponse,
    UnauthorizedErrorResponse,
    UserDTO,
    WorkspaceDTO,
)
from app.models.workspace import Workspace
from app.services.account_service import account_service
from app.services.user_service import user_service

logger = get_service_logger("account_api")

router = APIRouter()


def account_to_dto(account: Account, admin: bool = False) -> AccountDTO:
    return AccountDTO(
        login=account.login,
        name=account.name,
        email=account.email,
        language=account.language,
        time_zone=account.time_zone,
        admin=admin,
        enabled=account.enabled,
        creation_date=account.creation_date,
    )


def workspace_to_dto(workspace: Workspace) -> WorkspaceDTO:
    return WorkspaceDTO(
        id=workspace.id,
        description=workspace.description,
        admin=UserDTO(
            login=workspace.admin.login,
            name=workspace.admin.name,
            email=workspace.admin.email,
        ),
        folder_locked=workspace.folder_locked,
        enabled=workspace.enabled,
    )


@router.get(
    "/accounts/me",
    response_model=AccountDTO,
    summary="Get authenticated user's account",
    operation_id="getAccount",
    responses={
        200: {"description": "Successful retrieval of AccountDTO"},
        401: {"model": UnauthorizedErrorResponse, "description": "Unauthorized"},
        404: {"model": NotFoundErrorResponse, "description": "Account not found"},
        500: {"model": InternalServerErrorResponse, "description": "Internal server error"},
    },
)
async def get_account(caller: CallerContext = Depends(get_current_caller)) -> AccountDTO:
    account = await account_service.get_my_account(caller.login)
    return account_to_dto(
        account, admin=caller.is_caller_in_role(UserGroupMapping.ADMIN_ROLE_ID)
    )


@router.put(
    "/accounts/me",
    response_model=AccountDTO,
    summary="Update user's account",
    operation_id="updateAccount",
    responses={
        200: {"description": "Successful retrieval of updated AccountDTO"},
        401: {"model": UnauthorizedErrorResponse, "description": "Unauthorized"},
        404: {"model": NotFoundErrorResponse, "description": "Account not found"},
        500: {"model": InternalServerErrorResponse, "description": "Internal server error"},
    },
)
async def update_account(
    account_dto: AccountDTO,
    caller: CallerContext = Depends(get_current_caller),
) -> AccountDTO:
    account = await account_service.update_account(
        caller.login,
        account_dto.name,
        account_dto.email,
        account_dto.language,
        account_dto.new_password,
        account_dto.time_zone,
    )
    return account_to_dto(
        account, admin=caller.is_caller_in_role(UserGroupMapping.ADMIN_ROLE_ID)
    )


@router.post(
    "/accounts/create",
    response_model=AccountDTO,
    summary="Create user's account",
    operation_id="createAccount",
    description="""Create an account. No authentication required.

When the new account is enabled right away, the response carries the account,
a session cookie and, if JWT issuance is enabled, a signed token in the `jwt`
header. When it awaits administrator validation, the response is 202 with no
body and any session is invalidated.""",
    responses={
        200: {"description": "Account created and authenticated. Response may contain a jwt header."},
        202: {"description": "Account creation successful, but not yet enabled"},
        400: {"model": BadRequestErrorResponse, "description": "Bad request, read response message for more details"},
        403: {"model": ForbiddenErrorResponse, "description": "Authentication of the new account failed"},
        500: {"model": InternalServerErrorResponse, "description": "Internal server error"},
    },
)
async def create_account(request: Request, account_dto: AccountDTO) -> Response:
    account = await account_service.create_account(
        account_dto.login,
        account_dto.name,
        account_dto.email,
        account_dto.language,
        account_dto.new_password,
        account_dto.time_zone,
    )

    if not account.enabled:
        response = Response(status_code=status.HTTP_202_ACCEPTED)
        session_store.invalidate(
            session_store.get_request_session(request, create=False), response
        )
        return response

    login = account.login

    try:
        logger.info("Authenticating new account", login=login)
        await account_service.check_credentials(login, account_dto.new_password)
    except AuthenticationError as e:
        logger.warning("Authentication of new account failed", login=login, error=str(e))
        locale = e.locale or resolve_locale(request.headers.get("accept-language"))
        return create_error_response(
            status_code=status.HTTP_403_FORBIDDEN,
            message=(
                e.get_localized_message(locale)
                if settings.is_development
                else AuthenticationError().get_localized_message(locale)
            ),
            error_code=e.error_code,
            request_path=str(request.url.path),
        )

    session = session_store.get_request_session(request)
    session.set_attribute("login", login)
    session.set_attribute("groups", UserGroupMapping.REGULAR_USER_ROLE_ID)

    response = JSONResponse(
        content=account_to_dto(account).model_dump(mode="json", by_alias=True)
    )
    session_store.attach(session, response)

    if settings.JWT_ENABLED:
        response.headers[JWT_HEADER] = create_token(
            login, UserGroupMapping.REGULAR_USER_ROLE_ID
        )

    return response


@router.get(
    "/accounts/workspaces",
    response_model=List[WorkspaceDTO],
    summary="Get workspaces where authenticated user is active",
    operation_id="getWorkspaces",
    responses={
        200: {"description": "Successful retrieval of Workspaces. It can be an empty list."},
        401: {"model": UnauthorizedErrorResponse, "description": "Unauthorized"},
        500: {"model": InternalServerErrorResponse, "description": "Internal server error"},
    },
)
async def get_workspaces(
    caller: CallerContext = Depends(get_current_caller),
) -> List[WorkspaceDTO]:
    workspaces = await user_service.get_workspaces_where_caller_is_active(caller.login)
    return [workspace_to_dto(workspace) for workspace in workspaces]


@router.put(
    "/accounts/gcm",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Update GCM account for authenticated user",
    operation_id="setGCMAccount",
    responses={
        204: {"description": "GCM account registered"},
        400: {"model": BadRequestErrorResponse, "description": "GCM id already registered"},
        401: {"model": UnauthorizedErrorResponse, "description": "Unauthorized"},
        404: {"model": NotFoundErrorResponse, "description": "Account not found"},
        500: {"model": InternalServerErrorResponse, "description": "Internal server error"},
    },
)
async def set_gcm_account(
    data: GCMAccountDTO,
    caller: CallerContext = Depends(get_current_caller),
) -> Response:
    await account_service.set_gcm_account(caller.login, data.gcm_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/accounts/gcm",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete GCM account for authenticated user",
    operation_id="deleteGCMAccount",
    responses={
        204: {"description": "Successful delete of GCMAccount"},
        401: {"model": UnauthorizedErrorResponse, "description": "Unauthorized"},
        404: {"model": NotFoundErrorResponse, "description": "Account or GCM account not found"},
        500: {"model": InternalServerErrorResponse, "description": "Internal server error"},
    },
)
async def delete_gcm_account(
    caller: CallerContext = Depends(get_current_caller),
) -> Response:
    await account_service.delete_gcm_account(caller.login)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
