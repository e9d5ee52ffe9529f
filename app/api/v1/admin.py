from typing import List

from fastapi import APIRouter, Depends, Path

from app.api.v1.accounts import account_to_dto
from app.core.indexer_config import indexer_config
from app.core.logging import get_service_logger
from app.core.security.dependencies import CallerContext, require_admin
from app.models.schemas import (
    AccountDTO,
    AccountEnableDTO,
    ForbiddenErrorResponse,
    IndexerConfigDTO,
    InternalServerErrorResponse,
    NotFoundErrorResponse,
    UnauthorizedErrorResponse,
)
from app.services.account_service import account_service

logger = get_service_logger("admin_api")

router = APIRouter()

_admin_responses = {
    401: {"model": UnauthorizedErrorResponse, "description": "Unauthorized"},
    403: {"model": ForbiddenErrorResponse, "description": "Administrator role required"},
    500: {"model": InternalServerErrorResponse, "description": "Internal server error"},
}


@router.get(
    "/admin/accounts",
    response_model=List[AccountDTO],
    summary="List all accounts",
    operation_id="getAccounts",
    responses={200: {"description": "Accounts ordered by login"}, **_admin_responses},
)
async def list_accounts(
    admin: CallerContext = Depends(require_admin),
) -> List[AccountDTO]:
    accounts = await account_service.get_accounts()
    return [account_to_dto(account, admin=account.is_admin) for account in accounts]


@router.put(
    "/admin/accounts/{login}/enable",
    response_model=AccountDTO,
    summary="Enable or disable an account",
    operation_id="enableAccount",
    description="Used to validate accounts created under the admin_validation registration strategy.",
    responses={
        200: {"description": "Updated account"},
        404: {"model": NotFoundErrorResponse, "description": "Account not found"},
        **_admin_responses,
    },
)
async def enable_account(
    data: AccountEnableDTO,
    login: str = Path(..., description="Account login"),
    admin: CallerContext = Depends(require_admin),
) -> AccountDTO:
    account = await account_service.enable_account(login, data.enabled)
    logger.info("Account state changed by admin", login=login, enabled=data.enabled, admin=admin.login)
    return account_to_dto(account, admin=account.is_admin)


@router.get(
    "/admin/indexer",
    response_model=IndexerConfigDTO,
    summary="Get search indexer configuration",
    operation_id="getIndexerConfiguration",
    description="Indexer settings without password or AWS credentials.",
    responses={200: {"description": "Indexer configuration"}, **_admin_responses},
)
async def get_indexer_configuration(
    admin: CallerContext = Depends(require_admin),
) -> IndexerConfigDTO:
    return IndexerConfigDTO(
        server_uri=indexer_config.get_server_uri(),
        number_of_shards=indexer_config.get_number_of_shards(),
        number_of_replicas=indexer_config.get_number_of_replicas(),
        auto_expand_replicas=indexer_config.get_auto_expand_replicas(),
        username=indexer_config.get_user_name(),
        has_password=bool(indexer_config.get_password()),
        aws_signing=indexer_config.uses_aws_signing,
        aws_service=indexer_config.get_aws_service(),
        aws_region=indexer_config.get_aws_region(),
    )
