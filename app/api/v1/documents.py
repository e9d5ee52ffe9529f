"""
Document iteration endpoints.

An iteration is addressed by workspace, document id, version and iteration
number. Reading requires workspace membership; writing requires a
read-write membership or workspace administration.
"""

from fastapi import APIRouter, Depends, Path, Response, status

from app.core.logging import get_service_logger
from app.core.security.dependencies import CallerContext, get_current_caller
from app.models.document import DocumentIteration, DocumentIterationKey
from app.models.schemas import (
    BadRequestErrorResponse,
    DocumentIterationCreateDTO,
    DocumentIterationDTO,
    DocumentIterationUpdateDTO,
    ForbiddenErrorResponse,
    InternalServerErrorResponse,
    NotFoundErrorResponse,
    UnauthorizedErrorResponse,
)
from app.services.document_service import document_service

logger = get_service_logger("document_api")

router = APIRouter()

ITERATION_PATH = "/workspaces/{workspace_id}/documents/{document_id}/versions/{version}/iterations/{iteration}"

_common_responses = {
    401: {"model": UnauthorizedErrorResponse, "description": "Unauthorized"},
    403: {"model": ForbiddenErrorResponse, "description": "No access to the workspace"},
    404: {"model": NotFoundErrorResponse, "description": "Workspace or document iteration not found"},
    500: {"model": InternalServerErrorResponse, "description": "Internal server error"},
}


def _to_dto(document: DocumentIteration) -> DocumentIterationDTO:
    return DocumentIterationDTO(**document.model_dump())


def _iteration_key(
    workspace_id: str = Path(..., description="Workspace id"),
    document_id: str = Path(..., description="Document master id"),
    version: str = Path(..., description="Document version"),
    iteration: int = Path(..., ge=1, description="Iteration number"),
) -> DocumentIterationKey:
    return DocumentIterationKey(workspace_id, document_id, version, iteration)


@router.post(
    "/workspaces/{workspace_id}/documents",
    response_model=DocumentIterationDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Create a document iteration",
    operation_id="createDocumentIteration",
    description="Create the next iteration of a document version; iteration 1 for a new document.",
    responses={
        201: {"description": "Document iteration created"},
        400: {"model": BadRequestErrorResponse, "description": "Document iteration already exists"},
        **_common_responses,
    },
)
async def create_document_iteration(
    document_data: DocumentIterationCreateDTO,
    workspace_id: str = Path(..., description="Workspace id"),
    caller: CallerContext = Depends(get_current_caller),
) -> DocumentIterationDTO:
    document = await document_service.create_document_iteration(
        caller.login,
        workspace_id,
        document_data.document_master_id,
        document_data.version,
        title=document_data.title,
        revision_note=document_data.revision_note,
    )
    return _to_dto(document)


@router.get(
    ITERATION_PATH,
    response_model=DocumentIterationDTO,
    summary="Get a document iteration",
    operation_id="getDocumentIteration",
    responses={200: {"description": "Successful retrieval of the iteration"}, **_common_responses},
)
async def get_document_iteration(
    key: DocumentIterationKey = Depends(_iteration_key),
    caller: CallerContext = Depends(get_current_caller),
) -> DocumentIterationDTO:
    document = await document_service.get_document_iteration(caller.login, key)
    return _to_dto(document)


@router.put(
    ITERATION_PATH,
    response_model=DocumentIterationDTO,
    summary="Update a document iteration's revision note",
    operation_id="updateDocumentIteration",
    responses={200: {"description": "Iteration updated"}, **_common_responses},
)
async def update_document_iteration(
    update_data: DocumentIterationUpdateDTO,
    key: DocumentIterationKey = Depends(_iteration_key),
    caller: CallerContext = Depends(get_current_caller),
) -> DocumentIterationDTO:
    document = await document_service.update_revision_note(
        caller.login, key, update_data.revision_note
    )
    return _to_dto(document)


@router.delete(
    ITERATION_PATH,
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a document iteration",
    operation_id="deleteDocumentIteration",
    responses={204: {"description": "Iteration deleted"}, **_common_responses},
)
async def delete_document_iteration(
    key: DocumentIterationKey = Depends(_iteration_key),
    caller: CallerContext = Depends(get_current_caller),
) -> Response:
    await document_service.delete_document_iteration(caller.login, key)
    logger.info("Document iteration deleted via API", key=str(key), caller=caller.login)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
