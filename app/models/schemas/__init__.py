"""Pydantic schemas (DTOs) for API requests and responses.

Organized by domain:
- account.py: Account and GCM account DTOs
- workspace.py: Workspace DTOs
- document.py: Document iteration DTOs
- admin.py: Administration DTOs
- errors.py: Error response schemas
- base.py: camelCase base class

Import from this module: `from app.models.schemas import AccountDTO`
"""

from app.models.schemas.base import CamelModel

from app.models.schemas.account import (
    AccountDTO,
    GCMAccountDTO,
    AccountEnableDTO,
)

from app.models.schemas.workspace import (
    UserDTO,
    WorkspaceDTO,
    WorkspaceCreateDTO,
    WorkspaceMemberDTO,
)

from app.models.schemas.document import (
    DocumentIterationDTO,
    DocumentIterationCreateDTO,
    DocumentIterationUpdateDTO,
)

from app.models.schemas.admin import IndexerConfigDTO

from app.models.schemas.errors import (
    ErrorResponse,
    APIErrorResponse,
    NotFoundErrorResponse,
    BadRequestErrorResponse,
    UnauthorizedErrorResponse,
    ForbiddenErrorResponse,
    InternalServerErrorResponse,
)

__all__ = [
    "CamelModel",
    # Account
    "AccountDTO",
    "GCMAccountDTO",
    "AccountEnableDTO",
    # Workspace
    "UserDTO",
    "WorkspaceDTO",
    "WorkspaceCreateDTO",
    "WorkspaceMemberDTO",
    # Document
    "DocumentIterationDTO",
    "DocumentIterationCreateDTO",
    "DocumentIterationUpdateDTO",
    # Admin
    "IndexerConfigDTO",
    # Errors
    "ErrorResponse",
    "APIErrorResponse",
    "NotFoundErrorResponse",
    "BadRequestErrorResponse",
    "UnauthorizedErrorResponse",
    "ForbiddenErrorResponse",
    "InternalServerErrorResponse",
]
