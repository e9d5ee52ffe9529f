import uuid
import traceback
from typing import Any, Dict, Optional
from fastapi import Request, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_LOCALE = "en"

# Message catalog keyed by locale, then by exception class name.
# Positional placeholders are filled from the exception's message arguments.
MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "ApplicationError": "An application error occurred",
        "EntityNotFoundError": "The requested entity was not found",
        "AccountNotFoundError": "Account {0} not found",
        "WorkspaceNotFoundError": "Workspace {0} not found",
        "DocumentIterationNotFoundError": "Document iteration {0} not found",
        "GCMAccountNotFoundError": "No GCM account registered for {0}",
        "EntityAlreadyExistsError": "The entity already exists",
        "AccountAlreadyExistsError": "Account {0} already exists",
        "WorkspaceAlreadyExistsError": "Workspace {0} already exists",
        "DocumentIterationAlreadyExistsError": "Document iteration {0} already exists",
        "GCMAccountAlreadyExistsError": "This GCM identifier is already registered",
        "CreationError": "The entity could not be created",
        "AccessRightError": "User {0} does not have sufficient rights for this operation",
        "NotAllowedError": "This operation is not allowed",
        "AuthenticationError": "Authentication failed",
        "AccountNotEnabledError": "Account {0} is not enabled",
        "IndexerConfigurationError": "Invalid indexer configuration property {0}",
    },
    "fr": {
        "ApplicationError": "Une erreur applicative est survenue",
        "EntityNotFoundError": "L'entité demandée est introuvable",
        "AccountNotFoundError": "Le compte {0} est introuvable",
        "WorkspaceNotFoundError": "L'espace de travail {0} est introuvable",
        "DocumentIterationNotFoundError": "L'itération de document {0} est introuvable",
        "GCMAccountNotFoundError": "Aucun compte GCM enregistré pour {0}",
        "EntityAlreadyExistsError": "L'entité existe déjà",
        "AccountAlreadyExistsError": "Le compte {0} existe déjà",
        "WorkspaceAlreadyExistsError": "L'espace de travail {0} existe déjà",
        "DocumentIterationAlreadyExistsError": "L'itération de document {0} existe déjà",
        "GCMAccountAlreadyExistsError": "Cet identifiant GCM est déjà enregistré",
        "CreationError": "L'entité n'a pas pu être créée",
        "AccessRightError": "L'utilisateur {0} n'a pas les droits suffisants pour cette opération",
        "NotAllowedError": "Cette opération n'est pas autorisée",
        "AuthenticationError": "L'authentification a échoué",
        "AccountNotEnabledError": "Le compte {0} n'est pas activé",
        "IndexerConfigurationError": "Propriété de configuration de l'indexeur invalide : {0}",
    },
}


def resolve_locale(value: Optional[str]) -> str:
    """Reduce a locale or Accept-Language value to a supported language code."""
    if not value:
        return DEFAULT_LOCALE
    for part in value.split(","):
        language = part.split(";")[0].strip().replace("_", "-").split("-")[0].lower()
        if language in MESSAGES:
            return language
    return DEFAULT_LOCALE


class ApplicationError(Exception):
    """Base exception for the PLM application.

    Subclasses carry a message template in ``MESSAGES``; the rendered message
    depends on the locale given at construction or at render time. An explicit
    ``message`` always wins over the catalog.
    """

    error_code = "APPLICATION_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        *message_args: Any,
        locale: Optional[str] = None,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message_args = message_args
        self.locale = locale
        self.details = details or {}
        self._message = message
        super().__init__(self.get_localized_message(locale))

    @property
    def message(self) -> str:
        return self.get_localized_message(self.locale)

    def get_localized_message(self, locale: Optional[str] = None) -> str:
        """Render the message for ``locale``, falling back to English."""
        if self._message:
            return self._message

        catalog = MESSAGES[resolve_locale(locale)]
        for klass in type(self).__mro__:
            template = catalog.get(klass.__name__)
            if template is None:
                template = MESSAGES[DEFAULT_LOCALE].get(klass.__name__)
            if template is not None:
                try:
                    return template.format(*self.message_args)
                except IndexError:
                    return template
        return MESSAGES[DEFAULT_LOCALE]["ApplicationError"]


# Not found family
class EntityNotFoundError(ApplicationError):
    error_code = "ENTITY_NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class AccountNotFoundError(EntityNotFoundError):
    error_code = "ACCOUNT_NOT_FOUND"


class WorkspaceNotFoundError(EntityNotFoundError):
    error_code = "WORKSPACE_NOT_FOUND"


class DocumentIterationNotFoundError(EntityNotFoundError):
    error_code = "DOCUMENT_ITERATION_NOT_FOUND"


class GCMAccountNotFoundError(EntityNotFoundError):
    error_code = "GCM_ACCOUNT_NOT_FOUND"


# Already exists family
class EntityAlreadyExistsError(ApplicationError):
    error_code = "ENTITY_ALREADY_EXISTS"
    status_code = status.HTTP_400_BAD_REQUEST


class AccountAlreadyExistsError(EntityAlreadyExistsError):
    error_code = "ACCOUNT_ALREADY_EXISTS"


class WorkspaceAlreadyExistsError(EntityAlreadyExistsError):
    error_code = "WORKSPACE_ALREADY_EXISTS"


class DocumentIterationAlreadyExistsError(EntityAlreadyExistsError):
    error_code = "DOCUMENT_ITERATION_ALREADY_EXISTS"


class GCMAccountAlreadyExistsError(EntityAlreadyExistsError):
    error_code = "GCM_ACCOUNT_ALREADY_EXISTS"


class CreationError(ApplicationError):
    error_code = "CREATION_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST


class AccessRightError(ApplicationError):
    error_code = "ACCESS_RIGHT_ERROR"
    status_code = status.HTTP_403_FORBIDDEN


class NotAllowedError(ApplicationError):
    error_code = "NOT_ALLOWED"
    status_code = status.HTTP_403_FORBIDDEN


class AuthenticationError(ApplicationError):
    error_code = "AUTHENTICATION_ERROR"
    status_code = status.HTTP_401_UNAUTHORIZED


class AccountNotEnabledError(AuthenticationError):
    error_code = "ACCOUNT_NOT_ENABLED"


class IndexerConfigurationError(ApplicationError):
    error_code = "INDEXER_CONFIGURATION_ERROR"


def create_error_response(
    status_code: int,
    message: str,
    error_code: str = "INTERNAL_ERROR",
    details: Optional[Dict[str, Any]] = None,
    error_id: Optional[str] = None,
    request_path: Optional[str] = None,
) -> JSONResponse:
    """Create standardized error response."""

    error_id = error_id or str(uuid.uuid4())[:8]

    error_response = {
        "error": {
            "code": error_code,
            "message": message,
            "error_id": error_id,
        }
    }

    if details:
        error_response["error"]["details"] = details

    if request_path:
        error_response["error"]["path"] = request_path

    return JSONResponse(status_code=status_code, content=error_response)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Handle FastAPI/Starlette HTTP exceptions."""
    error_id = str(uuid.uuid4())[:8]

    logger.warning(
        "HTTP exception occurred",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
        method=request.method,
        error_id=error_id,
    )

    response = create_error_response(
        status_code=exc.status_code,
        message=exc.detail,
        error_code="HTTP_ERROR",
        error_id=error_id,
        request_path=str(request.url.path),
    )
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors."""
    error_id = str(uuid.uuid4())[:8]

    logger.warning(
        "Validation exception occurred",
        errors=exc.errors(),
        path=request.url.path,
        method=request.method,
        error_id=error_id,
    )

    formatted_errors = []
    for error in exc.errors():
        formatted_errors.append(
            {
                "field": ".".join(str(x) for x in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
        )

    return create_error_response(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        message="Request validation failed",
        error_code="VALIDATION_ERROR",
        details={"validation_errors": formatted_errors},
        error_id=error_id,
        request_path=str(request.url.path),
    )


async def application_exception_handler(
    request: Request, exc: ApplicationError
) -> JSONResponse:
    """Handle application exceptions, localizing the message for the caller."""
    error_id = str(uuid.uuid4())[:8]
    locale = exc.locale or resolve_locale(request.headers.get("accept-language"))
    message = exc.get_localized_message(locale)

    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "Application exception occurred",
        error_code=exc.error_code,
        message=message,
        details=exc.details,
        path=request.url.path,
        method=request.method,
        error_id=error_id,
    )

    return create_error_response(
        status_code=exc.status_code,
        message=message,
        error_code=exc.error_code,
        details=exc.details,
        error_id=error_id,
        request_path=str(request.url.path),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all other unhandled exceptions."""
    error_id = str(uuid.uuid4())[:8]

    logger.error(
        "Unhandled exception occurred",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method,
        error_id=error_id,
        exc_info=True,
    )

    if settings.is_development:
        details = {
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc().split("\n"),
        }
        message = str(exc)
    else:
        details = None
        message = "An unexpected error occurred"

    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message=message,
        error_code="INTERNAL_ERROR",
        details=details,
        error_id=error_id,
        request_path=str(request.url.path),
    )


def setup_exception_handlers(app):
    """Setup all exception handlers for the FastAPI app."""

    app.add_exception_handler(ApplicationError, application_exception_handler)

    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.add_exception_handler(Exception, general_exception_handler)
