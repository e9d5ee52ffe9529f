from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select

from app.core.db_client import db
from app.core.logging import get_service_logger
from app.dao.document_dao import DocumentDAO
from app.models.db_models import DocumentIterationModel
from app.models.document import DocumentIteration, DocumentIterationKey
from app.services.workspace_service import workspace_service

logger = get_service_logger("document")


class DocumentService:
    """Document iteration operations guarded by workspace access rights."""

    def __init__(self):
        self.logger = logger

    def _model_to_pydantic(self, model: DocumentIterationModel) -> DocumentIteration:
        return DocumentIteration(
            workspace_id=model.workspace_id,
            document_master_id=model.document_master_id,
            version=model.version,
            iteration=model.iteration,
            title=model.title or "",
            revision_note=model.revision_note,
            author_login=model.author_login,
            creation_date=model.creation_date,
            modification_date=model.modification_date,
        )

    async def create_document_iteration(
        self,
        caller_login: str,
        workspace_id: str,
        document_master_id: str,
        version: str,
        title: str = "",
        revision_note: Optional[str] = None,
    ) -> DocumentIteration:
        """
        Create the next iteration of a document revision (iteration 1 for a
        new document).

        Raises:
            WorkspaceNotFoundError, AccessRightError,
            DocumentIterationAlreadyExistsError
        """
        async with db.session() as session:
            await workspace_service.check_write_access(session, workspace_id, caller_login)

            result = await session.execute(
                select(func.max(DocumentIterationModel.iteration)).where(
                    DocumentIterationModel.workspace_id == workspace_id,
                    DocumentIterationModel.document_master_id == document_master_id,
                    DocumentIterationModel.version == version,
                )
            )
            last_iteration = result.scalar() or 0

            now = datetime.now(timezone.utc)
            doc = DocumentIterationModel(
                workspace_id=workspace_id,
                document_master_id=document_master_id,
                version=version,
                iteration=last_iteration + 1,
                title=title,
                revision_note=revision_note,
                author_login=caller_login,
                creation_date=now,
                modification_date=now,
            )
            doc = await DocumentDAO(session).create_doc(doc)
            document = self._model_to_pydantic(doc)

        self.logger.info("Document iteration created", key=str(document.key))
        return document

    async def get_document_iteration(
        self, caller_login: str, key: DocumentIterationKey
    ) -> DocumentIteration:
        """
        Raises:
            WorkspaceNotFoundError, AccessRightError, DocumentIterationNotFoundError
        """
        async with db.session() as session:
            await workspace_service.check_read_access(session, key.workspace_id, caller_login)
            doc = await DocumentDAO(session).load_doc(key)
            return self._model_to_pydantic(doc)

    async def update_revision_note(
        self, caller_login: str, key: DocumentIterationKey, revision_note: Optional[str]
    ) -> DocumentIteration:
        """
        Raises:
            WorkspaceNotFoundError, AccessRightError, DocumentIterationNotFoundError
        """
        async with db.session() as session:
            await workspace_service.check_write_access(session, key.workspace_id, caller_login)
            dao = DocumentDAO(session)
            doc = await dao.load_doc(key)

            doc.revision_note = revision_note
            doc.modification_date = datetime.now(timezone.utc)
            doc = await dao.update_doc(doc)
            await session.flush()
            document = self._model_to_pydantic(doc)

        self.logger.info("Document iteration updated", key=str(key))
        return document

    async def delete_document_iteration(
        self, caller_login: str, key: DocumentIterationKey
    ) -> None:
        """
        Raises:
            WorkspaceNotFoundError, AccessRightError, DocumentIterationNotFoundError
        """
        async with db.session() as session:
            await workspace_service.check_write_access(session, key.workspace_id, caller_login)
            dao = DocumentDAO(session)
            doc = await dao.load_doc(key)
            await dao.remove_doc(doc)

        self.logger.info("Document iteration removed", key=str(key))


# Global service instance
document_service = DocumentService()
