from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    DocumentIterationAlreadyExistsError,
    DocumentIterationNotFoundError,
)
from app.core.logging import get_logger
from app.models.db_models import DocumentIterationModel
from app.models.document import DocumentIterationKey

logger = get_logger(__name__)


class DocumentDAO:
    """Thin persistence façade over an async session for document iterations.

    ``update_doc`` and ``remove_doc`` pass straight through to the session;
    access checks and consistency rules belong to the calling service.
    """

    def __init__(self, session: AsyncSession, locale: Optional[str] = None):
        self.session = session
        self.locale = locale

    async def update_doc(self, doc: DocumentIterationModel) -> DocumentIterationModel:
        return await self.session.merge(doc)

    async def remove_doc(self, doc: DocumentIterationModel) -> None:
        await self.session.delete(doc)

    async def load_doc(self, key: DocumentIterationKey) -> DocumentIterationModel:
        doc = await self.session.get(
            DocumentIterationModel,
            (key.workspace_id, key.document_master_id, key.version, key.iteration),
        )
        if doc is None:
            raise DocumentIterationNotFoundError(str(key), locale=self.locale)
        return doc

    async def create_doc(self, doc: DocumentIterationModel) -> DocumentIterationModel:
        key = DocumentIterationKey(
            doc.workspace_id, doc.document_master_id, doc.version, doc.iteration
        )
        existing = await self.session.get(
            DocumentIterationModel,
            (key.workspace_id, key.document_master_id, key.version, key.iteration),
        )
        if existing is not None:
            raise DocumentIterationAlreadyExistsError(str(key), locale=self.locale)

        self.session.add(doc)
        await self.session.flush()
        logger.debug("Document iteration created", key=str(key))
        return doc
