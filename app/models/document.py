from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class DocumentIterationKey:
    """Composite identifier of a document iteration."""

    workspace_id: str
    document_master_id: str
    version: str
    iteration: int

    def __str__(self) -> str:
        return f"{self.workspace_id}/{self.document_master_id}-{self.version}-{self.iteration}"


class DocumentIteration(BaseModel):
    """One iteration of a document revision."""

    workspace_id: str
    document_master_id: str
    version: str
    iteration: int = Field(..., ge=1)
    title: str = ""
    revision_note: Optional[str] = None
    author_login: str
    creation_date: Optional[datetime] = None
    modification_date: Optional[datetime] = None

    @property
    def key(self) -> DocumentIterationKey:
        return DocumentIterationKey(
            self.workspace_id, self.document_master_id, self.version, self.iteration
        )
