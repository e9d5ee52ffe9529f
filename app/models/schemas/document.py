"""Document iteration schemas for API requests and responses."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from app.models.schemas.base import CamelModel


class DocumentIterationDTO(CamelModel):
    workspace_id: str
    document_master_id: str
    version: str
    iteration: int
    title: str = ""
    revision_note: Optional[str] = None
    author_login: str
    creation_date: Optional[datetime] = None
    modification_date: Optional[datetime] = None


class DocumentIterationCreateDTO(CamelModel):
    document_master_id: str = Field(..., min_length=1, max_length=100, examples=["SPEC-001"])
    version: str = Field(default="A", min_length=1, max_length=10)
    title: str = Field(default="", max_length=255)
    revision_note: Optional[str] = Field(None, max_length=4000)


class DocumentIterationUpdateDTO(CamelModel):
    revision_note: Optional[str] = Field(None, max_length=4000)
