from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


class WorkspaceAdmin(BaseModel):
    """Account summary of a workspace administrator."""

    login: str
    name: str = ""
    email: str = ""


class Workspace(BaseModel):
    """Workspace grouping documents, parts and products of a team."""

    id: str = Field(..., description="Workspace identifier")
    description: str = Field(default="", description="Free-form description")
    admin: WorkspaceAdmin = Field(..., description="Workspace administrator")
    folder_locked: bool = Field(
        default=False, description="Whether only the admin may create root folders"
    )
    enabled: bool = Field(default=True, description="Whether the workspace is usable")
    creation_date: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
