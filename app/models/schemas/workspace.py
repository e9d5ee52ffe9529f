"""Workspace schemas for API requests and responses."""

from typing import Optional

from pydantic import Field

from app.models.schemas.base import CamelModel


class UserDTO(CamelModel):
    login: str
    name: str = ""
    email: str = ""


class WorkspaceDTO(CamelModel):
    """Workspace as listed to its members."""

    id: str
    description: str = ""
    admin: Optional[UserDTO] = None
    folder_locked: bool = False
    enabled: bool = True


class WorkspaceCreateDTO(CamelModel):
    id: str = Field(..., min_length=1, max_length=100, examples=["engineering"])
    description: str = Field(default="", max_length=2000)
    folder_locked: bool = False


class WorkspaceMemberDTO(CamelModel):
    login: str = Field(..., min_length=1, max_length=100)
    read_only: bool = False
