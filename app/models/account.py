from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer


class UserGroupMapping:
    """Security group names an account can belong to."""

    REGULAR_USER_ROLE_ID = "users"
    ADMIN_ROLE_ID = "admin"

    ALLOWED_ROLES = (REGULAR_USER_ROLE_ID, ADMIN_ROLE_ID)

    def __init__(self, login: str, group_name: str):
        self.login = login
        self.group_name = group_name

    def __repr__(self) -> str:
        return f"<UserGroupMapping(login='{self.login}', group='{self.group_name}')>"


class Account(BaseModel):
    """Platform account (one per login, shared across workspaces)."""

    login: str = Field(..., description="Unique account login")
    name: str = Field(default="", description="Display name")
    email: str = Field(default="", description="Email address")
    language: str = Field(default="en", description="Preferred locale")
    time_zone: str = Field(default="UTC", description="Preferred time zone")
    password_hash: str = Field(..., description="Hashed password", repr=False)
    enabled: bool = Field(default=True, description="Whether the account may log in")
    groups: List[str] = Field(default_factory=list, description="Security groups")
    creation_date: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the account was created",
    )

    @field_serializer("creation_date")
    def serialize_datetime(self, value: Optional[datetime]) -> Optional[str]:
        """Serialize datetime fields to ISO format."""
        return value.isoformat() if value else None

    @property
    def is_admin(self) -> bool:
        return UserGroupMapping.ADMIN_ROLE_ID in self.groups
