"""Account schemas for API requests and responses."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from app.models.schemas.base import CamelModel


class AccountDTO(CamelModel):
    """Account as exchanged over REST."""

    login: Optional[str] = Field(
        None,
        description="Account login (required on creation, ignored on update)",
        examples=["jdoe"],
    )
    name: Optional[str] = Field(None, examples=["John Doe"])
    email: Optional[str] = Field(None, examples=["john.doe@example.com"])
    language: Optional[str] = Field(None, examples=["en"])
    time_zone: Optional[str] = Field(None, examples=["Europe/Paris"])
    new_password: Optional[str] = Field(
        None,
        exclude=True,
        description="New password (write-only)",
    )
    admin: bool = Field(default=False, description="Whether the caller is an administrator")
    enabled: Optional[bool] = None
    creation_date: Optional[datetime] = None


class GCMAccountDTO(CamelModel):
    """Push-notification registration token."""

    gcm_id: str = Field(..., min_length=1, max_length=255, description="GCM registration id")


class AccountEnableDTO(CamelModel):
    """Admin request toggling an account."""

    enabled: bool
