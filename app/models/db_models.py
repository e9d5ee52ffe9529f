"""SQLAlchemy ORM models.

Tables for accounts and their group mappings, push-notification (GCM)
accounts, workspaces with their user memberships, and document iterations.
"""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class AccountModel(Base):
    __tablename__ = "accounts"

    login: Mapped[str] = mapped_column(String(100), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), default="")
    email: Mapped[str] = mapped_column(String(255), default="")
    language: Mapped[str] = mapped_column(String(10), default="en")
    time_zone: Mapped[str] = mapped_column(String(64), default="UTC")
    password_hash: Mapped[str] = mapped_column(String(255))
    enabled: Mapped[bool] = mapped_column(Boolean, default=True)
    creation_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    groups: Mapped[List["UserGroupMappingModel"]] = relationship(
        back_populates="account", cascade="all, delete-orphan", lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<AccountModel(login='{self.login}', enabled={self.enabled})>"


class UserGroupMappingModel(Base):
    __tablename__ = "user_group_mappings"

    login: Mapped[str] = mapped_column(
        String(100), ForeignKey("accounts.login", ondelete="CASCADE"), primary_key=True
    )
    group_name: Mapped[str] = mapped_column(String(50), primary_key=True)

    account: Mapped[AccountModel] = relationship(back_populates="groups")


class GCMAccountModel(Base):
    __tablename__ = "gcm_accounts"

    account_login: Mapped[str] = mapped_column(
        String(100), ForeignKey("accounts.login", ondelete="CASCADE"), primary_key=True
    )
    gcm_id: Mapped[str] = mapped_column(String(255), unique=True)


class WorkspaceModel(Base):
    __tablename__ = "workspaces"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    description: Mapped[str] = mapped_column(Text, default="")
    admin_login: Mapped[str] = mapped_column(
        String(100), ForeignKey("accounts.login")
    )
    folder_locked: Mapped[bool] = mapped_column(Boolean, default=False)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True)
    creation_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    admin: Mapped[AccountModel] = relationship(lazy="selectin")


class WorkspaceUserMembershipModel(Base):
    __tablename__ = "workspace_user_memberships"

    workspace_id: Mapped[str] = mapped_column(
        String(100), ForeignKey("workspaces.id", ondelete="CASCADE"), primary_key=True
    )
    member_login: Mapped[str] = mapped_column(
        String(100), ForeignKey("accounts.login", ondelete="CASCADE"), primary_key=True
    )
    read_only: Mapped[bool] = mapped_column(Boolean, default=False)


class DocumentIterationModel(Base):
    __tablename__ = "document_iterations"

    workspace_id: Mapped[str] = mapped_column(
        String(100), ForeignKey("workspaces.id", ondelete="CASCADE"), primary_key=True
    )
    document_master_id: Mapped[str] = mapped_column(String(100), primary_key=True)
    version: Mapped[str] = mapped_column(String(10), primary_key=True)
    iteration: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(255), default="")
    revision_note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    author_login: Mapped[str] = mapped_column(
        String(100), ForeignKey("accounts.login")
    )
    creation_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    modification_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    def __repr__(self) -> str:
        return (
            f"<DocumentIterationModel({self.workspace_id}/{self.document_master_id}"
            f"-{self.version}-{self.iteration})>"
        )
