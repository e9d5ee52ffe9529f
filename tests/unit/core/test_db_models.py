"""
Unit tests for the database models.

Tests SQLAlchemy model definitions and the domain models built on them.
"""

import pytest


class TestTableDefinitions:
    """Tests for table names and primary keys."""

    @pytest.mark.unit
    def test_table_names(self):
        from app.models.db_models import Base

        assert set(Base.metadata.tables) == {
            "accounts",
            "user_group_mappings",
            "gcm_accounts",
            "workspaces",
            "workspace_user_memberships",
            "document_iterations",
        }

    @pytest.mark.unit
    def test_document_iteration_composite_key(self):
        from app.models.db_models import DocumentIterationModel

        primary_key = [c.name for c in DocumentIterationModel.__table__.primary_key.columns]

        assert primary_key == ["workspace_id", "document_master_id", "version", "iteration"]

    @pytest.mark.unit
    def test_gcm_id_is_unique(self):
        from app.models.db_models import GCMAccountModel

        assert GCMAccountModel.__table__.c.gcm_id.unique is True


class TestDomainModels:
    """Tests for pydantic domain models."""

    @pytest.mark.unit
    def test_document_iteration_key_string(self):
        from app.models.document import DocumentIterationKey

        key = DocumentIterationKey("eng", "SPEC-001", "A", 2)

        assert str(key) == "eng/SPEC-001-A-2"
        assert key == DocumentIterationKey("eng", "SPEC-001", "A", 2)

    @pytest.mark.unit
    def test_document_iteration_key_property(self):
        from app.models.document import DocumentIteration, DocumentIterationKey

        doc = DocumentIteration(
            workspace_id="eng",
            document_master_id="SPEC-001",
            version="A",
            iteration=1,
            author_login="jdoe",
        )

        assert doc.key == DocumentIterationKey("eng", "SPEC-001", "A", 1)

    @pytest.mark.unit
    def test_account_is_admin(self):
        from app.models.account import Account, UserGroupMapping

        user = Account(login="jdoe", password_hash="x", groups=[UserGroupMapping.REGULAR_USER_ROLE_ID])
        admin = Account(login="root", password_hash="x", groups=[UserGroupMapping.ADMIN_ROLE_ID])

        assert user.is_admin is False
        assert admin.is_admin is True

    @pytest.mark.unit
    def test_account_dto_never_serializes_password(self):
        from app.models.schemas import AccountDTO

        dto = AccountDTO.model_validate({"login": "jdoe", "timeZone": "UTC", "newPassword": "secret"})

        assert dto.new_password == "secret"
        dumped = dto.model_dump(by_alias=True)
        assert "newPassword" not in dumped
        assert dumped["timeZone"] == "UTC"


class TestPersistence:
    """Round trip through the in-memory database."""

    @pytest.mark.db
    @pytest.mark.asyncio
    async def test_account_groups_loaded_eagerly(self, database):
        from app.models.db_models import AccountModel, UserGroupMappingModel

        async with database.session() as session:
            account = AccountModel(login="jdoe", password_hash="x")
            account.groups.append(UserGroupMappingModel(login="jdoe", group_name="users"))
            session.add(account)

        async with database.session() as session:
            loaded = await session.get(AccountModel, "jdoe")

            assert [g.group_name for g in loaded.groups] == ["users"]
            assert loaded.enabled is True
