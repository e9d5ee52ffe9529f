"""
Integration tests for administration endpoints.
"""

from unittest.mock import patch

import pytest


class TestAdminAccess:
    """Administration requires the admin role."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_regular_user_is_forbidden(self, async_client, registered_account, basic_header):
        response = await async_client.get("/api/v1/admin/accounts", headers=basic_header(*registered_account))

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "ACCESS_RIGHT_ERROR"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_anonymous_is_unauthorized(self, async_client, database):
        response = await async_client.get("/api/v1/admin/indexer")

        assert response.status_code == 401


class TestAdminAccounts:
    """Tests for account administration."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_list_accounts(self, async_client, admin_account, registered_account, basic_header):
        response = await async_client.get("/api/v1/admin/accounts", headers=basic_header(*admin_account))

        assert response.status_code == 200
        accounts = {a["login"]: a for a in response.json()}
        assert accounts[admin_account[0]]["admin"] is True
        assert accounts[registered_account[0]]["admin"] is False

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_validate_pending_account(
        self, async_client, admin_account, account_payload, admin_validation, basic_header
    ):
        created = await async_client.post("/api/v1/accounts/create", json=account_payload)
        assert created.status_code == 202

        enabled = await async_client.put(
            f"/api/v1/admin/accounts/{account_payload['login']}/enable",
            json={"enabled": True},
            headers=basic_header(*admin_account),
        )
        me = await async_client.get(
            "/api/v1/accounts/me",
            headers=basic_header(account_payload["login"], account_payload["newPassword"]),
        )

        assert enabled.status_code == 200
        assert enabled.json()["enabled"] is True
        assert me.status_code == 200

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_enable_unknown_account(self, async_client, admin_account, basic_header):
        response = await async_client.put(
            "/api/v1/admin/accounts/ghost/enable", json={"enabled": True}, headers=basic_header(*admin_account)
        )

        assert response.status_code == 404


class TestAdminIndexer:
    """Tests for GET /api/v1/admin/indexer."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_indexer_configuration(self, async_client, admin_account, basic_header):
        response = await async_client.get("/api/v1/admin/indexer", headers=basic_header(*admin_account))

        assert response.status_code == 200
        data = response.json()
        assert data["serverUri"] == "http://localhost:9200"
        assert data["numberOfShards"] == 1
        assert data["numberOfReplicas"] == 1
        assert data["awsSigning"] is False
        assert "password" not in data

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_invalid_indexer_configuration(self, async_client, admin_account, basic_header):
        from app.core.indexer_config import IndexerConfigManager

        broken = IndexerConfigManager({"number_of_shards": "many", "number_of_replicas": "1"})

        with patch("app.api.v1.admin.indexer_config", broken):
            response = await async_client.get("/api/v1/admin/indexer", headers=basic_header(*admin_account))

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "INDEXER_CONFIGURATION_ERROR"
