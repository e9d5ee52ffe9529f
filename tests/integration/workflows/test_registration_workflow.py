"""
End-to-end workflow: a new user registers, then works with the JWT returned
at account creation.
"""

import pytest


class TestRegistrationWorkflow:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_register_then_create_workspace_and_document(
        self, async_client, database, account_payload, bearer_header
    ):
        created = await async_client.post("/api/v1/accounts/create", json=account_payload)
        assert created.status_code == 200
        async_client.cookies.clear()
        headers = bearer_header(created.headers["jwt"])

        workspace = await async_client.post(
            "/api/v1/workspaces", json={"id": "design", "description": "Design office"}, headers=headers
        )
        assert workspace.status_code == 201

        first = await async_client.post(
            "/api/v1/workspaces/design/documents",
            json={"documentMasterId": "DWG-42", "version": "A", "title": "Bracket"},
            headers=headers,
        )
        second = await async_client.post(
            "/api/v1/workspaces/design/documents",
            json={"documentMasterId": "DWG-42", "version": "A", "title": "Bracket"},
            headers=headers,
        )
        assert first.json()["iteration"] == 1
        assert second.json()["iteration"] == 2

        listed = await async_client.get("/api/v1/accounts/workspaces", headers=headers)
        assert [w["id"] for w in listed.json()] == ["design"]

        await async_client.put("/api/v1/accounts/gcm", json={"gcmId": "phone-1"}, headers=headers)
        removed = await async_client.delete("/api/v1/accounts/gcm", headers=headers)
        assert removed.status_code == 204
