"""
Integration tests for workspace and document iteration endpoints.
"""

import pytest

WORKSPACES_URL = "/api/v1/workspaces"


def iteration_url(workspace_id: str, document_id: str, version: str, iteration: int) -> str:
    return (
        f"{WORKSPACES_URL}/{workspace_id}/documents/{document_id}"
        f"/versions/{version}/iterations/{iteration}"
    )


class TestWorkspaceEndpoints:
    """Tests for POST /workspaces and PUT /workspaces/{id}/add-user."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_create_workspace(self, async_client, registered_account, basic_header, workspace_id):
        response = await async_client.post(
            WORKSPACES_URL,
            json={"id": workspace_id, "description": "Engineering", "folderLocked": True},
            headers=basic_header(*registered_account),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == workspace_id
        assert data["folderLocked"] is True
        assert data["admin"]["login"] == registered_account[0]

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_create_duplicate_workspace(self, async_client, registered_account, basic_header, workspace_id):
        headers = basic_header(*registered_account)
        await async_client.post(WORKSPACES_URL, json={"id": workspace_id}, headers=headers)

        response = await async_client.post(WORKSPACES_URL, json={"id": workspace_id}, headers=headers)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "WORKSPACE_ALREADY_EXISTS"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_create_workspace_with_forbidden_id(self, async_client, registered_account, basic_header):
        response = await async_client.post(
            WORKSPACES_URL, json={"id": "a b"}, headers=basic_header(*registered_account)
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "CREATION_ERROR"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_add_user_makes_workspace_visible(
        self, async_client, registered_account, other_account, basic_header, workspace_id
    ):
        admin_headers = basic_header(*registered_account)
        await async_client.post(WORKSPACES_URL, json={"id": workspace_id}, headers=admin_headers)

        response = await async_client.put(
            f"{WORKSPACES_URL}/{workspace_id}/add-user",
            json={"login": other_account[0], "readOnly": True},
            headers=admin_headers,
        )
        listed = await async_client.get("/api/v1/accounts/workspaces", headers=basic_header(*other_account))

        assert response.status_code == 204
        assert [w["id"] for w in listed.json()] == [workspace_id]

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_non_admin_cannot_add_user(
        self, async_client, registered_account, other_account, basic_header, workspace_id
    ):
        await async_client.post(WORKSPACES_URL, json={"id": workspace_id}, headers=basic_header(*registered_account))

        response = await async_client.put(
            f"{WORKSPACES_URL}/{workspace_id}/add-user",
            json={"login": other_account[0]},
            headers=basic_header(*other_account),
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "ACCESS_RIGHT_ERROR"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_add_user_to_unknown_workspace(self, async_client, registered_account, basic_header):
        response = await async_client.put(
            f"{WORKSPACES_URL}/nowhere/add-user",
            json={"login": registered_account[0]},
            headers=basic_header(*registered_account),
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "WORKSPACE_NOT_FOUND"


class TestDocumentIterationEndpoints:
    """Tests for document iteration CRUD."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_document_iteration_lifecycle(
        self, async_client, registered_account, basic_header, workspace_id
    ):
        headers = basic_header(*registered_account)
        await async_client.post(WORKSPACES_URL, json={"id": workspace_id}, headers=headers)

        created = await async_client.post(
            f"{WORKSPACES_URL}/{workspace_id}/documents",
            json={"documentMasterId": "SPEC-001", "title": "Specification"},
            headers=headers,
        )
        assert created.status_code == 201
        body = created.json()
        assert body["version"] == "A"
        assert body["iteration"] == 1
        assert body["authorLogin"] == registered_account[0]

        url = iteration_url(workspace_id, "SPEC-001", "A", 1)

        updated = await async_client.put(url, json={"revisionNote": "Reviewed"}, headers=headers)
        assert updated.status_code == 200
        assert updated.json()["revisionNote"] == "Reviewed"

        fetched = await async_client.get(url, headers=headers)
        assert fetched.status_code == 200
        assert fetched.json()["title"] == "Specification"

        deleted = await async_client.delete(url, headers=headers)
        assert deleted.status_code == 204

        missing = await async_client.get(url, headers=headers)
        assert missing.status_code == 404
        assert missing.json()["error"]["code"] == "DOCUMENT_ITERATION_NOT_FOUND"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_read_only_member_cannot_write(
        self, async_client, registered_account, other_account, basic_header, workspace_id
    ):
        admin_headers = basic_header(*registered_account)
        member_headers = basic_header(*other_account)
        await async_client.post(WORKSPACES_URL, json={"id": workspace_id}, headers=admin_headers)
        await async_client.put(
            f"{WORKSPACES_URL}/{workspace_id}/add-user",
            json={"login": other_account[0], "readOnly": True},
            headers=admin_headers,
        )
        await async_client.post(
            f"{WORKSPACES_URL}/{workspace_id}/documents",
            json={"documentMasterId": "SPEC-001"},
            headers=admin_headers,
        )
        url = iteration_url(workspace_id, "SPEC-001", "A", 1)

        read = await async_client.get(url, headers=member_headers)
        write = await async_client.put(url, json={"revisionNote": "x"}, headers=member_headers)

        assert read.status_code == 200
        assert write.status_code == 403

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_iteration_number_must_be_positive(
        self, async_client, registered_account, basic_header, workspace_id
    ):
        response = await async_client.get(
            iteration_url(workspace_id, "SPEC-001", "A", 0), headers=basic_header(*registered_account)
        )

        assert response.status_code == 422
