"""End-to-end flow: issue a key, use it, pause, resume and revoke it."""

import pytest
from fastapi import status

from keywarden.api.core.messages import MessageCode
from tests.utils.assertions import assert_error_response, assert_status


@pytest.mark.asyncio
async def test_key_lifecycle_flow(installer_client, api_key_client):
    # Issue
    response = await installer_client.post(
        "/keys", json={"tenantId": "acme", "label": "prod", "createdBy": "alice"}
    )
    issued = assert_status(response, status.HTTP_201_CREATED)
    key_id = issued["keyId"]

    async with api_key_client(issued["apiKey"]) as tenant_client:
        # Use
        response = await tenant_client.get("/data/sales/orders/1")
        assert assert_status(response, status.HTTP_200_OK)["customer"] == "initech"

        # Pause
        response = await installer_client.put(
            f"/keys/{key_id}/pause", params={"pausedBy": "bob"}
        )
        assert_status(response, status.HTTP_200_OK)
        response = await tenant_client.get("/data/sales/orders")
        assert_error_response(response, MessageCode.INVALID_API_KEY, status.HTTP_401_UNAUTHORIZED)

        listed = (await installer_client.get("/keys", params={"tenantId": "acme"})).json()
        assert listed[0]["status"] == "paused"
        assert listed[0]["pausedBy"] == "bob"

        # Resume
        response = await installer_client.put(f"/keys/{key_id}/resume")
        assert_status(response, status.HTTP_200_OK)
        response = await tenant_client.get("/data/sales/orders")
        assert_status(response, status.HTTP_200_OK)

        # Revoke is terminal
        response = await installer_client.delete(
            f"/keys/{key_id}", params={"revokedBy": "carol"}
        )
        assert_status(response, status.HTTP_200_OK)
        response = await tenant_client.get("/data/sales/orders")
        assert_error_response(response, MessageCode.INVALID_API_KEY, status.HTTP_401_UNAUTHORIZED)

    response = await installer_client.put(f"/keys/{key_id}/resume", params={"resumedBy": "dave"})
    assert_error_response(
        response, MessageCode.API_KEY_NOT_FOUND_OR_NOT_PAUSED, status.HTTP_404_NOT_FOUND
    )

    response = await installer_client.put(f"/keys/{key_id}/pause", params={"pausedBy": "dave"})
    assert_error_response(
        response, MessageCode.API_KEY_NOT_FOUND_OR_NOT_ACTIVE, status.HTTP_404_NOT_FOUND
    )

    listed = (await installer_client.get("/keys", params={"tenantId": "acme"})).json()
    assert listed[0]["status"] == "revoked"
    assert listed[0]["revokedBy"] == "carol"


@pytest.mark.asyncio
async def test_reach_instance_flow(installer_client, public_client):
    response = await installer_client.post(
        "/reach/register",
        json={"tenantId": "acme", "secret": "edge-secret", "registeredBy": "installer"},
    )
    instance_id = assert_status(response, status.HTTP_201_CREATED)["instanceId"]

    response = await public_client.post(
        "/reach/validate", json={"tenantId": "acme", "secret": "edge-secret"}
    )
    assert assert_status(response, status.HTTP_200_OK)["isActive"] is True

    response = await installer_client.put(
        f"/reach/{instance_id}/deactivate", params={"deactivatedBy": "ops"}
    )
    assert_status(response, status.HTTP_200_OK)

    instances = (
        await installer_client.get("/reach/instances", params={"tenantId": "acme"})
    ).json()
    assert instances[0]["isActive"] is False
    assert instances[0]["deactivatedBy"] == "ops"
