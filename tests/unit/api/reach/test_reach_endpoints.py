"""Reach registration, validation and deactivation endpoints."""

import uuid

import pytest
from fastapi import status
from httpx import AsyncClient

from keywarden.api.core.messages import MessageCode
from tests.utils.assertions import (
    assert_error_response,
    assert_status,
    assert_validation_error,
)

REGISTRATION = {
    "tenantId": "acme",
    "secret": "machine-secret",
    "registeredBy": "installer",
    "machineName": "edge-01",
}


async def _register(client: AsyncClient, **overrides) -> dict:
    response = await client.post("/reach/register", json={**REGISTRATION, **overrides})
    return assert_status(response, status.HTTP_201_CREATED)


@pytest.mark.asyncio
async def test_register_returns_instance_without_secret(installer_client: AsyncClient):
    body = await _register(installer_client)

    assert body["tenantId"] == "acme"
    assert "registeredAt" in body
    assert "secret" not in body
    uuid.UUID(body["instanceId"])


@pytest.mark.asyncio
async def test_register_missing_fields(installer_client: AsyncClient):
    response = await installer_client.post(
        "/reach/register", json={"tenantId": "acme", "registeredBy": "installer"}
    )

    assert_validation_error(response, "TenantId, Secret, and RegisteredBy are required.")


@pytest.mark.asyncio
async def test_validate_needs_no_installer_key(installer_client, public_client):
    registered = await _register(installer_client)

    response = await public_client.post(
        "/reach/validate", json={"tenantId": "acme", "secret": "machine-secret"}
    )

    body = assert_status(response, status.HTTP_200_OK)
    assert body == {
        "instanceId": registered["instanceId"],
        "tenantId": "acme",
        "isActive": True,
    }


@pytest.mark.asyncio
async def test_wrong_secret_and_unknown_tenant_are_indistinguishable(
    installer_client, public_client
):
    await _register(installer_client)

    wrong_secret = await public_client.post(
        "/reach/validate", json={"tenantId": "acme", "secret": "nope"}
    )
    unknown_tenant = await public_client.post(
        "/reach/validate", json={"tenantId": "nobody", "secret": "machine-secret"}
    )

    assert_error_response(
        wrong_secret,
        MessageCode.INVALID_CREDENTIALS,
        status.HTTP_401_UNAUTHORIZED,
        "Invalid credentials.",
    )
    assert wrong_secret.status_code == unknown_tenant.status_code
    assert wrong_secret.json() == unknown_tenant.json()


@pytest.mark.asyncio
async def test_validate_missing_fields(public_client: AsyncClient):
    response = await public_client.post("/reach/validate", json={"tenantId": "acme"})

    assert_validation_error(response, "TenantId and Secret are required.")


@pytest.mark.asyncio
async def test_deactivated_instance_still_validates_as_inactive(
    installer_client, public_client
):
    instance_id = (await _register(installer_client))["instanceId"]

    response = await installer_client.put(
        f"/reach/{instance_id}/deactivate", params={"deactivatedBy": "ops"}
    )
    assert assert_status(response, status.HTTP_200_OK) == {
        "deactivated": True,
        "instanceId": instance_id,
    }

    response = await public_client.post(
        "/reach/validate", json={"tenantId": "acme", "secret": "machine-secret"}
    )
    assert assert_status(response, status.HTTP_200_OK)["isActive"] is False


@pytest.mark.asyncio
@pytest.mark.parametrize("instance_id", ["not-a-uuid", str(uuid.uuid4())])
async def test_deactivate_unknown_instance(installer_client: AsyncClient, instance_id):
    response = await installer_client.put(
        f"/reach/{instance_id}/deactivate", params={"deactivatedBy": "ops"}
    )

    assert_error_response(
        response, MessageCode.INSTANCE_NOT_FOUND_OR_INACTIVE, status.HTTP_404_NOT_FOUND
    )


@pytest.mark.asyncio
async def test_deactivate_twice_and_actor_required(installer_client: AsyncClient):
    instance_id = (await _register(installer_client))["instanceId"]

    response = await installer_client.put(f"/reach/{instance_id}/deactivate")
    assert_validation_error(response, "deactivatedBy query parameter is required.")

    await installer_client.put(f"/reach/{instance_id}/deactivate", params={"deactivatedBy": "ops"})
    response = await installer_client.put(
        f"/reach/{instance_id}/deactivate", params={"deactivatedBy": "ops"}
    )
    assert_error_response(
        response, MessageCode.INSTANCE_NOT_FOUND_OR_INACTIVE, status.HTTP_404_NOT_FOUND
    )


@pytest.mark.asyncio
async def test_list_instances(installer_client: AsyncClient):
    registered = await _register(installer_client)
    await _register(installer_client, tenantId="globex")

    response = await installer_client.get("/reach/instances", params={"tenantId": "acme"})

    instances = assert_status(response, status.HTTP_200_OK)
    assert [i["instanceId"] for i in instances] == [registered["instanceId"]]
    assert instances[0]["machineName"] == "edge-01"
    assert "secretHash" not in instances[0]


@pytest.mark.asyncio
async def test_deactivate_non_canonical_id_changes_nothing(installer_client, public_client):
    instance_id = (await _register(installer_client))["instanceId"]
    mangled = f"{instance_id[:4]}-{instance_id.replace('-', '')[4:]}"

    response = await installer_client.put(
        f"/reach/{mangled}/deactivate", params={"deactivatedBy": "ops"}
    )

    assert_error_response(
        response, MessageCode.INSTANCE_NOT_FOUND_OR_INACTIVE, status.HTTP_404_NOT_FOUND
    )
    response = await public_client.post(
        "/reach/validate", json={"tenantId": "acme", "secret": "machine-secret"}
    )
    assert assert_status(response, status.HTTP_200_OK)["isActive"] is True
