"""Installer key gate on the key management surface."""

import uuid

import pytest
from asgi_lifespan import LifespanManager
from fastapi import status
from httpx import ASGITransport, AsyncClient

from keywarden.api.core.constants import INSTALLER_KEY_HEADER
from keywarden.api.core.decorators.installer import installer_key_matches
from tests.utils.app_settings import BASE_URL, TEST_INSTALLER_KEY, make_auth_settings
from tests.utils.assertions import assert_installer_rejected, assert_status

KEY_BODY = {"tenantId": "acme", "label": "prod", "createdBy": "alice"}


def test_installer_key_matches():
    assert installer_key_matches("secret", "secret")
    assert not installer_key_matches("secret", "other")
    assert not installer_key_matches(None, "secret")
    assert not installer_key_matches("", "")
    assert not installer_key_matches("anything", "")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,path",
    [
        ("GET", "/keys?tenantId=acme"),
        ("POST", "/keys"),
        ("PUT", f"/keys/{uuid.uuid4()}/pause?pausedBy=bob"),
        ("PUT", f"/keys/{uuid.uuid4()}/resume"),
        ("DELETE", f"/keys/{uuid.uuid4()}?revokedBy=bob"),
        ("PUT", "/keys/pause"),
        ("PUT", "/keys/resume"),
        ("DELETE", "/keys/revoke"),
        ("GET", "/reach/instances?tenantId=acme"),
        ("PUT", f"/reach/{uuid.uuid4()}/deactivate?deactivatedBy=ops"),
        ("POST", "/reach/register"),
    ],
)
async def test_gated_endpoints_reject_missing_installer_key(public_client, method, path):
    response = await public_client.request(method, path, json=KEY_BODY)

    assert_installer_rejected(response)


@pytest.mark.asyncio
async def test_wrong_installer_key_is_rejected(client_factory):
    async with client_factory(**{INSTALLER_KEY_HEADER: "wrong-key"}) as client:
        response = await client.post("/keys", json=KEY_BODY)

    assert_installer_rejected(response)


@pytest.mark.asyncio
async def test_correct_installer_key_is_accepted(installer_client: AsyncClient):
    response = await installer_client.post("/keys", json=KEY_BODY)

    assert_status(response, status.HTTP_201_CREATED)


@pytest.mark.asyncio
async def test_unset_installer_key_rejects_everything(app_factory):
    application = app_factory(make_auth_settings(INSTALLER_KEY=""))
    async with LifespanManager(application):
        async with AsyncClient(
            transport=ASGITransport(app=application),
            base_url=BASE_URL,
            headers={INSTALLER_KEY_HEADER: ""},
        ) as client:
            response = await client.post("/keys", json=KEY_BODY)

    assert_installer_rejected(response)


@pytest.mark.asyncio
async def test_dev_bypass_skips_installer_check_for_keys(dev_client: AsyncClient):
    response = await dev_client.post("/keys", json=KEY_BODY)

    body = assert_status(response, status.HTTP_201_CREATED)
    assert body["tenantId"] == "acme"


@pytest.mark.asyncio
async def test_dev_bypass_does_not_open_reach_registration(dev_client: AsyncClient):
    response = await dev_client.post(
        "/reach/register",
        json={"tenantId": "acme", "secret": "s", "registeredBy": "installer"},
    )

    assert_installer_rejected(response)


@pytest.mark.asyncio
async def test_dev_bypass_registration_with_installer_key(dev_app):
    async with AsyncClient(
        transport=ASGITransport(app=dev_app),
        base_url=BASE_URL,
        headers={INSTALLER_KEY_HEADER: TEST_INSTALLER_KEY},
    ) as client:
        response = await client.post(
            "/reach/register",
            json={"tenantId": "acme", "secret": "s", "registeredBy": "installer"},
        )

    assert_status(response, status.HTTP_201_CREATED)

