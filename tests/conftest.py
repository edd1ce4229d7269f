"""Global test configuration and fixtures for Keywarden."""

import os

# Cheap bcrypt for tests; read when keywarden.utils.hashing is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from collections.abc import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from asgi_lifespan import LifespanManager  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker  # noqa: E402

from keywarden.api.core.constants import API_KEY_HEADER, INSTALLER_KEY_HEADER  # noqa: E402
from keywarden.database.connection import (  # noqa: E402
    build_engine,
    build_session_factory,
    create_tables,
)
from keywarden.main import create_app  # noqa: E402
from keywarden.modules.data.rows import StaticRowService  # noqa: E402
from keywarden.utils.settings.app import AppSettings  # noqa: E402
from keywarden.utils.settings.auth import AuthMode, AuthSettings  # noqa: E402
from keywarden.utils.settings.database import DatabaseSettings  # noqa: E402

from tests.factories import ApiKeyFactory, ReachInstanceFactory  # noqa: E402
from tests.utils.app_settings import (  # noqa: E402
    BASE_URL,
    TEST_CONFIGURED_KEY,
    TEST_INSTALLER_KEY,
    make_auth_settings,
)


@pytest.fixture
def api_key_factory():
    return ApiKeyFactory


@pytest.fixture
def reach_instance_factory():
    return ReachInstanceFactory


@pytest_asyncio.fixture
async def async_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Fresh SQLite database file per test."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'keywarden.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_session_factory(async_engine)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def auth_settings() -> AuthSettings:
    return make_auth_settings()


@pytest.fixture
def row_service() -> StaticRowService:
    return StaticRowService(
        {
            "sales": {
                "orders": [
                    {"id": 1, "customer": "initech", "total": 120},
                    {"id": 2, "customer": "umbrella", "total": 75},
                ]
            },
            "hr": {"people": [{"id": "p-1", "name": "Peter"}]},
            "analytics": {"events": [{"id": "e-1", "kind": "login"}]},
            "sandbox": {"notes": [{"id": 1, "text": "scratch"}]},
        }
    )


@pytest.fixture
def app_factory(session_factory, row_service):
    """Build an app bound to the test database with the given auth settings."""

    def build(settings: AuthSettings) -> FastAPI:
        return create_app(
            app_settings=AppSettings(ENVIRONMENT="TEST"),
            auth_settings=settings,
            database_settings=DatabaseSettings(DATABASE_AUTO_CREATE=False),
            session_factory=session_factory,
            row_service=row_service,
        )

    return build


@pytest_asyncio.fixture
async def app(app_factory, auth_settings) -> AsyncGenerator[FastAPI, None]:
    """Application in enforced mode, with lifespan running."""
    application = app_factory(auth_settings)
    async with LifespanManager(application):
        yield application


@pytest_asyncio.fixture
async def dev_app(app_factory) -> AsyncGenerator[FastAPI, None]:
    """Application in dev bypass mode."""
    application = app_factory(make_auth_settings(AuthMode.DEV_BYPASS))
    async with LifespanManager(application):
        yield application


# HTTP Client Fixtures
@pytest_asyncio.fixture
async def public_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Client without any credentials."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url=BASE_URL) as ac:
        yield ac


@pytest_asyncio.fixture
async def installer_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Client carrying the installer key."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url=BASE_URL,
        headers={INSTALLER_KEY_HEADER: TEST_INSTALLER_KEY},
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def configured_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Client authenticated with a statically configured key."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url=BASE_URL,
        headers={API_KEY_HEADER: TEST_CONFIGURED_KEY},
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def dev_client(dev_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Client without credentials against the dev bypass app."""
    async with AsyncClient(transport=ASGITransport(app=dev_app), base_url=BASE_URL) as ac:
        yield ac


@pytest.fixture
def client_factory(app: FastAPI):
    """Factory for clients with arbitrary headers against the enforced app."""

    def create_client(**headers: str) -> AsyncClient:
        return AsyncClient(
            transport=ASGITransport(app=app),
            base_url=BASE_URL,
            headers=headers,
        )

    return create_client


@pytest.fixture
def api_key_client(client_factory):
    """Factory for clients presenting a given X-Api-Key."""

    def create_client(plain_key: str) -> AsyncClient:
        return client_factory(**{API_KEY_HEADER: plain_key})

    return create_client
