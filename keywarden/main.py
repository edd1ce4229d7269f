import uvicorn
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from keywarden.api.core.exceptions.base import register_exception_handlers
from keywarden.api.core.middleware.auth import tenant_middleware
from keywarden.api.core.middleware.logging import logging_middleware
from keywarden.api.core.middleware.security import (
    SecurityHeadersMiddleware,
    PayloadSizeMiddleware,
)
from keywarden.api.router import api_router
from keywarden.database.connection import (
    build_engine,
    build_session_factory,
    create_tables,
)
from keywarden.modules.data.rows import RowService, StaticRowService
from keywarden.modules.tenancy.directory import (
    CredentialDirectory,
    build_default_directory,
)
from keywarden.utils.logger import setup_logging
from keywarden.utils.settings.app import AppSettings
from keywarden.utils.settings.auth import AuthSettings
from keywarden.utils.settings.database import DatabaseSettings


def create_app(
    app_settings: AppSettings | None = None,
    auth_settings: AuthSettings | None = None,
    database_settings: DatabaseSettings | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    credential_directory: CredentialDirectory | None = None,
    row_service: RowService | None = None,
) -> FastAPI:
    """Build the application.

    Auth mode and installer key are fixed here, from deployment settings, and
    cannot be changed per request.
    """
    app_settings = app_settings or AppSettings()
    auth_settings = auth_settings or AuthSettings()
    database_settings = database_settings or DatabaseSettings()

    app_settings.validate_prod()
    auth_settings.validate_for(app_settings.ENVIRONMENT)

    is_production = app_settings.is_production

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        # Startup
        logger = setup_logging(is_production)
        logger.info("Starting Keywarden...", auth_mode=auth_settings.AUTH_MODE.value)

        engine = None
        factory = session_factory
        if factory is None:
            engine = build_engine(database_settings.DATABASE_URL_ASYNC)
            if database_settings.DATABASE_AUTO_CREATE:
                await create_tables(engine)
            factory = build_session_factory(engine)

        app.state.session_factory = factory
        app.state.credential_directory = credential_directory or build_default_directory(
            factory,
            auth_settings.API_KEYS,
            auth_settings.TENANT_DATABASES,
        )
        logger.info("Database session factory added to app state")

        if auth_settings.is_dev_bypass:
            logger.warning("AUTH_MODE=dev_bypass: installer and tenant checks are relaxed")
        if not auth_settings.INSTALLER_KEY.get_secret_value():
            logger.warning("INSTALLER_KEY is not set; installer-gated endpoints will reject every request")

        yield

        # Shutdown
        logger.info("Shutting down Keywarden...")
        if engine is not None:
            await engine.dispose()

    app = FastAPI(
        title="Keywarden",
        description="Multi-tenant API key issuance and validation",
        version=app_settings.API_VERSION,
        lifespan=lifespan,
        # Security: Disable docs in production
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
        openapi_url=None if is_production else "/openapi.json",
    )

    app.state.auth_settings = auth_settings
    app.state.row_service = row_service or StaticRowService()
    app.state.dev_bypass_warned = False

    # Register global exception handlers
    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        SecurityHeadersMiddleware,
        is_production=is_production,
        api_version=app_settings.API_VERSION,
    )
    app.add_middleware(
        PayloadSizeMiddleware,
        max_request_size=app_settings.MAX_REQUEST_SIZE,
    )
    app.middleware("http")(tenant_middleware)
    app.middleware("http")(logging_middleware)

    app.include_router(api_router)

    return app


app = create_app()


def run_dev_server():
    """Run development server with auto-reload."""
    uvicorn.run(
        "keywarden.main:app", host="0.0.0.0", port=8010, reload=True, access_log=False
    )


def run_prod_server():
    """Run production server."""
    uvicorn.run(
        "keywarden.main:app", host="0.0.0.0", port=8010, reload=False, access_log=False
    )


if __name__ == "__main__":
    run_dev_server()
