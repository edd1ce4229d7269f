import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from keywarden.api.core.constants import (
    API_KEY_HEADER,
    SKIP_AUTH_PATHS,
    SKIP_AUTH_PREFIXES,
)
from keywarden.api.core.exceptions.base import KeywardenException
from keywarden.api.core.messages import MessageCode
from keywarden.core.context import TenantContext, TenantSource
from keywarden.modules.tenancy.directory import CredentialDirectory
from keywarden.utils.path_helpers import path_has_prefix, path_matches
from keywarden.utils.settings.auth import AuthSettings

logger = structlog.get_logger(__name__)


def _reject(message_code: MessageCode, status_code: int, description: str) -> JSONResponse:
    exc = KeywardenException(message_code, status_code, {"description": description})
    return JSONResponse(status_code=exc.status_code, content=exc.to_response_dict())


def _dev_bypass_context(request: Request, settings: AuthSettings) -> TenantContext:
    if not getattr(request.app.state, "dev_bypass_warned", False):
        request.app.state.dev_bypass_warned = True
        logger.warning(
            "Dev bypass active: requests without X-Api-Key run as the default tenant",
            tenant=settings.DEV_DEFAULT_TENANT,
        )
    return TenantContext(
        client_id=settings.DEV_DEFAULT_TENANT,
        allowed_databases=frozenset(settings.DEV_DEFAULT_DATABASES),
        source=TenantSource.DEV_BYPASS,
    )


async def tenant_middleware(request: Request, call_next):
    """
    Resolve the caller's tenant before any data-plane handler runs.

    Key management and reach endpoints authenticate themselves and are passed
    through untouched, as are health and docs.
    """
    path = request.url.path
    if path_matches(path, SKIP_AUTH_PATHS) or path_has_prefix(path, SKIP_AUTH_PREFIXES):
        return await call_next(request)

    settings: AuthSettings = request.app.state.auth_settings
    directory: CredentialDirectory = request.app.state.credential_directory

    raw_key = request.headers.get(API_KEY_HEADER)

    if raw_key:
        try:
            tenant = await directory.resolve(raw_key)
        except SQLAlchemyError as e:
            logger.error(
                "Credential lookup failed", error_type=type(e).__name__, path=path
            )
            return _reject(
                MessageCode.INTERNAL_ERROR,
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Credential store unavailable",
            )

        if tenant is None:
            logger.debug("API key rejected", path=path)
            return _reject(
                MessageCode.INVALID_API_KEY,
                status.HTTP_401_UNAUTHORIZED,
                "The presented API key is unknown, paused or revoked",
            )
    elif settings.is_dev_bypass:
        tenant = _dev_bypass_context(request, settings)
    else:
        return _reject(
            MessageCode.AUTH_REQUIRED,
            status.HTTP_401_UNAUTHORIZED,
            f"Provide the '{API_KEY_HEADER}' header",
        )

    request.state.tenant = tenant
    structlog.contextvars.bind_contextvars(tenant=tenant.client_id)
    return await call_next(request)
