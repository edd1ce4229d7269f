from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from keywarden.api.core.constants import API_VERSION_HEADER
from keywarden.api.core.exceptions.base import KeywardenException
from keywarden.api.core.messages import MessageCode
from keywarden.utils.logger import get_client_ip, get_logger
from keywarden.utils.settings.app import AppSettings

logger = get_logger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    def __init__(self, app, is_production: bool = False, api_version: str | None = None):
        super().__init__(app)
        self.is_production = is_production
        self.api_version = api_version or AppSettings().API_VERSION

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        headers = {
            "X-Content-Type-Options": "nosniff",
            "X-Frame-Options": "DENY",
            "Referrer-Policy": "no-referrer",
            # Responses may carry a freshly issued key
            "Cache-Control": "no-store",
            "X-Permitted-Cross-Domain-Policies": "none",
            API_VERSION_HEADER: self.api_version,
        }

        if self.is_production:
            headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'"

        if self.is_production and request.url.scheme == "https":
            headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        # Don't override CORS headers that may have been set by CORSMiddleware
        for key, value in headers.items():
            if key not in response.headers:
                response.headers[key] = value

        return response


class PayloadSizeMiddleware(BaseHTTPMiddleware):
    """Reject request bodies above the configured limit."""

    def __init__(self, app, max_request_size: int | None = None):
        super().__init__(app)
        self.max_request_size = max_request_size or AppSettings().MAX_REQUEST_SIZE

    async def dispatch(self, request: Request, call_next) -> Response:
        content_length = request.headers.get("Content-Length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_request_size:
            logger.warning(
                "Request too large",
                content_length=int(content_length),
                ip_address=get_client_ip(request),
            )
            exc = KeywardenException(
                MessageCode.REQUEST_TOO_LARGE,
                status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                details={
                    "description": f"Request size ({content_length} bytes) exceeds maximum allowed ({self.max_request_size} bytes)"
                },
            )
            return JSONResponse(status_code=exc.status_code, content=exc.to_response_dict())

        return await call_next(request)
