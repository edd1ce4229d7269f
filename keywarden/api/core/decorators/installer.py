import hmac
from functools import wraps

from fastapi import Request, status

from keywarden.api.core.constants import INSTALLER_KEY_HEADER
from keywarden.api.core.decorators._common import extract_request
from keywarden.api.core.exceptions.base import KeywardenException
from keywarden.api.core.messages import MessageCode
from keywarden.utils.logger import get_logger
from keywarden.utils.settings.auth import AuthSettings

logger = get_logger(__name__)


def installer_key_matches(presented: str | None, expected: str) -> bool:
    """Constant-time comparison; an unset installer key never matches."""
    if not expected or not presented:
        return False
    return hmac.compare_digest(presented.encode(), expected.encode())


def require_installer_key(allow_bypass: bool = True):
    """Guard a lifecycle endpoint with the ``X-Installer-Key`` header.

    With ``allow_bypass`` the check is skipped while the app runs in dev
    bypass mode. The mode comes from the settings the app was built with, so
    nothing in the request can switch it on.
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            request: Request | None = extract_request(*args, **kwargs)
            if not request:
                raise KeywardenException(
                    MessageCode.INVALID_INSTALLER_KEY,
                    status.HTTP_401_UNAUTHORIZED,
                    {"description": "Request object not found"},
                )

            settings: AuthSettings = request.app.state.auth_settings
            if allow_bypass and settings.is_dev_bypass:
                return await func(*args, **kwargs)

            presented = request.headers.get(INSTALLER_KEY_HEADER)
            if not installer_key_matches(
                presented, settings.INSTALLER_KEY.get_secret_value()
            ):
                logger.debug("Installer key rejected", endpoint=request.url.path)
                raise KeywardenException(
                    MessageCode.INVALID_INSTALLER_KEY,
                    status.HTTP_401_UNAUTHORIZED,
                )

            return await func(*args, **kwargs)

        return wrapper

    return decorator
