"""Centralized message codes and default messages for API responses."""

from enum import Enum


class MessageCode(str, Enum):
    """Centralized message codes for API responses."""

    # Success codes
    SUCCESS = "SUCCESS"
    CREATED = "CREATED"

    # Authentication & Authorization
    AUTH_REQUIRED = "AUTH_REQUIRED"
    INVALID_API_KEY = "INVALID_API_KEY"
    INVALID_INSTALLER_KEY = "INVALID_INSTALLER_KEY"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    FORBIDDEN = "FORBIDDEN"

    # API Key lifecycle
    API_KEY_NOT_FOUND_OR_NOT_ACTIVE = "API_KEY_NOT_FOUND_OR_NOT_ACTIVE"
    API_KEY_NOT_FOUND_OR_NOT_PAUSED = "API_KEY_NOT_FOUND_OR_NOT_PAUSED"
    API_KEY_NOT_FOUND_OR_REVOKED = "API_KEY_NOT_FOUND_OR_REVOKED"

    # Reach instances
    INSTANCE_NOT_FOUND_OR_INACTIVE = "INSTANCE_NOT_FOUND_OR_INACTIVE"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    REQUEST_TOO_LARGE = "REQUEST_TOO_LARGE"

    # Data plane
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"

    # Generic errors
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"


# Default messages for each message code
DEFAULT_MESSAGES = {
    MessageCode.SUCCESS: "Operation completed successfully",
    MessageCode.CREATED: "Resource created successfully",
    # Authentication & Authorization
    MessageCode.AUTH_REQUIRED: "Missing X-Api-Key header.",
    MessageCode.INVALID_API_KEY: "Invalid API key.",
    MessageCode.INVALID_INSTALLER_KEY: "Invalid or missing installer key.",
    MessageCode.INVALID_CREDENTIALS: "Invalid credentials.",
    MessageCode.FORBIDDEN: "Access denied",
    # API Key lifecycle
    MessageCode.API_KEY_NOT_FOUND_OR_NOT_ACTIVE: "Key not found or not in Active state.",
    MessageCode.API_KEY_NOT_FOUND_OR_NOT_PAUSED: "Key not found or not in Paused state.",
    MessageCode.API_KEY_NOT_FOUND_OR_REVOKED: "Key not found or already revoked.",
    # Reach instances
    MessageCode.INSTANCE_NOT_FOUND_OR_INACTIVE: "Instance not found or already inactive.",
    # Validation errors
    MessageCode.VALIDATION_ERROR: "Validation failed",
    MessageCode.INVALID_INPUT: "Invalid input provided",
    MessageCode.REQUEST_TOO_LARGE: "Request body too large",
    # Data plane
    MessageCode.RESOURCE_NOT_FOUND: "Resource not found",
    MessageCode.NOT_IMPLEMENTED: "Entity endpoints are not yet implemented.",
    # Generic errors
    MessageCode.CONFLICT: "Resource already exists",
    MessageCode.INTERNAL_ERROR: "Internal server error",
    MessageCode.BAD_REQUEST: "Bad request",
    MessageCode.NOT_FOUND: "Resource not found",
}


def get_default_message(message_code: MessageCode) -> str:
    """Get default message for a message code."""
    return DEFAULT_MESSAGES.get(message_code, "Operation completed")
