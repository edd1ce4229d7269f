"""Database models for the Keywarden credential service."""

from .api_keys import ApiKey, ApiKeyStatus
from .base import Base
from .reach_instances import ReachInstance

__all__ = [
    # Base
    "Base",
    # Enums
    "ApiKeyStatus",
    # Models
    "ApiKey",
    "ReachInstance",
]
