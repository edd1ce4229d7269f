"""Test factories for Keywarden models."""

from .base import AsyncSQLAlchemyModelFactory
from .api_keys import ApiKeyFactory
from .reach_instances import ReachInstanceFactory

__all__ = [
    "AsyncSQLAlchemyModelFactory",
    "ApiKeyFactory",
    "ReachInstanceFactory",
]
