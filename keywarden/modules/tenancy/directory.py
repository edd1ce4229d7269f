"""Credential directories: map a raw ``X-Api-Key`` value to a tenant."""

import hmac
from typing import Mapping, Protocol, Sequence

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.concurrency import run_in_threadpool

from keywarden.core.context import TenantContext, TenantSource
from keywarden.database.connection import get_async_db
from keywarden.database.models import ApiKey, ApiKeyStatus
from keywarden.database.store import ApiKeyStore
from keywarden.utils.hashing import HashingService
from keywarden.utils.logger import get_logger
from keywarden.utils.settings.auth import ConfiguredKey

logger = get_logger(__name__)


class CredentialDirectory(Protocol):
    async def resolve(self, raw_key: str) -> TenantContext | None: ...


class ConfiguredCredentialDirectory:
    """Static key -> tenant mapping sourced from deployment settings."""

    def __init__(self, keys: Mapping[str, ConfiguredKey]):
        self._keys = dict(keys)

    async def resolve(self, raw_key: str) -> TenantContext | None:
        if not raw_key:
            return None

        # Compare against every configured key so lookup time does not depend
        # on which entry (if any) matches
        match: ConfiguredKey | None = None
        for configured, binding in self._keys.items():
            if hmac.compare_digest(configured.encode(), raw_key.encode()) and match is None:
                match = binding

        if match is None:
            return None
        return TenantContext(
            client_id=match.client_id,
            allowed_databases=frozenset(match.allowed_databases),
            source=TenantSource.CONFIGURED,
        )


class IssuedKeyCredentialDirectory:
    """Resolves keys minted by the lifecycle engine.

    The key id embedded in the plaintext selects a single record, so exactly
    one hash is verified per request. Only ``active`` keys resolve.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        tenant_databases: Mapping[str, Sequence[str]] | None = None,
    ):
        self.session_factory = session_factory
        self.tenant_databases = dict(tenant_databases or {})

    async def resolve(self, raw_key: str) -> TenantContext | None:
        parsed = ApiKey.split_plaintext(raw_key)
        if parsed is None:
            return None
        key_id, plaintext = parsed

        async with get_async_db(self.session_factory) as db:
            store = ApiKeyStore(db)
            record = await store.find_by_id(key_id)
            if record is None or record.status != ApiKeyStatus.ACTIVE.value:
                logger.debug(
                    "Issued key not usable",
                    key_id=str(key_id),
                    status=record.status if record else None,
                )
                return None

            verified = await run_in_threadpool(
                HashingService.verify_secret, plaintext, record.key_hash
            )
            if not verified:
                return None

            await store.touch_last_used(record.id)

            return TenantContext(
                client_id=record.tenant_id,
                allowed_databases=frozenset(self.tenant_databases.get(record.tenant_id, ())),
                source=TenantSource.ISSUED,
                key_id=record.id,
            )


class ChainedCredentialDirectory:
    """Tries each directory in order; first hit wins."""

    def __init__(self, *directories: CredentialDirectory):
        self.directories = directories

    async def resolve(self, raw_key: str) -> TenantContext | None:
        for directory in self.directories:
            tenant = await directory.resolve(raw_key)
            if tenant is not None:
                return tenant
        return None


def build_default_directory(
    session_factory: async_sessionmaker[AsyncSession],
    configured_keys: Mapping[str, ConfiguredKey],
    tenant_databases: Mapping[str, Sequence[str]],
) -> CredentialDirectory:
    """Configured keys first, then keys issued through ``/keys``."""
    return ChainedCredentialDirectory(
        ConfiguredCredentialDirectory(configured_keys),
        IssuedKeyCredentialDirectory(session_factory, tenant_databases),
    )
