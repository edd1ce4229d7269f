"""API key lifecycle: issuance, listing and state transitions.

    active  --pause-->  paused
    paused  --resume--> active
    active  --revoke--> revoked
    paused  --revoke--> revoked

Revoked is terminal. Every transition is one compare-and-set in the store, so
a False result means "unknown id or not legal from the current state"; the two
are not told apart.
"""

import uuid
from dataclasses import dataclass, field
from typing import Iterable
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from keywarden.api.core.exceptions.base import ValidationFailure
from keywarden.core.base import BaseService
from keywarden.database.models import ApiKey, ApiKeyStatus
from keywarden.database.store import ApiKeyStore
from keywarden.utils.hashing import HashingService
from keywarden.utils.validators import is_blank, parse_uuid
from keywarden.utils.logger import mask_secret


@dataclass(frozen=True)
class IssuedKey:
    """Result of key creation. The only object that ever holds the plaintext."""

    key_id: UUID
    tenant_id: str
    plaintext: str = field(repr=False)

    def __repr__(self) -> str:
        return (
            f"IssuedKey(key_id={self.key_id}, tenant_id={self.tenant_id!r}, "
            f"plaintext={mask_secret(self.plaintext)!r})"
        )


@dataclass(frozen=True)
class BulkResult:
    affected: int
    total: int
    skipped_ids: list[UUID | str] = field(default_factory=list)


class KeyLifecycleService(BaseService):
    """Service for API key lifecycle operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db)
        self.store = ApiKeyStore(db)

    async def create_key(
        self,
        tenant_id: str | None,
        label: str | None,
        created_by: str | None,
        notes: str | None = None,
    ) -> IssuedKey:
        if is_blank(tenant_id) or is_blank(label) or is_blank(created_by):
            raise ValidationFailure("TenantId, Label, and CreatedBy are required.")

        key_id = uuid.uuid4()
        secret = HashingService.generate_secret()
        plaintext = ApiKey.compose_plaintext(key_id, secret)
        key_hash = await run_in_threadpool(HashingService.hash_secret, plaintext)

        record = await self.store.insert(
            ApiKey(
                id=key_id,
                tenant_id=tenant_id,
                label=label,
                key_hash=key_hash,
                status=ApiKeyStatus.ACTIVE.value,
                notes=notes,
                created_by=created_by,
            )
        )

        self.logger.info(
            "API key created",
            key_id=str(record.id),
            tenant_id=tenant_id,
            created_by=created_by,
        )
        return IssuedKey(key_id=record.id, tenant_id=record.tenant_id, plaintext=plaintext)

    async def list_keys(self, tenant_id: str | None) -> list[ApiKey]:
        """List every key of a tenant (any status), newest first."""
        if is_blank(tenant_id):
            raise ValidationFailure("tenantId query parameter is required.")
        return await self.store.find_by_tenant(tenant_id)

    async def pause(self, key_id: UUID | str, paused_by: str | None) -> bool:
        if is_blank(paused_by):
            raise ValidationFailure("pausedBy query parameter is required.")
        return await self._transition(key_id, ApiKeyStatus.PAUSED, paused_by)

    async def resume(self, key_id: UUID | str, resumed_by: str | None = None) -> bool:
        # Single resume tolerates a missing actor; the audit field stays null
        actor = None if is_blank(resumed_by) else resumed_by
        return await self._transition(key_id, ApiKeyStatus.ACTIVE, actor)

    async def revoke(self, key_id: UUID | str, revoked_by: str | None) -> bool:
        if is_blank(revoked_by):
            raise ValidationFailure("revokedBy query parameter is required.")
        return await self._transition(key_id, ApiKeyStatus.REVOKED, revoked_by)

    async def pause_many(self, key_ids: Iterable[UUID | str] | None, actor: str | None) -> BulkResult:
        return await self._transition_many(key_ids, ApiKeyStatus.PAUSED, actor)

    async def resume_many(self, key_ids: Iterable[UUID | str] | None, actor: str | None) -> BulkResult:
        return await self._transition_many(key_ids, ApiKeyStatus.ACTIVE, actor)

    async def revoke_many(self, key_ids: Iterable[UUID | str] | None, actor: str | None) -> BulkResult:
        return await self._transition_many(key_ids, ApiKeyStatus.REVOKED, actor)

    async def _transition(
        self, raw_id: UUID | str, new_status: ApiKeyStatus, actor: str | None
    ) -> bool:
        key_id = parse_uuid(raw_id)
        if key_id is None:
            return False
        changed = await self.store.update_status(key_id, new_status, actor)
        if changed:
            self.logger.info(
                "API key status changed",
                key_id=str(key_id),
                status=new_status.value,
                actor=actor,
            )
        return changed

    async def _transition_many(
        self,
        key_ids: Iterable[UUID | str] | None,
        new_status: ApiKeyStatus,
        actor: str | None,
    ) -> BulkResult:
        ids = list(key_ids or [])
        if not ids:
            raise ValidationFailure("KeyIds array is required and cannot be empty.")
        if is_blank(actor):
            raise ValidationFailure("Actor is required.")

        # Each id is its own compare-and-set; an early failure does not undo
        # the ones already applied
        affected = 0
        skipped: list[UUID | str] = []
        for raw_id in ids:
            key_id = parse_uuid(raw_id)
            if key_id is not None and await self.store.update_status(
                key_id, new_status, actor
            ):
                affected += 1
            else:
                skipped.append(raw_id)

        self.logger.info(
            "Bulk API key transition",
            status=new_status.value,
            affected=affected,
            total=len(ids),
            actor=actor,
        )
        return BulkResult(affected=affected, total=len(ids), skipped_ids=skipped)
