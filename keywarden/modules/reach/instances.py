"""Reach instance registration and validation.

A reach instance authenticates with ``(tenant_id, secret)`` where the secret
is chosen by the installer at registration time. Only its verification form
is stored.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from keywarden.api.core.exceptions.base import ValidationFailure
from keywarden.core.base import BaseService
from keywarden.database.models import ReachInstance
from keywarden.database.store import ReachInstanceStore
from keywarden.utils.hashing import HashingService
from keywarden.utils.validators import is_blank, parse_uuid


class ReachInstanceService(BaseService):
    """Service for reach instance operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db)
        self.store = ReachInstanceStore(db)

    async def register(
        self,
        tenant_id: str | None,
        secret: str | None,
        registered_by: str | None,
        machine_name: str | None = None,
        notes: str | None = None,
    ) -> ReachInstance:
        if is_blank(tenant_id) or is_blank(secret) or is_blank(registered_by):
            raise ValidationFailure("TenantId, Secret, and RegisteredBy are required.")

        secret_hash = await run_in_threadpool(HashingService.hash_secret, secret)
        instance = await self.store.insert(
            ReachInstance(
                tenant_id=tenant_id,
                secret_hash=secret_hash,
                registered_by=registered_by,
                machine_name=machine_name,
                notes=notes,
                is_active=True,
            )
        )

        self.logger.info(
            "Reach instance registered",
            instance_id=str(instance.id),
            tenant_id=tenant_id,
            registered_by=registered_by,
        )
        return instance

    async def validate(
        self, tenant_id: str | None, secret: str | None
    ) -> ReachInstance | None:
        """Return the matching instance, or None.

        An unknown tenant and a wrong secret both give None after the same
        amount of hashing work.
        """
        if is_blank(tenant_id) or is_blank(secret):
            raise ValidationFailure("TenantId and Secret are required.")

        instance = await self.store.find_active_by_verification(tenant_id, secret)
        if instance is None:
            self.logger.debug("Reach validation failed")
        return instance

    async def list_instances(self, tenant_id: str | None) -> list[ReachInstance]:
        if is_blank(tenant_id):
            raise ValidationFailure("tenantId query parameter is required.")
        return await self.store.find_by_tenant(tenant_id)

    async def deactivate(self, instance_id: UUID | str, deactivated_by: str | None) -> bool:
        if is_blank(deactivated_by):
            raise ValidationFailure("deactivatedBy query parameter is required.")
        parsed_id = parse_uuid(instance_id)
        if parsed_id is None:
            return False
        changed = await self.store.update_status(parsed_id, False, deactivated_by)
        if changed:
            self.logger.info(
                "Reach instance deactivated",
                instance_id=str(instance_id),
                deactivated_by=deactivated_by,
            )
        return changed
