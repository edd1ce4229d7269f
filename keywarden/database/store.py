"""Credential persistence shared by API keys and reach instances.

Every status change is a single conditional UPDATE keyed by id and the set of
states the transition is legal from, so concurrent callers are serialized by
the database rather than by read-then-write in the services.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from keywarden.database.models import ApiKey, ApiKeyStatus, Base, ReachInstance
from keywarden.utils.hashing import HashingService
from keywarden.utils.logger import get_logger

ModelT = TypeVar("ModelT", bound=Base)

_dummy_hash: str | None = None


def _placeholder_hash() -> str:
    """Verification form checked when a tenant has no candidates at all."""
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = HashingService.hash_secret(HashingService.generate_secret())
    return _dummy_hash


def _db_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class StoreConflictError(Exception):
    """Raised when an insert collides with an existing record."""

    def __init__(self, model: str, record_id: UUID | None):
        self.model = model
        self.record_id = record_id
        super().__init__(f"{model} {record_id} already exists")


class CredentialStore(Generic[ModelT]):
    """Generic store contract; subclasses bind the model and its transitions."""

    model: ClassVar[type]
    status_attr: ClassVar[str]
    hash_attr: ClassVar[str]
    order_attr: ClassVar[str]
    # new status -> states the transition is legal from
    transitions: ClassVar[dict[Any, tuple[Any, ...]]]

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = get_logger(self.__class__.__name__)

    async def insert(self, record: ModelT) -> ModelT:
        self.db.add(record)
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise StoreConflictError(
                self.model.__name__, getattr(record, "id", None)
            ) from exc
        await self.db.refresh(record)
        return record

    async def find_by_id(self, record_id: UUID) -> ModelT | None:
        stmt = (
            select(self.model)
            .where(self.model.id == record_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def find_by_tenant(self, tenant_id: str) -> list[ModelT]:
        stmt = (
            select(self.model)
            .where(self.model.tenant_id == tenant_id)
            .order_by(getattr(self.model, self.order_attr).desc())
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    def eligible_clauses(self) -> Sequence[Any]:
        """Extra filters for records that may authenticate at all."""
        return ()

    async def find_active_by_verification(
        self, tenant_id: str, candidate: str
    ) -> ModelT | None:
        """Match a presented secret against the tenant's eligible records.

        Every eligible record is verified, even after a match, so the time
        taken does not reveal which record (if any) matched.
        """
        stmt = (
            select(self.model)
            .where(self.model.tenant_id == tenant_id, *self.eligible_clauses())
            .execution_options(populate_existing=True)
        )
        records = list((await self.db.execute(stmt)).scalars().all())

        if not records:
            await run_in_threadpool(
                HashingService.verify_secret, candidate, _placeholder_hash()
            )
            return None

        match: ModelT | None = None
        for record in records:
            verified = await run_in_threadpool(
                HashingService.verify_secret, candidate, getattr(record, self.hash_attr)
            )
            if verified and match is None:
                match = record
        return match

    def transition_values(self, new_status: Any, actor: str | None, at: datetime) -> dict:
        """Audit columns written alongside a status change."""
        return {}

    async def update_status(
        self,
        record_id: UUID,
        new_status: Any,
        actor: str | None,
        timestamp: datetime | None = None,
    ) -> bool:
        """Compare-and-set the status; False when unknown or not legal from here."""
        legal_from = self.transitions.get(new_status)
        if not legal_from:
            return False

        at = timestamp or datetime.now(timezone.utc)
        status_column = getattr(self.model, self.status_attr)
        stmt = (
            update(self.model)
            .where(
                self.model.id == record_id,
                status_column.in_([_db_value(s) for s in legal_from]),
            )
            .values(
                {
                    self.status_attr: _db_value(new_status),
                    **self.transition_values(new_status, actor, at),
                }
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        await self.db.commit()
        return result.rowcount == 1


class ApiKeyStore(CredentialStore[ApiKey]):
    model = ApiKey
    status_attr = "status"
    hash_attr = "key_hash"
    order_attr = "created_at"
    transitions = {
        ApiKeyStatus.PAUSED: (ApiKeyStatus.ACTIVE,),
        ApiKeyStatus.ACTIVE: (ApiKeyStatus.PAUSED,),
        ApiKeyStatus.REVOKED: (ApiKeyStatus.ACTIVE, ApiKeyStatus.PAUSED),
    }

    def eligible_clauses(self) -> Sequence[Any]:
        return (ApiKey.status.in_([ApiKeyStatus.ACTIVE.value, ApiKeyStatus.PAUSED.value]),)

    def transition_values(
        self, new_status: ApiKeyStatus, actor: str | None, at: datetime
    ) -> dict:
        if new_status == ApiKeyStatus.PAUSED:
            return {"paused_by": actor, "paused_at": at}
        if new_status == ApiKeyStatus.ACTIVE:
            return {
                "resumed_by": actor,
                "resumed_at": at,
                "paused_by": None,
                "paused_at": None,
            }
        if new_status == ApiKeyStatus.REVOKED:
            return {"revoked_by": actor, "revoked_at": at}
        return {}

    async def touch_last_used(self, record_id: UUID, at: datetime | None = None) -> None:
        """Best-effort usage stamp; failures are logged, never raised."""
        try:
            await self.db.execute(
                update(ApiKey)
                .where(ApiKey.id == record_id)
                .values(last_used_at=at or datetime.now(timezone.utc))
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            self.logger.warning(
                "Could not record key usage", key_id=str(record_id), error=str(exc)
            )


class ReachInstanceStore(CredentialStore[ReachInstance]):
    model = ReachInstance
    status_attr = "is_active"
    hash_attr = "secret_hash"
    order_attr = "registered_at"
    transitions = {False: (True,)}

    def transition_values(self, new_status: bool, actor: str | None, at: datetime) -> dict:
        if new_status is False:
            return {"deactivated_by": actor, "deactivated_at": at}
        return {}
