"""Reach API schemas."""

from datetime import datetime
from uuid import UUID

from keywarden.api.core.schemas import CamelModel
from keywarden.database.models import ReachInstance


class ReachRegisterRequest(CamelModel):
    tenant_id: str | None = None
    secret: str | None = None
    registered_by: str | None = None
    machine_name: str | None = None
    notes: str | None = None


class ReachRegisterResponse(CamelModel):
    instance_id: UUID
    tenant_id: str
    registered_at: datetime


class ReachValidateRequest(CamelModel):
    tenant_id: str | None = None
    secret: str | None = None


class ReachValidateResponse(CamelModel):
    instance_id: UUID
    tenant_id: str
    is_active: bool


class ReachInstanceModel(CamelModel):
    """Instance view for listings. The secret hash is never exposed."""

    instance_id: UUID
    tenant_id: str
    registered_by: str
    machine_name: str | None = None
    notes: str | None = None
    registered_at: datetime
    is_active: bool
    deactivated_by: str | None = None
    deactivated_at: datetime | None = None

    @classmethod
    def from_record(cls, record: ReachInstance) -> "ReachInstanceModel":
        return cls(
            instance_id=record.id,
            tenant_id=record.tenant_id,
            registered_by=record.registered_by,
            machine_name=record.machine_name,
            notes=record.notes,
            registered_at=record.registered_at,
            is_active=record.is_active,
            deactivated_by=record.deactivated_by,
            deactivated_at=record.deactivated_at,
        )


class ReachDeactivatedResponse(CamelModel):
    deactivated: bool = True
    instance_id: UUID
