"""Keys API schemas."""

from datetime import datetime
from uuid import UUID

from keywarden.api.core.schemas import CamelModel
from keywarden.database.models import ApiKey, ApiKeyStatus


class KeyModel(CamelModel):
    """Key view returned by listings. Never carries the secret or its hash."""

    key_id: UUID
    tenant_id: str
    label: str
    status: str
    notes: str | None = None
    created_by: str
    created_at: datetime
    last_used_at: datetime | None = None
    paused_by: str | None = None
    paused_at: datetime | None = None
    resumed_by: str | None = None
    resumed_at: datetime | None = None
    revoked_by: str | None = None
    revoked_at: datetime | None = None

    @classmethod
    def from_record(cls, record: ApiKey) -> "KeyModel":
        return cls(
            key_id=record.id,
            tenant_id=record.tenant_id,
            label=record.label,
            status=ApiKeyStatus(record.status).value,
            notes=record.notes,
            created_by=record.created_by,
            created_at=record.created_at,
            last_used_at=record.last_used_at,
            paused_by=record.paused_by,
            paused_at=record.paused_at,
            resumed_by=record.resumed_by,
            resumed_at=record.resumed_at,
            revoked_by=record.revoked_by,
            revoked_at=record.revoked_at,
        )


class KeyCreateRequest(CamelModel):
    # Optional here so missing fields get the endpoint's own 400 message
    tenant_id: str | None = None
    label: str | None = None
    created_by: str | None = None
    notes: str | None = None


class KeyCreateResponse(CamelModel):
    key_id: UUID
    api_key: str
    tenant_id: str
    warning: str


class KeyPausedResponse(CamelModel):
    paused: bool = True
    key_id: UUID


class KeyResumedResponse(CamelModel):
    resumed: bool = True
    key_id: UUID


class KeyRevokedResponse(CamelModel):
    revoked: bool = True
    key_id: UUID


class BulkKeyRequest(CamelModel):
    key_ids: list[str] | None = None
    actor: str | None = None


class BulkPauseResponse(CamelModel):
    paused: int
    total: int
    skipped: list[str] = []


class BulkResumeResponse(CamelModel):
    resumed: int
    total: int
    skipped: list[str] = []


class BulkRevokeResponse(CamelModel):
    revoked: int
    total: int
    skipped: list[str] = []
