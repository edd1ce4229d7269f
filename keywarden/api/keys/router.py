from typing import Annotated

from fastapi import APIRouter, Query, Request, status

from keywarden.api.core.constants import ONE_TIME_KEY_WARNING
from keywarden.api.core.decorators.installer import require_installer_key
from keywarden.api.core.dependencies import KeyLifecycleServiceDep
from keywarden.api.core.exceptions.base import KeywardenException
from keywarden.api.core.messages import MessageCode
from keywarden.api.keys.schemas import (
    BulkKeyRequest,
    BulkPauseResponse,
    BulkResumeResponse,
    BulkRevokeResponse,
    KeyCreateRequest,
    KeyCreateResponse,
    KeyModel,
    KeyPausedResponse,
    KeyResumedResponse,
    KeyRevokedResponse,
)
from keywarden.utils.logger import get_logger
from keywarden.utils.validators import parse_uuid

logger = get_logger(__name__)

router = APIRouter(prefix="/keys", tags=["keys"])


@router.get("", response_model=list[KeyModel])
@require_installer_key()
async def list_keys(
    request: Request,
    service: KeyLifecycleServiceDep,
    tenant_id: Annotated[str | None, Query(alias="tenantId")] = None,
) -> list[KeyModel]:
    """List every key of a tenant, in any state."""
    keys = await service.list_keys(tenant_id)
    return [KeyModel.from_record(key) for key in keys]


@router.post("", response_model=KeyCreateResponse, status_code=status.HTTP_201_CREATED)
@require_installer_key()
async def create_key(
    request: Request,
    key_data: KeyCreateRequest,
    service: KeyLifecycleServiceDep,
) -> KeyCreateResponse:
    """Issue a new key. The plaintext is in this response and nowhere else."""
    issued = await service.create_key(
        tenant_id=key_data.tenant_id,
        label=key_data.label,
        created_by=key_data.created_by,
        notes=key_data.notes,
    )
    return KeyCreateResponse(
        key_id=issued.key_id,
        api_key=issued.plaintext,
        tenant_id=issued.tenant_id,
        warning=ONE_TIME_KEY_WARNING,
    )


# Bulk routes are registered before "/{key_id}" so "/keys/revoke" is not
# captured as a key id.


@router.put("/pause", response_model=BulkPauseResponse)
@require_installer_key()
async def pause_keys(
    request: Request,
    body: BulkKeyRequest,
    service: KeyLifecycleServiceDep,
) -> BulkPauseResponse:
    result = await service.pause_many(body.key_ids, body.actor)
    return BulkPauseResponse(
        paused=result.affected,
        total=result.total,
        skipped=[str(key_id) for key_id in result.skipped_ids],
    )


@router.put("/resume", response_model=BulkResumeResponse)
@require_installer_key()
async def resume_keys(
    request: Request,
    body: BulkKeyRequest,
    service: KeyLifecycleServiceDep,
) -> BulkResumeResponse:
    result = await service.resume_many(body.key_ids, body.actor)
    return BulkResumeResponse(
        resumed=result.affected,
        total=result.total,
        skipped=[str(key_id) for key_id in result.skipped_ids],
    )


@router.delete("/revoke", response_model=BulkRevokeResponse)
@require_installer_key()
async def revoke_keys(
    request: Request,
    body: BulkKeyRequest,
    service: KeyLifecycleServiceDep,
) -> BulkRevokeResponse:
    result = await service.revoke_many(body.key_ids, body.actor)
    return BulkRevokeResponse(
        revoked=result.affected,
        total=result.total,
        skipped=[str(key_id) for key_id in result.skipped_ids],
    )


@router.put("/{key_id}/pause", response_model=KeyPausedResponse)
@require_installer_key()
async def pause_key(
    request: Request,
    key_id: str,
    service: KeyLifecycleServiceDep,
    paused_by: Annotated[str | None, Query(alias="pausedBy")] = None,
) -> KeyPausedResponse:
    if not await service.pause(key_id, paused_by):
        raise KeywardenException(
            MessageCode.API_KEY_NOT_FOUND_OR_NOT_ACTIVE,
            status.HTTP_404_NOT_FOUND,
        )
    return KeyPausedResponse(key_id=parse_uuid(key_id))


@router.put("/{key_id}/resume", response_model=KeyResumedResponse)
@require_installer_key()
async def resume_key(
    request: Request,
    key_id: str,
    service: KeyLifecycleServiceDep,
    resumed_by: Annotated[str | None, Query(alias="resumedBy")] = None,
) -> KeyResumedResponse:
    if not await service.resume(key_id, resumed_by):
        raise KeywardenException(
            MessageCode.API_KEY_NOT_FOUND_OR_NOT_PAUSED,
            status.HTTP_404_NOT_FOUND,
        )
    return KeyResumedResponse(key_id=parse_uuid(key_id))


@router.delete("/{key_id}", response_model=KeyRevokedResponse)
@require_installer_key()
async def revoke_key(
    request: Request,
    key_id: str,
    service: KeyLifecycleServiceDep,
    revoked_by: Annotated[str | None, Query(alias="revokedBy")] = None,
) -> KeyRevokedResponse:
    if not await service.revoke(key_id, revoked_by):
        raise KeywardenException(
            MessageCode.API_KEY_NOT_FOUND_OR_REVOKED,
            status.HTTP_404_NOT_FOUND,
        )
    return KeyRevokedResponse(key_id=parse_uuid(key_id))
