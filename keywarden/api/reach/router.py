from typing import Annotated

from fastapi import APIRouter, Query, Request, status

from keywarden.api.core.decorators.installer import require_installer_key
from keywarden.api.core.dependencies import ReachInstanceServiceDep
from keywarden.api.core.exceptions.base import KeywardenException
from keywarden.api.core.messages import MessageCode
from keywarden.api.reach.schemas import (
    ReachDeactivatedResponse,
    ReachInstanceModel,
    ReachRegisterRequest,
    ReachRegisterResponse,
    ReachValidateRequest,
    ReachValidateResponse,
)
from keywarden.utils.validators import parse_uuid

router = APIRouter(prefix="/reach", tags=["reach"])


@router.post(
    "/register",
    response_model=ReachRegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
@require_installer_key(allow_bypass=False)
async def register_instance(
    request: Request,
    body: ReachRegisterRequest,
    service: ReachInstanceServiceDep,
) -> ReachRegisterResponse:
    """Register an instance. Requires the installer key in every mode."""
    instance = await service.register(
        tenant_id=body.tenant_id,
        secret=body.secret,
        registered_by=body.registered_by,
        machine_name=body.machine_name,
        notes=body.notes,
    )
    return ReachRegisterResponse(
        instance_id=instance.id,
        tenant_id=instance.tenant_id,
        registered_at=instance.registered_at,
    )


@router.post("/validate", response_model=ReachValidateResponse)
async def validate_instance(
    body: ReachValidateRequest,
    service: ReachInstanceServiceDep,
) -> ReachValidateResponse:
    """Self-check for an instance; unknown tenant and wrong secret look the same."""
    instance = await service.validate(body.tenant_id, body.secret)
    if instance is None:
        raise KeywardenException(
            MessageCode.INVALID_CREDENTIALS,
            status.HTTP_401_UNAUTHORIZED,
        )
    return ReachValidateResponse(
        instance_id=instance.id,
        tenant_id=instance.tenant_id,
        is_active=instance.is_active,
    )


@router.get("/instances", response_model=list[ReachInstanceModel])
@require_installer_key()
async def list_instances(
    request: Request,
    service: ReachInstanceServiceDep,
    tenant_id: Annotated[str | None, Query(alias="tenantId")] = None,
) -> list[ReachInstanceModel]:
    instances = await service.list_instances(tenant_id)
    return [ReachInstanceModel.from_record(instance) for instance in instances]


@router.put("/{instance_id}/deactivate", response_model=ReachDeactivatedResponse)
@require_installer_key()
async def deactivate_instance(
    request: Request,
    instance_id: str,
    service: ReachInstanceServiceDep,
    deactivated_by: Annotated[str | None, Query(alias="deactivatedBy")] = None,
) -> ReachDeactivatedResponse:
    if not await service.deactivate(instance_id, deactivated_by):
        raise KeywardenException(
            MessageCode.INSTANCE_NOT_FOUND_OR_INACTIVE,
            status.HTTP_404_NOT_FOUND,
        )
    return ReachDeactivatedResponse(instance_id=parse_uuid(instance_id))
