"""Tenant-scoped data plane.

Rows are served by the downstream row service; this layer only maps its
outcomes onto HTTP.
"""

from typing import Any

from fastapi import APIRouter, status

from keywarden.api.core.dependencies import CurrentTenantDep, RowServiceDep
from keywarden.api.core.exceptions.base import KeywardenException
from keywarden.api.core.messages import MessageCode
from keywarden.core.context import TenantContext
from keywarden.modules.data.rows import RowService
from keywarden.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/data", tags=["data"])
entity_router = APIRouter(prefix="/entity", tags=["entity"])


def _forbidden() -> KeywardenException:
    return KeywardenException(MessageCode.FORBIDDEN, status.HTTP_403_FORBIDDEN)


def _not_found(description: str) -> KeywardenException:
    return KeywardenException(
        MessageCode.RESOURCE_NOT_FOUND,
        status.HTTP_404_NOT_FOUND,
        {"description": description},
    )


async def _fetch(
    rows: RowService,
    tenant: TenantContext,
    database: str,
    table: str,
    row_id: str | None = None,
) -> Any:
    try:
        if row_id is None:
            return await rows.get_rows(tenant, database, table)
        return await rows.get_row_by_id(tenant, database, table, row_id)
    except PermissionError:
        logger.info("Database outside tenant allow-list", database=database)
        raise _forbidden() from None
    except LookupError as e:
        raise _not_found(str(e)) from None


@router.get("/{database}/{table}")
async def get_rows(
    database: str,
    table: str,
    tenant: CurrentTenantDep,
    rows: RowServiceDep,
) -> list[dict[str, Any]]:
    return await _fetch(rows, tenant, database, table)


@router.get("/{database}/{table}/{row_id}")
async def get_row(
    database: str,
    table: str,
    row_id: str,
    tenant: CurrentTenantDep,
    rows: RowServiceDep,
) -> dict[str, Any]:
    row = await _fetch(rows, tenant, database, table, row_id)
    if row is None:
        raise _not_found(f"No row {row_id} in {database}.{table}")
    return row


def _not_implemented() -> KeywardenException:
    return KeywardenException(MessageCode.NOT_IMPLEMENTED, status.HTTP_501_NOT_IMPLEMENTED)


@entity_router.get("/{database}/{entity}")
async def get_entities(database: str, entity: str, tenant: CurrentTenantDep):
    raise _not_implemented()


@entity_router.get("/{database}/{entity}/{entity_id}")
async def get_entity(database: str, entity: str, entity_id: str, tenant: CurrentTenantDep):
    raise _not_implemented()
