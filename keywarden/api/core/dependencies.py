from typing import Annotated, AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from keywarden.core.context import TenantContext, get_tenant_context
from keywarden.modules.data.rows import RowService
from keywarden.modules.keys.lifecycle import KeyLifecycleService
from keywarden.modules.reach.instances import ReachInstanceService


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session from app state."""
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        yield session


async def get_key_lifecycle_service(
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> KeyLifecycleService:
    """Get key lifecycle service with database session."""
    return KeyLifecycleService(db)


async def get_reach_instance_service(
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ReachInstanceService:
    """Get reach instance service with database session."""
    return ReachInstanceService(db)


async def get_row_service(request: Request) -> RowService:
    return request.app.state.row_service


async def get_current_tenant(request: Request) -> TenantContext:
    """Tenant resolved by the tenant middleware for this request."""
    return get_tenant_context(request)


AsyncSessionDep = Annotated[AsyncSession, Depends(get_db_session)]
KeyLifecycleServiceDep = Annotated[
    KeyLifecycleService, Depends(get_key_lifecycle_service)
]
ReachInstanceServiceDep = Annotated[
    ReachInstanceService, Depends(get_reach_instance_service)
]
RowServiceDep = Annotated[RowService, Depends(get_row_service)]
CurrentTenantDep = Annotated[TenantContext, Depends(get_current_tenant)]
