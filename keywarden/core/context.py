"""Request-scoped tenant context."""

from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID

from starlette.requests import HTTPConnection


class TenantSource(str, Enum):
    CONFIGURED = "configured"
    ISSUED = "issued"
    DEV_BYPASS = "dev_bypass"


@dataclass(frozen=True)
class TenantContext:
    """Tenant identity resolved for a single request.

    Built once by the tenant middleware and never mutated, persisted or
    reused across requests.
    """

    client_id: str
    allowed_databases: frozenset[str] = field(default_factory=frozenset)
    source: TenantSource = TenantSource.CONFIGURED
    key_id: UUID | None = None

    def __post_init__(self):
        if not self.client_id or not self.client_id.strip():
            raise ValueError("client_id is required in tenant context")
        # Accept any iterable at construction; store an immutable set
        object.__setattr__(self, "allowed_databases", frozenset(self.allowed_databases))

    def can_access(self, database: str) -> bool:
        return database in self.allowed_databases


def get_tenant_context(request: HTTPConnection) -> TenantContext:
    """Return the context attached by the tenant middleware.

    A missing context means a handler is mounted outside the middleware's
    reach, which is a wiring bug rather than a client error.
    """
    tenant = getattr(request.state, "tenant", None)
    if not isinstance(tenant, TenantContext):
        raise RuntimeError(
            "No tenant context on request; is the tenant middleware installed?"
        )
    return tenant
