"""Boundary to the downstream row service.

The real row-level data service lives elsewhere; this module only fixes the
contract the data routes depend on and ships an in-memory adapter.
"""

from typing import Any, Mapping, Protocol

from keywarden.core.context import TenantContext

Row = dict[str, Any]


class RowService(Protocol):
    """Raises ``PermissionError`` for a database outside the tenant's
    allow-list and ``LookupError`` for an unknown database or table."""

    async def get_rows(self, tenant: TenantContext, database: str, table: str) -> list[Row]: ...

    async def get_row_by_id(
        self, tenant: TenantContext, database: str, table: str, row_id: str
    ) -> Row | None: ...


class StaticRowService:
    """Serves tables fixed at construction, keyed by ``database -> table -> rows``.

    Rows are matched on their ``id`` field, compared as strings.
    """

    def __init__(self, tables: Mapping[str, Mapping[str, list[Row]]] | None = None):
        self._tables = {db: dict(tables_) for db, tables_ in (tables or {}).items()}

    def _table(self, tenant: TenantContext, database: str, table: str) -> list[Row]:
        if not tenant.can_access(database):
            raise PermissionError(f"Tenant {tenant.client_id} may not read {database}")
        try:
            return self._tables[database][table]
        except KeyError:
            raise LookupError(f"Unknown table {database}.{table}") from None

    async def get_rows(self, tenant: TenantContext, database: str, table: str) -> list[Row]:
        return [dict(row) for row in self._table(tenant, database, table)]

    async def get_row_by_id(
        self, tenant: TenantContext, database: str, table: str, row_id: str
    ) -> Row | None:
        for row in self._table(tenant, database, table):
            if str(row.get("id")) == row_id:
                return dict(row)
        return None
