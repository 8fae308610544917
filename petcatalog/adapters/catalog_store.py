"""
Catalog Store Adapters.
Row-level access to the remote catalog database (brands, product lines,
variants, option types, option values, identifiers, ingredients).
"""
import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

import httpx

from petcatalog.config import config
from petcatalog.errors import CatalogStoreError
from petcatalog.utils.logger import ParserLogger

Row = Dict[str, Any]

# Store-side uniqueness constraints mirrored by the in-memory backend
UNIQUE_CONSTRAINTS: Dict[str, Tuple[Tuple[str, ...], ...]] = {
    "product_options": (("name",),),
    "option_values": (("option_type_id", "value"),),
    "ingredients": (("name",),),
    "product_identifiers": (("identifier_type", "identifier_value"),),
}


class CatalogStore(ABC):
    """Generic find/insert/update/delete interface over catalog tables."""

    @abstractmethod
    async def find(self, table: str, filters: Optional[Dict[str, Any]] = None) -> List[Row]:
        """Rows whose columns equal every filter value."""

    @abstractmethod
    async def insert(self, table: str, rows: List[Row]) -> List[int]:
        """Insert rows and return their new ids."""

    @abstractmethod
    async def update(self, table: str, row_id: int, patch: Row) -> None:
        """Patch one row by id."""

    @abstractmethod
    async def delete(self, table: str, row_id: int) -> None:
        """Delete one row by id."""


class RestCatalogStore(CatalogStore):
    """
    PostgREST-style REST client for the hosted catalog database.

    Filters become "column=eq.value" query parameters; inserts ask for the
    inserted representation back so ids can be returned.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: int = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport
        self.logger = ParserLogger("catalog_store")

    def _get_headers(self) -> dict:
        """Authentication and content headers."""
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _table_url(self, table: str) -> str:
        return f"{self.base_url}/rest/v1/{table}"

    @staticmethod
    def _eq_params(filters: Optional[Dict[str, Any]]) -> Dict[str, str]:
        return {column: f"eq.{value}" for column, value in (filters or {}).items()}

    async def _request(
        self,
        method: str,
        table: str,
        params: Optional[Dict[str, str]] = None,
        json: Any = None,
        extra_headers: Optional[dict] = None,
    ) -> httpx.Response:
        headers = self._get_headers()
        if extra_headers:
            headers.update(extra_headers)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.request(
                    method, self._table_url(table), params=params, json=json, headers=headers
                )
                response.raise_for_status()
                return response
        except httpx.HTTPStatusError as e:
            self.logger.log_error(
                f"Catalog store rejected {method} {table}: {e.response.text[:200]}",
                error_type="http_status",
                status_code=e.response.status_code,
                table=table,
            )
            raise CatalogStoreError(
                f"Catalog store rejected {method} on {table} ({e.response.status_code})",
                table=table,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            self.logger.log_error(
                f"Catalog store request failed: {str(e)}",
                error_type="http_error",
                table=table,
            )
            raise CatalogStoreError(f"Catalog store request failed: {str(e)}", table=table) from e

    async def find(self, table: str, filters: Optional[Dict[str, Any]] = None) -> List[Row]:
        params = {"select": "*", **self._eq_params(filters)}
        response = await self._request("GET", table, params=params)
        return response.json()

    async def insert(self, table: str, rows: List[Row]) -> List[int]:
        if not rows:
            return []
        response = await self._request(
            "POST", table, json=rows, extra_headers={"Prefer": "return=representation"}
        )
        inserted = response.json()
        self.logger.log_action("insert", "completed", table=table, count=len(inserted))
        return [row["id"] for row in inserted]

    async def update(self, table: str, row_id: int, patch: Row) -> None:
        await self._request("PATCH", table, params=self._eq_params({"id": row_id}), json=patch)
        self.logger.log_action("update", "completed", table=table, row_id=row_id)

    async def delete(self, table: str, row_id: int) -> None:
        await self._request("DELETE", table, params=self._eq_params({"id": row_id}))
        self.logger.log_action("delete", "completed", table=table, row_id=row_id)


class InMemoryCatalogStore(CatalogStore):
    """
    Dict-backed store for local runs and tests.

    Enforces the same uniqueness constraints as the hosted database, so a
    duplicate insert fails here just as it would remotely.
    """

    def __init__(self, tables: Optional[Dict[str, List[Row]]] = None):
        self.tables: Dict[str, List[Row]] = {}
        self._next_id: Dict[str, int] = {}
        self.write_calls = 0
        for table, rows in (tables or {}).items():
            for row in rows:
                self._store_row(table, dict(row))

    def _store_row(self, table: str, row: Row) -> int:
        rows = self.tables.setdefault(table, [])
        if "id" not in row:
            row["id"] = self._next_id.get(table, 1)
        self._next_id[table] = max(self._next_id.get(table, 1), row["id"] + 1)
        rows.append(row)
        return row["id"]

    def _check_unique(self, table: str, rows: List[Row]) -> None:
        for columns in UNIQUE_CONSTRAINTS.get(table, ()):
            existing = {tuple(r.get(c) for c in columns) for r in self.tables.get(table, [])}
            for row in rows:
                key = tuple(row.get(c) for c in columns)
                if key in existing:
                    raise CatalogStoreError(
                        f"Duplicate key {dict(zip(columns, key))} violates unique constraint on {table}",
                        table=table,
                        status_code=409,
                    )
                existing.add(key)

    def _get(self, table: str, row_id: int) -> Row:
        for row in self.tables.get(table, []):
            if row["id"] == row_id:
                return row
        raise CatalogStoreError(f"No row {row_id} in {table}", table=table, status_code=404)

    async def find(self, table: str, filters: Optional[Dict[str, Any]] = None) -> List[Row]:
        filters = filters or {}
        return [
            copy.deepcopy(row)
            for row in self.tables.get(table, [])
            if all(row.get(column) == value for column, value in filters.items())
        ]

    async def insert(self, table: str, rows: List[Row]) -> List[int]:
        if not rows:
            return []
        self._check_unique(table, rows)
        self.write_calls += 1
        return [self._store_row(table, copy.deepcopy(row)) for row in rows]

    async def update(self, table: str, row_id: int, patch: Row) -> None:
        self.write_calls += 1
        self._get(table, row_id).update(copy.deepcopy(patch))

    async def delete(self, table: str, row_id: int) -> None:
        row = self._get(table, row_id)
        self.write_calls += 1
        self.tables[table].remove(row)


def create_catalog_store() -> CatalogStore:
    """Build the configured catalog store backend."""
    if config.CATALOG_BACKEND == "memory":
        return InMemoryCatalogStore()

    if not config.is_catalog_configured():
        raise CatalogStoreError(
            f"Catalog store is not configured. Missing: {', '.join(config.get_missing_catalog_vars())}"
        )
    return RestCatalogStore(
        base_url=config.CATALOG_API_URL,
        api_key=config.CATALOG_API_KEY,
        timeout=config.REQUEST_TIMEOUT,
    )
