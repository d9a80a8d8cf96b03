"""Supabase catalog store over the PostgREST HTTP API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from petvalues.adapters.store.base import AbstractCatalogStore
from petvalues.core.errors import ConfigurationAppError, StoreAppError

logger = logging.getLogger(__name__)

PETS_TABLE = "pets"
ADMIN_USERS_TABLE = "admin_users"
AUDIT_LOG_TABLE = "audit_log"

PUBLIC_PET_COLUMNS = "id,name,rarity,stats,value,image_url"


def _auth_headers(key: str) -> dict[str, str]:
    return {"apikey": key, "Authorization": f"Bearer {key}"}


def _eq(value: Any) -> str:
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


class SupabaseRestStore(AbstractCatalogStore):
    """Catalog store talking to Supabase's REST endpoint with httpx.

    Two clients are kept: one authenticated with the anon key for public
    reads and credential lookups, and one with the service role key for
    writes. The second only exists when the service role key is configured.
    """

    def __init__(
        self,
        *,
        url: str,
        anon_key: str,
        service_role_key: str | None = None,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the REST clients.

        Args:
            url: Supabase project URL.
            anon_key: Public anon key.
            service_role_key: Optional service role key enabling writes.
            timeout_seconds: Per-request timeout.
            transport: Optional httpx transport (used by tests).
        """
        base_url = f"{url.rstrip('/')}/rest/v1"
        self._public = httpx.AsyncClient(
            base_url=base_url,
            headers=_auth_headers(anon_key),
            timeout=timeout_seconds,
            transport=transport,
        )
        self._admin: httpx.AsyncClient | None = None
        if service_role_key:
            self._admin = httpx.AsyncClient(
                base_url=base_url,
                headers=_auth_headers(service_role_key),
                timeout=timeout_seconds,
                transport=transport,
            )

    @property
    def has_admin_access(self) -> bool:
        return self._admin is not None

    def _admin_client(self) -> httpx.AsyncClient:
        if self._admin is None:
            raise ConfigurationAppError(
                code="service_role_key_missing",
                message="Server configuration error",
                details={"hint": "Service role key not configured - contact administrator"},
            )
        return self._admin

    async def _request(
        self,
        client: httpx.AsyncClient,
        method: str,
        table: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        return_rows: bool = False,
    ) -> Any:
        headers = {"Prefer": "return=representation"} if return_rows else None
        try:
            response = await client.request(
                method,
                f"/{table}",
                params=params,
                json=json,
                headers=headers,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            logger.error(
                "store.request_failed",
                extra={
                    "table": table,
                    "method": method,
                    "http_status": status_code,
                    "body": exc.response.text[:500],
                },
            )
            raise StoreAppError(
                code="store_request_failed",
                message=f"Database request failed on {table}",
                details={"table": table, "http_status": status_code},
            ) from exc
        except httpx.HTTPError as exc:
            logger.error(
                "store.unavailable",
                extra={"table": table, "method": method, "error_type": type(exc).__name__},
            )
            raise StoreAppError(
                code="store_unavailable",
                message="Database service unavailable",
                details={"table": table},
            ) from exc

        if not response.content:
            return None
        return response.json()

    async def list_pets(self) -> list[dict[str, Any]]:
        rows = await self._request(
            self._public,
            "GET",
            PETS_TABLE,
            params={"select": PUBLIC_PET_COLUMNS, "order": "value.desc"},
        )
        return rows or []

    async def get_pet(self, pet_id: int, *, privileged: bool = False) -> dict[str, Any] | None:
        client = self._admin_client() if privileged else self._public
        rows = await self._request(
            client,
            "GET",
            PETS_TABLE,
            params={"select": "*", "id": _eq(pet_id)},
        )
        return rows[0] if rows else None

    async def insert_pet(self, data: dict[str, Any]) -> dict[str, Any]:
        rows = await self._request(
            self._admin_client(),
            "POST",
            PETS_TABLE,
            json=[data],
            return_rows=True,
        )
        if not rows:
            raise StoreAppError(
                code="insert_returned_no_rows",
                message="Create failed - no rows returned",
                details={"table": PETS_TABLE},
            )
        return rows[0]

    async def update_pet(self, pet_id: int, data: dict[str, Any]) -> dict[str, Any] | None:
        rows = await self._request(
            self._admin_client(),
            "PATCH",
            PETS_TABLE,
            params={"id": _eq(pet_id)},
            json=data,
            return_rows=True,
        )
        return rows[0] if rows else None

    async def delete_pet(self, pet_id: int) -> None:
        await self._request(
            self._admin_client(),
            "DELETE",
            PETS_TABLE,
            params={"id": _eq(pet_id)},
        )

    async def find_active_admin(self, username: str, password: str) -> dict[str, Any] | None:
        rows = await self._request(
            self._public,
            "GET",
            ADMIN_USERS_TABLE,
            params={
                "select": "id,username,is_active",
                "username": _eq(username),
                "password": _eq(password),
                "is_active": _eq(True),
            },
        )
        # Exactly one match counts as a login; zero or ambiguous does not
        if not rows or len(rows) != 1:
            return None
        return rows[0]

    async def insert_audit_entry(self, entry: dict[str, Any]) -> None:
        await self._request(self._admin_client(), "POST", AUDIT_LOG_TABLE, json=[entry])

    async def aclose(self) -> None:
        await self._public.aclose()
        if self._admin is not None:
            await self._admin.aclose()
