"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any ``petvalues`` import so the
settings object builds without a real Supabase project.
"""

import os
from typing import Any
from unittest.mock import Mock

import pytest

os.environ["APP_ENV"] = "testing"
os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "anon-test-key")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "service-test-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from petvalues.adapters.store.base import AbstractCatalogStore  # noqa: E402
from petvalues.core.errors import StoreAppError  # noqa: E402

START_MS = 1_700_000_000_000


class FakeCatalogStore(AbstractCatalogStore):
    """In-memory stand-in for the Supabase store."""

    def __init__(self, *, admin_access: bool = True) -> None:
        self.admin_access = admin_access
        self.pets: dict[int, dict[str, Any]] = {}
        self.admins: list[dict[str, Any]] = [
            {"id": 1, "username": "admin", "password": "hunter2", "is_active": True},
            {"id": 2, "username": "retired", "password": "pw", "is_active": False},
        ]
        self.audit_log: list[dict[str, Any]] = []
        self.admin_lookups = 0
        self.fail_admin_lookup = False
        self.fail_audit = False
        self._next_id = 1

    def add_pet(self, **fields: Any) -> dict[str, Any]:
        pet = {"id": self._next_id, **fields}
        self.pets[self._next_id] = pet
        self._next_id += 1
        return pet

    @property
    def has_admin_access(self) -> bool:
        return self.admin_access

    async def list_pets(self) -> list[dict[str, Any]]:
        return sorted(self.pets.values(), key=lambda p: p.get("value") or 0, reverse=True)

    async def get_pet(self, pet_id: int, *, privileged: bool = False) -> dict[str, Any] | None:
        pet = self.pets.get(pet_id)
        return dict(pet) if pet else None

    async def insert_pet(self, data: dict[str, Any]) -> dict[str, Any]:
        return self.add_pet(**data)

    async def update_pet(self, pet_id: int, data: dict[str, Any]) -> dict[str, Any] | None:
        if pet_id not in self.pets:
            return None
        self.pets[pet_id].update(data)
        return dict(self.pets[pet_id])

    async def delete_pet(self, pet_id: int) -> None:
        self.pets.pop(pet_id, None)

    async def find_active_admin(self, username: str, password: str) -> dict[str, Any] | None:
        self.admin_lookups += 1
        if self.fail_admin_lookup:
            raise StoreAppError(code="store_unavailable", message="Database service unavailable")
        for admin in self.admins:
            if admin["username"] == username and admin["password"] == password and admin["is_active"]:
                return {"id": admin["id"], "username": admin["username"], "is_active": True}
        return None

    async def insert_audit_entry(self, entry: dict[str, Any]) -> None:
        if self.fail_audit:
            raise StoreAppError(code="store_request_failed", message="Database request failed on audit_log")
        self.audit_log.append(entry)


@pytest.fixture
def fake_store() -> FakeCatalogStore:
    return FakeCatalogStore()


@pytest.fixture
def clock() -> Mock:
    """Millisecond clock frozen at START_MS; set ``return_value`` to advance."""
    return Mock(return_value=START_MS)


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"X-Admin-Username": "admin", "X-Admin-Password": "hunter2"}
