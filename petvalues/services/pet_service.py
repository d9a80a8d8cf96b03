"""Pet catalog service: validation, writes and audit trail.

The hosted database does the heavy lifting; this layer applies field
defaults, checks required fields, computes what changed on an edit and
records an audit entry for every admin write.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from petvalues.adapters.store.base import AbstractCatalogStore
from petvalues.core.errors import (
    AppError,
    ConfigurationAppError,
    NotFoundAppError,
    StoreAppError,
    ValidationAppError,
)
from petvalues.schemas.pets import PetWrite

logger = logging.getLogger(__name__)

# Fields compared verbatim when building the audit diff of an edit
TRACKED_FIELDS = (
    "name",
    "rarity",
    "stats",
    "stats_type",
    "value_normal",
    "value_golden",
    "value_rainbow",
)


def build_pet_record(payload: PetWrite) -> dict[str, Any]:
    """Validate a write payload and apply column defaults.

    Raises:
        ValidationAppError: If name or rarity is missing or blank.
    """
    if not payload.name or not payload.rarity:
        raise ValidationAppError(
            code="missing_required_fields",
            message="Name and rarity are required",
        )

    return {
        "name": payload.name,
        "rarity": payload.rarity,
        "stats": payload.stats or "0",
        "stats_type": payload.stats_type or "value",
        "value_normal": payload.value_normal or "0",
        "value_golden": payload.value_golden or "0",
        "value_rainbow": payload.value_rainbow or "0",
        "image_url": payload.image_url or None,
    }


def compute_changes(old: dict[str, Any], new: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Describe which fields differ between the stored row and the new values.

    Image URLs are reduced to "changed"/"none" so the audit log never holds
    full asset links.

    Examples:
        >>> compute_changes({"name": "Dog"}, {"name": "Cat"})
        {'name': {'from': 'Dog', 'to': 'Cat'}}
    """
    changes: dict[str, dict[str, Any]] = {}
    for field in TRACKED_FIELDS:
        if field in new and old.get(field) != new[field]:
            changes[field] = {"from": old.get(field), "to": new[field]}

    if "image_url" in new and old.get("image_url") != new["image_url"]:
        changes["image_url"] = {
            "from": "changed" if old.get("image_url") else "none",
            "to": "changed" if new["image_url"] else "none",
        }
    return changes


def _snapshot(pet: dict[str, Any]) -> dict[str, Any]:
    return {field: pet.get(field) for field in TRACKED_FIELDS}


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class PetService:
    """Admin operations on the pet catalog."""

    def __init__(self, store: AbstractCatalogStore) -> None:
        self.store = store

    def _require_admin_access(self) -> None:
        if not self.store.has_admin_access:
            logger.error("pets.admin_access_unconfigured")
            raise ConfigurationAppError(
                code="service_role_key_missing",
                message="Server configuration error",
                details={"hint": "Service role key not configured - contact administrator"},
            )

    async def list_pets(self) -> list[dict[str, Any]]:
        return await self.store.list_pets()

    async def get_pet(self, pet_id: int) -> dict[str, Any]:
        pet = await self.store.get_pet(pet_id)
        if pet is None:
            raise NotFoundAppError(
                code="pet_not_found",
                message="Pet not found",
                details={"pet_id": pet_id},
            )
        return pet

    async def create_pet(self, username: str, payload: PetWrite) -> dict[str, Any]:
        self._require_admin_access()
        record = build_pet_record(payload)

        created = await self.store.insert_pet(record)

        await self._record_audit(
            username, "CREATE", created.get("id"), created.get("name"), {"created_pet": _snapshot(created)}
        )
        logger.info("pets.created", extra={"pet_id": created.get("id")})
        return created

    async def update_pet(self, username: str, pet_id: int, payload: PetWrite) -> dict[str, Any]:
        """Update a pet and audit the fields that changed.

        Raises:
            ConfigurationAppError: Admin writes are not configured.
            ValidationAppError: Name or rarity missing.
            NotFoundAppError: No pet with this id.
            StoreAppError: The database rejected the update or matched no row.
        """
        self._require_admin_access()
        record = build_pet_record(payload)

        existing = await self.store.get_pet(pet_id, privileged=True)
        if existing is None:
            logger.info("pets.update_missing", extra={"pet_id": pet_id})
            raise NotFoundAppError(
                code="pet_not_found",
                message="Pet not found",
                details={"pet_id": pet_id},
            )

        updated = await self.store.update_pet(pet_id, {**record, "updated_at": _utcnow_iso()})
        if updated is None:
            raise StoreAppError(
                code="update_no_rows",
                message="Update failed - no rows affected",
                details={"pet_id": pet_id},
            )

        changes = compute_changes(existing, record)
        await self._record_audit(username, "EDIT", updated.get("id"), updated.get("name"), changes)
        logger.info(
            "pets.updated",
            extra={"pet_id": pet_id, "changed_fields": sorted(changes)},
        )
        return updated

    async def delete_pet(self, username: str, pet_id: int) -> None:
        """Delete a pet, auditing a snapshot of it when it existed."""
        self._require_admin_access()

        pet = await self.store.get_pet(pet_id, privileged=True)
        await self.store.delete_pet(pet_id)

        if pet is not None:
            await self._record_audit(
                username, "DELETE", pet.get("id"), pet.get("name"), {"deleted_pet": _snapshot(pet)}
            )
        logger.info("pets.deleted", extra={"pet_id": pet_id, "existed": pet is not None})

    async def _record_audit(
        self,
        username: str,
        action_type: str,
        pet_id: Any,
        pet_name: Any,
        changes: dict[str, Any],
    ) -> None:
        # The catalog write already happened; an audit failure must not undo it
        entry = {
            "username": username,
            "action_type": action_type,
            "pet_id": pet_id,
            "pet_name": pet_name,
            "changes": changes or {},
        }
        try:
            await self.store.insert_audit_entry(entry)
        except AppError as exc:
            logger.error(
                "audit.write_failed",
                extra={"action_type": action_type, "pet_id": pet_id, "error_code": exc.code},
            )
