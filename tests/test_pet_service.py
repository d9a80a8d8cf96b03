"""Unit tests for PetService and its helpers."""

from unittest.mock import AsyncMock

import pytest

from petvalues.core.errors import StoreAppError, ValidationAppError
from petvalues.schemas.pets import PetWrite
from petvalues.services.pet_service import PetService, build_pet_record, compute_changes


class TestBuildPetRecord:
    def test_applies_defaults(self) -> None:
        record = build_pet_record(PetWrite(name="Cat", rarity="Rare"))

        assert record == {
            "name": "Cat",
            "rarity": "Rare",
            "stats": "0",
            "stats_type": "value",
            "value_normal": "0",
            "value_golden": "0",
            "value_rainbow": "0",
            "image_url": None,
        }

    def test_keeps_numeric_values(self) -> None:
        record = build_pet_record(PetWrite(name="Cat", rarity="Rare", value_golden=12.5))

        assert record["value_golden"] == 12.5

    @pytest.mark.parametrize(
        "payload",
        [
            PetWrite(rarity="Rare"),
            PetWrite(name="Cat"),
            PetWrite(name="", rarity="Rare"),
        ],
    )
    def test_requires_name_and_rarity(self, payload: PetWrite) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            build_pet_record(payload)

        assert exc_info.value.code == "missing_required_fields"


class TestComputeChanges:
    def test_unchanged_fields_are_omitted(self) -> None:
        old = {"name": "Dog", "rarity": "Common", "stats": "1"}

        assert compute_changes(old, {"name": "Dog", "rarity": "Common", "stats": "1"}) == {}

    def test_reports_from_and_to(self) -> None:
        changes = compute_changes({"rarity": "Common"}, {"rarity": "Epic"})

        assert changes == {"rarity": {"from": "Common", "to": "Epic"}}

    def test_image_url_is_masked(self) -> None:
        changes = compute_changes(
            {"image_url": "https://cdn/a.png"},
            {"image_url": "https://cdn/b.png"},
        )

        assert changes == {"image_url": {"from": "changed", "to": "changed"}}

    def test_image_url_removed(self) -> None:
        changes = compute_changes({"image_url": "https://cdn/a.png"}, {"image_url": None})

        assert changes["image_url"] == {"from": "changed", "to": "none"}


@pytest.mark.asyncio
async def test_audit_failure_does_not_fail_update(fake_store) -> None:
    fake_store.add_pet(name="Dog", rarity="Common")
    fake_store.fail_audit = True
    service = PetService(fake_store)

    updated = await service.update_pet("admin", 1, PetWrite(name="Wolf", rarity="Rare"))

    assert updated["name"] == "Wolf"
    assert fake_store.audit_log == []


@pytest.mark.asyncio
async def test_update_matching_no_rows_raises(fake_store) -> None:
    fake_store.add_pet(name="Dog", rarity="Common")
    fake_store.update_pet = AsyncMock(return_value=None)
    service = PetService(fake_store)

    with pytest.raises(StoreAppError) as exc_info:
        await service.update_pet("admin", 1, PetWrite(name="Wolf", rarity="Rare"))

    assert exc_info.value.message == "Update failed - no rows affected"


@pytest.mark.asyncio
async def test_store_errors_propagate_from_list(fake_store) -> None:
    fake_store.list_pets = AsyncMock(
        side_effect=StoreAppError(code="store_unavailable", message="Database service unavailable")
    )

    with pytest.raises(StoreAppError):
        await PetService(fake_store).list_pets()
