from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Response

from petvalues.adapters.store.base import AbstractCatalogStore
from petvalues.core.auth import get_store, require_admin
from petvalues.core.config import settings
from petvalues.core.errors import ValidationAppError
from petvalues.schemas.pets import DeletePetResponse, Pet, PetWrite
from petvalues.services.pet_service import PetService

router = APIRouter(tags=["Pets"])


def get_pet_service(
    store: Annotated[AbstractCatalogStore, Depends(get_store)],
) -> PetService:
    return PetService(store)


def parse_pet_id(pet_id: str) -> int:
    """Path parameter parser answering 400 (not 422) for non-numeric ids."""
    try:
        return int(pet_id)
    except ValueError:
        raise ValidationAppError(code="invalid_pet_id", message="Invalid pet ID") from None


PetServiceDep = Annotated[PetService, Depends(get_pet_service)]
PetIdDep = Annotated[int, Depends(parse_pet_id)]
AdminDep = Annotated[str, Depends(require_admin)]


@router.get("/pets", response_model=list[Pet])
async def list_pets(response: Response, service: PetServiceDep) -> list[dict[str, Any]]:
    """Public catalog listing, highest value first.

    Cached at the CDN edge for 30 minutes (see ``APP_PUBLIC_CACHE_CONTROL``).
    """
    pets = await service.list_pets()
    response.headers["Cache-Control"] = settings.app.public_cache_control
    return pets


@router.post("/pets", response_model=Pet, status_code=201)
async def create_pet(payload: PetWrite, username: AdminDep, service: PetServiceDep) -> dict[str, Any]:
    return await service.create_pet(username, payload)


@router.get("/pets/{pet_id}", response_model=Pet)
async def get_pet(pet_id: PetIdDep, service: PetServiceDep) -> dict[str, Any]:
    return await service.get_pet(pet_id)


@router.put("/pets/{pet_id}", response_model=Pet)
async def update_pet(
    pet_id: PetIdDep,
    payload: PetWrite,
    username: AdminDep,
    service: PetServiceDep,
) -> dict[str, Any]:
    """Update a pet (admin only).

    Requires ``X-Admin-Username`` and ``X-Admin-Password`` headers. The
    fields that changed are recorded in the audit log.

    Raises:
        ValidationAppError: 400 for a bad id or missing name/rarity.
        AuthenticationAppError: 401 for missing or invalid credentials.
        NotFoundAppError: 404 when the pet does not exist.
    """
    return await service.update_pet(username, pet_id, payload)


@router.delete("/pets/{pet_id}", response_model=DeletePetResponse)
async def delete_pet(pet_id: PetIdDep, username: AdminDep, service: PetServiceDep) -> DeletePetResponse:
    await service.delete_pet(username, pet_id)
    return DeletePetResponse()
