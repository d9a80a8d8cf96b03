"""Pydantic schemas for pet catalog requests and responses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# Values arrive as strings from the admin form but older rows hold numbers
CatalogValue = str | int | float


class Pet(BaseModel):
    """A catalog row as stored. Unknown columns are passed through."""

    model_config = ConfigDict(extra="allow")

    id: int = Field(..., description="Primary key.")
    name: str | None = Field(default=None, description="Display name.")
    rarity: str | None = Field(default=None, description="Rarity tier (e.g., Legendary).")
    stats: CatalogValue | None = Field(default=None, description="Headline stat value.")
    value: CatalogValue | None = Field(
        default=None, description="Sort value used by the public listing."
    )
    image_url: str | None = Field(default=None, description="Image location, if any.")


class PetWrite(BaseModel):
    """Body accepted by the admin create and update endpoints.

    Every field is optional at the schema level; ``name`` and ``rarity`` are
    checked by the service so the client gets a 400 with a readable message
    instead of a 422 validation dump.
    """

    name: str | None = None
    rarity: str | None = None
    stats: CatalogValue | None = None
    stats_type: str | None = None
    value_normal: CatalogValue | None = None
    value_golden: CatalogValue | None = None
    value_rainbow: CatalogValue | None = None
    image_url: str | None = None


class DeletePetResponse(BaseModel):
    success: bool = True
    message: str = "Pet deleted"


class OnlineCountResponse(BaseModel):
    count: int = Field(..., description="Number of users currently online.")
