"""Pydantic schemas for admin credential verification."""

from __future__ import annotations

from pydantic import BaseModel, Field


class VerifyRequest(BaseModel):
    """Login form body. Emptiness is checked by the route (400, not 422)."""

    username: str | None = Field(default=None, description="Admin username.")
    password: str | None = Field(default=None, description="Admin password.")


class VerifyResponse(BaseModel):
    valid: bool = Field(..., description="Whether the credentials belong to an active admin.")
    username: str | None = Field(
        default=None, description="Canonical username when the credentials are valid."
    )
