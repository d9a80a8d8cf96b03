from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from petvalues.adapters.store.base import AbstractCatalogStore
from petvalues.core.auth import get_store, verify_admin
from petvalues.core.rate_limit import enforce_login_rate_limit
from petvalues.schemas.auth import VerifyRequest, VerifyResponse

router = APIRouter(tags=["Auth"])


@router.post(
    "/auth/verify",
    response_model=VerifyResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(enforce_login_rate_limit)],
)
async def verify_credentials(
    payload: VerifyRequest,
    store: Annotated[AbstractCatalogStore, Depends(get_store)],
) -> VerifyResponse | JSONResponse:
    """Check admin credentials for the login form.

    Throttled per client address (one attempt per two minutes by default).
    A throttled request gets 429 with ``retryAfter`` and never reaches the
    credential lookup.

    Returns:
        ``{"valid": true, "username": ...}`` for an active admin,
        ``{"valid": false}`` otherwise.
    """
    if not payload.username or not payload.password:
        return JSONResponse(
            status_code=400,
            content={"error": "Username and password required", "valid": False},
        )

    admin = await verify_admin(store, payload.username, payload.password)
    if admin is None:
        return VerifyResponse(valid=False)

    return VerifyResponse(valid=True, username=admin.get("username", payload.username))
