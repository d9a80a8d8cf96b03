from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(request: Request) -> dict:
    """Liveness check for load balancers and uptime monitors.

    ``admin_writes`` is false when the service role key is missing, which
    makes every catalog write fail with a configuration error.
    """

    return {
        "status": "ok",
        "admin_writes": request.app.state.store.has_admin_access,
    }
