from __future__ import annotations

from petvalues.api.routes.auth import router as auth_router
from petvalues.api.routes.health import router as health_router
from petvalues.api.routes.online import router as online_router
from petvalues.api.routes.pets import router as pets_router

__all__ = ["auth_router", "health_router", "online_router", "pets_router"]
