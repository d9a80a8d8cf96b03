from __future__ import annotations

"""Application factory for the FastAPI app.

Owns the process-wide collaborators: the login rate limiter and the catalog
store are constructed here, stored on ``app.state`` and handed to routes
through dependencies. The lifespan starts the limiter sweep and tears it
down (with the store's HTTP clients) on shutdown.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from petvalues.adapters.rate_limit import AbstractRateLimiter, InMemoryRateLimiter
from petvalues.adapters.store import AbstractCatalogStore, create_store
from petvalues.api.routes import auth_router, health_router, online_router, pets_router
from petvalues.core.config import settings
from petvalues.core.exception_handlers import setup_exception_handlers
from petvalues.core.logging import configure_logging
from petvalues.core.middleware import request_id_middleware
from petvalues.core.openapi import apply_openapi_customizations
from petvalues.core.rate_limit import RateLimitSweeper

CORS_ALLOWED_HEADERS = [
    "Accept",
    "Content-Type",
    "X-Requested-With",
    "X-CSRF-Token",
    "X-Api-Version",
    "X-Admin-Username",
    "X-Admin-Password",
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    sweeper: RateLimitSweeper = app.state.rate_limit_sweeper
    await sweeper.start()
    try:
        yield
    finally:
        await sweeper.stop()
        await app.state.store.aclose()


def _parse_origins(raw: str) -> list[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()] or ["*"]


def create_app(
    *,
    store: AbstractCatalogStore | None = None,
    login_limiter: AbstractRateLimiter | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        store: Catalog store to use; built from settings when omitted.
        login_limiter: Limiter for the login route; a fresh in-memory one
            when omitted.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Pet Values Admin API",
        description=(
            "Public pet value catalog plus admin endpoints to create, edit and "
            "delete entries. Admin login checks are throttled per client "
            "address; every admin write is recorded in an audit log."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    limiter = login_limiter if login_limiter is not None else InMemoryRateLimiter()
    app.state.login_limiter = limiter
    app.state.store = store if store is not None else create_store()
    app.state.rate_limit_sweeper = RateLimitSweeper(
        limiter,
        interval_seconds=settings.app.rate_limit_sweep_interval_seconds,
    )

    # Middleware
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_parse_origins(settings.app.cors_allow_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=CORS_ALLOWED_HEADERS,
    )

    setup_exception_handlers(app)

    app.include_router(pets_router, prefix="/api")
    app.include_router(online_router, prefix="/api")
    app.include_router(auth_router, prefix="/api")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
