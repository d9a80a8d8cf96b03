"""Admin credential checks.

Admins authenticate either through the login form (``/api/auth/verify``) or,
for catalog writes, with ``X-Admin-Username`` / ``X-Admin-Password`` headers
on every request. Both paths end in ``verify_admin``, which looks the pair up
in the ``admin_users`` table.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, Header, Request

from petvalues.adapters.store.base import AbstractCatalogStore
from petvalues.core.errors import AuthenticationAppError, StoreAppError
from petvalues.core.logging import hash_for_log

logger = logging.getLogger(__name__)


def get_store(request: Request) -> AbstractCatalogStore:
    """Return the catalog store owned by the running application."""
    return request.app.state.store


async def verify_admin(
    store: AbstractCatalogStore,
    username: str | None,
    password: str | None,
) -> dict | None:
    """Look up an active admin by credentials.

    Store failures count as a failed login rather than an error, so a flaky
    database never lets a request through.

    Args:
        store: Catalog store to query.
        username: Submitted username.
        password: Submitted password.

    Returns:
        The admin row when the credentials match an active admin, else None.
    """
    if not username or not password:
        return None

    try:
        admin = await store.find_active_admin(username, password)
    except StoreAppError as exc:
        logger.error(
            "admin_auth.lookup_failed",
            extra={"username_hash": hash_for_log(username), "error_code": exc.code},
        )
        return None

    if admin is None:
        logger.warning("admin_auth.failed", extra={"username_hash": hash_for_log(username)})
        return None

    logger.info("admin_auth.success", extra={"username_hash": hash_for_log(username)})
    return admin


async def require_admin(
    store: Annotated[AbstractCatalogStore, Depends(get_store)],
    x_admin_username: Annotated[str | None, Header(alias="X-Admin-Username")] = None,
    x_admin_password: Annotated[str | None, Header(alias="X-Admin-Password")] = None,
) -> str:
    """FastAPI dependency authenticating admin requests via headers.

    Usage:
        @router.put("/pets/{pet_id}")
        async def update(username: Annotated[str, Depends(require_admin)]):
            ...

    Returns:
        The authenticated admin username (used for audit entries).

    Raises:
        AuthenticationAppError: 401 when headers are missing or do not match
            an active admin.
    """
    if not x_admin_username or not x_admin_password:
        logger.warning(
            "admin_auth.missing_credentials",
            extra={
                "username_present": bool(x_admin_username),
                "password_present": bool(x_admin_password),
            },
        )
        raise AuthenticationAppError(code="missing_credentials", message="Missing credentials")

    admin = await verify_admin(store, x_admin_username, x_admin_password)
    if admin is None:
        raise AuthenticationAppError(code="unauthorized", message="Unauthorized")

    return x_admin_username
