"""OpenAPI customization.

Documents the admin header credentials as API key security schemes and
attaches them to the catalog write operations only.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

ADMIN_WRITE_METHODS = {"post", "put", "delete"}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add security and tag metadata."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        schema = original_openapi()

        components = schema.setdefault("components", {})
        security_schemes = components.setdefault("securitySchemes", {})
        security_schemes.setdefault(
            "AdminUsername",
            {"type": "apiKey", "in": "header", "name": "X-Admin-Username"},
        )
        security_schemes.setdefault(
            "AdminPassword",
            {"type": "apiKey", "in": "header", "name": "X-Admin-Password"},
        )

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        desired_tags = [
            {"name": "Pets", "description": "Pet value catalog."},
            {"name": "Auth", "description": "Admin login verification (rate limited)."},
            {"name": "Health", "description": "Liveness checks."},
        ]
        for tag in desired_tags:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        # Writes under /api/pets need both admin headers
        for path, methods in schema.get("paths", {}).items():
            if not path.startswith("/api/pets"):
                continue
            for method, method_obj in methods.items():
                if method in ADMIN_WRITE_METHODS and isinstance(method_obj, dict):
                    method_obj["security"] = [{"AdminUsername": [], "AdminPassword": []}]

        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
