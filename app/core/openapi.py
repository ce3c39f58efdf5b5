"""OpenAPI metadata and customization utilities.

Adds tags metadata and documents the CORS preflight and rate limit headers,
keeping documentation concerns out of the app factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

TAGS_METADATA = [
    {
        "name": "Posts",
        "description": "List and create bulletin board posts. POST is rate limited.",
    },
    {
        "name": "Root",
        "description": "Welcome message.",
    },
    {
        "name": "Health",
        "description": "Liveness check.",
    },
]


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add tags and header docs.

    - Adds tags metadata if not present
    - Documents ``Retry-After`` on 429 responses
    """

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        schema = original_openapi()

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in TAGS_METADATA:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        for methods in schema.get("paths", {}).values():
            for method_obj in methods.values():
                if not isinstance(method_obj, dict):
                    continue
                too_many = method_obj.get("responses", {}).get("429")
                if too_many is not None:
                    too_many.setdefault("headers", {})["Retry-After"] = {
                        "description": "Seconds until a token is available.",
                        "schema": {"type": "integer"},
                    }

        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
