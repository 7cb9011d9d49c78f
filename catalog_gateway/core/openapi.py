"""OpenAPI metadata customization.

Adds tag descriptions and documents the 429 response that the app-wide
rate limit can return on every operation.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

_TAGS = [
    {
        "name": "Products",
        "description": "Cached, validated views over the upstream product catalog.",
    },
    {
        "name": "Health",
        "description": "Liveness check.",
    },
]

_RATE_LIMITED_RESPONSE = {
    "description": "Too many requests from this client within the rate limit window.",
    "headers": {
        "Retry-After": {"schema": {"type": "integer"}, "description": "Seconds until the window resets."},
    },
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add tags and the 429 response."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in _TAGS:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        for methods in schema.get("paths", {}).values():
            for method_obj in methods.values():
                if isinstance(method_obj, dict):
                    method_obj.setdefault("responses", {}).setdefault("429", _RATE_LIMITED_RESPONSE)

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
