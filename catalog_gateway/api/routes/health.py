from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(request: Request) -> dict:
    """Health check endpoint.

    Reports liveness plus the number of live cache entries.

    Returns:
        dict: ``status`` set to "ok" and ``cache_entries``.
    """

    cache = request.app.state.cache
    return {"status": "ok", "cache_entries": cache.stats()["entries"]}
