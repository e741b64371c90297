from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from warmpath.api.v1.deps import get_settings_dep
from warmpath.core.config import Settings
from warmpath.db.neo4j.driver import graph_store_status

router = APIRouter(tags=["health"])


@router.get("/health")
def health(settings: Settings = Depends(get_settings_dep)) -> dict:
    return {
        "status": "ok",
        "environment": settings.environment,
        "graph_store": graph_store_status(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
