from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from warmpath.api.v1.routes import health, paths
from warmpath.core.config import get_settings
from warmpath.core.logging import configure_logging
from warmpath.db.neo4j.driver import close_driver

configure_logging()
settings = get_settings()
app = FastAPI(title=settings.app_name)
allowed_origins = [origin.strip() for origin in settings.cors_allow_origins.split(",") if origin.strip()]
if allowed_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.on_event("shutdown")
def on_shutdown() -> None:
    close_driver()


app.include_router(health.router, prefix=settings.api_prefix)
app.include_router(paths.router, prefix=settings.api_prefix)
