from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Warm Path API"
    environment: str = "dev"
    api_prefix: str = "/v1"

    log_level: str = "INFO"
    log_json: bool = False

    neo4j_uri: str = ""
    neo4j_user: str = ""
    neo4j_password: str = ""
    neo4j_connection_timeout_seconds: float = Field(default=5.0, gt=0.0, le=120.0)
    edge_fetch_limit: int = Field(default=5000, ge=1, le=100000)
    internal_owner_fetch_limit: int = Field(default=500, ge=1, le=100000)

    redis_url: str = "redis://redis:6379/0"
    queue_mode: str = "redis"
    queue_retry_max: int = Field(default=2, ge=0, le=10)
    queue_retry_interval_seconds: int = Field(default=60, ge=5, le=3600)

    webhook_secret: str = ""
    cors_allow_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    path_default_max_hops: int = Field(default=3, ge=1, le=10)
    path_default_min_strength: float = Field(default=0.3, ge=0.0, le=1.0)
    path_default_max_results: int = Field(default=10, ge=1, le=100)
    path_max_hops_limit: int = Field(default=6, ge=1, le=10)
    path_default_edge_strength: float = Field(default=0.5, ge=0.0, le=1.0)
    path_symmetric_edges: bool = False
    batch_max_workers: int = Field(default=4, ge=1, le=64)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
