from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class EdgeIn(BaseModel):
    source: str
    target: str
    kind: str = "related_to"
    strength: float | None = Field(default=None, ge=0.0, le=1.0)
    interaction_count: int | None = Field(default=None, ge=0)
    last_interaction_at: datetime | None = None


class EntityIn(BaseModel):
    id: str
    name: str | None = None
    type: str = "unknown"
    is_internal_owner: bool = False
    is_portfolio: bool = False
    is_pipeline: bool = False
    linkedin_first_degree: bool = False


class PathTuning(BaseModel):
    max_hops: int | None = Field(default=None, ge=1)
    min_strength: float | None = Field(default=None, ge=0.0, le=1.0)
    max_results: int | None = Field(default=None, ge=1, le=100)
    symmetric: bool | None = None
    boost: bool = False
    use_kind_weights: bool = False
    max_branches: int | None = Field(default=None, ge=1)
    deadline_seconds: float | None = Field(default=None, gt=0.0)


class FindPathsRequest(PathTuning):
    sources: list[str] = Field(min_length=1)
    target: str
    edges: list[EdgeIn] | None = None


class IntroPathsRequest(PathTuning):
    target: str
    entities: list[EntityIn] | None = None
    edges: list[EdgeIn] | None = None
    prefer_linkedin: bool = False


class BatchPathsRequest(PathTuning):
    sources: list[str] = Field(min_length=1)
    targets: list[str] = Field(min_length=1)
    edges: list[EdgeIn] | None = None


class PathOut(BaseModel):
    path: list[str]
    strength: float
    length: int


class IntroPathOut(PathOut):
    path_names: list[str] = Field(default_factory=list)
    path_types: list[str] = Field(default_factory=list)
    connection_types: list[str] = Field(default_factory=list)
    internal_owners: list[str] = Field(default_factory=list)
    linkedin_connections: list[str] = Field(default_factory=list)
    explanation: str = ""
    description: str = ""


class ConnectionTypeCount(BaseModel):
    type: str
    count: int


class PathInsights(BaseModel):
    total_paths: int = 0
    average_strength: float = 0.0
    shortest_path: int = 0
    longest_path: int = 0
    linkedin_paths: int = 0
    internal_owner_paths: int = 0
    top_connection_types: list[ConnectionTypeCount] = Field(default_factory=list)


class FindPathsResponse(BaseModel):
    target: str
    count: int
    paths: list[PathOut] = Field(default_factory=list)


class IntroPathsResponse(BaseModel):
    target: str
    paths: list[IntroPathOut] = Field(default_factory=list)
    insights: PathInsights


class BatchPathsResponse(BaseModel):
    job_id: str
    status: str
    progress: float | None = None
    results: dict[str, list[PathOut]] | None = None
    detail: dict[str, Any] = Field(default_factory=dict)
