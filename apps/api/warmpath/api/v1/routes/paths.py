from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from fastapi import APIRouter, Depends, HTTPException, status

from warmpath.api.v1.deps import get_settings_dep
from warmpath.api.v1.schemas import (
    BatchPathsRequest,
    BatchPathsResponse,
    EdgeIn,
    FindPathsRequest,
    FindPathsResponse,
    IntroPathOut,
    IntroPathsRequest,
    IntroPathsResponse,
    PathInsights,
    PathOut,
    PathTuning,
)
from warmpath.core.config import Settings
from warmpath.core.security import require_webhook_secret
from warmpath.db.neo4j.queries import fetch_entities, fetch_internal_owner_ids
from warmpath.services.pathfinding.edges import EdgeRecordError, edges_from_records
from warmpath.services.pathfinding.finder import InvalidPathQueryError, find_paths
from warmpath.services.pathfinding.intro import entity_from_record, find_intro_paths, summarize_paths
from warmpath.services.pathfinding.models import Edge, Entity
from warmpath.services.pathfinding.options import PathQueryOptions
from warmpath.services.pathfinding.subgraph import load_subgraph
from warmpath.workers.queue import enqueue_job, fetch_job

router = APIRouter(prefix="/paths", tags=["paths"], dependencies=[Depends(require_webhook_secret)])
logger = logging.getLogger(__name__)

T = TypeVar("T")


def _resolve_options(payload: PathTuning, settings: Settings) -> PathQueryOptions:
    return PathQueryOptions.resolve(
        settings,
        max_hops=payload.max_hops,
        min_strength=payload.min_strength,
        max_results=payload.max_results,
        symmetric=payload.symmetric,
        boost=payload.boost,
        use_kind_weights=payload.use_kind_weights,
        max_branches=payload.max_branches,
        deadline_seconds=payload.deadline_seconds,
    )


def _from_store(event: str, loader: Callable[[], T], *, detail: str = "Graph store unavailable", **context: Any) -> T:
    try:
        return loader()
    except Exception as exc:
        logger.exception(event, extra=context)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
        ) from exc


def _edges_for_request(
    edges: list[EdgeIn] | None,
    sources: list[str],
    target: str | None,
    options: PathQueryOptions,
    settings: Settings,
) -> list[Edge]:
    if edges is not None:
        try:
            parsed = edges_from_records(
                [edge.model_dump() for edge in edges],
                default_strength=settings.path_default_edge_strength,
            )
        except EdgeRecordError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
    else:
        parsed = _from_store(
            "path_subgraph_load_failed",
            lambda: load_subgraph(
                sources,
                target,
                max_hops=options.max_hops,
                default_strength=settings.path_default_edge_strength,
            ),
            target=target,
        )
    return options.prepare(parsed)


@router.post("/find", response_model=FindPathsResponse)
def find_paths_route(payload: FindPathsRequest, settings: Settings = Depends(get_settings_dep)) -> FindPathsResponse:
    options = _resolve_options(payload, settings)
    edges = _edges_for_request(payload.edges, payload.sources, payload.target, options, settings)
    try:
        paths = find_paths(edges, payload.sources, payload.target, **options.find_kwargs())
    except InvalidPathQueryError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return FindPathsResponse(
        target=payload.target,
        count=len(paths),
        paths=[PathOut(**path.to_dict()) for path in paths],
    )


def _entities_for_request(payload: IntroPathsRequest) -> list[Entity]:
    if payload.entities is not None:
        return [entity_from_record(entity.model_dump()) for entity in payload.entities]

    owner_ids = _from_store("intro_owner_lookup_failed", fetch_internal_owner_ids, target=payload.target)
    ids = list(dict.fromkeys([*owner_ids, payload.target]))
    records = _from_store("intro_entity_lookup_failed", lambda: fetch_entities(ids), target=payload.target)
    return [entity_from_record(record) for record in records]


@router.post("/intro", response_model=IntroPathsResponse)
def intro_paths_route(payload: IntroPathsRequest, settings: Settings = Depends(get_settings_dep)) -> IntroPathsResponse:
    options = _resolve_options(payload, settings)
    entities = _entities_for_request(payload)
    owners = [entity.id for entity in entities if entity.is_internal_owner]
    edges = _edges_for_request(payload.edges, owners, payload.target, options, settings)

    if payload.entities is None:
        # Names for the intermediate hops only become known after the subgraph load.
        known = {entity.id for entity in entities}
        missing = [entity_id for edge in edges for entity_id in (edge.source, edge.target) if entity_id not in known]
        if missing:
            extra = _from_store(
                "intro_entity_lookup_failed",
                lambda: fetch_entities(list(dict.fromkeys(missing))),
                target=payload.target,
            )
            entities.extend(entity_from_record(record) for record in extra)

    try:
        views = find_intro_paths(
            entities,
            edges,
            payload.target,
            prefer_linkedin=payload.prefer_linkedin,
            **options.find_kwargs(),
        )
    except InvalidPathQueryError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return IntroPathsResponse(
        target=payload.target,
        paths=[IntroPathOut(**view.to_dict()) for view in views],
        insights=PathInsights(**summarize_paths(views)),
    )


def _batch_response(job_id: str, job_status: str, result: dict[str, Any] | None) -> BatchPathsResponse:
    if not result:
        return BatchPathsResponse(job_id=job_id, status=job_status)
    job = result.get("job") or {}
    return BatchPathsResponse(
        job_id=job_id,
        status=job.get("status", job_status),
        progress=job.get("progress"),
        results={
            target: [PathOut(**item) for item in items] for target, items in (result.get("results") or {}).items()
        },
        detail=job,
    )


@router.post("/batch", response_model=BatchPathsResponse)
def batch_paths_route(payload: BatchPathsRequest) -> BatchPathsResponse:
    try:
        queued = enqueue_job("compute_warm_paths_batch", payload.model_dump(mode="json"))
    except (InvalidPathQueryError, EdgeRecordError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _batch_response(queued.job_id, queued.status, queued.result)


@router.get("/batch/{job_id}", response_model=BatchPathsResponse)
def batch_job_status(job_id: str) -> BatchPathsResponse:
    job = _from_store(
        "batch_job_lookup_failed",
        lambda: fetch_job(job_id),
        detail="Job queue unavailable",
        job_id=job_id,
    )
    if job is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    return _batch_response(job.job_id, job.status, job.result)
