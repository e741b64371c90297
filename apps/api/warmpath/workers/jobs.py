from __future__ import annotations

import logging
from typing import Any

from warmpath.core.config import get_settings
from warmpath.services.pathfinding.batch import BatchJobState, find_paths_for_targets
from warmpath.services.pathfinding.edges import edges_from_records
from warmpath.services.pathfinding.options import PathQueryOptions
from warmpath.services.pathfinding.subgraph import load_subgraph

logger = logging.getLogger(__name__)

_TUNING_KEYS = (
    "max_hops",
    "min_strength",
    "max_results",
    "symmetric",
    "boost",
    "use_kind_weights",
    "max_branches",
    "deadline_seconds",
)


def compute_warm_paths_batch(payload: dict[str, Any]) -> dict[str, Any]:
    """Rank paths from ``payload["sources"]`` to every entry in ``payload["targets"]``.

    ``payload`` is the JSON form of a batch request, so it can cross the rq
    boundary. Edges are loaded from the graph store when the payload has none.
    """
    settings = get_settings()
    options = PathQueryOptions.resolve(
        settings,
        **{key: payload[key] for key in _TUNING_KEYS if payload.get(key) is not None},
    )
    sources = list(payload.get("sources") or [])
    targets = list(payload.get("targets") or [])

    raw_edges = payload.get("edges")
    if raw_edges is not None:
        edges = edges_from_records(raw_edges, default_strength=settings.path_default_edge_strength)
    else:
        edges = load_subgraph(
            sources,
            max_hops=options.max_hops,
            default_strength=settings.path_default_edge_strength,
        )

    state = BatchJobState()
    if payload.get("job_id"):
        state.job_id = str(payload["job_id"])
    logger.info(
        "warm_paths_batch_started",
        extra={"job_id": state.job_id, "source_count": len(sources), "target_count": len(targets), "edge_count": len(edges)},
    )
    results = find_paths_for_targets(
        options.prepare(edges),
        sources,
        targets,
        max_workers=settings.batch_max_workers,
        state=state,
        **options.find_kwargs(),
    )
    return {
        "job": state.to_dict(),
        "results": {target: [path.to_dict() for path in paths] for target, paths in results.items()},
    }
