from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from warmpath.db.neo4j.queries import fetch_edges_touching
from warmpath.services.pathfinding.edges import edges_from_records
from warmpath.services.pathfinding.models import Edge

logger = logging.getLogger(__name__)

EdgeFetcher = Callable[[list[str]], list[Mapping[str, Any]]]


def load_subgraph(
    sources: Iterable[str],
    target: str | None = None,
    *,
    max_hops: int,
    fetch_edges: EdgeFetcher | None = None,
    default_strength: float = 0.5,
) -> list[Edge]:
    """Pull the edges reachable from ``sources`` within ``max_hops`` rounds.

    One store query per hop. Edges are fetched in both directions so callers
    can still symmetrize them; traversal direction is decided by the finder.
    """
    fetcher = fetch_edges or fetch_edges_touching
    seen_ids: set[str] = set()
    frontier = list(dict.fromkeys(sources))
    seen_edges: set[tuple[str, str, str]] = set()
    collected: list[Edge] = []

    for hop in range(max_hops):
        if not frontier:
            break
        seen_ids.update(frontier)
        records = fetcher(frontier)
        next_frontier: dict[str, None] = {}
        for edge in edges_from_records(records, default_strength=default_strength):
            key = (edge.source, edge.target, edge.kind)
            if key in seen_edges:
                continue
            seen_edges.add(key)
            collected.append(edge)
            for entity_id in (edge.source, edge.target):
                if entity_id not in seen_ids and entity_id != target:
                    next_frontier.setdefault(entity_id)
        logger.debug(
            "subgraph_hop_loaded",
            extra={"hop": hop + 1, "frontier": len(frontier), "edges": len(collected)},
        )
        frontier = list(next_frontier)

    return collected
