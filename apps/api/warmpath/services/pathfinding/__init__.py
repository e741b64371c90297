from __future__ import annotations

from warmpath.services.pathfinding.edges import (
    DEFAULT_KIND_WEIGHTS,
    EdgeRecordError,
    edge_from_record,
    edges_from_records,
    prepare_edges,
    symmetrize_edges,
)
from warmpath.services.pathfinding.finder import (
    InvalidPathQueryError,
    SearchBudget,
    build_adjacency,
    collect_paths,
    find_paths,
    path_strength,
    rank_paths,
)
from warmpath.services.pathfinding.models import Edge, Entity, Path

__all__ = [
    "DEFAULT_KIND_WEIGHTS",
    "Edge",
    "EdgeRecordError",
    "Entity",
    "InvalidPathQueryError",
    "Path",
    "SearchBudget",
    "build_adjacency",
    "collect_paths",
    "edge_from_record",
    "edges_from_records",
    "find_paths",
    "path_strength",
    "prepare_edges",
    "rank_paths",
    "symmetrize_edges",
]
