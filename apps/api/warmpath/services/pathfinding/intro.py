from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from warmpath.services.pathfinding.finder import SearchBudget, collect_paths, find_paths, validate_query
from warmpath.services.pathfinding.models import Edge, Entity, Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntroPathView:
    path: list[str]
    strength: float
    length: int
    path_names: list[str] = field(default_factory=list)
    path_types: list[str] = field(default_factory=list)
    connection_types: list[str] = field(default_factory=list)
    internal_owners: list[str] = field(default_factory=list)
    linkedin_connections: list[str] = field(default_factory=list)
    explanation: str = ""
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": list(self.path),
            "strength": self.strength,
            "length": self.length,
            "path_names": list(self.path_names),
            "path_types": list(self.path_types),
            "connection_types": list(self.connection_types),
            "internal_owners": list(self.internal_owners),
            "linkedin_connections": list(self.linkedin_connections),
            "explanation": self.explanation,
            "description": self.description,
        }


def _entity_index(entities: Iterable[Entity] | Mapping[str, Entity]) -> dict[str, Entity]:
    if isinstance(entities, Mapping):
        return dict(entities)
    return {entity.id: entity for entity in entities}


def entity_from_record(record: Mapping[str, Any]) -> Entity:
    return Entity(
        id=str(record["id"]),
        name=record.get("name"),
        type=str(record.get("type") or "unknown"),
        is_internal_owner=bool(record.get("is_internal_owner") or record.get("internal_owner")),
        is_portfolio=bool(record.get("is_portfolio")),
        is_pipeline=bool(record.get("is_pipeline")),
        linkedin_first_degree=bool(record.get("linkedin_first_degree")),
    )


def internal_owner_ids(entities: Iterable[Entity]) -> list[str]:
    return [entity.id for entity in entities if entity.is_internal_owner]


def humanize_kind(kind: str) -> str:
    return " ".join(part.capitalize() for part in kind.replace("_", " ").split())


def degrees_of_separation(length: int) -> str:
    if length <= 0:
        return "Same entity"
    if length == 1:
        return "Direct connection"
    if length == 2:
        return "One degree of separation"
    return f"{length - 1} degrees of separation"


def describe_path(path: Path, entities: Iterable[Entity] | Mapping[str, Entity]) -> IntroPathView:
    index = _entity_index(entities)
    nodes = [index.get(entity_id) for entity_id in path.path]
    names = [node.display_name if node else entity_id for node, entity_id in zip(nodes, path.path)]

    segments = [names[0]] if names else []
    for edge, name in zip(path.edges, names[1:]):
        segments.append(f"{name} ({humanize_kind(edge.kind)})")

    return IntroPathView(
        path=list(path.path),
        strength=path.strength,
        length=path.length,
        path_names=names,
        path_types=[node.type if node else "unknown" for node in nodes],
        connection_types=path.kinds,
        internal_owners=[node.id for node in nodes if node and node.is_internal_owner],
        linkedin_connections=[node.id for node in nodes if node and node.linkedin_first_degree],
        explanation=" → ".join(segments),
        description=degrees_of_separation(path.length),
    )


def find_intro_paths(
    entities: Iterable[Entity],
    edges: Iterable[Edge],
    target: str,
    *,
    max_hops: int = 3,
    min_strength: float = 0.3,
    max_results: int = 10,
    prefer_linkedin: bool = False,
    budget: SearchBudget | None = None,
) -> list[IntroPathView]:
    """Rank warm-introduction routes from every internal owner to ``target``."""
    index = _entity_index(entities)
    owners = [owner_id for owner_id in internal_owner_ids(index.values()) if owner_id != target]
    if not owners:
        logger.warning("intro_paths_no_internal_owners", extra={"target": target})
        return []

    if not prefer_linkedin:
        paths = find_paths(
            edges,
            owners,
            target,
            max_hops=max_hops,
            min_strength=min_strength,
            max_results=max_results,
            budget=budget,
        )
        return [describe_path(path, index) for path in paths]

    # A weak route through a LinkedIn contact still outranks any stronger
    # route without one, so the re-rank needs every candidate.
    validate_query(owners, max_hops=max_hops, min_strength=min_strength, max_results=max_results)
    paths = collect_paths(edges, owners, target, max_hops=max_hops, min_strength=min_strength, budget=budget)
    views = [describe_path(path, index) for path in paths]
    views.sort(key=lambda view: -len(view.linkedin_connections))
    return views[:max_results]


def summarize_paths(paths: Iterable[IntroPathView]) -> dict[str, Any]:
    items = list(paths)
    if not items:
        return {
            "total_paths": 0,
            "average_strength": 0.0,
            "shortest_path": 0,
            "longest_path": 0,
            "linkedin_paths": 0,
            "internal_owner_paths": 0,
            "top_connection_types": [],
        }

    kind_counts: Counter[str] = Counter()
    for item in items:
        kind_counts.update(item.connection_types)
    lengths = [item.length for item in items]

    return {
        "total_paths": len(items),
        "average_strength": round(sum(item.strength for item in items) / len(items), 4),
        "shortest_path": min(lengths),
        "longest_path": max(lengths),
        "linkedin_paths": sum(1 for item in items if item.linkedin_connections),
        "internal_owner_paths": sum(1 for item in items if item.internal_owners),
        "top_connection_types": [{"type": kind, "count": count} for kind, count in kind_counts.most_common(5)],
    }
