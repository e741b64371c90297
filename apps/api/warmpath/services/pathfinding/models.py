from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class Entity:
    """Display/classification attributes for a graph node. Never mutated."""

    id: str
    name: str | None = None
    type: str = "unknown"
    is_internal_owner: bool = False
    is_portfolio: bool = False
    is_pipeline: bool = False
    linkedin_first_degree: bool = False

    @property
    def display_name(self) -> str:
        return self.name or self.id


@dataclass(frozen=True)
class Edge:
    """Directed, typed relationship with a strength in [0, 1].

    ``kind`` is an open category string such as ``portfolio_connection`` or
    ``owner``. ``interaction_count`` and ``last_interaction_at`` only feed the
    optional strength boost in ``edges.boosted_strength``.
    """

    source: str
    target: str
    kind: str = "related_to"
    strength: float = 0.5
    interaction_count: int | None = None
    last_interaction_at: datetime | None = None

    def reversed(self) -> Edge:
        return Edge(
            source=self.target,
            target=self.source,
            kind=self.kind,
            strength=self.strength,
            interaction_count=self.interaction_count,
            last_interaction_at=self.last_interaction_at,
        )


@dataclass(frozen=True)
class Path:
    path: tuple[str, ...]
    strength: float
    edges: tuple[Edge, ...] = field(default=(), compare=False)

    @property
    def length(self) -> int:
        return len(self.path) - 1

    @property
    def source(self) -> str:
        return self.path[0]

    @property
    def target(self) -> str:
        return self.path[-1]

    @property
    def kinds(self) -> list[str]:
        return [edge.kind for edge in self.edges]

    def to_dict(self) -> dict[str, Any]:
        return {"path": list(self.path), "strength": self.strength, "length": self.length}
