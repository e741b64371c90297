from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from warmpath.core.config import Settings
from warmpath.services.pathfinding.edges import DEFAULT_KIND_WEIGHTS, prepare_edges
from warmpath.services.pathfinding.finder import SearchBudget
from warmpath.services.pathfinding.models import Edge


@dataclass(frozen=True)
class PathQueryOptions:
    """Request tuning resolved against settings defaults."""

    max_hops: int
    min_strength: float
    max_results: int
    symmetric: bool = False
    boost: bool = False
    use_kind_weights: bool = False
    budget: SearchBudget | None = None

    @classmethod
    def resolve(
        cls,
        settings: Settings,
        *,
        max_hops: int | None = None,
        min_strength: float | None = None,
        max_results: int | None = None,
        symmetric: bool | None = None,
        boost: bool = False,
        use_kind_weights: bool = False,
        max_branches: int | None = None,
        deadline_seconds: float | None = None,
    ) -> PathQueryOptions:
        hops = settings.path_default_max_hops if max_hops is None else max_hops
        budget = None
        if max_branches is not None or deadline_seconds is not None:
            budget = SearchBudget(max_branches=max_branches, deadline_seconds=deadline_seconds)
        return cls(
            # Dense graphs blow up combinatorially past the configured ceiling.
            max_hops=min(hops, settings.path_max_hops_limit),
            min_strength=settings.path_default_min_strength if min_strength is None else min_strength,
            max_results=settings.path_default_max_results if max_results is None else max_results,
            symmetric=settings.path_symmetric_edges if symmetric is None else symmetric,
            boost=boost,
            use_kind_weights=use_kind_weights,
            budget=budget,
        )

    def prepare(self, edges: Iterable[Edge], *, now: datetime | None = None) -> list[Edge]:
        return prepare_edges(
            edges,
            boost=self.boost,
            kind_weights=DEFAULT_KIND_WEIGHTS if self.use_kind_weights else None,
            symmetric=self.symmetric,
            now=now,
        )

    def find_kwargs(self) -> dict[str, Any]:
        return {
            "max_hops": self.max_hops,
            "min_strength": self.min_strength,
            "max_results": self.max_results,
            "budget": self.budget,
        }
