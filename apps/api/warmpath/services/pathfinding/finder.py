"""Bounded-depth weighted path discovery between entities.

Paths are scored by the product of their edge strengths, so confidence in an
introduction decays with every extra hop. Exploration is breadth-first over
(partial path, visited set) states and never revisits an entity, which keeps
it finite on cyclic graphs.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from warmpath.services.pathfinding.models import Edge, Path

logger = logging.getLogger(__name__)


class InvalidPathQueryError(ValueError):
    pass


@dataclass(frozen=True)
class SearchBudget:
    """Caller-supplied cap on exploration for dense graphs."""

    max_branches: int | None = None
    deadline_seconds: float | None = None


class _BudgetTracker:
    def __init__(self, budget: SearchBudget | None) -> None:
        self.max_branches = budget.max_branches if budget else None
        self.deadline = None
        if budget and budget.deadline_seconds is not None:
            self.deadline = time.monotonic() + max(0.0, budget.deadline_seconds)
        self.branches = 0
        self.exhausted = False

    def charge(self) -> bool:
        self.branches += 1
        if self.max_branches is not None and self.branches > self.max_branches:
            self.exhausted = True
        elif self.deadline is not None and time.monotonic() >= self.deadline:
            self.exhausted = True
        return not self.exhausted


def build_adjacency(edges: Iterable[Edge]) -> dict[str, list[Edge]]:
    adjacency: dict[str, list[Edge]] = {}
    for edge in edges:
        adjacency.setdefault(edge.source, []).append(edge)
    return adjacency


def path_strength(edges: Iterable[Edge]) -> float:
    strength = 1.0
    for edge in edges:
        strength *= edge.strength
    return strength


def _path_sort_key(path: Path) -> tuple[float, int]:
    return (-path.strength, path.length)


def rank_paths(paths: Iterable[Path]) -> list[Path]:
    # sorted() is stable, so equal keys keep discovery order.
    return sorted(paths, key=_path_sort_key)


def normalize_sources(sources: str | Iterable[str]) -> list[str]:
    if isinstance(sources, str):
        sources = [sources]
    ordered: list[str] = []
    seen: set[str] = set()
    for source in sources:
        if source in seen:
            continue
        seen.add(source)
        ordered.append(source)
    return ordered


def validate_query(
    sources: Sequence[str],
    *,
    max_hops: int,
    min_strength: float,
    max_results: int | None = None,
) -> None:
    if not sources:
        raise InvalidPathQueryError("at least one source entity is required")
    if isinstance(max_hops, bool) or not isinstance(max_hops, int) or max_hops < 1:
        raise InvalidPathQueryError(f"max_hops must be an integer >= 1, got {max_hops!r}")
    if not 0.0 <= float(min_strength) <= 1.0:
        raise InvalidPathQueryError(f"min_strength must be within [0, 1], got {min_strength!r}")
    if max_results is None:
        return
    if isinstance(max_results, bool) or not isinstance(max_results, int) or max_results < 1:
        raise InvalidPathQueryError(f"max_results must be an integer >= 1, got {max_results!r}")


def _explore_from(
    adjacency: Mapping[str, list[Edge]],
    source: str,
    target: str,
    *,
    max_hops: int,
    min_strength: float,
    tracker: _BudgetTracker,
) -> list[Path]:
    found: list[Path] = []
    queue: deque[tuple[tuple[str, ...], tuple[Edge, ...], float, frozenset[str]]] = deque(
        [((source,), (), 1.0, frozenset((source,)))]
    )
    while queue:
        ids, walked, strength, visited = queue.popleft()
        for edge in adjacency.get(ids[-1], ()):
            next_id = edge.target
            if next_id in visited:
                continue
            if not tracker.charge():
                return found
            next_strength = strength * edge.strength
            # Strength only decays along a path, so a weak branch never recovers.
            if next_strength < min_strength:
                continue
            next_ids = ids + (next_id,)
            next_walked = walked + (edge,)
            if next_id == target:
                found.append(Path(path=next_ids, strength=next_strength, edges=next_walked))
                continue
            if len(next_walked) >= max_hops:
                continue
            queue.append((next_ids, next_walked, next_strength, visited | {next_id}))
    return found


def collect_paths(
    edges: Iterable[Edge],
    sources: str | Iterable[str],
    target: str,
    *,
    max_hops: int = 3,
    min_strength: float = 0.3,
    budget: SearchBudget | None = None,
) -> list[Path]:
    """Every qualifying path from any source to ``target``, ranked but uncapped.

    Parallel edges of the same kind collapse to the strongest path through
    them; the survivor keeps the first-seen position.
    """
    source_ids = normalize_sources(sources)
    validate_query(source_ids, max_hops=max_hops, min_strength=min_strength)

    adjacency = build_adjacency(edges)
    tracker = _BudgetTracker(budget)
    candidates: list[Path] = []
    positions: dict[tuple[tuple[str, ...], tuple[str, ...]], int] = {}

    for source in source_ids:
        if source == target:
            found = [Path(path=(source,), strength=1.0)]
        else:
            found = _explore_from(
                adjacency,
                source,
                target,
                max_hops=max_hops,
                min_strength=min_strength,
                tracker=tracker,
            )
        for path in found:
            key = (path.path, tuple(path.kinds))
            index = positions.get(key)
            if index is None:
                positions[key] = len(candidates)
                candidates.append(path)
            elif path.strength > candidates[index].strength:
                candidates[index] = path
        if tracker.exhausted:
            logger.warning(
                "path_search_budget_exhausted",
                extra={
                    "target": target,
                    "branches": tracker.branches,
                    "candidates": len(candidates),
                },
            )
            break

    return rank_paths(candidates)


def find_paths(
    edges: Iterable[Edge],
    sources: str | Iterable[str],
    target: str,
    *,
    max_hops: int = 3,
    min_strength: float = 0.3,
    max_results: int = 10,
    budget: SearchBudget | None = None,
) -> list[Path]:
    """Return the strongest introduction paths from any source to ``target``.

    Results are ordered by strength descending, then by fewer hops, then by
    discovery order, and capped at ``max_results``. An empty list means no
    path satisfies the constraints; it is never an error.

    Raises:
        InvalidPathQueryError: if the sources are empty or a bound is out of range.
    """
    source_ids = normalize_sources(sources)
    validate_query(source_ids, max_hops=max_hops, min_strength=min_strength, max_results=max_results)

    candidates = collect_paths(edges, source_ids, target, max_hops=max_hops, min_strength=min_strength, budget=budget)
    ranked = candidates[:max_results]
    logger.debug(
        "path_search_completed",
        extra={
            "target": target,
            "source_count": len(source_ids),
            "candidate_count": len(candidates),
            "returned": len(ranked),
        },
    )
    return ranked
