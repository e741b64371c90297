from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from warmpath.services.pathfinding.models import Edge


class EdgeRecordError(ValueError):
    pass


DEFAULT_KIND_WEIGHTS: dict[str, float] = {
    "founder": 0.95,
    "ceo": 0.90,
    "cto": 0.85,
    "cfo": 0.85,
    "director": 0.80,
    "manager": 0.75,
    "employee": 0.70,
    "colleague": 0.65,
    "portfolio": 0.90,
    "deal_team": 0.80,
    "owner": 0.85,
}


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _parse_timestamp(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, str) and value.strip():
        try:
            return _as_utc(datetime.fromisoformat(value.strip().replace("Z", "+00:00")))
        except ValueError:
            return None
    return None


def _clamp_strength(value: float) -> float:
    return max(0.0, min(1.0, value))


def _first_present(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None and value != "":
            return value
    return None


def edge_from_record(record: Mapping[str, Any], *, default_strength: float = 0.5) -> Edge:
    """Build an Edge from a raw store/API record.

    Producers disagree on field names (``strength`` vs ``strength_score``,
    ``source`` vs ``from_contact``), so each field accepts its known aliases.
    """
    source = _first_present(record, "source", "from_contact", "source_id")
    target = _first_present(record, "target", "to_contact", "target_id")
    if source is None or target is None:
        raise EdgeRecordError(f"edge record is missing source or target: {dict(record)!r}")

    raw_strength = _first_present(record, "strength", "strength_score", "weight")
    if raw_strength is None:
        strength = default_strength
    else:
        try:
            strength = float(raw_strength)
        except (TypeError, ValueError) as exc:
            raise EdgeRecordError(f"edge strength is not numeric: {raw_strength!r}") from exc
        if math.isnan(strength):
            raise EdgeRecordError("edge strength is NaN")

    interaction_count = record.get("interaction_count")
    try:
        interaction_count = int(interaction_count) if interaction_count is not None else None
    except (TypeError, ValueError):
        interaction_count = None

    kind = _first_present(record, "kind", "relationship_type") or "related_to"
    return Edge(
        source=str(source),
        target=str(target),
        kind=str(kind),
        strength=_clamp_strength(strength),
        interaction_count=interaction_count,
        last_interaction_at=_parse_timestamp(_first_present(record, "last_interaction_at", "last_interaction_date")),
    )


def edges_from_records(records: Iterable[Mapping[str, Any]], *, default_strength: float = 0.5) -> list[Edge]:
    return [edge_from_record(record, default_strength=default_strength) for record in records]


def boosted_strength(edge: Edge, *, now: datetime | None = None) -> float:
    strength = edge.strength
    if edge.interaction_count:
        strength += min(0.3, max(edge.interaction_count, 0) * 0.05)
    if edge.last_interaction_at is not None:
        current = _as_utc(now) if now is not None else datetime.now(timezone.utc)
        days_since = (current - _as_utc(edge.last_interaction_at)).total_seconds() / 86400.0
        if days_since < 30:
            strength += 0.2
        elif days_since < 90:
            strength += 0.1
    return min(1.0, strength)


def kind_weighted_strength(edge: Edge, kind_weights: Mapping[str, float], *, default_weight: float = 0.5) -> float:
    weight = kind_weights.get(edge.kind, default_weight)
    return _clamp_strength((edge.strength + weight) / 2)


def _with_strength(edge: Edge, strength: float) -> Edge:
    return Edge(
        source=edge.source,
        target=edge.target,
        kind=edge.kind,
        strength=strength,
        interaction_count=edge.interaction_count,
        last_interaction_at=edge.last_interaction_at,
    )


def symmetrize_edges(edges: Iterable[Edge]) -> list[Edge]:
    materialized = list(edges)
    present = {(edge.source, edge.target, edge.kind) for edge in materialized}
    result = list(materialized)
    for edge in materialized:
        key = (edge.target, edge.source, edge.kind)
        if key in present:
            continue
        present.add(key)
        result.append(edge.reversed())
    return result


def dedupe_edges(edges: Iterable[Edge]) -> list[Edge]:
    best: dict[tuple[str, str, str], Edge] = {}
    for edge in edges:
        key = (edge.source, edge.target, edge.kind)
        current = best.get(key)
        if current is None or edge.strength > current.strength:
            # dict keeps first-insertion position when a stronger duplicate replaces it
            best[key] = edge
    return list(best.values())


def prepare_edges(
    edges: Iterable[Edge],
    *,
    boost: bool = False,
    kind_weights: Mapping[str, float] | None = None,
    symmetric: bool = False,
    now: datetime | None = None,
) -> list[Edge]:
    prepared = list(edges)
    if boost:
        prepared = [_with_strength(edge, boosted_strength(edge, now=now)) for edge in prepared]
    if kind_weights is not None:
        prepared = [_with_strength(edge, kind_weighted_strength(edge, kind_weights)) for edge in prepared]
    if symmetric:
        prepared = symmetrize_edges(prepared)
    return dedupe_edges(prepared)
