from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from warmpath.services.pathfinding.edges import (
    DEFAULT_KIND_WEIGHTS,
    EdgeRecordError,
    boosted_strength,
    dedupe_edges,
    edge_from_record,
    edges_from_records,
    kind_weighted_strength,
    prepare_edges,
    symmetrize_edges,
)
from warmpath.services.pathfinding.models import Edge

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_edge_from_record_accepts_strength_score_alias() -> None:
    edge = edge_from_record({"source": "a", "target": "b", "kind": "owner", "strength_score": 0.7})

    assert edge == Edge(source="a", target="b", kind="owner", strength=0.7)


def test_edge_from_record_accepts_contact_relationship_shape() -> None:
    edge = edge_from_record(
        {"from_contact": "c-1", "to_contact": "c-2", "relationship_type": "colleague", "strength": "0.4"}
    )

    assert (edge.source, edge.target, edge.kind, edge.strength) == ("c-1", "c-2", "colleague", 0.4)


def test_edge_from_record_defaults_missing_strength_and_kind() -> None:
    edge = edge_from_record({"source": "a", "target": "b"}, default_strength=0.55)

    assert edge.kind == "related_to"
    assert edge.strength == 0.55


def test_edge_from_record_keeps_zero_strength() -> None:
    assert edge_from_record({"source": "a", "target": "b", "strength": 0}).strength == 0.0


def test_edge_from_record_clamps_out_of_range_strength() -> None:
    assert edge_from_record({"source": "a", "target": "b", "strength": 1.7}).strength == 1.0
    assert edge_from_record({"source": "a", "target": "b", "strength": -2}).strength == 0.0


def test_edge_from_record_parses_interaction_metadata() -> None:
    edge = edge_from_record(
        {
            "source": "a",
            "target": "b",
            "interaction_count": "3",
            "last_interaction_date": "2026-02-20T00:00:00Z",
        }
    )

    assert edge.interaction_count == 3
    assert edge.last_interaction_at == datetime(2026, 2, 20, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "record",
    [
        {"target": "b", "strength": 0.5},
        {"source": "a", "strength": 0.5},
        {"source": "a", "target": "b", "strength": "strong"},
        {"source": "a", "target": "b", "strength": float("nan")},
    ],
)
def test_malformed_records_raise(record) -> None:
    with pytest.raises(EdgeRecordError):
        edge_from_record(record)


def test_edges_from_records_preserves_order() -> None:
    edges = edges_from_records(
        [
            {"source": "a", "target": "b", "strength": 0.1},
            {"source": "b", "target": "c", "strength": 0.2},
        ]
    )

    assert [(edge.source, edge.target) for edge in edges] == [("a", "b"), ("b", "c")]


def test_boosted_strength_rewards_frequent_recent_interactions() -> None:
    recent = Edge(source="a", target="b", strength=0.4, interaction_count=2, last_interaction_at=NOW - timedelta(days=5))
    older = Edge(source="a", target="b", strength=0.4, interaction_count=2, last_interaction_at=NOW - timedelta(days=60))
    stale = Edge(source="a", target="b", strength=0.4, last_interaction_at=NOW - timedelta(days=200))

    assert boosted_strength(recent, now=NOW) == pytest.approx(0.7)
    assert boosted_strength(older, now=NOW) == pytest.approx(0.6)
    assert boosted_strength(stale, now=NOW) == pytest.approx(0.4)


def test_boosted_strength_caps_interaction_bonus_and_total() -> None:
    busy = Edge(source="a", target="b", strength=0.9, interaction_count=50, last_interaction_at=NOW)

    assert boosted_strength(busy, now=NOW) == 1.0
    assert boosted_strength(Edge(source="a", target="b", strength=0.1, interaction_count=50), now=NOW) == pytest.approx(0.4)


def test_kind_weighted_strength_averages_with_kind_weight() -> None:
    founder = Edge(source="a", target="b", kind="founder", strength=0.55)
    unknown = Edge(source="a", target="b", kind="met_at_conference", strength=0.9)

    assert kind_weighted_strength(founder, DEFAULT_KIND_WEIGHTS) == pytest.approx(0.75)
    assert kind_weighted_strength(unknown, DEFAULT_KIND_WEIGHTS) == pytest.approx(0.7)


def test_symmetrize_adds_missing_reverse_edges_only() -> None:
    edges = [
        Edge(source="a", target="b", kind="owner", strength=0.8),
        Edge(source="b", target="a", kind="owner", strength=0.3),
        Edge(source="b", target="c", kind="colleague", strength=0.6),
    ]

    result = symmetrize_edges(edges)

    assert result[:3] == edges
    assert result[3:] == [Edge(source="c", target="b", kind="colleague", strength=0.6)]


def test_dedupe_keeps_strongest_in_first_seen_position() -> None:
    edges = [
        Edge(source="a", target="b", kind="owner", strength=0.2),
        Edge(source="b", target="c", kind="owner", strength=0.5),
        Edge(source="a", target="b", kind="owner", strength=0.9),
    ]

    result = dedupe_edges(edges)

    assert [(edge.source, edge.target, edge.strength) for edge in result] == [("a", "b", 0.9), ("b", "c", 0.5)]


def test_prepare_edges_applies_options_in_order() -> None:
    edges = [
        Edge(source="a", target="b", kind="portfolio", strength=0.5, interaction_count=2, last_interaction_at=NOW),
    ]

    result = prepare_edges(edges, boost=True, kind_weights=DEFAULT_KIND_WEIGHTS, symmetric=True, now=NOW)

    # boost: 0.5 + 0.1 + 0.2 = 0.8; kind blend: (0.8 + 0.9) / 2 = 0.85
    assert len(result) == 2
    assert result[0].strength == pytest.approx(0.85)
    assert (result[1].source, result[1].target) == ("b", "a")
    assert result[1].strength == pytest.approx(0.85)


def test_prepare_edges_without_options_only_dedupes() -> None:
    edges = [Edge(source="a", target="b", strength=0.5), Edge(source="a", target="b", strength=0.5)]

    assert prepare_edges(edges) == [Edge(source="a", target="b", strength=0.5)]
