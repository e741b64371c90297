from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from warmpath.api.v1.routes import health as health_routes
from warmpath.api.v1.routes import paths as paths_routes
from warmpath.core.config import get_settings
from warmpath.main import app
from warmpath.services.pathfinding.models import Edge
from warmpath.workers.queue import EnqueuedJob

client = TestClient(app)

CHAIN = [
    {"source": "A", "target": "B", "kind": "colleague", "strength": 0.8},
    {"source": "B", "target": "C", "kind": "founder", "strength": 0.5},
]


def _headers() -> dict[str, str]:
    headers: dict[str, str] = {}
    if get_settings().webhook_secret:
        headers["X-Webhook-Secret"] = get_settings().webhook_secret
    return headers


def test_health_reports_graph_store(monkeypatch) -> None:
    monkeypatch.setattr(health_routes, "graph_store_status", lambda: "unreachable")

    response = client.get("/v1/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["graph_store"] == "unreachable"


def test_find_paths_with_inline_edges() -> None:
    response = client.post(
        "/v1/paths/find",
        json={"sources": ["A"], "target": "C", "edges": CHAIN, "min_strength": 0.3},
        headers=_headers(),
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["target"] == "C"
    assert payload["count"] == 1
    assert payload["paths"][0]["path"] == ["A", "B", "C"]
    assert payload["paths"][0]["strength"] == pytest.approx(0.4)
    assert payload["paths"][0]["length"] == 2


def test_find_paths_symmetric_flag_allows_reverse_traversal() -> None:
    body = {"sources": ["C"], "target": "A", "edges": CHAIN, "min_strength": 0.1}

    directed = client.post("/v1/paths/find", json=body, headers=_headers())
    symmetric = client.post("/v1/paths/find", json={**body, "symmetric": True}, headers=_headers())

    assert directed.json()["count"] == 0
    assert symmetric.json()["paths"][0]["path"] == ["C", "B", "A"]


@pytest.mark.parametrize(
    "body",
    [
        {"sources": [], "target": "C", "edges": CHAIN},
        {"sources": ["A"], "target": "C", "edges": CHAIN, "min_strength": 1.5},
        {"sources": ["A"], "target": "C", "edges": CHAIN, "max_hops": 0},
        {"sources": ["A"], "target": "C", "edges": CHAIN, "max_results": 0},
        {"sources": ["A"], "target": "C", "edges": [{"source": "A", "target": "B", "strength": 2}]},
    ],
)
def test_find_paths_rejects_invalid_queries(body) -> None:
    response = client.post("/v1/paths/find", json=body, headers=_headers())

    assert response.status_code == 422


def test_find_paths_loads_subgraph_from_store(monkeypatch) -> None:
    captured: dict = {}

    def _fake_load_subgraph(sources, target=None, *, max_hops, default_strength=0.5):
        captured.update({"sources": sources, "target": target, "max_hops": max_hops})
        return [Edge(source="A", target="C", kind="owner", strength=0.9)]

    monkeypatch.setattr(paths_routes, "load_subgraph", _fake_load_subgraph)

    response = client.post(
        "/v1/paths/find",
        json={"sources": ["A"], "target": "C", "max_hops": 50},
        headers=_headers(),
    )

    assert response.status_code == 200
    assert response.json()["paths"][0]["path"] == ["A", "C"]
    assert captured["sources"] == ["A"]
    assert captured["target"] == "C"
    assert captured["max_hops"] == get_settings().path_max_hops_limit


def test_find_paths_store_failure_is_503(monkeypatch) -> None:
    def _broken(*args, **kwargs):
        raise RuntimeError("neo4j down")

    monkeypatch.setattr(paths_routes, "load_subgraph", _broken)

    response = client.post("/v1/paths/find", json={"sources": ["A"], "target": "C"}, headers=_headers())

    assert response.status_code == 503
    assert response.json()["detail"] == "Graph store unavailable"


def test_webhook_secret_is_enforced(monkeypatch) -> None:
    monkeypatch.setattr(get_settings(), "webhook_secret", "s3cret")
    body = {"sources": ["A"], "target": "C", "edges": CHAIN}

    missing = client.post("/v1/paths/find", json=body)
    wrong = client.post("/v1/paths/find", json=body, headers={"X-Webhook-Secret": "nope"})
    ok = client.post("/v1/paths/find", json=body, headers={"X-Webhook-Secret": "s3cret"})
    legacy = client.post("/v1/paths/find", json=body, headers={"x-mv-signature": "s3cret"})

    assert missing.status_code == 401
    assert wrong.status_code == 401
    assert ok.status_code == 200
    assert legacy.status_code == 200


def test_intro_paths_with_inline_entities() -> None:
    response = client.post(
        "/v1/paths/intro",
        json={
            "target": "org-1",
            "entities": [
                {"id": "owner-1", "name": "Dana Partner", "type": "person", "is_internal_owner": True},
                {"id": "p-1", "name": "Alex Founder", "type": "person", "linkedin_first_degree": True},
                {"id": "org-1", "name": "Acme Robotics", "type": "organization"},
            ],
            "edges": [
                {"source": "owner-1", "target": "p-1", "kind": "deal_team", "strength": 0.9},
                {"source": "p-1", "target": "org-1", "kind": "founder", "strength": 0.9},
            ],
        },
        headers=_headers(),
    )

    assert response.status_code == 200
    payload = response.json()
    view = payload["paths"][0]
    assert view["path_names"] == ["Dana Partner", "Alex Founder", "Acme Robotics"]
    assert view["explanation"] == "Dana Partner → Alex Founder (Deal Team) → Acme Robotics (Founder)"
    assert view["linkedin_connections"] == ["p-1"]
    assert payload["insights"]["total_paths"] == 1
    assert payload["insights"]["top_connection_types"][0] == {"type": "deal_team", "count": 1}


def test_intro_paths_resolves_entities_from_store(monkeypatch) -> None:
    store = {
        "owner-1": {"id": "owner-1", "name": "Dana Partner", "type": "person", "is_internal_owner": True},
        "p-1": {"id": "p-1", "name": "Alex Founder", "type": "person"},
        "org-1": {"id": "org-1", "name": "Acme Robotics", "type": "organization"},
    }
    lookups: list[list[str]] = []

    def _fake_fetch_entities(ids):
        lookups.append(list(ids))
        return [store[entity_id] for entity_id in ids if entity_id in store]

    def _fake_load_subgraph(sources, target=None, *, max_hops, default_strength=0.5):
        assert sources == ["owner-1"]
        return [
            Edge(source="owner-1", target="p-1", kind="deal_team", strength=0.9),
            Edge(source="p-1", target="org-1", kind="founder", strength=0.9),
        ]

    monkeypatch.setattr(paths_routes, "fetch_internal_owner_ids", lambda: ["owner-1"])
    monkeypatch.setattr(paths_routes, "fetch_entities", _fake_fetch_entities)
    monkeypatch.setattr(paths_routes, "load_subgraph", _fake_load_subgraph)

    response = client.post("/v1/paths/intro", json={"target": "org-1"}, headers=_headers())

    assert response.status_code == 200
    assert response.json()["paths"][0]["path_names"] == ["Dana Partner", "Alex Founder", "Acme Robotics"]
    assert lookups == [["owner-1", "org-1"], ["p-1"]]


def test_batch_paths_inline_mode_returns_results(monkeypatch) -> None:
    monkeypatch.setattr(get_settings(), "queue_mode", "inline")

    response = client.post(
        "/v1/paths/batch",
        json={"sources": ["A"], "targets": ["B", "C", "Z"], "edges": CHAIN, "min_strength": 0.1},
        headers=_headers(),
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "completed"
    assert payload["progress"] == 1.0
    assert payload["results"]["C"][0]["path"] == ["A", "B", "C"]
    assert payload["results"]["Z"] == []
    assert payload["detail"]["total"] == 3


def test_batch_job_status_lookup(monkeypatch) -> None:
    jobs = {"job-1": EnqueuedJob(job_id="job-1", status="started")}
    monkeypatch.setattr(paths_routes, "fetch_job", lambda job_id: jobs.get(job_id))

    running = client.get("/v1/paths/batch/job-1", headers=_headers())
    missing = client.get("/v1/paths/batch/job-2", headers=_headers())

    assert running.status_code == 200
    assert running.json()["status"] == "started"
    assert running.json()["results"] is None
    assert missing.status_code == 404


def test_batch_job_status_queue_failure_is_503(monkeypatch) -> None:
    def _broken(job_id):
        raise ConnectionError("redis down")

    monkeypatch.setattr(paths_routes, "fetch_job", _broken)

    response = client.get("/v1/paths/batch/job-1", headers=_headers())

    assert response.status_code == 503
    assert response.json()["detail"] == "Job queue unavailable"
