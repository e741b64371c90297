from __future__ import annotations

import logging
from typing import Any

from warmpath.core.config import get_settings
from warmpath.db.neo4j.driver import neo4j_session

logger = logging.getLogger(__name__)


def _session_run(session, query: str, *args, **kwargs):
    return session.run(query, *args, **kwargs)


def _clean_ids(entity_ids: list[str]) -> list[str]:
    return sorted({str(item).strip() for item in entity_ids if item is not None and str(item).strip()})


def fetch_edges_touching(entity_ids: list[str], *, limit: int | None = None) -> list[dict[str, Any]]:
    ids = _clean_ids(entity_ids)
    if not ids:
        return []
    fetch_limit = limit if limit is not None else get_settings().edge_fetch_limit

    query = """
        MATCH (a:Entity)-[r:RELATES_TO]->(b:Entity)
        WHERE a.entity_id IN $ids OR b.entity_id IN $ids
        RETURN a.entity_id AS source,
               b.entity_id AS target,
               coalesce(r.kind, "related_to") AS kind,
               coalesce(r.strength, r.strength_score) AS strength,
               r.interaction_count AS interaction_count,
               toString(r.last_interaction_at) AS last_interaction_at
        LIMIT $limit
    """
    with neo4j_session() as session:
        if session is None:
            return []
        rows = _session_run(session, query, ids=ids, limit=fetch_limit).data()

    if len(rows) >= fetch_limit:
        logger.warning("edge_fetch_limit_reached", extra={"entity_count": len(ids), "limit": fetch_limit})
    return rows


def fetch_entities(entity_ids: list[str]) -> list[dict[str, Any]]:
    ids = _clean_ids(entity_ids)
    if not ids:
        return []

    query = """
        MATCH (e:Entity)
        WHERE e.entity_id IN $ids
        RETURN e.entity_id AS id,
               e.name AS name,
               coalesce(e.type, "unknown") AS type,
               coalesce(e.is_internal_owner, false) AS is_internal_owner,
               coalesce(e.is_portfolio, false) AS is_portfolio,
               coalesce(e.is_pipeline, false) AS is_pipeline,
               coalesce(e.linkedin_first_degree, false) AS linkedin_first_degree
    """
    with neo4j_session() as session:
        if session is None:
            return []
        return _session_run(session, query, ids=ids).data()


def fetch_internal_owner_ids(limit: int | None = None) -> list[str]:
    fetch_limit = max(1, limit if limit is not None else get_settings().internal_owner_fetch_limit)
    query = """
        MATCH (e:Entity)
        WHERE coalesce(e.is_internal_owner, false) = true
        RETURN e.entity_id AS id
        ORDER BY e.entity_id
        LIMIT $limit
    """
    with neo4j_session() as session:
        if session is None:
            return []
        rows = _session_run(session, query, limit=fetch_limit).data()

    if len(rows) >= fetch_limit:
        logger.warning("internal_owner_fetch_limit_reached", extra={"limit": fetch_limit})
    return [row["id"] for row in rows if row.get("id")]
