from __future__ import annotations

import logging
from contextlib import contextmanager
from functools import lru_cache

from neo4j import GraphDatabase
from neo4j.exceptions import Neo4jError, ServiceUnavailable

from warmpath.core.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_driver():
    settings = get_settings()
    if not settings.neo4j_uri:
        return None
    return GraphDatabase.driver(
        settings.neo4j_uri,
        auth=(settings.neo4j_user, settings.neo4j_password),
        connection_timeout=settings.neo4j_connection_timeout_seconds,
    )


def close_driver() -> None:
    driver = get_driver()
    get_driver.cache_clear()
    if driver is not None:
        driver.close()


def graph_store_status() -> str:
    """``none`` when unconfigured, else ``neo4j`` or ``unreachable``."""
    driver = get_driver()
    if driver is None:
        return "none"
    try:
        driver.verify_connectivity()
    except (ServiceUnavailable, Neo4jError, OSError):
        logger.warning("neo4j_unreachable", exc_info=True)
        return "unreachable"
    return "neo4j"


@contextmanager
def neo4j_session():
    driver = get_driver()
    if driver is None:
        yield None
        return
    with driver.session() as session:
        yield session
