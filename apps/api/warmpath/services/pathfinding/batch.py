from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

from warmpath.services.pathfinding.finder import SearchBudget, find_paths, normalize_sources, validate_query
from warmpath.services.pathfinding.models import Edge, Path

logger = logging.getLogger(__name__)

JobStatus = Literal["pending", "running", "completed", "failed"]


@dataclass
class BatchJobState:
    """Progress for a multi-target run. Owned and passed in by the caller."""

    job_id: str = field(default_factory=lambda: f"paths:{uuid.uuid4().hex}")
    total: int = 0
    completed: int = 0
    failed: int = 0
    status: JobStatus = "pending"
    started_at: datetime | None = None
    finished_at: datetime | None = None

    @property
    def progress(self) -> float:
        if self.total <= 0:
            return 1.0 if self.status == "completed" else 0.0
        return round((self.completed + self.failed) / self.total, 4)

    def to_dict(self) -> dict[str, Any]:
        return {
            "job_id": self.job_id,
            "total": self.total,
            "completed": self.completed,
            "failed": self.failed,
            "status": self.status,
            "progress": self.progress,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }


def find_paths_for_targets(
    edges: Iterable[Edge],
    sources: str | Iterable[str],
    targets: Iterable[str],
    *,
    max_hops: int = 3,
    min_strength: float = 0.3,
    max_results: int = 10,
    budget: SearchBudget | None = None,
    max_workers: int = 4,
    state: BatchJobState | None = None,
) -> dict[str, list[Path]]:
    source_ids = normalize_sources(sources)
    validate_query(source_ids, max_hops=max_hops, min_strength=min_strength, max_results=max_results)

    edge_list = list(edges)
    target_ids = list(dict.fromkeys(targets))
    job = state if state is not None else BatchJobState()
    job.total = len(target_ids)
    job.status = "running"
    job.started_at = datetime.now(timezone.utc)

    results: dict[str, list[Path]] = {target: [] for target in target_ids}
    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
        futures = {
            executor.submit(
                find_paths,
                edge_list,
                source_ids,
                target,
                max_hops=max_hops,
                min_strength=min_strength,
                max_results=max_results,
                budget=budget,
            ): target
            for target in target_ids
        }
        for future in as_completed(futures):
            target = futures[future]
            try:
                results[target] = future.result()
                job.completed += 1
            except Exception:
                job.failed += 1
                logger.exception("batch_path_search_failed", extra={"job_id": job.job_id, "target": target})

    job.finished_at = datetime.now(timezone.utc)
    job.status = "failed" if target_ids and job.failed == len(target_ids) else "completed"
    logger.info("batch_path_search_finished", extra=job.to_dict())
    return results
