from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from redis import Redis
from rq import Queue, Retry
from rq.exceptions import NoSuchJobError
from rq.job import Job

from warmpath.core.config import get_settings

logger = logging.getLogger(__name__)

QUEUE_NAME = "warm_paths"


@dataclass
class EnqueuedJob:
    job_id: str
    status: str
    result: Any = None


def _get_connection() -> Redis:
    return Redis.from_url(get_settings().redis_url)


def _get_queue() -> Queue:
    return Queue(QUEUE_NAME, connection=_get_connection())


def _run_inline(job_name: str, job_id: str, *args, **kwargs) -> EnqueuedJob:
    from warmpath.workers import jobs

    handler = getattr(jobs, job_name)
    return EnqueuedJob(job_id=job_id, status="completed", result=handler(*args, **kwargs))


def enqueue_job(job_name: str, *args, **kwargs) -> EnqueuedJob:
    settings = get_settings()
    if settings.queue_mode == "inline":
        return _run_inline(job_name, f"inline-{job_name}", *args, **kwargs)

    try:
        queue = _get_queue()
        retry = None
        if settings.queue_retry_max > 0:
            retry = Retry(
                max=settings.queue_retry_max,
                interval=settings.queue_retry_interval_seconds,
            )
        job = queue.enqueue(
            f"warmpath.workers.jobs.{job_name}",
            *args,
            retry=retry,
            **kwargs,
        )
        logger.info("enqueued_job", extra={"job_name": job_name, "job_id": job.id})
        return EnqueuedJob(job_id=job.id, status="queued")
    except Exception:
        logger.exception("redis_enqueue_failed_falling_back_inline", extra={"job_name": job_name})
        return _run_inline(job_name, f"fallback-inline-{job_name}", *args, **kwargs)


def fetch_job(job_id: str) -> EnqueuedJob | None:
    try:
        job = Job.fetch(job_id, connection=_get_connection())
    except NoSuchJobError:
        logger.info("job_not_found", extra={"job_id": job_id})
        return None
    status = job.get_status(refresh=False)
    status_value = getattr(status, "value", status)
    return EnqueuedJob(job_id=job.id, status=str(status_value), result=job.return_value())
