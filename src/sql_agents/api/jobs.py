"""
In-memory job store for background pipeline runs.

Constructed once per application and injected into the route handlers.
Records never expire, so the store grows with every job for the lifetime of
the process; a multi-process deployment would need an external store.
"""

import asyncio
import logging
import uuid

from .models import JobRecord, OptimizedQueryResponse

logger = logging.getLogger(__name__)


class JobStore:
    """Job records keyed by ID, plus references to their running asyncio tasks."""

    def __init__(self) -> None:
        self._jobs: dict[str, JobRecord] = {}
        self._tasks: set[asyncio.Task] = set()

    def create(self) -> str:
        job_id = str(uuid.uuid4())
        self._jobs[job_id] = JobRecord(status="pending")
        logger.info("Job %s created", job_id)
        return job_id

    def get(self, job_id: str) -> JobRecord | None:
        return self._jobs.get(job_id)

    def complete(self, job_id: str, optimized_query: str) -> None:
        self._jobs[job_id] = JobRecord(
            status="completed",
            result=OptimizedQueryResponse(optimized_query=optimized_query),
        )
        logger.info("Job %s completed", job_id)

    def fail(self, job_id: str, error: str) -> None:
        self._jobs[job_id] = JobRecord(status="failed", error=error)
        logger.info("Job %s failed", job_id)

    def track(self, task: asyncio.Task) -> None:
        """Hold a reference to a background task until it finishes."""
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def __len__(self) -> int:
        return len(self._jobs)
