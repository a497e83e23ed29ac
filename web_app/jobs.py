from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from lead_miner.aggregator import AggregationEvent, AggregationOutcome
from lead_miner.models import RunState, SearchResult, SearchStatus
from lead_miner.utils import unique_sources


@dataclass
class SearchJob:
    """Presentation snapshot of one browser session's latest search."""

    query: str = ""
    status: SearchStatus = SearchStatus.IDLE
    progress: str = ""
    message: str = ""
    result: Optional[SearchResult] = None
    finished_at: Optional[float] = None

    def apply(self, event: AggregationEvent) -> None:
        if event.kind == "progress":
            self.progress = event.message

    def complete(self, outcome: AggregationOutcome, now: float) -> None:
        self.finished_at = now
        self.progress = ""
        self.message = outcome.message
        if outcome.state is RunState.FAILURE:
            self.status = SearchStatus.ERROR
            self.result = None
        else:
            self.status = SearchStatus.SUCCESS
            self.result = outcome.result

    def to_dict(self) -> Dict:
        contacts = self.result.contacts if self.result else []
        sources = unique_sources(self.result.sources) if self.result else []
        return {
            "query": self.query,
            "status": self.status.value,
            "progress": self.progress,
            "message": self.message,
            "total": len(contacts),
            "contacts": [dict(c.to_row(), id=c.id) for c in contacts],
            "sources": [s.to_dict() for s in sources],
        }


@dataclass
class JobRegistry:
    """In-memory jobs keyed by session id. Nothing is persisted.

    Finished jobs are dropped after ``ttl_seconds``, and the oldest finished
    ones go first once ``max_jobs`` is reached. Running jobs are never evicted.
    """

    ttl_seconds: float = 3600.0
    max_jobs: int = 500
    clock: Callable[[], float] = time.monotonic
    _jobs: Dict[str, SearchJob] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def _evict(self) -> None:
        now = self.clock()
        finished = sorted(
            ((job.finished_at, key) for key, job in self._jobs.items() if job.finished_at is not None),
        )
        for finished_at, key in finished:
            if now - finished_at >= self.ttl_seconds or len(self._jobs) >= self.max_jobs:
                del self._jobs[key]

    def get(self, key: str) -> SearchJob:
        with self._lock:
            return self._jobs.get(key) or SearchJob()

    def try_start(self, key: str, query: str) -> Optional[SearchJob]:
        """Register a new loading job, or return None while one is in flight."""
        with self._lock:
            current = self._jobs.get(key)
            if current is not None and current.status is SearchStatus.LOADING:
                return None
            self._evict()
            job = SearchJob(query=query, status=SearchStatus.LOADING)
            self._jobs[key] = job
            return job

    def update(self, key: str, event: AggregationEvent) -> None:
        with self._lock:
            job = self._jobs.get(key)
            if job is not None:
                job.apply(event)

    def finish(self, key: str, outcome: AggregationOutcome) -> None:
        with self._lock:
            job = self._jobs.get(key)
            if job is not None:
                job.complete(outcome, self.clock())

    def snapshot(self, key: str) -> Dict:
        with self._lock:
            return (self._jobs.get(key) or SearchJob()).to_dict()
