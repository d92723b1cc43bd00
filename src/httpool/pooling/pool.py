# src/httpool/pooling/pool.py
"""Bounded-concurrency pool for request task factories.

Jobs are admitted in strict FIFO submission order and never more than
`concurrency` run at once. Completion order is whatever the jobs' own
durations produce.

Everything runs on one event loop: dispatch happens synchronously inside
enqueue() and inside the done-callback of each finishing job, so no locks
are needed. The queue is unbounded; the pool is the only backpressure.
"""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import partial
from typing import Any

import structlog

from httpool.contracts import PoolResult
from httpool.pooling.config import DEFAULT_CONCURRENCY, PoolConfig

logger = structlog.get_logger(__name__)

# Zero-argument callable that starts one task and returns (completion, handle).
# send_request() returns a PendingRequest, which unpacks the same way.
TaskFactory = Callable[[], tuple[Awaitable[Any], Any]]


@dataclass
class PoolJob:
    """Queue entry for one submission.

    Attributes:
        factory: Deferred task starter
        future: Caller-visible completion token for this submission
        submit_index: Order of submission (0-indexed)
    """

    factory: TaskFactory
    future: asyncio.Future[PoolResult]
    submit_index: int


class ConcurrencyPool:
    """Run task factories with at most `concurrency` in flight.

    Usage:
        pool = ConcurrencyPool(concurrency=3)

        futures = [
            pool.enqueue(lambda url=url: send_request(RequestOptions(url=url)))
            for url in urls
        ]
        outcomes = await asyncio.gather(*futures, return_exceptions=True)

        for outcome in outcomes:
            if isinstance(outcome, PoolResult):
                print(outcome.result.status, outcome.result.body)

    A failing job (factory raises, or its completion rejects) only rejects
    its own future; queued and running siblings are unaffected.
    """

    def __init__(self, concurrency: int = DEFAULT_CONCURRENCY) -> None:
        """Initialize the pool.

        Args:
            concurrency: Maximum concurrent jobs (must be >= 1)

        Raises:
            ValueError: If concurrency is less than 1
        """
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        self._concurrency = concurrency
        self._active = 0
        self._queue: deque[PoolJob] = deque()

        # Counters for get_stats()
        self._submitted = 0
        self._succeeded = 0
        self._failed = 0
        self._max_concurrent = 0

    @classmethod
    def from_config(cls, config: PoolConfig) -> ConcurrencyPool:
        return cls(concurrency=config.concurrency)

    @property
    def concurrency(self) -> int:
        """Maximum concurrent jobs."""
        return self._concurrency

    @property
    def active_count(self) -> int:
        """Jobs currently occupying a slot."""
        return self._active

    @property
    def pending_count(self) -> int:
        """Jobs waiting in the queue."""
        return len(self._queue)

    def enqueue(self, factory: TaskFactory) -> asyncio.Future[PoolResult]:
        """Submit a task factory.

        Must be called from a running event loop. The factory is invoked
        when a slot is free, possibly before this method returns.

        Args:
            factory: Zero-argument callable returning (completion, handle)

        Returns:
            Future resolving to PoolResult(result, handle), or rejecting with
            the job's failure. Cancelling it dequeues a waiting job, or
            cancels the running job's completion.
        """
        loop = asyncio.get_running_loop()
        job = PoolJob(factory=factory, future=loop.create_future(), submit_index=self._submitted)
        self._submitted += 1
        self._queue.append(job)
        self._dispatch()
        return job.future

    def get_stats(self) -> dict[str, Any]:
        """Get pool statistics.

        Returns:
            Dict with pool_config (concurrency) and pool_stats (submitted,
            succeeded, failed, active, pending, max_concurrent_reached)
        """
        return {
            "pool_config": {
                "concurrency": self._concurrency,
            },
            "pool_stats": {
                "submitted": self._submitted,
                "succeeded": self._succeeded,
                "failed": self._failed,
                "active": self._active,
                "pending": len(self._queue),
                "max_concurrent_reached": self._max_concurrent,
            },
        }

    def _dispatch(self) -> None:
        """Admit queued jobs while slots are free."""
        while self._active < self._concurrency and self._queue:
            job = self._queue.popleft()
            if job.future.done():
                # Cancelled by the caller while it was still queued
                continue
            self._start(job)

    def _start(self, job: PoolJob) -> None:
        self._active += 1
        if self._active > self._max_concurrent:
            self._max_concurrent = self._active
        logger.debug("pool_job_admitted", submit_index=job.submit_index, active=self._active)

        try:
            completion, handle = job.factory()
            task = asyncio.ensure_future(completion)
        except Exception as e:
            self._active -= 1
            self._failed += 1
            logger.debug(
                "pool_job_settled",
                submit_index=job.submit_index,
                outcome="factory_error",
                error_type=type(e).__name__,
            )
            job.future.set_exception(e)
            return

        task.add_done_callback(partial(self._on_job_done, job, handle))
        job.future.add_done_callback(partial(_cancel_if_abandoned, task))

    def _on_job_done(self, job: PoolJob, handle: Any, task: asyncio.Future[Any]) -> None:
        self._active -= 1

        if task.cancelled():
            self._failed += 1
            outcome = "cancelled"
            if not job.future.done():
                job.future.cancel()
        elif task.exception() is not None:
            self._failed += 1
            outcome = "failed"
            if not job.future.done():
                job.future.set_exception(task.exception())
        else:
            self._succeeded += 1
            outcome = "succeeded"
            if not job.future.done():
                job.future.set_result(PoolResult(task.result(), handle))

        logger.debug("pool_job_settled", submit_index=job.submit_index, outcome=outcome, active=self._active)
        self._dispatch()


def _cancel_if_abandoned(task: asyncio.Future[Any], future: asyncio.Future[PoolResult]) -> None:
    if future.cancelled() and not task.done():
        task.cancel()
