# tests/property/test_pool_properties.py
"""Property-based tests for pool admission.

INVARIANTS:
1. Jobs start in submission order whatever order they finish in
2. Active jobs never exceed the concurrency limit
3. Every submission settles with its own job's result
"""

from __future__ import annotations

import asyncio

from hypothesis import given
from hypothesis import strategies as st

from httpool.contracts import PoolResult
from httpool.pooling import ConcurrencyPool
from tests.helpers.transport import ControlledJobs, settle
from tests.property.settings import SLOW_SETTINGS


async def _drive(concurrency: int, job_count: int, picks: list[int]) -> tuple[list[int], int, list[PoolResult]]:
    pool = ConcurrencyPool(concurrency=concurrency)
    jobs = ControlledJobs()
    futures = [pool.enqueue(jobs.factory(i)) for i in range(job_count)]
    peak = len(jobs.running)

    step = 0
    while jobs.running:
        running = jobs.running
        jobs.finish(running[picks[step % len(picks)] % len(running)])
        step += 1
        await settle()
        peak = max(peak, len(jobs.running))

    return jobs.started, peak, list(await asyncio.gather(*futures))


@given(
    concurrency=st.integers(min_value=1, max_value=5),
    job_count=st.integers(min_value=0, max_value=20),
    picks=st.lists(st.integers(min_value=0, max_value=100), min_size=1, max_size=20),
)
@SLOW_SETTINGS
def test_fifo_admission_under_any_finish_order(concurrency: int, job_count: int, picks: list[int]) -> None:
    started, peak, results = asyncio.run(_drive(concurrency, job_count, picks))

    assert started == list(range(job_count))
    assert peak <= concurrency
    assert results == [PoolResult(f"result-{i}", f"handle-{i}") for i in range(job_count)]
