# src/httpool/pooling/__init__.py
"""Bounded-concurrency scheduling for request tasks."""

from httpool.pooling.config import DEFAULT_CONCURRENCY, PoolConfig
from httpool.pooling.pool import ConcurrencyPool, PoolJob, TaskFactory

__all__ = [
    "DEFAULT_CONCURRENCY",
    "ConcurrencyPool",
    "PoolConfig",
    "PoolJob",
    "TaskFactory",
]
