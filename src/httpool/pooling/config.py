# src/httpool/pooling/config.py
"""Pool configuration for bounded-concurrency request scheduling."""

from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_CONCURRENCY = 4


class PoolConfig(BaseModel):
    """Pool configuration for concurrent requests.

    Attributes:
        concurrency: Maximum number of jobs running at once (must be >= 1)
    """

    model_config = {"frozen": True, "extra": "forbid"}

    concurrency: int = Field(DEFAULT_CONCURRENCY, ge=1, description="Number of concurrent jobs")
