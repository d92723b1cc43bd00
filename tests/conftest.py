# tests/conftest.py
"""Shared test fixtures and Hypothesis configuration.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import os
from collections.abc import AsyncIterator, Callable, Iterator
from typing import Any

import httpx
import pytest
import pytest_asyncio
import structlog
from hypothesis import Phase, Verbosity, settings

from tests.helpers.transport import ClientFactory, mock_client

# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo logging reconfiguration between tests."""
    yield
    structlog.reset_defaults()


@pytest_asyncio.fixture
async def mock_clients() -> AsyncIterator[ClientFactory]:
    """Factory for MockTransport clients, all closed after the test."""
    created: list[httpx.AsyncClient] = []

    def factory(handler: Callable[[httpx.Request], Any], **kwargs: Any) -> httpx.AsyncClient:
        client = mock_client(handler, **kwargs)
        created.append(client)
        return client

    yield factory

    for client in created:
        await client.aclose()
