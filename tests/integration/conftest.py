"""Integration-test fixtures.

All integration tests run on the session event loop: the routers hold
process-wide services whose write locks must stay on a single loop.
"""

from typing import Any

import pytest_asyncio
from httpx import AsyncClient

from tests.integration.helpers import register


@pytest_asyncio.fixture(loop_scope="session")
async def alice(client: AsyncClient) -> tuple[dict[str, Any], str]:
    """A registered user and their token."""
    return await register(client, displayName="Alice A")
