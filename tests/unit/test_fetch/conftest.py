"""Fixtures for fetch unit tests."""

from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio

from tests.helpers.fetch import ServerStub


@pytest.fixture
def server() -> ServerStub:
    """Create a recording request handler."""
    return ServerStub()


@pytest_asyncio.fixture
async def client(server: ServerStub) -> AsyncIterator[httpx.AsyncClient]:
    """Create an httpx client that routes every request to the stub."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(server)) as c:
        yield c
