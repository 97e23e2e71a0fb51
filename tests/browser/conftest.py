"""Fixtures for scenarios that drive a real editor in Chrome."""

import os

import pytest
import pytest_asyncio

from blockdriver import DocumentLocations, EditorSession
from blockdriver.config import EDITOR_ROOT_ENV


@pytest.fixture(autouse=True)
def fast_timings():
    """Real pages need the configured waits, so keep them."""
    yield


@pytest.fixture(scope="session")
def documents() -> DocumentLocations:
    root = os.environ.get(EDITOR_ROOT_ENV)
    if not root:
        pytest.skip(f"{EDITOR_ROOT_ENV} is not set")
    return DocumentLocations.from_root(root)


@pytest_asyncio.fixture
async def editor(documents):
    async with EditorSession() as session:
        yield session
