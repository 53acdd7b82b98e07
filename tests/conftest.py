"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import typing as typ

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from prthread.dispatcher import DispatcherDependencies, NotificationDispatcher
from prthread.github.threads import ThreadKeyResolver
from prthread.registry import InMemoryThreadRegistry, init_registry_storage
from tests.helpers.fakes import FakeChatDelivery, FakeSearchClient
from tests.helpers.github_events import SECRET

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest_asyncio.fixture
async def session_factory(
    tmp_path: Path,
) -> typ.AsyncIterator[async_sessionmaker[AsyncSession]]:
    """Yield a fresh async session factory backed by sqlite."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'prthread.db'}")
    try:
        await init_registry_storage(engine)
        yield async_sessionmaker(engine, expire_on_commit=False)
    finally:
        await engine.dispose()


@pytest.fixture
def registry() -> InMemoryThreadRegistry:
    """Return an empty in-memory thread registry."""
    return InMemoryThreadRegistry()


@pytest.fixture
def delivery() -> FakeChatDelivery:
    """Return a recording chat delivery."""
    return FakeChatDelivery()


@pytest.fixture
def search_client() -> FakeSearchClient:
    """Return a search client with no results."""
    return FakeSearchClient()


@pytest.fixture
def dispatcher(
    registry: InMemoryThreadRegistry,
    delivery: FakeChatDelivery,
    search_client: FakeSearchClient,
) -> NotificationDispatcher:
    """Return a dispatcher wired to the fakes above."""
    return NotificationDispatcher(
        DispatcherDependencies(
            registry=registry,
            delivery=delivery,
            resolver=ThreadKeyResolver(search_client),
        ),
        secret=SECRET,
    )
