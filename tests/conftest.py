"""
Pytest configuration and shared fixtures.
"""

from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from turn_dispatch.api.main import create_app
from turn_dispatch.config import Settings
from turn_dispatch.constants import TicketClass
from turn_dispatch.core.service import TurnService
from turn_dispatch.store.lifecycle import close_store, init_store
from turn_dispatch.store.repository import TicketStore
from turn_dispatch.store.snapshot import SnapshotStore
from turn_dispatch.types.ticket import TicketInput

TEST_VIP_CODE = "test-vip-code"
FIXED_NOW = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def snapshot_path(tmp_path: Path) -> Path:
    """Location of the snapshot file for a test."""
    return tmp_path / "queue.json"


@pytest.fixture
def snapshot_store(snapshot_path: Path) -> SnapshotStore:
    return SnapshotStore(snapshot_path)


@pytest.fixture
def store(snapshot_store: SnapshotStore) -> TicketStore:
    """A ticket store backed by an empty snapshot."""
    return TicketStore(snapshot_store)


@pytest.fixture
def frozen_clock() -> Callable[[], datetime]:
    """A clock that never advances."""
    return lambda: FIXED_NOW


@pytest.fixture
def service(store: TicketStore) -> TurnService:
    return TurnService(store, vip_access_code=TEST_VIP_CODE)


@pytest.fixture
def make_input() -> Callable[..., TicketInput]:
    """Factory for validated ticket inputs."""

    def _make(
        name: str = "Ana",
        age: int = 70,
        ticket_class: TicketClass = TicketClass.GENERAL,
    ) -> TicketInput:
        return TicketInput(name=name, age=age, ticket_class=ticket_class)

    return _make


@pytest.fixture
def test_settings(snapshot_path: Path) -> Settings:
    """Create test settings."""
    return Settings(
        snapshot_path=str(snapshot_path),
        vip_access_code=TEST_VIP_CODE,
        upcoming_limit=5,
        log_level="DEBUG",
        log_format="console",
    )


@pytest_asyncio.fixture
async def app(test_settings: Settings) -> AsyncGenerator[FastAPI]:
    """Create a FastAPI app for testing with an initialized store."""
    init_store(test_settings)

    app = create_app()
    yield app

    close_store()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create an async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def vip_code() -> str:
    return TEST_VIP_CODE


@pytest.fixture
def vip_headers(vip_code: str) -> dict[str, str]:
    return {"X-VIP-Code": vip_code}


@pytest.fixture
def sample_ticket_request() -> dict[str, Any]:
    """Create a sample general ticket request."""
    return {"name": "Luis", "age": 34, "type": "general"}
