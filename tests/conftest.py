"""Pytest configuration and fixtures for dropwin.

The sync engine runs against a manual scheduler and an in-memory provider so
poll ticks and in-flight fetches can be driven step by step.
"""

from __future__ import annotations

from typing import Iterator

import pytest
from httpx import ASGITransport, AsyncClient

from dropwin.api.dependencies import Services, build_services
from dropwin.api.main import create_app
from dropwin.application import MailboxStore, SyncEngine
from dropwin.infrastructure import MemoryBlobStore, Settings
from tests.fakes import FakeProvider, FakeScheduler, sequence_generator


@pytest.fixture
def blobs() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def store(blobs: MemoryBlobStore) -> MailboxStore:
    return MailboxStore(
        blobs,
        generator=sequence_generator("quickbox1234@1secmail.com", "dropmail5555@kzccv.com", "tempuser7777@qiott.com"),
    )


@pytest.fixture
def engine(store: MailboxStore, provider: FakeProvider, scheduler: FakeScheduler) -> Iterator[SyncEngine]:
    engine = SyncEngine(store=store, provider=provider, scheduler=scheduler, interval=3.0)
    yield engine
    engine.close()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, storage_backend="memory")


@pytest.fixture
def services(settings: Settings, provider: FakeProvider, blobs: MemoryBlobStore, scheduler: FakeScheduler) -> Services:
    return build_services(settings, provider=provider, blobs=blobs, scheduler=scheduler)


@pytest.fixture
async def client(services: Services) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    app = create_app(services=services)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    services.engine.close()
