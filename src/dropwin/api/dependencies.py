"""Service wiring shared by the API routes."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request
from loguru import logger

from dropwin.application import InboxProvider, MailboxStore, SyncEngine
from dropwin.application.ports.blob_store import BlobStore
from dropwin.application.ports.scheduler import Scheduler
from dropwin.domain import MailboxAddress, fallback_address, generate_address
from dropwin.domain.errors import GenerationError
from dropwin.infrastructure import (
    AsyncioScheduler,
    OneSecMailProvider,
    Settings,
    create_blob_store,
)


@dataclass
class Services:
    """Process-scoped collaborators for one client instance."""

    settings: Settings
    blobs: BlobStore
    store: MailboxStore
    provider: InboxProvider
    engine: SyncEngine

    async def aclose(self) -> None:
        self.engine.close()
        aclose = getattr(self.provider, "aclose", None)
        if aclose is not None:
            await aclose()


def build_services(
    settings: Settings,
    provider: InboxProvider | None = None,
    blobs: BlobStore | None = None,
    scheduler: Scheduler | None = None,
) -> Services:
    """Assemble store, provider and engine from settings, honoring overrides."""
    domains = tuple(settings.mail_domains)

    def generator() -> MailboxAddress:
        try:
            return generate_address(domains)
        except GenerationError as e:
            logger.warning(f"Address generation failed, using default domain: {e}")
            return fallback_address()

    blobs = blobs if blobs is not None else create_blob_store(settings)
    provider = provider or OneSecMailProvider(
        base_url=settings.provider_base_url,
        timeout=settings.provider_timeout_seconds,
    )
    store = MailboxStore(blobs, generator=generator, key=settings.storage_key)
    engine = SyncEngine(
        store=store,
        provider=provider,
        scheduler=scheduler or AsyncioScheduler(),
        interval=settings.poll_interval_seconds,
    )
    return Services(settings=settings, blobs=blobs, store=store, provider=provider, engine=engine)


def get_services(request: Request) -> Services:
    return request.app.state.services
