"""Process-scoped bootstrap of the content store and its persistence."""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

from pharma_pitch.catalog.store import ContentStore
from pharma_pitch.config.logging import get_logger
from pharma_pitch.config.settings import Settings, get_settings
from pharma_pitch.storage.persistence import PersistenceAdapter, create_persistence

logger = get_logger(__name__)


@dataclass
class Workspace:
    """The single store for this run plus the adapter keeping it durable."""

    store: ContentStore
    persistence: PersistenceAdapter
    loaded_from: str | None = None


@asynccontextmanager
async def open_workspace(
    settings: Settings | None = None, persistence: PersistenceAdapter | None = None
) -> AsyncIterator[Workspace]:
    """Load stored collections, build the store, and persist every change.

    Pending saves are flushed on exit, including when the body raises.
    """
    persistence = persistence or create_persistence(settings or get_settings())
    state = await persistence.load()
    store = ContentStore(state.brands, state.doctors)
    persistence.attach(store)
    logger.debug("Workspace opened (source=%s)", state.source or "empty")
    try:
        yield Workspace(store=store, persistence=persistence, loaded_from=state.source)
    finally:
        await persistence.flush()
        persistence.detach()
