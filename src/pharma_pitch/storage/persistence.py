"""Debounced, dual-backend persistence for the content store.

Load path: backends are tried in order; the first one that yields anything for
either collection supplies both collections (whole-collection precedence, never
a record-by-record merge). Save path: each collection has its own debounce
timer; when it fires, the collection's current state is written to the primary
backend as a fire-and-forget task. Write failures are logged and leave the
in-memory state untouched.
"""

from __future__ import annotations

import asyncio
import functools
import json
from dataclasses import dataclass, field
from typing import Iterable, Sequence, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from pharma_pitch.catalog.models import Brand, Doctor
from pharma_pitch.catalog.store import Collection, ContentStore
from pharma_pitch.config.logging import get_logger
from pharma_pitch.config.settings import Settings
from pharma_pitch.constants import BRANDS_KEY, DOCTORS_KEY

from .backends import JsonDirectoryBackend, LocalStoreBackend, StorageBackend
from .debounce import DebouncedTask, Scheduler

logger = get_logger(__name__)

TModel = TypeVar("TModel", bound=BaseModel)

STORAGE_KEYS: dict[Collection, str] = {
    Collection.BRANDS: BRANDS_KEY,
    Collection.DOCTORS: DOCTORS_KEY,
}
_BRAND_LIST = TypeAdapter(list[Brand])
_DOCTOR_LIST = TypeAdapter(list[Doctor])


@dataclass
class LoadedState:
    """Collections read at startup and the backend that supplied them."""

    brands: list[Brand] = field(default_factory=list)
    doctors: list[Doctor] = field(default_factory=list)
    source: str | None = None


def serialize_brands(brands: Iterable[Brand]) -> str:
    return _BRAND_LIST.dump_json(list(brands), by_alias=True, exclude_none=True).decode()


def serialize_doctors(doctors: Iterable[Doctor]) -> str:
    return _DOCTOR_LIST.dump_json(list(doctors), by_alias=True, exclude_none=True).decode()


def parse_collection(raw: str | None, model: type[TModel], key: str) -> list[TModel] | None:
    """Parse a stored array defensively.

    Returns None when nothing usable is stored. Individual records that fail
    validation are skipped with a warning instead of discarding the collection.
    """
    if raw is None:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("Invalid JSON stored under %s: %s", key, e)
        return None
    if not isinstance(data, list):
        logger.warning("Expected an array under %s, got %s", key, type(data).__name__)
        return None
    items: list[TModel] = []
    for i, item in enumerate(data):
        try:
            items.append(model.model_validate(item))
        except PydanticValidationError as e:
            logger.warning("Skipping invalid record %d under %s: %s", i, key, e)
    return items


class PersistenceAdapter:
    """Bridges a ContentStore to durable storage without blocking mutation."""

    def __init__(
        self,
        primary: StorageBackend,
        fallbacks: Sequence[StorageBackend] = (),
        debounce_seconds: float = 1.0,
        scheduler: Scheduler | None = None,
    ):
        self.primary = primary
        self.fallbacks = tuple(fallbacks)
        self._store: ContentStore | None = None
        self._unsubscribe = None
        self._debouncers = {
            c: DebouncedTask(debounce_seconds, functools.partial(self._start_write, c), scheduler)
            for c in Collection
        }
        self._last_write: dict[str, asyncio.Task[None]] = {}
        self._in_flight: set[asyncio.Task[None]] = set()
        self.failed_writes = 0

    # -- load path -----------------------------------------------------------
    async def load(self) -> LoadedState:
        """Read both collections, primary first. Absence of data is not an error."""
        for backend in (self.primary, *self.fallbacks):
            brands = await self._read_collection(backend, BRANDS_KEY, Brand)
            doctors = await self._read_collection(backend, DOCTORS_KEY, Doctor)
            if brands is None and doctors is None:
                logger.debug("No stored data in %s backend", backend.name)
                continue
            logger.info(
                "Loaded %d brands and %d doctors from %s backend",
                len(brands or []),
                len(doctors or []),
                backend.name,
            )
            return LoadedState(brands=brands or [], doctors=doctors or [], source=backend.name)
        logger.info("No stored data found, starting empty")
        return LoadedState()

    async def _read_collection(
        self, backend: StorageBackend, key: str, model: type[TModel]
    ) -> list[TModel] | None:
        try:
            raw = await backend.read(key)
        except Exception as e:
            logger.warning("Failed to read %s from %s backend: %s", key, backend.name, e)
            return None
        return parse_collection(raw, model, key)

    # -- save path -----------------------------------------------------------
    def attach(self, store: ContentStore) -> None:
        """Start persisting every mutation of ``store``."""
        self.detach()
        self._store = store
        self._unsubscribe = store.subscribe(self.schedule_save)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    @property
    def pending(self) -> bool:
        """True while any collection has a scheduled, not yet started write."""
        return any(d.pending for d in self._debouncers.values())

    def schedule_save(self, collection: Collection) -> None:
        """(Re)start the debounce window for ``collection``."""
        self._debouncers[collection].schedule()

    def _serialize(self, collection: Collection) -> str:
        if self._store is None:
            raise RuntimeError("PersistenceAdapter is not attached to a store")
        if collection is Collection.BRANDS:
            return serialize_brands(self._store.brands)
        return serialize_doctors(self._store.doctors)

    def _start_write(self, collection: Collection) -> None:
        """Snapshot the collection now and write it in the background."""
        key = STORAGE_KEYS[collection]
        payload = self._serialize(collection)
        previous = self._last_write.get(key)
        task = asyncio.get_running_loop().create_task(self._write(key, payload, previous))
        self._last_write[key] = task
        self._in_flight.add(task)
        task.add_done_callback(functools.partial(self._write_done, key))

    def _write_done(self, key: str, task: asyncio.Task[None]) -> None:
        self._in_flight.discard(task)
        if self._last_write.get(key) is task:
            del self._last_write[key]

    async def _write(self, key: str, payload: str, previous: asyncio.Task[None] | None) -> None:
        # Writes to one key land in scheduling order.
        if previous is not None and not previous.done():
            await asyncio.gather(previous, return_exceptions=True)
        try:
            await self.primary.write(key, payload)
            logger.debug("Persisted %s to %s backend", key, self.primary.name)
        except Exception as e:
            self.failed_writes += 1
            logger.error("Failed to save %s to %s backend: %s", key, self.primary.name, e)

    async def wait_idle(self) -> None:
        """Wait for every in-flight write to finish."""
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    async def flush(self) -> None:
        """Start any pending writes immediately and wait for all writes to land."""
        for debouncer in self._debouncers.values():
            debouncer.fire_now()
        await self.wait_idle()

    async def clear(self) -> bool:
        """Drop pending saves and delete both collections from every backend.

        Returns False if any backend failed to clear (the failure is logged).
        """
        for debouncer in self._debouncers.values():
            debouncer.cancel()
        await self.wait_idle()
        ok = True
        for backend in (self.primary, *self.fallbacks):
            for key in STORAGE_KEYS.values():
                try:
                    await backend.delete(key)
                except Exception as e:
                    ok = False
                    logger.error("Failed to clear %s from %s backend: %s", key, backend.name, e)
        return ok


def create_persistence(
    settings: Settings, scheduler: Scheduler | None = None
) -> PersistenceAdapter:
    """Build the adapter for the configured data directory."""
    return PersistenceAdapter(
        primary=JsonDirectoryBackend(settings.primary_store_dir),
        fallbacks=[LocalStoreBackend(settings.fallback_store_path)],
        debounce_seconds=settings.save_debounce_seconds,
        scheduler=scheduler,
    )
