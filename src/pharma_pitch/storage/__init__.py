"""Durable storage for the content store."""

from .backends import JsonDirectoryBackend, LocalStoreBackend, MemoryBackend, StorageBackend
from .debounce import DebouncedTask, LoopScheduler, Scheduler
from .persistence import LoadedState, PersistenceAdapter, create_persistence

__all__ = [
    "StorageBackend",
    "JsonDirectoryBackend",
    "LocalStoreBackend",
    "MemoryBackend",
    "DebouncedTask",
    "LoopScheduler",
    "Scheduler",
    "LoadedState",
    "PersistenceAdapter",
    "create_persistence",
]
