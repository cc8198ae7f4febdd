"""Pick the storage backend once, at startup."""

import logging

from backend.app.core.exceptions import InitializationError
from backend.app.core.settings import Settings, get_settings
from backend.app.storage.base import StorageBackend
from backend.app.storage.fallback import FallbackBackend
from backend.app.storage.kv_store import JsonFileStore, MemoryStore
from backend.app.storage.relational import RelationalBackend

logger = logging.getLogger(__name__)

STORAGE_MODES = ("auto", "relational", "fallback")


def build_fallback_backend(settings: Settings) -> FallbackBackend:
    if settings.fallback_store_path == ":memory:":
        store = MemoryStore()
    else:
        store = JsonFileStore(settings.fallback_store_path)
    return FallbackBackend(store, key=settings.store_key, seed=settings.seed_fallback)


def select_backend(settings: Settings | None = None) -> StorageBackend:
    """
    Return an initialized backend.

    ``fallback`` goes straight to the key-value store. ``auto`` tries the
    relational database first and falls back on any initialization failure.
    ``relational`` lets that failure propagate.
    """
    settings = settings or get_settings()
    mode = settings.storage_backend
    if mode not in STORAGE_MODES:
        raise ValueError(f"Unknown storage backend {mode!r}; expected one of {', '.join(STORAGE_MODES)}")

    if mode != "fallback":
        relational = RelationalBackend(settings.database_url)
        try:
            relational.initialize()
            return relational
        except InitializationError:
            if mode == "relational":
                raise
            logger.exception("Error initializing database, falling back to key-value storage")

    logger.info("Using key-value fallback storage at %s", settings.fallback_store_path)
    fallback = build_fallback_backend(settings)
    fallback.initialize()
    return fallback
