"""
Key-value storage service with an in-memory cache.

This is the single source of durable truth for the application. Every
repository and state-machine function receives a StorageService instance
instead of reaching for a module-level cache.

Architecture:
- initialize() hydrates the cache once from a durable backend
- Reads are synchronous cache lookups
- Writes update the cache first, then flush to the backend
- Flush failures are logged and swallowed unless strict writes are enabled
- Optional single background worker for fire-and-forget flushes
"""
import json
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any, Dict, List, Optional

from flask import Flask, current_app

from app.exceptions import PersistenceError, StorageNotInitializedError

logger = logging.getLogger(__name__)


# Storage keys (same names the mobile app uses on device)
STORAGE_KEYS = {
    'EVENTS': 'vendstats_events',
    'SALES': 'vendstats_sales',
    'QUICK_ITEMS': 'vendstats_quick_items',
    'SUBSCRIPTION': 'vendstats_subscription',
    'SETTINGS': 'vendstats_settings',
    'FIRST_EVENT_CREATED': 'vendstats_first_event_created',
    'ONBOARDING': 'hasSeenOnboarding',
    'HAS_REQUESTED_REVIEW': 'vendstats_has_requested_review',
    'REVIEW_REQUEST_DATE': 'vendstats_review_request_date',
    'COMPLETED_EVENTS_COUNT': 'vendstats_completed_events_for_review',
    'REVIEW_PROMPT_PENDING': 'vendstats_review_prompt_pending',
}


class StorageService:
    """
    Cached key-value store over a durable backend.

    Usage:
        storage = StorageService(SQLStorageBackend(get_session))
        storage.initialize()
        storage.set_json('vendstats_events', [])
        events = storage.get_json('vendstats_events')
    """

    def __init__(self, backend, async_writes: bool = False, strict_writes: bool = False):
        self.backend = backend
        self._cache: Dict[str, str] = {}
        self._initialized = False
        # Strict mode needs the caller to wait for the write
        self._strict = strict_writes and not async_writes
        self._executor: Optional[ThreadPoolExecutor] = None
        self._pending: List[Any] = []
        self._pending_lock = threading.Lock()

        if async_writes:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='storage-flush')

    # -------------------------
    # Lifecycle
    # -------------------------
    def initialize(self) -> None:
        """Hydrate the cache from the backend. Must run before any read."""
        try:
            data = self.backend.load_all()
            self._cache = {key: value for key, value in data.items() if value is not None}
            logger.info(f"[STORAGE] ✓ Hydrated {len(self._cache)} keys")
        except Exception as e:
            logger.error(f"[STORAGE] ✗ Failed to initialize storage: {e}")
            self._cache = {}
        self._initialized = True

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def flush(self) -> None:
        """Wait for queued background writes to reach the backend."""
        with self._pending_lock:
            pending = list(self._pending)
            self._pending = []
        if pending:
            wait(pending)

    def close(self) -> None:
        """Drain pending writes and stop the background worker."""
        self.flush()
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise StorageNotInitializedError()

    # -------------------------
    # Durable flush
    # -------------------------
    def _flush(self, description: str, fn, *args) -> None:
        if self._executor is not None:
            future = self._executor.submit(self._run_flush, description, fn, *args)
            with self._pending_lock:
                self._pending = [f for f in self._pending if not f.done()]
                self._pending.append(future)
            return
        self._run_flush(description, fn, *args)

    def _run_flush(self, description: str, fn, *args) -> None:
        try:
            fn(*args)
        except Exception as e:
            if self._strict:
                raise PersistenceError(f"Failed to {description}") from e
            logger.warning(f"[STORAGE] ✗ Failed to {description}: {e}")

    # -------------------------
    # String operations
    # -------------------------
    def get_string(self, key: str) -> Optional[str]:
        self._require_initialized()
        return self._cache.get(key)

    def set_string(self, key: str, value: str) -> None:
        self._cache[key] = value
        self._flush(f"write {key}", self.backend.write, key, value)

    # -------------------------
    # Number operations
    # -------------------------
    def get_number(self, key: str) -> Optional[float]:
        value = self.get_string(key)
        if value is None:
            return None
        try:
            return float(value)
        except ValueError:
            return None

    def set_number(self, key: str, value: float) -> None:
        self.set_string(key, str(value))

    # -------------------------
    # Boolean operations
    # -------------------------
    def get_boolean(self, key: str) -> Optional[bool]:
        value = self.get_string(key)
        if value == 'true':
            return True
        if value == 'false':
            return False
        return None

    def set_boolean(self, key: str, value: bool) -> None:
        self.set_string(key, 'true' if value else 'false')

    # -------------------------
    # JSON operations (objects and arrays)
    # -------------------------
    def get_json(self, key: str) -> Optional[Any]:
        value = self.get_string(key)
        if not value:
            return None
        try:
            return json.loads(value)
        except ValueError:
            logger.warning(f"[STORAGE] Corrupt JSON under {key}, ignoring")
            return None

    def set_json(self, key: str, value: Any) -> None:
        self.set_string(key, json.dumps(value))

    # -------------------------
    # Keys
    # -------------------------
    def delete(self, key: str) -> None:
        self._cache.pop(key, None)
        self._flush(f"delete {key}", self.backend.remove, key)

    def contains(self, key: str) -> bool:
        self._require_initialized()
        return key in self._cache

    def get_all_keys(self) -> List[str]:
        self._require_initialized()
        return list(self._cache.keys())

    def clear_all(self) -> None:
        self._cache = {}
        self._flush("clear storage", self.backend.clear)


def build_backend(app: Flask):
    """Create the durable backend selected by STORAGE_BACKEND."""
    from app.services.storage_backends import (
        SQLStorageBackend, RedisStorageBackend, MemoryStorageBackend
    )

    kind = app.config.get('STORAGE_BACKEND', 'sql')
    if kind == 'redis':
        return RedisStorageBackend.from_url(
            app.config.get('REDIS_URL', 'redis://localhost:6379/0'),
            prefix=app.config.get('STORAGE_KEY_PREFIX', 'vendstats')
        )
    if kind == 'memory':
        return MemoryStorageBackend()
    if kind != 'sql':
        logger.warning(f"[STORAGE] Unknown STORAGE_BACKEND '{kind}', using sql")

    from app.database import get_session
    return SQLStorageBackend(get_session)


def init_storage(app: Flask) -> StorageService:
    """Create, hydrate and register the storage service on the app."""
    storage = StorageService(
        build_backend(app),
        async_writes=app.config.get('STORAGE_ASYNC_WRITES', False),
        strict_writes=app.config.get('STORAGE_STRICT_WRITES', False)
    )
    storage.initialize()
    if not hasattr(app, 'extensions'):
        app.extensions = {}
    app.extensions['storage'] = storage
    return storage


def get_storage() -> StorageService:
    """Get the storage service of the current app."""
    storage = current_app.extensions.get('storage')
    if storage is None:
        raise RuntimeError("Storage not initialized.")
    return storage
