"""
Durable backends for the storage service.

Each backend persists raw string values by key and exposes the same four
operations: load_all, write, remove and clear. Backends raise on failure;
the storage service decides whether failures are swallowed or surfaced.
"""

import logging
from typing import Dict, Optional

import redis

from app.models import StorageEntry

logger = logging.getLogger(__name__)


class SQLStorageBackend:
    """Key-value rows in the kv_entry table (SQLite or Postgres)."""

    def __init__(self, session_factory):
        self._session_factory = session_factory

    def load_all(self) -> Dict[str, str]:
        session = self._session_factory()
        rows = session.query(StorageEntry).all()
        return {row.key: row.value for row in rows}

    def write(self, key: str, value: str) -> None:
        session = self._session_factory()
        try:
            entry = session.get(StorageEntry, key)
            if entry is None:
                session.add(StorageEntry(key=key, value=value))
            else:
                entry.value = value
            session.commit()
        except Exception:
            session.rollback()
            raise

    def remove(self, key: str) -> None:
        session = self._session_factory()
        try:
            session.query(StorageEntry).filter_by(key=key).delete()
            session.commit()
        except Exception:
            session.rollback()
            raise

    def clear(self) -> None:
        session = self._session_factory()
        try:
            session.query(StorageEntry).delete()
            session.commit()
        except Exception:
            session.rollback()
            raise


class RedisStorageBackend:
    """
    Redis strings, one per storage key.

    Keys pattern: {prefix}:{key}
    """

    def __init__(self, client: redis.Redis, prefix: str = 'vendstats'):
        self.client = client
        self._prefix = prefix

    @classmethod
    def from_url(cls, redis_url: str, prefix: str = 'vendstats') -> 'RedisStorageBackend':
        """Build a backend with a redis-py client for the given URL."""
        client = redis.from_url(
            redis_url,
            decode_responses=True,
            socket_connect_timeout=3,
            socket_timeout=3,
            socket_keepalive=True,
            retry_on_timeout=True,
            health_check_interval=30
        )
        logger.info(f"[STORAGE] Redis backend configured: {redis_url}")
        return cls(client, prefix)

    def _build_key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    def _strip_prefix(self, full_key: str) -> str:
        return full_key[len(self._prefix) + 1:]

    def _scan_keys(self):
        cursor = 0
        while True:
            cursor, keys = self.client.scan(cursor, match=self._build_key('*'), count=100)
            for key in keys:
                yield key
            if cursor == 0:
                break

    def load_all(self) -> Dict[str, str]:
        keys = list(self._scan_keys())
        if not keys:
            return {}
        values = self.client.mget(keys)
        return {
            self._strip_prefix(key): value
            for key, value in zip(keys, values)
            if value is not None
        }

    def write(self, key: str, value: str) -> None:
        self.client.set(self._build_key(key), value)

    def remove(self, key: str) -> None:
        self.client.delete(self._build_key(key))

    def clear(self) -> None:
        keys = list(self._scan_keys())
        if not keys:
            return
        pipeline = self.client.pipeline()
        for key in keys:
            pipeline.delete(key)
        pipeline.execute()
        logger.info(f"[STORAGE] Cleared {len(keys)} redis keys")


class MemoryStorageBackend:
    """Process-local backend; nothing survives a restart."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def load_all(self) -> Dict[str, str]:
        return dict(self.data)

    def write(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)

    def clear(self) -> None:
        self.data.clear()
