"""
Storage Module - Key-value backends for durable cart state

Provides:
- MemoryStore for tests and single-process use
- FileStore for local durable storage (one file per key)
- Upstash Redis client for hosted deployments

Backend is selected with CART_STORAGE_BACKEND (memory | file | redis).
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional, Protocol

from upstash_redis import Redis

from storefront.logging import get_logger

logger = get_logger(__name__)


CART_STORAGE_BACKEND = os.environ.get("CART_STORAGE_BACKEND", "memory")
CART_STORAGE_DIR = os.environ.get("CART_STORAGE_DIR", ".storefront")

# Upstash Redis - standard env var names per docs
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")


class KeyValueStore(Protocol):
    """Minimal string key-value interface used by the persistence adapter."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStore:
    """Process-local store backed by a dict."""

    def __init__(self, data: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class FileStore:
    """
    One file per key inside `directory`.

    Writes go to a temp file in the same directory and are moved into place,
    so a crash mid-write leaves the previous record intact.
    """

    _UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{self._UNSAFE_CHARS.sub('_', key)}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp_name, self._path(key))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class RedisStore:
    """Upstash Redis backend. Keys are written without TTL (carts never expire silently)."""

    def __init__(self, client: Redis):
        self.client = client

    def get(self, key: str) -> Optional[str]:
        return self.client.get(key)

    def set(self, key: str, value: str) -> None:
        self.client.set(key, value)

    def delete(self, key: str) -> None:
        self.client.delete(key)


# Singleton instances
_sync_redis_client: Optional[Redis] = None


def get_redis_sync() -> Redis:
    """
    Get sync Upstash Redis client (singleton).

    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _sync_redis_client

    if _sync_redis_client is None:
        if not UPSTASH_REDIS_REST_URL or not UPSTASH_REDIS_REST_TOKEN:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _sync_redis_client = Redis(url=UPSTASH_REDIS_REST_URL, token=UPSTASH_REDIS_REST_TOKEN)

    return _sync_redis_client


# Storage key names
class StorageKeys:
    """Keys owned by the cart persistence adapter."""

    CART = "shoppingCart"

    @staticmethod
    def cart_key(namespace: Optional[str] = None) -> str:
        if not namespace:
            return StorageKeys.CART
        return f"{StorageKeys.CART}:{namespace}"


def get_storage_backend(backend: Optional[str] = None) -> KeyValueStore:
    """
    Build the configured key-value backend.

    Args:
        backend: Override for CART_STORAGE_BACKEND

    Raises:
        ValueError: Unknown backend name, or Redis selected without credentials
    """
    name = (backend or CART_STORAGE_BACKEND).lower()
    logger.info(f"Using {name} cart storage")
    if name == "memory":
        return MemoryStore()
    if name == "file":
        return FileStore(CART_STORAGE_DIR)
    if name == "redis":
        return RedisStore(get_redis_sync())
    raise ValueError(f"Unknown cart storage backend: {name}")
