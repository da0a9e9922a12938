"""Cache stores for translated strings.

The pipeline consults the cache before any network activity and writes to it
after a successful engine-chain run. Stores are external collaborators: the
pipeline relies only on the CacheStore protocol and treats any store failure
as a miss.

Components:
    CacheStore - Protocol (get/put keyed by LocaleKey)
    MemoryCacheStore - Thread-safe in-process LRU store
    JsonFileCacheStore - Thread-safe store persisted to a JSON file

Thread Safety:
    Both stores protect their state with an RLock. Last write wins.

Python 3.13+.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections import OrderedDict
from pathlib import Path
from threading import RLock
from typing import Protocol

from dyntranslator.constants import DEFAULT_CACHE_SIZE
from dyntranslator.errors import CacheStoreError
from dyntranslator.keys import LocaleKey

__all__ = ["CacheStore", "JsonFileCacheStore", "MemoryCacheStore"]

logger = logging.getLogger(__name__)


class CacheStore(Protocol):
    """Protocol for persisted LocaleKey -> text mappings.

    No transactional guarantees are required beyond last-write-wins.
    Implementations may raise CacheStoreError or OSError; the pipeline treats
    read failures as misses and ignores write failures.
    """

    def get(self, key: LocaleKey) -> str | None:
        """Return the stored text, or None when absent."""
        ...

    def put(self, key: LocaleKey, text: str) -> None:
        """Store text under key, replacing any previous value."""
        ...


class MemoryCacheStore:
    """Thread-safe LRU cache of translated strings.

    Uses OrderedDict for LRU eviction and RLock for thread safety.
    Transparent to caller - returns None on cache miss.

    Attributes:
        maxsize: Maximum number of cache entries
        hits: Number of cache hits (for metrics)
        misses: Number of cache misses (for metrics)
    """

    __slots__ = ("_cache", "_hits", "_lock", "_maxsize", "_misses")

    def __init__(self, maxsize: int = DEFAULT_CACHE_SIZE) -> None:
        """Initialize memory store.

        Args:
            maxsize: Maximum number of entries (default: 1000)

        Raises:
            ValueError: If maxsize is not positive
        """
        if maxsize <= 0:
            msg = "maxsize must be positive"
            raise ValueError(msg)

        self._cache: OrderedDict[LocaleKey, str] = OrderedDict()
        self._maxsize = maxsize
        self._lock = RLock()
        self._hits = 0
        self._misses = 0

    def get(self, key: LocaleKey) -> str | None:
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
                self._hits += 1
                return self._cache[key]

            self._misses += 1
            return None

    def put(self, key: LocaleKey, text: str) -> None:
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
            elif len(self._cache) >= self._maxsize:
                evicted, _ = self._cache.popitem(last=False)
                logger.debug("Evicted cached translation %s", evicted)

            self._cache[key] = text

    def clear(self) -> None:
        """Clear all entries and reset metrics."""
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0

    def get_stats(self) -> dict[str, int | float]:
        """Get cache statistics.

        Returns:
            Dict with size, maxsize, hits, misses and hit_rate (percentage)
        """
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0.0

            return {
                "size": len(self._cache),
                "maxsize": self._maxsize,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(hit_rate, 2),
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    @property
    def maxsize(self) -> int:
        return self._maxsize

    @property
    def hits(self) -> int:
        with self._lock:
            return self._hits

    @property
    def misses(self) -> int:
        with self._lock:
            return self._misses


class JsonFileCacheStore:
    """Cache store persisted as a flat JSON object on disk.

    Entries are keyed by LocaleKey.storage_key ("1001.es.MX"). The file is
    read lazily on first access and rewritten atomically (temporary file plus
    rename) on every put, so translations survive process restarts.

    Example:
        >>> store = JsonFileCacheStore("~/.cache/myapp/translations.json")
        >>> store.put(LocaleKey.of(1001, "es"), "Hola")
        >>> JsonFileCacheStore("~/.cache/myapp/translations.json").get(LocaleKey.of(1001, "es"))
        'Hola'

    Attributes:
        path: Location of the JSON file
    """

    __slots__ = ("_entries", "_lock", "path")

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path).expanduser()
        self._entries: dict[str, str] | None = None
        self._lock = RLock()

    def _load(self) -> dict[str, str]:
        """Read the backing file once.

        Raises:
            CacheStoreError: If the file exists but cannot be read or parsed
        """
        if self._entries is not None:
            return self._entries

        if not self.path.exists():
            self._entries = {}
            return self._entries

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            msg = f"Cannot read translation cache {self.path}: {e}"
            raise CacheStoreError(msg, path=str(self.path)) from e

        if not isinstance(data, dict):
            msg = f"Translation cache {self.path} must contain a JSON object"
            raise CacheStoreError(msg, path=str(self.path))

        self._entries = {str(k): str(v) for k, v in data.items()}
        logger.debug("Loaded %d cached translations from %s", len(self._entries), self.path)
        return self._entries

    def _flush(self, entries: dict[str, str]) -> None:
        """Atomically rewrite the backing file.

        Raises:
            CacheStoreError: If the file cannot be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(entries, handle, ensure_ascii=False, indent=2, sort_keys=True)
            Path(tmp_name).replace(self.path)
        except OSError as e:
            msg = f"Cannot write translation cache {self.path}: {e}"
            raise CacheStoreError(msg, path=str(self.path)) from e

    def get(self, key: LocaleKey) -> str | None:
        with self._lock:
            return self._load().get(key.storage_key)

    def put(self, key: LocaleKey, text: str) -> None:
        with self._lock:
            entries = self._load()
            entries[key.storage_key] = text
            self._flush(entries)

    def clear(self) -> None:
        """Remove all entries and the backing file."""
        with self._lock:
            self._entries = {}
            self.path.unlink(missing_ok=True)

    def keys(self) -> tuple[LocaleKey, ...]:
        """Keys currently stored; malformed entries are skipped."""
        with self._lock:
            result = []
            for raw in self._load():
                try:
                    result.append(LocaleKey.from_storage_key(raw))
                except ValueError:
                    logger.warning("Skipping malformed cache key %r in %s", raw, self.path)
            return tuple(result)

    def __len__(self) -> int:
        with self._lock:
            return len(self._load())
