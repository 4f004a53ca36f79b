import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    value: T
    inserted_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now - self.inserted_at >= self.ttl


class BoundedCache(Generic[T]):
    """
    In-memory key/value cache bounded by capacity and per-entry TTL.

    - At capacity, `set` evicts the oldest-inserted entry.
    - Expired entries are treated as misses and dropped on access;
      there is no background sweeper.
    - All operations hold a lock so concurrent requests can share one instance.
    """

    def __init__(
        self,
        *,
        max_size: int,
        default_ttl: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")

        self.max_size = max_size
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry[T]]" = OrderedDict()
        self._lock = threading.Lock()

    # ─────────────────────────────────────────────
    # Core operations
    # ─────────────────────────────────────────────

    def get(self, key: str) -> Optional[T]:
        """
        Get value from cache.
        Returns None if key does not exist or has expired.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: str, value: T, ttl: Optional[float] = None) -> None:
        """
        Set value in cache with TTL (seconds).
        Re-setting a key refreshes its insertion position.
        """
        entry = CacheEntry(
            value=value,
            inserted_at=self._clock(),
            ttl=self.default_ttl if ttl is None else ttl,
        )
        with self._lock:
            if key in self._entries:
                del self._entries[key]
            elif len(self._entries) >= self.max_size:
                self._entries.popitem(last=False)
            self._entries[key] = entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    # ─────────────────────────────────────────────
    # Introspection
    # ─────────────────────────────────────────────

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                "size": len(self._entries),
                "capacity": self.max_size,
            }
