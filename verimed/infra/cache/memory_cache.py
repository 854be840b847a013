# verimed/infra/cache/memory_cache.py
from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from verimed.domain.ports import CachePort

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    value: T
    written_at: float
    ttl: float

    def is_valid(self, now: float) -> bool:
        return now - self.written_at <= self.ttl


class MemoryCache(CachePort):
    """
    In-memory key -> value dengan TTL per entry.

    - get() mengecek staleness saat dibaca (lazy eviction), entry basi dihapus
      dan dianggap tidak ada.
    - cleanup() menyapu semua entry basi; tidak dijadwalkan sendiri,
      dipanggil oleh scheduler luar (lihat lifespan di main.py).
    - Satu lock kasar untuk seluruh map. Critical section tidak pernah
      await, jadi aman dipakai dari banyak task asyncio maupun thread.

    Bukan singleton: satu instance per proses diatur oleh verimed.container.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, CacheEntry[Any]] = {}
        self._lock = threading.Lock()

    async def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not entry.is_valid(self._clock()):
                del self._entries[key]
                return None
            return entry.value

    async def set(self, key: str, value: Any, ttl: float = 43200) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(value=value, written_at=self._clock(), ttl=float(ttl))

    async def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    async def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    async def cleanup(self) -> int:
        with self._lock:
            now = self._clock()
            stale = [k for k, e in self._entries.items() if not e.is_valid(now)]
            for k in stale:
                del self._entries[k]
            return len(stale)

    async def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            return {"size": len(self._entries), "keys": list(self._entries)}
