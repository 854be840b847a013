# verimed/infra/cache/redis_cache.py
import os
import json
import math
from typing import Any, Dict, Optional
import redis.asyncio as aioredis

from verimed.domain.ports import CachePort


DEFAULT_TTL = float(os.getenv("REGISTRY_CACHE_TTL_SECONDS", "86400"))  # 24h
KEY_PREFIX = os.getenv("REDIS_KEY_PREFIX", "verimed:")


class RedisCache(CachePort):
    """
    Backend Redis untuk CachePort (CACHE_BACKEND=redis).

    Nilai disimpan sebagai JSON; TTL ditegakkan oleh Redis sendiri (PX),
    jadi cleanup() tidak perlu menyapu apa-apa. Semua key diberi prefix
    supaya get_stats() hanya melihat key milik service ini.
    """
    def __init__(self, client: Optional[aioredis.Redis] = None, prefix: str = KEY_PREFIX):
        self.r = client or aioredis.from_url(
            os.getenv("REDIS_URL", "redis://localhost:6379/0"),
            encoding="utf-8",
            decode_responses=True,
        )
        self.prefix = prefix

    @classmethod
    def from_env(cls):
        url = os.getenv("REDIS_URL", "redis://localhost:6379/0")
        return cls(aioredis.from_url(url, encoding="utf-8", decode_responses=True))

    def _k(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def get(self, key: str):
        raw = await self.r.get(self._k(key))
        return json.loads(raw) if raw else None

    async def set(self, key: str, value: Any, ttl: float = DEFAULT_TTL):
        # PX butuh integer > 0
        px = max(1, int(math.ceil(float(ttl) * 1000)))
        await self.r.set(self._k(key), json.dumps(value, ensure_ascii=False, default=str), px=px)

    async def delete(self, key: str) -> bool:
        return bool(await self.r.delete(self._k(key)))

    async def cleanup(self) -> int:
        return 0

    async def get_stats(self) -> Dict[str, Any]:
        keys = [k[len(self.prefix):] async for k in self.r.scan_iter(match=f"{self.prefix}*")]
        return {"size": len(keys), "keys": keys}

    async def ping(self) -> bool:
        return bool(await self.r.ping())
