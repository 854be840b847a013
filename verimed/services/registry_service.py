# verimed/services/registry_service.py
from __future__ import annotations

import asyncio
import logging
import os
import time
from typing import Any, Awaitable, Dict, List, Optional

from pydantic import ValidationError

from verimed.domain.errors import RegistryLookupError
from verimed.domain.models import RegistryProduct
from verimed.domain.normalize import build_search_link, format_registration_number, normalize_query
from verimed.domain.ports import CachePort, RegistryLookupPort

CACHE_TTL_SECONDS = float(os.getenv("REGISTRY_CACHE_TTL_SECONDS", str(24 * 60 * 60)))
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REGISTRY_TIMEOUT_SECONDS", "10"))

# namespace per jenis lookup; nilai yang sama dari jalur berbeda tidak bentrok
NS_SEARCH = "search"
NS_VERIFY_REG_NO = "verify"
NS_VERIFY_NAME = "verify_name"

logger = logging.getLogger("verimed.registry")


def cache_key(kind: str, value: str) -> str:
    return f"{kind}:{value}"


def _query_key(kind: str, value: str) -> str:
    # "Paracetamol" & "paracetamol  " -> satu entry; simbol-saja tetap pakai nilai mentah
    return cache_key(kind, normalize_query(value) or value)


class RegistryService:
    """
    Registry + cache. Setiap jalur lookup:
      1) cek cache (key ber-namespace)
      2) miss -> panggil registry, dibatasi timeout
      3) sukses -> simpan ke cache (TTL default 24 jam)
    Kegagalan registry (exception/timeout) -> RegistryLookupError, tidak di-cache.
    Hasil "tidak ditemukan" juga tidak di-cache, supaya produk yang baru
    terdaftar langsung terlihat.
    """

    def __init__(
        self,
        lookup: RegistryLookupPort,
        cache: CachePort,
        *,
        ttl: float = CACHE_TTL_SECONDS,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self.lookup = lookup
        self.cache = cache
        self.ttl = ttl
        self.timeout = timeout

    async def _call(self, kind: str, coro: Awaitable[Any]) -> Any:
        try:
            return await asyncio.wait_for(coro, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise RegistryLookupError(f"registry {kind} lookup timed out after {self.timeout}s", kind=kind) from e
        except Exception as e:  # registry eksternal boleh gagal dengan cara apa pun
            raise RegistryLookupError(f"registry {kind} lookup failed: {e}", kind=kind) from e

    async def _cached_product(self, key: str) -> Optional[RegistryProduct]:
        hit = await self.cache.get(key)
        if not isinstance(hit, dict):
            return None
        try:
            return RegistryProduct.model_validate(hit)
        except ValidationError:
            # entry rusak (mis. skema lama di Redis) -> buang
            await self.cache.delete(key)
            return None

    # ──────────────────────────────────────────────────────────────
    #  Lookups
    # ──────────────────────────────────────────────────────────────
    async def search(self, query: str) -> List[RegistryProduct]:
        key = _query_key(NS_SEARCH, query)
        hit = await self.cache.get(key)
        if isinstance(hit, list):
            try:
                cached = [RegistryProduct.model_validate(d) for d in hit]
                logger.debug("cache hit for search query=%s", query)
                return cached
            except ValidationError:
                await self.cache.delete(key)

        logger.info("searching registry query=%s", query)
        results = await self._call(NS_SEARCH, self.lookup.search_by_text(query))
        results = list(results or [])
        await self.cache.set(key, [p.model_dump() for p in results], ttl=self.ttl)
        logger.info("registry search completed query=%s results=%d", query, len(results))
        return results

    async def verify_by_reg_no(self, reg_no: str) -> Optional[RegistryProduct]:
        code = format_registration_number(reg_no)
        key = cache_key(NS_VERIFY_REG_NO, code)
        hit = await self._cached_product(key)
        if hit is not None:
            logger.debug("cache hit for reg_no=%s", code)
            return hit

        logger.info("verifying by reg_no=%s", code)
        product = await self._call(NS_VERIFY_REG_NO, self.lookup.lookup_by_registration_number(code))
        if product is not None:
            await self.cache.set(key, product.model_dump(), ttl=self.ttl)
        logger.info("reg_no verification completed reg_no=%s found=%s", code, product is not None)
        return product

    async def verify_by_name(self, name: str) -> Optional[RegistryProduct]:
        key = _query_key(NS_VERIFY_NAME, name)
        hit = await self._cached_product(key)
        if hit is not None:
            logger.debug("cache hit for name=%s", name)
            return hit

        logger.info("verifying by name=%s", name)
        product = await self._call(NS_VERIFY_NAME, self.lookup.lookup_by_name(name))
        if product is not None:
            await self.cache.set(key, product.model_dump(), ttl=self.ttl)
        logger.info("name verification completed name=%s found=%s", name, product is not None)
        return product

    async def health_check(self) -> Dict[str, Any]:
        t0 = time.perf_counter()
        try:
            ok = bool(build_search_link("test")) and await asyncio.wait_for(
                self.lookup.health_check(), timeout=self.timeout
            )
        except Exception:
            logger.exception("registry health check failed")
            ok = False
        return {
            "status": "healthy" if ok else "unhealthy",
            "response_time_ms": round((time.perf_counter() - t0) * 1000, 2),
        }
