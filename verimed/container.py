# verimed/container.py
"""
Composition root. Satu instance per proses untuk cache & registry diatur di
sini lewat lru_cache; kelas-kelasnya sendiri bukan singleton, jadi test
bebas membuat instance baru.
"""
import logging
import os
from functools import lru_cache

from verimed.domain.ports import CachePort, RegistryLookupPort
from verimed.infra.cache.memory_cache import MemoryCache
from verimed.infra.regex.regno_config import default_regno_extractor
from verimed.infra.registry.memory_registry import InMemoryRegistry
from verimed.services.registry_service import RegistryService

from verimed.application.search_use_case import SearchProductsUseCase
from verimed.application.verify_use_case import VerifyProductUseCase

log = logging.getLogger("verimed.container")


@lru_cache
def _cache() -> CachePort:
    backend = os.getenv("CACHE_BACKEND", "memory").lower()
    if backend == "redis":
        from verimed.infra.cache.redis_cache import RedisCache
        log.info("cache backend: redis")
        return RedisCache.from_env()
    log.info("cache backend: memory")
    return MemoryCache()


@lru_cache
def _registry_lookup() -> RegistryLookupPort:
    if os.getenv("REGISTRY_API_URL"):
        from verimed.infra.registry.http_registry import HttpRegistryAdapter
        log.info("registry: http %s", os.getenv("REGISTRY_API_URL"))
        return HttpRegistryAdapter()
    log.info("registry: in-memory table")
    return InMemoryRegistry()


@lru_cache
def _registry_service() -> RegistryService:
    return RegistryService(lookup=_registry_lookup(), cache=_cache())


def get_cache() -> CachePort:
    return _cache()


def get_registry_service() -> RegistryService:
    return _registry_service()


def get_verify_uc() -> VerifyProductUseCase:
    return VerifyProductUseCase(_registry_service(), extractor=default_regno_extractor())


def get_search_uc() -> SearchProductsUseCase:
    return SearchProductsUseCase(_registry_service())
