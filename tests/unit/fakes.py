import asyncio
from collections import Counter

from verimed.domain.ports import RegistryLookupPort
from verimed.infra.registry.memory_registry import InMemoryRegistry


class CountingRegistry(InMemoryRegistry):
    def __init__(self, **kw):
        super().__init__(latency_ms=0, **kw)
        self.calls = Counter()

    async def search_by_text(self, query):
        self.calls["search"] += 1
        return await super().search_by_text(query)

    async def lookup_by_registration_number(self, code):
        self.calls["reg_no"] += 1
        return await super().lookup_by_registration_number(code)

    async def lookup_by_name(self, name):
        self.calls["name"] += 1
        return await super().lookup_by_name(name)


class FailingRegistry(RegistryLookupPort):
    def __init__(self, exc=None):
        self.exc = exc or ConnectionError("registry unreachable")
        self.calls = 0

    async def search_by_text(self, query):
        self.calls += 1
        raise self.exc

    async def lookup_by_registration_number(self, code):
        self.calls += 1
        raise self.exc

    async def lookup_by_name(self, name):
        self.calls += 1
        raise self.exc

    async def health_check(self):
        raise self.exc


class SlowRegistry(InMemoryRegistry):
    def __init__(self, delay):
        super().__init__(latency_ms=0)
        self.delay = delay

    async def lookup_by_registration_number(self, code):
        await asyncio.sleep(self.delay)
        return await super().lookup_by_registration_number(code)
