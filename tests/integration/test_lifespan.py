import asyncio

import main
from verimed.infra.cache.memory_cache import MemoryCache


def test_cleanup_task_sweeps_and_is_awaited_on_shutdown(monkeypatch):
    t = {"now": 0.0}
    cache = MemoryCache(clock=lambda: t["now"])
    monkeypatch.setattr(main, "get_cache", lambda: cache)
    monkeypatch.setattr(main, "CACHE_CLEANUP_INTERVAL", 0.01)

    async def _run():
        await cache.set("verify:04-1234", {"title": "x"}, ttl=1)
        t["now"] = 5.0
        async with main.lifespan(main.app):
            for _ in range(100):
                if (await cache.get_stats())["size"] == 0:
                    break
                await asyncio.sleep(0.01)
        # tidak ada task sweep yang tertinggal setelah shutdown
        return [x for x in asyncio.all_tasks() if x is not asyncio.current_task()]

    leftover = asyncio.run(_run())
    assert leftover == []
    assert asyncio.run(cache.get_stats())["size"] == 0


def test_no_cleanup_task_when_interval_is_zero(monkeypatch):
    monkeypatch.setattr(main, "CACHE_CLEANUP_INTERVAL", 0)

    async def _run():
        async with main.lifespan(main.app):
            return [x for x in asyncio.all_tasks() if x is not asyncio.current_task()]

    assert asyncio.run(_run()) == []
