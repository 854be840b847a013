# verimed/application/search_use_case.py
from __future__ import annotations

import logging
import time
from typing import List

from verimed.domain.errors import InvalidInputError, RegistryLookupError
from verimed.domain.models import SearchResult, Suggestion
from verimed.domain.normalize import sanitize_input
from verimed.services.registry_service import RegistryService

MAX_QUERY_LEN = 100
MAX_SUGGESTIONS = 5

SUGGESTIONS = [
    Suggestion(text="Paracetamol", type="medicine"),
    Suggestion(text="Amoxicillin", type="medicine"),
    Suggestion(text="Ibuprofen", type="medicine"),
    Suggestion(text="Vitamin C", type="supplement"),
]

logger = logging.getLogger("verimed.search")


class SearchProductsUseCase:
    def __init__(self, registry: RegistryService):
        self.registry = registry

    async def run(self, query: str | None) -> List[SearchResult]:
        raw = (query or "").strip()
        if not raw:
            raise InvalidInputError("Search query is required")
        if len(raw) > MAX_QUERY_LEN:
            raise InvalidInputError(f"Search query too long (max {MAX_QUERY_LEN} characters)")
        q = sanitize_input(raw)
        if not q:
            raise InvalidInputError("Search query is required")

        t0 = time.perf_counter()
        try:
            products = await self.registry.search(q)
        except RegistryLookupError:
            # pencarian bukan verifikasi: cukup kosong, jangan 500
            logger.exception("[search] registry search failed q=%s", q)
            return []

        stamp = int(time.time() * 1000)
        items = [
            SearchResult(
                id=f"search_{stamp}_{i}",
                title=p.title,
                reg_no=p.reg_no,
                manufacturer=p.manufacturer,
                category=p.category,
            )
            for i, p in enumerate(products)
        ]
        logger.info("[search] q=%s results=%d took_ms=%.1f", q, len(items), (time.perf_counter() - t0) * 1000)
        return items

    def suggestions(self, query: str | None) -> List[Suggestion]:
        q = (query or "").strip().lower()
        if len(q) < 2:
            return []
        return [s for s in SUGGESTIONS if q in s.text.lower()][:MAX_SUGGESTIONS]
