# verimed/infra/registry/memory_registry.py
from __future__ import annotations

import asyncio
import os
from typing import Dict, List, Optional

from verimed.domain.models import RegistryProduct
from verimed.domain.normalize import build_registration_link, format_registration_number
from verimed.domain.ports import RegistryLookupPort

MOCK_LATENCY_MS = int(os.getenv("REGISTRY_MOCK_LATENCY_MS", "0"))


def _product(title: str, reg_no: str, manufacturer: str, category: str) -> RegistryProduct:
    return RegistryProduct(
        title=title,
        reg_no=reg_no,
        manufacturer=manufacturer,
        category=category,
        status="registered",
        link=build_registration_link(reg_no),
    )


DEFAULT_PRODUCTS: List[RegistryProduct] = [
    _product("Paracetamol 500mg Tablets", "04-1234", "May & Baker Nigeria Plc", "Analgesic"),
    _product("Amoxicillin 500mg Capsules", "04-5678", "GlaxoSmithKline Nigeria", "Antibiotic"),
    _product("Ibuprofen 400mg Tablets", "04-9012", "Pfizer Nigeria", "Anti-inflammatory"),
    _product("Vitamin C 500mg Tablets", "04-3456", "Emzor Pharmaceutical Industries", "Vitamin Supplement"),
]

# keyword nama -> reg_no (lookup by name cuma kenal bahan aktif utama)
DEFAULT_NAME_KEYWORDS: Dict[str, str] = {
    "paracetamol": "04-1234",
    "amoxicillin": "04-5678",
    "ibuprofen": "04-9012",
}


class InMemoryRegistry(RegistryLookupPort):
    """
    Registry tabel tetap untuk dev/demo. Diperlakukan persis seperti
    registry eksternal (async, boleh lambat), supaya integrasi asli bisa
    menggantikannya tanpa menyentuh use case.
    """

    def __init__(
        self,
        products: Optional[List[RegistryProduct]] = None,
        name_keywords: Optional[Dict[str, str]] = None,
        latency_ms: int = MOCK_LATENCY_MS,
    ) -> None:
        self.products = list(DEFAULT_PRODUCTS if products is None else products)
        self.name_keywords = dict(DEFAULT_NAME_KEYWORDS if name_keywords is None else name_keywords)
        self.latency_ms = latency_ms
        self._by_reg_no = {format_registration_number(p.reg_no): p for p in self.products if p.reg_no}

    async def _delay(self) -> None:
        if self.latency_ms > 0:
            await asyncio.sleep(self.latency_ms / 1000)

    async def search_by_text(self, query: str) -> List[RegistryProduct]:
        await self._delay()
        q = (query or "").lower()
        return [
            p for p in self.products
            if q in p.title.lower()
            or q in (p.reg_no or "").lower()
            or q in (p.manufacturer or "").lower()
        ]

    async def lookup_by_registration_number(self, code: str) -> Optional[RegistryProduct]:
        await self._delay()
        return self._by_reg_no.get(format_registration_number(code))

    async def lookup_by_name(self, name: str) -> Optional[RegistryProduct]:
        await self._delay()
        n = (name or "").lower()
        for keyword, reg_no in self.name_keywords.items():
            if keyword in n:
                return self._by_reg_no.get(format_registration_number(reg_no))
        return None
