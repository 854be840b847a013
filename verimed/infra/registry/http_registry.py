# verimed/infra/registry/http_registry.py
from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import httpx

from verimed.domain.models import RegistryProduct
from verimed.domain.normalize import build_registration_link, format_registration_number
from verimed.domain.ports import RegistryLookupPort

BASE = os.getenv("REGISTRY_API_URL", "").rstrip("/")
UA = os.getenv("REGISTRY_USER_AGENT", "VerimedAPI/0.1 (+contact)")
TIMEOUT = float(os.getenv("REGISTRY_TIMEOUT_SECONDS", "10"))


def _to_product(d: Dict[str, Any]) -> Optional[RegistryProduct]:
    # map minimal supaya tidak pecah kalau schema API beda
    title = d.get("title") or d.get("name") or d.get("product_name")
    if not title:
        return None
    reg_no = d.get("reg_no") or d.get("regNo") or d.get("nafdac_no")
    return RegistryProduct(
        title=str(title),
        reg_no=str(reg_no) if reg_no else None,
        manufacturer=d.get("manufacturer") or d.get("applicant"),
        category=d.get("category"),
        status="registered",
        link=d.get("link") or (build_registration_link(str(reg_no)) if reg_no else None),
    )


def _items(body: Any) -> List[Dict[str, Any]]:
    if isinstance(body, list):
        return [x for x in body if isinstance(x, dict)]
    if isinstance(body, dict):
        for key in ("items", "results", "data"):
            if isinstance(body.get(key), list):
                return [x for x in body[key] if isinstance(x, dict)]
        if isinstance(body.get("result"), dict):
            return [body["result"]]
    return []


class HttpRegistryAdapter(RegistryLookupPort):
    """
    Registry lewat JSON API (REGISTRY_API_URL):
      GET {base}/products?search=<q>   -> list produk
      GET {base}/products?reg_no=<no>  -> produk / 404
      GET {base}/products?name=<nama>  -> produk / 404
    Error HTTP (selain 404) & network error dibiarkan naik; RegistryService
    yang mengubahnya jadi status "error".
    """

    def __init__(self, base_url: str = BASE, client: Optional[httpx.AsyncClient] = None,
                 timeout: float = TIMEOUT) -> None:
        if not base_url and client is None:
            raise ValueError("REGISTRY_API_URL is not configured")
        self.base_url = base_url.rstrip("/")
        self._client = client
        self.timeout = timeout

    def _new_client(self) -> httpx.AsyncClient:
        headers = {"User-Agent": UA, "Accept": "application/json"}
        return httpx.AsyncClient(base_url=self.base_url, headers=headers,
                                 timeout=self.timeout, follow_redirects=True)

    async def _get(self, params: Dict[str, str]) -> Any:
        if self._client is not None:
            r = await self._client.get("/products", params=params)
        else:
            async with self._new_client() as c:
                r = await c.get("/products", params=params)
        if r.status_code == 404:
            return None
        r.raise_for_status()
        return r.json()

    async def search_by_text(self, query: str) -> List[RegistryProduct]:
        body = await self._get({"search": query})
        out = [_to_product(d) for d in _items(body)]
        return [p for p in out if p is not None]

    async def _first(self, params: Dict[str, str]) -> Optional[RegistryProduct]:
        body = await self._get(params)
        for d in _items(body) or ([body] if isinstance(body, dict) else []):
            p = _to_product(d)
            if p is not None:
                return p
        return None

    async def lookup_by_registration_number(self, code: str) -> Optional[RegistryProduct]:
        return await self._first({"reg_no": format_registration_number(code)})

    async def lookup_by_name(self, name: str) -> Optional[RegistryProduct]:
        return await self._first({"name": name})

    async def health_check(self) -> bool:
        try:
            await self._get({"search": "paracetamol"})
            return True
        except (httpx.HTTPError, ValueError):
            return False
