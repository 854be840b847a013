# verimed/presentation/security.py
"""
Guard opsional untuk /v1. Default mati (endpoint verifikasi publik); nyalakan
dengan REQUIRE_API_KEY=1 + SERVICE_API_KEYS="k1,k2" (lebih dari satu key
supaya rotasi bisa tanpa downtime). SERVICE_API_KEY tunggal masih dibaca.
"""
import hmac
import logging
import os
from typing import FrozenSet, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security.api_key import APIKeyHeader

log = logging.getLogger("verimed.auth")

API_KEY_HEADER = os.getenv("API_KEY_HEADER", "X-Api-Key")
_api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


def _parse_keys(raw: str) -> FrozenSet[str]:
    return frozenset(k.strip() for k in raw.split(",") if k.strip())


REQUIRE_API_KEY = os.getenv("REQUIRE_API_KEY", "0") == "1"
SERVICE_API_KEYS = _parse_keys(
    os.getenv("SERVICE_API_KEYS", "") or os.getenv("SERVICE_API_KEY", "")
)


def _key_matches(candidate: str, keys: FrozenSet[str]) -> bool:
    # bandingkan ke semua key, jangan short-circuit
    hits = [hmac.compare_digest(candidate.encode(), k.encode()) for k in keys]
    return any(hits)


async def require_api_key(request: Request, api_key: Optional[str] = Depends(_api_key_header)):
    if not REQUIRE_API_KEY:
        return
    if not SERVICE_API_KEYS:
        log.error("[auth] REQUIRE_API_KEY=1 tapi SERVICE_API_KEYS kosong; menolak %s", request.url.path)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Verification API is not accepting requests: no API keys configured",
        )
    if not api_key or not _key_matches(api_key, SERVICE_API_KEYS):
        log.warning("[auth] rejected %s %s: %s", request.method, request.url.path,
                    "missing key" if not api_key else "unknown key")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing or unknown {API_KEY_HEADER} header",
        )
