# verimed/presentation/health.py
from datetime import datetime, timezone
import os
import time

from fastapi import APIRouter, Depends

from verimed.container import get_cache, get_registry_service
from verimed.presentation.schemas import HealthResponse

router = APIRouter()

_STARTED = time.monotonic()


@router.get("/healthz")
async def healthz():
    # Liveness: proses hidup
    return {"ok": True}


@router.get("/readyz")
async def readyz(cache=Depends(get_cache), registry=Depends(get_registry_service)):
    checks = {}; ok = True
    # Cache (Redis punya ping, memory selalu siap)
    try:
        pong = await cache.ping() if hasattr(cache, "ping") else True
        checks["cache"] = bool(pong); ok = ok and bool(pong)
    except Exception as e:
        checks["cache"] = False; checks["cache_error"] = str(e); ok = False
    # Registry
    reg = await registry.health_check()
    checks["registry"] = reg["status"] == "healthy"
    ok = ok and checks["registry"]
    return {"ok": ok, **checks}


@router.get("/health", response_model=HealthResponse)
async def health(registry=Depends(get_registry_service)):
    reg = await registry.health_check()
    return HealthResponse(
        status="healthy" if reg["status"] == "healthy" else "degraded",
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime=round(time.monotonic() - _STARTED, 3),
        version=os.getenv("APP_VERSION", "0.1.0"),
        services={"registry": reg},
    )
