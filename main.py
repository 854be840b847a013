# main.py
from dotenv import load_dotenv
load_dotenv()

import asyncio
import logging
import os
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

# --- logging config HARUS di atas ---
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

from verimed.container import get_cache
from verimed.presentation.health import router as health_router
from verimed.presentation.routers import router as v1_router

# gunakan logger aplikasi sendiri, bukan 'uvicorn.access'
app_logger = logging.getLogger("verimed.request")

CACHE_CLEANUP_INTERVAL = float(os.getenv("CACHE_CLEANUP_INTERVAL_SECONDS", "0"))


async def _cleanup_loop(interval: float):
    cache = get_cache()
    while True:
        await asyncio.sleep(interval)
        try:
            n = await cache.cleanup()
            if n:
                app_logger.info("cache cleanup evicted %d stale entries", n)
        except Exception:
            app_logger.exception("cache cleanup failed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Sweep periodik opsional; correctness tidak bergantung padanya (get() sudah lazy-evict)
    task = asyncio.create_task(_cleanup_loop(CACHE_CLEANUP_INTERVAL)) if CACHE_CLEANUP_INTERVAL > 0 else None
    try:
        yield
    finally:
        if task is not None:
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task


app = FastAPI(
    title="Verimed",
    version=os.getenv("APP_VERSION", "0.1.0"),
    lifespan=lifespan,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    app_logger.info(f"➡️ Incoming {request.method} {request.url.path}")
    try:
        response = await call_next(request)
        app_logger.info(f"⬅️ Completed {request.method} {request.url.path} -> {response.status_code}")
        return response
    except Exception:
        app_logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}")
        raise

# ─────────────────────────────────────────────────────────────
# CORS (atur via env: CORS_ALLOW_ORIGINS="https://foo.com,https://bar.com")
# ─────────────────────────────────────────────────────────────
raw_origins = os.getenv("CORS_ALLOW_ORIGINS", "*")
allow_origins = [o.strip().rstrip("/") for o in raw_origins.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials="*" not in allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ─────────────────────────────────────────────────────────────
# Routes
# ─────────────────────────────────────────────────────────────
app.include_router(health_router, tags=["health"])
app.include_router(v1_router, tags=["api"])


@app.get("/")
async def root():
    return {
        "name": "Verimed",
        "version": os.getenv("APP_VERSION", "0.1.0"),
        "ok": True,
    }


@app.options("/{rest_of_path:path}")
async def any_options(rest_of_path: str):
    return Response(status_code=204)
