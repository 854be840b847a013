# verimed/presentation/schemas.py
from __future__ import annotations
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from verimed.application.commands import VerifyProductCommand
from verimed.domain.models import ProductLookup


# ── VERIFY ───────────────────────────────────────────────────────
class VerifyRequest(VerifyProductCommand):
    """Minimal satu dari barcode / reg_no / name harus diisi."""


class VerifyResponse(BaseModel):
    product: ProductLookup


class BatchVerifyRequest(BaseModel):
    requests: List[VerifyRequest] = Field(..., description="Maksimal 10 item per batch")


class BatchItem(BaseModel):
    product: Optional[ProductLookup] = None
    error: Optional[str] = None


class BatchVerifyResponse(BaseModel):
    results: List[BatchItem]


# ── ERROR ────────────────────────────────────────────────────────
class ApiError(BaseModel):
    error: str
    message: str


# ── HEALTH ───────────────────────────────────────────────────────
class ServiceHealth(BaseModel):
    status: str
    response_time_ms: float


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    uptime: float
    version: str
    services: Dict[str, Any] = {}
