# verimed/presentation/routers.py
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from verimed.application.search_use_case import SearchProductsUseCase
from verimed.application.verify_use_case import VerifyProductUseCase
from verimed.container import get_search_uc, get_verify_uc
from verimed.domain.errors import InvalidInputError
from verimed.domain.models import SearchResult, Suggestion
from verimed.presentation.schemas import (
    ApiError,
    BatchItem, BatchVerifyRequest, BatchVerifyResponse,
    VerifyRequest, VerifyResponse,
)
from verimed.presentation.security import require_api_key

logger = logging.getLogger(__name__)


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Bad Request", "message": message})


# Semua endpoint di bawah /v1 dan terlindungi API key (jika REQUIRE_API_KEY=1)
router = APIRouter(prefix="/v1", dependencies=[Depends(require_api_key)])

# ── VERIFY ───────────────────────────────────────────────────────
@router.post("/verify", response_model=VerifyResponse, responses={400: {"model": ApiError}})
async def verify_product(req: VerifyRequest, uc: VerifyProductUseCase = Depends(get_verify_uc)):
    try:
        product = await uc.execute(req)
    except InvalidInputError as e:
        return _bad_request(str(e))
    except Exception:
        logger.exception("[verify] request failed")
        raise HTTPException(status_code=500, detail="Failed to verify medicine")
    return VerifyResponse(product=product)


@router.post("/verify/batch", response_model=BatchVerifyResponse, responses={400: {"model": ApiError}})
async def verify_batch(req: BatchVerifyRequest, uc: VerifyProductUseCase = Depends(get_verify_uc)):
    try:
        outcomes = await uc.execute_batch(req.requests)
    except InvalidInputError as e:
        return _bad_request(str(e))
    except Exception:
        logger.exception("[verify/batch] request failed")
        raise HTTPException(status_code=500, detail="Failed to verify medicines")
    return BatchVerifyResponse(results=[BatchItem(product=o.result, error=o.error) for o in outcomes])


# ── SEARCH ───────────────────────────────────────────────────────
@router.get("/search", response_model=List[SearchResult], responses={400: {"model": ApiError}})
async def search_products(q: str | None = Query(None), uc: SearchProductsUseCase = Depends(get_search_uc)):
    try:
        return await uc.run(q)
    except InvalidInputError as e:
        return _bad_request(str(e))


@router.get("/search/suggestions", response_model=List[Suggestion])
async def search_suggestions(q: str | None = Query(None), uc: SearchProductsUseCase = Depends(get_search_uc)):
    return uc.suggestions(q)
