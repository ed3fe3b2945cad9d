# src/dealcheck/api/http.py
from __future__ import annotations

from fastapi import FastAPI, HTTPException

from dealcheck.adapters.config import config
from dealcheck.adapters.logging_utils import get_logger
from dealcheck.analysis.price_search import find_max_purchase_price
from dealcheck.domain.errors import DealCheckError
from dealcheck.services.deal_analyzer import analyze_payload
from dealcheck.services.validation import to_optional_float, validate_and_prepare_payload
from .schemas import AnalyzeRequest, AnalyzeResponse, MaxPriceRequest, MaxPriceResponse

logger = get_logger(__name__)

app = FastAPI(title="dealcheck")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "env": config.ENV}


@app.post("/analyze", response_model=AnalyzeResponse)
def analyze_endpoint(payload: AnalyzeRequest) -> AnalyzeResponse:
    """
    Metrics for a deal, either at the max purchase price meeting the
    thresholds (adjust=true, default) or as-is at the sale price.
    """
    try:
        result = analyze_payload(payload.model_dump())
    except (DealCheckError, ValueError) as e:
        logger.info("analyze rejected", extra={"context": {"error": str(e)}})
        raise HTTPException(status_code=400, detail=str(e)) from e
    return AnalyzeResponse(**result)


@app.post("/max-price", response_model=MaxPriceResponse)
def max_price_endpoint(payload: MaxPriceRequest) -> MaxPriceResponse:
    raw = payload.model_dump()
    try:
        deal = validate_and_prepare_payload(raw)
        min_roi = to_optional_float(raw.get("minimum_roi"), "minimum_roi")
        min_cf = to_optional_float(raw.get("minimum_cashflow"), "minimum_cashflow")
        price = find_max_purchase_price(
            deal,
            config.MIN_ROI if min_roi is None else min_roi,
            config.MIN_CASHFLOW if min_cf is None else min_cf,
            granularity=config.PRICE_GRANULARITY if payload.granularity is None else payload.granularity,
            ceiling_multiple=config.SEARCH_CEILING_MULTIPLE,
            cap_at_sale_price=(
                config.CAP_AT_SALE_PRICE if payload.cap_at_sale_price is None else payload.cap_at_sale_price
            ),
        )
    except (DealCheckError, ValueError) as e:
        logger.info("max-price rejected", extra={"context": {"error": str(e)}})
        raise HTTPException(status_code=400, detail=str(e)) from e

    return MaxPriceResponse(
        sale_price=deal.sale_price,
        max_purchase_price=price,
        price_delta=price - deal.sale_price,
    )
