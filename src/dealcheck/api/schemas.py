# src/dealcheck/api/schemas.py
from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel
from pydantic import ConfigDict

# Numbers may arrive as strings: "375000", "$375,000", "5.15%"
Number = float | str


# --------------------------------------------
# Analyze
# --------------------------------------------

class DealPayload(BaseModel):
    """
    Deal figures as the client sends them. Normalization and range checks
    happen in services.validation, so keep this permissive.
    """
    model_config = ConfigDict(extra="allow")

    sale_price: Number
    downpayment_percentage: Number
    annual_mortgage_interest_rate: Number
    mortgage_amortization_years: Number
    monthly_rent: Number
    monthly_hoa_dues: Number | None = None
    expected_vacancy_weeks: Number | None = None


class AnalyzeRequest(DealPayload):
    adjust: bool = True
    minimum_roi: Number | None = None
    minimum_cashflow: Number | None = None
    granularity: int | None = None
    cap_at_sale_price: bool | None = None


class AnalyzeResponse(BaseModel):
    """
    Mirrors services.deal_analyzer.analyze_deal output.
    """
    model_config = ConfigDict(extra="allow")

    mode: Literal["adjusted", "as_is"]
    sale_price: float
    purchase_price: float
    price_delta: float
    criteria: dict[str, Any]
    meets_criteria: bool
    metrics: dict[str, float]
    markdown: str


# --------------------------------------------
# Max price
# --------------------------------------------

class MaxPriceRequest(DealPayload):
    minimum_roi: Number | None = None
    minimum_cashflow: Number | None = None
    granularity: int | None = None
    cap_at_sale_price: bool | None = None


class MaxPriceResponse(BaseModel):
    sale_price: float
    max_purchase_price: int
    price_delta: float
