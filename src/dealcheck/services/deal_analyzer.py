from __future__ import annotations

from typing import Any

from dealcheck.adapters.config import config
from dealcheck.adapters.logging_utils import get_logger
from dealcheck.analysis.finance import evaluate
from dealcheck.analysis.price_search import find_max_purchase_price, meets_criteria
from dealcheck.analysis.report import render_full_report
from dealcheck.domain.assumptions import DEFAULT_POLICY, EvaluatorPolicy
from dealcheck.domain.deal import DealInput
from dealcheck.services.validation import to_optional_float, validate_and_prepare_payload

logger = get_logger(__name__)


def analyze_deal(
    deal: DealInput,
    *,
    adjust: bool = True,
    minimum_roi: float | None = None,
    minimum_cashflow: float | None = None,
    granularity: int | None = None,
    cap_at_sale_price: bool | None = None,
    policy: EvaluatorPolicy = DEFAULT_POLICY,
) -> dict[str, Any]:
    """
    Evaluate a deal and package the result for callers (API, CLI, scripts).

    adjust=True  -> search for the max purchase price meeting the thresholds
                    and report metrics at that price.
    adjust=False -> "as-is": metrics at the sale price, no search.

    Thresholds, granularity and the sale-price cap fall back to config when not given.
    """
    min_roi = config.MIN_ROI if minimum_roi is None else minimum_roi
    min_cf = config.MIN_CASHFLOW if minimum_cashflow is None else minimum_cashflow
    step = config.PRICE_GRANULARITY if granularity is None else granularity
    capped = config.CAP_AT_SALE_PRICE if cap_at_sale_price is None else cap_at_sale_price

    if adjust:
        purchase_price: float = find_max_purchase_price(
            deal,
            min_roi,
            min_cf,
            granularity=step,
            policy=policy,
            ceiling_multiple=config.SEARCH_CEILING_MULTIPLE,
            cap_at_sale_price=capped,
        )
    else:
        purchase_price = deal.sale_price

    result = evaluate(deal, purchase_price, policy)
    passes = meets_criteria(result, min_roi, min_cf)

    logger.info(
        "deal analyzed",
        extra={
            "context": {
                "mode": "adjusted" if adjust else "as_is",
                "sale_price": deal.sale_price,
                "purchase_price": purchase_price,
                "annual_roi": result.annual_roi,
                "annual_cashflow": result.annual_cashflow,
                "meets_criteria": passes,
            }
        },
    )

    return {
        "mode": "adjusted" if adjust else "as_is",
        "sale_price": deal.sale_price,
        "purchase_price": purchase_price,
        "price_delta": purchase_price - deal.sale_price,
        "criteria": {
            "minimum_roi": min_roi,
            "minimum_cashflow": min_cf,
            "granularity": step if adjust else None,
            "cap_at_sale_price": capped if adjust else None,
        },
        "meets_criteria": passes,
        "metrics": result.as_dict(),
        "markdown": render_full_report(result, deal.sale_price),
    }


def analyze_payload(raw: dict[str, Any], *, policy: EvaluatorPolicy = DEFAULT_POLICY) -> dict[str, Any]:
    """
    Same as analyze_deal, starting from a loosely typed payload:
    deal figures plus optional adjust / minimum_roi / minimum_cashflow / granularity.
    """
    deal = validate_and_prepare_payload(raw)
    granularity = raw.get("granularity")
    return analyze_deal(
        deal,
        adjust=bool(raw.get("adjust", True)),
        minimum_roi=to_optional_float(raw.get("minimum_roi"), "minimum_roi"),
        minimum_cashflow=to_optional_float(raw.get("minimum_cashflow"), "minimum_cashflow"),
        granularity=None if granularity is None else int(granularity),
        cap_at_sale_price=raw.get("cap_at_sale_price"),
        policy=policy,
    )
