from __future__ import annotations

import math
from typing import Callable

from dealcheck.adapters.logging_utils import get_logger
from dealcheck.analysis.finance import evaluate
from dealcheck.domain.assumptions import DEFAULT_POLICY, EvaluatorPolicy
from dealcheck.domain.deal import DealInput
from dealcheck.domain.errors import InvalidDealInput, SearchDivergent, SearchInfeasible
from dealcheck.domain.underwriting import AnalysisResult, PriceClass

logger = get_logger(__name__)

DEFAULT_MIN_ROI = 13.0
DEFAULT_MIN_CASHFLOW = 0.0
DEFAULT_CEILING_MULTIPLE = 1000.0

# Supported search resolutions. 1000 reproduces the old $1000-decrement scan.
GRANULARITY_DOLLAR = 1
GRANULARITY_THOUSAND = 1000


def meets_criteria(result: AnalysisResult, minimum_roi: float, minimum_cashflow: float) -> bool:
    return result.annual_roi >= minimum_roi and result.annual_cashflow >= minimum_cashflow


def classify_price(
    deal: DealInput,
    price: float,
    minimum_roi: float = DEFAULT_MIN_ROI,
    minimum_cashflow: float = DEFAULT_MIN_CASHFLOW,
    policy: EvaluatorPolicy = DEFAULT_POLICY,
) -> PriceClass:
    """
    BAD  -> fails ROI or cashflow threshold
    MAX  -> passes, and floor(cashflow) lands exactly on an integral cashflow threshold
    GOOD -> passes

    A fractional cashflow threshold never yields MAX.
    """
    result = evaluate(deal, price, policy)
    if not meets_criteria(result, minimum_roi, minimum_cashflow):
        return PriceClass.BAD
    if float(minimum_cashflow).is_integer() and math.floor(result.annual_cashflow) == minimum_cashflow:
        return PriceClass.MAX
    return PriceClass.GOOD


def find_max_purchase_price(
    deal: DealInput,
    minimum_roi: float = DEFAULT_MIN_ROI,
    minimum_cashflow: float = DEFAULT_MIN_CASHFLOW,
    *,
    granularity: int = GRANULARITY_DOLLAR,
    policy: EvaluatorPolicy = DEFAULT_POLICY,
    ceiling_multiple: float = DEFAULT_CEILING_MULTIPLE,
    cap_at_sale_price: bool = True,
) -> int:
    """
    Highest purchase price at which the deal still meets both thresholds.

    Cashflow and ROI only get worse as price goes up, so the passing prices
    form an interval [.., P*]. Both modes double a step count until they
    cross P*, then binary-search between the last two bounds.

    cap_at_sale_price=True (default): candidates are
        floor(sale_price) - k * granularity, k = 0, 1, 2, ...
    i.e. the prices a $granularity decrement scan from the sale price would
    visit, and the answer never exceeds the sale price.

    cap_at_sale_price=False: candidates are k * granularity counted up from
    one step, so the answer can sit above the sale price.

    Raises:
        SearchInfeasible: no positive candidate meets the criteria.
        SearchDivergent: (uncapped only) no failing price below
            sale_price * ceiling_multiple.
    """
    if granularity <= 0 or int(granularity) != granularity:
        raise InvalidDealInput(f"granularity must be a positive whole number, got {granularity!r}")
    granularity = int(granularity)

    checks = 0

    def _classify(price: int) -> PriceClass:
        nonlocal checks
        checks += 1
        price_class = classify_price(deal, price, minimum_roi, minimum_cashflow, policy)
        logger.debug("price checked", extra={"context": {"price": price, "class": price_class.value}})
        return price_class

    if cap_at_sale_price:
        price = _search_down_from_sale(deal, granularity, _classify, policy)
    else:
        price = _search_up_from_zero(deal, granularity, ceiling_multiple, _classify, policy)

    logger.info(
        "max purchase price found",
        extra={
            "context": {
                "sale_price": deal.sale_price,
                "max_purchase_price": price,
                "minimum_roi": minimum_roi,
                "minimum_cashflow": minimum_cashflow,
                "granularity": granularity,
                "capped": cap_at_sale_price,
                "checks": checks,
            }
        },
    )
    return price


def _infeasible(deal: DealInput, price: int, policy: EvaluatorPolicy) -> SearchInfeasible:
    res = evaluate(deal, price, policy)
    return SearchInfeasible(price, res.annual_roi, res.annual_cashflow)


def _search_down_from_sale(
    deal: DealInput,
    granularity: int,
    classify: Callable[[int], PriceClass],
    policy: EvaluatorPolicy,
) -> int:
    anchor = math.floor(deal.sale_price)
    if anchor < 1:
        raise InvalidDealInput(f"sale_price must be at least 1 to search, got {deal.sale_price!r}")

    def price_at(k: int) -> int:
        return anchor - k * granularity

    if classify(price_at(0)) is not PriceClass.BAD:
        return anchor

    # deepest discount that still leaves a positive price
    k_max = (anchor - 1) // granularity

    # --- 1. bound finding: double the discount until a price passes ---
    last_bad, k = 0, 1
    while True:
        if k >= k_max:
            k = k_max
            if k == last_bad or classify(price_at(k)) is PriceClass.BAD:
                raise _infeasible(deal, price_at(k_max), policy)
            break
        if classify(price_at(k)) is not PriceClass.BAD:
            break
        last_bad, k = k, k * 2

    # --- 2. smallest passing discount in (last_bad, k] ---
    lo, hi = last_bad + 1, k
    while lo < hi:
        mid = (lo + hi) // 2
        price_class = classify(price_at(mid))
        if price_class is PriceClass.BAD:
            lo = mid + 1
            continue
        hi = mid
        # MAX settles it only when one step up really fails
        if price_class is PriceClass.MAX and classify(price_at(mid - 1)) is PriceClass.BAD:
            break

    return price_at(hi)


def _search_up_from_zero(
    deal: DealInput,
    granularity: int,
    ceiling_multiple: float,
    classify: Callable[[int], PriceClass],
    policy: EvaluatorPolicy,
) -> int:
    ceiling = deal.sale_price * ceiling_multiple

    # --- 1. bound finding: double the price until it fails ---
    steps = 1
    if classify(granularity) is PriceClass.BAD:
        raise _infeasible(deal, granularity, policy)

    last_passing = steps
    while True:
        steps *= 2
        if steps * granularity > ceiling:
            raise SearchDivergent(ceiling, last_passing * granularity)
        if classify(steps * granularity) is PriceClass.BAD:
            break
        last_passing = steps

    # --- 2. binary search on (last_passing, steps) ---
    left, right = last_passing, steps - 1
    while left < right:
        # upper midpoint so `left = mid` always moves
        mid = (left + right + 1) // 2
        price_class = classify(mid * granularity)
        if price_class is PriceClass.BAD:
            right = mid - 1
            continue
        left = mid
        # with a $1 step several consecutive prices can share floor(cashflow)
        if price_class is PriceClass.MAX and classify((mid + 1) * granularity) is PriceClass.BAD:
            break

    return left * granularity
