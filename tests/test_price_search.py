import pytest

from dealcheck.analysis.finance import evaluate
from dealcheck.analysis.price_search import (
    GRANULARITY_THOUSAND,
    classify_price,
    find_max_purchase_price,
    meets_criteria,
)
from dealcheck.domain.errors import InvalidDealInput, SearchDivergent, SearchInfeasible
from dealcheck.domain.underwriting import PriceClass


def _passes(deal, price, min_roi=13, min_cf=0):
    return meets_criteria(evaluate(deal, price), min_roi, min_cf)


def _decrement_scan(deal, min_roi=13, min_cf=0, step=1000):
    """
    Reference: walk down from the sale price one step at a time.
    """
    price = deal.sale_price
    while not _passes(deal, price, min_roi, min_cf):
        price -= step
        if price <= 0:
            raise ValueError("no passing price")
    return price


def _assert_capped_boundary(deal, price, min_roi=13, min_cf=0, step=1):
    assert price <= deal.sale_price
    assert _passes(deal, price, min_roi, min_cf)
    if price + step <= deal.sale_price:
        assert not _passes(deal, price + step, min_roi, min_cf)


def test_scenario_max_price_is_capped_at_sale_price(scenario_deal):
    price = find_max_purchase_price(scenario_deal)

    # the deal still clears 13% / $0 at the asking price
    assert price <= 375000
    assert price == 375000
    assert _passes(scenario_deal, price)


def test_scenario_uncapped_search_goes_above_sale_price(scenario_deal):
    price = find_max_purchase_price(scenario_deal, cap_at_sale_price=False)

    assert price == 383_558
    assert _passes(scenario_deal, price)
    assert not _passes(scenario_deal, price + 1)


def test_overpriced_deal_boundary(overpriced_deal):
    price = find_max_purchase_price(overpriced_deal)

    assert price == 321_792
    _assert_capped_boundary(overpriced_deal, price)


@pytest.mark.parametrize("step", [1, GRANULARITY_THOUSAND])
def test_matches_decrement_scan_on_non_round_sale_price(overpriced_deal, step):
    price = find_max_purchase_price(overpriced_deal, granularity=step)

    assert price == _decrement_scan(overpriced_deal, step=step)
    assert (overpriced_deal.sale_price - price) % step == 0


def test_thousand_steps_count_down_from_sale_price(overpriced_deal):
    price = find_max_purchase_price(overpriced_deal, granularity=GRANULARITY_THOUSAND)

    assert price == 321_500
    _assert_capped_boundary(overpriced_deal, price, step=1000)


@pytest.mark.parametrize(
    "min_roi,min_cf",
    [
        (13, 0),
        (13, 500),
        (13, 3000),
        (30.5, 0),      # ROI is the binding threshold here
        (13, 1500.5),   # fractional cashflow threshold: no early exit
        (0, 0),
    ],
)
def test_boundary_property(scenario_deal, min_roi, min_cf):
    price = find_max_purchase_price(scenario_deal, min_roi, min_cf)

    assert classify_price(scenario_deal, price, min_roi, min_cf) is not PriceClass.BAD
    if price < scenario_deal.sale_price:
        assert classify_price(scenario_deal, price + 1, min_roi, min_cf) is PriceClass.BAD


@pytest.mark.parametrize(
    "min_roi,min_cf",
    [(13, 0), (13, -2500), (29.5, 0), (13, 100.5)],
)
def test_uncapped_boundary_property(scenario_deal, min_roi, min_cf):
    price = find_max_purchase_price(scenario_deal, min_roi, min_cf, cap_at_sale_price=False)

    assert classify_price(scenario_deal, price, min_roi, min_cf) is not PriceClass.BAD
    assert classify_price(scenario_deal, price + 1, min_roi, min_cf) is PriceClass.BAD


@pytest.mark.parametrize("overrides", [
    dict(downpayment_percentage=10),
    dict(annual_mortgage_interest_rate=0),
    dict(monthly_hoa_dues=400, expected_vacancy_weeks=6),
    dict(sale_price=150_000, monthly_rent=1400, mortgage_amortization_years=30),
    dict(sale_price=412_345, monthly_rent=2100),
])
def test_boundary_property_other_deals(make_deal, overrides):
    deal = make_deal(**overrides)
    _assert_capped_boundary(deal, find_max_purchase_price(deal))

    uncapped = find_max_purchase_price(deal, cap_at_sale_price=False)
    assert _passes(deal, uncapped)
    assert not _passes(deal, uncapped + 1)


def test_stricter_thresholds_lower_the_price(scenario_deal):
    loose = find_max_purchase_price(scenario_deal, 13, 0)
    strict = find_max_purchase_price(scenario_deal, 13, 3000)
    assert strict < loose


def test_classify_price_levels(scenario_deal):
    price = find_max_purchase_price(scenario_deal, 13, 0, cap_at_sale_price=False)

    # cashflow at the cap is in [0, 1): floor lands on the integral threshold
    assert classify_price(scenario_deal, price, 13, 0) is PriceClass.MAX
    assert classify_price(scenario_deal, price - 500, 13, 0) is PriceClass.GOOD
    assert classify_price(scenario_deal, price + 500, 13, 0) is PriceClass.BAD


def test_fractional_threshold_never_classifies_as_max(overpriced_deal):
    price = find_max_purchase_price(overpriced_deal, 13, 0.5)
    assert classify_price(overpriced_deal, price, 13, 0.5) is PriceClass.GOOD


def test_infeasible_when_smallest_price_fails(scenario_deal):
    # rent can never produce a million a year of cashflow
    with pytest.raises(SearchInfeasible) as exc_info:
        find_max_purchase_price(scenario_deal, 13, 1_000_000)
    assert exc_info.value.price == 1

    with pytest.raises(SearchInfeasible):
        find_max_purchase_price(scenario_deal, 13, 1_000_000, cap_at_sale_price=False)


def test_infeasible_at_thousand_steps(scenario_deal):
    with pytest.raises(SearchInfeasible) as exc_info:
        find_max_purchase_price(scenario_deal, 13, 1_000_000, granularity=GRANULARITY_THOUSAND)
    # deepest $1000 discount that leaves a positive price
    assert exc_info.value.price == 1000


def test_divergent_when_every_price_passes(scenario_deal):
    with pytest.raises(SearchDivergent) as exc_info:
        find_max_purchase_price(scenario_deal, -1000, -1e15, ceiling_multiple=10, cap_at_sale_price=False)
    assert exc_info.value.ceiling == pytest.approx(3_750_000)
    assert exc_info.value.last_price <= 3_750_000


@pytest.mark.parametrize("granularity", [0, -1000, 2.5])
def test_bad_granularity_rejected(scenario_deal, granularity):
    with pytest.raises(InvalidDealInput):
        find_max_purchase_price(scenario_deal, granularity=granularity)
