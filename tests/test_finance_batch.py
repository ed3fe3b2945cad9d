import numpy as np
import pytest

from dealcheck.analysis.finance import evaluate
from dealcheck.analysis.finance_batch import evaluate_prices, price_sensitivity_frame
from dealcheck.domain.errors import InvalidDealInput


@pytest.mark.parametrize("overrides", [
    dict(),
    dict(downpayment_percentage=5),
    dict(annual_mortgage_interest_rate=0),
    dict(monthly_hoa_dues=275, expected_vacancy_weeks=4),
])
def test_batch_matches_scalar_evaluate(make_deal, overrides):
    deal = make_deal(**overrides)
    prices = [120_000, 375_000, 383_558, 610_000]

    batch = evaluate_prices(deal, prices)

    for i, price in enumerate(prices):
        res = evaluate(deal, price)
        assert batch.monthly_mortgage_payment[i] == pytest.approx(res.monthly_mortgage_payment)
        assert batch.total_annual_expenses[i] == pytest.approx(res.total_annual_expenses)
        assert batch.annual_cashflow[i] == pytest.approx(res.annual_cashflow)
        assert batch.annual_principal_reduction[i] == pytest.approx(res.annual_principal_reduction)
        assert batch.total_annual_return[i] == pytest.approx(res.total_annual_return)
        assert batch.annual_roi[i] == pytest.approx(res.annual_roi)


def test_batch_rejects_non_positive_prices(scenario_deal):
    with pytest.raises(InvalidDealInput):
        evaluate_prices(scenario_deal, [100_000, 0])
    with pytest.raises(InvalidDealInput):
        evaluate_prices(scenario_deal, np.ones((2, 2)))


def test_sensitivity_frame_flags_rows(scenario_deal):
    df = price_sensitivity_frame(
        scenario_deal, 370_000, 390_000, 5_000, minimum_roi=13, minimum_cashflow=0
    )

    assert list(df["purchase_price"]) == [370_000, 375_000, 380_000, 385_000, 390_000]
    # uncapped max price is 383,558
    assert list(df["meets_criteria"]) == [True, True, True, False, False]
    assert df["annual_cashflow"].is_monotonic_decreasing


def test_sensitivity_frame_validates_range(scenario_deal):
    with pytest.raises(InvalidDealInput):
        price_sensitivity_frame(scenario_deal, 1, 10, 0, minimum_roi=13, minimum_cashflow=0)
    with pytest.raises(InvalidDealInput):
        price_sensitivity_frame(scenario_deal, 10, 1, 1, minimum_roi=13, minimum_cashflow=0)
