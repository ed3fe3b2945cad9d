import pytest
from pydantic import ValidationError

from dealcheck.domain.deal import DealInput
from dealcheck.domain.errors import InvalidDealInput
from dealcheck.services.validation import to_optional_float, validate_and_prepare_payload


def test_string_and_percent_inputs_are_normalized():
    deal = validate_and_prepare_payload(
        {
            "sale_price": "$375,000",
            "downpayment_percentage": "20%",
            "annual_mortgage_interest_rate": "5.15%",   # stays in percent units
            "mortgage_amortization_years": "25",
            "monthly_rent": "2950",
            "monthly_hoa_dues": "",
            "expected_vacancy_weeks": 3,
            "minimum_roi": 15,                         # not a deal figure, ignored
        }
    )
    assert deal.sale_price == 375000
    assert deal.downpayment_percentage == 20
    assert deal.annual_mortgage_interest_rate == pytest.approx(5.15)
    assert deal.mortgage_amortization_years == 25
    assert isinstance(deal.mortgage_amortization_years, int)
    assert deal.monthly_hoa_dues == 0.0
    assert deal.expected_vacancy_weeks == 3


def test_missing_required_field(scenario_figures):
    del scenario_figures["monthly_rent"]
    with pytest.raises(InvalidDealInput, match="Missing required field: monthly_rent"):
        validate_and_prepare_payload(scenario_figures)


def test_garbage_number(scenario_figures):
    scenario_figures["sale_price"] = "a lot"
    with pytest.raises(InvalidDealInput, match="sale_price"):
        validate_and_prepare_payload(scenario_figures)


@pytest.mark.parametrize(
    "field,value",
    [
        ("sale_price", 0),
        ("sale_price", -1),
        ("monthly_rent", 0),
        ("downpayment_percentage", -5),
        ("downpayment_percentage", 101),
        ("annual_mortgage_interest_rate", -0.5),
        ("mortgage_amortization_years", 0),
        ("mortgage_amortization_years", 25.5),
        ("monthly_hoa_dues", -10),
        ("expected_vacancy_weeks", 53),
    ],
)
def test_out_of_range_figures_rejected(scenario_figures, field, value):
    scenario_figures[field] = value
    with pytest.raises(InvalidDealInput, match=field):
        DealInput.create(**scenario_figures)


def test_deal_input_is_immutable(scenario_deal):
    with pytest.raises(ValidationError):
        scenario_deal.sale_price = 1


def test_invalid_input_is_a_value_error(scenario_figures):
    scenario_figures["monthly_rent"] = -1
    with pytest.raises(ValueError):
        DealInput.create(**scenario_figures)


def test_to_optional_float():
    assert to_optional_float(None, "x") is None
    assert to_optional_float("", "x") is None
    assert to_optional_float("13%", "x") == 13.0
    assert to_optional_float(-250, "x") == -250.0
