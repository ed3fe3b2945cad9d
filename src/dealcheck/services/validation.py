# src/dealcheck/services/validation.py

from __future__ import annotations

from typing import Any

from dealcheck.domain.deal import DealInput
from dealcheck.domain.errors import InvalidDealInput

# Fields a deal cannot be evaluated without
REQUIRED_DEAL_FIELDS = [
    "sale_price",
    "downpayment_percentage",
    "annual_mortgage_interest_rate",
    "mortgage_amortization_years",
    "monthly_rent",
]

OPTIONAL_DEAL_FIELDS = {
    "monthly_hoa_dues": 0.0,
    "expected_vacancy_weeks": 0.0,
}


def _to_num(val: Any, field_name: str) -> float:
    """
    Coerce values like:
      - 375000
      - "375000"
      - "$375,000"
      - "5.15"
      - "5.15%"
    into float. Percent fields stay in percent units ("5.15%" -> 5.15).
    """
    if val is None:
        raise InvalidDealInput(f"Missing required numeric field: {field_name}")
    if isinstance(val, bool):
        raise InvalidDealInput(f"Invalid type for {field_name}: bool")
    if isinstance(val, (int, float)):
        return float(val)
    if isinstance(val, str):
        s = val.strip().replace(",", "").replace("$", "")
        if s.endswith("%"):
            s = s[:-1].strip()
        try:
            return float(s)
        except ValueError:
            raise InvalidDealInput(f"Invalid number for {field_name}: {val!r}") from None
    raise InvalidDealInput(f"Invalid type for {field_name}: {type(val).__name__}")


def validate_and_prepare_payload(raw: dict[str, Any]) -> DealInput:
    """
    Normalize an incoming payload (API body, CLI options, CSV row) into a
    DealInput.

    Responsibilities:
      - Ensure every required deal field exists.
      - Coerce numeric / currency / percent strings.
      - Fill HOA dues and vacancy weeks with 0 when omitted.
      - Ignore keys that are not deal figures (thresholds etc. travel alongside).
    """
    for field in REQUIRED_DEAL_FIELDS:
        if raw.get(field) is None:
            raise InvalidDealInput(f"Missing required field: {field}")

    cleaned: dict[str, Any] = {}
    for field in REQUIRED_DEAL_FIELDS:
        cleaned[field] = _to_num(raw[field], field)

    for field, default in OPTIONAL_DEAL_FIELDS.items():
        val = raw.get(field)
        cleaned[field] = default if val is None or val == "" else _to_num(val, field)

    return DealInput.create(**cleaned)


def to_optional_float(val: Any, field_name: str) -> float | None:
    """
    Lenient converter for optional thresholds: None / "" -> None.
    """
    if val is None or val == "":
        return None
    return _to_num(val, field_name)
