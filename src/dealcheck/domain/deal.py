from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from dealcheck.domain.errors import InvalidDealInput


class DealInput(BaseModel):
    """
    Figures describing one rental deal, as the seller/listing presents it.

    Percentages are in percent units: 20 means 20% down, 5.15 means 5.15% APR.
    The purchase price being evaluated is NOT part of the deal; it is passed
    to the evaluator explicitly.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    sale_price: float = Field(..., gt=0, description="Listed / asking price")
    downpayment_percentage: float = Field(..., ge=0, le=100, description="20 means 20% down")
    annual_mortgage_interest_rate: float = Field(..., ge=0, description="5.15 means 5.15% APR")
    mortgage_amortization_years: int = Field(..., gt=0, description="Amortization period in years")
    monthly_hoa_dues: float = Field(0.0, ge=0)
    expected_vacancy_weeks: float = Field(0.0, ge=0, le=52, description="Weeks per year without a tenant")
    monthly_rent: float = Field(..., gt=0)

    @field_validator("mortgage_amortization_years", mode="before")
    @classmethod
    def _whole_years(cls, v: Any) -> Any:
        # 25.0 is fine, 25.5 is not
        if isinstance(v, float):
            if not v.is_integer():
                raise ValueError("mortgage_amortization_years must be a whole number of years")
            return int(v)
        return v

    @classmethod
    def create(cls, **figures: Any) -> "DealInput":
        """
        Build a DealInput, re-raising pydantic validation failures as
        InvalidDealInput so callers only deal with one error family.
        """
        try:
            return cls(**figures)
        except ValidationError as err:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in e['loc']) or 'deal'}: {e['msg']}"
                for e in err.errors()
            )
            raise InvalidDealInput(f"Invalid deal input: {problems}") from err
