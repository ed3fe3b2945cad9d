from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Dict


class PriceClass(str, Enum):
    BAD = "bad"     # fails ROI or cashflow threshold
    GOOD = "good"   # meets both thresholds
    MAX = "max"     # meets both, cashflow sits exactly on an integral threshold


EXPENSE_FIELDS = (
    "annual_mortgage_payment",
    "annual_hoa_dues",
    "annual_capex",
    "annual_property_tax",
    "annual_property_insurance",
    "annual_vacancy_cost",
)


@dataclass(frozen=True)
class AnalysisResult:
    purchase_price: float

    # Financing
    loan_amount: float
    monthly_pmi: float               # private mortgage insurance, 0 at >= 20% down
    monthly_mortgage_payment: float  # amortized P&I + PMI

    # Annual expenses
    annual_mortgage_payment: float
    annual_hoa_dues: float
    annual_capex: float
    annual_property_tax: float
    annual_property_insurance: float
    annual_vacancy_cost: float
    total_annual_expenses: float

    # Income / return
    annual_rent: float
    annual_cashflow: float
    annual_principal_reduction: float
    annual_appreciation: float
    total_annual_return: float

    # Cash in
    down_payment: float
    closing_costs: float
    annual_roi: float                # percent, 13.0 means 13%

    def expenses(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in EXPENSE_FIELDS}

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)
