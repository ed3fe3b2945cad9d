# src/dealcheck/analysis/finance_batch.py

from __future__ import annotations
from dataclasses import dataclass

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike

from dealcheck.domain.assumptions import DEFAULT_POLICY, EvaluatorPolicy
from dealcheck.domain.deal import DealInput
from dealcheck.domain.errors import InvalidDealInput


@dataclass
class BatchAnalysisResult:
    purchase_price: np.ndarray
    monthly_mortgage_payment: np.ndarray
    total_annual_expenses: np.ndarray
    annual_cashflow: np.ndarray
    annual_principal_reduction: np.ndarray
    total_annual_return: np.ndarray
    annual_roi: np.ndarray


def evaluate_prices(
    deal: DealInput,
    prices: ArrayLike,
    policy: EvaluatorPolicy = DEFAULT_POLICY,
) -> BatchAnalysisResult:
    """
    Vectorized version of `analysis.finance.evaluate` over many candidate
    purchase prices for one deal. Same formulas, same policy constants.
    """
    purchase_price = np.asarray(prices, dtype=float)
    if purchase_price.ndim != 1:
        raise InvalidDealInput("prices must be a 1-D sequence")
    if not np.all(np.isfinite(purchase_price)) or np.any(purchase_price <= 0):
        raise InvalidDealInput("every candidate price must be a positive number")

    dp_frac = deal.downpayment_percentage / 100.0
    loan_amount = purchase_price * (1.0 - dp_frac)

    r_monthly = (deal.annual_mortgage_interest_rate / 100.0) / 12.0
    n_months = deal.mortgage_amortization_years * 12

    # Standard mortgage payment formula, vectorized
    if r_monthly > 0:
        amortized = loan_amount * r_monthly / (1.0 - (1.0 + r_monthly) ** (-n_months))
    else:
        amortized = loan_amount / n_months

    if deal.downpayment_percentage < policy.pmi_threshold_pct:
        pmi = purchase_price * policy.pmi_rate / 12.0
    else:
        pmi = np.zeros_like(purchase_price)
    monthly_payment = amortized + pmi

    # --- expenses ---
    fixed_annual = (
        deal.monthly_hoa_dues * 12.0
        + policy.property_insurance_annual
        + (deal.monthly_rent / policy.weeks_per_month) * deal.expected_vacancy_weeks
    )
    total_annual_expenses = (
        monthly_payment * 12.0
        + purchase_price * policy.capex_rate
        + purchase_price * policy.property_tax_rate
        + fixed_annual
    )

    annual_cashflow = deal.monthly_rent * 12.0 - total_annual_expenses

    # --- first-year amortization, all prices at once ---
    balance = loan_amount.copy()
    principal_reduction = np.zeros_like(purchase_price)
    for _ in range(12):
        principal = monthly_payment - balance * r_monthly
        principal_reduction += principal
        balance -= principal

    total_annual_return = (
        annual_cashflow + principal_reduction + purchase_price * policy.appreciation_rate
    )

    cash_in = purchase_price * dp_frac + purchase_price * policy.closing_cost_rate
    with np.errstate(divide="ignore", invalid="ignore"):
        annual_roi = total_annual_return / cash_in * 100.0
    annual_roi[cash_in == 0.0] = np.copysign(np.inf, total_annual_return[cash_in == 0.0])

    return BatchAnalysisResult(
        purchase_price=purchase_price,
        monthly_mortgage_payment=monthly_payment,
        total_annual_expenses=total_annual_expenses,
        annual_cashflow=annual_cashflow,
        annual_principal_reduction=principal_reduction,
        total_annual_return=total_annual_return,
        annual_roi=annual_roi,
    )


def price_sensitivity_frame(
    deal: DealInput,
    start: float,
    stop: float,
    step: float,
    *,
    minimum_roi: float,
    minimum_cashflow: float,
    policy: EvaluatorPolicy = DEFAULT_POLICY,
) -> pd.DataFrame:
    """
    One row per candidate price in [start, stop] (inclusive when it lands on
    a step), with the headline metrics and whether the row meets criteria.
    """
    if step <= 0:
        raise InvalidDealInput("step must be > 0")
    if stop < start:
        raise InvalidDealInput("stop must be >= start")

    prices = np.arange(start, stop + step / 2.0, step, dtype=float)
    batch = evaluate_prices(deal, prices, policy)

    df = pd.DataFrame(
        {
            "purchase_price": batch.purchase_price,
            "monthly_mortgage_payment": batch.monthly_mortgage_payment,
            "total_annual_expenses": batch.total_annual_expenses,
            "annual_cashflow": batch.annual_cashflow,
            "total_annual_return": batch.total_annual_return,
            "annual_roi": batch.annual_roi,
        }
    )
    df["meets_criteria"] = (df["annual_roi"] >= minimum_roi) & (df["annual_cashflow"] >= minimum_cashflow)
    return df
