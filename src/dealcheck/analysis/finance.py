from __future__ import annotations

import math

from dealcheck.domain.assumptions import DEFAULT_POLICY, EvaluatorPolicy
from dealcheck.domain.deal import DealInput
from dealcheck.domain.errors import InvalidDealInput
from dealcheck.domain.underwriting import AnalysisResult


def _monthly_rate(annual_rate_pct: float) -> float:
    return (annual_rate_pct / 100.0) / 12.0


def _amortized_payment(principal: float, rate_monthly: float, n_months: int) -> float:
    """
    Standard fixed-rate amortization formula:
    M = P * r / (1 - (1+r)^-n)
    P = loan principal
    r = monthly interest rate
    n = number of payments (months)

    A 0% loan is just principal spread evenly over n months.
    """
    if rate_monthly == 0:
        return principal / n_months
    return principal * rate_monthly / (1 - (1 + rate_monthly) ** -n_months)


def _monthly_pmi(purchase_price: float, downpayment_pct: float, policy: EvaluatorPolicy) -> float:
    """
    Lender-required mortgage insurance below the equity threshold (20% by default).
    """
    if downpayment_pct < policy.pmi_threshold_pct:
        return (purchase_price * policy.pmi_rate) / 12.0
    return 0.0


def _annual_principal_reduction(loan_amount: float, monthly_payment: float, rate_monthly: float) -> float:
    """
    Walk the first 12 months of the amortization schedule and sum the
    principal portion of each payment. The interest/principal split shifts
    every month, so this is not payment*12 - interest*12 on the opening balance.
    """
    balance = loan_amount
    reduction = 0.0
    for _ in range(12):
        interest = balance * rate_monthly
        principal = monthly_payment - interest
        reduction += principal
        balance -= principal
    return reduction


def evaluate(
    deal: DealInput,
    purchase_price: float,
    policy: EvaluatorPolicy = DEFAULT_POLICY,
) -> AnalysisResult:
    """
    Core underwriting brain: every annual metric for `deal` bought at
    `purchase_price`.

    Pure function. Nothing is cached, the result depends only on the arguments.
    """
    if not math.isfinite(purchase_price) or purchase_price <= 0:
        raise InvalidDealInput(f"purchase_price must be a positive number, got {purchase_price!r}")

    # --- financing ---
    loan_amount = purchase_price * (1 - deal.downpayment_percentage / 100.0)
    rate_monthly = _monthly_rate(deal.annual_mortgage_interest_rate)
    n_months = deal.mortgage_amortization_years * 12

    monthly_pmi = _monthly_pmi(purchase_price, deal.downpayment_percentage, policy)
    monthly_mortgage_payment = monthly_pmi + _amortized_payment(loan_amount, rate_monthly, n_months)

    # --- expenses ---
    annual_mortgage_payment = monthly_mortgage_payment * 12
    annual_hoa_dues = deal.monthly_hoa_dues * 12
    annual_capex = purchase_price * policy.capex_rate
    annual_property_tax = purchase_price * policy.property_tax_rate
    annual_property_insurance = policy.property_insurance_annual
    # rent lost per vacant week
    annual_vacancy_cost = (deal.monthly_rent / policy.weeks_per_month) * deal.expected_vacancy_weeks

    total_annual_expenses = (
        annual_mortgage_payment
        + annual_hoa_dues
        + annual_capex
        + annual_property_tax
        + annual_property_insurance
        + annual_vacancy_cost
    )

    # --- cashflow ---
    annual_rent = deal.monthly_rent * 12
    annual_cashflow = annual_rent - total_annual_expenses

    # --- return ---
    annual_principal_reduction = _annual_principal_reduction(
        loan_amount, monthly_mortgage_payment, rate_monthly
    )
    annual_appreciation = purchase_price * policy.appreciation_rate
    total_annual_return = annual_cashflow + annual_principal_reduction + annual_appreciation

    # --- ROI on cash in ---
    down_payment = purchase_price * (deal.downpayment_percentage / 100.0)
    closing_costs = purchase_price * policy.closing_cost_rate
    cash_in = down_payment + closing_costs

    if cash_in > 0:
        annual_roi = (total_annual_return / cash_in) * 100.0
    else:
        # nothing invested (0% down and no closing costs): unbounded either way
        annual_roi = math.copysign(math.inf, total_annual_return)

    return AnalysisResult(
        purchase_price=purchase_price,
        loan_amount=loan_amount,
        monthly_pmi=monthly_pmi,
        monthly_mortgage_payment=monthly_mortgage_payment,
        annual_mortgage_payment=annual_mortgage_payment,
        annual_hoa_dues=annual_hoa_dues,
        annual_capex=annual_capex,
        annual_property_tax=annual_property_tax,
        annual_property_insurance=annual_property_insurance,
        annual_vacancy_cost=annual_vacancy_cost,
        total_annual_expenses=total_annual_expenses,
        annual_rent=annual_rent,
        annual_cashflow=annual_cashflow,
        annual_principal_reduction=annual_principal_reduction,
        annual_appreciation=annual_appreciation,
        total_annual_return=total_annual_return,
        down_payment=down_payment,
        closing_costs=closing_costs,
        annual_roi=annual_roi,
    )
