# src/dealcheck/domain/assumptions.py
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EvaluatorPolicy:
    """
    Fixed underwriting assumptions baked into the evaluator.

    They are not deal inputs. Override them by building a new policy, e.g.
    ``dataclasses.replace(DEFAULT_POLICY, appreciation_rate=0.03)``.
    """
    capex_rate: float = 0.01                # reserve, fraction of purchase price / year
    property_tax_rate: float = 0.015        # fraction of purchase price / year
    property_insurance_annual: float = 1750.0  # flat generalized average
    closing_cost_rate: float = 0.02         # fraction of purchase price, paid once
    appreciation_rate: float = 0.048        # market appreciation / year
    pmi_threshold_pct: float = 20.0         # PMI applies below this down payment %
    pmi_rate: float = 0.015                 # fraction of purchase price / year
    weeks_per_month: float = 4.0            # vacancy cost = rent / weeks_per_month per week


DEFAULT_POLICY = EvaluatorPolicy()
