class DealCheckError(Exception):
    """Base class for every failure raised by the deal-check core."""


class InvalidDealInput(DealCheckError, ValueError):
    """Deal figures (or a candidate price) that cannot be evaluated."""


class SearchDivergent(DealCheckError):
    """
    Bound-finding kept doubling past the ceiling without ever hitting a
    price that fails the criteria (e.g. rent so high every price passes).
    """

    def __init__(self, ceiling: float, last_price: float):
        self.ceiling = ceiling
        self.last_price = last_price
        super().__init__(
            f"Price search diverged: {last_price:,.0f} still meets criteria "
            f"(ceiling {ceiling:,.0f})"
        )


class SearchInfeasible(DealCheckError):
    """Even the smallest candidate price fails the criteria."""

    def __init__(self, price: float, annual_roi: float, annual_cashflow: float):
        self.price = price
        self.annual_roi = annual_roi
        self.annual_cashflow = annual_cashflow
        super().__init__(
            f"No purchase price meets criteria: smallest candidate {price:,.0f} "
            f"gives ROI {annual_roi:.2f}% and cashflow {annual_cashflow:,.2f}"
        )
