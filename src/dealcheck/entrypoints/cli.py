from __future__ import annotations

import sys
from typing import NoReturn, Optional

import typer

from dealcheck.adapters.config import config
from dealcheck.adapters.logging_utils import set_log_level, set_log_stream
from dealcheck.analysis.finance_batch import price_sensitivity_frame
from dealcheck.analysis.price_search import find_max_purchase_price
from dealcheck.domain.deal import DealInput
from dealcheck.domain.errors import DealCheckError
from dealcheck.services.deal_analyzer import analyze_deal

app = typer.Typer(help="Rental deal metrics and max-purchase-price search.")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override LOG_LEVEL, e.g. WARNING"),
) -> None:
    # stdout carries the command result only
    set_log_stream(sys.stderr)
    if log_level:
        set_log_level(log_level)


def _deal(
    sale_price: float,
    down: float,
    rate: float,
    years: int,
    rent: float,
    hoa: float,
    vacancy_weeks: float,
) -> DealInput:
    return DealInput.create(
        sale_price=sale_price,
        downpayment_percentage=down,
        annual_mortgage_interest_rate=rate,
        mortgage_amortization_years=years,
        monthly_hoa_dues=hoa,
        expected_vacancy_weeks=vacancy_weeks,
        monthly_rent=rent,
    )


def _fail(err: DealCheckError) -> NoReturn:
    typer.echo(f"error: {err}", err=True)
    raise typer.Exit(code=1)


# Shared deal options
SalePrice = typer.Option(..., "--sale-price", help="Listed / asking price")
Down = typer.Option(20.0, "--down", help="Down payment, percent of price")
Rate = typer.Option(..., "--rate", help="Annual mortgage interest rate, percent")
Years = typer.Option(25, "--years", help="Amortization period in years")
Rent = typer.Option(..., "--rent", help="Monthly rent")
Hoa = typer.Option(0.0, "--hoa", help="Monthly HOA dues")
Vacancy = typer.Option(0.0, "--vacancy-weeks", help="Expected vacant weeks per year")
MinRoi = typer.Option(None, "--min-roi", help="Minimum annual ROI, percent (default from config)")
MinCashflow = typer.Option(None, "--min-cashflow", help="Minimum annual cashflow (default from config)")
Granularity = typer.Option(None, "--granularity", help="Price step: 1 or 1000 (default from config)")
AboveSale = typer.Option(
    None, "--above-sale/--cap-at-sale", help="Allow a max price above the sale price (default from config)"
)


@app.command()
def analyze(
    sale_price: float = SalePrice,
    down: float = Down,
    rate: float = Rate,
    years: int = Years,
    rent: float = Rent,
    hoa: float = Hoa,
    vacancy_weeks: float = Vacancy,
    min_roi: Optional[float] = MinRoi,
    min_cashflow: Optional[float] = MinCashflow,
    granularity: Optional[int] = Granularity,
    above_sale: Optional[bool] = AboveSale,
    as_is: bool = typer.Option(False, "--as-is", help="Evaluate at the sale price, skip the price search"),
) -> None:
    """
    Print the markdown report for a deal.
    """
    try:
        deal = _deal(sale_price, down, rate, years, rent, hoa, vacancy_weeks)
        res = analyze_deal(
            deal,
            adjust=not as_is,
            minimum_roi=min_roi,
            minimum_cashflow=min_cashflow,
            granularity=granularity,
            cap_at_sale_price=None if above_sale is None else not above_sale,
        )
    except DealCheckError as err:
        _fail(err)
    typer.echo(res["markdown"])


@app.command("max-price")
def max_price(
    sale_price: float = SalePrice,
    down: float = Down,
    rate: float = Rate,
    years: int = Years,
    rent: float = Rent,
    hoa: float = Hoa,
    vacancy_weeks: float = Vacancy,
    min_roi: Optional[float] = MinRoi,
    min_cashflow: Optional[float] = MinCashflow,
    granularity: Optional[int] = Granularity,
    above_sale: Optional[bool] = AboveSale,
) -> None:
    """
    Print only the highest purchase price meeting the thresholds.
    """
    try:
        deal = _deal(sale_price, down, rate, years, rent, hoa, vacancy_weeks)
        price = find_max_purchase_price(
            deal,
            config.MIN_ROI if min_roi is None else min_roi,
            config.MIN_CASHFLOW if min_cashflow is None else min_cashflow,
            granularity=config.PRICE_GRANULARITY if granularity is None else granularity,
            ceiling_multiple=config.SEARCH_CEILING_MULTIPLE,
            cap_at_sale_price=config.CAP_AT_SALE_PRICE if above_sale is None else not above_sale,
        )
    except DealCheckError as err:
        _fail(err)
    typer.echo(price)


@app.command()
def sweep(
    sale_price: float = SalePrice,
    down: float = Down,
    rate: float = Rate,
    years: int = Years,
    rent: float = Rent,
    hoa: float = Hoa,
    vacancy_weeks: float = Vacancy,
    start: Optional[float] = typer.Option(None, help="First price (default 80% of sale price)"),
    stop: Optional[float] = typer.Option(None, help="Last price (default 110% of sale price)"),
    step: float = typer.Option(5000.0, help="Price increment"),
    min_roi: Optional[float] = MinRoi,
    min_cashflow: Optional[float] = MinCashflow,
) -> None:
    """
    Print a price-sensitivity table around the sale price.
    """
    try:
        deal = _deal(sale_price, down, rate, years, rent, hoa, vacancy_weeks)
        df = price_sensitivity_frame(
            deal,
            sale_price * 0.8 if start is None else start,
            sale_price * 1.1 if stop is None else stop,
            step,
            minimum_roi=config.MIN_ROI if min_roi is None else min_roi,
            minimum_cashflow=config.MIN_CASHFLOW if min_cashflow is None else min_cashflow,
        )
    except DealCheckError as err:
        _fail(err)
    typer.echo(df.to_string(index=False, float_format=lambda v: f"{v:,.2f}"))


if __name__ == "__main__":
    app()
