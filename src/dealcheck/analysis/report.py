from __future__ import annotations

from typing import Dict, Mapping

from dealcheck.domain.underwriting import AnalysisResult

# words that should not be rendered as plain capitalized words
_ACRONYMS = {
    "roi": "ROI",
    "hoa": "HOA",
    "pmi": "PMI",
    "capex": "CapEx",
}


def humanize_field(name: str) -> str:
    """
    'annual_hoa_dues' -> 'Annual HOA dues'
    """
    words = [_ACRONYMS.get(w, w) for w in name.split("_") if w]
    if not words:
        return ""
    first = words[0]
    words[0] = first if first in _ACRONYMS.values() else first.capitalize()
    return " ".join(words)


def format_currency(value: float) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_percent(value: float) -> str:
    return f"{value:.2f}%"


def format_value(name: str, value: float) -> str:
    if name.lower().endswith("roi"):
        return format_percent(value)
    return format_currency(value)


def render_section(title: str, values: Mapping[str, float]) -> str:
    lines = [f"## {title}:", ""]
    for name, value in values.items():
        lines.append(f"- {humanize_field(name)}: {format_value(name, value)}")
    lines.append("")
    return "\n".join(lines) + "\n"


def report_sections(result: AnalysisResult) -> Dict[str, Dict[str, float]]:
    """
    The four blocks the report prints, in order.
    """
    expenses = result.expenses()
    expenses["total_annual_expenses"] = result.total_annual_expenses
    return {
        "Annual expenses": expenses,
        "Annual cashflow": {
            "annual_rent": result.annual_rent,
            "annual_expenses": result.total_annual_expenses,
            "total_annual_cashflow": result.annual_cashflow,
        },
        "Annual return": {
            "annual_cashflow": result.annual_cashflow,
            "annual_principal_reduction": result.annual_principal_reduction,
            "annual_appreciation": result.annual_appreciation,
            "total_annual_return": result.total_annual_return,
        },
        "Annual ROI": {
            "annual_return": result.total_annual_return,
            "down_payment": result.down_payment,
            "closing_costs": result.closing_costs,
            "total_annual_roi": result.annual_roi,
        },
    }


def render_headline(purchase_price: float, sale_price: float) -> str:
    headline = f"# Good buy @ {format_currency(purchase_price)}"
    if purchase_price < sale_price:
        headline += f" (-{format_currency(sale_price - purchase_price)} from sale price)"
    elif purchase_price > sale_price:
        headline += f" (+{format_currency(purchase_price - sale_price)} over sale price)"
    return headline


def render_full_report(result: AnalysisResult, sale_price: float) -> str:
    """
    Markdown report: headline price vs sale price, then expenses, cashflow,
    return and ROI sections.
    """
    parts = [render_headline(result.purchase_price, sale_price), "\n\n"]
    for title, values in report_sections(result).items():
        parts.append(render_section(title, values))
    return "".join(parts)
