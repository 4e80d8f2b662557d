"""
Regime Comparison
=================
Runs both regimes against the same GTI and deductions, picks the cheaper one,
and lays the figures out for display.
"""

from __future__ import annotations

from taxdesk.aggregation import read_income_heads, read_deductions_total
from taxdesk.models import RegimeComparison, IncomeSummary
from taxdesk.tax_engine import compute_regime_tax, OLD, NEW, REGIMES


def compare_regimes(gross_total_income: float, deductions: float) -> RegimeComparison:
    """Compare old vs new regime. Old is recommended only when strictly cheaper."""
    old_result = compute_regime_tax(OLD, gross_total_income, deductions)
    new_result = compute_regime_tax(NEW, gross_total_income, deductions)

    recommended = OLD if old_result.final_tax < new_result.final_tax else NEW
    savings = abs(old_result.final_tax - new_result.final_tax)

    return RegimeComparison(
        old=old_result,
        new=new_result,
        recommended=recommended,
        savings=round(savings, 2),
    )


def compare_stored_regimes(store) -> RegimeComparison:
    """Fresh comparison from whatever is in the store right now."""
    heads = read_income_heads(store)
    return compare_regimes(sum(heads.values()), read_deductions_total(store))


def recommendation_text(comparison: RegimeComparison) -> str:
    if comparison.savings == 0:
        return "Both regimes result in the same tax"
    label = "New Regime" if comparison.recommended == NEW else "Old Regime"
    return f"{label} saves you Rs. {format_currency(comparison.savings)}"


COMPARISON_ROWS = (
    ("Gross Total Income", "gross_total_income"),
    ("Deduction", "deduction"),
    ("Taxable Income", "taxable_income"),
    ("Tax as per Slabs", "slab_tax"),
    ("Cess @ 4%", "cess"),
    ("Surcharge", "surcharge"),
    ("Final Tax", "final_tax"),
)


def build_comparison_rows(comparison: RegimeComparison) -> list[dict]:
    """Side-by-side table rows: particulars, new regime, old regime."""
    return [
        {
            "particulars": label,
            "new_regime": getattr(comparison.new, attr),
            "old_regime": getattr(comparison.old, attr),
        }
        for label, attr in COMPARISON_ROWS
    ]


def build_income_summary(store, regime: str | None = None) -> IncomeSummary:
    """Heads of income through to total tax for one regime.

    Defaults to whichever regime the comparison recommends.
    """
    heads = read_income_heads(store)
    gti = sum(heads.values())
    deductions = read_deductions_total(store)

    if regime is None:
        regime = compare_regimes(gti, deductions).recommended
    elif regime not in REGIMES:
        raise ValueError(f"Unknown regime: {regime!r}")

    return IncomeSummary(
        heads=heads,
        gross_total_income=round(gti, 2),
        deductions_entered=deductions,
        result=compute_regime_tax(regime, gti, deductions),
    )


def format_currency(amount: float) -> str:
    """Format amount in Indian currency style (e.g., 12,50,000)."""
    if amount < 0:
        return f"-{format_currency(-amount)}"
    s = f"{amount:,.0f}"
    parts = s.split(",")
    if len(parts) == 1:
        return s
    # Indian: last 3 digits, then groups of 2
    last_three = parts[-1]
    rest_digits = "".join(parts[:-1])
    indian_groups = []
    while len(rest_digits) > 2:
        indian_groups.insert(0, rest_digits[-2:])
        rest_digits = rest_digits[:-2]
    if rest_digits:
        indian_groups.insert(0, rest_digits)
    return ",".join(indian_groups) + "," + last_three
