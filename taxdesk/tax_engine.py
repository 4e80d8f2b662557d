"""
Tax Computation Engine
======================
Pure Python tax calculation for AY 2025-26 (FY 2024-25).
Old and New regime slabs, deduction handling, surcharge and cess.
"""

from __future__ import annotations

from taxdesk.models import RegimeTaxResult, to_amount


# ---------------------------------------------------------------------------
# Tax Slabs, AY 2025-26
# ---------------------------------------------------------------------------

OLD_REGIME_SLABS = [
    (250000, 0.00),
    (250000, 0.05),  # 2.5L - 5L
    (500000, 0.20),  # 5L - 10L
    (float("inf"), 0.30),  # 10L+
]

NEW_REGIME_SLABS = [
    (300000, 0.00),
    (400000, 0.05),  # 3L - 7L
    (300000, 0.10),  # 7L - 10L
    (200000, 0.15),  # 10L - 12L
    (300000, 0.20),  # 12L - 15L
    (float("inf"), 0.30),  # 15L+
]

# Upper bound of taxable income (inclusive) -> rate on slab tax
SURCHARGE_BRACKETS = [
    (5000000, 0.00),
    (10000000, 0.10),  # 50L - 1Cr
    (20000000, 0.15),  # 1Cr - 2Cr
    (50000000, 0.25),  # 2Cr - 5Cr
    (float("inf"), 0.37),  # 5Cr+
]

CESS_RATE = 0.04

# New regime only allows this much of the entered deductions
NEW_REGIME_DEDUCTION_CAP = 75000

OLD = "old"
NEW = "new"
REGIMES = (OLD, NEW)


# ---------------------------------------------------------------------------
# Slab Tax
# ---------------------------------------------------------------------------

def _compute_tax_from_slabs(taxable_income: float, slabs: list[tuple]) -> float:
    """Apply progressive tax slabs to taxable income."""
    tax = 0.0
    remaining = taxable_income
    for slab_amount, rate in slabs:
        if remaining <= 0:
            break
        taxable_in_slab = min(remaining, slab_amount)
        tax += taxable_in_slab * rate
        remaining -= taxable_in_slab
    return round(tax, 2)


def old_regime_tax(taxable_income: float) -> float:
    """Slab tax (before cess and surcharge) under the old regime."""
    return _compute_tax_from_slabs(to_amount(taxable_income), OLD_REGIME_SLABS)


def new_regime_tax(taxable_income: float) -> float:
    """Slab tax (before cess and surcharge) under the new regime."""
    return _compute_tax_from_slabs(to_amount(taxable_income), NEW_REGIME_SLABS)


def slab_tax(regime: str, taxable_income: float) -> float:
    if regime == OLD:
        return old_regime_tax(taxable_income)
    if regime == NEW:
        return new_regime_tax(taxable_income)
    raise ValueError(f"Unknown regime: {regime!r}")


# ---------------------------------------------------------------------------
# Taxable Income
# ---------------------------------------------------------------------------

def applicable_deduction(regime: str, deductions: float) -> float:
    """Old regime takes every rupee entered; new regime is capped."""
    deductions = to_amount(deductions)
    if regime == OLD:
        return deductions
    if regime == NEW:
        return min(deductions, NEW_REGIME_DEDUCTION_CAP)
    raise ValueError(f"Unknown regime: {regime!r}")


def taxable_income(regime: str, gross_total_income: float, deductions: float) -> float:
    gti = to_amount(gross_total_income)
    return max(gti - applicable_deduction(regime, deductions), 0.0)


def old_regime_taxable_income(gross_total_income: float, deductions: float) -> float:
    return taxable_income(OLD, gross_total_income, deductions)


def new_regime_taxable_income(gross_total_income: float, deductions: float) -> float:
    return taxable_income(NEW, gross_total_income, deductions)


# ---------------------------------------------------------------------------
# Surcharge & Cess
# ---------------------------------------------------------------------------

def surcharge_rate(taxable_income: float) -> float:
    """Surcharge rate for a taxable income. Bracket limits are inclusive."""
    for limit, rate in SURCHARGE_BRACKETS:
        if taxable_income <= limit:
            return rate
    return SURCHARGE_BRACKETS[-1][1]


def compute_surcharge(tax: float, taxable_income: float) -> float:
    """Surcharge on slab tax. No marginal relief is applied."""
    return round(tax * surcharge_rate(taxable_income), 2)


def compute_cess(tax: float) -> float:
    """Health & education cess on slab tax."""
    return round(tax * CESS_RATE, 2)


def compute_regime_tax(regime: str, gross_total_income: float, deductions: float) -> RegimeTaxResult:
    """Full liability for one regime from GTI and the deductions entered."""
    gti = to_amount(gross_total_income)
    deduction = applicable_deduction(regime, deductions)
    taxable = max(gti - deduction, 0.0)

    tax = slab_tax(regime, taxable)
    cess = compute_cess(tax)
    surcharge = compute_surcharge(tax, taxable)
    total = round(tax + cess + surcharge, 2)

    return RegimeTaxResult(
        regime=regime,
        gross_total_income=round(gti, 2),
        deduction=round(deduction, 2),
        taxable_income=round(taxable, 2),
        slab_tax=tax,
        cess=cess,
        surcharge=surcharge,
        final_tax=total,
        effective_rate=round(total / gti * 100, 2) if gti > 0 else 0.0,
    )


# ---------------------------------------------------------------------------
# Slab Info
# ---------------------------------------------------------------------------

def new_regime_slab_info(taxable_income: float) -> dict:
    """Which new-regime slab an income falls in, and where the next one starts."""
    if taxable_income <= 300000:
        return {"slab": "0 - 3L", "rate": "Nil", "next_slab": 300000}
    if taxable_income <= 700000:
        return {"slab": "3L - 7L", "rate": "5%", "next_slab": 700000}
    if taxable_income <= 1000000:
        return {"slab": "7L - 10L", "rate": "10%", "next_slab": 1000000}
    if taxable_income <= 1200000:
        return {"slab": "10L - 12L", "rate": "15%", "next_slab": 1200000}
    if taxable_income <= 1500000:
        return {"slab": "12L - 15L", "rate": "20%", "next_slab": 1500000}
    return {"slab": "Above 15L", "rate": "30%", "next_slab": None}
