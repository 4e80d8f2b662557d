"""
Tax Data Models
===============
Dataclasses for the line items behind each income head, the deduction
sections, and the per-regime tax result.
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

SALARY = "salary"
HOUSE_PROPERTY = "house_property"
BUSINESS_PROFESSION = "business_profession"
CAPITAL_GAINS = "capital_gains"
OTHER_SOURCES = "other_sources"
DEDUCTIONS = "deductions"

INCOME_CATEGORIES = (SALARY, HOUSE_PROPERTY, BUSINESS_PROFESSION, CAPITAL_GAINS, OTHER_SOURCES)

CATEGORY_LABELS = {
    SALARY: "Salary",
    HOUSE_PROPERTY: "House Property",
    BUSINESS_PROFESSION: "Business & Profession",
    CAPITAL_GAINS: "Capital Gains",
    OTHER_SOURCES: "Other Sources",
    DEDUCTIONS: "Deductions",
}


def to_amount(value) -> float:
    """Coerce user input to a non-negative amount.

    Blank, unparseable, NaN and infinite input all become 0. Negative numbers
    are clamped to 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(str(value).strip().replace(",", ""))
    except ValueError:
        return 0.0
    if not math.isfinite(amount):
        return 0.0
    if amount < 0:
        logger.debug("Clamped negative amount %s to 0", amount)
        return 0.0
    return amount


# ---------------------------------------------------------------------------
# Line items
# ---------------------------------------------------------------------------

@dataclass
class LineItem(ABC):
    """Base for editable rows. Subclasses declare which fields hold amounts."""

    AMOUNT_FIELDS: ClassVar[tuple[str, ...]] = ()
    TEXT_FIELDS: ClassVar[tuple[str, ...]] = ()

    def set_field(self, name: str, value):
        if name in self.AMOUNT_FIELDS:
            setattr(self, name, to_amount(value))
            self.recompute()
        elif name in self.TEXT_FIELDS:
            setattr(self, name, "" if value is None else str(value))
        else:
            raise ValueError(f"{type(self).__name__} has no editable field {name!r}")

    def recompute(self):
        pass

    @property
    @abstractmethod
    def amount(self) -> float:
        """The figure this line contributes to its category total."""


@dataclass
class SalaryRow(LineItem):
    AMOUNT_FIELDS: ClassVar[tuple[str, ...]] = ("income", "exemption")
    TEXT_FIELDS: ClassVar[tuple[str, ...]] = ("particulars",)

    particulars: str = ""
    income: float = 0.0
    exemption: float = 0.0
    taxable_income: float = 0.0

    def recompute(self):
        self.taxable_income = round(self.income - self.exemption, 2)

    @property
    def amount(self) -> float:
        return self.taxable_income


@dataclass
class HouseProperty(LineItem):
    AMOUNT_FIELDS: ClassVar[tuple[str, ...]] = ("rental_income", "municipal_tax", "interest_paid")
    TEXT_FIELDS: ClassVar[tuple[str, ...]] = ("name", "address")

    name: str = ""
    address: str = ""
    rental_income: float = 0.0
    municipal_tax: float = 0.0
    standard_deduction: float = 0.0
    interest_paid: float = 0.0
    taxable_rent: float = 0.0

    def recompute(self):
        # Let out: annual value - municipal tax - 30% standard deduction - interest
        nav = self.rental_income - self.municipal_tax
        self.standard_deduction = nav * 0.30
        self.taxable_rent = nav - self.standard_deduction - self.interest_paid

    @property
    def amount(self) -> float:
        return self.taxable_rent


@dataclass
class PresumptiveIncome(LineItem):
    """Sec 44AD/44ADA presumptive scheme."""

    AMOUNT_FIELDS: ClassVar[tuple[str, ...]] = ("gross_receipts", "presumptive_rate")

    gross_receipts: float = 0.0
    presumptive_rate: float = 8.0  # percent
    presumptive_income: float = 0.0

    def recompute(self):
        self.presumptive_income = self.gross_receipts * (self.presumptive_rate / 100)

    @property
    def amount(self) -> float:
        return self.presumptive_income


@dataclass
class RegularIncome(LineItem):
    """Regular books: receipts less expenses."""

    AMOUNT_FIELDS: ClassVar[tuple[str, ...]] = ("gross_receipts", "expenses")

    gross_receipts: float = 0.0
    expenses: float = 0.0
    net_income: float = 0.0

    def recompute(self):
        self.net_income = self.gross_receipts - self.expenses

    @property
    def amount(self) -> float:
        return self.net_income


@dataclass
class CapitalAsset(LineItem):
    AMOUNT_FIELDS: ClassVar[tuple[str, ...]] = ("purchase_price", "sale_price", "expenses")
    TEXT_FIELDS: ClassVar[tuple[str, ...]] = ("asset_name", "date_of_purchase", "date_of_sale")

    asset_name: str = ""
    date_of_purchase: str = ""
    date_of_sale: str = ""
    purchase_price: float = 0.0
    sale_price: float = 0.0
    expenses: float = 0.0
    capital_gain: float = 0.0

    def recompute(self):
        self.capital_gain = self.sale_price - self.purchase_price - self.expenses

    @property
    def amount(self) -> float:
        return self.capital_gain


@dataclass
class OtherSourceRow(LineItem):
    AMOUNT_FIELDS: ClassVar[tuple[str, ...]] = ("amount_received",)
    TEXT_FIELDS: ClassVar[tuple[str, ...]] = ("particulars",)

    particulars: str = ""
    amount_received: float = 0.0

    @property
    def amount(self) -> float:
        return self.amount_received


# ---------------------------------------------------------------------------
# Deductions (Chapter VI-A)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DeductionSection:
    section: str
    max_limit: float | None = None  # informational only, never enforced


DEDUCTION_SECTIONS = (
    DeductionSection("80C", 150000),
    DeductionSection("80CCD", 50000),
    DeductionSection("80D", 25000),
    DeductionSection("80DD", 75000),
    DeductionSection("80DDB", 40000),
    DeductionSection("80E"),
    DeductionSection("80EEA", 150000),
    DeductionSection("80EEB", 150000),
    DeductionSection("80G"),
    DeductionSection("80GG", 60000),
    DeductionSection("80JJAA"),
    DeductionSection("80RRB", 300000),
    DeductionSection("80TTA", 10000),
    DeductionSection("80TTB", 50000),
    DeductionSection("80U", 75000),
    DeductionSection("80CCH", 50000),
)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass
class RegimeTaxResult:
    regime: str  # old / new
    gross_total_income: float = 0.0
    deduction: float = 0.0
    taxable_income: float = 0.0
    slab_tax: float = 0.0
    cess: float = 0.0
    surcharge: float = 0.0
    final_tax: float = 0.0
    effective_rate: float = 0.0  # percent of GTI


@dataclass
class RegimeComparison:
    old: RegimeTaxResult
    new: RegimeTaxResult
    recommended: str = "new"
    savings: float = 0.0

    @property
    def recommended_result(self) -> RegimeTaxResult:
        return self.old if self.recommended == "old" else self.new


@dataclass
class IncomeSummary:
    heads: dict = field(default_factory=dict)  # category -> total
    gross_total_income: float = 0.0
    deductions_entered: float = 0.0
    result: RegimeTaxResult | None = None
