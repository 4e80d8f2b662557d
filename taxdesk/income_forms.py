"""
Income Forms
============
Editable state for each head of income plus the Chapter VI-A deductions form.
Each form keeps its own line items, derives a single total, and writes that
total to the shared store under its well-known key.

Income forms only persist on an explicit save(). The deductions form writes
through on every change as well.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod

from taxdesk.aggregation import read_deductions_data
from taxdesk.models import (
    SALARY, HOUSE_PROPERTY, BUSINESS_PROFESSION, CAPITAL_GAINS, OTHER_SOURCES, DEDUCTIONS,
    CATEGORY_LABELS, DEDUCTION_SECTIONS,
    SalaryRow, HouseProperty, PresumptiveIncome, RegularIncome, CapitalAsset, OtherSourceRow,
    to_amount,
)
from taxdesk.storage import (
    SALARY_TOTAL, HOUSE_PROPERTY_TOTAL, BUSINESS_PROFESSION_TOTAL,
    CAPITAL_GAINS_TOTAL, OTHER_SOURCES_TOTAL, DEDUCTIONS_TOTAL, DEDUCTIONS_DATA,
    get_store,
)

logger = logging.getLogger(__name__)

SALARY_HEADS = (
    "Basic Salary", "HRA", "Commission", "Dearness Allowance", "Travel Allowance",
    "ESOPs", "Gift", "Bonus", "Free Food",
)

OTHER_SOURCE_HEADS = ("Bank SB Interest", "Bank FD Interest", "Dividend", "Other Income")

SHARES = "shares"
MUTUAL_FUNDS = "mutual_funds"
PROPERTY = "property"
CRYPTO = "crypto"
ASSET_CLASSES = (SHARES, MUTUAL_FUNDS, PROPERTY, CRYPTO)

# Business form line indexes
PRESUMPTIVE = 0
REGULAR = 1


def hra_exemption(basic_salary: float, hra_received: float, monthly_rent: float, metro: bool = True) -> float:
    """HRA exemption u/s 10(13A): least of actual HRA, rent over 10% of basic,
    and 50% (metro) / 40% (non-metro) of basic."""
    basic = to_amount(basic_salary)
    hra = to_amount(hra_received)
    annual_rent = to_amount(monthly_rent) * 12
    rent_minus_10 = max(0.0, annual_rent - 0.1 * basic)
    percent_of_basic = (0.5 if metro else 0.4) * basic
    return round(max(0.0, min(hra, rent_minus_10, percent_of_basic)), 2)


def _line_index(items: list, index: int) -> int:
    """Reject indexes outside the list, negative ones included."""
    if not 0 <= index < len(items):
        raise IndexError(f"Line index {index} out of range for {len(items)} items")
    return index


class IncomeForm(ABC):
    """Base for a single-category form backed by the shared store."""

    category = ""
    total_key = ""

    def __init__(self, store=None):
        self.store = store if store is not None else get_store()
        self.clear()

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self.category]

    @abstractmethod
    def clear(self):
        """Reset the form to its initial rows."""

    @abstractmethod
    def line_items(self) -> list:
        """Rows that make up the category total."""

    def set_line_item(self, index: int, field: str, value):
        items = self.line_items()
        items[_line_index(items, index)].set_field(field, value)

    @property
    def total(self) -> float:
        """Category total; losses offset gains but the total never goes below 0."""
        return round(max(sum(item.amount for item in self.line_items()), 0.0), 2)

    def save(self) -> float:
        total = self.total
        self.store.set(self.total_key, str(total))
        logger.info("Saved %s total %.2f under %s", self.category, total, self.total_key)
        return total


class SalaryForm(IncomeForm):
    category = SALARY
    total_key = SALARY_TOTAL

    def clear(self):
        self.rows = [SalaryRow(particulars=head) for head in SALARY_HEADS]

    def line_items(self) -> list:
        return self.rows

    def row(self, particulars: str) -> SalaryRow:
        for row in self.rows:
            if row.particulars == particulars:
                return row
        raise ValueError(f"No salary row named {particulars!r}")

    @property
    def gross_income(self) -> float:
        return sum(row.income for row in self.rows)

    @property
    def total_exemption(self) -> float:
        return sum(row.exemption for row in self.rows)

    def apply_hra_exemption(self, monthly_rent: float, metro: bool = True) -> float:
        """Fill the HRA row's exemption from basic salary and rent paid."""
        hra_row = self.row("HRA")
        exemption = hra_exemption(self.row("Basic Salary").income, hra_row.income, monthly_rent, metro)
        hra_row.set_field("exemption", exemption)
        return exemption


class HousePropertyForm(IncomeForm):
    category = HOUSE_PROPERTY
    total_key = HOUSE_PROPERTY_TOTAL

    def clear(self):
        self.properties = [HouseProperty()]

    def line_items(self) -> list:
        return self.properties

    def add_line_item(self) -> int:
        self.properties.append(HouseProperty())
        return len(self.properties) - 1

    def remove_line_item(self, index: int) -> bool:
        """Remove a property; the last one always stays."""
        _line_index(self.properties, index)
        if len(self.properties) <= 1:
            return False
        del self.properties[index]
        return True


class BusinessProfessionForm(IncomeForm):
    """Presumptive (index 0) and regular (index 1) methods; the higher is saved."""

    category = BUSINESS_PROFESSION
    total_key = BUSINESS_PROFESSION_TOTAL

    def clear(self):
        self.presumptive = PresumptiveIncome()
        self.regular = RegularIncome()

    def line_items(self) -> list:
        return [self.presumptive, self.regular]

    @property
    def total(self) -> float:
        return round(max(self.presumptive.amount, self.regular.amount, 0.0), 2)


class CapitalGainsForm(IncomeForm):
    category = CAPITAL_GAINS
    total_key = CAPITAL_GAINS_TOTAL

    def clear(self):
        self.assets = {asset_class: [CapitalAsset()] for asset_class in ASSET_CLASSES}

    def _assets(self, asset_class: str) -> list:
        if asset_class not in self.assets:
            raise ValueError(f"Unknown asset class: {asset_class!r}")
        return self.assets[asset_class]

    def line_items(self) -> list:
        return [asset for asset_class in ASSET_CLASSES for asset in self.assets[asset_class]]

    def set_line_item(self, index: int, field: str, value, asset_class: str = SHARES):
        assets = self._assets(asset_class)
        assets[_line_index(assets, index)].set_field(field, value)

    def add_line_item(self, asset_class: str = SHARES) -> int:
        assets = self._assets(asset_class)
        assets.append(CapitalAsset())
        return len(assets) - 1

    def remove_line_item(self, index: int, asset_class: str = SHARES) -> bool:
        assets = self._assets(asset_class)
        _line_index(assets, index)
        if len(assets) <= 1:
            return False
        del assets[index]
        return True

    def class_total(self, asset_class: str) -> float:
        return sum(asset.capital_gain for asset in self._assets(asset_class))


class OtherSourcesForm(IncomeForm):
    category = OTHER_SOURCES
    total_key = OTHER_SOURCES_TOTAL

    def clear(self):
        self.rows = [OtherSourceRow(particulars=head) for head in OTHER_SOURCE_HEADS]

    def line_items(self) -> list:
        return self.rows


class DeductionsForm:
    """Chapter VI-A deductions. Statutory limits are shown but never enforced."""

    category = DEDUCTIONS
    sections = DEDUCTION_SECTIONS

    def __init__(self, store=None):
        self.store = store if store is not None else get_store()
        self.amounts = self._initial_amounts()
        saved = read_deductions_data(self.store)
        for section, amount in saved.items():
            if section in self.amounts:
                self.amounts[section] = amount
            else:
                logger.debug("Dropping unknown deduction section %s", section)

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self.category]

    def _initial_amounts(self) -> dict[str, float]:
        return {item.section: 0.0 for item in self.sections}

    def set_amount(self, section: str, value):
        if section not in self.amounts:
            raise ValueError(f"Unknown deduction section: {section!r}")
        self.amounts[section] = to_amount(value)
        self._persist()

    def set_line_item(self, index: int, field: str, value):
        if field != "amount":
            raise ValueError(f"Deduction lines only have an 'amount' field, not {field!r}")
        self.set_amount(self.sections[_line_index(self.sections, index)].section, value)

    @property
    def total(self) -> float:
        return round(sum(self.amounts.values()), 2)

    def over_limit_sections(self) -> list[str]:
        """Sections where the amount entered exceeds the statutory limit."""
        return [
            item.section for item in self.sections
            if item.max_limit is not None and self.amounts[item.section] > item.max_limit
        ]

    def _persist(self):
        self.store.set(DEDUCTIONS_DATA, json.dumps(self.amounts))
        self.store.set(DEDUCTIONS_TOTAL, str(self.total))

    def save(self) -> float:
        self._persist()
        logger.info("Saved deductions total %.2f", self.total)
        return self.total

    def clear(self):
        self.amounts = self._initial_amounts()
        self._persist()


FORM_CLASSES = {
    SALARY: SalaryForm,
    HOUSE_PROPERTY: HousePropertyForm,
    BUSINESS_PROFESSION: BusinessProfessionForm,
    CAPITAL_GAINS: CapitalGainsForm,
    OTHER_SOURCES: OtherSourcesForm,
    DEDUCTIONS: DeductionsForm,
}


class CategoryInputStore:
    """All category forms for one user session, sharing a single store."""

    def __init__(self, store=None):
        self.store = store if store is not None else get_store()
        self.forms = {category: form_cls(self.store) for category, form_cls in FORM_CLASSES.items()}

    def form(self, category: str):
        if category not in self.forms:
            raise ValueError(f"Unknown category: {category!r}")
        return self.forms[category]

    def set_line_item(self, category: str, index: int, field: str, value, **kwargs):
        self.form(category).set_line_item(index, field, value, **kwargs)

    def total(self, category: str) -> float:
        return self.form(category).total

    def save(self, category: str) -> float:
        return self.form(category).save()

    def clear(self, category: str):
        self.form(category).clear()

    def reset_all(self):
        """Wipe every saved total and start all forms over."""
        self.store.clear()
        self.forms = {category: form_cls(self.store) for category, form_cls in FORM_CLASSES.items()}
        logger.info("Reset all saved tax data")
