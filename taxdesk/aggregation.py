"""
Income Aggregation
==================
Reads the per-category totals back out of the shared store. Every call goes
to the store; nothing is cached between reads, since another view (or another
browser tab) may have saved a new total since the last one.
"""

from __future__ import annotations

import json
import logging

from taxdesk.models import (
    SALARY, HOUSE_PROPERTY, BUSINESS_PROFESSION, CAPITAL_GAINS, OTHER_SOURCES,
    to_amount,
)
from taxdesk.storage import (
    SALARY_TOTAL, HOUSE_PROPERTY_TOTAL, BUSINESS_PROFESSION_TOTAL,
    CAPITAL_GAINS_TOTAL, OTHER_SOURCES_TOTAL, DEDUCTIONS_TOTAL, DEDUCTIONS_DATA,
)

logger = logging.getLogger(__name__)

CATEGORY_KEYS = {
    SALARY: SALARY_TOTAL,
    HOUSE_PROPERTY: HOUSE_PROPERTY_TOTAL,
    BUSINESS_PROFESSION: BUSINESS_PROFESSION_TOTAL,
    CAPITAL_GAINS: CAPITAL_GAINS_TOTAL,
    OTHER_SOURCES: OTHER_SOURCES_TOTAL,
}


def read_amount(store, key: str) -> float:
    """Read one stored total; absent or unparseable values count as 0."""
    return to_amount(store.get(key))


def read_income_heads(store) -> dict[str, float]:
    """Current total for each of the five heads of income."""
    return {category: read_amount(store, key) for category, key in CATEGORY_KEYS.items()}


def read_gti(store) -> float:
    """Gross Total Income: the sum of every persisted category total."""
    return sum(read_income_heads(store).values())


def read_deductions_total(store) -> float:
    return read_amount(store, DEDUCTIONS_TOTAL)


def read_deductions_data(store) -> dict[str, float]:
    """Section -> amount map saved by the deductions form.

    A corrupt or non-object payload is logged and treated as empty.
    """
    raw = store.get(DEDUCTIONS_DATA)
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("Ignoring corrupt %s entry: %s", DEDUCTIONS_DATA, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring %s entry of type %s", DEDUCTIONS_DATA, type(data).__name__)
        return {}
    return {str(section): to_amount(amount) for section, amount in data.items()}
