"""Reading category totals back out of the shared store."""

import json

import pytest

from taxdesk.aggregation import (
    read_gti, read_income_heads, read_deductions_total, read_deductions_data,
)
from taxdesk.income_forms import SalaryForm, OtherSourcesForm
from taxdesk.models import SALARY, OTHER_SOURCES, CAPITAL_GAINS
from taxdesk.storage import (
    SALARY_TOTAL, HOUSE_PROPERTY_TOTAL, BUSINESS_PROFESSION_TOTAL,
    CAPITAL_GAINS_TOTAL, OTHER_SOURCES_TOTAL, DEDUCTIONS_TOTAL, DEDUCTIONS_DATA,
)


def _seed(store):
    store.set(SALARY_TOTAL, "900000")
    store.set(HOUSE_PROPERTY_TOTAL, "150000")
    store.set(BUSINESS_PROFESSION_TOTAL, "300000")
    store.set(CAPITAL_GAINS_TOTAL, "75000")
    store.set(OTHER_SOURCES_TOTAL, "35000")


def test_gti_is_sum_of_all_five_totals(store):
    _seed(store)
    assert read_gti(store) == 1460000


def test_empty_store_reads_as_zero(store):
    assert read_gti(store) == 0
    assert read_deductions_total(store) == 0
    assert set(read_income_heads(store).values()) == {0.0}


def test_unparseable_totals_default_to_zero(store):
    _seed(store)
    store.set(CAPITAL_GAINS_TOTAL, "not a number")
    store.set(OTHER_SOURCES_TOTAL, "")
    assert read_gti(store) == 1350000


def test_saving_one_category_changes_only_that_head(store):
    _seed(store)
    before = read_income_heads(store)

    form = OtherSourcesForm(store)
    form.set_line_item(0, "amount_received", 12000)
    form.set_line_item(2, "amount_received", 8000)
    form.save()

    after = read_income_heads(store)
    assert after[OTHER_SOURCES] == 20000
    for category in before:
        if category != OTHER_SOURCES:
            assert after[category] == before[category]
    assert read_gti(store) == 1460000 - 35000 + 20000


def test_every_read_sees_latest_save(store):
    form = SalaryForm(store)
    form.set_line_item(0, "income", 600000)
    assert read_gti(store) == 0  # not saved yet

    form.save()
    assert read_gti(store) == 600000

    form.set_line_item(0, "income", 700000)
    form.save()
    assert read_income_heads(store)[SALARY] == 700000


def test_stale_values_from_another_writer_are_picked_up(store):
    _seed(store)
    assert read_income_heads(store)[CAPITAL_GAINS] == 75000
    store.set(CAPITAL_GAINS_TOTAL, "125000")
    assert read_income_heads(store)[CAPITAL_GAINS] == 125000


class TestDeductionsData:

    def test_reads_saved_map(self, store):
        store.set(DEDUCTIONS_DATA, json.dumps({"80C": 150000, "80D": "25000"}))
        assert read_deductions_data(store) == {"80C": 150000.0, "80D": 25000.0}

    def test_missing_map_is_empty(self, store):
        assert read_deductions_data(store) == {}

    @pytest.mark.parametrize("raw", ["{not json", "[1, 2, 3]", "42"])
    def test_corrupt_map_is_empty(self, store, raw, caplog):
        store.set(DEDUCTIONS_DATA, raw)
        assert read_deductions_data(store) == {}
        assert "deductions_data" in caplog.text

    def test_total_reads_from_its_own_key(self, store):
        store.set(DEDUCTIONS_TOTAL, "175000")
        assert read_deductions_total(store) == 175000
