"""Old vs new regime comparison and the summary views."""

import pytest

from taxdesk.comparison import (
    compare_regimes, compare_stored_regimes, build_comparison_rows,
    build_income_summary, recommendation_text, format_currency,
)
from taxdesk.income_forms import CategoryInputStore
from taxdesk.models import SALARY, OTHER_SOURCES, DEDUCTIONS, INCOME_CATEGORIES
from taxdesk.storage import DEDUCTIONS_TOTAL
from taxdesk.tax_engine import OLD, NEW


def test_end_to_end_scenario():
    comparison = compare_regimes(1_460_000, 150_000)

    old = comparison.old
    assert old.taxable_income == 1_310_000
    assert old.slab_tax == pytest.approx(205_500)
    assert old.cess == pytest.approx(8_220)
    assert old.surcharge == 0
    assert old.final_tax == pytest.approx(213_720)

    new = comparison.new
    assert new.deduction == 75_000
    assert new.taxable_income == 1_385_000
    assert new.slab_tax == pytest.approx(117_000)
    assert new.cess == pytest.approx(4_680)
    assert new.surcharge == 0
    assert new.final_tax == pytest.approx(121_680)

    assert comparison.recommended == NEW
    assert comparison.savings == pytest.approx(92_040)


def test_old_regime_recommended_when_strictly_cheaper():
    comparison = compare_regimes(1_000_000, 600_000)
    assert comparison.old.final_tax < comparison.new.final_tax
    assert comparison.recommended == OLD
    assert comparison.recommended_result is comparison.old


def test_tie_goes_to_new_regime():
    comparison = compare_regimes(200_000, 0)
    assert comparison.old.final_tax == comparison.new.final_tax == 0
    assert comparison.recommended == NEW
    assert recommendation_text(comparison) == "Both regimes result in the same tax"


def test_recommendation_text_names_savings():
    comparison = compare_regimes(1_460_000, 150_000)
    assert recommendation_text(comparison) == "New Regime saves you Rs. 92,040"


def test_comparison_rows_order_and_values():
    comparison = compare_regimes(1_460_000, 150_000)
    rows = build_comparison_rows(comparison)
    assert [row["particulars"] for row in rows] == [
        "Gross Total Income", "Deduction", "Taxable Income",
        "Tax as per Slabs", "Cess @ 4%", "Surcharge", "Final Tax",
    ]
    assert rows[0]["new_regime"] == rows[0]["old_regime"] == 1_460_000
    assert rows[1]["new_regime"] == 75_000
    assert rows[1]["old_regime"] == 150_000
    assert rows[-1]["new_regime"] == pytest.approx(121_680)


class TestStoredFigures:

    def _fill(self, store):
        inputs = CategoryInputStore(store)
        inputs.set_line_item(SALARY, 0, "income", 900_000)
        inputs.save(SALARY)
        inputs.set_line_item(OTHER_SOURCES, 0, "amount_received", 560_000)
        inputs.save(OTHER_SOURCES)
        inputs.set_line_item(DEDUCTIONS, 0, "amount", 150_000)
        return inputs

    def test_compare_stored_regimes(self, store):
        self._fill(store)
        comparison = compare_stored_regimes(store)
        assert comparison.old.gross_total_income == 1_460_000
        assert comparison.new.final_tax == pytest.approx(121_680)

    def test_comparison_follows_later_saves(self, store):
        inputs = self._fill(store)
        assert compare_stored_regimes(store).old.gross_total_income == 1_460_000

        inputs.set_line_item(SALARY, 0, "income", 1_000_000)
        assert compare_stored_regimes(store).old.gross_total_income == 1_460_000
        inputs.save(SALARY)
        assert compare_stored_regimes(store).old.gross_total_income == 1_560_000

    def test_summary_defaults_to_recommended_regime(self, store):
        self._fill(store)
        summary = build_income_summary(store)
        assert set(summary.heads) == set(INCOME_CATEGORIES)
        assert summary.gross_total_income == 1_460_000
        assert summary.deductions_entered == 150_000
        assert summary.result.regime == NEW
        assert summary.result.final_tax == pytest.approx(121_680)

    def test_summary_for_old_regime(self, store):
        self._fill(store)
        summary = build_income_summary(store, OLD)
        assert summary.result.taxable_income == 1_310_000
        assert summary.result.final_tax == pytest.approx(213_720)

    def test_summary_rejects_unknown_regime(self, store):
        with pytest.raises(ValueError):
            build_income_summary(store, "flat")

    def test_huge_deductions_clamp_taxable_income(self, store):
        self._fill(store)
        store.set(DEDUCTIONS_TOTAL, "99999999")
        comparison = compare_stored_regimes(store)
        assert comparison.old.taxable_income == 0
        assert comparison.new.taxable_income == 1_385_000


@pytest.mark.parametrize("amount, expected", [
    (0, "0"),
    (999, "999"),
    (12500, "12,500"),
    (100000, "1,00,000"),
    (125000, "1,25,000"),
    (999999, "9,99,999"),
    (1250000, "12,50,000"),
    (12345678, "1,23,45,678"),
    (-1250000, "-12,50,000"),
])
def test_format_currency(amount, expected):
    assert format_currency(amount) == expected
