import streamlit as st

from taxdesk.config import configure_logging
from taxdesk.storage import get_store
from taxdesk.models import (
    SALARY, HOUSE_PROPERTY, BUSINESS_PROFESSION, CAPITAL_GAINS, OTHER_SOURCES, DEDUCTIONS,
    CATEGORY_LABELS, INCOME_CATEGORIES,
)
from taxdesk.income_forms import CategoryInputStore, ASSET_CLASSES, PRESUMPTIVE, REGULAR
from taxdesk.aggregation import read_income_heads, read_deductions_total
from taxdesk.comparison import (
    compare_stored_regimes, build_comparison_rows, build_income_summary,
    recommendation_text, format_currency,
)
from taxdesk.tax_engine import new_regime_slab_info, OLD, NEW

configure_logging()

# --- 1. PAGE CONFIGURATION ---
st.set_page_config(
    page_title="TaxDesk - Income & Regime Comparison",
    page_icon="https://api.iconify.design/mdi/calculator-variant.svg?color=%23a855f7",
    layout="wide",
    initial_sidebar_state="expanded",
)

# --- 2. THEME CSS ---
st.markdown("""
<style>
@import url('https://fonts.googleapis.com/css2?family=Inter:wght@300;400;500;600;700;800&display=swap');

.stApp {
    background: #0a0a0f !important;
    font-family: 'Inter', -apple-system, BlinkMacSystemFont, sans-serif !important;
    color: #e2e8f0 !important;
}
#MainMenu, footer, .stDeployButton { display: none !important; }

section[data-testid="stSidebar"] {
    background: linear-gradient(180deg, #0d0d14 0%, #12121c 50%, #0d0d14 100%) !important;
    border-right: 1px solid rgba(139, 92, 246, 0.1) !important;
}
section[data-testid="stSidebar"] * { color: #c4b5fd !important; }

.stButton button {
    background: linear-gradient(135deg, #7c3aed, #a855f7, #7c3aed) !important;
    border: none !important;
    color: #ffffff !important;
    border-radius: 12px !important;
    font-weight: 600 !important;
}

.hero { text-align: center; padding: 1.5rem 0 1rem; }
.hero-title {
    font-size: 2.2rem; font-weight: 800;
    background: linear-gradient(135deg, #a855f7, #6366f1, #a855f7);
    -webkit-background-clip: text; -webkit-text-fill-color: transparent; background-clip: text;
    margin-bottom: 0.25rem; letter-spacing: -0.03em;
}
.hero-subtitle { font-size: 0.95rem; color: #64748b !important; font-weight: 400; }

.info-banner {
    background: rgba(139, 92, 246, 0.06);
    border: 1px solid rgba(139, 92, 246, 0.15);
    border-radius: 14px;
    padding: 0.85rem 1.25rem;
    font-size: 0.88rem;
    color: #a78bfa !important;
    margin-bottom: 1rem;
}
.info-banner strong { color: #c4b5fd !important; }
</style>
""", unsafe_allow_html=True)


# --- 3. SESSION STATE INIT ---
store = get_store()

if "forms" not in st.session_state:
    st.session_state.forms = CategoryInputStore(store)

forms = st.session_state.forms

VIEWS = [CATEGORY_LABELS[c] for c in INCOME_CATEGORIES] + ["Deductions", "Regime Comparison", "Total Income & Tax"]


def rupees(amount: float) -> str:
    return f"Rs. {format_currency(amount)}"


def amount_input(label: str, value: float, key: str) -> float:
    return st.number_input(label, min_value=0.0, value=float(value), step=1000.0, key=key)


WIDGET_PREFIXES = {
    SALARY: "sal_",
    HOUSE_PROPERTY: "hp_",
    BUSINESS_PROFESSION: "pgbp_",
    CAPITAL_GAINS: "cg_",
    OTHER_SOURCES: "os_",
    DEDUCTIONS: "ded_",
}


def reset_widgets(category: str):
    """Drop widget state so inputs re-render from the form's line items."""
    prefix = WIDGET_PREFIXES[category]
    for key in [k for k in st.session_state.keys() if isinstance(k, str) and k.startswith(prefix)]:
        del st.session_state[key]


def save_button(category: str):
    if st.button(f"Save {CATEGORY_LABELS[category]}", key=f"save_{category}", type="primary"):
        total = forms.save(category)
        st.toast(f"{CATEGORY_LABELS[category]} saved: {rupees(total)}")


def clear_button(category: str):
    if st.button("Clear Form", key=f"clear_{category}"):
        forms.clear(category)
        reset_widgets(category)
        st.rerun()


# --- 4. SIDEBAR ---
with st.sidebar:
    st.markdown("""
    <div style="text-align:center; padding: 1.25rem 0 0.5rem;">
        <div style="font-size: 1.15rem; font-weight: 700; color: #f1f5f9 !important;">TaxDesk</div>
        <div style="font-size: 0.7rem; color: rgba(196, 181, 253, 0.5) !important; letter-spacing: 0.08em; text-transform: uppercase;">AY 2025-26</div>
    </div>
    """, unsafe_allow_html=True)
    st.markdown("---")

    view = st.radio("View", VIEWS, label_visibility="collapsed")

    st.markdown("---")
    # Read fresh on every rerun: another tab may have saved since the last one
    heads = read_income_heads(store)
    st.caption("Saved totals")
    for category, total in heads.items():
        st.caption(f"{CATEGORY_LABELS[category]}: {rupees(total)}")
    st.caption(f"Deductions: {rupees(read_deductions_total(store))}")

    st.markdown("---")
    if st.button("Reset saved data", key="reset_all"):
        forms.reset_all()
        for category in WIDGET_PREFIXES:
            reset_widgets(category)
        st.rerun()


# --- 5. MAIN CONTENT ---
st.markdown(f"""
<div class="hero">
    <div class="hero-title">{view}</div>
    <div class="hero-subtitle">Income aggregation and Old vs New regime comparison</div>
</div>
""", unsafe_allow_html=True)


if view == CATEGORY_LABELS[SALARY]:
    form = forms.form(SALARY)
    for i, row in enumerate(form.rows):
        col1, col2, col3 = st.columns([2, 2, 1])
        with col1:
            form.set_line_item(i, "income", amount_input(f"{row.particulars} - Income", row.income, f"sal_inc_{i}"))
        with col2:
            form.set_line_item(i, "exemption", amount_input(f"{row.particulars} - Exemption", row.exemption, f"sal_ex_{i}"))
        with col3:
            st.metric("Taxable", rupees(row.taxable_income))

    with st.expander("HRA exemption calculator"):
        rent = amount_input("Monthly rent paid", 0.0, "hra_rent")
        metro = st.checkbox("Metro city", value=True, key="hra_metro")
        if st.button("Apply to HRA row"):
            exemption = form.apply_hra_exemption(rent, metro)
            st.session_state.pop("sal_ex_1", None)
            st.toast(f"HRA exemption: {rupees(exemption)}")
            st.rerun()

    col1, col2, col3 = st.columns(3)
    col1.metric("Gross Salary", rupees(form.gross_income))
    col2.metric("Exemptions", rupees(form.total_exemption))
    col3.metric("Taxable Salary", rupees(form.total))
    save_button(SALARY)
    clear_button(SALARY)

elif view == CATEGORY_LABELS[HOUSE_PROPERTY]:
    form = forms.form(HOUSE_PROPERTY)
    for i, prop in enumerate(form.properties):
        with st.container(border=True):
            st.markdown(f"**Property {i + 1}**")
            form.set_line_item(i, "name", st.text_input("Property name", prop.name, key=f"hp_name_{i}"))
            form.set_line_item(i, "address", st.text_input("Address", prop.address, key=f"hp_addr_{i}"))
            col1, col2, col3 = st.columns(3)
            with col1:
                form.set_line_item(i, "rental_income", amount_input("Annual rent", prop.rental_income, f"hp_rent_{i}"))
            with col2:
                form.set_line_item(i, "municipal_tax", amount_input("Municipal tax", prop.municipal_tax, f"hp_mt_{i}"))
            with col3:
                form.set_line_item(i, "interest_paid", amount_input("Interest on loan", prop.interest_paid, f"hp_int_{i}"))
            st.caption(f"Standard deduction (30%): {rupees(prop.standard_deduction)}  |  Taxable rent: {rupees(prop.taxable_rent)}")
            if len(form.properties) > 1 and st.button("Remove", key=f"hp_rm_{i}"):
                form.remove_line_item(i)
                reset_widgets(HOUSE_PROPERTY)
                st.rerun()

    if st.button("Add Property"):
        form.add_line_item()
        st.rerun()
    st.metric("Total House Property Income", rupees(form.total))
    save_button(HOUSE_PROPERTY)
    clear_button(HOUSE_PROPERTY)

elif view == CATEGORY_LABELS[BUSINESS_PROFESSION]:
    form = forms.form(BUSINESS_PROFESSION)
    tab_presumptive, tab_regular = st.tabs(["Presumptive Taxation", "Regular Taxation"])
    with tab_presumptive:
        st.caption("Section 44AD/44ADA")
        form.set_line_item(PRESUMPTIVE, "gross_receipts", amount_input("Gross receipts / turnover", form.presumptive.gross_receipts, "pgbp_p_rec"))
        form.set_line_item(PRESUMPTIVE, "presumptive_rate", st.number_input("Presumptive rate (%)", min_value=0.0, max_value=100.0, value=form.presumptive.presumptive_rate, key="pgbp_p_rate"))
        st.metric("Presumptive Income", rupees(form.presumptive.presumptive_income))
    with tab_regular:
        form.set_line_item(REGULAR, "gross_receipts", amount_input("Gross receipts", form.regular.gross_receipts, "pgbp_r_rec"))
        form.set_line_item(REGULAR, "expenses", amount_input("Expenses", form.regular.expenses, "pgbp_r_exp"))
        st.metric("Net Income", rupees(form.regular.net_income))

    st.markdown('<div class="info-banner">The higher of presumptive and regular income is saved.</div>', unsafe_allow_html=True)
    st.metric("Business & Profession Income", rupees(form.total))
    save_button(BUSINESS_PROFESSION)
    clear_button(BUSINESS_PROFESSION)

elif view == CATEGORY_LABELS[CAPITAL_GAINS]:
    form = forms.form(CAPITAL_GAINS)
    tabs = st.tabs(["Shares", "Mutual Funds", "Property", "Crypto"])
    for tab, asset_class in zip(tabs, ASSET_CLASSES):
        with tab:
            for i, asset in enumerate(form.assets[asset_class]):
                with st.container(border=True):
                    prefix = f"cg_{asset_class}_{i}"
                    form.set_line_item(i, "asset_name", st.text_input("Asset name", asset.asset_name, key=f"{prefix}_name"), asset_class=asset_class)
                    col1, col2 = st.columns(2)
                    with col1:
                        form.set_line_item(i, "date_of_purchase", st.text_input("Date of purchase", asset.date_of_purchase, key=f"{prefix}_dop"), asset_class=asset_class)
                    with col2:
                        form.set_line_item(i, "date_of_sale", st.text_input("Date of sale", asset.date_of_sale, key=f"{prefix}_dos"), asset_class=asset_class)
                    col1, col2, col3 = st.columns(3)
                    with col1:
                        form.set_line_item(i, "purchase_price", amount_input("Purchase price", asset.purchase_price, f"{prefix}_pp"), asset_class=asset_class)
                    with col2:
                        form.set_line_item(i, "sale_price", amount_input("Sale price", asset.sale_price, f"{prefix}_sp"), asset_class=asset_class)
                    with col3:
                        form.set_line_item(i, "expenses", amount_input("Expenses", asset.expenses, f"{prefix}_exp"), asset_class=asset_class)
                    st.caption(f"Capital gain: {rupees(asset.capital_gain)}")
                    if len(form.assets[asset_class]) > 1 and st.button("Remove", key=f"{prefix}_rm"):
                        form.remove_line_item(i, asset_class=asset_class)
                        reset_widgets(CAPITAL_GAINS)
                        st.rerun()
            if st.button("Add Asset", key=f"cg_add_{asset_class}"):
                form.add_line_item(asset_class=asset_class)
                st.rerun()
            st.metric("Subtotal", rupees(form.class_total(asset_class)))

    st.metric("Total Capital Gains", rupees(form.total))
    save_button(CAPITAL_GAINS)
    clear_button(CAPITAL_GAINS)

elif view == CATEGORY_LABELS[OTHER_SOURCES]:
    form = forms.form(OTHER_SOURCES)
    for i, row in enumerate(form.rows):
        form.set_line_item(i, "amount_received", amount_input(row.particulars, row.amount_received, f"os_{i}"))
    st.metric("Total Other Sources", rupees(form.total))
    save_button(OTHER_SOURCES)
    clear_button(OTHER_SOURCES)

elif view == "Deductions":
    form = forms.form(DEDUCTIONS)
    st.markdown('<div class="info-banner">Chapter VI-A deductions are <strong>saved automatically</strong> as you type. Limits are shown for reference only.</div>', unsafe_allow_html=True)
    for i, item in enumerate(form.sections):
        col1, col2 = st.columns([3, 1])
        with col1:
            value = amount_input(f"Section {item.section}", form.amounts[item.section], f"ded_{item.section}")
            if value != form.amounts[item.section]:
                form.set_line_item(i, "amount", value)
        with col2:
            st.caption(f"Max: {rupees(item.max_limit) if item.max_limit is not None else 'No limit'}")

    over = form.over_limit_sections()
    if over:
        st.warning(f"Amounts above the statutory limit in: {', '.join(over)}")
    st.metric("Total Deductions", rupees(form.total))
    if st.button("Save Deductions", type="primary"):
        form.save()
        st.toast("Deductions saved")

elif view == "Regime Comparison":
    comparison = compare_stored_regimes(store)
    rows = build_comparison_rows(comparison)
    st.table([
        {
            "Particulars": row["particulars"],
            "New Regime (Rs.)": format_currency(row["new_regime"]),
            "Old Regime (Rs.)": format_currency(row["old_regime"]),
        }
        for row in rows
    ])

    col1, col2, col3 = st.columns(3)
    col1.metric("Recommended", "New Regime" if comparison.recommended == NEW else "Old Regime")
    col2.metric("Effective rate (new)", f"{comparison.new.effective_rate:.2f}%")
    col3.metric("Effective rate (old)", f"{comparison.old.effective_rate:.2f}%")
    st.success(recommendation_text(comparison))

    slab = new_regime_slab_info(comparison.new.taxable_income)
    next_slab = f", next slab from {rupees(slab['next_slab'])}" if slab["next_slab"] else ""
    st.caption(f"New regime slab: {slab['slab']} at {slab['rate']}{next_slab}")

elif view == "Total Income & Tax":
    regime_choice = st.radio("Regime", ["Recommended", "New Regime", "Old Regime"], horizontal=True)
    regime = {"Recommended": None, "New Regime": NEW, "Old Regime": OLD}[regime_choice]
    summary = build_income_summary(store, regime)
    result = summary.result

    st.subheader("Heads of Income")
    st.table([
        {"Head of Income": CATEGORY_LABELS[category], "Amount (Rs.)": format_currency(total)}
        for category, total in summary.heads.items()
    ] + [{"Head of Income": "Gross Total Income", "Amount (Rs.)": format_currency(summary.gross_total_income)}])

    st.subheader(f"Tax Computation ({'New' if result.regime == NEW else 'Old'} Regime)")
    st.table([
        {"Particulars": "Deductions entered", "Amount (Rs.)": format_currency(summary.deductions_entered)},
        {"Particulars": "Deductions allowed", "Amount (Rs.)": format_currency(result.deduction)},
        {"Particulars": "Total Income", "Amount (Rs.)": format_currency(result.taxable_income)},
        {"Particulars": "Tax", "Amount (Rs.)": format_currency(result.slab_tax)},
        {"Particulars": "Cess @ 4%", "Amount (Rs.)": format_currency(result.cess)},
        {"Particulars": "Surcharge", "Amount (Rs.)": format_currency(result.surcharge)},
        {"Particulars": "Total Tax", "Amount (Rs.)": format_currency(result.final_tax)},
    ])


# --- 6. DISCLAIMER ---
st.markdown("---")
st.caption("Figures are indicative. 87A rebate and marginal relief are not applied.")
