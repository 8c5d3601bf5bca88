"""
Streamlit UI for workshop pricing previews.

Features:
- Purchaser context (membership level, province) in the sidebar
- Price a catalogued workshop or a manually entered cost
- Breakdown metrics and resolution trace
- Membership pricing rules and tax table reference
"""
import streamlit as st
import pandas as pd
import sys
from pathlib import Path
from datetime import datetime

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from workshop_pricing.config.settings import get_settings
from workshop_pricing.data.repositories import MembershipRuleRepository, WorkshopRepository
from workshop_pricing.engine import (
    PricingEngine,
    PurchaserContext,
    WorkshopPricingConfig,
    cents_from_dollars,
    format_currency,
)
from workshop_pricing.engine.tax_resolver import supported_regions


st.set_page_config(
    page_title="Workshop Pricing",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_repositories():
    """Get cached repositories."""
    settings = get_settings()
    return (
        MembershipRuleRepository(settings.membership_rules_csv),
        WorkshopRepository(settings.workshops_csv),
    )


rules_repo, workshop_repo = get_repositories()
engine = PricingEngine(rule_lookup=rules_repo.find_by_level)

NO_LEVEL = "(no membership)"
DEFAULT_REGION = "(not set)"


# ============================================================================
# SIDEBAR: Purchaser Context
# ============================================================================
with st.sidebar:
    st.header("👤 Purchaser")

    with st.container(border=True):
        level_choice = st.selectbox("Membership Level", [NO_LEVEL] + rules_repo.levels())
        region_codes = [region for region, _, _ in supported_regions() if len(region) <= 3]
        region_choice = st.selectbox("Province / Territory", [DEFAULT_REGION] + region_codes)

    purchaser = PurchaserContext(
        membership_level=None if level_choice == NO_LEVEL else level_choice,
        province=None if region_choice == DEFAULT_REGION else region_choice,
    )

    st.divider()
    if st.button("🔄 Reload data"):
        rules_repo.reload()
        workshop_repo.reload()
        st.rerun()


# ============================================================================
# MAIN CONTENT: TABBED INTERFACE
# ============================================================================
st.title("Workshop Pricing")
st.caption(f"v1.0 | {datetime.now().strftime('%Y-%m-%d')}")

tab1, tab2, tab3 = st.tabs(["⚡ Price Preview", "🔧 Membership Rules", "🧾 Tax Table"])


with tab1:
    col1, col2 = st.columns([1.2, 1.8], gap="large")

    with col1:
        st.subheader("Workshop")
        source = st.radio("Source", ["Catalogued workshop", "Manual entry"], horizontal=True)

        if source == "Catalogued workshop" and workshop_repo.all():
            workshops = {f"{w.workshop_id} | {w.title}": w for w in workshop_repo.all()}
            workshop = workshops[st.selectbox("Workshop", list(workshops))]
            st.caption(
                f"Paid: {workshop.is_paid} | Base: {format_currency(workshop.base_cost or 0)} | "
                f"Promo: {workshop.global_discount_percentage or 0}%"
            )
        else:
            is_paid = st.checkbox("Paid workshop", value=True)
            base_dollars = st.number_input("Base cost ($)", min_value=0.0, value=200.0, step=5.0)
            promo = st.number_input("Promotional discount (%)", min_value=0, max_value=100, value=0, step=5)
            workshop = WorkshopPricingConfig(
                is_paid=is_paid,
                base_cost=cents_from_dollars(base_dollars),
                global_discount_percentage=int(promo),
            )

    with col2:
        st.subheader("Breakdown")
        breakdown = engine.calculate(workshop, purchaser)

        with st.container(border=True):
            if breakdown.is_free:
                st.info("🎟️ Free workshop - no payment required")

            m1, m2, m3 = st.columns(3)
            m1.metric("Subtotal", format_currency(breakdown.subtotal))
            m2.metric(f"Tax ({breakdown.tax_type.value} {breakdown.tax_rate:g}%)", format_currency(breakdown.tax_amount))
            m3.metric("Total", format_currency(breakdown.total))

            lines_df = pd.DataFrame([
                {"Line": "Base cost", "Amount": format_currency(breakdown.base_cost)},
                {"Line": f"Membership ({breakdown.membership_discount}% paid)",
                 "Amount": f"-{format_currency(breakdown.membership_discount_amount)}"},
                {"Line": f"Promotion ({breakdown.global_discount}% off)",
                 "Amount": f"-{format_currency(breakdown.global_discount_amount)}"},
                {"Line": "Subtotal", "Amount": format_currency(breakdown.subtotal)},
                {"Line": "Tax", "Amount": format_currency(breakdown.tax_amount)},
                {"Line": "Total", "Amount": format_currency(breakdown.total)},
            ])
            st.dataframe(lines_df, hide_index=True, use_container_width=True)

        with st.expander("🔍 Resolution Details"):
            st.text(breakdown.get_trace_text())


with tab2:
    st.subheader("Membership Pricing Rules")
    rules_df = pd.DataFrame([
        {"Level": r.membership_level, "% Paid": r.percentage_paid, "Updated": r.updated_at}
        for r in rules_repo.all()
    ])
    if rules_df.empty:
        st.warning("⚠️ No membership pricing rules loaded")
    else:
        st.dataframe(rules_df, hide_index=True, use_container_width=True)


with tab3:
    st.subheader("Sales Tax by Region")
    tax_df = pd.DataFrame(
        [{"Region": region, "Rate (%)": rate, "Type": tax_type.value} for region, rate, tax_type in supported_regions()]
    )
    st.dataframe(tax_df, hide_index=True, use_container_width=True)
    st.caption("Unrecognized or missing regions are charged GST at 5%.")
