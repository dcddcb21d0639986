import logging
from datetime import date

import streamlit as st

from api_client import ApiClient
from element_component import export_buttons, report_header, report_table
from services.brand_report_service import fetch_brand_report, fetch_unique_brands, no_products_message
from services.request_tracker import RequestTracker

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

st.set_page_config(
    page_title="Brand Wise Report",
    page_icon="🥛",
    layout="wide",
)

st.sidebar.header("🥛 Brand Wise Report")
st.title("Brand Wise Report")

ORDER_TYPES = {
    "AM": "AM Orders",
    "Evening": "Evening Orders (PM + Evening)",
}

if "api_client" not in st.session_state:
    st.session_state["api_client"] = ApiClient()

if "brand_report_tracker" not in st.session_state:
    st.session_state["brand_report_tracker"] = RequestTracker()

st.session_state.setdefault("brand_report_result", None)
st.session_state.setdefault("brand_report_message", None)

client: ApiClient = st.session_state["api_client"]
tracker: RequestTracker = st.session_state["brand_report_tracker"]

# -----------------------------------------------------------------------------
# Filters
# -----------------------------------------------------------------------------
if "brands" not in st.session_state:
    ok, msg, brands = fetch_unique_brands(client)
    if ok:
        st.session_state["brands"] = brands
    else:
        # not cached, so the next rerun tries again
        st.error(msg)
else:
    brands = st.session_state["brands"]

col_from, col_to, col_type, col_brand = st.columns(4)
with col_from:
    from_date = st.date_input("From Date", value=date.today(), key="brand_from_date")
with col_to:
    to_date = st.date_input("To Date", value=date.today(), key="brand_to_date")
with col_type:
    order_type = st.selectbox(
        "Order Type",
        options=list(ORDER_TYPES.keys()),
        format_func=ORDER_TYPES.get,
        key="brand_order_type",
    )
with col_brand:
    selected_brand = st.selectbox(
        "Brand",
        options=brands,
        index=0 if brands else None,
        placeholder="Select Brand",
        key="brand_selected",
    )

if not brands:
    st.warning("No brands available.")
    st.stop()

if not selected_brand:
    st.info("Select a brand to see the report.")
    st.stop()

if from_date > to_date:
    st.error("From Date must be on or before To Date.")
    st.stop()

filters = {
    "from_date": from_date.isoformat(),
    "to_date": to_date.isoformat(),
    "order_type": order_type,
    "brand": selected_brand,
}

# -----------------------------------------------------------------------------
# Fetch on filter change
# -----------------------------------------------------------------------------
refresh = st.button("🔄 Refresh")

if refresh or tracker.needs_refresh(filters):
    token = tracker.begin(filters)
    st.session_state["brand_report_result"] = None

    with st.spinner(f"Loading {order_type} orders..."):
        ok, msg, result = fetch_brand_report(client, **filters)

    if tracker.accept(token):
        st.session_state["brand_report_result"] = result
        st.session_state["brand_report_message"] = (ok, msg, result.report.is_empty)

# -----------------------------------------------------------------------------
# Notifications + report
# -----------------------------------------------------------------------------
result = st.session_state["brand_report_result"]
message = st.session_state["brand_report_message"]

if message:
    ok, msg, is_empty = message
    if not ok:
        st.error(msg)
    elif is_empty:
        st.info(msg)
    else:
        st.success(msg)

if result is None or result.report.is_empty:
    if not message:
        st.info(no_products_message(result))
    st.stop()

st.divider()
report_header(result)
export_buttons(result)
report_table(result)
