from datetime import date

import streamlit as st

from api_client import ApiClient
from services.items_report_service import (
    ITEM_COLUMNS,
    build_items_report_excel,
    fetch_item_report,
    fetch_route_names,
    filter_item_rows,
    items_frame,
    items_report_filename,
    sort_item_rows,
)

st.set_page_config(page_title="Items Report", page_icon="📦", layout="wide")
st.sidebar.header("📦 Items Report")
st.title("📦 Items Report")

if "api_client" not in st.session_state:
    st.session_state["api_client"] = ApiClient()

client: ApiClient = st.session_state["api_client"]

SORT_KEYS = {
    "Route": "route",
    "Product Name": "product_name",
    "Total Quantity": "total_quantity",
}

# -----------------------------------------------------------------------------
# Filters
# -----------------------------------------------------------------------------
if "route_names" not in st.session_state:
    ok, msg, route_names = fetch_route_names(client)
    if ok:
        st.session_state["route_names"] = route_names
    else:
        st.error(msg)
else:
    route_names = st.session_state["route_names"]

col_from, col_to = st.columns(2)
with col_from:
    from_date = st.date_input("From Date", value=date.today(), key="items_from_date")
with col_to:
    to_date = st.date_input("To Date", value=date.today(), key="items_to_date")

selected_routes = st.multiselect(
    "Routes",
    options=route_names,
    placeholder="All routes",
    key="items_routes",
)
search = st.text_input("Search route or product", key="items_search")

col_sort, col_dir = st.columns([2, 1])
with col_sort:
    sort_label = st.selectbox("Sort by", options=["(none)"] + ITEM_COLUMNS, key="items_sort")
with col_dir:
    descending = st.toggle("Descending", key="items_sort_desc")

# -----------------------------------------------------------------------------
# Data
# -----------------------------------------------------------------------------
fetch_key = (from_date.isoformat(), to_date.isoformat(), tuple(selected_routes))

refresh = st.button("🔄 Refresh", key="items_refresh")

if refresh or st.session_state.get("items_report_key") != fetch_key:
    with st.spinner("Loading item report..."):
        ok, msg, fetched = fetch_item_report(
            client,
            from_date.isoformat(),
            to_date.isoformat(),
            selected_routes,
        )
    st.session_state["items_report_key"] = fetch_key
    st.session_state["items_report_rows"] = fetched
    st.session_state["items_report_error"] = None if ok else msg

if st.session_state["items_report_error"]:
    st.error(st.session_state["items_report_error"])

rows = filter_item_rows(st.session_state["items_report_rows"], selected_routes, search)
if sort_label in SORT_KEYS:
    rows = sort_item_rows(rows, SORT_KEYS[sort_label], descending=descending)

if not rows:
    st.info("No item report data for the selected filters.")
    st.stop()

st.caption(f"{len(rows)} rows")
st.dataframe(items_frame(rows), hide_index=True, width="stretch")

try:
    excel_data = build_items_report_excel(rows, selected_routes)
except Exception as e:
    st.error(f"Failed to generate XLSX: {e}")
else:
    st.download_button(
        "Export to Excel",
        data=excel_data,
        file_name=items_report_filename(from_date.isoformat(), to_date.isoformat()),
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
