from datetime import date

import streamlit as st

from api_client import ApiClient
from services.tally_report_service import (
    build_tally_receipt_excel,
    fetch_receipts,
    receipts_frame,
    receipts_total,
    tally_filename,
)
from utils.formatting import format_rupees

st.set_page_config(page_title="Tally Receipt Report", page_icon="💳", layout="wide")
st.sidebar.header("💳 Tally Receipt Report")
st.title("💳 Tally Receipt Report")
st.caption("Export receipt data for Tally import")

if "api_client" not in st.session_state:
    st.session_state["api_client"] = ApiClient()

client: ApiClient = st.session_state["api_client"]

# -----------------------------------------------------------------------------
# Filters
# -----------------------------------------------------------------------------
col_from, col_to = st.columns(2)
with col_from:
    start_date = st.date_input("Start Date", value=date.today(), key="receipt_start_date")
with col_to:
    end_date = st.date_input("End Date", value=date.today(), key="receipt_end_date")

if end_date < start_date:
    st.error("End date cannot be before start date")
    st.stop()

# -----------------------------------------------------------------------------
# Data
# -----------------------------------------------------------------------------
fetch_key = (start_date.isoformat(), end_date.isoformat())
refresh = st.button("🔄 Refresh", key="receipt_refresh")

if refresh or st.session_state.get("receipt_report_key") != fetch_key:
    with st.spinner("Loading receipts..."):
        ok, msg, fetched = fetch_receipts(client, *fetch_key)
    st.session_state["receipt_report_key"] = fetch_key
    st.session_state["receipt_report"] = (ok, msg, fetched)

ok, msg, receipts = st.session_state["receipt_report"]

if not ok:
    st.error(msg)
    st.stop()

if not receipts:
    st.info(msg)
    st.stop()

col_count, col_total = st.columns(2)
col_count.metric("Receipts", len(receipts))
col_total.metric("Total", format_rupees(float(receipts_total(receipts))))

try:
    excel_data = build_tally_receipt_excel(receipts)
except Exception as e:
    st.error(f"Failed to generate XLSX: {e}")
else:
    st.download_button(
        "Export to Excel",
        data=excel_data,
        file_name=tally_filename("Receipt"),
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )

st.dataframe(receipts_frame(receipts), hide_index=True, width="stretch")
