from datetime import date

import streamlit as st

from api_client import ApiClient
from services.tally_report_service import (
    build_tally_invoice_excel,
    fetch_invoices,
    format_unix_date,
    invoice_items_frame,
    invoices_frame,
    tally_filename,
)
from utils.formatting import format_rupees

st.set_page_config(page_title="Tally Invoice Report", page_icon="🧾", layout="wide")
st.sidebar.header("🧾 Tally Invoice Report")
st.title("🧾 Tally Invoice Report")
st.caption("Export sales invoices for Tally import")

if "api_client" not in st.session_state:
    st.session_state["api_client"] = ApiClient()

client: ApiClient = st.session_state["api_client"]

# -----------------------------------------------------------------------------
# Filters
# -----------------------------------------------------------------------------
col_from, col_to = st.columns(2)
with col_from:
    start_date = st.date_input("Start Date", value=date.today(), key="invoice_start_date")
with col_to:
    end_date = st.date_input("End Date", value=date.today(), key="invoice_end_date")

if end_date < start_date:
    st.error("Invalid date range")
    st.stop()

# -----------------------------------------------------------------------------
# Data
# -----------------------------------------------------------------------------
fetch_key = (start_date.isoformat(), end_date.isoformat())
refresh = st.button("🔄 Refresh", key="invoice_refresh")

if refresh or st.session_state.get("invoice_report_key") != fetch_key:
    with st.spinner("Loading invoices..."):
        ok, msg, fetched = fetch_invoices(client, *fetch_key)
    st.session_state["invoice_report_key"] = fetch_key
    st.session_state["invoice_report"] = (ok, msg, fetched)

ok, msg, invoices = st.session_state["invoice_report"]

if not ok:
    st.error(msg)
    st.stop()

if not invoices:
    st.info(msg)
    st.stop()

summary = invoices_frame(invoices)

col_count, col_total = st.columns(2)
col_count.metric("Invoices", len(invoices))
col_total.metric("Total Amount", format_rupees(float(summary["Total Amount"].sum())))

try:
    excel_data = build_tally_invoice_excel(invoices)
except Exception as e:
    st.error(f"Failed to generate XLSX: {e}")
else:
    st.download_button(
        "Export to Excel",
        data=excel_data,
        file_name=tally_filename("Invoice"),
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )

st.dataframe(summary, hide_index=True, width="stretch")

# -----------------------------------------------------------------------------
# Invoice details
# -----------------------------------------------------------------------------
st.subheader("Invoice Details")
selected = st.selectbox(
    "Invoice",
    options=range(len(invoices)),
    format_func=lambda i: f"{summary.iloc[i]['Invoice No']} - {summary.iloc[i]['Customer']}",
    key="invoice_selected",
)
invoice = invoices[selected]

col_order, col_mobile, col_voucher = st.columns(3)
col_order.write(f"**Order ID:** {invoice.get('order_id') or '-'}")
col_mobile.write(f"**Mobile:** {invoice.get('customer_mobile') or '-'}")
col_voucher.write(f"**Voucher Date:** {format_unix_date(invoice.get('voucher_date'))}")
st.dataframe(invoice_items_frame(invoice), hide_index=True, width="stretch")
