# dairy_admin/services/tally_report_service.py

import io
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from api_client import ApiClient, ApiError
from utils.formatting import to_number

logger = logging.getLogger(__name__)

INVOICE_SHEET = "Invoices"
RECEIPT_SHEET = "Receipts"

INVOICE_COLUMNS = ["Invoice No", "Customer", "Invoice Date", "Total Items", "Total Amount"]
RECEIPT_COLUMNS = ["Transaction ID", "Date", "Customer", "Payment Method", "Amount"]

# Column order of Tally's sales voucher import sheet
TALLY_INVOICE_COLUMNS = [
    "Vch Ref", "Invoice No", "Voucher Date", "Invoice Date", "Voucher TYPE",
    "Customer Code / Alias", "Customer Name", "Customer Mobile", "Under Group",
    "Address Line 1", "Address Line 2", "Address Line 3", "City", "Pin Code",
    "State", "GST No", "Product NO", "Product Description", "Stock Group",
    "Stock Category", "HSN", "Godown", "UOM", "Quantity", "Rate", "Amount",
    "GST %", "SGST Amount", "CGST Amount", "IGST Amount",
    "Ledger 1", "Ledger 2", "Ledger 3", "Ledger 4", "Ledger 5", "Ledger 6", "Ledger 7",
    "Round off", "Line Total", "Remarks", "batch number", "mnfdate", "Expiry Date",
]

# Column order of Tally's receipt voucher import sheet
TALLY_RECEIPT_COLUMNS = [
    "Vch No", "Date", "VoucherType", "Ref", "Ledger Name", "Cost Center",
    "Debit Amt", "Credit Amt", "Narration", "Group", "Transaction Type",
    "Instrument No", "Instrument Date", "Bank", "Branch", "Received From", "Remarks",
]

DEBTORS_GROUP = "Sundry Debtors"


# -----------------------------------------------------------------------------
# Fetch
# -----------------------------------------------------------------------------
def fetch_invoices(
        client: ApiClient,
        start_date: str,
        end_date: str,
) -> Tuple[bool, str, List[Dict[str, Any]]]:
    try:
        invoices = client.get_invoices(start_date, end_date)
    except ApiError as e:
        logger.error("Failed to fetch invoices: %s", e)
        return False, f"Failed to fetch invoices: {e}", []

    if not invoices:
        return True, "No invoices found for the selected date range", []
    return True, f"Loaded {len(invoices)} invoices", invoices


def fetch_receipts(
        client: ApiClient,
        start_date: str,
        end_date: str,
) -> Tuple[bool, str, List[Dict[str, Any]]]:
    try:
        receipts = client.get_receipts(start_date, end_date)
    except ApiError as e:
        logger.error("Failed to fetch receipts: %s", e)
        return False, f"Failed to fetch receipts: {e}", []

    if not receipts:
        return True, "No receipts found for the selected date range", []
    return True, f"Loaded {len(receipts)} receipts", receipts


# -----------------------------------------------------------------------------
# Dates
# -----------------------------------------------------------------------------
def format_unix_date(value: Any) -> str:
    """Unix seconds -> DD/MM/YYYY in local time, "-" when missing."""
    seconds = to_number(value)
    if not seconds:
        return "-"
    return datetime.fromtimestamp(seconds).strftime("%d/%m/%Y")


def format_receipt_date(value: Optional[str]) -> str:
    """YYYY-MM-DD (optionally followed by a time) -> DD-MM-YYYY."""
    if not value:
        return "-"
    try:
        return datetime.strptime(str(value)[:10], "%Y-%m-%d").strftime("%d-%m-%Y")
    except ValueError:
        logger.warning("Unrecognised payment date %r", value)
        return str(value)


def tally_filename(kind: str, now: Optional[datetime] = None) -> str:
    """
    Example: tally_filename("Invoice") -> "Tally_Invoice_Report_20240501_103000.xlsx"
    """
    now = now or datetime.now()
    return f"Tally_{kind}_Report_{now:%Y%m%d_%H%M%S}.xlsx"


# -----------------------------------------------------------------------------
# Invoices
# -----------------------------------------------------------------------------
def invoice_total(invoice: Dict[str, Any]) -> float:
    return sum(to_number(item.get("amount")) for item in invoice.get("items") or [])


def invoices_frame(invoices: List[Dict[str, Any]]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            [
                inv.get("invoice_id") or "-",
                inv.get("customer_name") or "-",
                format_unix_date(inv.get("invoice_date")),
                len(inv.get("items") or []),
                invoice_total(inv),
            ]
            for inv in invoices
        ],
        columns=INVOICE_COLUMNS,
    )


def invoice_items_frame(invoice: Dict[str, Any]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "Product": item.get("product_description") or "-",
                "HSN": item.get("hsn") or "-",
                "Stock Group": item.get("stock_group") or "-",
                "Category": item.get("stock_category") or "-",
                "Rate": to_number(item.get("rate")),
                "Qty": to_number(item.get("quantity")),
                "GST %": to_number(item.get("gst_percentage")),
                "Amount": to_number(item.get("amount")),
            }
            for item in invoice.get("items") or []
        ]
    )


def tally_invoice_rows(invoices: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    One sales-voucher row per invoice item.

    Vch Ref starts at 1 and moves on whenever the invoice number differs
    from the previous invoice's. GST is worked out on the line amount and
    split evenly into SGST and CGST.
    """
    rows: List[Dict[str, Any]] = []
    vch_ref = 0
    prev_invoice_id: Any = object()

    for invoice in invoices:
        if invoice.get("invoice_id") != prev_invoice_id:
            vch_ref += 1
            prev_invoice_id = invoice.get("invoice_id")

        for item in invoice.get("items") or []:
            quantity = to_number(item.get("quantity"))
            rate = to_number(item.get("rate"))
            amount = to_number(item.get("amount"))
            gst_percent = to_number(item.get("gst_percentage"))
            gst = amount * gst_percent / 100

            row = dict.fromkeys(TALLY_INVOICE_COLUMNS, "")
            row.update({
                "Vch Ref": vch_ref,
                "Invoice No": invoice.get("invoice_id") or "-",
                "Voucher Date": format_unix_date(invoice.get("voucher_date")),
                "Invoice Date": format_unix_date(invoice.get("invoice_date")),
                "Voucher TYPE": "SALES",
                "Customer Name": invoice.get("customer_name") or "-",
                "Customer Mobile": invoice.get("customer_mobile") or "-",
                "Under Group": DEBTORS_GROUP,
                "Product Description": item.get("product_description") or "-",
                "Stock Group": item.get("stock_group") or "-",
                "Stock Category": item.get("stock_category") or "-",
                "HSN": item.get("hsn") or "-",
                "Godown": "Main Location",
                "UOM": "Pkts",
                "Quantity": quantity,
                "Rate": rate,
                "Amount": rate * quantity,
                "GST %": gst_percent,
                "SGST Amount": gst / 2,
                "CGST Amount": gst / 2,
                "Line Total": amount,
            })
            rows.append(row)

    return rows


def build_tally_invoice_excel(invoices: List[Dict[str, Any]]) -> bytes:
    if not invoices:
        raise ValueError("No invoices to export")

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="xlsxwriter") as writer:
        pd.DataFrame(tally_invoice_rows(invoices), columns=TALLY_INVOICE_COLUMNS).to_excel(
            writer, sheet_name=INVOICE_SHEET, index=False
        )
    return buffer.getvalue()


# -----------------------------------------------------------------------------
# Receipts
# -----------------------------------------------------------------------------
def receipts_total(receipts: List[Dict[str, Any]]) -> float:
    return sum(to_number(r.get("payment_amount")) for r in receipts)


def receipts_frame(receipts: List[Dict[str, Any]]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            [
                r.get("transaction_id") or "-",
                format_receipt_date(r.get("payment_date")),
                r.get("customer_name") or "-",
                r.get("payment_method") or "-",
                to_number(r.get("payment_amount")),
            ]
            for r in receipts
        ],
        columns=RECEIPT_COLUMNS,
    )


def _receipt_row(vch_no: Any, date: str, ledger: str, debit: float, credit: float) -> Dict[str, Any]:
    row = dict.fromkeys(TALLY_RECEIPT_COLUMNS, "")
    row.update({
        "Vch No": vch_no,
        "Date": date,
        "VoucherType": "Receipt",
        "Ref": vch_no,
        "Ledger Name": ledger,
        "Debit Amt": debit,
        "Credit Amt": credit,
        "Group": DEBTORS_GROUP,
    })
    return row


def tally_receipt_rows(receipts: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Receipts are grouped per customer per payment day. Each group becomes
    one voucher: a credit row for the customer with the day's total, then
    a debit row per payment under its payment method.

    The voucher number is the cash payment's transaction id when the group
    has one, otherwise the first payment's.
    """
    groups: Dict[Tuple[str, Any], List[Dict[str, Any]]] = {}
    for receipt in receipts:
        key = (str(receipt.get("payment_date") or "")[:10], receipt.get("customer_id"))
        groups.setdefault(key, []).append(receipt)

    rows: List[Dict[str, Any]] = []
    for payments in groups.values():
        first = payments[0]
        cash = next(
            (p for p in payments if (p.get("payment_method") or "").lower() == "cash"),
            None,
        )
        vch_no = (cash or first).get("transaction_id")

        rows.append(_receipt_row(
            vch_no,
            format_receipt_date(first.get("payment_date")),
            first.get("customer_name") or "",
            0,
            receipts_total(payments),
        ))
        for p in payments:
            rows.append(_receipt_row(
                vch_no,
                format_receipt_date(p.get("payment_date")),
                p.get("payment_method") or "",
                to_number(p.get("payment_amount")),
                0,
            ))

    return rows


def build_tally_receipt_excel(receipts: List[Dict[str, Any]]) -> bytes:
    if not receipts:
        raise ValueError("No receipts to export")

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="xlsxwriter") as writer:
        pd.DataFrame(tally_receipt_rows(receipts), columns=TALLY_RECEIPT_COLUMNS).to_excel(
            writer, sheet_name=RECEIPT_SHEET, index=False
        )
    return buffer.getvalue()
