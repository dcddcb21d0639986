# dairy_admin/services/report_table.py

from typing import List

import pandas as pd

from domain.models import BrandReport, CategoryTotals, ConsolidatedProduct, ReportRow
from services.brand_report_service import is_curd_product, is_milk_product
from utils.formatting import format_fixed

REPORT_COLUMNS = ["SL NO", "Particulars", "Total Crates", "Total Milk Ltr", "Total Packets"]

MILK_TOTAL_LABEL = "TOTAL MILK"
CURD_TOTAL_LABEL = "TOTAL CURD"
GRAND_TOTAL_LABEL = "G.TOTAL (Crates & Ltr)"


def _product_row(sl_no: int, product: ConsolidatedProduct) -> ReportRow:
    return ReportRow(
        sl_no=sl_no,
        particulars=product.name,
        crates=format_fixed(product.total_crates),
        liters=format_fixed(product.total_base_unit_quantity),
        packets=format_fixed(product.total_packets, 0),
    )


def _total_row(label: str, totals: CategoryTotals, kind: str = "total") -> ReportRow:
    return ReportRow(
        sl_no=None,
        particulars=label,
        crates=format_fixed(totals.crates),
        liters=format_fixed(totals.liters),
        packets=format_fixed(totals.packets, 0),
        kind=kind,
    )


def _separator_row() -> ReportRow:
    return ReportRow(sl_no=None, particulars="", crates="", liters="", packets="", kind="separator")


def build_report_rows(report: BrandReport) -> List[ReportRow]:
    """
    Milk products, milk total, curd products, curd total, grand total.

    SL NO is the product's position in the full consolidated list, so a
    product in both buckets shows the same number twice and products in
    neither bucket leave gaps.
    """
    # names are unique after consolidation
    sl_numbers = {p.name: idx for idx, p in enumerate(report.product_list, start=1)}

    rows: List[ReportRow] = []

    for product in report.product_list:
        if is_milk_product(product):
            rows.append(_product_row(sl_numbers[product.name], product))
    rows.append(_total_row(MILK_TOTAL_LABEL, report.milk_totals))
    rows.append(_separator_row())

    for product in report.product_list:
        if is_curd_product(product):
            rows.append(_product_row(sl_numbers[product.name], product))
    rows.append(_total_row(CURD_TOTAL_LABEL, report.curd_totals))
    rows.append(_separator_row())

    rows.append(_total_row(GRAND_TOTAL_LABEL, report.totals, kind="grand_total"))
    return rows


def rows_as_lists(rows: List[ReportRow]) -> List[List[str]]:
    return [
        ["" if r.sl_no is None else str(r.sl_no), r.particulars, r.crates, r.liters, r.packets]
        for r in rows
    ]


def report_rows_frame(report: BrandReport) -> pd.DataFrame:
    return pd.DataFrame(rows_as_lists(build_report_rows(report)), columns=REPORT_COLUMNS)
