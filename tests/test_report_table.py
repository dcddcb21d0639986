from domain.models import BrandReport, OrderLine
from services.brand_report_service import aggregate_categories, build_brand_report, consolidate_products
from services.report_table import (
    CURD_TOTAL_LABEL,
    GRAND_TOTAL_LABEL,
    MILK_TOTAL_LABEL,
    REPORT_COLUMNS,
    build_report_rows,
    report_rows_frame,
)


def _report(lines):
    products = consolidate_products(lines)
    milk, curd, grand = aggregate_categories(products)
    return BrandReport(product_list=products, totals=grand, milk_totals=milk, curd_totals=curd)


def test_rows_use_position_in_full_list():
    report = _report([
        OrderLine("Paneer 200GM", 10, "Paneer"),
        OrderLine("Curd 400GM", 30, "Curd"),
        OrderLine("Toned Milk 500ML", 24, "Milk"),
        OrderLine("Milk Curd Combo", 2, "Dairy"),
    ])

    rows = build_report_rows(report)
    products = [(r.sl_no, r.particulars) for r in rows if r.kind == "product"]

    assert products == [
        (3, "Toned Milk 500ML"),
        (4, "Milk Curd Combo"),
        (2, "Curd 400GM"),
        (4, "Milk Curd Combo"),
    ]


def test_row_layout_and_formatting(toned_milk_orders):
    rows = build_report_rows(build_brand_report(toned_milk_orders))

    assert [r.kind for r in rows] == [
        "product", "total", "separator", "total", "separator", "grand_total",
    ]
    milk_row = rows[0]
    assert (milk_row.crates, milk_row.liters, milk_row.packets) == ("1.00", "18.00", "36")
    assert [r.particulars for r in rows if r.kind != "product"] == [
        MILK_TOTAL_LABEL, "", CURD_TOTAL_LABEL, "", GRAND_TOTAL_LABEL,
    ]
    assert (rows[-1].crates, rows[-1].liters, rows[-1].packets) == ("1.00", "18.00", "36")


def test_empty_report_still_has_total_rows():
    df = report_rows_frame(build_brand_report([]))

    assert list(df.columns) == REPORT_COLUMNS
    assert list(df["Particulars"]) == [MILK_TOTAL_LABEL, "", CURD_TOTAL_LABEL, "", GRAND_TOTAL_LABEL]
    assert df.iloc[-1]["Total Crates"] == "0.00"
    assert df.iloc[-1]["SL NO"] == ""
