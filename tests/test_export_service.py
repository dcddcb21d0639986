import io

import pandas as pd
import pytest
from docx import Document

from domain.models import ReportInfo
from services.brand_report_service import build_brand_report
from services.export_service import (
    build_brand_report_docx,
    build_brand_report_excel,
    build_brand_report_pdf,
    report_filename,
)


@pytest.fixture
def info():
    return ReportInfo(
        from_date="2024-05-01",
        to_date="2024-05-03",
        order_type="AM",
        brand="Heritage",
        total_orders=2,
    )


def test_report_filename(info):
    assert report_filename(info, "pdf") == "BrandReport_2024-05-01_to_2024-05-03_AM.pdf"


def test_pdf_export(toned_milk_orders, info):
    data = build_brand_report_pdf(build_brand_report(toned_milk_orders), info)
    assert data.startswith(b"%PDF")


def test_excel_export(toned_milk_orders, info):
    data = build_brand_report_excel(build_brand_report(toned_milk_orders), info)

    sheets = pd.read_excel(io.BytesIO(data), sheet_name=None, dtype=str)

    assert set(sheets) == {"Brand Report", "Report Info"}
    report = sheets["Brand Report"]
    assert report.iloc[0]["Particulars"] == "Toned Milk 500ML"
    assert report.iloc[0]["Total Milk Ltr"] == "18.00"
    assert report.iloc[-1]["Particulars"] == "G.TOTAL (Crates & Ltr)"
    meta = dict(zip(sheets["Report Info"]["Field"], sheets["Report Info"]["Value"]))
    assert meta["Brand"] == "Heritage"
    assert meta["Total Orders"] == "2"


def test_docx_export(toned_milk_orders, info):
    data = build_brand_report_docx(build_brand_report(toned_milk_orders), info)

    doc = Document(io.BytesIO(data))
    [table] = doc.tables
    assert [c.text for c in table.rows[0].cells][:2] == ["SL NO", "Particulars"]
    assert table.rows[1].cells[1].text == "Toned Milk 500ML"
    assert any("Brand: Heritage" in p.text for p in doc.paragraphs)


@pytest.mark.parametrize("builder", [build_brand_report_pdf, build_brand_report_excel, build_brand_report_docx])
def test_export_requires_report(builder, info):
    with pytest.raises(ValueError):
        builder(None, info)
