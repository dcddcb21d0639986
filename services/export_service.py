# dairy_admin/services/export_service.py

import io
from typing import List, Optional

import pandas as pd
from docx import Document
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from domain.models import BrandReport, ReportInfo, ReportRow
from services.report_table import REPORT_COLUMNS, build_report_rows, rows_as_lists
from utils.docx_helpers import add_table_to_document

REPORT_TITLE = "BRAND WISE REPORT"

HEADER_BLUE = colors.Color(41 / 255, 128 / 255, 185 / 255)
TOTAL_BLUE = colors.Color(52 / 255, 152 / 255, 219 / 255)
ROW_GREY = colors.Color(245 / 255, 245 / 255, 245 / 255)


def report_filename(info: ReportInfo, ext: str) -> str:
    return f"BrandReport_{info.from_date}_to_{info.to_date}_{info.order_type}.{ext}"


def _require_report(report: Optional[BrandReport]) -> BrandReport:
    if report is None:
        raise ValueError("No report data available for export")
    return report


def _info_lines(info: ReportInfo) -> List[str]:
    return [
        f"Date: {info.from_date} to {info.to_date}",
        f"Order Type: {info.order_type}",
        f"Brand: {info.brand}",
        f"Total Orders: {info.total_orders}",
    ]


# ---------------------------------------------------------------------------
# PDF
# ---------------------------------------------------------------------------

def _pdf_table_style(rows: List[ReportRow]) -> TableStyle:
    commands = [
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_BLUE),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
        ("ALIGN", (2, 1), (-1, -1), "RIGHT"),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
    ]

    # table row 0 is the header
    for idx, row in enumerate(rows, start=1):
        if row.kind in ("total", "grand_total"):
            commands += [
                ("BACKGROUND", (0, idx), (-1, idx), TOTAL_BLUE),
                ("TEXTCOLOR", (0, idx), (-1, idx), colors.white),
                ("FONTNAME", (0, idx), (-1, idx), "Helvetica-Bold"),
            ]
        elif idx % 2 == 0:
            commands.append(("BACKGROUND", (0, idx), (-1, idx), ROW_GREY))

    return TableStyle(commands)


def build_brand_report_pdf(report: Optional[BrandReport], info: ReportInfo) -> bytes:
    report = _require_report(report)
    rows = build_report_rows(report)

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
        title=REPORT_TITLE,
    )
    styles = getSampleStyleSheet()

    story = [Paragraph(REPORT_TITLE, styles["Title"])]
    for line in _info_lines(info):
        story.append(Paragraph(line, styles["Normal"]))
    story.append(Spacer(1, 6 * mm))

    table = Table(
        [REPORT_COLUMNS] + rows_as_lists(rows),
        colWidths=[15 * mm, 80 * mm, 25 * mm, 25 * mm, 25 * mm],
        repeatRows=1,
    )
    table.setStyle(_pdf_table_style(rows))
    story.append(table)

    doc.build(story)
    return buffer.getvalue()


# ---------------------------------------------------------------------------
# Excel
# ---------------------------------------------------------------------------

def build_brand_report_excel(report: Optional[BrandReport], info: ReportInfo) -> bytes:
    report = _require_report(report)

    info_df = pd.DataFrame(
        [
            ("From Date", info.from_date),
            ("To Date", info.to_date),
            ("Order Type", info.order_type),
            ("Brand", info.brand),
            ("Total Orders", info.total_orders),
        ],
        columns=["Field", "Value"],
    )
    rows_df = pd.DataFrame(rows_as_lists(build_report_rows(report)), columns=REPORT_COLUMNS)

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="xlsxwriter") as writer:
        rows_df.to_excel(writer, sheet_name="Brand Report", index=False)
        info_df.to_excel(writer, sheet_name="Report Info", index=False)

        sheet = writer.sheets["Brand Report"]
        sheet.set_column(0, 0, 8)
        sheet.set_column(1, 1, 40)
        sheet.set_column(2, 4, 16)

    return buffer.getvalue()


# ---------------------------------------------------------------------------
# Word
# ---------------------------------------------------------------------------

def build_brand_report_docx(report: Optional[BrandReport], info: ReportInfo) -> bytes:
    report = _require_report(report)
    rows = build_report_rows(report)

    doc = Document()
    doc.add_heading(REPORT_TITLE, level=1)
    for line in _info_lines(info):
        doc.add_paragraph(line)

    bold_rows = [i for i, r in enumerate(rows) if r.kind in ("total", "grand_total")]
    add_table_to_document(doc, REPORT_COLUMNS, rows_as_lists(rows), bold_rows=bold_rows)

    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()
