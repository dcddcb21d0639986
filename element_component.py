import streamlit as st
import pandas as pd

from domain.models import BrandReportResult
from services.export_service import (
    build_brand_report_docx,
    build_brand_report_excel,
    build_brand_report_pdf,
    report_filename,
)
from services.report_table import build_report_rows, report_rows_frame
from utils.formatting import format_rupees


def _highlight_totals(row: pd.Series, kinds: list):
    kind = kinds[row.name]
    if kind == "grand_total":
        return ["background-color: #2980b9; color: white; font-weight: bold"] * len(row)
    if kind == "total":
        return ["background-color: #3498db; color: white; font-weight: bold"] * len(row)
    return [""] * len(row)


def report_table(result: BrandReportResult):
    kinds = [r.kind for r in build_report_rows(result.report)]
    df = report_rows_frame(result.report)
    st.dataframe(
        df.style.apply(_highlight_totals, axis=1, kinds=kinds),
        hide_index=True,
        width="stretch",
    )


def report_header(result: BrandReportResult):
    info = result.info
    col_a, col_b, col_c = st.columns(3)
    with col_a:
        st.markdown(f"**Date:** {info.from_date} to {info.to_date}")
        st.markdown(f"**Order Type:** {info.order_type}")
    with col_b:
        st.markdown(f"**Brand:** {info.brand}")
        st.markdown(f"**Total Orders:** {info.total_orders}")
    with col_c:
        st.metric("Order Value", format_rupees(float(result.summary.get("total_amount") or 0)))


def export_buttons(result: BrandReportResult):
    """
    PDF / Excel / Word downloads for the current report.
    Renderer failures are shown as an error instead of breaking the page.
    """
    info = result.info
    exports = [
        ("💾 Download PDF", build_brand_report_pdf, "pdf", "application/pdf"),
        (
            "📊 Download Excel",
            build_brand_report_excel,
            "xlsx",
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        ),
        (
            "📝 Download Word",
            build_brand_report_docx,
            "docx",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        ),
    ]

    for col, (label, builder, ext, mime) in zip(st.columns(len(exports)), exports):
        with col:
            try:
                data = builder(result.report, info)
            except Exception as e:
                st.error(f"Failed to generate {ext.upper()}: {e}")
                continue
            st.download_button(
                label,
                data=data,
                file_name=report_filename(info, ext),
                mime=mime,
                key=f"download_{ext}",
            )
