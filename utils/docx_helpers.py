from typing import List, Sequence

from docx import Document
from docx.shared import Pt


def add_table_to_document(
        doc: Document,
        header: Sequence[str],
        rows: List[Sequence[str]],
        bold_rows: Sequence[int] = (),
) -> None:
    """
    Append a grid table with a bold header row to a python-docx Document.
    `bold_rows` holds 0-based indexes into `rows` to render in bold
    (total lines).
    """
    table = doc.add_table(rows=1, cols=len(header))
    table.style = "Table Grid"

    for cell, title in zip(table.rows[0].cells, header):
        cell.text = ""
        run = cell.paragraphs[0].add_run(str(title))
        run.bold = True
        run.font.size = Pt(10)

    bold = set(bold_rows)
    for idx, values in enumerate(rows):
        cells = table.add_row().cells
        for cell, val in zip(cells, values):
            cell.text = ""
            run = cell.paragraphs[0].add_run(str(val))
            run.bold = idx in bold
            run.font.size = Pt(10)
