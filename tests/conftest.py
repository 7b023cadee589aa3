"""
Shared fixtures.
"""

import io

import pytest
from docx import Document


@pytest.fixture
def make_docx():
    """Build .docx bytes from a list of paragraphs and optional table rows."""

    def _make(paragraphs, table_rows=None):
        doc = Document()
        for text in paragraphs:
            doc.add_paragraph(text)
        if table_rows:
            table = doc.add_table(rows=len(table_rows), cols=len(table_rows[0]))
            for r, row in enumerate(table_rows):
                for c, text in enumerate(row):
                    table.cell(r, c).text = text
        buffer = io.BytesIO()
        doc.save(buffer)
        return buffer.getvalue()

    return _make
