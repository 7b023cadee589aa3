"""
Document parsing service.
Turns Word documents (.docx) into plain-text paragraphs for diffing.
"""

import io
from typing import List

from docx import Document

from semdiff.models import ContentBlock


def parse_document(file_bytes: bytes) -> List[ContentBlock]:
    """
    Parse a Word document into content blocks in body order.

    Empty paragraphs are skipped; each table row becomes its own block so
    cell edits stay at paragraph granularity.

    Args:
        file_bytes: Raw bytes of the .docx file

    Returns:
        List of ContentBlock objects
    """
    doc = Document(io.BytesIO(file_bytes))
    paragraphs = {para._element: para for para in doc.paragraphs}
    tables = {table._element: table for table in doc.tables}

    blocks: List[ContentBlock] = []
    for element in doc.element.body:
        if element in paragraphs:
            text = paragraphs[element].text.strip()
            if text:
                blocks.append(ContentBlock(index=len(blocks), block_type="paragraph", content=text))
        elif element in tables:
            for row in tables[element].rows:
                cells = [cell.text.strip() for cell in row.cells]
                if any(cells):
                    blocks.append(ContentBlock(
                        index=len(blocks),
                        block_type="table",
                        content=" | ".join(cells),
                    ))

    return blocks


def blocks_to_text(blocks: List[ContentBlock]) -> str:
    """One line per block, the shape compare_documents expects."""
    return "\n".join(block.content.replace("\n", " ") for block in blocks)
