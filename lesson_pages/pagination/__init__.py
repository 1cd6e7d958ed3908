"""Print path: paginate lesson blocks and write them as PDF."""

from .engine import DATE_FORMAT, Paginator, cover_rows, paginate
from .models import (
    Cursor,
    DocumentMeta,
    DrawInstruction,
    DrawRule,
    DrawText,
    Page,
    PagedDocument,
    TextRun,
    TranscriptTurn,
)
from .pdf_writer import DEFAULT_FILENAME, suggest_filename, write_pdf
from .wrap import TextMeasure, TextWrapper, reportlab_measure

__all__ = [
    "DATE_FORMAT",
    "DEFAULT_FILENAME",
    "Cursor",
    "DocumentMeta",
    "DrawInstruction",
    "DrawRule",
    "DrawText",
    "Page",
    "PagedDocument",
    "Paginator",
    "TextMeasure",
    "TextRun",
    "TextWrapper",
    "TranscriptTurn",
    "cover_rows",
    "paginate",
    "reportlab_measure",
    "suggest_filename",
    "write_pdf",
]
