"""Write a :class:`~lesson_pages.pagination.models.PagedDocument` as PDF.

The paginator works top-down in millimetres; reportlab's canvas works
bottom-up in points, so every coordinate is flipped against the page height
before drawing. Highlighted runs get a filled rectangle behind their text.
"""

from __future__ import annotations

import io
import logging
import re

from reportlab.lib import colors
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from lesson_pages.config import PageGeometry
from lesson_pages.pagination.models import DrawRule, DrawText, Page, PagedDocument

logger = logging.getLogger(__name__)

HIGHLIGHT_COLOR = colors.Color(1.0, 0.93, 0.45)
TEXT_COLOR = colors.black
DEFAULT_FILENAME = "evantis_documento"
FILENAME_UNSAFE = re.compile(r"[^\w\s-]+")
MAX_FILENAME_LENGTH = 60


def suggest_filename(title: str | None) -> str:
    """Return a file stem derived from ``title``.

    Punctuation is dropped and the result is capped at sixty characters; an
    empty result falls back to ``evantis_documento``.

    Examples
    --------
    >>> suggest_filename("Asma: manejo agudo!")
    'Asma manejo agudo'
    >>> suggest_filename("???")
    'evantis_documento'
    """
    cleaned = FILENAME_UNSAFE.sub("", title or "")[:MAX_FILENAME_LENGTH].strip()
    return cleaned or DEFAULT_FILENAME


def _draw_text(pdf: canvas.Canvas, item: DrawText, page_height: float) -> None:
    y = (page_height - item.y) * mm
    pdf.setFont(item.font, item.size)
    if item.align == "right":
        pdf.drawRightString(item.x * mm, y, item.text)
        return
    x = item.x * mm
    for run in item.runs:
        width = pdfmetrics.stringWidth(run.text, item.font, item.size)
        if run.highlighted:
            pdf.setFillColor(HIGHLIGHT_COLOR)
            # Cover descenders below the baseline and most of the cap height.
            pdf.rect(x, y - item.size * 0.25, width, item.size, stroke=0, fill=1)
            pdf.setFillColor(TEXT_COLOR)
        pdf.drawString(x, y, run.text)
        x += width


def _draw_rule(pdf: canvas.Canvas, item: DrawRule, page_height: float) -> None:
    pdf.setLineWidth(item.width * mm)
    pdf.line(
        item.x1 * mm,
        (page_height - item.y1) * mm,
        item.x2 * mm,
        (page_height - item.y2) * mm,
    )


def _draw_page(pdf: canvas.Canvas, page: Page, page_height: float) -> None:
    for item in page.instructions:
        match item:
            case DrawText():
                _draw_text(pdf, item, page_height)
            case DrawRule():
                _draw_rule(pdf, item, page_height)


def write_pdf(
    document: PagedDocument,
    geometry: PageGeometry | None = None,
    *,
    title: str | None = None,
) -> bytes:
    """Render ``document`` to PDF bytes.

    Parameters
    ----------
    document : PagedDocument
        Paginated output from :class:`~lesson_pages.pagination.Paginator`.
    geometry : PageGeometry, optional
        Page size used when the document was laid out; defaults to A4.
    title : str, optional
        Stored in the PDF metadata when given.

    Returns
    -------
    bytes
        The encoded PDF file.
    """
    geometry = geometry or PageGeometry()
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=(geometry.width * mm, geometry.height * mm))
    if title:
        pdf.setTitle(title)
    for page in document.pages:
        pdf.setFillColor(TEXT_COLOR)
        _draw_page(pdf, page, geometry.height)
        pdf.showPage()
    pdf.save()
    logger.info("Wrote PDF with %d pages", document.page_count)
    return buffer.getvalue()


__all__ = ["DEFAULT_FILENAME", "suggest_filename", "write_pdf"]
