r"""Lay out lesson blocks onto fixed-geometry pages.

The :class:`Paginator` turns the flat block sequence from
:func:`lesson_pages.blocks.tokenize_blocks` into absolute draw instructions.
Page 1 is a hand-placed cover. Content flows from page 2 under a single
cursor: every wrapped line first reserves its height with
:meth:`Paginator.ensure_space`, which opens a new page when the line would
reach into the footer band, and only then is written. Running headers and
footers are stamped in a second pass because the footer needs the final page
count.

Example
-------
>>> from lesson_pages.blocks import tokenize_blocks
>>> from lesson_pages.pagination.engine import Paginator
>>> document = Paginator().paginate(tokenize_blocks("## Tema\nTexto"))
>>> document.page_count
2
>>> document.pages[1].lines()[-1]
'Página 1 de 1'
"""

from __future__ import annotations

import collections.abc as cabc
import logging

from lesson_pages.annotations import split_highlight_runs
from lesson_pages.blocks import Blank, Block, Heading1, Heading2, ListItem, Paragraph
from lesson_pages.config import EngineConfig, PrintLabels
from lesson_pages.pagination.models import (
    Align,
    Cursor,
    DocumentMeta,
    DrawRule,
    DrawText,
    Page,
    PagedDocument,
    TextRun,
    TranscriptTurn,
)
from lesson_pages.pagination.wrap import TextMeasure, TextWrapper, reportlab_measure

logger = logging.getLogger(__name__)

DATE_FORMAT = "%d/%m/%Y %H:%M"


def cover_rows(meta: DocumentMeta, labels: PrintLabels) -> list[str]:
    """Return the cover metadata rows, using a dash for missing values."""
    missing = labels.missing_value

    def _value(value: object | None) -> str:
        text = str(value).strip() if value is not None else ""
        return text or missing

    module = labels.module_labels.get(meta.module, meta.module) if meta.module else None
    level = labels.level_labels.get(meta.level or "", labels.default_level_label)
    duration = f"{meta.duration_minutes} min" if meta.duration_minutes else None
    generated = meta.generated_at.strftime(DATE_FORMAT) if meta.generated_at else None
    return [
        f"Materia: {_value(meta.subject_name)}",
        f"Tema: {_value(meta.topic_name)}",
        f"Módulo: {_value(module)}",
        f"Profundidad: {_value(level)}",
        f"Duración: {_value(duration)}",
        f"Fecha: {_value(generated)}",
        f"Session ID: {_value(meta.session_id)}",
        f"Plan: {_value(meta.plan)}",
    ]


class Paginator:
    """Paginate lesson blocks and an optional transcript into pages."""

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        measure: TextMeasure | None = None,
    ) -> None:
        """Initialize the paginator.

        Parameters
        ----------
        config : EngineConfig, optional
            Geometry, typography, cover layout, and labels; defaults to the
            built-in A4 configuration.
        measure : TextMeasure, optional
            Width function used for wrapping; defaults to reportlab's font
            metrics.
        """
        self.config = config or EngineConfig()
        self.geometry = self.config.geometry
        self.typography = self.config.typography
        self.labels = self.config.labels
        self.measure = measure or reportlab_measure
        self.pages: list[Page] = []
        self.cursor = Cursor(page_index=0, y_offset=self.geometry.content_top)

    def paginate(
        self,
        blocks: cabc.Iterable[Block],
        transcript: cabc.Sequence[TranscriptTurn] | None = None,
        meta: DocumentMeta | None = None,
    ) -> PagedDocument:
        """Lay out ``blocks`` and ``transcript`` behind a cover page.

        Parameters
        ----------
        blocks : Iterable[Block]
            Flat block sequence in document order.
        transcript : Sequence[TranscriptTurn], optional
            Chat turns appended after the content; the appendix is omitted
            entirely when this is ``None`` or empty.
        meta : DocumentMeta, optional
            Cover and header fields.

        Returns
        -------
        PagedDocument
            The cover followed by at least one content page.
        """
        meta = meta or DocumentMeta()
        self.pages = [self._build_cover(meta)]
        self._start_page()
        for block in blocks:
            self._write_block(block)
        if transcript:
            self._write_transcript(transcript)
        self._stamp_running_text(meta)
        logger.debug("Paginated document into %d pages", len(self.pages))
        return PagedDocument(pages=self.pages)

    def ensure_space(self, height: float) -> None:
        """Start a new page unless ``height`` fits above the footer band."""
        if self.cursor.y_offset + height <= self.geometry.content_limit:
            return
        self._start_page()

    def _start_page(self) -> None:
        self.pages.append(Page(number=len(self.pages) + 1))
        self.cursor.page_index = len(self.pages) - 1
        self.cursor.y_offset = self.geometry.content_top
        logger.debug("Started page %d", len(self.pages))

    @property
    def _page(self) -> Page:
        return self.pages[self.cursor.page_index]

    def _wrapper(self, font: str, size: float, indent: float = 0.0) -> TextWrapper:
        width = self.geometry.content_width - indent
        return TextWrapper(width, font, size, self.measure)

    def _draw(
        self,
        page: Page,
        x: float,
        y: float,
        runs: tuple[TextRun, ...],
        font: str,
        size: float,
        align: Align = "left",
    ) -> None:
        page.instructions.append(
            DrawText(x=x, y=y, runs=runs, font=font, size=size, align=align)
        )

    def _draw_plain(
        self,
        page: Page,
        x: float,
        y: float,
        text: str,
        font: str,
        size: float,
        align: Align = "left",
    ) -> None:
        self._draw(page, x, y, (TextRun(text),), font, size, align)

    def _rule(self, page: Page, y: float, width: float) -> None:
        left = self.geometry.margin_x
        right = self.geometry.width - self.geometry.margin_x
        page.instructions.append(DrawRule(x1=left, y1=y, x2=right, y2=y, width=width))

    def _build_cover(self, meta: DocumentMeta) -> Page:
        """Place the cover fields at fixed positions; no flow, no header."""
        cover = self.config.cover
        typo = self.typography
        x = self.geometry.margin_x
        page = Page(number=1, is_cover=True)
        self._draw_plain(
            page, x, cover.brand_y, self.labels.brand, typo.bold_font, cover.brand_size
        )
        self._draw_plain(
            page, x, cover.label_y, self.labels.document_label, typo.font, cover.label_size
        )
        self._rule(page, cover.rule_y, cover.rule_width)

        title = (meta.title or "").strip() or self.labels.default_title
        title_wrapper = self._wrapper(typo.bold_font, cover.title_size)
        y = cover.title_y
        for line in title_wrapper.wrap(title):
            self._draw_plain(page, x, y, line, typo.bold_font, cover.title_size)
            y += cover.title_pitch

        meta_wrapper = self._wrapper(typo.font, cover.meta_size)
        y = cover.meta_y
        for row in cover_rows(meta, self.labels):
            for line in meta_wrapper.wrap(row):
                self._draw_plain(page, x, y, line, typo.font, cover.meta_size)
                y += cover.meta_pitch

        note_y = self.geometry.height - cover.note_offset
        note = self.labels.cover_note
        self._draw_plain(page, x, note_y, note, typo.font, cover.note_size)
        return page

    def _write_block(self, block: Block) -> None:
        typo = self.typography
        match block:
            case Blank():
                self.cursor.y_offset += typo.blank_gap
            case Heading1(text=text):
                self._write_heading(text, typo.heading1_size, typo.heading1_gap)
            case Heading2(text=text):
                self._write_heading(text, typo.heading2_size, typo.heading2_gap)
            case ListItem(text=text):
                self._write_list_item(text)
            case Paragraph(text=text):
                self._write_lines(
                    text,
                    font=typo.font,
                    size=typo.body_size,
                    reserve=typo.body_reserve,
                    pitch=typo.body_pitch,
                )
                self.cursor.y_offset += typo.block_gap

    def _write_heading(self, text: str, size: float, gap: float) -> None:
        typo = self.typography
        pitch = typo.heading_pitch_large if size >= 14 else typo.heading_pitch_small
        self._write_lines(
            text, font=typo.bold_font, size=size, reserve=typo.heading_reserve, pitch=pitch
        )
        self.cursor.y_offset += gap

    def _write_lines(
        self, text: str, *, font: str, size: float, reserve: float, pitch: float
    ) -> None:
        """Write wrapped ``text`` one line at a time, reserving before each."""
        wrapper = self._wrapper(font, size)
        for line in wrapper.wrap_runs(split_highlight_runs(text)):
            self.ensure_space(reserve)
            y = self.cursor.y_offset
            self._draw(self._page, self.geometry.margin_x, y, line, font, size)
            self.cursor.y_offset += pitch

    def _write_list_item(self, text: str) -> None:
        """Write a bullet item; only the first wrapped line gets the bullet."""
        typo = self.typography
        indent = typo.list_indent
        wrapper = self._wrapper(typo.font, typo.body_size, indent=indent)
        x = self.geometry.margin_x
        for idx, line in enumerate(wrapper.wrap_runs(split_highlight_runs(text))):
            self.ensure_space(typo.body_reserve)
            y = self.cursor.y_offset
            if idx == 0:
                self._draw_plain(self._page, x, y, typo.bullet, typo.font, typo.body_size)
            self._draw(self._page, x + indent, y, line, typo.font, typo.body_size)
            self.cursor.y_offset += typo.body_pitch
        self.cursor.y_offset += typo.block_gap

    def _write_transcript(self, transcript: cabc.Sequence[TranscriptTurn]) -> None:
        """Append the chat transcript: rule, heading, then one block per turn."""
        typo = self.typography
        self.ensure_space(typo.heading_reserve)
        self._rule(self._page, self.cursor.y_offset, typo.rule_width)
        self.cursor.y_offset += typo.rule_gap
        self._write_heading(
            self.labels.transcript_heading, typo.transcript_heading_size, typo.heading1_gap
        )
        for turn in transcript:
            speaker = (
                self.labels.user_speaker if turn.role == "user" else self.labels.brand
            )
            header = f"{speaker} — {turn.timestamp}" if turn.timestamp else speaker
            self._write_lines(
                header,
                font=typo.bold_font,
                size=typo.transcript_size,
                reserve=typo.body_reserve,
                pitch=typo.transcript_pitch,
            )
            self._write_lines(
                turn.text,
                font=typo.font,
                size=typo.transcript_size,
                reserve=typo.body_reserve,
                pitch=typo.transcript_pitch,
            )
            self.cursor.y_offset += typo.transcript_gap

    def _stamp_running_text(self, meta: DocumentMeta) -> None:
        """Stamp header and footer on content pages once the count is known."""
        geometry = self.geometry
        typo = self.typography
        labels = self.labels
        left = geometry.margin_x
        right = geometry.width - geometry.margin_x
        footer_y = geometry.height - geometry.margin_bottom
        session = (meta.session_id or "").strip() or labels.missing_value
        header_y = geometry.margin_top
        session_text = f"{labels.session_label}: {session}"
        content_pages = self.pages[1:]
        total = len(content_pages)
        for index, page in enumerate(content_pages, start=1):
            page_text = labels.page_label.format(index=index, total=total)
            self._draw_plain(
                page, left, header_y, labels.header_label, typo.bold_font, typo.header_size
            )
            self._draw_plain(
                page,
                right,
                header_y,
                session_text,
                typo.font,
                typo.header_meta_size,
                "right",
            )
            self._rule(page, header_y + typo.header_rule_offset, typo.rule_width)
            self._draw_plain(
                page, left, footer_y, labels.disclaimer, typo.font, typo.footer_size
            )
            self._draw_plain(
                page, right, footer_y, page_text, typo.font, typo.footer_size, "right"
            )


def paginate(
    blocks: cabc.Iterable[Block],
    transcript: cabc.Sequence[TranscriptTurn] | None = None,
    meta: DocumentMeta | None = None,
    *,
    config: EngineConfig | None = None,
    measure: TextMeasure | None = None,
) -> PagedDocument:
    """Paginate with a fresh :class:`Paginator` so no cursor is shared."""
    return Paginator(config, measure=measure).paginate(blocks, transcript, meta)


__all__ = ["DATE_FORMAT", "Paginator", "cover_rows", "paginate"]
