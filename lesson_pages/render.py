"""Single entry point dispatching lesson markdown to a render path.

The screen path produces a :class:`~lesson_pages.screen.models.ScreenView`;
the print path produces a :class:`~lesson_pages.pagination.models.PagedDocument`
ready for :func:`~lesson_pages.pagination.pdf_writer.write_pdf`. Both paths
read the same :class:`~lesson_pages.config.AnnotationTables`, so a heading
keeps the same title in either output.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from lesson_pages.annotations import label_callout_tags, strip_heading_badges
from lesson_pages.blocks import Block, tokenize_blocks
from lesson_pages.config import EngineConfig
from lesson_pages.pagination import (
    DocumentMeta,
    PagedDocument,
    Paginator,
    TextMeasure,
    TranscriptTurn,
)
from lesson_pages.screen import ScreenRenderer, ScreenView

RenderTarget = typ.Literal["screen", "print"]
RENDER_TARGETS: tuple[RenderTarget, ...] = ("screen", "print")


def print_blocks(markdown_text: str, config: EngineConfig | None = None) -> list[Block]:
    """Normalize annotations for print and tokenize the result."""
    tables = (config or EngineConfig()).tables
    normalized = label_callout_tags(strip_heading_badges(markdown_text, tables), tables)
    return tokenize_blocks(normalized)


@typ.overload
def render(
    markdown_text: str,
    target: typ.Literal["screen"],
    transcript: cabc.Sequence[TranscriptTurn] | None = None,
    *,
    config: EngineConfig | None = None,
    meta: DocumentMeta | None = None,
    measure: TextMeasure | None = None,
) -> ScreenView: ...


@typ.overload
def render(
    markdown_text: str,
    target: typ.Literal["print"],
    transcript: cabc.Sequence[TranscriptTurn] | None = None,
    *,
    config: EngineConfig | None = None,
    meta: DocumentMeta | None = None,
    measure: TextMeasure | None = None,
) -> PagedDocument: ...


def render(
    markdown_text: str,
    target: RenderTarget,
    transcript: cabc.Sequence[TranscriptTurn] | None = None,
    *,
    config: EngineConfig | None = None,
    meta: DocumentMeta | None = None,
    measure: TextMeasure | None = None,
) -> ScreenView | PagedDocument:
    """Render ``markdown_text`` for ``target``.

    Parameters
    ----------
    markdown_text : str
        Lesson markdown with annotation tags.
    target : {"screen", "print"}
        Output path to take.
    transcript : Sequence[TranscriptTurn], optional
        Chat turns appended on the print path; ignored for the screen.
    config : EngineConfig, optional
        Tables, geometry, and labels; defaults to the built-in config.
    meta : DocumentMeta, optional
        Cover and header fields for the print path.
    measure : TextMeasure, optional
        Width function for print wrapping; defaults to reportlab metrics.

    Returns
    -------
    ScreenView | PagedDocument
        The screen view or the paginated document.

    Raises
    ------
    ValueError
        If ``target`` is not a known render target.
    RenderError
        If markdown conversion fails on the screen path.
    """
    config = config or EngineConfig()
    if target == "screen":
        return ScreenRenderer(config).render(markdown_text)
    if target == "print":
        paginator = Paginator(config, measure=measure)
        return paginator.paginate(print_blocks(markdown_text, config), transcript, meta)
    msg = f"unknown render target {target!r}; expected one of {RENDER_TARGETS}"
    raise ValueError(msg)


__all__ = ["RENDER_TARGETS", "RenderTarget", "print_blocks", "render"]
