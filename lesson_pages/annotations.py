r"""Recognize the custom annotation conventions layered on lesson markdown.

Generated lessons use three conventions on top of standard markdown:

* ``==text==`` highlight spans, confined to a single line.
* ``[badge:slug]`` tags at the very start of a heading.
* ``[callout:slug]`` as the sole first line of a quoted block.

Every helper here degrades to treating unmatched or malformed input as
ordinary text; none of them raise.

Example
-------
>>> from lesson_pages.annotations import extract_highlights, parse_leading_badges
>>> extract_highlights("a ==b== c")
'a <mark>b</mark> c'
>>> parse_leading_badges("[badge:concepto_clave] Tema").badges
('concepto_clave',)
"""

from __future__ import annotations

import dataclasses as dc
import logging
import re

from lesson_pages.config import AnnotationTables

logger = logging.getLogger(__name__)

HIGHLIGHT_PATTERN = re.compile(r"(?<!=)==(?!=)([^\n]+?)(?<!=)==(?!=)")
BADGE_PATTERN = re.compile(r"^\[badge:([a-z_]+)\]\s*")
CALLOUT_PATTERN = re.compile(r"^\[callout:([a-z_]+)\]\s*$", re.IGNORECASE)
QUOTED_CALLOUT_LINE = re.compile(
    r"^(?P<prefix>[ ]{0,3}>[ ]?)\[callout:(?P<slug>[a-z_]+)\][ \t]*$", re.IGNORECASE
)
QUOTED_TEXT_LINE = re.compile(r"^[ ]{0,3}>[ ]?\S")
HEADING_LINE = re.compile(r"^(?P<marker>\s*#{1,2} )(?P<text>.*)$")
FENCE_LINE = re.compile(r"^(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
CODE_SPAN = re.compile(r"(?<!`)(?P<ticks>`+)(?!`).+?(?<!`)(?P=ticks)(?!`)")
MAX_BADGES = 2
MARK_OPEN = "<mark>"
MARK_CLOSE = "</mark>"

_DEFAULT_TABLES = AnnotationTables()


@dc.dataclass(frozen=True, slots=True)
class BadgeParse:
    """Outcome of stripping leading badges from a heading.

    Attributes
    ----------
    title : str
        Heading text left after the consumed badges, or the placeholder.
    badges : tuple[str, ...]
        Recognized badge slugs in source order; unknown slugs are omitted.
    """

    title: str
    badges: tuple[str, ...]


def fenced_line_flags(lines: list[str]) -> list[bool]:
    """Return, per line, whether it belongs to a fenced code block.

    Opening and closing fence lines count as fenced. Fences start in the
    first column and a block closes on a bare repeat of its opening fence,
    matching the fenced code extension; an unclosed fence runs to the end.
    """
    flags: list[bool] = []
    opener: str | None = None
    for line in lines:
        match = FENCE_LINE.match(line)
        if opener is None:
            if match is not None:
                opener = match.group("fence")
            flags.append(match is not None)
            continue
        flags.append(True)
        if match is None or match.group("info").strip():
            continue
        if match.group("fence") == opener:
            opener = None
    return flags


def _mark_span(match: re.Match[str]) -> str:
    inner = match.group(1).strip()
    if not inner:
        return match.group(0)
    return f"{MARK_OPEN}{inner}{MARK_CLOSE}"


def _highlight_prose(line: str) -> str:
    """Mark highlight spans in ``line`` outside its backtick code spans."""
    pieces: list[str] = []
    cursor = 0
    for span in CODE_SPAN.finditer(line):
        pieces.append(HIGHLIGHT_PATTERN.sub(_mark_span, line[cursor : span.start()]))
        pieces.append(span.group(0))
        cursor = span.end()
    pieces.append(HIGHLIGHT_PATTERN.sub(_mark_span, line[cursor:]))
    return "".join(pieces)


def extract_highlights(text: str) -> str:
    """Wrap every valid ``==inner==`` span in an inline ``<mark>`` marker.

    Spans crossing a newline, spans that are blank after trimming, and
    delimiters touching a further ``=`` are left untouched, as is code:
    fenced blocks and backtick spans keep their text verbatim.
    """
    lines = text.split("\n")
    flags = fenced_line_flags(lines)
    return "\n".join(
        line if fenced else _highlight_prose(line)
        for line, fenced in zip(lines, flags, strict=True)
    )


def strip_highlights(text: str) -> str:
    """Return the displayed text of ``text`` with highlight delimiters removed.

    >>> strip_highlights("==Asma== aguda")
    'Asma aguda'
    """
    return "".join(segment for segment, _ in split_highlight_runs(text))


def split_highlight_runs(text: str) -> list[tuple[str, bool]]:
    """Split ``text`` into ordered ``(segment, highlighted)`` runs.

    This is the print-side reading of the same highlight grammar used by
    :func:`extract_highlights`: delimiters of valid spans disappear, while
    malformed spans stay literal, delimiters included.
    """
    runs: list[tuple[str, bool]] = []

    def _push(segment: str, highlighted: bool) -> None:
        if not segment:
            return
        if runs and runs[-1][1] == highlighted:
            runs[-1] = (runs[-1][0] + segment, highlighted)
        else:
            runs.append((segment, highlighted))

    cursor = 0
    for match in HIGHLIGHT_PATTERN.finditer(text):
        inner = match.group(1).strip()
        if not inner:
            continue
        _push(text[cursor : match.start()], False)
        _push(inner, True)
        cursor = match.end()
    _push(text[cursor:], False)
    return runs


def parse_leading_badges(
    heading_text: str, tables: AnnotationTables | None = None
) -> BadgeParse:
    """Consume up to two leading ``[badge:slug]`` tags from a heading.

    Parameters
    ----------
    heading_text : str
        Text content of the heading.
    tables : AnnotationTables, optional
        Label tables deciding which slugs are known; defaults to the built-in
        tables.

    Returns
    -------
    BadgeParse
        Remaining title (or the placeholder title when nothing is left) and
        the recognized slugs.
    """
    tables = tables or _DEFAULT_TABLES
    remainder = heading_text.strip()
    badges: list[str] = []
    for _ in range(MAX_BADGES):
        match = BADGE_PATTERN.match(remainder)
        if match is None:
            break
        slug = match.group(1)
        if slug in tables.badge_labels:
            badges.append(slug)
        else:
            logger.debug("Dropping unknown badge slug %r", slug)
        remainder = remainder[match.end() :]
    title = remainder.strip() or tables.placeholder_title
    return BadgeParse(title=title, badges=tuple(badges))


def parse_callout_slug(
    first_line: str, tables: AnnotationTables | None = None
) -> str | None:
    """Return the callout slug when ``first_line`` is exactly a known tag."""
    tables = tables or _DEFAULT_TABLES
    match = CALLOUT_PATTERN.match(first_line.strip())
    if match is None:
        return None
    slug = match.group(1).lower()
    return slug if slug in tables.callout_labels else None


def isolate_callout_tags(
    markdown_text: str, tables: AnnotationTables | None = None
) -> str:
    """Give quoted known ``[callout:...]`` lines a paragraph of their own.

    A tag line directly followed by more quoted text would otherwise merge
    into the same paragraph once converted. An empty quote line is inserted
    between them; the tag line itself is left untouched. Unknown slugs and
    lines inside fenced code are not touched.
    """
    lines = markdown_text.split("\n")
    flags = fenced_line_flags(lines)
    output: list[str] = []
    for idx, line in enumerate(lines):
        output.append(line)
        if flags[idx] or idx + 1 >= len(lines):
            continue
        match = QUOTED_CALLOUT_LINE.match(line)
        if match is None:
            continue
        if parse_callout_slug(line[match.end("prefix") :], tables) is None:
            continue
        if QUOTED_TEXT_LINE.match(lines[idx + 1]):
            output.append(match.group("prefix").rstrip())
    return "\n".join(output)


def strip_heading_badges(
    markdown_text: str, tables: AnnotationTables | None = None
) -> str:
    """Remove leading badge tags from ``#`` and ``##`` heading lines.

    Used on the print path so badge tags never reach a printed title.
    """
    tables = tables or _DEFAULT_TABLES
    lines = markdown_text.split("\n")
    for idx, line in enumerate(lines):
        match = HEADING_LINE.match(line)
        if match is None or not match.group("text").lstrip().startswith("[badge:"):
            continue
        parsed = parse_leading_badges(match.group("text"), tables)
        lines[idx] = f"{match.group('marker')}{parsed.title}"
    return "\n".join(lines)


def label_callout_tags(
    markdown_text: str, tables: AnnotationTables | None = None
) -> str:
    """Replace known quoted callout tag lines with their label for print.

    Lines inside fenced code keep their text.
    """
    tables = tables or _DEFAULT_TABLES
    lines = markdown_text.split("\n")
    flags = fenced_line_flags(lines)
    for idx, line in enumerate(lines):
        match = None if flags[idx] else QUOTED_CALLOUT_LINE.match(line)
        if match is None:
            continue
        slug = match.group("slug").lower()
        label = tables.callout_labels.get(slug)
        if label is not None:
            lines[idx] = f"{match.group('prefix')}{label}"
    return "\n".join(lines)


__all__ = [
    "BadgeParse",
    "extract_highlights",
    "fenced_line_flags",
    "isolate_callout_tags",
    "label_callout_tags",
    "parse_callout_slug",
    "parse_leading_badges",
    "split_highlight_runs",
    "strip_heading_badges",
    "strip_highlights",
]
