r"""Split lesson markdown into a flat sequence of typed line blocks.

The paginator does not need a document tree: it lays out one line of source
at a time. This module classifies each source line by its prefix and returns
dataclasses the print path consumes in order.

Example
-------
>>> from lesson_pages.blocks import Heading2, tokenize_blocks
>>> blocks = tokenize_blocks("## Intro\nBody text\n\n- item")
>>> blocks[0]
Heading2(text='Intro')
>>> [type(block).__name__ for block in blocks]
['Heading2', 'Paragraph', 'Blank', 'ListItem']
"""

from __future__ import annotations

import dataclasses as dc


@dc.dataclass(frozen=True, slots=True)
class Heading1:
    """First-level heading line (``# text``)."""

    text: str


@dc.dataclass(frozen=True, slots=True)
class Heading2:
    """Second-level heading line (``## text``)."""

    text: str


@dc.dataclass(frozen=True, slots=True)
class ListItem:
    """Bullet list line (``- text``)."""

    text: str


@dc.dataclass(frozen=True, slots=True)
class Paragraph:
    """Any other non-blank line, kept verbatim apart from trimming."""

    text: str


@dc.dataclass(frozen=True, slots=True)
class Blank:
    """Empty or whitespace-only line; becomes vertical spacing."""


Block = Heading1 | Heading2 | ListItem | Paragraph | Blank


def classify_line(line: str) -> Block:
    """Return the block for a single source line."""
    stripped = line.strip()
    if not stripped:
        return Blank()
    if stripped.startswith("## "):
        return Heading2(stripped[3:])
    if stripped.startswith("# "):
        return Heading1(stripped[2:])
    if stripped.startswith("- "):
        return ListItem(stripped[2:])
    return Paragraph(stripped)


def tokenize_blocks(markdown_text: str) -> list[Block]:
    """Split markdown into ordered blocks, one per source line.

    Parameters
    ----------
    markdown_text : str
        Raw markdown content. Badge tags should already be stripped from
        heading lines, otherwise they are kept in the heading text.

    Returns
    -------
    list[Block]
        One block per line in source order. Blank lines are preserved as
        :class:`Blank` blocks.
    """
    return [classify_line(line) for line in markdown_text.split("\n")]


__all__ = [
    "Blank",
    "Block",
    "Heading1",
    "Heading2",
    "ListItem",
    "Paragraph",
    "classify_line",
    "tokenize_blocks",
]
