"""Measure and word-wrap styled text for fixed-width print columns.

Widths are measured in millimetres. The default measure uses reportlab's
standard font metrics, so wrapped lines match what the PDF writer draws.
Highlighting only changes colour, never metrics, so lines are measured on
their plain text.
"""

from __future__ import annotations

import collections.abc as cabc
import re

from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics

from lesson_pages.pagination.models import TextRun

TextMeasure = cabc.Callable[[str, str, float], float]
"""Return the width in millimetres of ``text`` set in ``font`` at ``size`` pt."""

WHITESPACE = re.compile(r"(\s+)")

_Fragment = tuple[str, bool]
_Word = list[_Fragment]


def reportlab_measure(text: str, font: str, size: float) -> float:
    """Measure ``text`` with reportlab's font metrics, in millimetres."""
    return pdfmetrics.stringWidth(text, font, size) / mm


def _split_words(runs: cabc.Iterable[_Fragment]) -> list[_Word]:
    """Split runs at whitespace, keeping per-fragment highlight flags."""
    words: list[_Word] = []
    current: _Word = []
    for text, highlighted in runs:
        for part in WHITESPACE.split(text):
            if not part:
                continue
            if part.isspace():
                if current:
                    words.append(current)
                    current = []
                continue
            current.append((part, highlighted))
    if current:
        words.append(current)
    return words


def _word_text(word: _Word) -> str:
    return "".join(text for text, _ in word)


def _merge(fragments: _Word) -> tuple[TextRun, ...]:
    """Collapse adjacent fragments sharing a style into runs."""
    merged: list[TextRun] = []
    for text, highlighted in fragments:
        if not text:
            continue
        if merged and merged[-1].highlighted == highlighted:
            merged[-1] = TextRun(merged[-1].text + text, highlighted)
        else:
            merged.append(TextRun(text, highlighted))
    return tuple(merged)


class TextWrapper:
    """Greedy word wrapper bound to a font, size, and column width."""

    def __init__(
        self, max_width: float, font: str, size: float, measure: TextMeasure
    ) -> None:
        self.max_width = max_width
        self.font = font
        self.size = size
        self.measure = measure

    def fits(self, text: str) -> bool:
        """Return ``True`` when ``text`` fits within the column."""
        return self.measure(text, self.font, self.size) <= self.max_width

    def wrap_runs(self, runs: cabc.Sequence[_Fragment]) -> list[tuple[TextRun, ...]]:
        """Wrap styled runs into lines; always returns at least one line.

        Explicit newlines start a new line. Words wider than the column are
        broken between characters.
        """
        paragraphs: list[list[_Fragment]] = [[]]
        for text, highlighted in runs:
            pieces = text.split("\n")
            for idx, piece in enumerate(pieces):
                if idx:
                    paragraphs.append([])
                paragraphs[-1].append((piece, highlighted))

        lines: list[tuple[TextRun, ...]] = []
        for paragraph in paragraphs:
            lines.extend(self._wrap_paragraph(paragraph))
        return lines

    def wrap(self, text: str) -> list[str]:
        """Wrap plain text into lines of plain strings."""
        lines = self.wrap_runs([(text, False)])
        return ["".join(run.text for run in line) for line in lines]

    def _wrap_paragraph(self, fragments: list[_Fragment]) -> list[tuple[TextRun, ...]]:
        words = _split_words(fragments)
        if not words:
            return [()]
        lines: list[tuple[TextRun, ...]] = []
        line: _Word = []
        line_text = ""
        for word in words:
            text = _word_text(word)
            if line:
                candidate = f"{line_text} {text}"
                if self.fits(candidate):
                    # The gap is highlighted only inside a highlighted span.
                    joined = line[-1][1] and word[0][1]
                    line.extend([(" ", joined), *word])
                    line_text = candidate
                    continue
                lines.append(_merge(line))
            if self.fits(text):
                line, line_text = list(word), text
                continue
            pieces = self._break_word(word)
            lines.extend(_merge(piece) for piece in pieces[:-1])
            line = pieces[-1]
            line_text = _word_text(line)
        if line:
            lines.append(_merge(line))
        return lines

    def _break_word(self, word: _Word) -> list[_Word]:
        """Split an over-wide word into pieces that each fit the column."""
        pieces: list[_Word] = []
        current: _Word = []
        current_text = ""
        for text, highlighted in word:
            for char in text:
                if current and not self.fits(current_text + char):
                    pieces.append(current)
                    current, current_text = [], ""
                current.append((char, highlighted))
                current_text += char
        if current:
            pieces.append(current)
        return pieces


__all__ = ["TextMeasure", "TextWrapper", "reportlab_measure"]
