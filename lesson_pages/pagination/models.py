"""Dataclasses describing a paginated, print-ready lesson document.

All positions are absolute, in millimetres, measured from the top-left corner
of the page. ``y`` is the text baseline, matching how the paginator advances
its cursor.
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt  # noqa: TC003 - used for runtime type metadata
import typing as typ

Align = typ.Literal["left", "right"]
SpeakerRole = typ.Literal["user", "other"]


@dc.dataclass(frozen=True, slots=True)
class TextRun:
    """Contiguous text drawn with one style."""

    text: str
    highlighted: bool = False


@dc.dataclass(frozen=True, slots=True)
class DrawText:
    """Draw one line of text made of styled runs."""

    x: float
    y: float
    runs: tuple[TextRun, ...]
    font: str
    size: float
    align: Align = "left"

    @property
    def text(self) -> str:
        """Return the plain text of the line."""
        return "".join(run.text for run in self.runs)


@dc.dataclass(frozen=True, slots=True)
class DrawRule:
    """Draw a straight line between two points."""

    x1: float
    y1: float
    x2: float
    y2: float
    width: float


DrawInstruction = DrawText | DrawRule


@dc.dataclass(slots=True)
class Page:
    """One page of draw instructions.

    Attributes
    ----------
    number : int
        1-based position in the whole document; the cover is page 1.
    instructions : list[DrawInstruction]
        Text and rule instructions in drawing order.
    is_cover : bool
        Whether this page is the hand-placed cover.
    """

    number: int
    instructions: list[DrawInstruction] = dc.field(default_factory=list)
    is_cover: bool = False

    @property
    def texts(self) -> list[DrawText]:
        """Return only the text instructions of the page."""
        return [item for item in self.instructions if isinstance(item, DrawText)]

    def lines(self) -> list[str]:
        """Return the plain text of every text instruction, in order."""
        return [item.text for item in self.texts]


@dc.dataclass(slots=True)
class Cursor:
    """Next free vertical position on the page being written."""

    page_index: int
    y_offset: float


@dc.dataclass(frozen=True, slots=True)
class TranscriptTurn:
    """One question or answer of the chat transcript appended in print."""

    role: SpeakerRole
    text: str
    timestamp: str = ""


@dc.dataclass(slots=True)
class DocumentMeta:
    """Descriptive fields shown on the cover and in the running header."""

    title: str | None = None
    subject_name: str | None = None
    topic_name: str | None = None
    module: str | None = None
    level: str | None = None
    duration_minutes: int | None = None
    session_id: str | None = None
    plan: str | None = None
    generated_at: dt.datetime | None = None


@dc.dataclass(slots=True)
class PagedDocument:
    """Cover page followed by the content pages."""

    pages: list[Page]

    @property
    def cover(self) -> Page:
        """Return the cover page."""
        return self.pages[0]

    @property
    def content_pages(self) -> list[Page]:
        """Return every page after the cover."""
        return self.pages[1:]

    @property
    def page_count(self) -> int:
        """Return the number of pages including the cover."""
        return len(self.pages)


__all__ = [
    "Align",
    "Cursor",
    "DocumentMeta",
    "DrawInstruction",
    "DrawRule",
    "DrawText",
    "Page",
    "PagedDocument",
    "SpeakerRole",
    "TextRun",
    "TranscriptTurn",
]
