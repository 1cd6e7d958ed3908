"""Group a converted lesson tree into titled, classified sections.

The assembler walks the top-level children of the element tree produced by
:class:`~lesson_pages.screen.converter.MarkdownConverter`. Second and third
level headings open new sections; everything else is collected into the
section currently open. Reserved headings (the generator's own table of
contents) switch the walk into a skipping state that discards the heading
and its body until the next heading.

Example
-------
>>> from lesson_pages.screen.assembler import classify, slugify
>>> classify("Diagnóstico y tratamiento:")
'dx'
>>> slugify("Epidemiología")
'epidemiologia'
"""

from __future__ import annotations

import logging
import re
import typing as typ
import unicodedata
import xml.etree.ElementTree as etree

from lesson_pages.annotations import parse_callout_slug, parse_leading_badges
from lesson_pages.config import AnnotationTables, SectionKind, normalize_heading
from lesson_pages.screen.models import (
    AssembledDocument,
    Callout,
    ContentNode,
    Section,
    TOCEntry,
)

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

logger = logging.getLogger(__name__)

HEADING_TAGS = frozenset({"h2", "h3"})
BLOCK_TAGS = frozenset({"ul", "ol", "dl", "table", "pre"})
AssemblerState = typ.Literal["normal", "skipping"]


def slugify(value: str) -> str:
    """Convert a title into a lowercase ASCII hyphen-separated slug."""
    decomposed = unicodedata.normalize("NFKD", value)
    folded = "".join(char for char in decomposed if not unicodedata.combining(char))
    slug = re.sub(r"[^a-z0-9]+", "-", folded.lower()).strip("-")
    return slug or "section"


def section_anchor(index: int, title: str) -> str:
    """Return the anchor for the ``index``-th emitted section (1-based)."""
    return f"sec-{index}-{slugify(title)}"


def classify(title: str, tables: AnnotationTables | None = None) -> SectionKind:
    """Return the kind of the first keyword contained in ``title``.

    Keywords are tested in table order, so a title matching several keyword
    families takes the kind listed first.
    """
    tables = tables or AnnotationTables()
    normalized = normalize_heading(title)
    for keyword, kind in tables.kind_keywords:
        if keyword in normalized:
            return kind
    return "other"


def element_text(element: Element) -> str:
    """Return the concatenated text content of ``element``."""
    return "".join(element.itertext())


class SectionAssembler:
    """Turn a converted element tree into sections and a table of contents.

    The walk is an explicit two-state machine. In ``"normal"`` state content
    is collected into the open section; in ``"skipping"`` state it is
    discarded. Transitions happen only at heading boundaries.
    """

    def __init__(self, tables: AnnotationTables | None = None) -> None:
        self.tables = tables or AnnotationTables()
        self.state: AssemblerState = "normal"
        self._current = self._intro_section()
        self._emitted: list[Section] = []

    def assemble(self, root: Element) -> AssembledDocument:
        """Walk ``root`` in document order and return the emitted sections.

        Parameters
        ----------
        root : Element
            Container element whose children are the converted blocks.

        Returns
        -------
        AssembledDocument
            Non-empty, non-reserved sections with anchors assigned and one
            TOC entry per section.
        """
        self.state = "normal"
        self._current = self._intro_section()
        self._emitted = []

        self._visit_text(root.text)
        for child in root:
            if child.tag in HEADING_TAGS:
                self._open_section(element_text(child))
            else:
                self._visit_element(child)
            self._visit_text(child.tail)
        self._flush()

        toc: list[TOCEntry] = []
        for index, section in enumerate(self._emitted, start=1):
            section.anchor = section_anchor(index, section.title)
            toc.append(TOCEntry(title=section.title, anchor=section.anchor))
        return AssembledDocument(sections=self._emitted, toc=toc)

    def is_reserved(self, title: str) -> bool:
        """Return ``True`` when ``title`` names a suppressed section."""
        return normalize_heading(title) in self.tables.reserved_headings

    def _intro_section(self) -> Section:
        return Section(title=self.tables.intro_title, badges=[], kind="other")

    def _open_section(self, heading_text: str) -> None:
        """Close the open section and transition on a heading boundary."""
        self._flush()
        parsed = parse_leading_badges(heading_text, self.tables)
        if self.is_reserved(parsed.title):
            logger.debug("Skipping reserved section %r", parsed.title)
            self.state = "skipping"
            self._current = Section(title=parsed.title, badges=[], kind="other")
            return
        self.state = "normal"
        self._current = Section(
            title=parsed.title,
            badges=list(parsed.badges),
            kind=classify(parsed.title, self.tables),
        )

    def _visit_element(self, element: Element) -> None:
        if self.state == "skipping":
            return
        node: ContentNode = element
        if element.tag == "blockquote":
            node = self._extract_callout(element) or element
        self._current.nodes.append(node)

    def _visit_text(self, text: str | None) -> None:
        if self.state == "skipping" or not text or not text.strip():
            return
        paragraph = etree.Element("p")
        paragraph.text = text.strip()
        self._current.nodes.append(paragraph)

    def _extract_callout(self, quote: Element) -> Callout | None:
        """Return a callout when the quote's first child is a known tag."""
        children = list(quote)
        if not children:
            return None
        slug = parse_callout_slug(element_text(children[0]), self.tables)
        if slug is None:
            return None
        return Callout(
            slug=slug, label=self.tables.callout_labels[slug], body=children[1:]
        )

    def _flush(self) -> None:
        section = self._current
        if self.state == "skipping":
            return
        if not any(self._has_content(node) for node in section.nodes):
            logger.debug("Dropping empty section %r", section.title)
            return
        self._emitted.append(section)

    @staticmethod
    def _has_content(node: ContentNode) -> bool:
        if isinstance(node, Callout):
            return True
        for element in node.iter():
            if element.tag in BLOCK_TAGS:
                return True
        return bool(element_text(node).strip())


def assemble_sections(
    root: Element, tables: AnnotationTables | None = None
) -> AssembledDocument:
    """Group ``root`` into sections using a fresh :class:`SectionAssembler`."""
    return SectionAssembler(tables).assemble(root)


__all__ = [
    "AssemblerState",
    "SectionAssembler",
    "assemble_sections",
    "classify",
    "element_text",
    "section_anchor",
    "slugify",
]
