"""Shared dataclasses used by the screen rendering pipeline."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from lesson_pages.config import SectionKind


@dc.dataclass(slots=True)
class Callout:
    """Labelled block derived from a tagged quotation.

    Attributes
    ----------
    slug : str
        Recognized callout slug (for example ``"advertencia"``).
    label : str
        Human label looked up from the callout table.
    body : list[Element]
        Quoted content with the tag paragraph removed.
    """

    slug: str
    label: str
    body: list[Element]


ContentNode = typ.Union["Element", Callout]


@dc.dataclass(slots=True)
class Section:
    """Heading-delimited group of content nodes.

    Attributes
    ----------
    title : str
        Display title with badges removed.
    badges : list[str]
        Recognized badge slugs in source order.
    kind : SectionKind
        Classification derived from the title.
    nodes : list[ContentNode]
        Elements and callouts in document order.
    anchor : str
        Stable ``sec-<n>-<slug>`` identifier, assigned when emitted.
    """

    title: str
    badges: list[str]
    kind: SectionKind
    nodes: list[ContentNode] = dc.field(default_factory=list)
    anchor: str = ""


@dc.dataclass(frozen=True, slots=True)
class TOCEntry:
    """Table-of-contents entry pointing at an emitted section."""

    title: str
    anchor: str


@dc.dataclass(slots=True)
class AssembledDocument:
    """Sections and table of contents produced from one element tree."""

    sections: list[Section]
    toc: list[TOCEntry]


@dc.dataclass(slots=True)
class ScreenView:
    """Renderable screen fragment plus the structure it was built from.

    Attributes
    ----------
    html : str
        Self-contained fragment: the TOC block followed by one collapsible
        region per section.
    sections : list[Section]
        Emitted sections in document order.
    toc : list[TOCEntry]
        One entry per emitted section.
    stylesheet : str
        CSS for highlighted code blocks inside the fragment.
    """

    html: str
    sections: list[Section]
    toc: list[TOCEntry]
    stylesheet: str = ""


__all__ = [
    "AssembledDocument",
    "Callout",
    "ContentNode",
    "ScreenView",
    "Section",
    "TOCEntry",
]
