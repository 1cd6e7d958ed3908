"""Markdown extensions that keep converted lesson markup safe to embed.

Generated lessons are semi-trusted. Raw HTML in the source is escaped instead
of passed through, with one exception: the ``<mark>`` marker produced by
:func:`lesson_pages.annotations.extract_highlights` is recognized as the
converter's own inline syntax. Link and image targets using script-capable
schemes are removed from the tree.
"""

from __future__ import annotations

import typing as typ
import xml.etree.ElementTree as etree

from markdown.extensions import Extension
from markdown.inlinepatterns import InlineProcessor
from markdown.treeprocessors import Treeprocessor

if typ.TYPE_CHECKING:
    import re
    from xml.etree.ElementTree import Element

    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any

MARK_INLINE_PATTERN = r"<mark>(.+?)</mark>"
UNSAFE_SCHEMES = ("javascript:", "vbscript:", "data:", "file:")
URL_ATTRIBUTES = ("href", "src")


class SafeMarkupExtension(Extension):
    """Escape raw HTML, honour highlight markers, and drop unsafe URLs.

    Insert this extension into a ``markdown.Markdown`` instance before
    converting untrusted lesson text. Block-level and inline raw HTML are
    disabled so the serializer escapes them as text.
    """

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Disable raw HTML and register the highlight and URL processors."""
        if "html_block" in md.preprocessors:
            md.preprocessors.deregister("html_block")
        if "html" in md.inlinePatterns:
            md.inlinePatterns.deregister("html")
        md.inlinePatterns.register(
            HighlightInlineProcessor(MARK_INLINE_PATTERN, md), "lesson_mark", 95
        )
        md.treeprocessors.register(
            SafeUrlTreeprocessor(md), "lesson_safe_urls", 15
        )


class HighlightInlineProcessor(InlineProcessor):
    """Turn ``<mark>text</mark>`` markers into ``mark`` elements."""

    def handleMatch(  # type: ignore[override]  # noqa: N802
        self, m: re.Match[str], data: str
    ) -> tuple[Element, int, int]:
        """Return a ``mark`` element spanning the matched marker."""
        element = etree.Element("mark")
        element.text = m.group(1)
        return element, m.start(0), m.end(0)


class SafeUrlTreeprocessor(Treeprocessor):
    """Strip link and image targets that could execute script."""

    def run(self, root: Element) -> Element:
        """Remove unsafe ``href``/``src`` attributes throughout the tree."""
        for element in root.iter():
            for attribute in URL_ATTRIBUTES:
                value = element.get(attribute)
                if value is not None and not is_safe_url(value):
                    del element.attrib[attribute]
        return root


def is_safe_url(target: str) -> bool:
    """Return ``True`` when ``target`` does not use a script-capable scheme."""
    compact = "".join(target.split()).lower()
    return not compact.startswith(UNSAFE_SCHEMES)


__all__ = [
    "MARK_INLINE_PATTERN",
    "HighlightInlineProcessor",
    "SafeMarkupExtension",
    "SafeUrlTreeprocessor",
    "is_safe_url",
]
