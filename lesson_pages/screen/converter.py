"""Convert annotated lesson markdown into a sanitized element tree."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
import xml.etree.ElementTree as etree

from markdown import Markdown
from markdown.extensions import Extension
from markdown.serializers import to_html_string
from markdown.treeprocessors import Treeprocessor
from pygments.formatters.html import HtmlFormatter

from lesson_pages.annotations import extract_highlights, isolate_callout_tags
from lesson_pages.config import AnnotationTables
from lesson_pages.errors import RenderError
from lesson_pages.screen.sanitizer import SafeMarkupExtension

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element


@dc.dataclass(slots=True)
class ConvertedDocument:
    """Element tree produced by one conversion plus the instance that made it.

    The Markdown instance is kept because highlighted code blocks live in its
    HTML stash until the postprocessors restore them during serialization.
    """

    root: Element
    md: Markdown

    def serialize(self, element: Element) -> str:
        """Return the HTML for ``element`` with stashed fragments restored."""
        html = to_html_string(element)
        for processor in self.md.postprocessors:
            html = processor.run(html)
        return html.strip()


class _TreeCaptureExtension(Extension):
    """Keep a reference to the final element tree of each conversion."""

    def __init__(self) -> None:
        super().__init__()
        self.root: Element | None = None

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the capturing treeprocessor after inline processing."""
        md.treeprocessors.register(_CaptureTreeprocessor(md, self), "lesson_capture", 5)


class _CaptureTreeprocessor(Treeprocessor):
    def __init__(self, md: Markdown, owner: _TreeCaptureExtension) -> None:
        super().__init__(md)
        self.owner = owner

    def run(self, root: Element) -> None:
        self.owner.root = root


class MarkdownConverter:
    """Render lesson markdown into a tree with consistent extensions."""

    def __init__(
        self,
        pygments_style: str = "monokai",
        tables: AnnotationTables | None = None,
    ) -> None:
        """Initialize a converter with the Pygments style for code blocks.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting. Defaults
            to ``"monokai"``.
        tables : AnnotationTables, optional
            Tables deciding which callout tags are recognized; defaults to the
            built-in tables.
        """
        self.pygments_style = pygments_style
        self.tables = tables or AnnotationTables()
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def convert(self, text: str) -> ConvertedDocument:
        """Convert annotated markdown into a sanitized element tree.

        Highlight spans are rewritten into ``<mark>`` markers and callout tag
        lines are isolated before the markdown converter runs. A fresh
        Markdown instance is built per call so conversions never share state.

        Raises
        ------
        RenderError
            If the markdown converter or one of its extensions fails.
        """
        capture = _TreeCaptureExtension()
        md = Markdown(
            extensions=[
                "fenced_code",
                "codehilite",
                "tables",
                "sane_lists",
                SafeMarkupExtension(),
                capture,
            ],
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
        )
        prepared = isolate_callout_tags(extract_highlights(text), self.tables)
        try:
            md.convert(prepared)
        except Exception as exc:
            msg = "Markdown conversion failed."
            raise RenderError(msg) from exc
        root = capture.root if capture.root is not None else etree.Element("div")
        return ConvertedDocument(root=root, md=md)


__all__ = ["ConvertedDocument", "MarkdownConverter"]
