r"""High-level orchestration for the interactive screen view.

:class:`ScreenRenderer` converts lesson markdown with
:class:`~lesson_pages.screen.converter.MarkdownConverter`, groups the tree with
:class:`~lesson_pages.screen.assembler.SectionAssembler`, and renders the
result through a Jinja template into one self-contained fragment: a table of
contents followed by one collapsible region per section.

Example
-------
>>> from lesson_pages.screen.view import ScreenRenderer
>>> view = ScreenRenderer().render("## Epidemiología\nAfecta a adultos.")
>>> [entry.anchor for entry in view.toc]
['sec-1-epidemiologia']
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from lesson_pages.config import EngineConfig
from lesson_pages.screen.assembler import SectionAssembler
from lesson_pages.screen.converter import ConvertedDocument, MarkdownConverter
from lesson_pages.screen.models import Callout, ContentNode, ScreenView, Section


class ScreenRenderer:
    """Render lesson markdown into a sectioned, navigable HTML fragment."""

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the renderer with configuration and template context.

        Parameters
        ----------
        config : EngineConfig, optional
            Label tables and screen options; defaults to the built-in config.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package
            templates.
        """
        self.config = config or EngineConfig()
        default_templates = Path(__file__).resolve().parents[1] / "templates"
        self.templates_dir = templates_dir or default_templates
        self.converter = MarkdownConverter(
            self.config.screen.pygments_style, self.config.tables
        )
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template(self.config.screen.template)

    def render(self, markdown_text: str) -> ScreenView:
        """Convert, assemble, and render ``markdown_text``.

        Returns
        -------
        ScreenView
            The rendered fragment together with the sections and TOC entries
            it was built from.

        Raises
        ------
        RenderError
            Raised when the markdown converter fails.
        """
        converted = self.converter.convert(markdown_text)
        assembled = SectionAssembler(self.config.tables).assemble(converted.root)
        context = {
            "toc": assembled.toc,
            "sections": [
                self._build_section_context(section, converted)
                for section in assembled.sections
            ],
            "expanded": self.config.screen.expanded,
            "toc_label": self.config.screen.toc_label,
        }
        html = self.template.render(**context)
        return ScreenView(
            html=html,
            sections=assembled.sections,
            toc=assembled.toc,
            stylesheet=self.converter.stylesheet,
        )

    def _build_section_context(
        self, section: Section, converted: ConvertedDocument
    ) -> dict[str, typ.Any]:
        """Return the template mapping for one section."""
        badge_labels = self.config.tables.badge_labels
        return {
            "title": section.title,
            "anchor": section.anchor,
            "kind": section.kind,
            "badges": [
                {"slug": slug, "label": badge_labels[slug]} for slug in section.badges
            ],
            "nodes": [self._build_node_context(node, converted) for node in section.nodes],
        }

    @staticmethod
    def _build_node_context(
        node: ContentNode, converted: ConvertedDocument
    ) -> dict[str, typ.Any]:
        """Serialize a content node, flagging callouts for the template."""
        if isinstance(node, Callout):
            return {
                "is_callout": True,
                "slug": node.slug,
                "label": node.label,
                "html": "\n".join(converted.serialize(child) for child in node.body),
            }
        return {"is_callout": False, "html": converted.serialize(node)}


__all__ = ["ScreenRenderer"]
