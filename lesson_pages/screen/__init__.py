"""Utilities for converting, sectioning, and rendering the lesson screen view."""

from .assembler import SectionAssembler, assemble_sections, classify, slugify
from .converter import ConvertedDocument, MarkdownConverter
from .models import AssembledDocument, Callout, ScreenView, Section, TOCEntry
from .sanitizer import SafeMarkupExtension
from .view import ScreenRenderer

__all__ = [
    "AssembledDocument",
    "Callout",
    "ConvertedDocument",
    "MarkdownConverter",
    "SafeMarkupExtension",
    "ScreenRenderer",
    "ScreenView",
    "Section",
    "SectionAssembler",
    "TOCEntry",
    "assemble_sections",
    "classify",
    "slugify",
]
