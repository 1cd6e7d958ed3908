"""Typed dataclasses describing lesson rendering configuration."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

SectionKind = typ.Literal["core", "dx", "tx", "algo", "quiz", "danger", "other"]
SECTION_KINDS: tuple[SectionKind, ...] = (
    "core",
    "dx",
    "tx",
    "algo",
    "quiz",
    "danger",
    "other",
)


class ConfigError(ValueError):
    """Raised when the engine configuration is invalid or incomplete."""


def _default_badge_labels() -> dict[str, str]:
    return {
        "concepto_clave": "Concepto clave",
        "alto_rendimiento": "Alto rendimiento",
        "enarm": "ENARM",
        "gpc": "GPC",
        "perla_clinica": "Perla clínica",
    }


def _default_callout_labels() -> dict[str, str]:
    return {
        "advertencia": "Advertencia",
        "perla": "Perla clínica",
        "nota": "Nota",
        "clave": "Punto clave",
    }


def _default_kind_keywords() -> list[tuple[str, SectionKind]]:
    return [
        ("definición", "core"),
        ("definicion", "core"),
        ("epidemiología", "core"),
        ("epidemiologia", "core"),
        ("cuadro clínico", "core"),
        ("cuadro clinico", "core"),
        ("signos y síntomas", "core"),
        ("signos y sintomas", "core"),
        ("diagnóstico", "dx"),
        ("diagnostico", "dx"),
        ("tamizaje", "dx"),
        ("estándar de oro", "dx"),
        ("estandar de oro", "dx"),
        ("tratamiento", "tx"),
        ("terapia", "tx"),
        ("manejo", "tx"),
        ("algoritmo", "algo"),
        ("preguntas de repaso", "quiz"),
        ("banderas rojas", "danger"),
    ]


def _default_module_labels() -> dict[str, str]:
    return {
        "lesson": "Clase",
        "exam": "Examen",
        "enarm": "Caso ENARM",
        "gpc_summary": "Resumen GPC",
    }


def _default_level_labels() -> dict[str, str]:
    return {"internado": "Clínica", "pregrado": "Pregrado"}


@dc.dataclass(slots=True)
class AnnotationTables:
    """Closed label maps and ordered keyword tables used by both render paths.

    Attributes
    ----------
    badge_labels : dict[str, str]
        Known ``[badge:slug]`` slugs mapped to their chip label.
    callout_labels : dict[str, str]
        Known ``[callout:slug]`` slugs mapped to their callout heading.
    kind_keywords : list[tuple[str, SectionKind]]
        Ordered ``(keyword, kind)`` pairs. The first keyword contained in a
        normalized section title decides its kind, so order is significant.
    reserved_headings : frozenset[str]
        Normalized titles whose section is suppressed entirely.
    intro_title : str
        Title of the implicit section preceding the first heading.
    placeholder_title : str
        Title used when a heading holds nothing but badges.
    """

    badge_labels: dict[str, str] = dc.field(default_factory=_default_badge_labels)
    callout_labels: dict[str, str] = dc.field(
        default_factory=_default_callout_labels
    )
    kind_keywords: list[tuple[str, SectionKind]] = dc.field(
        default_factory=_default_kind_keywords
    )
    reserved_headings: frozenset[str] = frozenset({"contenido", "índice", "indice"})
    intro_title: str = "Introducción"
    placeholder_title: str = "Sección"


@dc.dataclass(slots=True)
class PageGeometry:
    """Fixed page geometry in millimetres (A4 portrait by default)."""

    width: float = 210.0
    height: float = 297.0
    margin_x: float = 14.0
    margin_top: float = 18.0
    margin_bottom: float = 16.0
    header_band: float = 12.0
    footer_band: float = 10.0

    @property
    def content_top(self) -> float:
        """Return the first writable baseline below the header band."""
        return self.margin_top + self.header_band

    @property
    def content_limit(self) -> float:
        """Return the lowest position content may reach above the footer band."""
        return self.height - self.margin_bottom - self.footer_band

    @property
    def content_width(self) -> float:
        """Return the usable width between the symmetric side margins."""
        return self.width - self.margin_x * 2


@dc.dataclass(slots=True)
class Typography:
    """Font choices, sizes, and vertical advance rules for print output."""

    font: str = "Helvetica"
    bold_font: str = "Helvetica-Bold"
    heading1_size: float = 18.0
    heading2_size: float = 15.0
    body_size: float = 11.0
    transcript_size: float = 10.0
    transcript_heading_size: float = 14.0
    heading_reserve: float = 10.0
    heading_pitch_large: float = 6.0
    heading_pitch_small: float = 5.0
    heading1_gap: float = 2.0
    heading2_gap: float = 1.0
    body_reserve: float = 6.0
    body_pitch: float = 5.0
    block_gap: float = 1.0
    blank_gap: float = 3.0
    list_indent: float = 6.0
    bullet: str = "•"
    transcript_pitch: float = 4.5
    transcript_gap: float = 3.0
    header_size: float = 10.0
    header_meta_size: float = 9.0
    footer_size: float = 9.0
    rule_width: float = 0.2
    rule_gap: float = 6.0
    header_rule_offset: float = 3.0


@dc.dataclass(slots=True)
class CoverLayout:
    """Hand-placed positions (mm from the top edge) for the cover page."""

    brand_y: float = 40.0
    brand_size: float = 26.0
    label_y: float = 50.0
    label_size: float = 12.0
    rule_y: float = 56.0
    rule_width: float = 0.5
    title_y: float = 72.0
    title_size: float = 16.0
    title_pitch: float = 6.5
    meta_y: float = 100.0
    meta_size: float = 12.0
    meta_pitch: float = 6.0
    note_offset: float = 30.0
    note_size: float = 10.0


@dc.dataclass(slots=True)
class PrintLabels:
    """Fixed text stamped on the cover, header, footer, and transcript."""

    brand: str = "E-Vantis"
    document_label: str = "Documento institucional"
    disclaimer: str = "E-Vantis — Uso académico. No sustituye juicio clínico."
    cover_note: str = "Generado por E-Vantis. Uso académico."
    default_title: str = "Contenido"
    transcript_heading: str = "Chat académico"
    user_speaker: str = "Tú"
    session_label: str = "Session"
    page_label: str = "Página {index} de {total}"
    missing_value: str = "—"
    module_labels: dict[str, str] = dc.field(default_factory=_default_module_labels)
    level_labels: dict[str, str] = dc.field(default_factory=_default_level_labels)
    default_level_label: str = "Automática"

    @property
    def header_label(self) -> str:
        """Return the running header text shown on every content page."""
        return f"{self.brand} — {self.document_label}"


@dc.dataclass(slots=True)
class ScreenOptions:
    """Options for the interactive screen view."""

    pygments_style: str = "monokai"
    template: str = "lesson_view.jinja"
    expanded: bool = True
    toc_label: str = "Contenido de la clase"


@dc.dataclass(slots=True)
class EngineConfig:
    """Aggregated configuration handed to both render paths."""

    tables: AnnotationTables = dc.field(default_factory=AnnotationTables)
    geometry: PageGeometry = dc.field(default_factory=PageGeometry)
    typography: Typography = dc.field(default_factory=Typography)
    cover: CoverLayout = dc.field(default_factory=CoverLayout)
    labels: PrintLabels = dc.field(default_factory=PrintLabels)
    screen: ScreenOptions = dc.field(default_factory=ScreenOptions)


__all__ = [
    "SECTION_KINDS",
    "AnnotationTables",
    "ConfigError",
    "CoverLayout",
    "EngineConfig",
    "PageGeometry",
    "PrintLabels",
    "ScreenOptions",
    "SectionKind",
    "Typography",
]
