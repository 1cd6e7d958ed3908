"""Load and validate configuration for the lesson rendering engine.

This subpackage holds the injectable label and classification tables shared by
the screen and print paths, the fixed page geometry and typography used by the
paginator, and the YAML loader that merges user overrides over the built-in
defaults. The primary entry point is :func:`load_engine_config`.

Examples
--------
>>> from lesson_pages.config import EngineConfig
>>> EngineConfig().tables.intro_title
'Introducción'
>>> EngineConfig().geometry.content_top
30.0
"""

from .helpers import normalize_heading
from .loader import build_engine_config, load_engine_config
from .models import (
    SECTION_KINDS,
    AnnotationTables,
    ConfigError,
    CoverLayout,
    EngineConfig,
    PageGeometry,
    PrintLabels,
    ScreenOptions,
    SectionKind,
    Typography,
)

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
    "build_engine_config",
    "load_engine_config",
    "normalize_heading",
]
