"""Load engine configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ

from ruamel.yaml import YAML

from .helpers import (
    _build_tables,
    _merge_fields,
    _require_mapping,
    _validate_geometry,
)
from .models import (
    ConfigError,
    CoverLayout,
    EngineConfig,
    PageGeometry,
    PrintLabels,
    ScreenOptions,
    Typography,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

KNOWN_SECTIONS = ("tables", "geometry", "typography", "cover", "labels", "screen")


def load_engine_config(path: Path) -> EngineConfig:
    """Load the YAML configuration overriding the engine defaults.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file.

    Returns
    -------
    EngineConfig
        Configuration with every section merged over the built-in defaults.
        Sections absent from the file keep their defaults.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    ConfigError
        If a section holds unknown keys, an unknown section kind, or a page
        geometry without writable space.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from lesson_pages.config import load_engine_config
    >>> config = load_engine_config(Path("lesson_pages.yaml"))  # doctest: +SKIP
    >>> config.geometry.width  # doctest: +SKIP
    210.0
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    return build_engine_config(raw)


def build_engine_config(raw: typ.Mapping[str, typ.Any]) -> EngineConfig:
    """Build an EngineConfig from an already parsed mapping."""
    unknown = sorted(set(raw) - set(KNOWN_SECTIONS))
    if unknown:
        msg = f"Unknown configuration sections: {', '.join(unknown)}"
        raise ConfigError(msg)
    tables = _build_tables(_require_mapping(raw.get("tables"), "tables"))
    geometry = _validate_geometry(
        _merge_fields(
            PageGeometry(), _require_mapping(raw.get("geometry"), "geometry"), "geometry"
        )
    )
    typography = _merge_fields(
        Typography(), _require_mapping(raw.get("typography"), "typography"), "typography"
    )
    cover = _merge_fields(
        CoverLayout(), _require_mapping(raw.get("cover"), "cover"), "cover"
    )
    labels = _merge_fields(
        PrintLabels(), _require_mapping(raw.get("labels"), "labels"), "labels"
    )
    screen = _merge_fields(
        ScreenOptions(), _require_mapping(raw.get("screen"), "screen"), "screen"
    )
    return EngineConfig(
        tables=tables,
        geometry=geometry,
        typography=typography,
        cover=cover,
        labels=labels,
        screen=screen,
    )


__all__ = ["KNOWN_SECTIONS", "build_engine_config", "load_engine_config"]
