"""Tests for loading engine configuration from YAML."""

from __future__ import annotations

from pathlib import Path

import pytest

from lesson_pages.config import (
    ConfigError,
    EngineConfig,
    build_engine_config,
    load_engine_config,
    normalize_heading,
)


def _write(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "lesson_pages.yaml"
    path.write_text(body.strip() + "\n", encoding="utf-8")
    return path


def test_defaults_match_a4_layout() -> None:
    config = EngineConfig()
    assert config.geometry.content_top == 30.0
    assert config.geometry.content_limit == 271.0
    assert config.geometry.content_width == 182.0
    assert config.labels.header_label == "E-Vantis — Documento institucional"


def test_yaml_overrides_merge_over_defaults(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
tables:
  badge_labels:
    Nuevo: Nuevo tema
  kind_keywords:
    - [Fisiopatología, core]
    - keyword: "Algoritmo:"
      kind: algo
  reserved_headings: [Temario]
geometry:
  margin_x: 20
labels:
  brand: Clínica Demo
screen:
  expanded: false
""",
    )
    config = load_engine_config(path)
    assert config.tables.badge_labels == {"nuevo": "Nuevo tema"}
    assert config.tables.kind_keywords == [
        ("fisiopatología", "core"),
        ("algoritmo", "algo"),
    ]
    assert config.tables.reserved_headings == frozenset({"temario"})
    assert config.tables.callout_labels["nota"] == "Nota", "untouched tables keep defaults"
    assert config.geometry.margin_x == 20
    assert config.geometry.width == 210.0
    assert config.labels.brand == "Clínica Demo"
    assert config.labels.header_label == "Clínica Demo — Documento institucional"
    assert config.screen.expanded is False


def test_empty_file_yields_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_engine_config(path) == EngineConfig()


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_engine_config(tmp_path / "absent.yaml")


def test_non_mapping_top_level_raises(tmp_path: Path) -> None:
    path = _write(tmp_path, "- just\n- a list")
    with pytest.raises(TypeError):
        load_engine_config(path)


@pytest.mark.parametrize(
    ("raw", "fragment"),
    [
        ({"layout": {}}, "Unknown configuration sections: layout"),
        ({"geometry": {"gutter": 3}}, "Unknown keys in 'geometry': gutter"),
        ({"geometry": []}, "must be a mapping"),
        ({"tables": {"kind_keywords": [["fiebre", "urgent"]]}}, "Unknown section kind"),
        ({"tables": {"kind_keywords": ["fiebre"]}}, "Invalid kind keyword entry"),
        ({"tables": {"kind_keywords": "fiebre"}}, "must be a list"),
        ({"tables": {"badge_labels": {"x": ""}}}, "Empty slug or label"),
        ({"geometry": {"margin_x": 120}}, "no horizontal space"),
        ({"geometry": {"height": 50}}, "no vertical space"),
    ],
)
def test_invalid_configuration_raises(raw: dict[str, object], fragment: str) -> None:
    with pytest.raises(ConfigError) as excinfo:
        build_engine_config(raw)
    assert fragment in str(excinfo.value)


def test_config_error_is_value_error() -> None:
    assert issubclass(ConfigError, ValueError)


@pytest.mark.parametrize(
    ("text", "expected"),
    [(" Contenido: ", "contenido"), ("ÍNDICE", "índice"), ("Tema :", "tema")],
)
def test_normalize_heading(text: str, expected: str) -> None:
    assert normalize_heading(text) == expected
