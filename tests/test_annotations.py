"""Tests for the highlight, badge, and callout annotation helpers."""

from __future__ import annotations

import pytest

from lesson_pages.annotations import (
    extract_highlights,
    fenced_line_flags,
    isolate_callout_tags,
    label_callout_tags,
    parse_callout_slug,
    parse_leading_badges,
    split_highlight_runs,
    strip_heading_badges,
    strip_highlights,
)
from lesson_pages.config import AnnotationTables


def test_highlight_wraps_single_line_span() -> None:
    assert extract_highlights("a ==b== c") == "a <mark>b</mark> c"


@pytest.mark.parametrize(
    "text",
    [
        "a ==b\nc== d",
        "x ====  y",
        "x ==   == y",
        "a ===b=== c",
        "sin cierre ==abierto",
    ],
)
def test_malformed_highlights_stay_literal(text: str) -> None:
    assert extract_highlights(text) == text, (
        f"expected {text!r} to be left untouched"
    )


def test_highlight_trims_inner_whitespace() -> None:
    assert extract_highlights("==  dosis  ==") == "<mark>dosis</mark>"


def test_split_runs_marks_only_the_span() -> None:
    assert split_highlight_runs("a ==b== c") == [
        ("a ", False),
        ("b", True),
        (" c", False),
    ]


def test_split_runs_keeps_crossing_delimiters_literal() -> None:
    runs = split_highlight_runs("a ==b")
    assert runs == [("a ==b", False)]


def test_known_badge_is_extracted() -> None:
    parsed = parse_leading_badges("[badge:concepto_clave] Tema")
    assert parsed.title == "Tema"
    assert parsed.badges == ("concepto_clave",)


def test_unknown_badge_is_dropped_silently() -> None:
    parsed = parse_leading_badges("[badge:bogus] Tema")
    assert parsed.title == "Tema"
    assert parsed.badges == ()


def test_at_most_two_badges_are_consumed() -> None:
    parsed = parse_leading_badges("[badge:enarm][badge:gpc][badge:perla_clinica] Tema")
    assert parsed.badges == ("enarm", "gpc")
    assert parsed.title == "[badge:perla_clinica] Tema", (
        "a third badge tag should remain part of the title"
    )


def test_badge_only_heading_gets_placeholder_title() -> None:
    assert parse_leading_badges("[badge:enarm]").title == "Sección"


def test_badge_lookup_uses_injected_tables() -> None:
    tables = AnnotationTables(badge_labels={"nuevo": "Nuevo"})
    parsed = parse_leading_badges("[badge:nuevo] [badge:enarm] Tema", tables)
    assert parsed.badges == ("nuevo",)
    assert parsed.title == "Tema"


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("[callout:advertencia]", "advertencia"),
        ("  [callout:PERLA]  ", "perla"),
        ("[callout:bogus]", None),
        ("[callout:nota] texto", None),
        ("Nota", None),
    ],
)
def test_parse_callout_slug(line: str, expected: str | None) -> None:
    assert parse_callout_slug(line) == expected


def test_isolate_callout_tags_inserts_quote_break() -> None:
    source = "> [callout:nota]\n> Texto de la nota"
    assert isolate_callout_tags(source) == "> [callout:nota]\n>\n> Texto de la nota"


def test_isolate_callout_tags_leaves_plain_quotes_alone() -> None:
    source = "> cita\n> sigue"
    assert isolate_callout_tags(source) == source


def test_strip_heading_badges_only_touches_headings() -> None:
    source = "## [badge:enarm] Asma\n[badge:enarm] en texto"
    assert strip_heading_badges(source) == "## Asma\n[badge:enarm] en texto"


def test_label_callout_tags_replaces_known_tags() -> None:
    source = "> [callout:advertencia]\n> Cuidado\n> [callout:bogus]"
    assert label_callout_tags(source) == "> Advertencia\n> Cuidado\n> [callout:bogus]"


def test_highlights_skip_fenced_code() -> None:
    source = "==uno==\n```\nif a == b and c == d:\n```\n~~~\nx ==y==\n~~~\n==dos=="
    assert extract_highlights(source) == (
        "<mark>uno</mark>\n```\nif a == b and c == d:\n```\n~~~\nx ==y==\n~~~\n"
        "<mark>dos</mark>"
    )


def test_highlights_skip_inline_code_spans() -> None:
    assert extract_highlights("`x ==y== z` y ==esto==") == (
        "`x ==y== z` y <mark>esto</mark>"
    )
    assert extract_highlights("``a ==b==`` c") == "``a ==b==`` c"


def test_fence_closes_only_on_matching_bare_fence() -> None:
    lines = ["```python", "~~~", "```", "texto"]
    assert fenced_line_flags(lines) == [True, True, True, False]


def test_strip_highlights_keeps_display_text() -> None:
    assert strip_highlights("==Asma== ==") == "Asma =="


def test_isolate_callout_tags_ignores_unknown_slugs() -> None:
    source = "> [callout:bogus]\n> cuerpo"
    assert isolate_callout_tags(source) == source


def test_isolate_callout_tags_ignores_fenced_code() -> None:
    source = "```\n> [callout:nota]\n> texto\n```"
    assert isolate_callout_tags(source) == source


def test_isolate_callout_tags_uses_injected_tables() -> None:
    tables = AnnotationTables(callout_labels={"caso": "Caso clínico"})
    source = "> [callout:caso]\n> texto"
    assert isolate_callout_tags(source, tables) == "> [callout:caso]\n>\n> texto"


def test_label_callout_tags_ignores_fenced_code() -> None:
    source = "```\n> [callout:nota]\n```"
    assert label_callout_tags(source) == source
