"""Tests for the line-oriented block tokenizer used by the print path."""

from __future__ import annotations

import pytest

from lesson_pages.blocks import (
    Blank,
    Heading1,
    Heading2,
    ListItem,
    Paragraph,
    classify_line,
    tokenize_blocks,
)


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("# Título", Heading1("Título")),
        ("## Subtítulo", Heading2("Subtítulo")),
        ("  ## Sangrado  ", Heading2("Sangrado")),
        ("- elemento", ListItem("elemento")),
        ("   ", Blank()),
        ("### Tercer nivel", Paragraph("### Tercer nivel")),
        ("#sin espacio", Paragraph("#sin espacio")),
        ("* asterisco", Paragraph("* asterisco")),
    ],
)
def test_classify_line(line: str, expected: object) -> None:
    assert classify_line(line) == expected


def test_tokenize_preserves_order_and_blanks() -> None:
    blocks = tokenize_blocks("# A\n\n## B\ntexto\n- uno\n- dos")
    assert blocks == [
        Heading1("A"),
        Blank(),
        Heading2("B"),
        Paragraph("texto"),
        ListItem("uno"),
        ListItem("dos"),
    ]


def test_empty_input_is_one_blank_block() -> None:
    assert tokenize_blocks("") == [Blank()]


def test_badges_are_kept_when_not_stripped_first() -> None:
    assert tokenize_blocks("## [badge:enarm] Asma") == [Heading2("[badge:enarm] Asma")]
