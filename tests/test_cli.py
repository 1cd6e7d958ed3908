"""Tests for the ``lesson-pages`` command functions."""

from __future__ import annotations

import json
from pathlib import Path

import msgspec
import pytest
from bs4 import BeautifulSoup

from lesson_pages import cli
from lesson_pages.pagination import TranscriptTurn


@pytest.fixture
def lesson_file(tmp_path: Path) -> Path:
    """Write a small lesson to a temporary markdown file."""
    path = tmp_path / "asma.md"
    path.write_text(
        "## Contenido\n- Tratamiento\n\n"
        "## [badge:enarm] Tratamiento\nSalbutamol ==inhalado==.\n",
        encoding="utf-8",
    )
    return path


def test_screen_writes_html_beside_source(
    lesson_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.screen(lesson_file)
    output = lesson_file.with_suffix(".html")
    assert output.exists()
    soup = BeautifulSoup(output.read_text(encoding="utf-8"), "html.parser")
    assert soup.find("style") is not None, "stylesheet should be embedded by default"
    assert soup.select_one("#sec-1-tratamiento") is not None
    assert "wrote" in capsys.readouterr().out


def test_screen_without_stylesheet(lesson_file: Path, tmp_path: Path) -> None:
    output = tmp_path / "out" / "view.html"
    cli.screen(lesson_file, output=output, stylesheet=False)
    soup = BeautifulSoup(output.read_text(encoding="utf-8"), "html.parser")
    assert soup.find("style") is None


def test_pdf_writes_named_file_with_transcript(
    lesson_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    transcript = tmp_path / "chat.json"
    transcript.write_text(
        json.dumps(
            [
                {"role": "user", "text": "¿Dosis?", "timestamp": "10:00"},
                {"role": "other", "text": "Dos disparos."},
            ]
        ),
        encoding="utf-8",
    )
    cli.pdf(lesson_file, transcript=transcript, title="Asma: manejo", session_id="s1")
    output = tmp_path / "Asma manejo.pdf"
    assert output.read_bytes().startswith(b"%PDF")
    assert "Asma manejo.pdf" in capsys.readouterr().out


def test_load_transcript_decodes_turns(tmp_path: Path) -> None:
    path = tmp_path / "chat.json"
    path.write_text('[{"role": "user", "text": "Hola"}]', encoding="utf-8")
    assert cli.load_transcript(path) == [TranscriptTurn(role="user", text="Hola")]


def test_load_transcript_rejects_unknown_role(tmp_path: Path) -> None:
    path = tmp_path / "chat.json"
    path.write_text('[{"role": "system", "text": "Hola"}]', encoding="utf-8")
    with pytest.raises(msgspec.ValidationError):
        cli.load_transcript(path)


def test_outline_prints_sections(
    lesson_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.outline(lesson_file)
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines == ["tx\tTratamiento [enarm]\t#sec-1-tratamiento"]


def test_config_file_is_applied(
    lesson_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = tmp_path / "lesson_pages.yaml"
    config.write_text("tables:\n  reserved_headings: []\n", encoding="utf-8")
    cli.outline(lesson_file, config=config)
    lines = capsys.readouterr().out.strip().splitlines()
    assert [line.split("\t")[1] for line in lines] == [
        "Contenido",
        "Tratamiento [enarm]",
    ]
