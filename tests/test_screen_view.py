"""End-to-end tests for the rendered screen fragment.

The fragment is parsed with BeautifulSoup so assertions target the structure
a browser would see: the table of contents, one collapsible region per
section, badge chips, callout asides, and escaped raw HTML.
"""

from __future__ import annotations

from textwrap import dedent

import pytest
from bs4 import BeautifulSoup

from lesson_pages.config import EngineConfig, ScreenOptions
from lesson_pages.errors import RenderError
from lesson_pages.screen import MarkdownConverter, ScreenRenderer


@pytest.fixture
def lesson_markdown() -> str:
    """Return a lesson exercising every annotation convention."""
    return dedent(
        """\
        Lección generada para repaso.

        ## Contenido
        - Epidemiología
        - Tratamiento

        ## [badge:concepto_clave] Epidemiología
        La prevalencia es ==alta== en adultos.

        ## [badge:enarm] [badge:gpc] Tratamiento
        > [callout:advertencia]
        > No suspender bruscamente.

        Vigilar la respuesta.

        > [callout:bogus]
        > Cita normal.

        ```python
        dosis = 5
        ```
        """
    )


@pytest.fixture
def soup(lesson_markdown: str) -> BeautifulSoup:
    """Render the lesson fixture and parse the fragment."""
    view = ScreenRenderer().render(lesson_markdown)
    return BeautifulSoup(view.html, "html.parser")


def test_toc_lists_each_emitted_section(soup: BeautifulSoup) -> None:
    links = soup.select("nav.lesson-toc a")
    assert [link.get_text(strip=True) for link in links] == [
        "Introducción",
        "Epidemiología",
        "Tratamiento",
    ]
    assert [link["href"] for link in links] == [
        "#sec-1-introduccion",
        "#sec-2-epidemiologia",
        "#sec-3-tratamiento",
    ]


def test_sections_are_collapsible_and_classified(soup: BeautifulSoup) -> None:
    sections = soup.select("details.lesson-section")
    assert [section["id"] for section in sections] == [
        "sec-1-introduccion",
        "sec-2-epidemiologia",
        "sec-3-tratamiento",
    ]
    assert [section["data-kind"] for section in sections] == ["other", "core", "tx"]
    assert "kind-tx" in sections[2]["class"]
    assert all(section.has_attr("open") for section in sections)


def test_reserved_section_is_absent(soup: BeautifulSoup) -> None:
    titles = [
        span.get_text(strip=True) for span in soup.select(".lesson-section-title")
    ]
    assert "Contenido" not in titles
    intro = soup.select_one("#sec-1-introduccion")
    assert intro is not None
    assert intro.select("ul") == [], "the reserved list must not be rendered"


def test_badges_render_as_labelled_chips(soup: BeautifulSoup) -> None:
    chips = soup.select("#sec-3-tratamiento .lesson-badge")
    assert [chip.get_text(strip=True) for chip in chips] == ["ENARM", "GPC"]
    assert "badge-enarm" in chips[0]["class"]
    summary = soup.select_one("#sec-2-epidemiologia summary")
    assert summary is not None
    assert "[badge:" not in summary.get_text()


def test_highlight_renders_as_mark(soup: BeautifulSoup) -> None:
    marks = soup.select("#sec-2-epidemiologia mark")
    assert [mark.get_text() for mark in marks] == ["alta"]
    assert "==" not in soup.select_one("#sec-2-epidemiologia").get_text()


def test_callouts_are_labelled_asides(soup: BeautifulSoup) -> None:
    asides = soup.select("#sec-3-tratamiento aside.lesson-callout")
    assert len(asides) == 1
    aside = asides[0]
    assert aside["data-callout"] == "advertencia"
    label = aside.select_one(".lesson-callout-label")
    assert label is not None
    assert label.get_text(strip=True) == "Advertencia"
    assert "[callout:" not in aside.get_text()
    quote = soup.select_one("#sec-3-tratamiento blockquote")
    assert quote is not None
    assert "[callout:bogus]" in quote.get_text()


def test_code_blocks_are_highlighted(soup: BeautifulSoup) -> None:
    code = soup.select_one("#sec-3-tratamiento div.codehilite")
    assert code is not None, "expected a codehilite block in the section"
    assert "dosis" in code.get_text()


def test_raw_html_is_escaped() -> None:
    view = ScreenRenderer().render(
        "## Tema\n<script>alert(1)</script>\n\nTexto <b>negrita</b>."
    )
    soup = BeautifulSoup(view.html, "html.parser")
    assert soup.find("script") is None
    assert soup.find("b") is None
    assert "<script>" in soup.select_one("#sec-1-tema").get_text()


def test_unsafe_link_targets_are_removed() -> None:
    view = ScreenRenderer().render(
        "## Tema\n[malo](javascript:alert(1)) y [bueno](https://example.org)"
    )
    soup = BeautifulSoup(view.html, "html.parser")
    links = soup.select("#sec-1-tema a")
    assert [link.get("href") for link in links] == [None, "https://example.org"]


def test_collapsed_option_omits_open_attribute() -> None:
    config = EngineConfig(screen=ScreenOptions(expanded=False))
    view = ScreenRenderer(config).render("## Tema\nTexto.")
    soup = BeautifulSoup(view.html, "html.parser")
    section = soup.select_one("details.lesson-section")
    assert section is not None
    assert not section.has_attr("open")


def test_view_exposes_stylesheet_and_structure(lesson_markdown: str) -> None:
    view = ScreenRenderer().render(lesson_markdown)
    assert ".codehilite" in view.stylesheet
    assert len(view.sections) == len(view.toc) == 3


def test_converter_failure_is_wrapped(monkeypatch: pytest.MonkeyPatch) -> None:
    def _boom(self: object, source: str) -> str:
        raise ValueError("broken extension")

    monkeypatch.setattr("markdown.Markdown.convert", _boom)
    with pytest.raises(RenderError) as excinfo:
        MarkdownConverter().convert("## Tema")
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_fenced_code_keeps_equality_operators() -> None:
    view = ScreenRenderer().render(
        "## Tema\n```\nif a == b and c == d:\n    pass\n```"
    )
    soup = BeautifulSoup(view.html, "html.parser")
    code = soup.select_one("#sec-1-tema pre")
    assert code is not None, "expected the fenced block to render as <pre>"
    assert "if a == b and c == d:" in code.get_text()
    assert soup.select("#sec-1-tema mark") == []


def test_inline_code_keeps_highlight_delimiters() -> None:
    view = ScreenRenderer().render("## Tema\nUsa `x ==y== z` y ==esto==.")
    soup = BeautifulSoup(view.html, "html.parser")
    code = soup.select_one("#sec-1-tema code")
    assert code is not None
    assert code.get_text() == "x ==y== z"
    assert [mark.get_text() for mark in soup.select("#sec-1-tema mark")] == ["esto"]


def test_unknown_callout_quote_renders_verbatim() -> None:
    view = ScreenRenderer().render("## Tema\n> [callout:bogus]\n> cuerpo")
    soup = BeautifulSoup(view.html, "html.parser")
    paragraphs = soup.select("#sec-1-tema blockquote p")
    assert len(paragraphs) == 1, "the quote should stay a single paragraph"
    assert paragraphs[0].get_text() == "[callout:bogus]\ncuerpo"


def test_callout_tag_inside_fence_is_code() -> None:
    view = ScreenRenderer().render("## Tema\n```\n> [callout:nota]\n> texto\n```")
    soup = BeautifulSoup(view.html, "html.parser")
    assert soup.select("aside.lesson-callout") == []
    code = soup.select_one("#sec-1-tema pre")
    assert code is not None
    assert "> [callout:nota]\n> texto" in code.get_text()
