"""Cyclopts CLI entrypoint for rendering lesson markdown.

The ``lesson-pages`` console script defined here renders a lesson either as
the sectioned screen fragment (``lesson-pages screen``) or as a paginated PDF
with cover and optional chat transcript (``lesson-pages pdf``).
``lesson-pages outline`` prints the sections the screen view would show,
which is handy when checking how headings were classified.

Examples
--------
Render the screen fragment next to the source file:

>>> from lesson_pages.cli import app
>>> app.run(["screen", "asma.md"])  # doctest: +SKIP

Write a PDF with a transcript appendix:

>>> app.run(
...     ["pdf", "asma.md", "--transcript", "chat.json", "--session-id", "abc"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import datetime as dt
import logging
import typing as typ
from pathlib import Path

import cyclopts
import msgspec
from cyclopts import App, Parameter

from .config import EngineConfig, load_engine_config
from .pagination import DocumentMeta, TranscriptTurn, suggest_filename, write_pdf
from .render import render

logger = logging.getLogger(__name__)

app = App(
    name="lesson-pages",
    config=cyclopts.config.Env("LESSON_PAGES_", command=False),  # type: ignore[unknown-argument]
)


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _load_config(path: Path | None) -> EngineConfig:
    return load_engine_config(path) if path is not None else EngineConfig()


def _read_source(source: Path) -> str:
    return source.read_text(encoding="utf-8")


def load_transcript(path: Path) -> list[TranscriptTurn]:
    """Decode a JSON array of ``{"role", "text", "timestamp"}`` turns.

    Raises
    ------
    msgspec.ValidationError
        If an entry is missing ``role``/``text`` or uses an unknown role.
    """
    return msgspec.json.decode(path.read_bytes(), type=list[TranscriptTurn])


@app.command(help="Render lesson markdown as a sectioned HTML fragment.")
def screen(
    source: Path,
    *,
    output: typ.Annotated[
        Path | None, Parameter(help="Output HTML path (defaults beside source)")
    ] = None,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to engine config YAML")
    ] = None,
    stylesheet: typ.Annotated[
        bool, Parameter(help="Embed the code highlighting stylesheet")
    ] = True,
) -> None:
    """Render ``source`` for the screen and write the HTML fragment.

    Parameters
    ----------
    source : Path
        Lesson markdown file.
    output : Path or None, optional
        Destination file; defaults to ``source`` with an ``.html`` suffix.
    config : Path or None, optional
        Engine configuration overriding the built-in tables and labels.
    stylesheet : bool, optional
        When ``True`` (default) the Pygments CSS is prepended in a
        ``<style>`` element.
    """
    view = render(_read_source(source), "screen", config=_load_config(config))
    html = view.html
    if stylesheet and view.stylesheet:
        html = f"<style>\n{view.stylesheet}\n</style>\n{html}"
    destination = output or source.with_suffix(".html")
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(html, encoding="utf-8")
    print(f"wrote {_format_path(destination)}")


@app.command(help="Paginate lesson markdown into a PDF with cover and footer.")
def pdf(  # noqa: PLR0913 - mirrors the cover metadata fields
    source: Path,
    *,
    output: typ.Annotated[
        Path | None, Parameter(help="Output PDF path (defaults to the title)")
    ] = None,
    transcript: typ.Annotated[
        Path | None, Parameter(help="JSON file with chat transcript turns")
    ] = None,
    title: typ.Annotated[str | None, Parameter(help="Document title")] = None,
    subject: typ.Annotated[str | None, Parameter(help="Subject name")] = None,
    topic: typ.Annotated[str | None, Parameter(help="Topic name")] = None,
    module: typ.Annotated[str | None, Parameter(help="Module key")] = None,
    level: typ.Annotated[str | None, Parameter(help="Depth level key")] = None,
    duration: typ.Annotated[
        int | None, Parameter(help="Duration in minutes")
    ] = None,
    session_id: typ.Annotated[str | None, Parameter(help="Session identifier")] = None,
    plan: typ.Annotated[str | None, Parameter(help="Subscription plan")] = None,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to engine config YAML")
    ] = None,
) -> None:
    """Paginate ``source`` and write the PDF.

    Parameters
    ----------
    source : Path
        Lesson markdown file.
    output : Path or None, optional
        Destination file; defaults to a name derived from ``title`` in the
        source directory.
    transcript : Path or None, optional
        JSON array of transcript turns appended after the content.
    title, subject, topic, module, level, duration, session_id, plan
        Cover and header fields; missing values print as a dash.
    config : Path or None, optional
        Engine configuration overriding geometry, typography, and labels.
    """
    engine_config = _load_config(config)
    turns = load_transcript(transcript) if transcript is not None else None
    meta = DocumentMeta(
        title=title,
        subject_name=subject,
        topic_name=topic,
        module=module,
        level=level,
        duration_minutes=duration,
        session_id=session_id,
        plan=plan,
        generated_at=dt.datetime.now().astimezone(),
    )
    document = render(
        _read_source(source), "print", turns, config=engine_config, meta=meta
    )
    payload = write_pdf(document, engine_config.geometry, title=title)
    destination = output or source.parent / f"{suggest_filename(title)}.pdf"
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(payload)
    logger.debug("PDF for %s has %d pages", source, document.page_count)
    print(f"wrote {_format_path(destination)}")


@app.command(help="List the sections the screen view would show.")
def outline(
    source: Path,
    *,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to engine config YAML")
    ] = None,
) -> None:
    """Print one line per section: kind, title, badges, and anchor."""
    view = render(_read_source(source), "screen", config=_load_config(config))
    for section in view.sections:
        badges = f" [{', '.join(section.badges)}]" if section.badges else ""
        print(f"{section.kind}\t{section.title}{badges}\t#{section.anchor}")


def main() -> None:
    """Invoke the Cyclopts application that powers ``lesson-pages``.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
