r"""Render annotated lesson markdown for the screen and for print.

The screen path groups a lesson into collapsible, classified sections with a
table of contents; the print path paginates the same lesson onto fixed A4
pages behind a cover, with running header and footer and an optional chat
transcript appendix.

Exports
-------
- ``render``: Dispatch markdown to the ``"screen"`` or ``"print"`` path.
- ``app``: Cyclopts application behind the ``lesson-pages`` command.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from lesson_pages import render
>>> view = render("## Tratamiento\nReposo.", "screen")
>>> view.sections[0].kind
'tx'
>>> render("## Tratamiento\nReposo.", "print").page_count
2
"""

from __future__ import annotations

from .cli import app, main
from .errors import RenderError
from .render import render

__all__ = ["RenderError", "app", "main", "render"]
