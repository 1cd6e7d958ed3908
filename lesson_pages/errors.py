"""Exception types raised by the lesson rendering engine."""

from __future__ import annotations


class RenderError(RuntimeError):
    """Raised when markdown conversion fails and no view can be produced."""


__all__ = ["RenderError"]
