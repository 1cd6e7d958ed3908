"""Utility helpers shared by the lesson_pages configuration loader."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from .models import (
    SECTION_KINDS,
    AnnotationTables,
    ConfigError,
    PageGeometry,
    SectionKind,
)

T = typ.TypeVar("T")


def normalize_heading(text: str) -> str:
    """Return ``text`` trimmed, without a trailing colon, and case folded."""
    return text.strip().rstrip(":").strip().casefold()


def _require_mapping(value: object, section: str) -> typ.Mapping[str, typ.Any]:
    """Return ``value`` when it is a mapping, treating ``None`` as empty."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = f"Configuration section '{section}' must be a mapping."
        raise ConfigError(msg)
    return typ.cast("typ.Mapping[str, typ.Any]", value)


def _merge_fields(
    base: T, override: typ.Mapping[str, typ.Any] | None, section: str
) -> T:
    """Return a copy of the dataclass ``base`` with ``override`` applied.

    Unknown keys are rejected so typos in YAML never pass silently.
    """
    if not override:
        return base
    known = {field.name for field in dc.fields(typ.cast("typ.Any", base))}
    unknown = sorted(set(override) - known)
    if unknown:
        msg = f"Unknown keys in '{section}': {', '.join(unknown)}"
        raise ConfigError(msg)
    return dc.replace(typ.cast("typ.Any", base), **dict(override))


def _parse_label_map(value: object, section: str) -> dict[str, str]:
    """Normalize a slug -> label mapping, lowercasing the slugs."""
    mapping = _require_mapping(value, section)
    result: dict[str, str] = {}
    for slug, label in mapping.items():
        key = str(slug).strip().lower()
        text = str(label).strip()
        if not key or not text:
            msg = f"Empty slug or label in '{section}'."
            raise ConfigError(msg)
        result[key] = text
    return result


def _parse_kind_keywords(value: object) -> list[tuple[str, SectionKind]]:
    """Parse the ordered keyword table, accepting pairs or small mappings."""
    if not isinstance(value, list):
        msg = "'tables.kind_keywords' must be a list."
        raise ConfigError(msg)
    pairs: list[tuple[str, SectionKind]] = []
    for entry in value:
        match entry:
            case [keyword, kind]:
                pass
            case {"keyword": keyword, "kind": kind}:
                pass
            case _:
                msg = f"Invalid kind keyword entry: {entry!r}"
                raise ConfigError(msg)
        if kind not in SECTION_KINDS:
            msg = f"Unknown section kind '{kind}' for keyword '{keyword}'."
            raise ConfigError(msg)
        pairs.append((normalize_heading(str(keyword)), typ.cast("SectionKind", kind)))
    return pairs


def _build_tables(payload: typ.Mapping[str, typ.Any]) -> AnnotationTables:
    """Build AnnotationTables from a YAML mapping, keeping defaults for gaps."""
    overrides: dict[str, typ.Any] = dict(payload)
    if "badge_labels" in overrides:
        overrides["badge_labels"] = _parse_label_map(
            overrides["badge_labels"], "tables.badge_labels"
        )
    if "callout_labels" in overrides:
        overrides["callout_labels"] = _parse_label_map(
            overrides["callout_labels"], "tables.callout_labels"
        )
    if "kind_keywords" in overrides:
        overrides["kind_keywords"] = _parse_kind_keywords(overrides["kind_keywords"])
    if "reserved_headings" in overrides:
        reserved = overrides["reserved_headings"] or []
        overrides["reserved_headings"] = frozenset(
            normalize_heading(str(item)) for item in reserved
        )
    return _merge_fields(AnnotationTables(), overrides, "tables")


def _validate_geometry(geometry: PageGeometry) -> PageGeometry:
    """Reject geometries that leave no writable area on a content page."""
    if geometry.content_width <= 0:
        msg = "Page margins leave no horizontal space for content."
        raise ConfigError(msg)
    if geometry.content_limit <= geometry.content_top:
        msg = "Page bands and margins leave no vertical space for content."
        raise ConfigError(msg)
    return geometry


__all__ = [
    "_build_tables",
    "_merge_fields",
    "_parse_kind_keywords",
    "_parse_label_map",
    "_require_mapping",
    "_validate_geometry",
    "normalize_heading",
]
