"""Exact-name annotation tags (mark, remarks).

Unlike quantities these fields are written consistently by upstream tooling,
so names are compared verbatim: no normalization, no scoring.
"""

from __future__ import annotations

from collections.abc import Iterable

from aecqto.config import MARK_ALIASES, REMARK_ALIASES
from aecqto.models.element import MetaObject
from aecqto.resolution.normalize import text_value


def extract_tag(meta_object: MetaObject, aliases: str | Iterable[str]) -> str | None:
    """Return the trimmed text of the first property named exactly as an alias."""
    names = {aliases} if isinstance(aliases, str) else set(aliases)
    for _pset, prop in meta_object.iter_properties():
        if prop.name in names:
            return text_value(prop.value) or None
    return None


def extract_mark(meta_object: MetaObject) -> str | None:
    return extract_tag(meta_object, MARK_ALIASES)


def extract_remarks(meta_object: MetaObject) -> str | None:
    return extract_tag(meta_object, REMARK_ALIASES)
