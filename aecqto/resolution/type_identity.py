"""Type identity resolver: pick a human-meaningful type name for an element.

IFC exports rarely agree on where the type name lives.  Revit puts it in
``ObjectType`` or a "Family and Type" property, ArchiCAD in a nested type
record, others only in the element name.  The resolver gathers every
plausible candidate, scores it by source, and keeps the best one.

The result is a pure function of one :class:`MetaObject`: no caching and no
ranking across elements.  Two different elements may resolve to the same
name; that is what groups them for aggregation.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from aecqto.config import (
    GENERIC_CLASSES,
    LENGTH_BONUS_CAP,
    LENGTH_BONUS_STEP,
    MIN_CANDIDATE_LENGTH,
    RESERVED_PREFIX,
    SCORE_OBJECT_TYPE,
    SCORE_PSET_TYPE,
    SCORE_RAW_NAME,
    SCORE_TYPE,
    SCORE_TYPE_HINT,
    SCORE_TYPE_NAME,
    UNKNOWN_TYPE,
)
from aecqto.models.element import MetaObject
from aecqto.resolution.normalize import canonical_key, text_value

logger = logging.getLogger(__name__)

# Property names (canonical) that carry a type label even without "type" in them
_PSET_TYPE_KEYS = frozenset({"reference", "typename", "familyandtype", "familytype"})

# Hint keys with a dedicated score; skipped by the generic "*type*" scan
_EXPLICIT_HINT_KEYS = frozenset({
    "Type", "type", "ObjectType", "TypeName",
    "Type.Name", "Type.name", "type.Name", "type.name",
})


@dataclass(frozen=True)
class Candidate:
    """A possible type name with its score."""

    text: str
    score: int
    source: str


def length_bonus(text: str) -> int:
    return min(LENGTH_BONUS_CAP, len(text) // LENGTH_BONUS_STEP)


def _is_technical(text: str) -> bool:
    return text.lower().startswith(RESERVED_PREFIX)


def _nested_type_names(hints: Mapping[str, Any]) -> list[Any]:
    """Values of ``Type.Name``-style hints, nested or flattened."""
    values: list[Any] = []
    for outer in ("type", "Type"):
        record = hints.get(outer)
        if isinstance(record, Mapping):
            values.append(record.get("name"))
            values.append(record.get("Name"))
    for flat in ("type.name", "type.Name", "Type.name", "Type.Name"):
        values.append(hints.get(flat))
    return values


def collect_candidates(meta_object: MetaObject) -> list[Candidate]:
    """Gather and filter every type-name candidate in declaration order."""
    candidates: list[Candidate] = []

    def add(raw: Any, score: int, source: str) -> None:
        text = text_value(raw)
        if len(text) < MIN_CANDIDATE_LENGTH or _is_technical(text):
            return
        candidates.append(Candidate(text, score + length_bonus(text), source))

    hints = meta_object.type_hints or {}
    for value in _nested_type_names(hints):
        add(value, SCORE_TYPE_NAME, "Type.Name")
    add(hints.get("ObjectType"), SCORE_OBJECT_TYPE, "ObjectType")
    add(hints.get("TypeName"), SCORE_OBJECT_TYPE, "TypeName")
    add(hints.get("Type"), SCORE_TYPE, "Type")
    add(hints.get("type"), SCORE_TYPE, "type")
    for key in sorted(hints):
        if key in _EXPLICIT_HINT_KEYS or "type" not in key.lower():
            continue
        add(hints[key], SCORE_TYPE_HINT, key)

    for pset, prop in meta_object.iter_properties():
        key = canonical_key(prop.name)
        if "type" in key or key in _PSET_TYPE_KEYS:
            add(prop.value, SCORE_PSET_TYPE, f"{pset.name}.{prop.name}")

    if meta_object.raw_name:
        add(meta_object.raw_name, SCORE_RAW_NAME, "Name")

    return candidates


def best_candidate(candidates: list[Candidate]) -> Candidate | None:
    """Highest score, then longest text; earlier candidates win remaining ties."""
    if not candidates:
        return None
    return sorted(candidates, key=lambda c: (-c.score, -len(c.text)))[0]


def resolve_type_name(meta_object: MetaObject) -> str:
    """Return the best-guess type name for *meta_object*. Never empty."""
    raw_class = (meta_object.raw_class or "").strip()
    base = raw_class.lower()
    if base and base not in GENERIC_CLASSES and not base.startswith(RESERVED_PREFIX):
        return raw_class

    best = best_candidate(collect_candidates(meta_object))
    if best is not None:
        return best.text

    logger.debug("No type candidate for %s; falling back to class", meta_object.id)
    return raw_class or UNKNOWN_TYPE
