"""Resolve physical quantities from an element's property sets."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from aecqto.models.element import MetaObject, PropertySet
from aecqto.models.quantities import ResolvedQuantities
from aecqto.resolution.normalize import canonical_key, parse_number
from aecqto.resolution.synonyms import AREA_KEYS, LENGTH_KEYS, MASS_KEYS, VOLUME_KEYS
from aecqto.resolution.tags import extract_mark, extract_remarks

logger = logging.getLogger(__name__)

DEFAULT_SYNONYM_SETS: dict[str, frozenset[str]] = {
    "area": AREA_KEYS,
    "volume": VOLUME_KEYS,
    "length": LENGTH_KEYS,
    "mass": MASS_KEYS,
}


def resolve_property(
    property_sets: Sequence[PropertySet] | Any,
    synonyms: frozenset[str] | set[str],
) -> float | None:
    """Return the first strictly positive value whose name is in *synonyms*.

    Property sets are scanned in order and properties in order within each
    set.  Matches that are unparseable, zero or negative are skipped and the
    scan continues.  This is first-match, not best-match: when a graph carries
    both a gross and a net figure, whichever is declared first wins.
    """
    if not isinstance(property_sets, (list, tuple)):
        return None
    for pset in property_sets:
        for prop in getattr(pset, "properties", None) or ():
            if canonical_key(prop.name) not in synonyms:
                continue
            number = parse_number(prop.value)
            if number is not None and number > 0:
                return number
    return None


def resolve_quantities(
    meta_object: MetaObject,
    synonym_sets: Mapping[str, frozenset[str]] | None = None,
) -> ResolvedQuantities:
    """Resolve length, area, volume, mass and the mark/remarks tags of one element."""
    sets = synonym_sets or DEFAULT_SYNONYM_SETS
    psets = meta_object.property_sets
    return ResolvedQuantities(
        length=resolve_property(psets, sets["length"]),
        area=resolve_property(psets, sets["area"]),
        volume=resolve_property(psets, sets["volume"]),
        mass=resolve_property(psets, sets["mass"]),
        mark=extract_mark(meta_object),
        remarks=extract_remarks(meta_object),
    )


def primary_value(
    meta_object: MetaObject,
    synonym_sets: Mapping[str, frozenset[str]] | None = None,
) -> float:
    """Single headline figure for an element: area, else volume, length, mass, else 1."""
    sets = synonym_sets or DEFAULT_SYNONYM_SETS
    for name in ("area", "volume", "length", "mass"):
        value = resolve_property(meta_object.property_sets, sets[name])
        if value is not None:
            return value
    return 1.0
