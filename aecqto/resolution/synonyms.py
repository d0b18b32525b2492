"""Synonym dictionaries: property names that mean area, volume, length or mass.

The lists are plain data in English, Catalan and Spanish.  They are turned
into sets of canonical keys so that ``"Net Side Area"``, ``"NetSideArea"``
and ``"net_side_area"`` all match the same entry.  Extra synonyms can be
loaded from a JSON file (see :func:`build_synonym_sets`).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from aecqto.resolution.normalize import canonical_key

logger = logging.getLogger(__name__)

AREA_SYNONYMS: list[str] = [
    # IFC base quantities
    "NetArea", "GrossArea", "Area",
    "NetSideArea", "GrossSideArea", "SideArea",
    "NetSurfaceArea", "GrossSurfaceArea", "SurfaceArea",
    "OuterSurfaceArea", "TotalSurfaceArea", "ExternalSurfaceArea",
    "NetFootprintArea", "GrossFootprintArea", "FootprintArea",
    "NetFloorArea", "GrossFloorArea", "NetCeilingArea", "GrossCeilingArea",
    "NetWallArea", "GrossWallArea", "ProjectedArea", "GlazedArea",
    "CrossSectionArea",
    # Catalan / Spanish
    "Superficie", "Superfície", "Superficie neta", "Superficie bruta",
    "Àrea", "Área", "Area neta", "Area bruta",
]

VOLUME_SYNONYMS: list[str] = [
    "NetVolume", "GrossVolume", "Volume", "Vol",
    "Volumen", "Volum", "Volumen neto", "Volumen bruto", "Volum net", "Volum brut",
]

LENGTH_SYNONYMS: list[str] = [
    "Length", "NetLength", "GrossLength", "Len",
    "Perimeter", "GrossPerimeter", "NetPerimeter",
    "Longitud", "Longitud neta", "Perímetre", "Perímetro",
    # Some exporters only carry a single linear dimension
    "Height", "Width", "Depth",
    "Altura", "Alçada", "Anchura", "Amplada", "Profundidad", "Profunditat",
]

MASS_SYNONYMS: list[str] = [
    "Mass", "NetMass", "GrossMass", "NetWeight", "GrossWeight", "Weight",
    "Massa", "Masa", "Peso", "Pes",
]

SYNONYM_LISTS: dict[str, list[str]] = {
    "area": AREA_SYNONYMS,
    "volume": VOLUME_SYNONYMS,
    "length": LENGTH_SYNONYMS,
    "mass": MASS_SYNONYMS,
}


def to_key_set(labels: Iterable[str]) -> frozenset[str]:
    """Normalize every label into a canonical key; empty keys are dropped."""
    return frozenset(k for k in (canonical_key(label) for label in labels) if k)


def build_synonym_sets(
    extra: Mapping[str, Iterable[str]] | None = None,
) -> dict[str, frozenset[str]]:
    """Return canonical key sets per quantity, optionally extended by *extra*.

    Unknown quantity names in *extra* are ignored with a warning.
    """
    lists: dict[str, list[str]] = {name: list(labels) for name, labels in SYNONYM_LISTS.items()}
    for name, labels in (extra or {}).items():
        if name not in lists:
            logger.warning("Ignoring synonyms for unknown quantity %r", name)
            continue
        lists[name].extend(labels)
    return {name: to_key_set(labels) for name, labels in lists.items()}


_DEFAULT_SETS = build_synonym_sets()

AREA_KEYS = _DEFAULT_SETS["area"]
VOLUME_KEYS = _DEFAULT_SETS["volume"]
LENGTH_KEYS = _DEFAULT_SETS["length"]
MASS_KEYS = _DEFAULT_SETS["mass"]
