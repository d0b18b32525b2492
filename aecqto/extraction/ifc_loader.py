"""Build :class:`MetaObject` instances straight from an IFC file.

Requires ifcopenshell (``pip install aecqto[ifc]``).  Property sets and
quantity sets are both read through ``ifcopenshell.util.element.get_psets``,
so base quantities such as ``Qto_WallBaseQuantities.NetSideArea`` become
ordinary properties for the resolver.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import ifcopenshell
import ifcopenshell.util.element

from aecqto.config import ELEMENT_BASE_CLASS
from aecqto.models.element import MetaObject, Property, PropertySet

logger = logging.getLogger(__name__)


def _clean_value(value: Any) -> Any:
    if isinstance(value, ifcopenshell.entity_instance):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_clean_value(v) for v in value]
    return value


def _property_sets(element: ifcopenshell.entity_instance) -> list[PropertySet]:
    try:
        raw = ifcopenshell.util.element.get_psets(element)
    except Exception:
        logger.debug("Pset extraction failed for %s", element.GlobalId, exc_info=True)
        return []

    psets: list[PropertySet] = []
    for pset_name, props in raw.items():
        properties = [
            Property(name=k, value=_clean_value(v))
            for k, v in props.items()
            # Internal ifcopenshell id
            if k != "id"
        ]
        psets.append(PropertySet(name=pset_name, properties=properties))
    return psets


def _type_hints(element: ifcopenshell.entity_instance) -> dict[str, Any]:
    hints: dict[str, Any] = {}
    object_type = getattr(element, "ObjectType", None)
    if object_type:
        hints["ObjectType"] = object_type
    type_obj = ifcopenshell.util.element.get_type(element)
    if type_obj is not None and getattr(type_obj, "Name", None):
        hints["Type"] = {"Name": type_obj.Name}
    return hints


def meta_object_from_entity(element: ifcopenshell.entity_instance) -> MetaObject:
    """Convert one IFC element into a MetaObject."""
    return MetaObject(
        id=element.GlobalId,
        raw_class=element.is_a(),
        raw_name=element.Name,
        type_hints=_type_hints(element),
        property_sets=_property_sets(element),
    )


def meta_objects_from_file(ifc_file: ifcopenshell.file) -> list[MetaObject]:
    """Convert every element of an opened IFC file."""
    meta_objects: list[MetaObject] = []
    elements = ifc_file.by_type(ELEMENT_BASE_CLASS)
    logger.info("Found %d elements", len(elements))

    for entity in elements:
        try:
            meta_objects.append(meta_object_from_entity(entity))
        except Exception:
            logger.warning(
                "Skipping element %s (%s) due to error",
                entity.GlobalId,
                entity.is_a(),
                exc_info=True,
            )
    return meta_objects


def meta_objects_from_ifc(ifc_path: str | Path) -> list[MetaObject]:
    """Open an IFC2x3/IFC4 file and convert its elements."""
    ifc_path = Path(ifc_path)
    logger.info("Opening %s", ifc_path)
    return meta_objects_from_file(ifcopenshell.open(str(ifc_path)))
