"""Decode viewer metadata JSON into :class:`MetaObject` instances.

Accepted payloads:

* a list of meta object dicts;
* a mapping of ``id -> meta object dict``;
* a metadata document ``{"metaObjects": [...], "propertySets": [...]}``
  where meta objects may reference shared property sets by
  ``propertySetIds``.

Exporters disagree on capitalisation, so ``name``/``Name`` and
``value``/``Value``/``nominalValue``/``NominalValue`` are all accepted.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from aecqto.models.element import MetaObject, Property, PropertySet

logger = logging.getLogger(__name__)

_VALUE_FIELDS = ("value", "Value", "nominalValue", "NominalValue")


def _first(data: Mapping[str, Any], *fields: str) -> Any:
    for field in fields:
        value = data.get(field)
        if value is not None:
            return value
    return None


def _property_from_dict(data: Any) -> Property | None:
    if not isinstance(data, Mapping):
        return None
    name = _first(data, "name", "Name") or ""
    return Property(name=str(name), value=_first(data, *_VALUE_FIELDS))


def _property_set_from_dict(data: Any) -> PropertySet | None:
    if not isinstance(data, Mapping):
        return None
    raw_props = data.get("properties")
    if not isinstance(raw_props, list):
        raw_props = []
    props = [p for p in (_property_from_dict(item) for item in raw_props) if p is not None]
    return PropertySet(name=str(_first(data, "name", "Name") or ""), properties=props)


def meta_object_from_dict(
    data: Mapping[str, Any],
    shared_property_sets: Mapping[str, PropertySet] | None = None,
) -> MetaObject:
    """Build one MetaObject. Raises ValueError when the object has no id."""
    object_id = data.get("id")
    if object_id is None or object_id == "":
        raise ValueError("Meta object has no 'id'")

    hints = _first(data, "props", "attributes")
    if not isinstance(hints, Mapping):
        hints = {}

    psets: list[PropertySet] = []
    raw_psets = data.get("propertySets")
    if isinstance(raw_psets, list):
        psets.extend(p for p in (_property_set_from_dict(item) for item in raw_psets) if p is not None)
    for pset_id in data.get("propertySetIds") or []:
        shared = (shared_property_sets or {}).get(str(pset_id))
        if shared is not None:
            psets.append(shared)
        else:
            logger.debug("Meta object %s references unknown property set %s", object_id, pset_id)

    raw_name = _first(data, "name", "Name")
    if raw_name is None:
        raw_name = hints.get("Name")

    return MetaObject(
        id=str(object_id),
        raw_class=str(_first(data, "type", "ifcType") or ""),
        raw_name=str(raw_name) if raw_name is not None else None,
        type_hints=dict(hints),
        property_sets=psets,
    )


def load_meta_objects(payload: Any) -> list[MetaObject]:
    """Decode a metadata payload; malformed entries are skipped."""
    shared: dict[str, PropertySet] = {}
    entries: list[Any]

    if isinstance(payload, Mapping) and "metaObjects" in payload:
        for item in payload.get("propertySets") or []:
            pset = _property_set_from_dict(item)
            if pset is not None and isinstance(item, Mapping) and item.get("id") is not None:
                shared[str(item["id"])] = pset
        objects = payload["metaObjects"]
        entries = list(objects.values()) if isinstance(objects, Mapping) else list(objects or [])
    elif isinstance(payload, Mapping):
        entries = []
        for key, item in payload.items():
            if isinstance(item, Mapping) and "id" not in item:
                item = {**item, "id": key}
            entries.append(item)
    elif isinstance(payload, list):
        entries = payload
    else:
        raise ValueError(f"Unsupported metadata payload: {type(payload).__name__}")

    meta_objects: list[MetaObject] = []
    for entry in entries:
        if not isinstance(entry, Mapping):
            logger.debug("Skipping non-object metadata entry: %r", entry)
            continue
        try:
            meta_objects.append(meta_object_from_dict(entry, shared))
        except (ValueError, ValidationError):
            logger.debug("Skipping malformed meta object %r", entry.get("id"), exc_info=True)

    logger.info("Loaded %d meta objects", len(meta_objects))
    return meta_objects


def load_meta_objects_file(path: str | Path) -> list[MetaObject]:
    """Read a metadata JSON file and decode it."""
    path = Path(path)
    logger.info("Opening %s", path)
    return load_meta_objects(json.loads(path.read_text(encoding="utf-8")))
