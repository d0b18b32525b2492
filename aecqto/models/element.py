"""MetaObject: one building element as decoded from the viewer metadata graph.

The engine never parses IFC itself: an external loader supplies objects
already decoded into this shape (class name, optional name, type hints and
an ordered list of property sets with ordered properties).
"""

from __future__ import annotations

from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

Wrapper = dict[str, Any]
"""Nested value wrapper, e.g. ``{"NominalValue": 4.5}`` or ``{"value": "4,5"}``."""

PropertyValue = Union[bool, int, float, str, Wrapper, list[Any], None]
"""Untagged value variant as found in source graphs.

``bool`` is listed first so pydantic keeps flags as flags; the numeric parser
treats booleans and lists as non-numeric.
"""


class Property(BaseModel):
    """A single named value inside a property set."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    value: PropertyValue = None


class PropertySet(BaseModel):
    """Named, ordered collection of properties. Order drives first-match resolution."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    properties: list[Property] = Field(default_factory=list)


class MetaObject(BaseModel):
    """One element of a loaded model.

    ``type_hints`` carries attribute-level type information such as
    ``ObjectType``, ``TypeName`` or a nested ``Type`` record with a ``Name``.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    raw_class: str = ""
    raw_name: str | None = None
    type_hints: dict[str, Any] = Field(default_factory=dict)
    property_sets: list[PropertySet] = Field(default_factory=list)

    def iter_properties(self):
        """Yield ``(PropertySet, Property)`` pairs in declared order."""
        for pset in self.property_sets:
            for prop in pset.properties:
                yield pset, prop
