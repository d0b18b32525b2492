"""Data models shared by the resolution, aggregation and classification layers."""

from aecqto.models.classification import ClassificationRecord, ClassifiedRow, PreferredUnit
from aecqto.models.element import MetaObject, Property, PropertySet, PropertyValue
from aecqto.models.quantities import AggregateGroup, GroupKey, ResolvedQuantities

__all__ = [
    "AggregateGroup",
    "ClassificationRecord",
    "ClassifiedRow",
    "GroupKey",
    "MetaObject",
    "PreferredUnit",
    "Property",
    "PropertySet",
    "PropertyValue",
    "ResolvedQuantities",
]
