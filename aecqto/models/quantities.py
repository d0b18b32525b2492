"""Resolved per-element quantities and per-type aggregate groups."""

from __future__ import annotations

from pydantic import BaseModel, Field

from aecqto.config import DISPLAY_JOIN

GroupKey = tuple[str, str]
"""``(ifc_category, resolved_type_name)``."""


class ResolvedQuantities(BaseModel):
    """Quantities and annotations resolved for a single element.

    ``None`` means "not determinable", which is different from zero.
    """

    length: float | None = None
    area: float | None = None
    volume: float | None = None
    mass: float | None = None
    mark: str | None = None
    remarks: str | None = None


class AggregateGroup(BaseModel):
    """Accumulated totals for all elements sharing a (category, type name) key."""

    ifc_category: str
    type_name: str
    instance_count: int = 0
    sum_length: float = 0.0
    sum_area: float = 0.0
    sum_volume: float = 0.0
    sum_mass: float = 0.0
    distinct_marks: set[str] = Field(default_factory=set)
    distinct_remarks: set[str] = Field(default_factory=set)

    @property
    def key(self) -> GroupKey:
        return (self.ifc_category, self.type_name)

    def add(self, quantities: ResolvedQuantities) -> None:
        """Accumulate one element. Absent quantities count as zero."""
        self.instance_count += 1
        self.sum_length += quantities.length or 0.0
        self.sum_area += quantities.area or 0.0
        self.sum_volume += quantities.volume or 0.0
        self.sum_mass += quantities.mass or 0.0
        if quantities.mark:
            self.distinct_marks.add(quantities.mark)
        if quantities.remarks:
            self.distinct_remarks.add(quantities.remarks)

    def merge(self, other: AggregateGroup) -> None:
        """Fold another group with the same key into this one."""
        if other.key != self.key:
            raise ValueError(f"Cannot merge group {other.key} into {self.key}")
        self.instance_count += other.instance_count
        self.sum_length += other.sum_length
        self.sum_area += other.sum_area
        self.sum_volume += other.sum_volume
        self.sum_mass += other.sum_mass
        self.distinct_marks |= other.distinct_marks
        self.distinct_remarks |= other.distinct_remarks

    @property
    def marks_display(self) -> str:
        return DISPLAY_JOIN.join(sorted(self.distinct_marks))

    @property
    def remarks_display(self) -> str:
        return DISPLAY_JOIN.join(sorted(self.distinct_remarks))
