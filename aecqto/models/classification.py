"""Classification records: user-authored chapter codes and units per element type."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class PreferredUnit(str, Enum):
    """Measurement unit a classified type is reported in."""

    UT = "UT"
    """Units (instance count)."""

    ML = "ML"
    """Linear metres."""

    M2 = "M2"
    """Square metres."""

    M3 = "M3"
    """Cubic metres."""

    KG = "KG"
    """Kilograms."""


class ClassificationRecord(BaseModel):
    """Persisted classification of one (category, type name) pair within a scope.

    ``scope_id`` identifies a project; ``version_id`` optionally narrows the
    scope to one model version.
    """

    id: int | None = None
    scope_id: str
    version_id: str | None = None
    ifc_category: str
    type_name: str

    custom_name: str | None = None
    description: str | None = None
    preferred_unit: PreferredUnit = PreferredUnit.UT

    chapter_code: str | None = None
    subchapter_code: str | None = None
    subsubchapter_code: str | None = None

    full_code: str | None = None
    """Most specific non-null code; derived on save."""

    measured_value: float = 0.0
    display_order: int = 1
    element_count: int = 0

    @field_validator("preferred_unit", mode="before")
    @classmethod
    def _upper_unit(cls, value: Any) -> Any:
        if value is None:
            return PreferredUnit.UT
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @property
    def key(self) -> tuple[str, str | None, str, str]:
        return (self.scope_id, self.version_id, self.ifc_category, self.type_name)

    @property
    def code_triple(self) -> tuple[str | None, str | None, str | None]:
        return (self.chapter_code, self.subchapter_code, self.subsubchapter_code)

    @property
    def is_edited(self) -> bool:
        """True once a chapter or subchapter has been assigned."""
        return bool(self.chapter_code or self.subchapter_code)


class ClassifiedRow(BaseModel):
    """Live aggregate figures joined with the persisted classification, if any."""

    ifc_category: str
    type_name: str
    record: ClassificationRecord | None = None

    instance_count: int = 0
    sum_length: float = 0.0
    sum_area: float = 0.0
    sum_volume: float = 0.0
    sum_mass: float = 0.0
    distinct_marks: set[str] = Field(default_factory=set)
    distinct_remarks: set[str] = Field(default_factory=set)

    is_edited: bool = False
    is_present: bool = True
    """False when the record's type no longer appears in the current load."""

    measured_value: float = 0.0

    @property
    def preferred_unit(self) -> PreferredUnit:
        return self.record.preferred_unit if self.record else PreferredUnit.UT

    @property
    def display_name(self) -> str:
        if self.record and self.record.custom_name:
            return self.record.custom_name
        return self.type_name
