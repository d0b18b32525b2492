"""Join live aggregate groups with persisted classification records."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from aecqto.models.classification import ClassificationRecord, ClassifiedRow, PreferredUnit
from aecqto.models.quantities import AggregateGroup, GroupKey

logger = logging.getLogger(__name__)

# Preferred unit -> AggregateGroup attribute holding its quantity
_UNIT_FIELDS: dict[PreferredUnit, str] = {
    PreferredUnit.UT: "instance_count",
    PreferredUnit.ML: "sum_length",
    PreferredUnit.M2: "sum_area",
    PreferredUnit.M3: "sum_volume",
    PreferredUnit.KG: "sum_mass",
}


def coerce_unit(unit: PreferredUnit | str | None) -> PreferredUnit:
    """Accept ``"m2"``, ``"M2"`` or a PreferredUnit; ``None`` means UT."""
    if unit is None:
        return PreferredUnit.UT
    if isinstance(unit, PreferredUnit):
        return unit
    try:
        return PreferredUnit(str(unit).strip().upper())
    except ValueError:
        raise ValueError(
            f"Unknown unit {unit!r}; expected one of {[u.value for u in PreferredUnit]}"
        ) from None


def measured_value_for(
    group: AggregateGroup | None,
    unit: PreferredUnit | str | None,
) -> float:
    """Quantity of *group* that corresponds to *unit*; 0 when there is no group."""
    if group is None:
        return 0.0
    return float(getattr(group, _UNIT_FIELDS[coerce_unit(unit)]))


def merge_classifications(
    groups: Mapping[GroupKey, AggregateGroup],
    records: Iterable[ClassificationRecord],
) -> list[ClassifiedRow]:
    """Combine aggregates and records into one row per (category, type) pair.

    Rows for unclassified groups carry ``is_edited=False`` and a measured
    value in units.  Records whose type is missing from the current load are
    kept, with zero quantities and ``is_present=False``.  Rows are ordered
    by category then type name.
    """
    by_key: dict[GroupKey, ClassificationRecord] = {}
    for record in records:
        by_key[(record.ifc_category, record.type_name)] = record

    rows: list[ClassifiedRow] = []
    for key in set(groups) | set(by_key):
        group = groups.get(key)
        record = by_key.get(key)
        unit = record.preferred_unit if record else PreferredUnit.UT
        row = ClassifiedRow(
            ifc_category=key[0],
            type_name=key[1],
            record=record,
            is_edited=record.is_edited if record else False,
            is_present=group is not None,
            measured_value=measured_value_for(group, unit),
        )
        if group is not None:
            row.instance_count = group.instance_count
            row.sum_length = group.sum_length
            row.sum_area = group.sum_area
            row.sum_volume = group.sum_volume
            row.sum_mass = group.sum_mass
            row.distinct_marks = set(group.distinct_marks)
            row.distinct_remarks = set(group.distinct_remarks)
        rows.append(row)

    missing = sum(1 for r in rows if not r.is_present)
    if missing:
        logger.info("%d classified types are not present in the current load", missing)

    rows.sort(key=lambda r: (
        r.ifc_category.casefold(), r.type_name.casefold(), r.ifc_category, r.type_name,
    ))
    return rows
