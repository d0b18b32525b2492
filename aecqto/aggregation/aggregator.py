"""Group elements by (IFC category, resolved type name) and total their quantities."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping

from aecqto.config import UNKNOWN_TYPE
from aecqto.models.element import MetaObject
from aecqto.models.quantities import AggregateGroup, GroupKey
from aecqto.resolution.properties import resolve_quantities
from aecqto.resolution.type_identity import resolve_type_name

logger = logging.getLogger(__name__)

KeyFunction = Callable[[MetaObject], GroupKey]


def default_group_key(meta_object: MetaObject) -> GroupKey:
    """``(raw class, resolved type name)``, the key classification records use."""
    return ((meta_object.raw_class or "").strip() or UNKNOWN_TYPE, resolve_type_name(meta_object))


def aggregate(
    meta_objects: Iterable[MetaObject],
    key_fn: KeyFunction | None = None,
    synonym_sets: Mapping[str, frozenset[str]] | None = None,
) -> dict[GroupKey, AggregateGroup]:
    """Aggregate one load worth of elements into per-type groups.

    Each element adds one to its group's ``instance_count`` and its resolved
    quantities to the running sums (absent quantities count as zero).
    Non-empty marks and remarks are collected as distinct values.

    The returned mapping has no guaranteed order; use :func:`sorted_groups`
    for display.
    """
    key_fn = key_fn or default_group_key
    groups: dict[GroupKey, AggregateGroup] = {}
    count = 0

    for mo in meta_objects:
        category, type_name = key_fn(mo)
        group = groups.get((category, type_name))
        if group is None:
            group = AggregateGroup(ifc_category=category, type_name=type_name)
            groups[(category, type_name)] = group
        group.add(resolve_quantities(mo, synonym_sets))
        count += 1

    logger.info("Aggregated %d elements into %d groups", count, len(groups))
    return groups


def merge_aggregates(
    *runs: Mapping[GroupKey, AggregateGroup],
) -> dict[GroupKey, AggregateGroup]:
    """Combine aggregate maps computed over disjoint element subsets.

    Inputs are not modified.
    """
    merged: dict[GroupKey, AggregateGroup] = {}
    for run in runs:
        for key, group in run.items():
            if key in merged:
                merged[key].merge(group)
            else:
                merged[key] = group.model_copy(deep=True)
    return merged


def sorted_groups(groups: Mapping[GroupKey, AggregateGroup]) -> list[AggregateGroup]:
    """Groups ordered by category then type name, case-insensitively."""
    return sorted(
        groups.values(),
        key=lambda g: (g.ifc_category.casefold(), g.type_name.casefold(), g.key),
    )
