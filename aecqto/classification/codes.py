"""Hierarchical code assignment for classification saves.

Codes are nested by prefix (``"30"`` > ``"30.10"`` > ``"30.10.10"``).  A saved
record gets the most specific selected code as its ``full_code`` and a
``display_order`` that numbers it within its sibling group.

The order is computed by counting siblings at save time and writing the
result back; nothing locks the group in between.  Two concurrent saves into
the same group can therefore receive the same ``display_order``.  A re-save
counts every other sibling, so re-saving the first of two siblings moves it
to order 2 as well.
"""

from __future__ import annotations

import logging

from aecqto.classification.merger import coerce_unit, measured_value_for
from aecqto.classification.store import ClassificationStore
from aecqto.models.classification import ClassificationRecord
from aecqto.models.quantities import AggregateGroup

logger = logging.getLogger(__name__)


def _clean(code: str | None) -> str | None:
    if code is None:
        return None
    code = code.strip()
    return code or None


def derive_full_code(
    chapter_code: str | None,
    subchapter_code: str | None,
    subsubchapter_code: str | None,
) -> str | None:
    """Return the most specific non-empty code, or None."""
    for code in (subsubchapter_code, subchapter_code, chapter_code):
        code = _clean(code)
        if code:
            return code
    return None


def item_code(record: ClassificationRecord) -> str | None:
    """Budget item number: ``<subsubchapter>.<order:02d>``, else the full code."""
    subsub = _clean(record.subsubchapter_code)
    if subsub and record.display_order:
        return f"{subsub}.{record.display_order:02d}"
    return record.full_code or derive_full_code(*record.code_triple)


class ClassificationService:
    """Save classification edits against a :class:`ClassificationStore`.

    Parameters
    ----------
    store:
        Record store.  Store errors propagate to the caller unchanged.
    """

    def __init__(self, store: ClassificationStore) -> None:
        self.store = store

    def save(
        self,
        record: ClassificationRecord,
        group: AggregateGroup | None = None,
    ) -> ClassificationRecord:
        """Derive ``full_code`` and ``display_order`` and upsert the record.

        When *group* is given, ``measured_value`` and ``element_count`` are
        refreshed from the live aggregate for the record's preferred unit.
        Without a group, a change of preferred unit resets ``measured_value``
        to 0 until the next save with live quantities.
        """
        chapter = _clean(record.chapter_code)
        subchapter = _clean(record.subchapter_code)
        subsubchapter = _clean(record.subsubchapter_code)

        siblings = self.store.count_siblings(
            record.scope_id,
            (chapter, subchapter, subsubchapter),
            version_id=record.version_id,
            exclude=(record.ifc_category, record.type_name),
        )

        updates: dict[str, object] = {
            "chapter_code": chapter,
            "subchapter_code": subchapter,
            "subsubchapter_code": subsubchapter,
            "custom_name": _clean(record.custom_name),
            "description": _clean(record.description),
            "preferred_unit": coerce_unit(record.preferred_unit),
            "full_code": derive_full_code(chapter, subchapter, subsubchapter),
            "display_order": siblings + 1,
        }
        if group is not None:
            updates["measured_value"] = measured_value_for(group, record.preferred_unit)
            updates["element_count"] = group.instance_count
        else:
            stored = self.store.get(
                record.scope_id,
                record.ifc_category,
                record.type_name,
                version_id=record.version_id,
            )
            # measured_value is always expressed in the preferred unit
            if stored is not None and stored.preferred_unit != updates["preferred_unit"]:
                logger.debug("Unit changed for %s without live quantities; resetting", record.key)
                updates["measured_value"] = 0.0

        saved = self.store.upsert(record.model_copy(update=updates))
        logger.info(
            "Saved classification %s/%s as %s (order %d)",
            saved.ifc_category,
            saved.type_name,
            saved.full_code,
            saved.display_order,
        )
        return saved
