"""QuantityEngine: main entry point for takeoff and classification.

Usage::

    from aecqto import QuantityEngine
    from aecqto.extraction import load_meta_objects_file

    engine = QuantityEngine()
    objects = load_meta_objects_file("model.metadata.json")
    groups = engine.aggregate(objects)
    engine.classify("project-1", "IfcWall", "Basic Wall 200", groups=groups,
                    chapter_code="30", subchapter_code="30.10", preferred_unit="M2")
    table = engine.takeoff(groups, "project-1")
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from aecqto.aggregation.aggregator import aggregate
from aecqto.classification.chapters import ChapterCatalog
from aecqto.classification.codes import ClassificationService
from aecqto.classification.merger import merge_classifications
from aecqto.classification.report import TakeoffTable
from aecqto.classification.store import ClassificationStore, SQLiteClassificationStore
from aecqto.config import load_settings, load_synonym_overrides
from aecqto.models.classification import ClassificationRecord, ClassifiedRow
from aecqto.models.element import MetaObject
from aecqto.models.quantities import AggregateGroup, GroupKey
from aecqto.resolution.synonyms import build_synonym_sets

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = frozenset({
    "custom_name",
    "description",
    "preferred_unit",
    "chapter_code",
    "subchapter_code",
    "subsubchapter_code",
})


class QuantityEngine:
    """Quantity resolution, aggregation and classification engine.

    Parameters
    ----------
    store:
        Classification store.  Defaults to an in-memory SQLite store.
    synonym_sets:
        Canonical synonym sets per quantity.  Defaults to the built-ins.
    catalog:
        Chapter catalog used for report labels.
    language:
        Language for category labels ('ca', 'es', 'en').
    """

    def __init__(
        self,
        store: ClassificationStore | None = None,
        synonym_sets: Mapping[str, frozenset[str]] | None = None,
        catalog: ChapterCatalog | None = None,
        language: str = "ca",
    ) -> None:
        self.store = store or SQLiteClassificationStore()
        self.synonym_sets = synonym_sets or build_synonym_sets()
        self.catalog = catalog or ChapterCatalog()
        self.language = language
        self.service = ClassificationService(self.store)

    @classmethod
    def from_settings(
        cls,
        project_path: str | Path = ".",
        catalog: ChapterCatalog | None = None,
    ) -> QuantityEngine:
        """Build an engine from ``.aecqto/config.json`` and ``AECQTO_*`` env vars."""
        settings = load_settings(project_path)
        level = getattr(logging, settings["AECQTO_LOG_LEVEL"].upper(), None)
        if not isinstance(level, int):
            logger.warning("Unknown log level %r; using INFO", settings["AECQTO_LOG_LEVEL"])
            level = logging.INFO
        logging.getLogger("aecqto").setLevel(level)
        extra = load_synonym_overrides(settings["AECQTO_SYNONYMS_FILE"])
        return cls(
            store=SQLiteClassificationStore(settings["AECQTO_DB_PATH"]),
            synonym_sets=build_synonym_sets(extra),
            catalog=catalog,
            language=settings["AECQTO_LANGUAGE"],
        )

    def aggregate(self, meta_objects: Iterable[MetaObject]) -> dict[GroupKey, AggregateGroup]:
        """Resolve and group one load worth of elements."""
        return aggregate(meta_objects, synonym_sets=self.synonym_sets)

    def merged_rows(
        self,
        groups: Mapping[GroupKey, AggregateGroup],
        scope_id: str,
        *,
        version_id: str | None = None,
    ) -> list[ClassifiedRow]:
        """Join *groups* with the scope's persisted classification records."""
        records = self.store.list_scope(scope_id, version_id=version_id)
        return merge_classifications(groups, records)

    def takeoff(
        self,
        groups: Mapping[GroupKey, AggregateGroup],
        scope_id: str,
        *,
        version_id: str | None = None,
    ) -> TakeoffTable:
        """Display-ready takeoff for a scope."""
        rows = self.merged_rows(groups, scope_id, version_id=version_id)
        return TakeoffTable(rows, catalog=self.catalog, language=self.language)

    def save_classification(
        self,
        record: ClassificationRecord,
        groups: Mapping[GroupKey, AggregateGroup] | None = None,
    ) -> ClassificationRecord:
        """Persist *record*, refreshing its measured value from *groups* if given."""
        group = (groups or {}).get((record.ifc_category, record.type_name))
        return self.service.save(record, group)

    def classify(
        self,
        scope_id: str,
        ifc_category: str,
        type_name: str,
        *,
        version_id: str | None = None,
        groups: Mapping[GroupKey, AggregateGroup] | None = None,
        **fields: Any,
    ) -> ClassificationRecord:
        """Create or edit the classification of one (category, type) pair.

        Raises
        ------
        ValueError
            If *fields* contains a name that is not user-editable.
        """
        unknown = set(fields) - _EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Not editable: {sorted(unknown)}")

        existing = self.store.get(scope_id, ifc_category, type_name, version_id=version_id)
        if existing is None:
            logger.info("Creating classification for %s/%s in %s", ifc_category, type_name, scope_id)
            record = ClassificationRecord(
                scope_id=scope_id,
                version_id=version_id,
                ifc_category=ifc_category,
                type_name=type_name,
                **fields,
            )
        else:
            record = ClassificationRecord.model_validate({**existing.model_dump(), **fields})

        return self.save_classification(record, groups)
