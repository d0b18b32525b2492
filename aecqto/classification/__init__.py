"""Classification layer: merge aggregates with user records, assign codes, report."""

from aecqto.classification.chapters import ChapterCatalog
from aecqto.classification.codes import ClassificationService, derive_full_code, item_code
from aecqto.classification.labels import category_label
from aecqto.classification.merger import measured_value_for, merge_classifications
from aecqto.classification.report import TakeoffTable
from aecqto.classification.store import ClassificationStore, SQLiteClassificationStore

__all__ = [
    "ChapterCatalog",
    "ClassificationService",
    "ClassificationStore",
    "SQLiteClassificationStore",
    "TakeoffTable",
    "category_label",
    "derive_full_code",
    "item_code",
    "measured_value_for",
    "merge_classifications",
]
