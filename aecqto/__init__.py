"""AEC QTO: quantity takeoff and classification engine for IFC-derived element graphs."""

__version__ = "1.0.0"

from aecqto.aggregation import aggregate, merge_aggregates, sorted_groups
from aecqto.classification import (
    ChapterCatalog,
    ClassificationService,
    ClassificationStore,
    SQLiteClassificationStore,
    TakeoffTable,
    derive_full_code,
    merge_classifications,
)
from aecqto.engine import QuantityEngine
from aecqto.extraction import load_meta_objects, load_meta_objects_file
from aecqto.models import (
    AggregateGroup,
    ClassificationRecord,
    ClassifiedRow,
    MetaObject,
    PreferredUnit,
    Property,
    PropertySet,
    ResolvedQuantities,
)
from aecqto.resolution import (
    canonical_key,
    extract_tag,
    parse_number,
    resolve_property,
    resolve_quantities,
    resolve_type_name,
)

__all__ = [
    "__version__",
    # Facade
    "QuantityEngine",
    # Models
    "AggregateGroup",
    "ClassificationRecord",
    "ClassifiedRow",
    "MetaObject",
    "PreferredUnit",
    "Property",
    "PropertySet",
    "ResolvedQuantities",
    # Resolution
    "canonical_key",
    "extract_tag",
    "parse_number",
    "resolve_property",
    "resolve_quantities",
    "resolve_type_name",
    # Aggregation
    "aggregate",
    "merge_aggregates",
    "sorted_groups",
    # Classification
    "ChapterCatalog",
    "ClassificationService",
    "ClassificationStore",
    "SQLiteClassificationStore",
    "TakeoffTable",
    "derive_full_code",
    "merge_classifications",
    # Loading
    "load_meta_objects",
    "load_meta_objects_file",
]
