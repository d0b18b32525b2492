"""Resolution engine: normalize, match and score element properties."""

from aecqto.resolution.normalize import canonical_key, parse_number
from aecqto.resolution.properties import primary_value, resolve_property, resolve_quantities
from aecqto.resolution.synonyms import build_synonym_sets
from aecqto.resolution.tags import extract_mark, extract_remarks, extract_tag
from aecqto.resolution.type_identity import resolve_type_name

__all__ = [
    "build_synonym_sets",
    "canonical_key",
    "extract_mark",
    "extract_remarks",
    "extract_tag",
    "parse_number",
    "primary_value",
    "resolve_property",
    "resolve_quantities",
    "resolve_type_name",
]
