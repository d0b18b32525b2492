"""Canonical key normalization and tolerant value parsing.

These helpers never raise: anything that cannot be interpreted comes back as
an empty string or ``None``.
"""

from __future__ import annotations

import math
import re
import unicodedata
from collections.abc import Mapping
from typing import Any

from aecqto.config import WRAPPER_FIELDS

_STRIP_RE = re.compile(r"[\s_\-.]")

# First signed decimal or scientific-notation number in a string
_NUMBER_RE = re.compile(r"[-+]?\d*\.?\d+(?:[eE][-+]?\d+)?")


def canonical_key(label: Any) -> str:
    """Return a case-, accent- and punctuation-insensitive comparison key.

    >>> canonical_key("  Net Side-Área ")
    'netsidearea'
    """
    if label is None:
        return ""
    text = label if isinstance(label, str) else str(label)
    text = text.strip().lower()
    decomposed = unicodedata.normalize("NFD", text)
    text = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _STRIP_RE.sub("", text)


def parse_number(value: Any) -> float | None:
    """Convert a raw property value into a float, or ``None`` if unparseable.

    Accepts bare numbers, decimal-comma strings (``"12,5"``), strings with
    units or noise (``"4.5 m2"``) and nested wrappers such as
    ``{"NominalValue": 3}``.  Zero is a valid result; ``None`` is not zero.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None
    if isinstance(value, str):
        match = _NUMBER_RE.search(value.replace(",", ".", 1))
        if match is None:
            return None
        number = float(match.group(0))
        return number if math.isfinite(number) else None
    if isinstance(value, Mapping):
        for field in WRAPPER_FIELDS:
            if field in value:
                number = parse_number(value[field])
                if number is not None:
                    return number
        return None
    return None


def unwrap_value(value: Any) -> Any:
    """Return the payload of a ``{"value": ...}`` / ``{"Value": ...}`` wrapper."""
    if isinstance(value, Mapping):
        for field in ("value", "Value"):
            inner = value.get(field)
            if inner is not None:
                return inner
        return None
    return value


def text_value(value: Any) -> str:
    """Trimmed display text for a raw value; wrappers are unwrapped first."""
    value = unwrap_value(value)
    if value is None or isinstance(value, (Mapping, list)):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()
