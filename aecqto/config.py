"""Global configuration: constants, settings, logging setup."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# Class names that start with this prefix are technical IFC tokens, not type names
RESERVED_PREFIX = "ifc"

# Generic base classes that never identify a type on their own
GENERIC_CLASSES = frozenset({"ifcproduct", "ifcelement", "ifcbuildingelement"})

# Returned when neither a candidate nor a raw class is available
UNKNOWN_TYPE = "Unknown"

# Conventional field names probed, in order, inside wrapped property values
WRAPPER_FIELDS = ("value", "Value", "val", "Val", "NominalValue")

# Base scores per candidate source for the type identity heuristic
SCORE_TYPE_NAME = 10
SCORE_OBJECT_TYPE = 9
SCORE_TYPE = 8
SCORE_TYPE_HINT = 7
SCORE_PSET_TYPE = 6
SCORE_RAW_NAME = 5

# Length bonus: one point per LENGTH_BONUS_STEP characters, capped
LENGTH_BONUS_STEP = 12
LENGTH_BONUS_CAP = 3

MIN_CANDIDATE_LENGTH = 2

# Exact property names for annotation tags
MARK_ALIASES = ("Mark", "Marca")
REMARK_ALIASES = ("Remarks", "Comentarios", "Comments", "Comment")

# Separator used when distinct marks/remarks are shown as one cell
DISPLAY_JOIN = ", "

# IFC base class used by the ifcopenshell loader
ELEMENT_BASE_CLASS = "IfcElement"

# All known settings with defaults
_SETTINGS: dict[str, dict[str, str]] = {
    "AECQTO_LOG_LEVEL": {"default": "INFO", "description": "Logging level"},
    "AECQTO_DB_PATH": {"default": ":memory:", "description": "Classification database path"},
    "AECQTO_SYNONYMS_FILE": {"default": "", "description": "JSON file with extra synonyms"},
    "AECQTO_LANGUAGE": {"default": "ca", "description": "Display language for labels"},
}


def load_settings(project_path: str | Path = ".") -> dict[str, str]:
    """Load merged settings: defaults -> .aecqto/config.json -> env vars."""
    root = Path(project_path)
    settings = {key: info["default"] for key, info in _SETTINGS.items()}

    config_json = root / ".aecqto" / "config.json"
    if config_json.is_file():
        try:
            data = json.loads(config_json.read_text(encoding="utf-8"))
            for k, v in data.items():
                settings[k] = str(v)
        except (json.JSONDecodeError, OSError):
            logger.debug("Could not read %s", config_json, exc_info=True)

    for key in _SETTINGS:
        env_val = os.environ.get(key)
        if env_val is not None:
            settings[key] = env_val

    return settings


def load_synonym_overrides(path: str | Path | None) -> dict[str, list[str]]:
    """Read extra synonym lists keyed by quantity name from a JSON file.

    Unreadable files and non-list entries are ignored.
    """
    if not path:
        return {}
    file_path = Path(path)
    if not file_path.is_file():
        logger.warning("Synonyms file %s not found", file_path)
        return {}
    try:
        raw: Any = json.loads(file_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        logger.warning("Could not read synonyms file %s", file_path, exc_info=True)
        return {}
    if not isinstance(raw, dict):
        return {}
    return {
        str(k): [str(s) for s in v]
        for k, v in raw.items()
        if isinstance(v, list)
    }


def configure_logging(level: str | int = "INFO") -> None:
    """Configure root logging for applications embedding the engine."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
