"""ChapterCatalog: id -> name lookup for budget chapter codes.

The catalog is a nested tree::

    [{"code": "30", "name": "Walls", "subchapters": [
        {"code": "30.10", "name": "Masonry", "subsubchapters": [
            {"code": "30.10.10", "name": "Brick"}]}]}]
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class ChapterCatalog:
    """Flat code -> name index over a chapter tree."""

    def __init__(self, chapters: list[dict[str, Any]] | None = None) -> None:
        self._names: dict[str, str] = {}
        for chapter in chapters or []:
            self._index(chapter, ("subchapters", "subsubchapters"))

    def _index(self, node: dict[str, Any], child_keys: tuple[str, ...]) -> None:
        code = node.get("code")
        if code is None:
            logger.debug("Skipping chapter node without code: %r", node)
            return
        self._names[str(code)] = str(node.get("name", ""))
        if child_keys:
            for child in node.get(child_keys[0]) or []:
                self._index(child, child_keys[1:])

    @classmethod
    def from_json(cls, path: str | Path) -> ChapterCatalog:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if isinstance(data, dict):
            data = data.get("chapters", [])
        return cls(data)

    def name(self, code: str | None) -> str | None:
        if not code:
            return None
        return self._names.get(code)

    def label(self, code: str | None) -> str:
        """``"30.10 - Masonry"``; the bare code when unknown; ``""`` for None."""
        if not code:
            return ""
        name = self._names.get(code)
        return f"{code} - {name}" if name else code

    def __contains__(self, code: object) -> bool:
        return code in self._names

    def __len__(self) -> int:
        return len(self._names)
