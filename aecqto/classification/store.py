"""ClassificationStore interface and its SQLite implementation.

Uses stdlib sqlite3 only.  The store is a plain keyed record interface:
retries, transactions and locking across calls are the caller's concern.
"""

from __future__ import annotations

import abc
import logging
import sqlite3
from pathlib import Path
from typing import Any

from aecqto.models.classification import ClassificationRecord, PreferredUnit

logger = logging.getLogger(__name__)

CodeTriple = tuple[str | None, str | None, str | None]


class ClassificationStore(abc.ABC):
    """Keyed access to persisted classification records."""

    @abc.abstractmethod
    def get(
        self,
        scope_id: str,
        ifc_category: str,
        type_name: str,
        *,
        version_id: str | None = None,
    ) -> ClassificationRecord | None:
        """Return the record for a (category, type) pair in a scope, if any."""

    @abc.abstractmethod
    def count_siblings(
        self,
        scope_id: str,
        codes: CodeTriple,
        *,
        version_id: str | None = None,
        exclude: tuple[str, str] | None = None,
    ) -> int:
        """Count records sharing the exact (chapter, subchapter, subsubchapter) triple.

        *exclude* is an ``(ifc_category, type_name)`` pair left out of the count.
        """

    @abc.abstractmethod
    def upsert(self, record: ClassificationRecord) -> ClassificationRecord:
        """Insert or update *record* by its key; return it with its id set."""

    @abc.abstractmethod
    def list_scope(
        self,
        scope_id: str,
        *,
        version_id: str | None = None,
    ) -> list[ClassificationRecord]:
        """All records of a scope."""

    @abc.abstractmethod
    def delete(self, record_id: int) -> bool:
        """Delete a record by id. Returns True if a row was deleted."""


_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS classifications (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    scope_id TEXT NOT NULL,
    version_id TEXT NOT NULL DEFAULT '',
    ifc_category TEXT NOT NULL,
    type_name TEXT NOT NULL,
    custom_name TEXT,
    description TEXT,
    preferred_unit TEXT NOT NULL DEFAULT 'UT',
    chapter_code TEXT,
    subchapter_code TEXT,
    subsubchapter_code TEXT,
    full_code TEXT,
    measured_value REAL NOT NULL DEFAULT 0,
    display_order INTEGER NOT NULL DEFAULT 1,
    element_count INTEGER NOT NULL DEFAULT 0,
    UNIQUE (scope_id, version_id, ifc_category, type_name)
);

CREATE INDEX IF NOT EXISTS idx_classifications_codes
    ON classifications(scope_id, chapter_code, subchapter_code, subsubchapter_code);
"""

_UPSERT_SQL = """\
INSERT INTO classifications (
    scope_id, version_id, ifc_category, type_name, custom_name, description,
    preferred_unit, chapter_code, subchapter_code, subsubchapter_code,
    full_code, measured_value, display_order, element_count
) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
ON CONFLICT (scope_id, version_id, ifc_category, type_name) DO UPDATE SET
    custom_name = excluded.custom_name,
    description = excluded.description,
    preferred_unit = excluded.preferred_unit,
    chapter_code = excluded.chapter_code,
    subchapter_code = excluded.subchapter_code,
    subsubchapter_code = excluded.subsubchapter_code,
    full_code = excluded.full_code,
    measured_value = excluded.measured_value,
    display_order = excluded.display_order,
    element_count = excluded.element_count
"""


class SQLiteClassificationStore(ClassificationStore):
    """SQLite-backed classification records.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file.  Use ``':memory:'`` for
        in-memory databases (useful for testing).
    """

    def __init__(self, db_path: str | Path = ":memory:") -> None:
        self._db_path = str(db_path)
        self._conn: sqlite3.Connection | None = None

    @property
    def conn(self) -> sqlite3.Connection:
        """Lazy-initialise and return the database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(self._db_path)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.executescript(_SCHEMA_SQL)
            self._conn.commit()
        return self._conn

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    # -- Queries -------------------------------------------------------------

    def get(
        self,
        scope_id: str,
        ifc_category: str,
        type_name: str,
        *,
        version_id: str | None = None,
    ) -> ClassificationRecord | None:
        cur = self.conn.execute(
            """\
            SELECT * FROM classifications
            WHERE scope_id = ? AND version_id = ? AND ifc_category = ? AND type_name = ?
            """,
            (scope_id, version_id or "", ifc_category, type_name),
        )
        row = cur.fetchone()
        if row is None:
            return None
        return self._row_to_record(row)

    def count_siblings(
        self,
        scope_id: str,
        codes: CodeTriple,
        *,
        version_id: str | None = None,
        exclude: tuple[str, str] | None = None,
    ) -> int:
        chapter, subchapter, subsubchapter = codes
        sql = """\
            SELECT COUNT(*) FROM classifications
            WHERE scope_id = ? AND version_id = ?
              AND chapter_code IS ? AND subchapter_code IS ? AND subsubchapter_code IS ?
            """
        params: list[Any] = [scope_id, version_id or "", chapter, subchapter, subsubchapter]
        if exclude is not None:
            sql += " AND NOT (ifc_category = ? AND type_name = ?)"
            params.extend(exclude)
        cur = self.conn.execute(sql, params)
        return cur.fetchone()[0]

    def list_scope(
        self,
        scope_id: str,
        *,
        version_id: str | None = None,
    ) -> list[ClassificationRecord]:
        cur = self.conn.execute(
            """\
            SELECT * FROM classifications
            WHERE scope_id = ? AND version_id = ?
            ORDER BY ifc_category, type_name
            """,
            (scope_id, version_id or ""),
        )
        return [self._row_to_record(row) for row in cur.fetchall()]

    # -- Mutations -----------------------------------------------------------

    def upsert(self, record: ClassificationRecord) -> ClassificationRecord:
        self.conn.execute(
            _UPSERT_SQL,
            (
                record.scope_id,
                record.version_id or "",
                record.ifc_category,
                record.type_name,
                record.custom_name,
                record.description,
                record.preferred_unit.value,
                record.chapter_code,
                record.subchapter_code,
                record.subsubchapter_code,
                record.full_code,
                record.measured_value,
                record.display_order,
                record.element_count,
            ),
        )
        self.conn.commit()
        stored = self.get(
            record.scope_id,
            record.ifc_category,
            record.type_name,
            version_id=record.version_id,
        )
        if stored is None:
            raise RuntimeError(f"Upsert of {record.key} did not persist a row")
        logger.debug("Upserted classification %s", record.key)
        return stored

    def delete(self, record_id: int) -> bool:
        cur = self.conn.execute("DELETE FROM classifications WHERE id = ?", (record_id,))
        self.conn.commit()
        return cur.rowcount > 0

    # -- Internal ------------------------------------------------------------

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> ClassificationRecord:
        """Convert a database row to a ClassificationRecord."""
        return ClassificationRecord(
            id=row["id"],
            scope_id=row["scope_id"],
            version_id=row["version_id"] or None,
            ifc_category=row["ifc_category"],
            type_name=row["type_name"],
            custom_name=row["custom_name"],
            description=row["description"],
            preferred_unit=PreferredUnit(row["preferred_unit"]),
            chapter_code=row["chapter_code"],
            subchapter_code=row["subchapter_code"],
            subsubchapter_code=row["subsubchapter_code"],
            full_code=row["full_code"],
            measured_value=row["measured_value"],
            display_order=row["display_order"],
            element_count=row["element_count"],
        )
