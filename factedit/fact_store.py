"""
Fact store using SQLite.

Holds facts, their ordered fields and their tag strings. The editor reads a
Fact and the distinct tag list from here and writes the Fact back only after
a commit that modified it.
"""

import logging
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .errors import FactNotFoundError
from .types import Fact, Field, parse_tags

logger = logging.getLogger(__name__)


class FactStore:
    """SQLite-backed store of facts and their fields."""

    def __init__(self, store_path: Path):
        """
        Args:
            store_path: Path to SQLite database file
        """
        self._db_path = store_path
        self._conn: Optional[sqlite3.Connection] = None
        self._init_db()

    def _init_db(self) -> None:
        """Initialize the SQLite database."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row

        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS facts (
                id TEXT PRIMARY KEY,
                tags TEXT NOT NULL DEFAULT '',
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS fields (
                fact_id TEXT NOT NULL,
                ordinal INTEGER NOT NULL,
                name TEXT NOT NULL,
                value TEXT NOT NULL DEFAULT '',
                PRIMARY KEY (fact_id, ordinal)
            )
        """)

        self._conn.commit()

    def _now(self) -> str:
        """Current timestamp in ISO format."""
        return datetime.now(timezone.utc).isoformat()

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    def add(
        self,
        fields: list[tuple[str, str]],
        tags: str = "",
        id: Optional[str] = None,
    ) -> Fact:
        """
        Insert a new fact.

        Args:
            fields: (name, value) pairs in display order
            tags: Tag string
            id: Fact identifier (generated if omitted)

        Returns:
            The stored Fact
        """
        fact_id = id or uuid.uuid4().hex[:12]
        now = self._now()
        with self._conn:
            self._conn.execute("""
                INSERT INTO facts (id, tags, created_at, updated_at)
                VALUES (?, ?, ?, ?)
            """, (fact_id, tags, now, now))
            self._conn.executemany("""
                INSERT INTO fields (fact_id, ordinal, name, value)
                VALUES (?, ?, ?, ?)
            """, [(fact_id, i, name, value) for i, (name, value) in enumerate(fields)])
        logger.info("Added fact %s (%d fields)", fact_id, len(fields))
        return Fact(
            id=fact_id,
            fields=[Field(name=n, value=v, ordinal=i) for i, (n, v) in enumerate(fields)],
            tags=tags,
        )

    def save(self, fact: Fact) -> None:
        """
        Write a fact's field values and tag string.

        Fields are matched by ordinal; the field set itself is not changed.

        Raises:
            FactNotFoundError: the fact doesn't exist
        """
        with self._conn:
            cursor = self._conn.execute("""
                UPDATE facts SET tags = ?, updated_at = ?
                WHERE id = ?
            """, (fact.tags, self._now(), fact.id))
            if cursor.rowcount == 0:
                raise FactNotFoundError(fact.id)
            self._conn.executemany("""
                UPDATE fields SET value = ?
                WHERE fact_id = ? AND ordinal = ?
            """, [(f.value, fact.id, f.ordinal) for f in fact.fields])
        logger.info("Saved fact %s", fact.id)

    def delete(self, id: str) -> bool:
        """
        Delete a fact and its fields.

        Returns:
            True if the fact existed
        """
        with self._conn:
            cursor = self._conn.execute("DELETE FROM facts WHERE id = ?", (id,))
            self._conn.execute("DELETE FROM fields WHERE fact_id = ?", (id,))
        return cursor.rowcount > 0

    # -------------------------------------------------------------------------
    # Read Operations
    # -------------------------------------------------------------------------

    def get(self, id: str) -> Optional[Fact]:
        """
        Get a fact by ID.

        Returns:
            Fact if found, None otherwise
        """
        row = self._conn.execute(
            "SELECT id, tags FROM facts WHERE id = ?", (id,)
        ).fetchone()
        if row is None:
            return None

        cursor = self._conn.execute("""
            SELECT ordinal, name, value FROM fields
            WHERE fact_id = ?
            ORDER BY ordinal
        """, (id,))
        fields = [
            Field(name=r["name"], value=r["value"], ordinal=r["ordinal"])
            for r in cursor
        ]
        return Fact(id=row["id"], fields=fields, tags=row["tags"])

    def list_ids(self, limit: Optional[int] = None) -> list[str]:
        """List fact IDs, most recently updated first."""
        sql = "SELECT id FROM facts ORDER BY updated_at DESC"
        params: tuple = ()
        if limit is not None:
            sql += " LIMIT ?"
            params = (limit,)
        return [row["id"] for row in self._conn.execute(sql, params)]

    def all_tags(self) -> list[str]:
        """Every distinct tag used by any fact, sorted case-insensitively."""
        tags: set[str] = set()
        for row in self._conn.execute("SELECT tags FROM facts WHERE tags != ''"):
            tags.update(parse_tags(row["tags"]))
        return sorted(tags, key=lambda t: (t.casefold(), t))

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "FactStore":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
