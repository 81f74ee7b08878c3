# Persistent answer store for World Graph.
# Holds (a, b, c) triples in a single SQLite table; append-only from the
# pipeline's point of view.

import logging
import sqlite3
import threading
from pathlib import Path
from typing import List, Optional

from worldgraph.errors import NotFoundError, StoreError
from worldgraph.models import Triple

logger = logging.getLogger(__name__)

MEMORY = ":memory:"


class TripleStore:
    """SQLite-backed store mapping canonical pairs to results.

    The store never checks whether a pair already has a result before
    inserting: concurrent misses on the same key may both write. Identical
    triples collapse through ``INSERT OR IGNORE``; differing results for the
    same pair coexist and ``get`` returns the earliest one.
    """

    def __init__(self, db_path: str = "db.sqlite"):
        self.db_path = db_path
        self.conn: Optional[sqlite3.Connection] = None
        self.cursor: Optional[sqlite3.Cursor] = None
        self._lock = threading.RLock()

        try:
            if db_path == MEMORY:
                self.conn = sqlite3.connect(MEMORY, check_same_thread=False)
            else:
                path = Path(db_path).resolve()
                path.parent.mkdir(parents=True, exist_ok=True)
                self.db_path = str(path)
                self.conn = sqlite3.connect(
                    self.db_path, timeout=30.0, check_same_thread=False
                )
            self.conn.row_factory = sqlite3.Row
            self.cursor = self.conn.cursor()
            self._create_tables()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to open sqlite database {db_path}: {exc}") from exc

    def _create_tables(self) -> None:
        if self.db_path != MEMORY:
            self.cursor.execute("PRAGMA journal_mode = WAL;")
            self.cursor.execute("PRAGMA busy_timeout = 30000;")
        self.cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS triple (
                a TEXT NOT NULL,
                b TEXT NOT NULL,
                c TEXT NOT NULL,
                UNIQUE (a, b, c)
            )
            """
        )
        self.cursor.execute(
            "CREATE INDEX IF NOT EXISTS triple_a_b_idx ON triple (a, b)"
        )
        self.conn.commit()

    @staticmethod
    def _triple_from_row(row: sqlite3.Row) -> Triple:
        return Triple(a=row["a"], b=row["b"], c=row["c"])

    def insert(self, a: str, b: str, c: str) -> bool:
        """Append a fact; returns False when the identical triple already existed."""
        with self._lock:
            try:
                self.cursor.execute(
                    "INSERT OR IGNORE INTO triple (a, b, c) VALUES (?, ?, ?)",
                    (a, b, c),
                )
                inserted = self.cursor.rowcount > 0
                self.conn.commit()
            except sqlite3.Error as exc:
                logger.error("insert error: %s", exc)
                raise StoreError(f"Failed to insert {a} + {b} = {c}: {exc}") from exc
        if not inserted:
            logger.info("already stored: %s + %s = %s", a, b, c)
            return False
        logger.info("inserted: %s + %s = %s", a, b, c)
        return True

    def get(self, a: str, b: str) -> Triple:
        """Return the first stored triple for the exact pair ``(a, b)``."""
        with self._lock:
            try:
                self.cursor.execute(
                    "SELECT a, b, c FROM triple WHERE a = ? AND b = ? ORDER BY rowid LIMIT 1",
                    (a, b),
                )
                row = self.cursor.fetchone()
            except sqlite3.Error as exc:
                raise StoreError(f"Failed to fetch from db: {exc}") from exc
        if row is None:
            raise NotFoundError(f"No result stored for {a} + {b}")
        triple = self._triple_from_row(row)
        logger.info("get: %s", triple.render())
        return triple

    def find_by_operand(self, x: str) -> List[Triple]:
        """Return every triple where ``x`` is a, b or c, in insertion order."""
        with self._lock:
            try:
                self.cursor.execute(
                    "SELECT a, b, c FROM triple WHERE a = ? OR b = ? OR c = ? ORDER BY rowid",
                    (x, x, x),
                )
                rows = self.cursor.fetchall()
            except sqlite3.Error as exc:
                raise StoreError(f"Failed to fetch from db: {exc}") from exc
        return [self._triple_from_row(row) for row in rows]

    def list_all(self) -> List[Triple]:
        with self._lock:
            try:
                self.cursor.execute("SELECT a, b, c FROM triple ORDER BY rowid")
                rows = self.cursor.fetchall()
            except sqlite3.Error as exc:
                raise StoreError(f"Failed to fetch from db: {exc}") from exc
        return [self._triple_from_row(row) for row in rows]

    def count(self) -> int:
        with self._lock:
            try:
                self.cursor.execute("SELECT COUNT(*) FROM triple")
                return self.cursor.fetchone()[0]
            except sqlite3.Error as exc:
                raise StoreError(f"Failed to count rows: {exc}") from exc

    def close(self) -> None:
        with self._lock:
            if self.conn:
                self.conn.close()
                self.conn = None
                self.cursor = None
