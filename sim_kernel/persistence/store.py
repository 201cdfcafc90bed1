"""
Document Store — the persistence port the simulation kernel writes through.

Records are plain JSON-compatible dicts grouped into named collections
(branches, scheduled_events, packets, settings) and keyed by id.

Behavioral Contract:
- Read-after-write consistency within a single process.
- list() returns records in first-insertion order; updating a record
  never moves it.
- Store failures surface as PersistenceError. Nothing is retried here.
"""

import copy
import json
import sqlite3
from typing import Dict, List, Optional, Protocol

from sim_kernel.errors import PersistenceError


class DocumentStore(Protocol):
    def get(self, collection: str, record_id: str) -> Optional[dict]: ...

    def put(self, collection: str, record_id: str, record: dict) -> None: ...

    def update(self, collection: str, record_id: str, changes: dict) -> Optional[dict]: ...

    def delete(self, collection: str, record_id: str) -> bool: ...

    def list(self, collection: str) -> List[dict]: ...


class InMemoryStore:
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self):
        self._collections: Dict[str, Dict[str, dict]] = {}

    def _collection(self, collection: str) -> Dict[str, dict]:
        return self._collections.setdefault(collection, {})

    def get(self, collection: str, record_id: str) -> Optional[dict]:
        record = self._collection(collection).get(record_id)
        return copy.deepcopy(record) if record is not None else None

    def put(self, collection: str, record_id: str, record: dict) -> None:
        self._collection(collection)[record_id] = copy.deepcopy(record)

    def update(self, collection: str, record_id: str, changes: dict) -> Optional[dict]:
        records = self._collection(collection)
        if record_id not in records:
            return None
        records[record_id] = {**records[record_id], **copy.deepcopy(changes)}
        return copy.deepcopy(records[record_id])

    def delete(self, collection: str, record_id: str) -> bool:
        return self._collection(collection).pop(record_id, None) is not None

    def list(self, collection: str) -> List[dict]:
        return [copy.deepcopy(r) for r in self._collection(collection).values()]

    def close(self) -> None:
        self._collections.clear()


class SqliteStore:
    """
    SQLite-backed document store.
    One table; each row holds the JSON body of a record.
    """

    def __init__(self, db_path: str = ":memory:"):
        self.db_path = db_path
        try:
            self._conn = sqlite3.connect(db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._init_schema()
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot open store at {db_path}: {e}") from e

    def _init_schema(self) -> None:
        """Create the documents table if it doesn't exist."""
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS documents (
                seq INTEGER PRIMARY KEY AUTOINCREMENT,
                collection TEXT NOT NULL,
                id TEXT NOT NULL,
                body TEXT NOT NULL,
                UNIQUE (collection, id)
            )
        """)
        self._conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_documents_collection ON documents(collection)
        """)
        self._conn.commit()

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        try:
            cursor = self._conn.execute(sql, params)
            self._conn.commit()
            return cursor
        except sqlite3.Error as e:
            raise PersistenceError(f"Store operation failed: {e}") from e

    def get(self, collection: str, record_id: str) -> Optional[dict]:
        row = self._execute(
            "SELECT body FROM documents WHERE collection = ? AND id = ?",
            (collection, record_id),
        ).fetchone()
        return json.loads(row["body"]) if row else None

    def put(self, collection: str, record_id: str, record: dict) -> None:
        # Upsert in place so the row keeps its original seq
        self._execute(
            """
            INSERT INTO documents (collection, id, body) VALUES (?, ?, ?)
            ON CONFLICT (collection, id) DO UPDATE SET body = excluded.body
            """,
            (collection, record_id, json.dumps(record, default=str)),
        )

    def update(self, collection: str, record_id: str, changes: dict) -> Optional[dict]:
        current = self.get(collection, record_id)
        if current is None:
            return None
        current.update(changes)
        self.put(collection, record_id, current)
        return current

    def delete(self, collection: str, record_id: str) -> bool:
        cursor = self._execute(
            "DELETE FROM documents WHERE collection = ? AND id = ?",
            (collection, record_id),
        )
        return cursor.rowcount > 0

    def list(self, collection: str) -> List[dict]:
        rows = self._execute(
            "SELECT body FROM documents WHERE collection = ? ORDER BY seq",
            (collection,),
        ).fetchall()
        return [json.loads(r["body"]) for r in rows]

    def count(self, collection: str) -> int:
        row = self._execute(
            "SELECT COUNT(*) AS cnt FROM documents WHERE collection = ?",
            (collection,),
        ).fetchone()
        return row["cnt"]

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
