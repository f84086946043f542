import json
import sqlite3
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from gentlytold.core.ports.kv import VersionConflictError, VersionedValue

SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_entries (
    key TEXT PRIMARY KEY,
    value_json TEXT NOT NULL,
    version INTEGER NOT NULL,
    updated_at TEXT NOT NULL
)
"""


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


class SQLiteKVStore:
    """Versioned key-value store on a single SQLite table."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=10)
        conn.row_factory = dict_factory
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(SCHEMA)
            conn.commit()
        finally:
            conn.close()

    def get(self, key: str) -> VersionedValue | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT value_json, version FROM kv_entries WHERE key = ?", (key,)
            ).fetchone()
            if not row:
                return None
            return VersionedValue(value=json.loads(row["value_json"]), version=row["version"])
        finally:
            conn.close()

    def put(self, key: str, value: Any, expected_version: int | None = None) -> int:
        payload = json.dumps(value)
        now = datetime.now(UTC).isoformat()
        conn = self._get_conn()
        try:
            if expected_version is None:
                conn.execute(
                    """
                    INSERT INTO kv_entries (key, value_json, version, updated_at)
                    VALUES (?, ?, 1, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value_json=excluded.value_json,
                        version=kv_entries.version + 1,
                        updated_at=excluded.updated_at
                """,
                    (key, payload, now),
                )
                row = conn.execute(
                    "SELECT version FROM kv_entries WHERE key = ?", (key,)
                ).fetchone()
                new_version = int(row["version"])
            elif expected_version == 0:
                cur = conn.execute(
                    """
                    INSERT INTO kv_entries (key, value_json, version, updated_at)
                    VALUES (?, ?, 1, ?)
                    ON CONFLICT(key) DO NOTHING
                """,
                    (key, payload, now),
                )
                if cur.rowcount == 0:
                    raise VersionConflictError(key, expected_version, self._current_version(conn, key))
                new_version = 1
            else:
                cur = conn.execute(
                    """
                    UPDATE kv_entries
                    SET value_json = ?, version = version + 1, updated_at = ?
                    WHERE key = ? AND version = ?
                """,
                    (payload, now, key, expected_version),
                )
                if cur.rowcount == 0:
                    raise VersionConflictError(key, expected_version, self._current_version(conn, key))
                new_version = expected_version + 1

            conn.commit()
            return new_version
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def delete(self, key: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM kv_entries WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()

    def _current_version(self, conn: sqlite3.Connection, key: str) -> int | None:
        row = conn.execute("SELECT version FROM kv_entries WHERE key = ?", (key,)).fetchone()
        return int(row["version"]) if row else None
