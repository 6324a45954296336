"""
SQLiteGateway - persistent DataGateway backed by a local SQLite file.

Each collection is a table of (id, data) where data holds the JSON row.
Filters, ordering and unique keys use json_extract on that column.
"""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Optional

from cloudmentor.errors import ConflictError

from .base import DataGateway, validate_name


logger = logging.getLogger(__name__)


class SQLiteGateway(DataGateway):
    """
    Store records in SQLite.

    Tables are created on first use, so a fresh database file needs no
    migration step. Each method opens its own connection.
    """

    def __init__(
        self,
        db_path: str | Path,
        unique_keys: Optional[dict[str, list[tuple[str, ...]]]] = None,
    ):
        """
        Initialize gateway.

        Args:
            db_path: Path to the database file (parent directories are created)
            unique_keys: Per-collection unique field groups (default: DEFAULT_UNIQUE_KEYS)
        """
        super().__init__(unique_keys)
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._known_tables: set[str] = set()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_table(self, conn: sqlite3.Connection, collection: str):
        """Create the collection table and its unique indexes if missing."""
        validate_name(collection)
        if collection in self._known_tables:
            return
        conn.execute(
            f'CREATE TABLE IF NOT EXISTS "{collection}" '
            f'(id TEXT PRIMARY KEY, data TEXT NOT NULL)'
        )
        for idx, key in enumerate(self.unique_keys.get(collection, [])):
            columns = ", ".join(
                f"json_extract(data, '$.{validate_name(field)}')" for field in key
            )
            conn.execute(
                f'CREATE UNIQUE INDEX IF NOT EXISTS "ux_{collection}_{idx}" '
                f'ON "{collection}" ({columns})'
            )
        conn.commit()
        self._known_tables.add(collection)

    @staticmethod
    def _where(filters: Optional[dict[str, Any]]) -> tuple[str, list[Any]]:
        if not filters:
            return "", []
        clauses = []
        params = []
        for field, value in filters.items():
            path = f"json_extract(data, '$.{validate_name(field)}')"
            if value is None:
                clauses.append(f"{path} IS NULL")
            else:
                clauses.append(f"{path} = ?")
                params.append(value)
        return " WHERE " + " AND ".join(clauses), params

    # -------------------------------------------------------------------------
    # DataGateway
    # -------------------------------------------------------------------------

    def insert(self, collection: str, record: dict[str, Any]) -> dict[str, Any]:
        row = self._prepare_insert(collection, record)
        conn = self._get_connection()
        try:
            self._ensure_table(conn, collection)
            conn.execute(
                f'INSERT INTO "{collection}" (id, data) VALUES (?, ?)',
                (row["id"], json.dumps(row, ensure_ascii=False)),
            )
            conn.commit()
        except sqlite3.IntegrityError as e:
            raise ConflictError(f"Insert into {collection} rejected: {e}") from e
        finally:
            conn.close()
        logger.debug(f"Inserted {collection}/{row['id']}")
        return row

    def select(
        self,
        collection: str,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        where, params = self._where(filters)
        sql = f'SELECT data FROM "{collection}"{where}'
        if order_by:
            direction = "ASC" if ascending else "DESC"
            sql += f" ORDER BY json_extract(data, '$.{validate_name(order_by)}') {direction}, rowid"
        else:
            sql += " ORDER BY rowid"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(int(limit))

        conn = self._get_connection()
        try:
            self._ensure_table(conn, collection)
            cursor = conn.execute(sql, params)
            return [json.loads(r["data"]) for r in cursor.fetchall()]
        finally:
            conn.close()

    def update(
        self,
        collection: str,
        filters: dict[str, Any],
        changes: dict[str, Any],
    ) -> list[dict[str, Any]]:
        changes = self._prepare_changes(changes)
        where, params = self._where(filters)
        conn = self._get_connection()
        try:
            self._ensure_table(conn, collection)
            cursor = conn.execute(f'SELECT data FROM "{collection}"{where} ORDER BY rowid', params)
            updated = []
            for r in cursor.fetchall():
                row = {**json.loads(r["data"]), **changes}
                conn.execute(
                    f'UPDATE "{collection}" SET data = ? WHERE id = ?',
                    (json.dumps(row, ensure_ascii=False), row["id"]),
                )
                updated.append(row)
            conn.commit()
        except sqlite3.IntegrityError as e:
            conn.rollback()
            raise ConflictError(f"Update of {collection} rejected: {e}") from e
        finally:
            conn.close()
        logger.debug(f"Updated {len(updated)} row(s) in {collection}")
        return updated
