"""
Base repository - find/count/get/create/update/delete over one table.
"""

import math
import sqlite3
from datetime import datetime, timezone
from typing import Callable, Generic, TypeVar

from ..exceptions import PersistenceError
from .connection import DatabaseConnection
from .converters import encode_value
from .models import FieldType, FindResult
from .query import build_order_by, build_where

T = TypeVar("T")

READ_ONLY_FIELDS = ("id", "created_at")


class DocumentRepository(Generic[T]):
    """
    Table-backed document collection.

    Subclasses set the table, field map, row converter and required fields,
    and may override _validate for collection rules.
    """

    table: str = ""
    fields: dict[str, FieldType] = {}
    required: tuple[str, ...] = ()
    row_converter: Callable[[sqlite3.Row], T]

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def _to_doc(self, row: sqlite3.Row) -> T:
        return self.row_converter(row)

    def find(
        self,
        where: dict | None = None,
        sort: str | None = None,
        limit: int = 10,
        page: int = 1,
    ) -> FindResult[T]:
        """Find one page of documents. limit=0 returns every match."""
        if limit < 0:
            raise ValueError("limit must be >= 0")
        if page < 1:
            raise ValueError("page must be >= 1")

        clause, params = build_where(where, self.fields)
        order_by = build_order_by(sort, self.fields)

        with self._db.conn() as conn:
            total = conn.execute(
                f"SELECT COUNT(*) FROM {self.table} WHERE {clause}", params
            ).fetchone()[0]

            if limit == 0:
                rows = conn.execute(
                    f"SELECT * FROM {self.table} WHERE {clause} ORDER BY {order_by}",
                    params
                ).fetchall()
                page, total_pages = 1, 1
            else:
                rows = conn.execute(
                    f"SELECT * FROM {self.table} WHERE {clause} ORDER BY {order_by} "
                    f"LIMIT ? OFFSET ?",
                    [*params, limit, (page - 1) * limit]
                ).fetchall()
                total_pages = max(1, math.ceil(total / limit))

        return FindResult(
            docs=[self._to_doc(row) for row in rows],
            total_docs=total,
            page=page,
            limit=limit,
            total_pages=total_pages,
            has_next_page=page < total_pages,
        )

    def count(self, where: dict | None = None) -> int:
        clause, params = build_where(where, self.fields)
        with self._db.conn() as conn:
            return conn.execute(
                f"SELECT COUNT(*) FROM {self.table} WHERE {clause}", params
            ).fetchone()[0]

    def get(self, doc_id: int) -> T | None:
        with self._db.conn() as conn:
            row = conn.execute(
                f"SELECT * FROM {self.table} WHERE id = ?", (doc_id,)
            ).fetchone()
            return self._to_doc(row) if row else None

    def create(self, data: dict) -> T:
        """
        Insert a document and return it.

        Raises:
            PersistenceError: On invalid values or constraint violations
        """
        missing = [name for name in self.required if data.get(name) in (None, "")]
        if missing:
            raise PersistenceError(f"{self.table}: missing required field(s) {', '.join(missing)}")

        # None leaves the column default in place
        values = {name: value for name, value in self._encode(data).items() if value is not None}
        self._validate(data, None)
        values["created_at"] = datetime.now(timezone.utc).isoformat()

        columns = ", ".join(values)
        placeholders = ", ".join("?" * len(values))

        try:
            with self._db.conn() as conn:
                cursor = conn.execute(
                    f"INSERT INTO {self.table} ({columns}) VALUES ({placeholders})",
                    list(values.values())
                )
                doc_id = cursor.lastrowid
        except sqlite3.IntegrityError as e:
            raise PersistenceError(f"{self.table}: {e}") from e

        return self.get(doc_id)

    def update(self, doc_id: int, data: dict) -> T:
        """
        Update fields of an existing document and return it.

        Raises:
            PersistenceError: If the document is missing, or on invalid values
        """
        existing = self.get(doc_id)
        if existing is None:
            raise PersistenceError(f"{self.table}: no document with id {doc_id}")

        for name in self.required:
            if name in data and data[name] in (None, ""):
                raise PersistenceError(f"{self.table}: {name} cannot be empty")

        values = self._encode(data)
        self._validate(data, existing)
        if not values:
            return existing

        assignments = ", ".join(f"{name} = ?" for name in values)

        try:
            with self._db.conn() as conn:
                conn.execute(
                    f"UPDATE {self.table} SET {assignments} WHERE id = ?",
                    [*values.values(), doc_id]
                )
        except sqlite3.IntegrityError as e:
            raise PersistenceError(f"{self.table}: {e}") from e

        return self.get(doc_id)

    def delete(self, doc_id: int) -> bool:
        """Delete a document. Returns True if a row was removed."""
        with self._db.conn() as conn:
            cursor = conn.execute(f"DELETE FROM {self.table} WHERE id = ?", (doc_id,))
            return cursor.rowcount > 0

    def _encode(self, data: dict) -> dict:
        values = {}
        for name, value in data.items():
            if name in READ_ONLY_FIELDS:
                raise PersistenceError(f"{self.table}: {name} is read-only")
            if name not in self.fields:
                raise PersistenceError(f"{self.table}: unknown field {name}")
            try:
                values[name] = encode_value(self.fields[name], value)
            except ValueError as e:
                raise PersistenceError(f"{self.table}.{name}: {e}") from e
        return values

    def _validate(self, data: dict, existing: T | None):
        """Collection rules; existing is None on create."""
