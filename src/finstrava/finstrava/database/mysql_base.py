from __future__ import annotations

import re
import uuid
from contextlib import contextmanager
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import mysql.connector

from ..common.datetime_utils import db_timestamp
from ..core.exceptions import BackendError, ValidationError
from .connection import DatabaseConnection

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise BackendError(str(e)) from e
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        raise BackendError(str(e)) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def _db_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _identifier(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise ValidationError(f"Campo inválido: {name!r}")
    return name


def call_procedure(conn_factory: DatabaseConnection, name: str, args: Sequence[Any] = ()) -> List[Dict[str, Any]]:
    """Run a stored procedure and collect the rows of every result set.

    mysql-connector hands result sets back as buffered tuple cursors, so rows
    are rebuilt as dicts from ``column_names``.
    """

    name = _identifier(name)
    try:
        with db_cursor(conn_factory) as (_, cur):
            cur.callproc(name, tuple(args))
            rows: List[Dict[str, Any]] = []
            for result in cur.stored_results():
                columns = list(result.column_names or [])
                for row in result.fetchall():
                    rows.append(dict(row) if isinstance(row, Mapping) else dict(zip(columns, row)))
            return rows
    except BackendError as e:
        raise BackendError(str(e), procedure=name) from e


def call_function(conn_factory: DatabaseConnection, name: str, args: Sequence[Any] = ()) -> Any:
    """Evaluate a scalar stored function: ``SELECT name(%s, ...)``."""

    name = _identifier(name)
    placeholders = ", ".join(["%s"] * len(args))
    try:
        with db_cursor(conn_factory, dictionary=False) as (_, cur):
            cur.execute(f"SELECT {name}({placeholders})", tuple(args))
            row = cur.fetchone()
            return row[0] if row else None
    except BackendError as e:
        raise BackendError(str(e), procedure=name) from e


def insert_row(cur, table: str, data: Mapping[str, Any]) -> str:
    """INSERT one row; ids are UUID strings generated here unless given."""
    data = {"id": str(uuid.uuid4()), **data} if "id" not in data else dict(data)
    columns = [_identifier(c) for c in data.keys()]
    placeholders = ",".join(["%s"] * len(columns))
    cur.execute(
        f"INSERT INTO {_identifier(table)}({','.join(columns)}) VALUES({placeholders})",
        tuple(_db_value(v) for v in data.values()),
    )
    return str(data["id"])


def insert_many(cur, table: str, rows: Iterable[Mapping[str, Any]]) -> int:
    count = 0
    for row in rows:
        insert_row(cur, table, row)
        count += 1
    return count


def update_row(
    cur,
    table: str,
    row_id: str,
    data: Mapping[str, Any],
    *,
    company_id: Optional[str] = None,
    exclude_deleted: bool = False,
) -> bool:
    """UPDATE by id; returns True when the row exists (even if unchanged).

    With ``exclude_deleted`` soft-deleted rows are treated as missing.
    """

    if not data:
        return exists(cur, table, row_id, company_id=company_id, exclude_deleted=exclude_deleted)
    assignments = ", ".join(f"{_identifier(c)}=%s" for c in data.keys())
    params: list = [_db_value(v) for v in data.values()] + [row_id]
    sql = f"UPDATE {_identifier(table)} SET {assignments} WHERE id=%s"
    if company_id is not None:
        sql += " AND company_id=%s"
        params.append(company_id)
    if exclude_deleted:
        sql += " AND deleted_at IS NULL"
    cur.execute(sql, tuple(params))
    if cur.rowcount > 0:
        return True
    return exists(cur, table, row_id, company_id=company_id, exclude_deleted=exclude_deleted)


def exists(
    cur, table: str, row_id: str, *, company_id: Optional[str] = None, exclude_deleted: bool = False
) -> bool:
    sql = f"SELECT id FROM {_identifier(table)} WHERE id=%s"
    params: list = [row_id]
    if company_id is not None:
        sql += " AND company_id=%s"
        params.append(company_id)
    if exclude_deleted:
        sql += " AND deleted_at IS NULL"
    cur.execute(sql, tuple(params))
    return fetchone(cur) is not None


def soft_delete(cur, table: str, row_id: str, *, company_id: Optional[str] = None) -> bool:
    sql = f"UPDATE {_identifier(table)} SET deleted_at=%s WHERE id=%s AND deleted_at IS NULL"
    params: list = [db_timestamp(), row_id]
    if company_id is not None:
        sql += " AND company_id=%s"
        params.append(company_id)
    cur.execute(sql, tuple(params))
    return cur.rowcount > 0
