from __future__ import annotations

import mysql.connector
import pytest

from src.finstrava.finstrava.core.exceptions import BackendError, ValidationError
from src.finstrava.finstrava.database import mysql_base


class FakeResult:
    def __init__(self, columns, rows):
        self.column_names = columns
        self._rows = rows

    def fetchall(self):
        return list(self._rows)


class FakeCursor:
    def __init__(self, results=(), error=None, rowcount=1):
        self.results = list(results)
        self.error = error
        self.rowcount = rowcount
        self.executed = []
        self.called = []
        self.closed = False

    def callproc(self, name, args):
        self.called.append((name, args))
        if self.error:
            raise self.error

    def stored_results(self):
        return iter(self.results)

    def execute(self, sql, params=()):
        self.executed.append((sql, params))

    def fetchone(self):
        return None

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self, conn):
        self.conn = conn

    def connect(self):
        return self.conn


def test_call_procedure_maps_rows_from_every_result_set():
    cur = FakeCursor(
        results=[
            FakeResult(("id", "name"), [("c1", "ACME"), ("c2", "Beta")]),
            FakeResult(("id", "name"), [("c3", "Gamma")]),
        ]
    )
    conn = FakeConnection(cur)

    rows = mysql_base.call_procedure(FakeFactory(conn), "sp_process_renewals", ["2025-02-01"])

    assert rows == [
        {"id": "c1", "name": "ACME"},
        {"id": "c2", "name": "Beta"},
        {"id": "c3", "name": "Gamma"},
    ]
    assert cur.called == [("sp_process_renewals", ("2025-02-01",))]
    assert conn.committed and conn.closed and cur.closed


def test_call_procedure_wraps_driver_errors_with_procedure_name():
    cur = FakeCursor(error=mysql.connector.Error("PROCEDURE sp_expire does not exist"))
    conn = FakeConnection(cur)

    with pytest.raises(BackendError) as exc:
        mysql_base.call_procedure(FakeFactory(conn), "sp_expire")

    assert exc.value.procedure == "sp_expire"
    assert "does not exist" in str(exc.value)
    assert conn.rolled_back and not conn.committed
    assert conn.closed


def test_call_procedure_rejects_odd_names():
    with pytest.raises(ValidationError):
        mysql_base.call_procedure(FakeFactory(FakeConnection(FakeCursor())), "sp; DROP TABLE x")


def test_db_cursor_rolls_back_and_reraises():
    cur = FakeCursor()
    conn = FakeConnection(cur)

    with pytest.raises(ValueError):
        with mysql_base.db_cursor(FakeFactory(conn)):
            raise ValueError("bad input")

    assert conn.rolled_back and not conn.committed
    assert cur.closed and conn.closed


def test_db_cursor_commits_on_success():
    conn = FakeConnection(FakeCursor())
    with mysql_base.db_cursor(FakeFactory(conn)) as (_, cur):
        cur.execute("SELECT 1")

    assert conn.committed and not conn.rolled_back and conn.closed


def test_update_row_can_skip_soft_deleted_rows():
    cur = FakeCursor(rowcount=1)

    assert mysql_base.update_row(cur, "contracts", "k1", {"notes": "x"}, company_id="co1", exclude_deleted=True)

    sql, params = cur.executed[0]
    assert sql.endswith("AND company_id=%s AND deleted_at IS NULL")
    assert params == ("x", "k1", "co1")


def test_update_row_of_soft_deleted_row_reports_missing():
    cur = FakeCursor(rowcount=0)

    assert not mysql_base.update_row(cur, "contracts", "k1", {"notes": "x"}, exclude_deleted=True)
    assert "deleted_at IS NULL" in cur.executed[-1][0]
