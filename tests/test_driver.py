"""DBAPIExecutor と format_args のテスト."""

from __future__ import annotations

import logging
from datetime import date
from unittest.mock import MagicMock

import pytest

from sqlrec import DBAPIExecutor, Executor, format_args


def make_connection(rowcount: int = 1, lastrowid: int | None = 10) -> MagicMock:
    conn = MagicMock()
    cursor = MagicMock()
    cursor.rowcount = rowcount
    cursor.lastrowid = lastrowid
    conn.cursor.return_value = cursor
    return conn


class TestFormatArgs:
    """format_args のテスト."""

    def test_lines(self) -> None:
        """1行に1引数、型と repr を出力."""
        assert format_args(1, "a", None) == "#0 int 1\n#1 str 'a'\n#2 <None>"

    def test_no_args(self) -> None:
        assert format_args() == ""

    def test_date(self) -> None:
        assert format_args(date(2024, 1, 2)) == "#0 date datetime.date(2024, 1, 2)"


class TestDBAPIExecutor:
    """DBAPIExecutor のテスト."""

    def test_satisfies_protocol(self) -> None:
        assert isinstance(DBAPIExecutor(MagicMock()), Executor)

    def test_exec(self) -> None:
        """Cursor.execute にパラメータをタプルで渡し、lastrowid を返す."""
        conn = make_connection()
        executor = DBAPIExecutor(conn)
        insert_id = executor.exec(1, "INSERT INTO t (a) VALUES (?)", "x")
        cursor = conn.cursor.return_value
        cursor.execute.assert_called_once_with("INSERT INTO t (a) VALUES (?)", ("x",))
        cursor.close.assert_called_once()
        assert insert_id == 10
        assert executor.rowcount == 1

    def test_cursor_without_lastrowid(self) -> None:
        """Lastrowid を持たないカーソルでは None."""
        conn = MagicMock()
        conn.cursor.return_value = MagicMock(spec=["execute", "close", "rowcount"])
        conn.cursor.return_value.rowcount = 1
        assert DBAPIExecutor(conn).exec(1, "SELECT 1") is None

    def test_cursor_closed_on_error(self) -> None:
        """実行エラーはそのまま送出し、カーソルは閉じる."""
        conn = make_connection()
        cursor = conn.cursor.return_value
        cursor.execute.side_effect = RuntimeError("boom")
        with pytest.raises(RuntimeError, match="boom"):
            DBAPIExecutor(conn).exec(1, "SELECT 1")
        cursor.close.assert_called_once()

    def test_auto_commit(self) -> None:
        conn = make_connection()
        DBAPIExecutor(conn, auto_commit=True).exec(1, "DELETE FROM t")
        conn.commit.assert_called_once()

    def test_no_auto_commit_by_default(self) -> None:
        conn = make_connection()
        DBAPIExecutor(conn).exec(1, "DELETE FROM t")
        conn.commit.assert_not_called()

    def test_rowcount_mismatch_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        """影響行数の不一致は警告ログのみで例外にしない."""
        conn = make_connection(rowcount=0)
        with caplog.at_level(logging.WARNING, logger="sqlrec.driver"):
            DBAPIExecutor(conn).exec(1, "UPDATE t SET a = 1")
        assert "Expected 1 affected rows, got 0" in caplog.text

    @pytest.mark.parametrize(("expected", "rowcount"), [(-1, 5), (1, -1), (2, 2)])
    def test_rowcount_not_checked(
        self, caplog: pytest.LogCaptureFixture, expected: int, rowcount: int
    ) -> None:
        """想定行数が負、行数が不明、または一致する場合は警告しない."""
        conn = make_connection(rowcount=rowcount)
        with caplog.at_level(logging.WARNING, logger="sqlrec.driver"):
            DBAPIExecutor(conn).exec(expected, "UPDATE t SET a = 1")
        assert caplog.records == []

    def test_debug_log(self, caplog: pytest.LogCaptureFixture) -> None:
        """DEBUG レベルでは SQL とパラメータを出力する."""
        conn = make_connection()
        with caplog.at_level(logging.DEBUG, logger="sqlrec.driver"):
            DBAPIExecutor(conn).exec(1, "INSERT INTO t (a) VALUES (?)", "x")
        assert "INSERT INTO t (a) VALUES (?)" in caplog.text
        assert "#0 str 'x'" in caplog.text
