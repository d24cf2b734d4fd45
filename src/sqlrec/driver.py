"""ドライバ実行の抽象: Executor プロトコルと DB-API 2.0 実装."""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class Executor(Protocol):
    """SQL 実行のインターフェース."""

    def exec(self, expected_rows: int, sql: str, *args: Any) -> int | None:
        """SQL を実行し、自動生成された ID を返す."""
        ...


class DBAPIExecutor:
    """PEP 249 DB-API 2.0 接続で SQL を実行する Executor."""

    def __init__(self, connection: Any, *, auto_commit: bool = False) -> None:
        """初期化.

        Args:
            connection: DB 接続オブジェクト（PEP 249 DB-API 2.0 準拠）
            auto_commit: True の場合、実行後に自動で commit する

        """
        self.connection = connection
        self.auto_commit = auto_commit
        self.rowcount = -1

    def exec(self, expected_rows: int, sql: str, *args: Any) -> int | None:
        """SQL を実行する.

        影響行数が expected_rows と異なる場合は警告ログを出すだけで、
        例外にはしない。expected_rows が負の場合は確認しない。

        Args:
            expected_rows: 想定する影響行数
            sql: 実行する SQL
            *args: バインドパラメータ

        Returns:
            自動生成された ID（cursor.lastrowid）、または None

        """
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s\n%s", sql, format_args(*args))
        cursor = self.connection.cursor()
        try:
            cursor.execute(sql, args)
            if self.auto_commit:
                self.connection.commit()
            self.rowcount = cursor.rowcount
            if expected_rows >= 0 and self.rowcount >= 0 and self.rowcount != expected_rows:
                logger.warning(
                    "Expected %d affected rows, got %d: %s", expected_rows, self.rowcount, sql
                )
            return getattr(cursor, "lastrowid", None)
        finally:
            cursor.close()


def format_args(*args: Any) -> str:
    """デバッグ用にバインドパラメータを1行ずつ文字列化する.

    Examples:
        >>> print(format_args(1, "a", None))
        #0 int 1
        #1 str 'a'
        #2 <None>

    """
    lines: list[str] = []
    for idx, arg in enumerate(args):
        if arg is None:
            lines.append(f"#{idx} <None>")
        else:
            lines.append(f"#{idx} {type(arg).__name__} {arg!r}")
    return "\n".join(lines)
