"""Dialect enum: RDBMS ごとの SQL 方言定義."""

from __future__ import annotations

from enum import Enum

from sqlrec.escape_utils import escape_identifier


class PlaceholderStyle(Enum):
    """バインドパラメータのプレースホルダ形式.

    ``QMARK`` と ``FORMAT`` は位置指定、``DOLLAR`` と ``NUMERIC`` は
    1 始まりの番号付き。
    """

    QMARK = ("?", False)
    FORMAT = ("%s", False)
    DOLLAR = ("$", True)
    NUMERIC = (":", True)

    def __init__(self, mark: str, numbered: bool) -> None:
        self._mark = mark
        self._numbered = numbered

    @property
    def numbered(self) -> bool:
        """番号付き形式か."""
        return self._numbered

    def render(self, index: int) -> str:
        """index 番目（1始まり）のパラメータのプレースホルダを返す."""
        if self._numbered:
            return f"{self._mark}{index}"
        return self._mark


class Dialect(Enum):
    """RDBMS ごとの SQL 方言.

    POSTGRESQL と MYSQL は同じプレースホルダ ``%s`` を使用するが、
    識別子の引用符が異なるため別メンバーとして定義する。
    """

    SQLITE = ("sqlite", PlaceholderStyle.QMARK, '"')
    POSTGRESQL = ("postgresql", PlaceholderStyle.FORMAT, '"')
    MYSQL = ("mysql", PlaceholderStyle.FORMAT, "`")
    ORACLE = ("oracle", PlaceholderStyle.NUMERIC, '"')

    def __init__(self, dialect_id: str, style: PlaceholderStyle, quote_char: str) -> None:
        self._dialect_id = dialect_id
        self._style = style
        self._quote_char = quote_char

    @property
    def placeholder_style(self) -> PlaceholderStyle:
        """プレースホルダ形式を返す."""
        return self._style

    def quote_identifier(self, name: str) -> str:
        """識別子（テーブル名・カラム名）を引用符で囲む."""
        return escape_identifier(name, quote_char=self._quote_char)

