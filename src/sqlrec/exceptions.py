"""sqlrec例外クラス."""

from __future__ import annotations


class SqlrecError(Exception):
    """sqlrecの基底例外."""


class ArgumentError(SqlrecError):
    """プレースホルダ置換の引数エラー.

    Attributes:
        position: 問題のある引数の位置（1始まり）。不明な場合は None
        supplied: 渡された引数の総数

    """

    def __init__(self, message: str, *, position: int | None = None, supplied: int = 0) -> None:
        super().__init__(message)
        self.position = position
        self.supplied = supplied


class StatementError(SqlrecError):
    """INSERT/UPDATE 文を組み立てられない."""


class NullValueError(StatementError):
    """NULL を許可しないフィールドにゼロ値が設定されている."""


class ConfigurationError(Exception):
    """エンティティ定義の誤り.

    実行時に回復できるエラーではなく、コードの修正が必要なため
    SqlrecError を継承しない。
    """
