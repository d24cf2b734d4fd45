"""エスケープ関連ユーティリティ."""

from __future__ import annotations


def escape_identifier(name: str, *, quote_char: str = '"') -> str:
    """識別子を引用符で囲み、内部の引用符を二重化する.

    Args:
        name: テーブル名・カラム名
        quote_char: 引用符（``"`` または MySQL のバッククォート）

    Returns:
        エスケープ済み識別子

    Raises:
        ValueError: 空文字列の場合

    Examples:
        >>> escape_identifier("users")
        '"users"'
        >>> escape_identifier('a"b')
        '"a""b"'
        >>> escape_identifier("order", quote_char="`")
        '`order`'

    """
    if not name:
        msg = "Identifier cannot be empty"
        raise ValueError(msg)
    escaped = name.replace(quote_char, quote_char * 2)
    return f"{quote_char}{escaped}{quote_char}"

