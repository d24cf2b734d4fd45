"""substitute 便利関数."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlrec.dialect import PlaceholderStyle
from sqlrec.placeholder import (
    DEFAULT_KEY_SIGIL,
    DEFAULT_VALUE_SIGIL,
    PlaceholderRewriter,
    RewrittenSQL,
)

if TYPE_CHECKING:
    from sqlrec.dialect import Dialect


def substitute(
    sql: str,
    *args: Any,
    style: PlaceholderStyle = PlaceholderStyle.QMARK,
    dialect: Dialect | None = None,
    key_sigil: str = DEFAULT_KEY_SIGIL,
    value_sigil: str = DEFAULT_VALUE_SIGIL,
) -> RewrittenSQL:
    """SQL テンプレートのプレースホルダを置換する便利関数.

    Args:
        sql: SQL テンプレート
        *args: 記号に順に対応する引数
        style: プレースホルダ形式
        dialect: RDBMS 方言。指定時は dialect.placeholder_style を使用する。
        key_sigil: 識別子を埋め込む記号
        value_sigil: バインドパラメータの記号

    Returns:
        置換結果

    Raises:
        ValueError: dialect と style (デフォルト以外) を同時に指定した場合
        ArgumentError: 引数が不正な場合

    """
    rewriter = PlaceholderRewriter(
        sql,
        style,
        dialect=dialect,
        key_sigil=key_sigil,
        value_sigil=value_sigil,
    )
    return rewriter.rewrite(*args)
