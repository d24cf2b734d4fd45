"""プレースホルダ置換: キー記号とバリュー記号を含む SQL テンプレートの展開."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from sqlrec.dialect import PlaceholderStyle
from sqlrec.escape_utils import escape_identifier
from sqlrec.exceptions import ArgumentError
from sqlrec.schema.field import FieldInfo
from sqlrec.values import Literal, classify, is_driver_value

if TYPE_CHECKING:
    from sqlrec.dialect import Dialect

DEFAULT_KEY_SIGIL = "@"
DEFAULT_VALUE_SIGIL = "?"


def validate_sigils(key_sigil: str, value_sigil: str) -> None:
    """キー記号とバリュー記号が異なる1文字ずつであることを確認する."""
    if len(key_sigil) != 1 or len(value_sigil) != 1 or key_sigil == value_sigil:
        msg = f"Sigils must be two distinct characters, got {key_sigil!r} and {value_sigil!r}"
        raise ValueError(msg)


@dataclass
class RewrittenSQL:
    """置換結果."""

    sql: str
    params: list[Any] = field(default_factory=list)


class PlaceholderRewriter:
    """SQL テンプレートのプレースホルダ置換.

    テンプレート中の記号を先頭から1文字ずつ走査し、引数を順に消費する。

    - キー記号（既定 ``@``）: 引数の文字列を識別子としてエスケープし埋め込む
    - バリュー記号（既定 ``?``）: 引数をバインドパラメータにする。
      list/tuple は ``(?,?,?)`` に展開する
    - 記号を2つ重ねると記号そのものを出力する（引数は消費しない）

    Examples:
        >>> r = PlaceholderRewriter("SELECT * FROM @ WHERE id IN ?").rewrite("t", [1, 2])
        >>> r.sql
        'SELECT * FROM "t" WHERE id IN (?,?)'
        >>> r.params
        [1, 2]

    """

    def __init__(
        self,
        sql: str,
        style: PlaceholderStyle = PlaceholderStyle.QMARK,
        *,
        dialect: Dialect | None = None,
        key_sigil: str = DEFAULT_KEY_SIGIL,
        value_sigil: str = DEFAULT_VALUE_SIGIL,
    ) -> None:
        """初期化.

        Args:
            sql: SQL テンプレート
            style: プレースホルダ形式
            dialect: RDBMS 方言。指定時は dialect.placeholder_style を使用する。
            key_sigil: 識別子を埋め込む記号
            value_sigil: バインドパラメータの記号

        Raises:
            ValueError: dialect と style (デフォルト以外) を同時に指定した場合、
                または記号が1文字でない・同じ文字の場合

        """
        if dialect is not None and style is not PlaceholderStyle.QMARK:
            msg = "dialect と style は同時に指定できません"
            raise ValueError(msg)
        validate_sigils(key_sigil, value_sigil)
        self.original_sql = sql
        self.dialect = dialect
        self.style = dialect.placeholder_style if dialect is not None else style
        self.key_sigil = key_sigil
        self.value_sigil = value_sigil

    def rewrite(self, *args: Any) -> RewrittenSQL:
        """記号を置換し、SQL とバインドパラメータを返す.

        テンプレートで消費されなかった引数はパラメータの末尾にそのまま追加する。

        Raises:
            ArgumentError: 引数が不足している、キー記号に文字列以外を渡した、
                空のリストを渡した場合

        """
        out: list[str] = []
        params: list[Any] = []
        sql = self.original_sql
        n_args = len(args)
        nth = 0
        i = 0
        while i < len(sql):
            ch = sql[i]
            if ch != self.key_sigil and ch != self.value_sigil:
                out.append(ch)
                i += 1
                continue

            # 記号の二重化はエスケープ
            if i + 1 < len(sql) and sql[i + 1] == ch:
                out.append(ch)
                i += 2
                continue
            i += 1

            if nth >= n_args:
                msg = f"Expecting #{nth + 1} arg. Got: {n_args} args."
                raise ArgumentError(msg, position=nth + 1, supplied=n_args)
            arg = args[nth]
            nth += 1

            if ch == self.key_sigil:
                if not isinstance(arg, str):
                    msg = (
                        f"Unable to replace {ch} with type {type(arg).__name__} "
                        f"(arg #{nth}), need str."
                    )
                    raise ArgumentError(msg, position=nth, supplied=n_args)
                out.append(self._quote(arg))
                continue

            if not is_driver_value(arg) and isinstance(arg, (list, tuple)):
                if not arg:
                    msg = f"Unable to merge empty sequence (arg #{nth})."
                    raise ArgumentError(msg, position=nth, supplied=n_args)
                out.append(self._expand_sequence(arg, params))
                continue

            params.append(arg)
            out.append(self.style.render(len(params)))

        params.extend(args[nth:])
        return RewrittenSQL(sql="".join(out), params=params)

    def _expand_sequence(self, values: list[Any] | tuple[Any, ...], params: list[Any]) -> str:
        """リストを ``(?,?,?)`` に展開し、要素を params に追加する."""
        info = FieldInfo(name="", db_name="", ptr=any(v is None for v in values))
        marks: list[str] = []
        for value in values:
            result = classify(value, info)
            params.append(None if isinstance(result, Literal) else result.value)
            marks.append(self.style.render(len(params)))
        return "(" + ",".join(marks) + ")"

    def _quote(self, name: str) -> str:
        if self.dialect is not None:
            return self.dialect.quote_identifier(name)
        return escape_identifier(name)
