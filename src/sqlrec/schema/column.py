"""Column アノテーションと @entity デコレータ."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

_VALID_NAMING = frozenset({"as_is", "snake_to_camel", "camel_to_snake"})

PK = "pk"
OMITEMPTY = "omitempty"
NULL = "null"
NOTNULL = "notnull"


@dataclass(frozen=True)
class Column:
    """カラムのマッピングタグを指定するアノテーション.

    タグは ``"<カラム名>[,<修飾子>]*"`` 形式。修飾子は ``pk``, ``omitempty``,
    ``null``, ``notnull``。カラム名 ``-`` はフィールドを除外し、空文字列は
    フィールド名を使う。

    Examples:
        >>> Column("user_id,pk").name
        'user_id'
        >>> Column(",omitempty,null").modifiers
        ('omitempty', 'null')

    """

    tag: str

    @property
    def name(self) -> str:
        """タグ先頭のカラム名."""
        return self.tag.split(",")[0]

    @property
    def modifiers(self) -> tuple[str, ...]:
        """カラム名以降の修飾子."""
        return tuple(self.tag.split(",")[1:])


def entity(
    cls: type | None = None,
    *,
    column_map: dict[str, str] | None = None,
    naming: str = "as_is",
) -> Any:
    """エンティティデコレータ.

    Args:
        cls: デコレート対象クラス
        column_map: フィールド名→タグ文字列のマッピング
        naming: カラム名省略時の命名規則 ("as_is", "snake_to_camel", "camel_to_snake")

    """
    if naming not in _VALID_NAMING:
        msg = f"Invalid naming: {naming!r}. Must be one of {sorted(_VALID_NAMING)}"
        raise ValueError(msg)

    def decorator(cls: type) -> type:
        cls.__column_map__ = column_map or {}  # type: ignore[attr-defined]
        cls.__column_naming__ = naming  # type: ignore[attr-defined]
        return cls

    if cls is not None:
        return decorator(cls)
    return decorator
