"""FieldInfo: 1カラム分のマッピング情報."""

from __future__ import annotations

from dataclasses import dataclass

NULL_LITERAL = "null"


@dataclass(frozen=True)
class FieldInfo:
    """エンティティの1フィールドとカラムの対応."""

    name: str
    """Python 側の属性名."""

    db_name: str
    """カラム名."""

    omit_empty: bool = False
    """ゼロ値のとき INSERT/UPDATE から除外する."""

    primary_key: bool = False
    """主キー."""

    null: bool = False
    """明示的に NULL を許可する."""

    not_null: bool = False
    """明示的に NULL を禁止する（Optional 型でも）."""

    ptr: bool = False
    """宣言型が ``T | None``."""

    integer: bool = False
    """宣言型（Optional を除く）が int（bool を除く）."""

    empty_value: str = "''"
    """NULL にしない場合のゼロ値リテラル."""

    @property
    def allow_null(self) -> bool:
        """NULL を格納できるか."""
        if self.ptr:
            return not self.not_null
        return self.null
