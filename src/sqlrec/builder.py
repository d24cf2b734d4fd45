"""StatementBuilder: エンティティから INSERT/UPDATE 文を組み立てる."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from sqlrec.dialect import PlaceholderStyle
from sqlrec.escape_utils import escape_identifier
from sqlrec.exceptions import StatementError
from sqlrec.schema.struct import get_struct_info
from sqlrec.values import Literal, classify, is_zero

if TYPE_CHECKING:
    from sqlrec.dialect import Dialect
    from sqlrec.schema.field import FieldInfo
    from sqlrec.schema.struct import StructInfo


class StatementBuilder:
    """INSERT/UPDATE 文のビルダー.

    ゼロ値のうち NULL を許可するものは ``null`` を SQL に直接埋め込み、
    それ以外の値はバインドパラメータにする。プレースホルダは SQL 内の
    出現順に番号付けする。
    """

    def __init__(self, dialect: Dialect | None = None, *, strict_null: bool = True) -> None:
        """初期化.

        Args:
            dialect: RDBMS 方言（None の場合は ``?`` と ``"`` を使用）
            strict_null: NULL 不可の Optional フィールドが None のとき例外にするか

        """
        self.dialect = dialect
        self.style = dialect.placeholder_style if dialect is not None else PlaceholderStyle.QMARK
        self.strict_null = strict_null

    def quote(self, name: str) -> str:
        """識別子をエスケープする."""
        if self.dialect is not None:
            return self.dialect.quote_identifier(name)
        return escape_identifier(name)

    def values_from_record(self, record: Any) -> tuple[dict[str, Any], StructInfo]:
        """エンティティからカラム名→値の辞書を作る.

        ``omitempty`` のフィールドはゼロ値なら含めない。
        """
        info = get_struct_info(type(record))
        values: dict[str, Any] = {}
        for db_name, field_info in info.items():
            value = getattr(record, field_info.name)
            if field_info.omit_empty and is_zero(value, optional=field_info.ptr):
                continue
            values[db_name] = value
        return values, info

    def insert_clause(
        self,
        table: str,
        values: dict[str, Any],
        info: StructInfo,
    ) -> tuple[str, list[Any]]:
        """INSERT 文を組み立てる.

        Args:
            table: テーブル名
            values: カラム名→値（``values_from_record`` の結果）
            info: マッピング情報

        Returns:
            (SQL, バインドパラメータ) のタプル

        Raises:
            StatementError: カラムが1つもない場合
            NullValueError: NULL 不可の Optional フィールドが None の場合

        """
        if not values:
            msg = f"Unable to build INSERT clause for {table}, no columns."
            raise StatementError(msg)
        args: list[Any] = []
        cols = [self.quote(col) for col in values]
        marks = [self._value_sql(value, info[col], args) for col, value in values.items()]
        sql = f"INSERT INTO {self.quote(table)} ({','.join(cols)}) VALUES ({','.join(marks)})"
        return sql, args

    def update_clause(self, table: str, record: Any) -> tuple[str, list[Any]]:
        """UPDATE 文を組み立てる.

        主キーのカラムは WHERE 句に AND で連結し、それ以外は SET 句に入れる。

        Raises:
            StatementError: 主キーがない、更新するカラムがない、主キーが NULL の場合

        """
        values, info = self.values_from_record(record)
        args: list[Any] = []

        sets: list[str] = []
        for col, value in values.items():
            if info.primary_key(col):
                continue
            sets.append(f"{self.quote(col)}={self._value_sql(value, info[col], args)}")

        wheres: list[str] = []
        for col, value in values.items():
            if not info.primary_key(col):
                continue
            # WHERE 句ではゼロ値リテラルで代用しない
            if value is None or isinstance(classify(value, info[col]), Literal):
                msg = f"Unable to build UPDATE clause with NULL key: {col}"
                raise StatementError(msg)
            args.append(value)
            wheres.append(f"{self.quote(col)}={self.style.render(len(args))}")

        if not wheres:
            msg = "Unable to build UPDATE clause, at least one key needed."
            raise StatementError(msg)
        if not sets:
            msg = f"Unable to build UPDATE clause for {table}, no columns to set."
            raise StatementError(msg)

        sql = f"UPDATE {self.quote(table)} SET {','.join(sets)} WHERE {' AND '.join(wheres)}"
        return sql, args

    def bulk_insert_clauses(
        self, table: str, records: Sequence[Any]
    ) -> list[tuple[str, list[Any], int]]:
        """複数行の INSERT 文を、カラムの組み合わせごとに1つずつ組み立てる.

        ``omitempty`` で除外されたカラムはリテラルで埋めず、同じカラムを
        持つレコードだけを1つの文にまとめる（除外されたカラムには DB の
        DEFAULT が使われる）。文はレコードが最初に現れた順に並ぶ。

        Returns:
            (SQL, バインドパラメータ, 行数) のリスト

        Raises:
            TypeError: 異なるクラスのレコードが混在している場合
            StatementError: レコードがない、カラムが1つもないレコードがある場合

        """
        if not records:
            msg = f"Unable to build bulk INSERT clause for {table}, no records."
            raise StatementError(msg)

        entity_cls = type(records[0])
        info = get_struct_info(entity_cls)
        groups: dict[tuple[str, ...], list[dict[str, Any]]] = {}
        for record in records:
            if type(record) is not entity_cls:
                msg = (
                    f"Bulk INSERT needs entities of one class, "
                    f"got {entity_cls.__name__} and {type(record).__name__}."
                )
                raise TypeError(msg)
            values, _ = self.values_from_record(record)
            if not values:
                msg = f"Unable to build bulk INSERT clause for {table}, no columns."
                raise StatementError(msg)
            groups.setdefault(tuple(values), []).append(values)

        clauses: list[tuple[str, list[Any], int]] = []
        for columns, rows in groups.items():
            args: list[Any] = []
            tuples = [
                "(" + ",".join(self._value_sql(row[col], info[col], args) for col in columns) + ")"
                for row in rows
            ]
            cols = ",".join(self.quote(col) for col in columns)
            sql = f"INSERT INTO {self.quote(table)} ({cols}) VALUES {','.join(tuples)}"
            clauses.append((sql, args, len(rows)))
        return clauses

    def _value_sql(self, value: Any, field_info: FieldInfo, args: list[Any]) -> str:
        """値をリテラルまたはプレースホルダにし、パラメータを args に追加する."""
        result = classify(value, field_info, strict_null=self.strict_null)
        if isinstance(result, Literal):
            return result.text
        args.append(result.value)
        return self.style.render(len(args))
