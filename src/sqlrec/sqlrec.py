"""Sqlrec: 高レベル API."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from types import TracebackType
from typing import TYPE_CHECKING, Any

from sqlrec.builder import StatementBuilder
from sqlrec.driver import DBAPIExecutor, Executor
from sqlrec.exceptions import StatementError
from sqlrec.placeholder import (
    DEFAULT_KEY_SIGIL,
    DEFAULT_VALUE_SIGIL,
    PlaceholderRewriter,
    validate_sigils,
)
from sqlrec.schema.struct import is_entity
from sqlrec.values import is_zero

if TYPE_CHECKING:
    from sqlrec.dialect import Dialect

logger = logging.getLogger(__name__)


class Sqlrec:
    """sqlrec の高レベル API.

    エンティティの INSERT/UPDATE/保存と、テンプレート SQL の実行を行う。

    Examples:
        >>> db = Sqlrec(connection)
        >>> user = User(id=0, name="Alice")
        >>> db.insert("users", user)  # user.id に自動採番の ID が入る
        >>> user.name = "Bob"
        >>> db.save("users", user)  # id が非ゼロなので UPDATE
        >>> db.execute("DELETE FROM @ WHERE id IN ?", "users", [1, 2, 3])

        コンテキストマネージャとして使用:

        >>> with Sqlrec(connection) as db:
        ...     db.insert_bulk("users", users)
        # 正常終了 → connection の __exit__ により commit
        # 例外発生 → connection の __exit__ により rollback

    """

    def __init__(
        self,
        connection: Any,
        *,
        dialect: Dialect | None = None,
        key_sigil: str = DEFAULT_KEY_SIGIL,
        value_sigil: str = DEFAULT_VALUE_SIGIL,
        auto_commit: bool = False,
        strict_null: bool = True,
    ) -> None:
        """初期化.

        Args:
            connection: DB 接続オブジェクト（PEP 249 DB-API 2.0 準拠）、
                または Executor プロトコルを満たすオブジェクト
            dialect: RDBMS 方言（None の場合は自動検出を試みる）
            key_sigil: テンプレートで識別子を埋め込む記号
            value_sigil: テンプレートでバインドパラメータを表す記号
            auto_commit: True の場合、実行後に自動で commit する
            strict_null: NULL 不可の Optional フィールドが None のとき例外にするか

        Raises:
            ValueError: 記号が1文字でない、または同じ文字の場合

        """
        validate_sigils(key_sigil, value_sigil)
        self._connection = connection
        if isinstance(connection, Executor):
            self._executor: Executor = connection
        else:
            self._executor = DBAPIExecutor(connection, auto_commit=auto_commit)
        self._dialect = dialect if dialect is not None else self._detect_dialect()
        self._key_sigil = key_sigil
        self._value_sigil = value_sigil
        self._builder = StatementBuilder(self._dialect, strict_null=strict_null)

    def __enter__(self) -> Sqlrec:
        """コンテキストマネージャ: connection に委譲."""
        self._connection.__enter__()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool | None:
        """コンテキストマネージャ: connection に委譲."""
        return self._connection.__exit__(exc_type, exc_val, exc_tb)

    def commit(self) -> None:
        """トランザクションをコミットする（connection.commit() のラッパー）."""
        self._connection.commit()

    def rollback(self) -> None:
        """トランザクションをロールバックする（connection.rollback() のラッパー）."""
        self._connection.rollback()

    def exec(self, expected_rows: int, sql: str, *args: Any) -> int | None:
        """置換済みの SQL をそのまま実行し、自動生成された ID を返す."""
        return self._executor.exec(expected_rows, sql, *args)

    def execute(self, sql: str, *args: Any, expected_rows: int = -1) -> int | None:
        """テンプレート SQL のプレースホルダを置換して実行する.

        Args:
            sql: SQL テンプレート
            *args: 記号に順に対応する引数（余った引数はそのままバインドされる）
            expected_rows: 想定する影響行数（負の場合は確認しない）

        Returns:
            自動生成された ID、または None

        Raises:
            ArgumentError: 引数が不正な場合

        """
        rewriter = PlaceholderRewriter(
            sql,
            dialect=self._dialect,
            key_sigil=self._key_sigil,
            value_sigil=self._value_sigil,
        )
        result = rewriter.rewrite(*args)
        return self.exec(expected_rows, result.sql, *result.params)

    def insert(self, table: str, data: Any) -> None:
        """エンティティ（またはそのリスト）を1行ずつ INSERT する.

        主キーがちょうど1つの int 型で、INSERT 前にゼロ値だった場合は、
        ドライバが返した ID をそのフィールドに設定する。

        Args:
            table: テーブル名
            data: エンティティ、またはエンティティの list/tuple

        Raises:
            TypeError: data がエンティティでもそのリストでもない場合
            StatementError: INSERT 文を組み立てられない場合

        """
        for record in self._records(data):
            values, info = self._builder.values_from_record(record)
            pk = info.only_primary_key()
            pk_was_zero = pk is not None and is_zero(getattr(record, pk.name), optional=pk.ptr)
            sql, args = self._builder.insert_clause(table, values, info)
            insert_id = self.exec(1, sql, *args)
            if pk is not None and pk.integer and pk_was_zero and insert_id is not None:
                logger.debug("%s.%s = %r", type(record).__name__, pk.name, insert_id)
                setattr(record, pk.name, insert_id)

    def insert_bulk(self, table: str, data: Sequence[Any]) -> None:
        """エンティティのリストを複数行の INSERT 文でまとめて挿入する.

        INSERT するカラムが同じレコードごとに1つの文を実行する。
        自動採番の ID はエンティティに設定しない。

        Raises:
            TypeError: data がエンティティのリストでない場合
            StatementError: INSERT 文を組み立てられない場合

        """
        if is_entity(data):
            msg = "insert_bulk needs a list of entities."
            raise TypeError(msg)
        records = self._records(data)
        for sql, args, n_rows in self._builder.bulk_insert_clauses(table, records):
            self.exec(n_rows, sql, *args)

    def update(self, table: str, data: Any) -> None:
        """エンティティ（またはそのリスト）を主キーで UPDATE する.

        Raises:
            TypeError: data がエンティティでもそのリストでもない場合
            StatementError: 主キーがない、または NULL の場合

        """
        for record in self._records(data):
            sql, args = self._builder.update_clause(table, record)
            self.exec(1, sql, *args)

    def save(self, table: str, data: Any) -> None:
        """主キーがゼロ値なら INSERT、そうでなければ UPDATE する.

        Raises:
            TypeError: data がエンティティでもそのリストでもない場合
            StatementError: 主キーがちょうど1つでない場合

        """
        for record in self._records(data):
            _, info = self._builder.values_from_record(record)
            pk = info.only_primary_key()
            if pk is None:
                msg = "Save needs an entity with exactly one 'pk' field."
                raise StatementError(msg)
            if is_zero(getattr(record, pk.name), optional=pk.ptr):
                self.insert(table, record)
            else:
                self.update(table, record)

    @staticmethod
    def _records(data: Any) -> list[Any]:
        """data をエンティティのリストにする."""
        if is_entity(data):
            return [data]
        if isinstance(data, (list, tuple)) and all(is_entity(row) for row in data):
            if len({type(row) for row in data}) > 1:
                msg = "Insert/Update needs a list of entities of one class."
                raise TypeError(msg)
            return list(data)
        msg = "Insert/Update needs an entity or a list of entities."
        raise TypeError(msg)

    def _detect_dialect(self) -> Dialect | None:
        """Connection オブジェクトから Dialect を自動検出する."""
        from sqlrec.dialect import Dialect

        module = type(self._connection).__module__
        if "sqlite3" in module:
            return Dialect.SQLITE
        if "psycopg" in module:
            return Dialect.POSTGRESQL
        if "pymysql" in module:
            return Dialect.MYSQL
        if "oracledb" in module:
            return Dialect.ORACLE
        return None
