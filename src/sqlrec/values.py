"""値の判定: ゼロ値、ドライバ値、SQL リテラル/バインドパラメータの振り分け."""

from __future__ import annotations

import datetime
from collections.abc import Mapping
from dataclasses import dataclass, fields, is_dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any, get_type_hints
from uuid import UUID

from sqlrec.exceptions import NullValueError
from sqlrec.schema.field import NULL_LITERAL
from sqlrec.schema.struct import unwrap_optional

if TYPE_CHECKING:
    from sqlrec.schema.field import FieldInfo

# DB-API ドライバがそのままバインドできる型
DRIVER_VALUE_TYPES: tuple[type, ...] = (
    bool,
    int,
    float,
    Decimal,
    str,
    bytes,
    bytearray,
    memoryview,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    UUID,
)

_ZERO_TEMPORALS: tuple[Any, ...] = (datetime.datetime.min, datetime.date.min, datetime.time.min)


@dataclass(frozen=True)
class Literal:
    """SQL 文にそのまま埋め込むテキスト."""

    text: str


@dataclass(frozen=True)
class Parameter:
    """バインドパラメータとして渡す値."""

    value: Any


def is_driver_value(value: Any) -> bool:
    """ドライバに変換なしで渡せる値か."""
    return value is None or isinstance(value, DRIVER_VALUE_TYPES)


def is_zero(value: Any, *, optional: bool = False) -> bool:
    """値が宣言型のゼロ値か.

    ``T | None`` 型（optional=True）では None のみゼロとみなす。
    dataclass と Pydantic モデルは全フィールドが再帰的にゼロのときゼロ。

    Args:
        value: 判定する値
        optional: 宣言型が ``T | None`` か

    Returns:
        ゼロ値なら True

    Examples:
        >>> is_zero(0), is_zero(""), is_zero([])
        (True, True, True)
        >>> is_zero(0, optional=True)
        False

    """
    if value is None:
        return True
    if optional:
        return False
    if isinstance(value, (bool, int, float, Decimal, complex)):
        return value == 0
    if isinstance(value, (str, bytes, bytearray, list, tuple, set, frozenset, Mapping)):
        return len(value) == 0
    if isinstance(value, (datetime.date, datetime.time)):
        return any(type(value) is type(z) and value == z for z in _ZERO_TEMPORALS)
    if is_dataclass(value) and not isinstance(value, type):
        hints = get_type_hints(type(value))
        return all(
            is_zero(getattr(value, f.name), optional=unwrap_optional(hints.get(f.name))[0])
            for f in fields(value)
        )
    model_fields = getattr(type(value), "model_fields", None)
    if isinstance(model_fields, Mapping):
        return all(
            is_zero(getattr(value, name), optional=unwrap_optional(f.annotation)[0])
            for name, f in model_fields.items()
        )
    return False


def classify(value: Any, info: FieldInfo, *, strict_null: bool = True) -> Literal | Parameter:
    """INSERT/UPDATE 用に値を SQL リテラルかバインドパラメータに振り分ける.

    Args:
        value: フィールドの値
        info: フィールドのマッピング情報
        strict_null: NULL 不可の Optional フィールドが None のとき例外にするか。
            False の場合は ``info.empty_value`` を使う。

    Returns:
        ``Literal("null")`` などのリテラル、または ``Parameter``

    Raises:
        NullValueError: NULL 不可の Optional フィールドが None で strict_null の場合

    """
    if is_zero(value, optional=info.ptr):
        if info.allow_null:
            return Literal(NULL_LITERAL)
        if info.ptr:
            if strict_null:
                msg = f"Column {info.db_name!r} does not allow NULL, got {value!r}"
                raise NullValueError(msg)
            return Literal(info.empty_value)
    return Parameter(value)
