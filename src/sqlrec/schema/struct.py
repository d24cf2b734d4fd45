"""エンティティクラスからカラムのマッピング情報を抽出する."""

from __future__ import annotations

import inspect
import re
import threading
import types
from collections.abc import Iterator, Mapping
from dataclasses import fields, is_dataclass, replace
from decimal import Decimal
from typing import Annotated, Any, Union, get_args, get_origin, get_type_hints

from sqlrec.exceptions import ConfigurationError
from sqlrec.schema.column import NOTNULL, NULL, OMITEMPTY, PK, Column
from sqlrec.schema.field import NULL_LITERAL, FieldInfo

_cache: dict[type, StructInfo] = {}
_cache_lock = threading.Lock()


class StructInfo(Mapping[str, FieldInfo]):
    """カラム名→FieldInfo の読み取り専用マッピング（宣言順）."""

    def __init__(self, entity_cls: type, infos: list[FieldInfo]) -> None:
        self.entity_cls = entity_cls
        self._infos = {info.db_name: info for info in infos}

    def __getitem__(self, db_name: str) -> FieldInfo:
        return self._infos[db_name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._infos)

    def __len__(self) -> int:
        return len(self._infos)

    def __repr__(self) -> str:
        return f"StructInfo({self.entity_cls.__name__}, {list(self._infos)})"

    def has_db_name(self, db_name: str) -> bool:
        """カラムがマッピングされているか."""
        return db_name in self._infos

    def primary_key(self, db_name: str) -> bool:
        """カラムが主キーか.

        Raises:
            KeyError: カラムがマッピングされていない場合

        """
        return self._infos[db_name].primary_key

    def primary_keys(self) -> list[FieldInfo]:
        """主キーのフィールドを宣言順で返す."""
        return [info for info in self._infos.values() if info.primary_key]

    def only_primary_key(self) -> FieldInfo | None:
        """唯一の主キーを返す. 主キーが0個または複数なら None."""
        pks = self.primary_keys()
        if len(pks) != 1:
            return None
        return pks[0]


def is_entity(obj: Any) -> bool:
    """dataclass または Pydantic モデルのインスタンスか."""
    if isinstance(obj, type):
        return False
    return is_dataclass(obj) or hasattr(type(obj), "model_fields")


def get_struct_info(entity_cls: type) -> StructInfo:
    """エンティティクラスのマッピング情報を取得する（キャッシュ付き）.

    初回のみ構築し、以降は同じインスタンスを返す。

    Args:
        entity_cls: dataclass または Pydantic BaseModel のクラス

    Returns:
        カラム名→FieldInfo のマッピング

    Raises:
        TypeError: サポートしないクラスの場合
        ConfigurationError: ``_`` で始まるフィールドにタグがある場合

    """
    info = _cache.get(entity_cls)
    if info is not None:
        return info
    with _cache_lock:
        info = _cache.get(entity_cls)
        if info is None:
            info = StructInfo(entity_cls, list(_build_fields(entity_cls)))
            _cache[entity_cls] = info
    return info


def clear_cache() -> None:
    """キャッシュを破棄する（テスト用）."""
    with _cache_lock:
        _cache.clear()


def _build_fields(entity_cls: type) -> Iterator[FieldInfo]:
    """(フィールド名, 型, タグ) を FieldInfo に変換する."""
    column_map: dict[str, str] = getattr(entity_cls, "__column_map__", {})
    naming: str = getattr(entity_cls, "__column_naming__", "as_is")

    if is_dataclass(entity_cls):
        declared = _dataclass_fields(entity_cls)
    elif hasattr(entity_cls, "model_fields"):
        declared = _pydantic_fields(entity_cls)
    else:
        msg = (
            f"Cannot extract columns from {entity_cls}. "
            f"Use dataclass or Pydantic BaseModel."
        )
        raise TypeError(msg)

    for field_name, type_hint, tag in declared:
        if tag is None:
            tag = column_map.get(field_name)
        if tag is None:
            continue
        if field_name.startswith("_"):
            msg = f"Unable to map private field {entity_cls.__name__}.{field_name}"
            raise ConfigurationError(msg)
        info = _parse_tag(field_name, type_hint, tag, naming)
        if info is not None:
            yield info


def _dataclass_fields(entity_cls: type) -> Iterator[tuple[str, Any, str | None]]:
    hints = get_type_hints(entity_cls, include_extras=True)
    for f in fields(entity_cls):
        type_hint = hints.get(f.name, Any)
        tag = _column_tag(type_hint)
        if tag is None:
            tag = f.metadata.get("db")
        yield f.name, type_hint, tag


def _pydantic_fields(entity_cls: type) -> Iterator[tuple[str, Any, str | None]]:
    # Annotated のメタデータは FieldInfo.metadata に移される
    for name, field_info in entity_cls.model_fields.items():  # type: ignore[attr-defined]
        tag = None
        for meta in field_info.metadata:
            if isinstance(meta, Column):
                tag = meta.tag
                break
        yield name, field_info.annotation, tag

    # プライベート属性は model_fields に含まれないため、宣言したクラスの
    # アノテーションを評価して Column の有無を調べる
    private = getattr(entity_cls, "__private_attributes__", {})
    for klass in entity_cls.__mro__:
        if not any(name in private for name in inspect.get_annotations(klass)):
            continue
        for name, annotation in inspect.get_annotations(klass, eval_str=True).items():
            if name in private and _column_tag(annotation) is not None:
                yield name, annotation, ""


def _column_tag(type_hint: Any) -> str | None:
    """Annotated[..., Column("X")] からタグを取り出す."""
    if get_origin(type_hint) is Annotated:
        for arg in get_args(type_hint)[1:]:
            if isinstance(arg, Column):
                return arg.tag
    return None


def _parse_tag(field_name: str, type_hint: Any, tag: str, naming: str) -> FieldInfo | None:
    column = Column(tag)
    db_name = column.name
    if db_name == "-":
        return None
    if db_name == "":
        db_name = _apply_naming(field_name, naming)

    ptr, base = unwrap_optional(type_hint)
    if ptr:
        empty_value = NULL_LITERAL
    elif _is_numeric(base):
        empty_value = "0"
    else:
        empty_value = "''"

    modifiers = set(column.modifiers)  # 未知の修飾子は無視
    info = FieldInfo(
        name=field_name,
        db_name=db_name,
        omit_empty=OMITEMPTY in modifiers,
        primary_key=PK in modifiers,
        null=NULL in modifiers,
        not_null=NOTNULL in modifiers,
        ptr=ptr,
        integer=_is_integer(base),
        empty_value=empty_value,
    )
    if not info.allow_null and info.empty_value == NULL_LITERAL:
        info = replace(info, empty_value="''")
    return info


def unwrap_optional(type_hint: Any) -> tuple[bool, Any]:
    """``T | None`` なら (True, T)、それ以外は (False, 型) を返す."""
    if get_origin(type_hint) is Annotated:
        type_hint = get_args(type_hint)[0]
    if get_origin(type_hint) in (Union, types.UnionType):
        args = [a for a in get_args(type_hint) if a is not type(None)]
        if len(args) < len(get_args(type_hint)):
            return True, args[0] if len(args) == 1 else Union[tuple(args)]  # noqa: UP007
    return False, type_hint


def _is_numeric(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, (int, float, Decimal)) and tp is not bool


def _is_integer(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, int) and not issubclass(tp, bool)


def _apply_naming(field_name: str, naming: str) -> str:
    if naming == "snake_to_camel":
        components = field_name.split("_")
        return components[0] + "".join(x.title() for x in components[1:])
    if naming == "camel_to_snake":
        return re.sub(r"(?<!^)(?=[A-Z])", "_", field_name).lower()
    return field_name
