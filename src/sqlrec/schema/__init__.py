"""sqlrec スキーマパッケージ."""

from sqlrec.schema.column import Column, entity
from sqlrec.schema.field import FieldInfo
from sqlrec.schema.struct import StructInfo, clear_cache, get_struct_info, is_entity

__all__ = [
    "Column",
    "FieldInfo",
    "StructInfo",
    "clear_cache",
    "entity",
    "get_struct_info",
    "is_entity",
]
