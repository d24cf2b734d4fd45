"""sqlrec: エンティティ定義から INSERT/UPDATE 文を生成する SQL ライブラリ."""

import logging

from sqlrec._substitute import substitute
from sqlrec.builder import StatementBuilder
from sqlrec.dialect import Dialect, PlaceholderStyle
from sqlrec.driver import DBAPIExecutor, Executor, format_args
from sqlrec.escape_utils import escape_identifier
from sqlrec.exceptions import (
    ArgumentError,
    ConfigurationError,
    NullValueError,
    SqlrecError,
    StatementError,
)
from sqlrec.placeholder import PlaceholderRewriter, RewrittenSQL
from sqlrec.schema import Column, FieldInfo, StructInfo, entity, get_struct_info
from sqlrec.sqlrec import Sqlrec
from sqlrec.values import Literal, Parameter, classify, is_driver_value, is_zero

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ArgumentError",
    "Column",
    "ConfigurationError",
    "DBAPIExecutor",
    "Dialect",
    "Executor",
    "FieldInfo",
    "Literal",
    "NullValueError",
    "Parameter",
    "PlaceholderRewriter",
    "PlaceholderStyle",
    "RewrittenSQL",
    "Sqlrec",
    "SqlrecError",
    "StatementBuilder",
    "StatementError",
    "StructInfo",
    "classify",
    "entity",
    "escape_identifier",
    "format_args",
    "get_struct_info",
    "is_driver_value",
    "is_zero",
    "substitute",
]
