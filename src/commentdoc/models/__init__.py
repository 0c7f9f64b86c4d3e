"""
데이터 모델 모듈
"""

from .enum_value import EnumValue
from .parse_result import ParseError, ParseResult
from .prototype import (
    ColumnType,
    Parameter,
    ParameterStyle,
    ParsedPrototype,
    column_order,
)
from .source_file import SourceFile
from .topic import Topic

__all__ = [
    "ColumnType",
    "EnumValue",
    "Parameter",
    "ParameterStyle",
    "ParseError",
    "ParseResult",
    "ParsedPrototype",
    "SourceFile",
    "Topic",
    "column_order",
]
