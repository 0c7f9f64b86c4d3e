"""
Prototype 데이터 모델

프로토타입 파서가 만들어 내는 구조화된 프로토타입과 파라미터 정보입니다.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class ParameterStyle(Enum):
    """파라미터 표기 스타일"""

    C = "c"  # int x = 12
    PASCAL = "pascal"  # x: integer = 12


class ColumnType(Enum):
    """파라미터 셀 컬럼 종류"""

    MODIFIER = "modifier"
    TYPE = "type"
    SYMBOLS = "symbols"
    NAME = "name"
    TYPE_NAME_SEPARATOR = "type_name_separator"
    DEFAULT_VALUE_SEPARATOR = "default_value_separator"
    DEFAULT_VALUE = "default_value"


# 스타일별 컬럼 순서
C_COLUMN_ORDER = [
    ColumnType.MODIFIER,
    ColumnType.TYPE,
    ColumnType.SYMBOLS,
    ColumnType.NAME,
    ColumnType.DEFAULT_VALUE_SEPARATOR,
    ColumnType.DEFAULT_VALUE,
]

PASCAL_COLUMN_ORDER = [
    ColumnType.MODIFIER,
    ColumnType.NAME,
    ColumnType.TYPE_NAME_SEPARATOR,
    ColumnType.SYMBOLS,
    ColumnType.TYPE,
    ColumnType.DEFAULT_VALUE_SEPARATOR,
    ColumnType.DEFAULT_VALUE,
]


def column_order(style: ParameterStyle) -> List[ColumnType]:
    return C_COLUMN_ORDER if style == ParameterStyle.C else PASCAL_COLUMN_ORDER


@dataclass
class Parameter:
    """
    파라미터 하나

    Attributes:
        text: 정규화된 파라미터 원문 (예: "int b = 12")
        cells: 컬럼별 내용 (비어 있는 컬럼은 포함하지 않음)
    """

    text: str
    cells: Dict[ColumnType, str] = field(default_factory=dict)

    def get(self, column: ColumnType) -> str:
        return self.cells.get(column, "")

    @property
    def name(self) -> str:
        return self.get(ColumnType.NAME)

    @property
    def type(self) -> str:
        return self.get(ColumnType.TYPE)

    @property
    def default_value(self) -> str:
        return self.get(ColumnType.DEFAULT_VALUE)

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "cells": {column.value: value for column, value in self.cells.items()},
        }


@dataclass
class ParsedPrototype:
    """
    구조화된 프로토타입

    Attributes:
        text: 공백이 정리된 전체 프로토타입
        style: 파라미터 스타일
        before_parameters: 여는 괄호 이전 부분 (여는 괄호 포함)
        parameters: 파라미터 목록
        after_parameters: 닫는 괄호 이후 부분 (닫는 괄호 포함)
        opening_symbol: 파라미터 목록을 여는 기호 (없으면 None)
        closing_symbol: 파라미터 목록을 닫는 기호 (없으면 None)
        parameter_separator: 파라미터 구분자 (렌더링 시 사용)
    """

    text: str
    style: ParameterStyle = ParameterStyle.C
    before_parameters: str = ""
    parameters: List[Parameter] = field(default_factory=list)
    after_parameters: str = ""
    opening_symbol: Optional[str] = None
    closing_symbol: Optional[str] = None
    parameter_separator: str = ","

    @property
    def has_parameter_list(self) -> bool:
        return self.opening_symbol is not None

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "style": self.style.value,
            "before_parameters": self.before_parameters,
            "parameters": [p.to_dict() for p in self.parameters],
            "after_parameters": self.after_parameters,
        }
