"""
Prototype Layout 모듈

구조화된 프로토타입을 파라미터별 행, 컬럼별 셀로 배치합니다.

    void SimpleA (int a,
                  int b= 12)

간격 규칙:
- 파라미터 구분자(",") 는 행의 마지막 셀에 붙음
- 기본값 구분자 앞 공백은 어떤 행에서도 구분자가 앞 셀에 닿지 않으면 생략
  (모든 행에 같은 규칙 적용, 원문의 공백과 무관)
- "DEFAULT", "AS" 같은 단어 구분자는 항상 양쪽 공백 유지
- 기호 타입/이름 구분자(":") 는 앞 공백 없음
"""

from dataclasses import dataclass, field
from typing import Dict, List

from commentdoc.models import ColumnType, ParameterStyle, ParsedPrototype, column_order


def _is_word(separator: str) -> bool:
    return bool(separator) and (separator[0].isalnum() or separator[0] == "_")


@dataclass
class PrototypeLayout:
    """
    배치된 프로토타입

    Attributes:
        before_parameters: 파라미터 목록 앞 부분 (여는 괄호 포함)
        after_parameters: 파라미터 목록 뒤 부분 (닫는 괄호 포함)
        columns: 한 행 이상에 내용이 있는 컬럼 (컬럼 순서)
        cells: 행별, 컬럼별 셀 텍스트 (간격 포함)
    """

    before_parameters: str
    after_parameters: str = ""
    columns: List[ColumnType] = field(default_factory=list)
    cells: List[Dict[ColumnType, str]] = field(default_factory=list)

    @classmethod
    def build(cls, prototype: ParsedPrototype) -> "PrototypeLayout":
        """
        ParsedPrototype 으로 배치를 만듭니다.

        Args:
            prototype: PrototypeParser 결과

        Returns:
            PrototypeLayout: 파라미터 목록이 없으면 행이 없는 배치
        """
        if not prototype.has_parameter_list or not prototype.parameters:
            text = prototype.text if not prototype.has_parameter_list else (
                prototype.before_parameters + prototype.after_parameters
            )
            return cls(before_parameters=text)

        order = column_order(prototype.style)
        rows: List[Dict[ColumnType, str]] = []
        for index, parameter in enumerate(prototype.parameters):
            is_last = index == len(prototype.parameters) - 1
            rows.append(
                cls._row_cells(parameter.cells, order, prototype.style, prototype.parameter_separator, is_last)
            )

        cls._apply_default_value_spacing(rows, order)

        columns = [column for column in order if any(row.get(column) for row in rows)]
        return cls(
            before_parameters=prototype.before_parameters,
            after_parameters=prototype.after_parameters,
            columns=columns,
            cells=rows,
        )

    @staticmethod
    def _row_cells(
        source: Dict[ColumnType, str],
        order: List[ColumnType],
        style: ParameterStyle,
        separator: str,
        is_last: bool,
    ) -> Dict[ColumnType, str]:
        cells: Dict[ColumnType, str] = {}
        present = [column for column in order if source.get(column)]

        for column in present:
            text = source[column]
            later = present[present.index(column) + 1:]

            if column == ColumnType.MODIFIER:
                text += " "
            elif column == ColumnType.TYPE and style == ParameterStyle.C:
                if ColumnType.SYMBOLS in later or ColumnType.NAME in later:
                    text += " "
            elif column == ColumnType.NAME and style == ParameterStyle.PASCAL:
                if ColumnType.TYPE_NAME_SEPARATOR not in later and (
                    ColumnType.TYPE in later or ColumnType.SYMBOLS in later
                ):
                    text += " "
            elif column == ColumnType.TYPE_NAME_SEPARATOR:
                text = f" {text} " if _is_word(text) else f"{text} "
            elif column == ColumnType.DEFAULT_VALUE_SEPARATOR:
                # 앞 공백은 _apply_default_value_spacing 에서 결정
                text = f"{text} " if ColumnType.DEFAULT_VALUE in later else text

            cells[column] = text

        if not is_last and present:
            last = present[-1]
            cells[last] = cells[last].rstrip() + separator
        return cells

    @staticmethod
    def _apply_default_value_spacing(rows: List[Dict[ColumnType, str]], order: List[ColumnType]):
        dvs = ColumnType.DEFAULT_VALUE_SEPARATOR
        before_columns = order[: order.index(dvs)]
        widths = {column: max(len(row.get(column, "")) for row in rows) for column in before_columns}

        retain = False
        for row in rows:
            separator = row.get(dvs)
            if not separator:
                continue
            if _is_word(separator.strip()):
                retain = True
                break
            filled = [column for column in before_columns if row.get(column)]
            if not filled:
                continue
            previous = filled[-1]
            gap_columns = before_columns[before_columns.index(previous) + 1:]
            if len(row[previous]) >= widths[previous] and not any(widths[c] for c in gap_columns):
                retain = True
                break

        for row in rows:
            separator = row.get(dvs)
            if separator and (retain or _is_word(separator.strip())):
                row[dvs] = " " + separator

    # ------------------------------------------------------------------
    # 출력
    # ------------------------------------------------------------------

    @property
    def has_parameters(self) -> bool:
        return bool(self.cells)

    def widths(self) -> List[int]:
        return [max(len(row.get(column, "")) for row in self.cells) for column in self.columns]

    def rows(self) -> List[List[str]]:
        """HTML 표 출력을 위한 행별 셀 텍스트 (self.columns 순서)"""
        return [[row.get(column, "") for column in self.columns] for row in self.cells]

    def render_text(self) -> str:
        """
        컬럼을 정렬한 일반 텍스트 프로토타입을 만듭니다.

        Returns:
            str: 파라미터가 여러 개면 여러 줄 텍스트
        """
        if not self.cells:
            return self.before_parameters

        widths = self.widths()
        indent = " " * len(self.before_parameters)
        lines = []
        for index, row in enumerate(self.rows()):
            text = "".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip()
            prefix = self.before_parameters if index == 0 else indent
            lines.append(prefix + text)
        lines[-1] += self.after_parameters
        return "\n".join(lines)
