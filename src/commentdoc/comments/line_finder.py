"""
Line Finder 모듈

주석 기호를 제거한 주석 줄에서 장식(수평선, 좌우 세로선 기호)을 찾아 제거하고,
내용의 상대 들여쓰기를 정리합니다.

예:
    > /*
    >  * Function: Foo
    >  * ----------------
    >  * Text
    >  */

위 주석은 "Function: Foo", "", "Text" 로 정리됩니다.
"""

from typing import List, Optional, Tuple

MAX_EDGE_SYMBOLS = 3


def _is_symbol(ch: str) -> bool:
    return not ch.isalnum() and not ch.isspace() and ch != "_"


def _symbol_runs(text: str) -> Optional[List[Tuple[str, int]]]:
    """
    텍스트 전체가 기호 연속 구간으로만 이루어져 있으면 (기호, 개수) 목록을 반환합니다.

    수평선 판별용이므로 "_" 도 기호로 취급합니다 ("________").
    """
    runs: List[Tuple[str, int]] = []
    for ch in text:
        if not (_is_symbol(ch) or ch == "_"):
            return None
        if runs and runs[-1][0] == ch:
            runs[-1] = (ch, runs[-1][1] + 1)
        else:
            runs.append((ch, 1))
    return runs


def is_horizontal_line(line: str) -> bool:
    """
    수평선 여부를 확인합니다.

    한 줄 전체가 최대 세 개의 기호 연속 구간으로 이루어지고, 그중 하나가 4개 이상이어야
    합니다 (예: "----", "=====", "____", "+-----+").

    Args:
        line: 주석 기호를 제거한 줄

    Returns:
        bool: 수평선이면 True
    """
    runs = _symbol_runs(line.strip())
    if not runs or len(runs) > 3:
        return False

    counts = [count for _, count in runs] + [0, 0]
    a, b, c = counts[0], counts[1], counts[2]
    if a >= 4 and (b == 0 or (b <= 3 and c == 0)):
        return True
    if a <= 3 and b >= 4 and c <= 3:
        return True
    return False


def _edge_symbols(line: str) -> Tuple[str, str, bool]:
    """
    줄 양끝의 세로선 기호를 찾습니다.

    Returns:
        Tuple[str, str, bool]: (왼쪽 기호열, 오른쪽 기호열, 기호만 있는 줄 여부)
    """
    content = line.strip()
    left = ""
    index = 0
    while index < len(content) and _is_symbol(content[index]) and (not left or content[index] == left[0]):
        left += content[index]
        index += 1

    rest = content[index:]
    if not rest:
        return (left if len(left) <= MAX_EDGE_SYMBOLS else "", "", True)
    if left and (not rest[0].isspace() or len(left) > MAX_EDGE_SYMBOLS):
        left = ""
        rest = content

    right = ""
    end = len(rest)
    while end > 0 and _is_symbol(rest[end - 1]) and (not right or rest[end - 1] == right[0]):
        right += rest[end - 1]
        end -= 1

    if right and (end == 0 or not rest[end - 1].isspace() or len(right) > MAX_EDGE_SYMBOLS):
        right = ""

    return left, right, False


class LineFinder:
    """
    주석 장식 제거기

    주요 기능:
    1. 수평선을 빈 줄로 변환 (코드 블록 판별 전이므로 선택적)
    2. 모든 줄에 공통된 왼쪽/오른쪽 세로선 기호 제거 (첫 줄은 예외 허용)
    3. 공통 들여쓰기 제거
    """

    @staticmethod
    def clean(
        lines: List[str], remove_horizontal_lines: bool = False, trim_blank_lines: bool = True
    ) -> List[str]:
        """
        주석 줄을 정리합니다.

        Args:
            lines: 주석 기호가 공백으로 치환된 주석 줄 목록 (탭 확장 완료)
            remove_horizontal_lines: True이면 수평선을 빈 줄로 바꿈
            trim_blank_lines: False이면 앞뒤 빈 줄을 남겨 줄 번호를 유지

        Returns:
            List[str]: 정리된 줄 목록
        """
        lines = [line.rstrip() for line in lines]
        lines = LineFinder._strip_vertical_lines(lines)

        if remove_horizontal_lines:
            lines = ["" if is_horizontal_line(line) else line for line in lines]

        if trim_blank_lines:
            while lines and not lines[0].strip():
                lines.pop(0)
            while lines and not lines[-1].strip():
                lines.pop()

        indents = [len(line) - len(line.lstrip()) for line in lines if line.strip()]
        if indents:
            common = min(indents)
            lines = [line[common:] if line.strip() else "" for line in lines]
        return lines

    @staticmethod
    def _strip_vertical_lines(lines: List[str]) -> List[str]:
        candidates = [
            index
            for index, line in enumerate(lines)
            if line.strip() and not is_horizontal_line(line)
        ]
        if not candidates:
            return lines

        # "/** text" 처럼 첫 줄만 다른 형태를 허용
        checked = candidates
        if len(candidates) > 1 and candidates[0] == 0:
            checked = candidates[1:]

        left = right = None
        for index in checked:
            line_left, line_right, alone = _edge_symbols(lines[index])
            if alone:
                # 기호만 있는 줄은 왼쪽 또는 오른쪽 어느 쪽과 일치해도 됨
                if left is None and right is None:
                    left = line_left
                    continue
                if line_left in (left, right):
                    continue
                return lines
            if left is None:
                left, right = line_left, line_right
                continue
            if line_left != left:
                left = ""
            if right is None:
                right = line_right
            elif line_right != right:
                right = ""
            if not left and not right:
                return lines

        left = left or ""
        right = right or ""
        # 모든 줄이 글머리 기호 목록인 경우와 구분
        if left in ("-", "+"):
            left = ""
        if not left and not right:
            return lines

        result = list(lines)
        for index in candidates:
            result[index] = LineFinder._strip_edges(result[index], left, right)
        return result

    @staticmethod
    def _strip_edges(line: str, left: str, right: str) -> str:
        stripped = line.lstrip()
        indent = len(line) - len(stripped)
        if left and stripped.startswith(left):
            # 기호 자리를 공백으로 바꿔 상대 들여쓰기 유지
            line = line[:indent] + " " * len(left) + stripped[len(left):]
        if right and line.rstrip().endswith(right):
            line = line.rstrip()[: -len(right)].rstrip()
        return line
