"""
Prototype Finder 모듈

문서 주석 바로 뒤의 코드에서 프로토타입(선언부)을 추출합니다.

- 주석 타입별 종결자(예: C 함수의 ";" 또는 "{") 가 괄호/문자열/주석 밖에서 처음 나오는 곳까지
- ";" 는 프로토타입에 포함, 그 외 종결자는 제외
- 괄호 밖의 닫는 괄호, 줄 맨 앞의 주석에서 중단
- 프로토타입 안의 주석은 제거하고 공백을 정리
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from commentdoc.languages import Language, PrototypeEnders
from commentdoc.symbols import SymbolString
from commentdoc.tokenization import CodeItemType, CodeScanner, condense_whitespace

logger = logging.getLogger(__name__)

MAX_PROTOTYPE_LINES = 100
INCLUDED_ENDERS = (";",)

_OPENING_BRACKETS = {"(": ")", "[": "]", "{": "}"}
_CLOSING_BRACKETS = {")", "]", "}"}


@dataclass
class FoundPrototype:
    """
    추출된 프로토타입

    Attributes:
        text: 주석 제거 및 공백 정리가 끝난 프로토타입
        line_number: 프로토타입이 시작하는 줄 번호 (1부터)
        end_offset: 검색 텍스트 안에서 프로토타입이 끝난 위치
        raw_text: 프로토타입 시작부터 검색 범위 끝까지의 원문 (열거형 본문 파싱용)
    """

    text: str
    line_number: int
    end_offset: int
    raw_text: str


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


class PrototypeFinder:
    """
    언어별 프로토타입 추출기

    주요 기능:
    1. 주석 뒤의 빈 줄 건너뛰기 (바로 다음이 주석이면 프로토타입 없음)
    2. 괄호 깊이와 문자열/주석을 고려한 종결자 탐색
    3. 단어 종결자(SQL 의 "AS", "IS") 는 대소문자 무시, 단어 경계에서만 인정
    4. 줄바꿈 종결자는 줄 연장 기호가 있거나 괄호 안이면 무시
    """

    def __init__(self, language: Language):
        self.language = language
        self.scanner = CodeScanner(language)

    def find(
        self,
        lines: List[str],
        start_index: int,
        enders: Optional[PrototypeEnders],
        title: Optional[str] = None,
    ) -> Optional[FoundPrototype]:
        """
        주석 뒤 코드에서 프로토타입을 찾습니다.

        Args:
            lines: 소스 파일 전체 줄 (탭 확장 완료)
            start_index: 주석 다음 줄의 0 기준 인덱스
            enders: 주석 타입의 종결자 (None 이거나 비어 있으면 프로토타입 없음)
            title: 토픽 제목. 주어지면 마지막 세그먼트가 프로토타입에 있어야 함

        Returns:
            Optional[FoundPrototype]: 찾지 못하면 None
        """
        if enders is None or enders.is_empty():
            return None

        index = start_index
        while index < len(lines) and not lines[index].strip():
            index += 1
        if index >= len(lines):
            return None

        text = "\n".join(lines[index:index + MAX_PROTOTYPE_LINES])
        items = self.scanner.scan(text)
        if items and items[0].type == CodeItemType.CODE and not items[0].text.strip() and len(items) > 1:
            first = items[1]
        else:
            first = items[0] if items else None
        if first is None or first.is_comment:
            return None

        end = self._find_end(text, items, enders)
        if end is None:
            logger.debug(f"{index + 1}번째 줄에서 프로토타입 종결자를 찾지 못했습니다")
            return None

        parts = []
        for item in items:
            if item.offset >= end:
                break
            piece = item.text[: end - item.offset]
            if item.is_comment:
                # 블록 주석은 공백으로, 줄 주석은 제거
                if item.type == CodeItemType.BLOCK_COMMENT:
                    parts.append(" ")
                continue
            parts.append(piece)

        joined = "".join(parts)
        if self.language.line_extender:
            joined = re.sub(re.escape(self.language.line_extender) + r"[ \t]*\n", " ", joined)
        prototype = condense_whitespace(joined).strip()
        if not prototype:
            return None

        if title and not self._contains_title(prototype, title):
            logger.debug(f"프로토타입에 제목이 없어 무시합니다: {title} / {prototype}")
            return None

        return FoundPrototype(prototype, index + 1, end, text)

    def _contains_title(self, prototype: str, title: str) -> bool:
        last = SymbolString.from_text(title).last_segment
        if not last:
            return False
        if self.language.case_sensitive:
            return last in prototype
        return last.lower() in prototype.lower()

    def _find_end(self, text: str, items, enders: PrototypeEnders) -> Optional[int]:
        """프로토타입이 끝나는 위치(제외)를 반환합니다."""
        symbol_enders = sorted(enders.symbols, key=len, reverse=True)
        depth_stack: List[str] = []

        for item in items:
            if item.is_comment:
                if not depth_stack and item.offset > 0 and self._starts_line(text, item.offset):
                    return item.offset
                continue
            if item.type == CodeItemType.STRING:
                continue

            position = item.offset
            while position < item.end:
                ch = text[position]

                if not depth_stack:
                    ender = self._match_ender(text, position, symbol_enders)
                    if ender is not None:
                        if ender in INCLUDED_ENDERS:
                            return position + len(ender)
                        return position

                    if ch == "\n" and enders.include_line_breaks:
                        if not self._is_extended(text, position):
                            return position

                if ch in _OPENING_BRACKETS:
                    depth_stack.append(_OPENING_BRACKETS[ch])
                elif ch in _CLOSING_BRACKETS:
                    if not depth_stack:
                        return position
                    if ch == depth_stack[-1]:
                        depth_stack.pop()

                position += 1

        if enders.include_line_breaks and not depth_stack:
            return len(text)
        return None

    def _match_ender(self, text: str, position: int, enders: List[str]) -> Optional[str]:
        for ender in enders:
            if _is_word_char(ender[0]):
                candidate = text[position:position + len(ender)]
                if candidate.lower() != ender.lower():
                    continue
                before = text[position - 1] if position > 0 else " "
                after = text[position + len(ender):position + len(ender) + 1] or " "
                if _is_word_char(before) or _is_word_char(after):
                    continue
                return ender
            if text.startswith(ender, position):
                return ender
        return None

    def _is_extended(self, text: str, newline_position: int) -> bool:
        extender = self.language.line_extender
        if not extender:
            return False
        line_start = text.rfind("\n", 0, newline_position) + 1
        return text[line_start:newline_position].rstrip().endswith(extender)

    @staticmethod
    def _starts_line(text: str, offset: int) -> bool:
        line_start = text.rfind("\n", 0, offset) + 1
        return not text[line_start:offset].strip()
