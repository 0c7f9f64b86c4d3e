"""
Code Scanner 모듈

언어 정의의 주석 기호와 문자열 규칙에 따라 소스 텍스트를 코드/문자열/주석
구간으로 나눕니다. 프로토타입 추출, 열거형 본문 파싱, 구문 강조가 공통으로 사용합니다.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from commentdoc.languages.language import Language


class CodeItemType(Enum):
    CODE = "code"
    STRING = "string"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"


@dataclass(frozen=True)
class CodeItem:
    """
    스캔 결과 구간

    Attributes:
        type: 구간 종류
        text: 구간 원문 (주석은 기호 포함, 줄 주석은 줄바꿈 제외)
        offset: 원본 텍스트에서의 시작 위치
        symbol: 주석을 연 기호 (주석이 아니면 None)
    """

    type: CodeItemType
    text: str
    offset: int
    symbol: Optional[str] = None

    @property
    def end(self) -> int:
        return self.offset + len(self.text)

    @property
    def is_comment(self) -> bool:
        return self.type in (CodeItemType.LINE_COMMENT, CodeItemType.BLOCK_COMMENT)


class CodeScanner:
    """
    언어별 코드 스캐너

    - 주석 기호는 가장 긴 것이 우선 ("///" 가 "//" 보다 먼저)
    - 문자열은 이스케이프 문자와 두 번 연속 따옴표를 처리
    - 축자 문자열(@"...")과 원시 문자열(\"\"\"...\"\"\")은 언어 정의에 따라 처리
    """

    def __init__(self, language: Language):
        self.language = language

        block_pairs: List[Tuple[str, str]] = []
        for opener, closer in list(language.javadoc_block_comments) + list(language.block_comments):
            if (opener, closer) not in block_pairs:
                block_pairs.append((opener, closer))
        self._block_pairs = sorted(block_pairs, key=lambda p: len(p[0]), reverse=True)

        line_symbols = set(language.line_comments) | set(language.xml_line_comments)
        for first, rest in language.javadoc_line_comments:
            line_symbols.add(first)
            line_symbols.add(rest)
        self._line_symbols = sorted(line_symbols, key=len, reverse=True)

    def scan(self, text: str) -> List[CodeItem]:
        """
        텍스트를 구간 목록으로 변환합니다.

        Args:
            text: 스캔할 소스 텍스트

        Returns:
            List[CodeItem]: 원문 순서대로의 구간 목록 (모든 구간을 이으면 원문과 같음)
        """
        items: List[CodeItem] = []
        length = len(text)
        code_start = 0
        index = 0

        while index < length:
            item = self._match_comment(text, index) or self._match_string(text, index)
            if item is None:
                index += 1
                continue

            if code_start < index:
                items.append(CodeItem(CodeItemType.CODE, text[code_start:index], code_start))
            items.append(item)
            index = item.end
            code_start = index

        if code_start < length:
            items.append(CodeItem(CodeItemType.CODE, text[code_start:], code_start))
        return items

    def _match_comment(self, text: str, index: int) -> Optional[CodeItem]:
        best_block = None
        for opener, closer in self._block_pairs:
            if text.startswith(opener, index):
                best_block = (opener, closer)
                break

        best_line = None
        for symbol in self._line_symbols:
            if text.startswith(symbol, index):
                best_line = symbol
                break

        if best_block and (best_line is None or len(best_block[0]) >= len(best_line)):
            opener, closer = best_block
            # "/**/" 처럼 긴 여는 기호와 닫는 기호가 겹치는 경우를 위해 가장 짧은 여는 기호 뒤부터 검색
            search_from = index + min(
                len(o) for o, c in self._block_pairs if c == closer and text.startswith(o, index)
            )
            close_index = text.find(closer, search_from)
            end = len(text) if close_index == -1 else close_index + len(closer)
            return CodeItem(CodeItemType.BLOCK_COMMENT, text[index:end], index, opener)

        if best_line:
            end = index
            while end < len(text) and text[end] not in "\r\n":
                end += 1
            return CodeItem(CodeItemType.LINE_COMMENT, text[index:end], index, best_line)

        return None

    def _match_string(self, text: str, index: int) -> Optional[CodeItem]:
        quotes = self.language.string_quotes
        if not quotes:
            return None

        prefix = self.language.verbatim_string_prefix
        if prefix and text.startswith(prefix, index):
            quote_index = index + len(prefix)
            # C# 의 @$"..." 형태
            if quote_index < len(text) and text[quote_index] == "$":
                quote_index += 1
            if quote_index < len(text) and text[quote_index] in quotes:
                end = self._find_string_end(text, quote_index, text[quote_index], verbatim=True)
                return CodeItem(CodeItemType.STRING, text[index:end], index)
            return None

        quote = text[index]
        if quote not in quotes:
            return None

        if self.language.raw_strings and text.startswith(quote * 3, index):
            run = 3
            while text.startswith(quote, index + run):
                run += 1
            close_index = text.find(quote * run, index + run)
            end = len(text) if close_index == -1 else close_index + run
            return CodeItem(CodeItemType.STRING, text[index:end], index)

        end = self._find_string_end(text, index, quote, verbatim=False)
        return CodeItem(CodeItemType.STRING, text[index:end], index)

    def _find_string_end(self, text: str, quote_index: int, quote: str, verbatim: bool) -> int:
        escape = None if verbatim else self.language.escape_character
        doubled_quotes = verbatim or escape is None
        index = quote_index + 1
        length = len(text)

        while index < length:
            ch = text[index]
            if escape and ch == escape:
                index += 2
                continue
            if ch == quote:
                if doubled_quotes and index + 1 < length and text[index + 1] == quote:
                    index += 2
                    continue
                return index + 1
            # 일반 문자열은 줄바꿈에서 끝난 것으로 취급
            if ch in "\r\n" and not verbatim:
                return index
            index += 1

        return length


def remove_comments(items: List[CodeItem]) -> str:
    """
    구간 목록에서 주석을 제거한 텍스트를 만듭니다.

    블록 주석은 공백 하나로, 줄 주석은 빈 문자열로 바뀝니다.
    """
    parts = []
    for item in items:
        if item.type == CodeItemType.BLOCK_COMMENT:
            parts.append(" ")
        elif item.type == CodeItemType.LINE_COMMENT:
            continue
        else:
            parts.append(item.text)
    return "".join(parts)


def line_number_at(text: str, offset: int, first_line: int = 1) -> int:
    """offset 위치의 줄 번호를 반환합니다."""
    return first_line + text.count("\n", 0, offset)
