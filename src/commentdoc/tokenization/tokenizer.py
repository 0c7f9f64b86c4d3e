"""
Tokenizer 모듈

텍스트를 텍스트/공백/줄바꿈/기호 토큰으로 분리하는 단순 토크나이저입니다.
프로토타입 파싱, 주석 본문 파싱, 구문 강조에서 공통으로 사용됩니다.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List


class TokenType(Enum):
    """토큰의 기본 타입"""

    TEXT = "text"
    WHITESPACE = "whitespace"
    LINE_BREAK = "line_break"
    SYMBOL = "symbol"


@dataclass(frozen=True)
class Token:
    """
    토큰 데이터 모델

    Attributes:
        type: 토큰 타입
        text: 토큰 원문
        offset: 원본 텍스트에서의 시작 위치
    """

    type: TokenType
    text: str
    offset: int

    @property
    def end(self) -> int:
        return self.offset + len(self.text)

    def is_symbol(self, symbol: str) -> bool:
        return self.type == TokenType.SYMBOL and self.text == symbol


_TOKEN_PATTERN = re.compile(
    r"(?P<line_break>\r\n|\n|\r)|(?P<whitespace>[ \t\f\v]+)|(?P<text>\w+)|(?P<symbol>.)",
    re.UNICODE | re.DOTALL,
)

_WHITESPACE_RUN = re.compile(r"\s+")


class Tokenizer:
    """
    텍스트 토크나이저

    - 문자/숫자/밑줄 연속은 TEXT 토큰 하나
    - 공백/탭 연속은 WHITESPACE 토큰 하나
    - 줄바꿈은 각각 LINE_BREAK 토큰
    - 그 외 문자는 한 글자씩 SYMBOL 토큰
    """

    @staticmethod
    def tokenize(text: str) -> List[Token]:
        """
        텍스트를 토큰 목록으로 변환

        Args:
            text: 토큰화할 텍스트

        Returns:
            List[Token]: 토큰 목록 (빈 문자열이면 빈 리스트)
        """
        tokens = []
        for match in _TOKEN_PATTERN.finditer(text):
            kind = match.lastgroup
            tokens.append(Token(TokenType(kind), match.group(), match.start()))
        return tokens


def condense_whitespace(text: str) -> str:
    """연속된 공백 문자를 공백 하나로 줄이고 양끝 공백을 제거합니다."""
    return _WHITESPACE_RUN.sub(" ", text).strip()


def expand_tabs(line: str, tab_width: int = 4) -> str:
    """탭 문자를 tab_width 기준 탭 정지 위치까지 공백으로 확장합니다."""
    if "\t" not in line:
        return line
    return line.expandtabs(tab_width)
