"""
Syntax Highlighter 모듈

코드 블록과 프로토타입을 (종류, 텍스트) 조각으로 나눕니다.
주석은 해당 언어의 주석 기호로 쓴 것만 주석으로 취급합니다.
"""

import re
from typing import List, Optional, Tuple

from commentdoc.languages import Language
from commentdoc.tokenization import CodeItemType, CodeScanner, Tokenizer, TokenType

COMMENT = "comment"
STRING = "string"
NUMBER = "number"
KEYWORD = "keyword"
TEXT = "text"

_NUMBER = re.compile(r"(?:0[xX][0-9a-fA-F]+|\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)[uUlLfFdD]*(?![\w$])")


class SyntaxHighlighter:
    """
    간단한 구문 강조기

    주요 기능:
    1. 주석/문자열 구간 분리 (CodeScanner)
    2. 코드 구간을 Tokenizer 로 나눠 숫자와 키워드 표시
    3. 인접한 같은 종류 조각 병합
    """

    def highlight(self, code: str, language: Optional[Language]) -> List[Tuple[str, str]]:
        """
        코드를 강조 조각으로 나눕니다.

        Args:
            code: 강조할 코드
            language: 코드 언어 (None이면 전체가 text)

        Returns:
            List[Tuple[str, str]]: (comment | string | number | keyword | text, 텍스트) 목록
        """
        if language is None or not code:
            return [(TEXT, code)] if code else []

        keywords = language.keyword_set()
        pieces: List[Tuple[str, str]] = []
        for item in CodeScanner(language).scan(code):
            if item.is_comment:
                self._append(pieces, COMMENT, item.text)
            elif item.type == CodeItemType.STRING:
                self._append(pieces, STRING, item.text)
            else:
                self._highlight_code(item.text, keywords, language, pieces)
        return pieces

    def _highlight_code(self, text: str, keywords, language: Language, pieces: List[Tuple[str, str]]):
        end = 0
        for token in Tokenizer.tokenize(text):
            # 숫자로 묶여 이미 출력된 토큰
            if token.offset < end:
                continue
            end = token.end
            kind = TEXT
            if token.type == TokenType.TEXT:
                number = _NUMBER.match(text, token.offset) if token.text[0].isdigit() else None
                if number and not text[:token.offset].endswith("$"):
                    kind, end = NUMBER, number.end()
                elif language.normalize_case(token.text) in keywords:
                    kind = KEYWORD
            self._append(pieces, kind, text[token.offset:end])

    @staticmethod
    def _append(pieces: List[Tuple[str, str]], kind: str, text: str):
        if not text:
            return
        if pieces and pieces[-1][0] == kind and kind in (TEXT, COMMENT):
            pieces[-1] = (kind, pieces[-1][1] + text)
        else:
            pieces.append((kind, text))
