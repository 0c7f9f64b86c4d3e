"""
Comment Finder 모듈

소스 줄 목록에서 문서화 후보 주석을 찾습니다. 주석은 줄의 맨 앞(공백 제외)에서
시작해야 하며, 줄 주석은 같은 기호로 시작하는 연속된 줄을 하나로 묶습니다.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from commentdoc.languages.language import Language

logger = logging.getLogger(__name__)

PLAIN = "plain"
JAVADOC = "javadoc"
XML = "xml"


@dataclass
class PossibleComment:
    """
    문서화 후보 주석

    Attributes:
        start_line: 주석 시작 줄 번호 (1부터)
        end_line: 주석 마지막 줄 번호
        lines: 주석 기호를 공백으로 치환한 내용 줄
        kind: plain / javadoc / xml
        symbol: 주석을 연 기호
        is_block: 블록 주석 여부
    """

    start_line: int
    end_line: int
    lines: List[str] = field(default_factory=list)
    kind: str = PLAIN
    symbol: str = ""
    is_block: bool = False


class CommentFinder:
    """
    문서화 후보 주석 탐색기

    주요 기능:
    1. 블록 주석 탐색 (Javadoc "/** */" 포함, "/**/" 는 일반 주석)
    2. 같은 기호의 연속 줄 주석 병합
    3. Javadoc 줄 주석 ("##" 다음 "#") 및 XML 주석 ("///") 구분
    4. 줄 번호 보존
    """

    def __init__(self, language: Language):
        self.language = language

        blocks: List[Tuple[str, str, str]] = []
        for opener, closer in language.javadoc_block_comments:
            blocks.append((opener, closer, JAVADOC))
        for opener, closer in language.block_comments:
            blocks.append((opener, closer, PLAIN))
        self._blocks = sorted(blocks, key=lambda b: len(b[0]), reverse=True)

        # (첫 줄 기호, 이후 줄 기호, 종류)
        singles: List[Tuple[str, str, str]] = []
        for symbol in language.xml_line_comments:
            singles.append((symbol, symbol, XML))
        for first, rest in language.javadoc_line_comments:
            singles.append((first, rest, JAVADOC))
        for symbol in language.line_comments:
            singles.append((symbol, symbol, PLAIN))
        self._line_symbols = sorted(singles, key=lambda s: len(s[0]), reverse=True)

    def find(self, lines: List[str]) -> List[PossibleComment]:
        """
        주석을 찾습니다.

        Args:
            lines: 탭이 확장된 소스 줄 목록 (줄바꿈 제외)

        Returns:
            List[PossibleComment]: 등장 순서대로의 후보 주석 목록
        """
        if self.language.whole_file_comment:
            if not any(line.strip() for line in lines):
                return []
            return [PossibleComment(1, len(lines), list(lines), PLAIN, "", True)]

        comments: List[PossibleComment] = []
        index = 0
        while index < len(lines):
            stripped = lines[index].lstrip()
            if not stripped:
                index += 1
                continue

            comment = self._match_block(lines, index) or self._match_line_run(lines, index)
            if comment is None:
                index += 1
                continue

            comments.append(comment)
            index = comment.end_line  # end_line 은 1부터이므로 다음 줄의 0 기준 인덱스

        return comments

    def _match_block(self, lines: List[str], index: int) -> Optional[PossibleComment]:
        line = lines[index]
        stripped = line.lstrip()
        indent = len(line) - len(stripped)

        for opener, closer, kind in self._blocks:
            if not stripped.startswith(opener):
                continue

            after = stripped[len(opener):]
            if kind == JAVADOC:
                # "/**/" 는 빈 일반 주석, "/***" 는 장식이므로 Javadoc 이 아님
                if after[:1] in (opener[-1], "/"):
                    continue

            first = " " * (indent + len(opener)) + after
            close_at = after.find(closer)
            if close_at != -1:
                content = [first[: indent + len(opener) + close_at]]
                return PossibleComment(index + 1, index + 1, content, kind, opener, True)

            content = [first]
            end = index + 1
            while end < len(lines):
                close_at = lines[end].find(closer)
                if close_at != -1:
                    content.append(lines[end][:close_at])
                    return PossibleComment(index + 1, end + 1, content, kind, opener, True)
                content.append(lines[end])
                end += 1

            logger.debug(f"닫히지 않은 블록 주석: {index + 1}번째 줄")
            return PossibleComment(index + 1, len(lines), content, kind, opener, True)

        return None

    def _classify_line(self, stripped: str) -> Optional[Tuple[str, str, str]]:
        for first, rest, kind in self._line_symbols:
            if not stripped.startswith(first):
                continue
            if kind != PLAIN:
                # "////" 나 "###" 는 장식이므로 XML/Javadoc 이 아님
                following = stripped[len(first):len(first) + 1]
                if following and following == first[-1]:
                    continue
            return first, rest, kind
        return None

    def _match_line_run(self, lines: List[str], index: int) -> Optional[PossibleComment]:
        stripped = lines[index].lstrip()
        classified = self._classify_line(stripped)
        if classified is None:
            return None

        first, rest, kind = classified
        content = [self._blank_symbol(lines[index], first)]
        end = index + 1
        while end < len(lines):
            next_stripped = lines[end].lstrip()
            if not next_stripped.startswith(rest):
                break
            next_classified = self._classify_line(next_stripped)
            if kind == JAVADOC:
                # 새 Javadoc 줄 주석의 시작이면 중단
                if next_classified is not None and next_classified[2] == JAVADOC:
                    break
            elif next_classified is None or next_classified[0] != first:
                break
            content.append(self._blank_symbol(lines[end], rest))
            end += 1

        return PossibleComment(index + 1, end, content, kind, first, False)

    @staticmethod
    def _blank_symbol(line: str, symbol: str) -> str:
        stripped = line.lstrip()
        indent = len(line) - len(stripped)
        return " " * (indent + len(symbol)) + stripped[len(symbol):]
