"""
Enum Parser 모듈

열거형 프로토타입 뒤의 "{ ... }" 본문에서 값 이름, 값, 같은 줄 주석 설명을 읽습니다.

    enum Color {
        Red,        // 빨강
        Green = 2,  /* 초록 */
        Blue        // 파랑
                    // (이어지는 설명)
    };
"""

import logging
import re
from typing import Dict, List, Optional, Tuple

from commentdoc.comments import LineFinder
from commentdoc.languages import Language
from commentdoc.models import EnumValue
from commentdoc.tokenization import CodeItem, CodeItemType, CodeScanner, condense_whitespace, line_number_at

logger = logging.getLogger(__name__)

_NAME = re.compile(r"[A-Za-z_$@][\w$]*")
_OPENERS = {"(": ")", "[": "]", "{": "}"}


class _Entry:
    """본문에서 쉼표로 나뉜 항목 하나"""

    def __init__(self, start: int, end: int):
        self.start = start
        self.end = end
        self.value: Optional[EnumValue] = None


class EnumParser:
    """
    열거형 본문 파서

    주요 기능:
    1. 값 이름과 명시적 값 추출 (속성 [Attr], 빈 항목 ",," 허용)
    2. 같은 줄 주석을 설명으로 사용 (쉼표 뒤 주석은 방금 끝난 값의 설명)
    3. 같은 계열 줄 주석이 다음 줄에 이어지면 설명을 이어 붙임
    4. 식 안의 주석, 독립된 줄의 주석은 무시
    5. 중복된 이름은 첫 번째만 사용
    """

    def __init__(self, language: Language):
        self.language = language
        self.scanner = CodeScanner(language)
        self._block_closers: Dict[str, str] = {
            opener: closer
            for opener, closer in list(language.javadoc_block_comments) + list(language.block_comments)
        }

    def parse(self, text: str, first_line_number: int = 1) -> List[EnumValue]:
        """
        열거형 선언 텍스트에서 값을 읽습니다.

        Args:
            text: 열거형 선언부터 시작하는 코드 (본문 "{ }" 포함)
            first_line_number: text 첫 줄의 소스 줄 번호

        Returns:
            List[EnumValue]: 코드 순서대로의 값 목록 (본문이 없으면 빈 목록)
        """
        items = self.scanner.scan(text)
        code_text, structure = self._mask(text, items)

        open_index = self._find_body_start(structure)
        if open_index is None:
            return []
        close_index = self._find_body_end(structure, open_index)

        entries = self._split_entries(structure, open_index, close_index)
        values: List[EnumValue] = []
        seen = set()
        for entry in entries:
            value = self._read_entry(code_text, structure, entry, text, first_line_number)
            if value is None:
                continue
            key = self.language.normalize_case(value.name)
            if key in seen:
                logger.debug(f"중복된 열거형 값은 무시합니다: {value.name}")
                continue
            seen.add(key)
            entry.value = value
            values.append(value)

        self._assign_descriptions(text, items, structure, entries, open_index, close_index)
        return values

    # ------------------------------------------------------------------
    # 구조
    # ------------------------------------------------------------------

    @staticmethod
    def _mask(text: str, items: List[CodeItem]) -> Tuple[str, str]:
        """
        (주석을 공백으로 바꾼 텍스트, 주석과 문자열 내용을 모두 가린 구조 텍스트) 를 만듭니다.
        줄바꿈과 위치는 원문과 같게 유지됩니다.
        """
        code_parts = []
        structure_parts = []
        for item in items:
            if item.is_comment:
                blanked = "".join("\n" if ch == "\n" else " " for ch in item.text)
                code_parts.append(blanked)
                structure_parts.append(blanked)
            elif item.type == CodeItemType.STRING:
                code_parts.append(item.text)
                structure_parts.append("".join("\n" if ch == "\n" else "_" for ch in item.text))
            else:
                code_parts.append(item.text)
                structure_parts.append(item.text)
        return "".join(code_parts), "".join(structure_parts)

    @staticmethod
    def _find_body_start(structure: str) -> Optional[int]:
        depth = 0
        for index, ch in enumerate(structure):
            if ch == "{" and depth == 0:
                return index
            if ch in "([":
                depth += 1
            elif ch in ")]":
                depth = max(0, depth - 1)
            elif ch == ";" and depth == 0:
                return None
        return None

    @staticmethod
    def _find_body_end(structure: str, open_index: int) -> int:
        stack = ["}"]
        for index in range(open_index + 1, len(structure)):
            ch = structure[index]
            if ch in _OPENERS:
                stack.append(_OPENERS[ch])
            elif stack and ch == stack[-1]:
                stack.pop()
                if not stack:
                    return index
        return len(structure)

    @staticmethod
    def _split_entries(structure: str, open_index: int, close_index: int) -> List[_Entry]:
        entries: List[_Entry] = []
        stack: List[str] = []
        start = open_index + 1
        for index in range(open_index + 1, close_index):
            ch = structure[index]
            if ch in _OPENERS:
                stack.append(_OPENERS[ch])
            elif stack and ch == stack[-1]:
                stack.pop()
            elif ch == "," and not stack:
                entries.append(_Entry(start, index))
                start = index + 1
        entries.append(_Entry(start, close_index))
        return entries

    def _read_entry(
        self, code_text: str, structure: str, entry: _Entry, text: str, first_line_number: int
    ) -> Optional[EnumValue]:
        segment = structure[entry.start:entry.end]
        position = entry.start + (len(segment) - len(segment.lstrip()))

        # C# / Java 속성 "[Description(...)]", "@Deprecated" 건너뛰기
        while position < entry.end and structure[position] in "[@":
            if structure[position] == "[":
                close = structure.find("]", position)
                if close == -1 or close >= entry.end:
                    return None
                position = close + 1
            else:
                match = _NAME.match(structure, position + 1)
                if match is None:
                    return None
                position = match.end()
                if position < entry.end and structure[position] == "(":
                    close = structure.find(")", position)
                    position = entry.end if close == -1 else close + 1
            while position < entry.end and structure[position].isspace():
                position += 1

        match = _NAME.match(structure, position)
        if match is None or match.start() >= entry.end:
            return None

        name = match.group(0)
        rest = code_text[match.end():entry.end]
        value = None
        equals = rest.find("=")
        if equals != -1:
            value = condense_whitespace(rest[equals + 1:]).strip() or None
        elif rest.strip().startswith("("):
            # Java 열거형 생성자 인자 "RED(1, 0, 0)"
            value = condense_whitespace(rest).strip()

        return EnumValue(
            name=name,
            value=value,
            line_number=line_number_at(text, match.start(), first_line_number),
        )

    # ------------------------------------------------------------------
    # 설명
    # ------------------------------------------------------------------

    def _assign_descriptions(
        self,
        text: str,
        items: List[CodeItem],
        structure: str,
        entries: List[_Entry],
        open_index: int,
        close_index: int,
    ):
        close_line_end = text.find("\n", close_index)
        if close_line_end == -1:
            close_line_end = len(text)

        comments = [
            item
            for item in items
            if item.is_comment and open_index < item.offset < close_line_end
        ]
        consumed = set()

        for position, comment in enumerate(comments):
            if comment.offset in consumed:
                continue

            entry = self._comment_target(structure, comment, entries, open_index, close_index)
            if entry is None or entry.value is None:
                continue

            parts = [self._comment_text(comment)]
            if comment.type == CodeItemType.LINE_COMMENT:
                previous = comment
                for following in comments[position + 1:]:
                    if not self._continues(text, structure, previous, following):
                        break
                    parts.append(self._comment_text(following))
                    consumed.add(following.offset)
                    previous = following

            description = "\n".join(parts).strip()
            if description and entry.value.description is None:
                entry.value.description = description

    def _comment_target(
        self,
        structure: str,
        comment: CodeItem,
        entries: List[_Entry],
        open_index: int,
        close_index: int,
    ) -> Optional[_Entry]:
        previous = comment.offset - 1
        while previous > open_index and structure[previous] in " \t":
            previous -= 1
        # 앞에 같은 줄의 코드가 없으면 독립된 줄의 주석
        if structure[previous] in "\r\n":
            return None

        if previous == open_index:
            return None

        if previous >= close_index:
            # 닫는 중괄호 뒤의 주석은 마지막 값의 설명
            named = [entry for entry in entries if entry.value is not None]
            return named[-1] if named else None

        if structure[previous] == ",":
            for entry in entries:
                if entry.end == previous:
                    return entry
            return None

        following = comment.end
        while following < len(structure) and structure[following].isspace():
            following += 1
        if following >= close_index or structure[following] == ",":
            for entry in entries:
                if entry.start <= previous < entry.end:
                    return entry
        return None

    def _continues(self, text: str, structure: str, previous: CodeItem, following: CodeItem) -> bool:
        if following.type != CodeItemType.LINE_COMMENT:
            return False
        if not (previous.symbol.startswith(following.symbol) or following.symbol.startswith(previous.symbol)):
            return False
        line_start = text.rfind("\n", 0, following.offset) + 1
        if structure[line_start:following.offset].strip():
            return False
        return text.count("\n", previous.offset, following.offset) == 1

    def _comment_text(self, comment: CodeItem) -> str:
        content = comment.text[len(comment.symbol):]
        if comment.type == CodeItemType.BLOCK_COMMENT:
            closer = self._block_closers.get(comment.symbol, "")
            if closer and content.endswith(closer):
                content = content[: -len(closer)]
        # Doxygen 스타일 "///<", "//!<" 의 "<" 제거
        if content.startswith("!<"):
            content = content[2:]
        elif content.startswith("<"):
            content = content[1:]
        lines = LineFinder.clean(content.split("\n"))
        return "\n".join(lines).strip()
