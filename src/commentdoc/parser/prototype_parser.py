"""
Prototype Parser 모듈

한 줄로 정리된 프로토타입을 파라미터 목록 전/파라미터/파라미터 목록 후 세 부분으로
나누고, 각 파라미터를 컬럼(수식어, 타입, 기호, 이름, 구분자, 기본값)으로 분류합니다.

C 스타일:       const int *name[] = 12
Pascal 스타일:  var name: Integer = 12
SQL:            p_id IN NUMBER DEFAULT 0
"""

import logging
import re
from typing import Dict, List, Optional, Tuple

from commentdoc.languages import Language
from commentdoc.models import ColumnType, Parameter, ParameterStyle, ParsedPrototype

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"[A-Za-z_$@][\w$]*")
_POINTER_SYMBOLS = "*&^"
_QUOTES = "\"'`"

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {")", "]", "}"}


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_$"


class PrototypeParser:
    """
    프로토타입 구조 분석기

    주요 기능:
    1. 최상위 괄호로 파라미터 목록 찾기 (문자열 안의 괄호 무시)
    2. 최상위 구분자로 파라미터 분리 (중첩 괄호, 제네릭 <...> 고려)
    3. C / Pascal 스타일 컬럼 분류
    4. 괄호 없는 프로토타입, 빈 목록, 함수 포인터, SQL DEFAULT 처리
    """

    def parse(self, prototype: str, language: Language) -> ParsedPrototype:
        """
        프로토타입을 분석합니다.

        Args:
            prototype: 공백이 정리된 프로토타입
            language: 프로토타입의 언어

        Returns:
            ParsedPrototype: 구조화된 프로토타입 (파라미터 목록이 없으면 before_parameters 에 전체)
        """
        style = ParameterStyle(language.parameter_style)
        separator = language.parameter_separators[0] if language.parameter_separators else ","
        result = ParsedPrototype(text=prototype, style=style, parameter_separator=separator)

        bounds = self._find_parameter_list(prototype)
        if bounds is None:
            result.before_parameters = prototype
            return result

        open_index, close_index = bounds
        result.before_parameters = prototype[: open_index + 1]
        result.after_parameters = prototype[close_index:]
        result.opening_symbol = prototype[open_index]
        result.closing_symbol = prototype[close_index]

        inner = prototype[open_index + 1:close_index]
        for text in self._split_parameters(inner, language):
            if style == ParameterStyle.C:
                cells = self._classify_c(text, language)
            else:
                cells = self._classify_pascal(text, language)
            result.parameters.append(Parameter(text=text, cells=cells))

        return result

    # ------------------------------------------------------------------
    # 구조 분리
    # ------------------------------------------------------------------

    @staticmethod
    def _find_parameter_list(text: str) -> Optional[Tuple[int, int]]:
        quote = None
        open_index = None
        depth = 0

        for index, ch in enumerate(text):
            if quote:
                if ch == quote:
                    quote = None
                continue
            if ch in _QUOTES:
                quote = ch
                continue

            if ch == "(":
                if open_index is None:
                    open_index = index
                depth += 1
            elif ch == ")" and open_index is not None:
                depth -= 1
                if depth == 0:
                    return open_index, index
        return None

    def _split_parameters(self, inner: str, language: Language) -> List[str]:
        separators = language.parameter_separators or [","]
        track_generics = language.parameter_style == "c"
        parameters: List[str] = []
        current: List[str] = []
        stack: List[str] = []
        quote = None
        index = 0

        while index < len(inner):
            ch = inner[index]
            if quote:
                current.append(ch)
                if ch == quote:
                    quote = None
                index += 1
                continue

            if ch in _QUOTES:
                quote = ch
            elif ch in _OPENERS:
                stack.append(_OPENERS[ch])
            elif ch in _CLOSERS and stack and stack[-1] == ch:
                stack.pop()
            elif track_generics and ch == "<" and index > 0 and _is_word_char(inner[index - 1]):
                stack.append(">")
            elif ch == ">" and stack and stack[-1] == ">":
                stack.pop()
            elif not stack:
                matched = next((s for s in separators if inner.startswith(s, index)), None)
                if matched:
                    parameters.append("".join(current).strip())
                    current = []
                    index += len(matched)
                    continue

            current.append(ch)
            index += 1

        parameters.append("".join(current).strip())
        return [p for p in parameters if p]

    def _split_default_value(self, text: str, language: Language) -> Tuple[str, str, str]:
        """(기본값 앞, 구분자, 기본값) 을 반환합니다. 구분자가 없으면 뒤 두 값은 빈 문자열."""
        separators = sorted(language.default_value_separators, key=len, reverse=True)
        depth = 0
        quote = None

        for index, ch in enumerate(text):
            if quote:
                if ch == quote:
                    quote = None
                continue
            if ch in _QUOTES:
                quote = ch
                continue
            if ch in _OPENERS or ch == "<":
                depth += 1
                continue
            if ch in _CLOSERS or (ch == ">" and depth > 0):
                depth = max(0, depth - 1)
                continue
            if depth:
                continue

            for separator in separators:
                if _is_word_char(separator[0]):
                    candidate = text[index:index + len(separator)]
                    before = text[index - 1] if index > 0 else " "
                    after = text[index + len(separator):index + len(separator) + 1] or " "
                    if candidate.lower() == separator.lower() and not _is_word_char(before) and not _is_word_char(after):
                        return (
                            text[:index].rstrip(),
                            candidate,
                            text[index + len(separator):].strip(),
                        )
                elif text.startswith(separator, index):
                    following = text[index + len(separator):index + len(separator) + 1]
                    previous = text[index - 1] if index > 0 else ""
                    # "==", "<=", "!=" 등은 구분자가 아님
                    if separator == "=" and (following == "=" or (previous and previous in "=<>!")):
                        continue
                    return text[:index].rstrip(), separator, text[index + len(separator):].strip()

        return text, "", ""

    # ------------------------------------------------------------------
    # C 스타일
    # ------------------------------------------------------------------

    def _classify_c(self, text: str, language: Language) -> Dict[ColumnType, str]:
        cells: Dict[ColumnType, str] = {}
        left, separator, default = self._split_default_value(text, language)
        if separator:
            cells[ColumnType.DEFAULT_VALUE_SEPARATOR] = separator
            if default:
                cells[ColumnType.DEFAULT_VALUE] = default

        left = left.strip()
        if left in ("...", "void"):
            cells[ColumnType.NAME if left == "..." else ColumnType.TYPE] = left
            return cells

        name_start = self._find_c_name(left)
        if name_start is None:
            cells[ColumnType.TYPE] = left
            return cells

        cells[ColumnType.NAME] = left[name_start:].strip()
        before = left[:name_start].rstrip()

        symbols = ""
        if name_start > 0 and not left[name_start - 1].isspace():
            while before and before[-1] in _POINTER_SYMBOLS:
                symbols = before[-1] + symbols
                before = before[:-1]
            # "int*x" 처럼 기호가 양쪽에 붙어 있으면 타입 쪽에 남김
            if before and not before[-1].isspace() and symbols:
                before += symbols
                symbols = ""
            before = before.rstrip()
        if symbols:
            cells[ColumnType.SYMBOLS] = symbols

        modifiers, type_text = self._split_modifiers(before, language)
        if modifiers:
            cells[ColumnType.MODIFIER] = modifiers
        if type_text:
            cells[ColumnType.TYPE] = type_text
        return cells

    @staticmethod
    def _find_c_name(text: str) -> Optional[int]:
        """이름이 시작하는 위치. 배열 접미사와 함수 포인터 괄호는 이름 쪽에 포함됩니다."""
        # 함수 포인터: "int (*callback)(int)"
        pointer = re.search(r"\(\s*[*&^]+\s*([A-Za-z_$][\w$]*)\s*\)\s*\(.*\)$", text)
        if pointer:
            return pointer.start(1)

        end = len(text)
        # 배열/제네릭 접미사 "name[]", "name[10]", "name<T>"
        while end > 0 and text[end - 1] in "]>":
            open_index = text.rfind("[" if text[end - 1] == "]" else "<", 0, end)
            if open_index <= 0 or not text[:open_index].strip():
                break
            end = open_index
            while end > 0 and text[end - 1].isspace():
                end -= 1

        matches = list(_IDENTIFIER.finditer(text[:end]))
        if not matches:
            return None
        last = matches[-1]
        if last.end() != end:
            return None
        if not text[:last.start()].strip():
            return last.start()
        # "std::string" 처럼 한정자 뒤의 단어는 이름이 아님
        previous = text[:last.start()].rstrip()
        if previous.endswith("::") or previous.endswith("."):
            return None
        return last.start()

    @staticmethod
    def _split_modifiers(text: str, language: Language) -> Tuple[str, str]:
        if not language.parameter_modifiers:
            return "", text
        modifier_set = {language.normalize_case(m) for m in language.parameter_modifiers}
        words = text.split(" ")
        count = 0
        while count < len(words) and language.normalize_case(words[count]) in modifier_set:
            count += 1
        return " ".join(words[:count]), " ".join(words[count:]).strip()

    # ------------------------------------------------------------------
    # Pascal 스타일
    # ------------------------------------------------------------------

    def _classify_pascal(self, text: str, language: Language) -> Dict[ColumnType, str]:
        cells: Dict[ColumnType, str] = {}
        left, separator, default = self._split_default_value(text, language)
        if separator:
            cells[ColumnType.DEFAULT_VALUE_SEPARATOR] = separator
            if default:
                cells[ColumnType.DEFAULT_VALUE] = default

        name_part, type_separator, type_part = self._split_type_name(left.strip(), language)

        modifiers, name_text = self._split_modifiers(name_part, language)
        if modifiers:
            cells[ColumnType.MODIFIER] = modifiers

        if type_separator:
            if name_text:
                cells[ColumnType.NAME] = name_text
            cells[ColumnType.TYPE_NAME_SEPARATOR] = type_separator
        else:
            # "p_id IN NUMBER" : 첫 단어가 이름, 나머지는 타입
            words = name_text.split(" ", 1)
            if words[0]:
                cells[ColumnType.NAME] = words[0]
            type_part = words[1] if len(words) > 1 else ""

        symbols = ""
        while type_part and type_part[0] in _POINTER_SYMBOLS:
            symbols += type_part[0]
            type_part = type_part[1:].lstrip()
        if symbols:
            cells[ColumnType.SYMBOLS] = symbols
        if type_part:
            cells[ColumnType.TYPE] = type_part
        return cells

    @staticmethod
    def _split_type_name(text: str, language: Language) -> Tuple[str, str, str]:
        depth = 0
        for index, ch in enumerate(text):
            if ch in _OPENERS:
                depth += 1
            elif ch in _CLOSERS:
                depth = max(0, depth - 1)
            if depth:
                continue
            for separator in language.type_name_separators:
                if _is_word_char(separator[0]):
                    candidate = text[index:index + len(separator)]
                    before = text[index - 1] if index > 0 else " "
                    after = text[index + len(separator):index + len(separator) + 1] or " "
                    if candidate.lower() == separator.lower() and not _is_word_char(before) and not _is_word_char(after):
                        return text[:index].rstrip(), candidate, text[index + len(separator):].strip()
                elif text.startswith(separator, index):
                    return text[:index].rstrip(), separator, text[index + len(separator):].strip()
        return text, "", ""
