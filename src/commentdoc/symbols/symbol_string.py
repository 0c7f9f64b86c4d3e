"""
SymbolString 모듈

토픽 제목과 링크 대상을 정규화된 심볼 문자열로 다룹니다.
"Namespace::Class.Method(int)" 는 세그먼트 ["Namespace", "Class", "Method"] 가 됩니다.
"""

import re
from typing import List, Optional, Tuple

SEPARATOR = "."

# "::", "->", ".", "/", "\" 를 세그먼트 구분자로 취급
_SEPARATOR_PATTERN = re.compile(r"::|->|[./\\]")
_WHITESPACE = re.compile(r"\s+")


class SymbolString:
    """
    정규화된 심볼 문자열

    세그먼트는 "." 로 연결되어 저장되며, 파라미터 목록과 여분의 공백은 제거됩니다.
    불변 객체이며 해시 가능합니다.
    """

    __slots__ = ("_segments",)

    def __init__(self, segments: Optional[List[str]] = None):
        self._segments: Tuple[str, ...] = tuple(s for s in (segments or []) if s)

    @classmethod
    def from_text(cls, text: str) -> "SymbolString":
        """
        텍스트로부터 SymbolString 을 생성합니다.

        Args:
            text: 토픽 제목 또는 링크 대상 (예: "Foo::Bar(int x)")

        Returns:
            SymbolString: 정규화된 심볼
        """
        text = cls._strip_parameters(text.strip())
        segments = []
        for segment in _SEPARATOR_PATTERN.split(text):
            segment = _WHITESPACE.sub(" ", segment).strip()
            if segment:
                segments.append(segment)
        return cls(segments)

    @classmethod
    def from_export(cls, exported: str) -> "SymbolString":
        """to_export() 로 저장된 문자열을 복원합니다."""
        return cls(exported.split(SEPARATOR)) if exported else cls()

    @staticmethod
    def _strip_parameters(text: str) -> str:
        # 마지막 괄호 쌍을 파라미터로 취급: "Func(int)" -> "Func"
        if not text.endswith(")"):
            return text
        depth = 0
        for index in range(len(text) - 1, -1, -1):
            ch = text[index]
            if ch == ")":
                depth += 1
            elif ch == "(":
                depth -= 1
                if depth == 0:
                    head = text[:index].rstrip()
                    return head if head else text
        return text

    @property
    def segments(self) -> List[str]:
        return list(self._segments)

    @property
    def last_segment(self) -> str:
        return self._segments[-1] if self._segments else ""

    @property
    def parent(self) -> "SymbolString":
        return SymbolString(list(self._segments[:-1]))

    def join(self, other: "SymbolString") -> "SymbolString":
        """self 를 컨텍스트로 하여 other 를 뒤에 붙입니다."""
        return SymbolString(list(self._segments) + list(other._segments))

    def ends_with(self, other: "SymbolString", case_sensitive: bool = True) -> bool:
        """other 의 모든 세그먼트가 self 의 끝 세그먼트와 일치하는지 확인합니다."""
        if not other._segments or len(other._segments) > len(self._segments):
            return False
        tail = self._segments[-len(other._segments):]
        if case_sensitive:
            return tail == other._segments
        return tuple(s.lower() for s in tail) == tuple(s.lower() for s in other._segments)

    def lower(self) -> "SymbolString":
        return SymbolString([s.lower() for s in self._segments])

    def to_export(self) -> str:
        return SEPARATOR.join(self._segments)

    def __bool__(self) -> bool:
        return bool(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def __eq__(self, other) -> bool:
        return isinstance(other, SymbolString) and self._segments == other._segments

    def __hash__(self) -> int:
        return hash(self._segments)

    def __str__(self) -> str:
        return self.to_export()

    def __repr__(self) -> str:
        return f"SymbolString({self.to_export()!r})"
