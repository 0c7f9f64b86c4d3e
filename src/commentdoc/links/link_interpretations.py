"""
Link Interpretations 모듈

"<...>" 링크 텍스트가 가리킬 수 있는 대상 후보를 만듭니다.

    <Foo>               -> Foo
    <Foos>              -> Foos, Foo
    <Foo's>             -> Foo's, Foo
    <the list: Foo>     -> "the list: Foo", (the list -> Foo)
    <the list at Foo>   -> "the list at Foo", (the list -> Foo)
"""

from dataclasses import dataclass
from typing import List

from commentdoc.comments.inline_markup import is_url_protocol

_POSSESSIVES = ("'s", "’s", "'", "’")
# (접미사, 바꿀 문자열) 긴 접미사 우선
_PLURALS = (("ies", "y"), ("es", ""), ("s", ""))


@dataclass(frozen=True)
class LinkInterpretation:
    """
    링크 해석 후보

    Attributes:
        text: 출력할 링크 텍스트
        target: 심볼로 찾을 대상
        is_literal: 링크 텍스트를 그대로 사용한 후보 여부 (복수형/소유격 변환이 아님)
        is_named: "text: target" 형식에서 나온 후보 여부
    """

    text: str
    target: str
    is_literal: bool = True
    is_named: bool = False


class LinkInterpretations:
    """링크 텍스트 해석기"""

    def interpret(self, link_text: str) -> List[LinkInterpretation]:
        """
        링크 텍스트의 해석 후보를 우선순위 순서로 반환합니다.

        Args:
            link_text: 꺾쇠를 제외한 링크 텍스트 (꺾쇠가 있으면 제거)

        Returns:
            List[LinkInterpretation]: 그대로 사용한 후보가 변환 후보보다 앞에 옴
        """
        text = " ".join(link_text.strip().split())
        if text.startswith("<") and text.endswith(">"):
            text = text[1:-1].strip()
        if not text:
            return []

        bases = [LinkInterpretation(text, text)]
        named = self._split_named(text)
        if named is not None:
            bases.append(LinkInterpretation(named[0], named[1], is_named=True))

        interpretations: List[LinkInterpretation] = list(bases)
        seen = {(i.text, i.target) for i in interpretations}
        for base in bases:
            for alternate in self.alternates(base.target):
                candidate = LinkInterpretation(base.text, alternate, is_literal=False, is_named=base.is_named)
                if (candidate.text, candidate.target) not in seen:
                    seen.add((candidate.text, candidate.target))
                    interpretations.append(candidate)
        return interpretations

    @staticmethod
    def _split_named(text: str):
        """이름 붙은 링크 ("text: target", "text at target") 를 (text, target) 으로 나눕니다."""
        index = 0
        while True:
            index = text.find(":", index)
            if index == -1:
                break
            if text.startswith("::", index):
                index += 2
                continue
            if index > 0 and text[index - 1] == ":":
                index += 1
                continue
            before = text[:index]
            # "http:" 같은 프로토콜이나 "mailto:" 는 이름 구분자가 아님
            if (" " not in before and is_url_protocol(before)) or before.lower() == "mailto":
                index += 1
                continue
            name, target = before.strip(), text[index + 1:].strip()
            if name and target:
                return name, target
            index += 1

        at = text.find(" at ")
        if at > 0:
            name, target = text[:at].strip(), text[at + len(" at "):].strip()
            if name and target:
                return name, target
        return None

    @staticmethod
    def alternates(target: str) -> List[str]:
        """
        소유격과 복수형을 제거한 대안 대상 목록

        Examples:
            "Foo's" -> ["Foo"]
            "Properties" -> ["Property", "Properti", "Propertie"]
        """
        results: List[str] = []

        def add(candidate: str):
            if candidate and candidate != target and candidate not in results:
                results.append(candidate)

        stems = [target]
        for suffix in _POSSESSIVES:
            if target.endswith(suffix) and len(target) > len(suffix):
                stem = target[: -len(suffix)]
                add(stem)
                stems.append(stem)
                break

        for stem in stems:
            lowered = stem.lower()
            for suffix, replacement in _PLURALS:
                if lowered.endswith(suffix) and len(stem) > len(suffix):
                    add(stem[: -len(suffix)] + replacement)
        return results
