"""
Link Resolver 모듈

링크 해석 후보를 전체 토픽 목록의 심볼과 맞춰 대상 토픽을 찾습니다.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from commentdoc.comment_types import CommentTypeManager
from commentdoc.models import Topic
from commentdoc.symbols import SymbolString

from .link_interpretations import LinkInterpretation, LinkInterpretations

logger = logging.getLogger(__name__)


class LinkResolver:
    """
    심볼 링크 해석기

    주요 기능:
    1. 심볼 인덱스 구성 (대소문자 구분/무시 두 가지)
    2. 현재 컨텍스트에서 바깥 범위 순서로 후보 심볼 조회
    3. 점수 비교: 대소문자 일치 > 안쪽 범위 > 그대로 사용한 후보 > 코드 토픽 > 파일 순서
    """

    def __init__(self, topics: Iterable[Topic], comment_type_manager: Optional[CommentTypeManager] = None):
        """
        LinkResolver 초기화

        Args:
            topics: 모든 파일의 토픽 (순서가 파일 순서로 사용됨)
            comment_type_manager: 코드 토픽 판별용 (없으면 코드 여부로 구분하지 않음)
        """
        self.comment_type_manager = comment_type_manager
        self.interpreter = LinkInterpretations()
        self._order: Dict[int, int] = {}
        self._exact: Dict[SymbolString, List[Topic]] = defaultdict(list)
        self._lower: Dict[SymbolString, List[Topic]] = defaultdict(list)

        for order, topic in enumerate(topics):
            if not topic.symbol:
                continue
            symbol = SymbolString.from_export(topic.symbol)
            self._order[id(topic)] = order
            self._exact[symbol].append(topic)
            self._lower[symbol.lower()].append(topic)

        logger.debug(f"링크 인덱스: 심볼 {len(self._exact)}개")

    def resolve(self, link_text: str, context: str = "") -> Optional[Topic]:
        """
        링크가 가리키는 토픽을 찾습니다.

        Args:
            link_text: 링크 원문 ("<Foo>" 또는 "Foo")
            context: 링크가 있는 토픽의 컨텍스트 심볼 ("." 구분)

        Returns:
            Optional[Topic]: 대상 토픽, 찾지 못하면 None
        """
        match = self.resolve_with_text(link_text, context)
        return match[0] if match else None

    def resolve_with_text(self, link_text: str, context: str = "") -> Optional[Tuple[Topic, str]]:
        """
        링크 대상 토픽과 출력할 링크 텍스트를 함께 반환합니다.

        Returns:
            Optional[Tuple[Topic, str]]: (대상 토픽, 링크 텍스트), 찾지 못하면 None
        """
        scopes = self._scopes(SymbolString.from_export(context))
        best: Optional[Tuple[tuple, Topic, str]] = None

        for interpretation in self.interpreter.interpret(link_text):
            target = SymbolString.from_text(interpretation.target)
            if not target:
                continue
            for scope in scopes:
                candidate = scope.join(target)
                for topic, exact in self._lookup(candidate):
                    score = self._score(topic, exact, len(scope), interpretation)
                    if best is None or score > best[0]:
                        best = (score, topic, interpretation.text)

        if best is None:
            return None
        return best[1], best[2]

    @staticmethod
    def _scopes(context: SymbolString) -> List[SymbolString]:
        scopes = []
        scope = context
        while scope:
            scopes.append(scope)
            scope = scope.parent
        scopes.append(SymbolString())
        return scopes

    def _lookup(self, symbol: SymbolString) -> List[Tuple[Topic, bool]]:
        found = [(topic, True) for topic in self._exact.get(symbol, [])]
        exact_ids = {id(topic) for topic, _ in found}
        for topic in self._lower.get(symbol.lower(), []):
            if id(topic) not in exact_ids:
                found.append((topic, False))
        return found

    def _score(self, topic: Topic, exact: bool, depth: int, interpretation: LinkInterpretation) -> tuple:
        is_code = False
        if self.comment_type_manager is not None:
            comment_type = self.comment_type_manager.from_name(topic.comment_type)
            is_code = bool(comment_type and comment_type.is_code)
        return (exact, depth, interpretation.is_literal, is_code, -self._order[id(topic)])
