"""
Comment Type Manager 모듈

comment_types.yaml 에 정의된 주석 타입을 로드하고, 토픽 라인의 키워드를
주석 타입과 단수/복수 여부로 변환합니다.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import yaml
from pydantic import ValidationError

from .comment_type import CommentType, CommentTypeError

logger = logging.getLogger(__name__)

DEFAULT_COMMENT_TYPES_FILE = Path(__file__).parent / "comment_types.yaml"

# 토픽 라인 앞에 올 수 있는 접근 제한자 (소문자 키 -> 표기)
ACCESS_LEVELS = {
    "public": "Public",
    "private": "Private",
    "protected": "Protected",
    "internal": "Internal",
    "protected internal": "Protected Internal",
    "private protected": "Private Protected",
}


def normalize_keyword(keyword: str) -> str:
    """키워드를 소문자로 바꾸고 연속 공백을 하나로 줄입니다."""
    return " ".join(keyword.lower().split())


class CommentTypeManager:
    """
    주석 타입을 관리하는 클래스

    주요 기능:
    1. YAML 주석 타입 정의 로드 및 검증
    2. 키워드 -> (주석 타입, 복수 여부) 변환
    3. 이름으로 주석 타입 조회
    4. 접근 제한자 태그 인식
    """

    def __init__(self, comment_types_file: Optional[Union[str, Path]] = None):
        """
        CommentTypeManager 초기화

        Args:
            comment_types_file: 주석 타입 정의 YAML 파일 경로 (None이면 기본 파일)

        Raises:
            CommentTypeError: 정의 파일 로드 실패 또는 키워드 중복 시
        """
        path = Path(comment_types_file) if comment_types_file else DEFAULT_COMMENT_TYPES_FILE
        self._comment_types: List[CommentType] = self._load(path)
        self._keywords: Dict[str, Tuple[CommentType, bool]] = {}

        for comment_type in self._comment_types:
            for pair in comment_type.keywords:
                for index, keyword in enumerate(pair):
                    key = normalize_keyword(keyword)
                    if key in self._keywords:
                        raise CommentTypeError(
                            f"키워드가 중복 정의되었습니다: '{keyword}' "
                            f"({self._keywords[key][0].name}, {comment_type.name})"
                        )
                    self._keywords[key] = (comment_type, index == 1)

    @staticmethod
    def _load(path: Path) -> List[CommentType]:
        if not path.exists():
            raise CommentTypeError(f"주석 타입 정의 파일을 찾을 수 없습니다: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise CommentTypeError(f"주석 타입 정의 파일의 YAML 형식이 올바르지 않습니다: {e}")

        comment_types = []
        for entry in data.get("comment_types", []):
            try:
                comment_types.append(CommentType(**entry))
            except ValidationError as e:
                raise CommentTypeError(
                    f"주석 타입 정의 검증 실패 ({entry.get('name', '?')}): {e}"
                )

        logger.debug(f"주석 타입 {len(comment_types)}개 로드: {path}")
        return comment_types

    def from_keyword(self, keyword: str) -> Optional[Tuple[CommentType, bool]]:
        """
        키워드에 해당하는 주석 타입을 조회합니다.

        Args:
            keyword: 토픽 키워드 (대소문자 및 공백 개수 무관)

        Returns:
            Optional[Tuple[CommentType, bool]]: (주석 타입, 복수 키워드 여부), 없으면 None
        """
        return self._keywords.get(normalize_keyword(keyword))

    def from_name(self, name: str) -> Optional[CommentType]:
        """이름으로 주석 타입을 조회합니다 (대소문자 구분 없음)."""
        lowered = name.lower()
        for comment_type in self._comment_types:
            if comment_type.name.lower() == lowered:
                return comment_type
        return None

    @staticmethod
    def access_level(words: str) -> Optional[str]:
        """
        접근 제한자 태그를 인식합니다.

        Args:
            words: 태그 후보 문자열 (예: "Protected Internal")

        Returns:
            Optional[str]: 표준 표기 (예: "Protected Internal"), 아니면 None
        """
        return ACCESS_LEVELS.get(normalize_keyword(words))

    @property
    def comment_types(self) -> List[CommentType]:
        return list(self._comment_types)

    def keywords(self) -> List[str]:
        return sorted(self._keywords)
