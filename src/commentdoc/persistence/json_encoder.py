"""
커스텀 JSON 인코더 모듈

datetime, Path, Enum 과 to_dict()를 가진 모델 객체(SourceFile, Topic, ParseResult 등)를
JSON 으로 저장할 수 있게 변환합니다.
"""

import json
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any


class CustomJSONEncoder(json.JSONEncoder):
    """
    커스텀 JSON 인코더 클래스

    기본 JSON 타입이 아닌 객체들을 JSON으로 변환합니다:
    - datetime: ISO 8601 형식 문자열
    - Path: POSIX 형식 문자열 (운영체제에 관계없이 같은 결과)
    - Enum: 값
    - set / frozenset: 정렬된 리스트
    - to_dict()가 있는 모델: 딕셔너리
    """

    def default(self, obj: Any) -> Any:
        if isinstance(obj, datetime):
            return obj.isoformat()

        if isinstance(obj, Path):
            return obj.as_posix()

        if isinstance(obj, Enum):
            return obj.value

        if isinstance(obj, (set, frozenset)):
            return sorted(obj)

        if hasattr(obj, "to_dict"):
            return obj.to_dict()

        return super().default(obj)
