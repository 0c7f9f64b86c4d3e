"""
Parser 모듈

소스 파일을 토픽으로 변환하는 파서와 프로토타입/열거형 본문 분석기를 제공합니다.
"""

from .enum_parser import EnumParser
from .prototype_finder import FoundPrototype, PrototypeFinder
from .prototype_parser import PrototypeParser
from .source_parser import DEFAULT_ENCODINGS, SourceParser

__all__ = [
    "DEFAULT_ENCODINGS",
    "EnumParser",
    "FoundPrototype",
    "PrototypeFinder",
    "PrototypeParser",
    "SourceParser",
]
