"""
ParseResult 데이터 모델

소스 파일 하나를 파싱한 결과(토픽 목록과 파일 단위 오류)입니다.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .source_file import SourceFile
from .topic import Topic


@dataclass
class ParseError:
    """
    파일 단위 파싱 오류

    Attributes:
        file_path: 오류가 발생한 파일 경로
        message: 오류 메시지
        line_number: 관련 줄 번호 (없으면 None)
    """

    file_path: str
    message: str
    line_number: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "file_path": self.file_path,
            "message": self.message,
            "line_number": self.line_number,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ParseError":
        return cls(
            file_path=str(data["file_path"]),
            message=data["message"],
            line_number=data.get("line_number"),
        )


@dataclass
class ParseResult:
    """소스 파일 파싱 결과"""

    source_file: SourceFile
    topics: List[Topic] = field(default_factory=list)
    errors: List[ParseError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def to_dict(self) -> dict:
        return {
            "source_file": self.source_file.to_dict(),
            "topics": [t.to_dict() for t in self.topics],
            "errors": [e.to_dict() for e in self.errors],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ParseResult":
        return cls(
            source_file=SourceFile.from_dict(data["source_file"]),
            topics=[Topic.from_dict(t) for t in data.get("topics", [])],
            errors=[ParseError.from_dict(e) for e in data.get("errors", [])],
        )
