"""
Topic 데이터 모델

문서 주석 하나(또는 목록/열거형 주석 안의 항목 하나)에서 만들어지는 토픽입니다.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Topic:
    """
    토픽 데이터 모델

    Attributes:
        title: 토픽 제목 (예: "Color", "FunctionA")
        comment_type: 주석 타입 이름 (예: "Function", "Enumeration")
        topic_id: 파일 내 순번 (1부터 시작)
        body: NDMarkup 형식 본문
        summary: 본문 첫 문장 (NDMarkup)
        symbol: 전체 심볼 ("." 구분, 예: "Outer.Color.Red")
        context: 토픽이 정의된 범위의 심볼 (전역이면 빈 문자열)
        prototype: 주석 뒤 코드에서 추출한 프로토타입
        language: 언어 이름
        file_path: 소스 파일의 상대 경로
        comment_line_number: 주석 시작 줄 번호
        code_line_number: 프로토타입 시작 줄 번호 (없으면 주석 줄 번호)
        is_list: 복수 키워드로 만든 목록 토픽 여부
        is_embedded: 목록/열거형 주석 안의 항목 토픽 여부
        is_enum: 열거형 주석 타입 여부
        access_level: 접근 제한자 (예: "Private")
        parent_id: 포함하는 토픽의 topic_id (클래스 멤버, 목록 항목 등)
        group: 소속 그룹 제목
        anchor: 출력용 앵커 ("Type:Symbol" 형식)
        tags: 추가 태그
    """

    title: str
    comment_type: str
    topic_id: int = 0
    body: Optional[str] = None
    summary: Optional[str] = None
    symbol: str = ""
    context: str = ""
    prototype: Optional[str] = None
    language: Optional[str] = None
    file_path: str = ""
    comment_line_number: int = 0
    code_line_number: int = 0
    is_list: bool = False
    is_embedded: bool = False
    is_enum: bool = False
    access_level: Optional[str] = None
    parent_id: Optional[int] = None
    group: Optional[str] = None
    anchor: str = ""
    tags: List[str] = field(default_factory=list)

    @property
    def symbol_segments(self) -> List[str]:
        return self.symbol.split(".") if self.symbol else []

    def to_dict(self) -> dict:
        """
        딕셔너리 형태로 변환

        Returns:
            dict: Topic의 딕셔너리 표현
        """
        return {
            "title": self.title,
            "comment_type": self.comment_type,
            "topic_id": self.topic_id,
            "body": self.body,
            "summary": self.summary,
            "symbol": self.symbol,
            "context": self.context,
            "prototype": self.prototype,
            "language": self.language,
            "file_path": self.file_path,
            "comment_line_number": self.comment_line_number,
            "code_line_number": self.code_line_number,
            "is_list": self.is_list,
            "is_embedded": self.is_embedded,
            "is_enum": self.is_enum,
            "access_level": self.access_level,
            "parent_id": self.parent_id,
            "group": self.group,
            "anchor": self.anchor,
            "tags": self.tags,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Topic":
        """
        딕셔너리로부터 Topic 객체 생성

        Args:
            data: Topic 데이터 딕셔너리

        Returns:
            Topic: 생성된 Topic 객체
        """
        return cls(
            title=data["title"],
            comment_type=data["comment_type"],
            topic_id=data.get("topic_id", 0),
            body=data.get("body"),
            summary=data.get("summary"),
            symbol=data.get("symbol", ""),
            context=data.get("context", ""),
            prototype=data.get("prototype"),
            language=data.get("language"),
            file_path=str(data.get("file_path", "")),
            comment_line_number=data.get("comment_line_number", 0),
            code_line_number=data.get("code_line_number", 0),
            is_list=data.get("is_list", False),
            is_embedded=data.get("is_embedded", False),
            is_enum=data.get("is_enum", False),
            access_level=data.get("access_level"),
            parent_id=data.get("parent_id"),
            group=data.get("group"),
            anchor=data.get("anchor", ""),
            tags=data.get("tags", []),
        )
