"""
CommentType 데이터 모델

"Function:", "Class:" 와 같은 토픽 키워드가 가리키는 주석 타입을 정의합니다.
"""

from typing import List, Literal

from pydantic import BaseModel, Field, field_validator


class CommentTypeError(Exception):
    """주석 타입 정의 관련 에러"""

    pass


CommentTypeFlag = Literal[
    "code",
    "file",
    "documentation",
    "variable_type",
    "class_hierarchy",
    "database_hierarchy",
    "enum",
]


class CommentType(BaseModel):
    name: str = Field(..., description="주석 타입 이름")
    display_name: str = Field("", description="출력용 단수 이름")
    plural_display_name: str = Field("", description="출력용 복수 이름")
    scope: Literal["normal", "start", "end", "always_global"] = Field(
        "normal", description="토픽 범위 (start: 이후 토픽의 컨텍스트 시작, end: 전역으로 복귀)"
    )
    flags: List[CommentTypeFlag] = Field(default_factory=list, description="플래그 목록")
    keywords: List[List[str]] = Field(
        default_factory=list, description="키워드 목록 ([단수] 또는 [단수, 복수])"
    )

    @field_validator("keywords")
    @classmethod
    def _validate_keywords(cls, value: List[List[str]]) -> List[List[str]]:
        for pair in value:
            if not 1 <= len(pair) <= 2:
                raise ValueError(f"키워드 항목은 [단수] 또는 [단수, 복수] 여야 합니다: {pair}")
        return value

    def model_post_init(self, __context) -> None:
        if not self.display_name:
            self.display_name = self.name
        if not self.plural_display_name:
            self.plural_display_name = self.display_name

    def has_flag(self, flag: str) -> bool:
        return flag in self.flags

    @property
    def is_code(self) -> bool:
        return "code" in self.flags

    @property
    def is_file(self) -> bool:
        return "file" in self.flags

    @property
    def is_enum(self) -> bool:
        return "enum" in self.flags

    @property
    def is_group(self) -> bool:
        return self.name == "Group"

    @property
    def simple_identifier(self) -> str:
        """앵커 등에 사용할 공백 없는 이름 (예: "Database Index" -> "DatabaseIndex")"""
        return "".join(ch for ch in self.name if ch.isalnum())
