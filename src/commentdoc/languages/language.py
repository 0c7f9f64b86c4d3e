"""
Language 데이터 모델

언어별 주석 기호, 프로토타입 종결자, 파라미터 스타일 등 "기본 언어 지원"에
필요한 정보를 정의합니다. languages.yaml 의 항목 하나가 Language 하나에 대응합니다.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Set, Tuple

from pydantic import BaseModel, Field

LINE_BREAK_ENDER = "\\n"


class LanguageError(Exception):
    """언어 정의 관련 에러"""

    pass


@dataclass
class PrototypeEnders:
    """
    프로토타입을 끝내는 기호 목록

    Attributes:
        symbols: 종결 기호 또는 단어 (예: ";", "{", "is")
        include_line_breaks: 줄바꿈도 종결자로 취급할지 여부
    """

    symbols: List[str] = field(default_factory=list)
    include_line_breaks: bool = False

    @classmethod
    def from_strings(cls, enders: List[str]) -> "PrototypeEnders":
        symbols = [e for e in enders if e not in (LINE_BREAK_ENDER, "\n")]
        return cls(symbols=symbols, include_line_breaks=len(symbols) != len(enders))

    def is_empty(self) -> bool:
        return not self.symbols and not self.include_line_breaks


class Language(BaseModel):
    name: str = Field(..., description="언어 이름")
    aliases: List[str] = Field(default_factory=list, description="언어 별칭")
    extensions: List[str] = Field(default_factory=list, description="파일 확장자 (점 제외)")
    shebang_strings: List[str] = Field(
        default_factory=list, description="셔뱅 라인에서 찾을 문자열"
    )
    line_comments: List[str] = Field(default_factory=list, description="한 줄 주석 기호")
    block_comments: List[Tuple[str, str]] = Field(
        default_factory=list, description="블록 주석 (여는 기호, 닫는 기호)"
    )
    javadoc_line_comments: List[Tuple[str, str]] = Field(
        default_factory=list, description="Javadoc 한 줄 주석 (첫 줄 기호, 이후 줄 기호)"
    )
    javadoc_block_comments: List[Tuple[str, str]] = Field(
        default_factory=list, description="Javadoc 블록 주석 (여는 기호, 닫는 기호)"
    )
    xml_line_comments: List[str] = Field(
        default_factory=list, description="XML 문서 주석 기호"
    )
    prototype_enders: Dict[str, List[str]] = Field(
        default_factory=dict, description="주석 타입별 프로토타입 종결자"
    )
    line_extender: Optional[str] = Field(None, description="줄 연장 기호")
    string_quotes: List[str] = Field(
        default_factory=lambda: ['"', "'"], description="문자열 인용 부호"
    )
    escape_character: Optional[str] = Field("\\", description="문자열 이스케이프 문자")
    verbatim_string_prefix: Optional[str] = Field(
        None, description="이스케이프 없는 문자열 접두사 (예: C# 의 @)"
    )
    raw_strings: bool = Field(False, description="따옴표 3개 이상으로 감싼 원시 문자열 지원")
    parameter_style: Literal["c", "pascal"] = Field("c", description="파라미터 스타일")
    parameter_separators: List[str] = Field(
        default_factory=lambda: [","], description="파라미터 구분자"
    )
    type_name_separators: List[str] = Field(
        default_factory=list, description="이름과 타입 구분자 (Pascal 스타일)"
    )
    default_value_separators: List[str] = Field(
        default_factory=lambda: ["="], description="기본값 구분자"
    )
    parameter_modifiers: List[str] = Field(
        default_factory=list, description="파라미터 수식어 키워드"
    )
    enum_values: Literal["global", "under_type", "under_parent"] = Field(
        "under_type", description="열거형 값 심볼 위치"
    )
    case_sensitive: bool = Field(True, description="대소문자 구분 여부")
    member_operator: str = Field(".", description="멤버 접근 연산자")
    keywords: List[str] = Field(default_factory=list, description="구문 강조용 키워드")
    whole_file_comment: bool = Field(False, description="파일 전체를 주석으로 취급")
    brace_enums: bool = Field(False, description="중괄호 열거형 본문 파싱 여부")

    def get_prototype_enders(self, comment_type_name: str) -> Optional[PrototypeEnders]:
        """
        주석 타입에 해당하는 프로토타입 종결자를 반환합니다.

        Args:
            comment_type_name: 주석 타입 이름 (대소문자 구분 없음)

        Returns:
            Optional[PrototypeEnders]: 정의가 없으면 None
        """
        enders = self.prototype_enders.get(comment_type_name.lower())
        if not enders:
            return None
        return PrototypeEnders.from_strings(enders)

    def all_prototype_enders(self) -> PrototypeEnders:
        """모든 주석 타입의 종결자를 합친 목록 (헤더 없는 주석용)"""
        merged: List[str] = []
        for enders in self.prototype_enders.values():
            for ender in enders:
                if ender not in merged:
                    merged.append(ender)
        return PrototypeEnders.from_strings(merged)

    def matches_name(self, name: str) -> bool:
        lowered = name.strip().lower()
        if self.name.lower() == lowered:
            return True
        return any(alias.lower() == lowered for alias in self.aliases)

    def keyword_set(self) -> Set[str]:
        if self.case_sensitive:
            return set(self.keywords)
        return {k.lower() for k in self.keywords}

    def normalize_case(self, text: str) -> str:
        return text if self.case_sensitive else text.lower()

    def has_comment_symbols(self) -> bool:
        return bool(
            self.line_comments
            or self.block_comments
            or self.javadoc_line_comments
            or self.javadoc_block_comments
            or self.xml_line_comments
        )
