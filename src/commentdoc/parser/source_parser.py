"""
Source Parser 모듈

소스 파일 하나를 읽어 문서 주석을 토픽 목록으로 변환합니다.

처리 순서:
1. 인코딩 순서대로 파일 읽기, 탭 확장
2. 주석 탐색 및 장식 제거
3. Natural Docs / Javadoc / XML 형식 판별 후 본문 변환
4. 주석 뒤 프로토타입 추출 (헤더 없는 주석은 프로토타입으로 타입과 제목 추론)
5. 열거형 본문 값과 주석 정의 병합
6. 심볼, 컨텍스트, 부모 토픽, 앵커 지정
"""

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from commentdoc.comment_types import CommentType, CommentTypeManager
from commentdoc.comments import (
    JAVADOC,
    XML,
    CommentFinder,
    JavadocParser,
    LineFinder,
    NaturalDocsParser,
    PossibleComment,
    XMLCommentParser,
    encode,
    has_javadoc_tags,
    looks_like_xml,
)
from commentdoc.languages import Language, LanguageManager
from commentdoc.models import EnumValue, ParseError, ParseResult, SourceFile, Topic
from commentdoc.symbols import SymbolString
from commentdoc.tokenization import expand_tabs

from .enum_parser import EnumParser
from .prototype_finder import PrototypeFinder

logger = logging.getLogger(__name__)

DEFAULT_ENCODINGS = ["utf-8-sig", "cp949", "latin-1"]

# 헤더 없는 주석의 프로토타입 키워드 -> 주석 타입 키워드
_DECLARATION_KEYWORDS = {
    "class": "class",
    "struct": "struct",
    "record": "class",
    "interface": "interface",
    "enum": "enum",
    "namespace": "namespace",
    "module": "module",
}
_DECLARATION = re.compile(
    r"\b(" + "|".join(_DECLARATION_KEYWORDS) + r")\s+([A-Za-z_$][\w$]*(?:(?:\.|::)[A-Za-z_$][\w$]*)*)"
)
_IDENTIFIER = re.compile(r"[A-Za-z_$][\w$]*")
_VALUE_DEFINITIONS = re.compile(r"(?:<h(?: type=\"values\")?>Values</h>)?<dl>(?:<ds>.*?</ds><dd>.*?</dd>)+</dl>", re.DOTALL)


class SourceParser:
    """
    소스 파일 파서

    주요 기능:
    1. 파일 읽기 (인코딩 폴백, 실패 시 ParseError 기록)
    2. 주석 -> 토픽 변환 (헤더 있는 주석, 헤더 없는 Javadoc/XML 주석)
    3. 프로토타입 추출 및 열거형 값 병합
    4. 범위(컨텍스트), 그룹, 부모 토픽, 앵커 지정
    """

    def __init__(
        self,
        language_manager: LanguageManager,
        comment_type_manager: CommentTypeManager,
        tab_width: int = 4,
        encodings: Optional[List[str]] = None,
        documented_only: bool = False,
    ):
        """
        SourceParser 초기화

        Args:
            language_manager: 언어 관리자
            comment_type_manager: 주석 타입 관리자
            tab_width: 탭 확장 폭
            encodings: 파일을 읽을 때 시도할 인코딩 순서
            documented_only: True이면 설명 없는 열거형 본문 값은 토픽으로 만들지 않음
        """
        self.language_manager = language_manager
        self.comment_type_manager = comment_type_manager
        self.tab_width = tab_width
        self.encodings = encodings or list(DEFAULT_ENCODINGS)
        self.documented_only = documented_only

        self.natural_docs_parser = NaturalDocsParser(comment_type_manager, language_manager)
        self.javadoc_parser = JavadocParser()
        self.xml_parser = XMLCommentParser()

    # ------------------------------------------------------------------
    # 파일
    # ------------------------------------------------------------------

    def parse_file(self, source_file: SourceFile) -> ParseResult:
        """
        소스 파일을 파싱합니다.

        Args:
            source_file: 파싱할 파일 메타데이터

        Returns:
            ParseResult: 토픽 목록과 파일 단위 오류
        """
        result = ParseResult(source_file=source_file)
        file_path = str(source_file.relative_path)

        language = None
        if source_file.language:
            language = self.language_manager.from_name(source_file.language)
        if language is None:
            language = self.language_manager.from_file_path(source_file.path)
        if language is None:
            message = f"언어를 판별할 수 없습니다: {source_file.path}"
            logger.warning(message)
            result.errors.append(ParseError(file_path, message))
            return result
        source_file.language = language.name

        try:
            text = self._read(source_file.path)
        except OSError as e:
            message = f"파일을 읽을 수 없습니다: {e}"
            logger.error(f"{source_file.path}: {message}")
            result.errors.append(ParseError(file_path, message))
            return result

        if text is None:
            message = f"지원하는 인코딩으로 디코딩할 수 없습니다: {', '.join(self.encodings)}"
            logger.error(f"{source_file.path}: {message}")
            result.errors.append(ParseError(file_path, message))
            return result

        result.topics = self.parse_text(text, language, file_path)
        logger.debug(f"{file_path}: 토픽 {len(result.topics)}개")
        return result

    def _read(self, path: Path) -> Optional[str]:
        data = Path(path).read_bytes()
        for encoding in self.encodings:
            try:
                return data.decode(encoding)
            except (UnicodeDecodeError, LookupError):
                logger.debug(f"{path}: {encoding} 디코딩 실패")
        return None

    # ------------------------------------------------------------------
    # 텍스트
    # ------------------------------------------------------------------

    def parse_text(self, text: str, language: Language, file_path: str = "") -> List[Topic]:
        """
        소스 텍스트를 토픽 목록으로 변환합니다.

        Args:
            text: 소스 파일 내용
            language: 소스 언어
            file_path: 토픽에 기록할 상대 경로

        Returns:
            List[Topic]: topic_id, 심볼, 앵커가 지정된 토픽 목록 (파일 순서)
        """
        lines = [expand_tabs(line, self.tab_width) for line in text.splitlines()]
        comment_finder = CommentFinder(language)
        prototype_finder = PrototypeFinder(language)
        enum_parser = EnumParser(language) if language.brace_enums else None

        topics: List[Topic] = []
        for comment in comment_finder.find(lines):
            topics.extend(
                self._parse_comment(comment, lines, language, prototype_finder, enum_parser)
            )

        for topic in topics:
            topic.file_path = file_path
            if topic.language is None:
                topic.language = language.name

        self._assign_scopes(topics, language)
        return topics

    def _parse_comment(
        self,
        comment: PossibleComment,
        lines: List[str],
        language: Language,
        prototype_finder: PrototypeFinder,
        enum_parser: Optional[EnumParser],
    ) -> List[Topic]:
        cleaned = LineFinder.clean(comment.lines, trim_blank_lines=False)
        topics = self.natural_docs_parser.parse(
            cleaned, language, require_header=True, first_line_number=comment.start_line
        )
        if topics:
            self._attach_prototype(topics, comment, lines, language, prototype_finder, enum_parser)
            return topics

        if comment.kind not in (JAVADOC, XML):
            return []
        return self._parse_headerless(comment, cleaned, lines, language, prototype_finder, enum_parser)

    def _attach_prototype(
        self,
        topics: List[Topic],
        comment: PossibleComment,
        lines: List[str],
        language: Language,
        prototype_finder: PrototypeFinder,
        enum_parser: Optional[EnumParser],
    ):
        # 프로토타입은 주석의 마지막 (포함 토픽이 아닌) 토픽에만 붙음
        owners = [topic for topic in topics if not topic.is_embedded]
        if not owners:
            return
        owner = owners[-1]
        enders = language.get_prototype_enders(owner.comment_type)
        found = prototype_finder.find(lines, comment.end_line, enders, owner.title)
        if found is None:
            return

        owner.prototype = found.text
        owner.code_line_number = found.line_number

        if owner.is_enum and enum_parser is not None:
            code_values = enum_parser.parse(found.raw_text, found.line_number)
            if code_values:
                self._merge_enum_values(topics, owner, code_values)

    # ------------------------------------------------------------------
    # 헤더 없는 주석
    # ------------------------------------------------------------------

    def _parse_headerless(
        self,
        comment: PossibleComment,
        cleaned: List[str],
        lines: List[str],
        language: Language,
        prototype_finder: PrototypeFinder,
        enum_parser: Optional[EnumParser],
    ) -> List[Topic]:
        found = prototype_finder.find(lines, comment.end_line, language.all_prototype_enders())
        if found is None:
            logger.debug(f"{comment.start_line}번째 줄 주석 뒤에 코드가 없어 무시합니다")
            return []

        inferred = self._infer_comment_type(found.text)
        if inferred is None:
            return []
        comment_type, title = inferred

        topic = Topic(
            title=title,
            comment_type=comment_type.name,
            is_enum=comment_type.is_enum,
            language=language.name,
            comment_line_number=comment.start_line,
            code_line_number=found.line_number,
        )

        uses_natural_docs = False
        if comment.kind == JAVADOC and has_javadoc_tags(cleaned):
            topic.body = self.javadoc_parser.parse(cleaned)
        elif comment.kind == XML and looks_like_xml(cleaned):
            topic.body = self.xml_parser.parse(cleaned)
        else:
            uses_natural_docs = True
            topic.body = self.natural_docs_parser.parse_body(cleaned, topic, language)
        self.natural_docs_parser.make_summary(topic)

        # 추론한 타입의 종결자로 다시 추출
        refined = prototype_finder.find(
            lines, comment.end_line, language.get_prototype_enders(comment_type.name), title
        )
        if refined is not None:
            found = refined
        topic.prototype = found.text
        topic.code_line_number = found.line_number

        topics = [topic]
        if uses_natural_docs and topic.is_enum:
            topics.extend(self.natural_docs_parser.extract_embedded_topics(topic))
        if topic.is_enum and enum_parser is not None:
            code_values = enum_parser.parse(found.raw_text, found.line_number)
            if code_values:
                self._merge_enum_values(topics, topic, code_values)
        return topics

    def _infer_comment_type(self, prototype: str) -> Optional[Tuple[CommentType, str]]:
        """
        프로토타입으로 주석 타입과 제목을 추론합니다.

        Returns:
            Optional[Tuple[CommentType, str]]: (주석 타입, 제목), 추론할 수 없으면 None
        """
        declaration = _DECLARATION.search(prototype)
        paren = prototype.find("(")

        if declaration and (paren == -1 or declaration.start() < paren):
            keyword = _DECLARATION_KEYWORDS[declaration.group(1)]
            title = declaration.group(2)
        elif paren != -1:
            keyword = "function"
            names = _IDENTIFIER.findall(prototype[:paren])
            if not names:
                return None
            title = names[-1]
        else:
            keyword = "variable"
            head = re.split(r"\s*(?:=|:=)", prototype, maxsplit=1)[0].rstrip(" ;")
            names = _IDENTIFIER.findall(head)
            if not names:
                return None
            title = names[-1]

        entry = self.comment_type_manager.from_keyword(keyword)
        if entry is None:
            logger.debug(f"주석 타입 키워드가 정의되지 않았습니다: {keyword}")
            return None
        return entry[0], title

    # ------------------------------------------------------------------
    # 열거형
    # ------------------------------------------------------------------

    def _merge_enum_values(self, topics: List[Topic], enum_topic: Topic, code_values: List[EnumValue]):
        """
        주석의 값 정의와 코드 본문의 값을 병합합니다.

        주석에 설명된 값이 코드와 같은 순서이면 코드 순서를 따르고, 아니면 주석 순서를 따릅니다.
        주석 설명이 같은 줄 주석 설명보다 우선합니다.
        """
        language = self.language_manager.from_name(enum_topic.language or "")
        normalize = language.normalize_case if language else (lambda text: text)

        start = topics.index(enum_topic) + 1
        end = start
        while end < len(topics) and topics[end].is_embedded:
            end += 1
        documented = topics[start:end]

        by_name: Dict[str, Topic] = {}
        for member in documented:
            by_name.setdefault(normalize(member.title), member)
        code_by_name = {normalize(value.name): value for value in code_values}

        code_positions = [
            index
            for index, value in enumerate(code_values)
            if normalize(value.name) in by_name
        ]
        in_code_order = [
            normalize(code_values[i].name) for i in code_positions
        ] == [normalize(m.title) for m in documented if normalize(m.title) in code_by_name]

        merged: List[Topic] = []
        if in_code_order:
            for value in code_values:
                member = by_name.get(normalize(value.name))
                member = self._member_from_value(enum_topic, value, member)
                if member is not None:
                    merged.append(member)
            merged.extend(m for m in documented if normalize(m.title) not in code_by_name)
        else:
            for member in documented:
                value = code_by_name.get(normalize(member.title))
                merged.append(self._member_from_value(enum_topic, value, member) if value else member)
            for value in code_values:
                if normalize(value.name) not in by_name:
                    member = self._member_from_value(enum_topic, value, None)
                    if member is not None:
                        merged.append(member)

        topics[start:end] = merged
        enum_topic.body = self._rebuild_value_definitions(enum_topic.body, merged)

    def _description_body(self, enum_topic: Topic, description: Optional[str]) -> Optional[str]:
        """열거형 본문 주석 설명을 일반 토픽 본문처럼 NDMarkup 으로 변환합니다."""
        if not description:
            return None
        language = self.language_manager.from_name(enum_topic.language) if enum_topic.language else None
        placeholder = Topic(title="", comment_type=enum_topic.comment_type)
        return self.natural_docs_parser.parse_body(description.split("\n"), placeholder, language)

    def _member_from_value(
        self, enum_topic: Topic, value: EnumValue, member: Optional[Topic]
    ) -> Optional[Topic]:
        if member is not None:
            if not member.body and value.description:
                member.body = self._description_body(enum_topic, value.description)
                self.natural_docs_parser.make_summary(member)
            member.code_line_number = value.line_number
            return member

        if self.documented_only and not value.description:
            return None

        constant = self.comment_type_manager.from_keyword("constant")
        member = Topic(
            title=value.name,
            comment_type=constant[0].name if constant else enum_topic.comment_type,
            body=self._description_body(enum_topic, value.description),
            language=enum_topic.language,
            comment_line_number=enum_topic.comment_line_number,
            code_line_number=value.line_number,
            is_embedded=True,
            access_level=enum_topic.access_level,
            tags=list(enum_topic.tags),
        )
        self.natural_docs_parser.make_summary(member)
        return member

    @staticmethod
    def _rebuild_value_definitions(body: Optional[str], members: List[Topic]) -> Optional[str]:
        """본문의 값 정의 목록을 병합된 순서의 목록 하나로 바꿉니다."""
        remaining = _VALUE_DEFINITIONS.sub("", body or "")
        if not members:
            return remaining or None
        entries = "".join(
            f"<ds>{encode(member.title)}</ds><dd>{member.body or ''}</dd>" for member in members
        )
        return f'{remaining}<h type="values">Values</h><dl>{entries}</dl>'

    # ------------------------------------------------------------------
    # 범위
    # ------------------------------------------------------------------

    def _assign_scopes(self, topics: List[Topic], language: Language):
        """topic_id, 심볼, 컨텍스트, 그룹, 부모 토픽, 앵커를 지정합니다."""
        context = SymbolString()
        scope_owner: Optional[Topic] = None
        group: Optional[str] = None
        container: Optional[Topic] = None
        used_anchors: Dict[str, int] = {}

        for topic_id, topic in enumerate(topics, start=1):
            topic.topic_id = topic_id
            comment_type = self.comment_type_manager.from_name(topic.comment_type)
            title = SymbolString.from_text(topic.title)

            if topic.is_embedded and container is not None:
                symbol_context = self._embedded_context(container, language)
                topic.context = symbol_context.to_export()
                topic.symbol = symbol_context.join(title).to_export()
                topic.parent_id = container.topic_id
                topic.group = container.group
            elif comment_type is not None and comment_type.scope == "always_global":
                topic.context = ""
                topic.symbol = title.to_export()
            elif comment_type is not None and comment_type.scope == "start":
                topic.context = title.parent.to_export()
                topic.symbol = title.to_export()
                context = title
                scope_owner = topic
                group = None
            elif comment_type is not None and comment_type.scope == "end":
                topic.context = ""
                topic.symbol = title.to_export()
                context = SymbolString()
                scope_owner = None
                group = None
            else:
                topic.context = context.to_export()
                topic.symbol = context.join(title).to_export()
                topic.parent_id = scope_owner.topic_id if scope_owner else None
                if comment_type is not None and comment_type.is_group:
                    group = topic.title
                else:
                    topic.group = group

            if not topic.is_embedded:
                container = topic

            identifier = comment_type.simple_identifier if comment_type else "Topic"
            anchor = f"{identifier}:{topic.symbol}"
            count = used_anchors.get(anchor, 0) + 1
            used_anchors[anchor] = count
            topic.anchor = anchor if count == 1 else f"{anchor}-{count}"

    def _embedded_context(self, container: Topic, file_language: Language) -> SymbolString:
        container_symbol = SymbolString.from_export(container.symbol)
        if container.is_list:
            return SymbolString.from_export(container.context)

        language = self.language_manager.from_name(container.language or "") or file_language
        if language.enum_values == "global":
            return SymbolString()
        if language.enum_values == "under_parent":
            return container_symbol.parent
        return container_symbol
