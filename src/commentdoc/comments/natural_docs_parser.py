"""
Natural Docs Parser 모듈

"Function: Name" 형식의 토픽 라인으로 시작하는 주석을 토픽 목록으로 변환하고,
본문을 NDMarkup 으로 변환합니다.

NDMarkup 태그:
    <p>, <h [type="parameters"|"values"]>, <ul><li>, <dl><de|ds><dd>,
    <pre [type="code"|"prototype"] [language="..."]> (줄 구분 <br>),
    <b>, <u>, <link type="naturaldocs|url|email" ...>
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from commentdoc.comment_types import CommentType, CommentTypeManager
from commentdoc.languages import Language, LanguageManager
from commentdoc.models import Topic

from .inline_markup import decode, encode, format_inline
from .line_finder import is_horizontal_line

logger = logging.getLogger(__name__)

START_BLOCK_KEYWORDS = ("start", "begin")
END_BLOCK_KEYWORD = "end"
BLOCK_TYPES = ("code", "text", "prototype")

HEADING_TYPES = {
    "parameters": "parameters",
    "params": "parameters",
    "arguments": "parameters",
    "args": "parameters",
    "values": "values",
}

_LINE_ENDS_SENTENCE = re.compile(r"[.?!][*_]?[)\"”]?$")
_HORIZONTAL_TAG_LINE = re.compile(r"^([-=_])\1{2,}\s*(.*?)\s*(?:\1{3,})?$")
_END_HORIZONTAL_LINE = re.compile(r"^([-=_])\1{2,}$")
_BULLET_LINE = re.compile(r"^([-*+]|o)\s+(\S.*)$")
_DEFINITION_LINE = re.compile(r"^(\S.*?)\s+-\s+(\S.*)$")
_EMBEDDED_ENTRY = re.compile(r"<ds>(.*?)</ds><dd>(.*?)</dd>", re.DOTALL)
_SENTENCE_BREAK = re.compile(r"(?<=[.?!])[)\"”]?\s+(?=[A-Z0-9<\"(])")


@dataclass
class TopicLine:
    """
    토픽 라인 분석 결과

    Attributes:
        comment_type: 키워드에 해당하는 주석 타입
        is_plural: 복수 키워드 여부 (목록 토픽)
        title: 콜론 뒤 제목
        access_level: 키워드 앞 접근 제한자 태그
        language: 키워드 앞 언어 이름 태그
    """

    comment_type: CommentType
    is_plural: bool
    title: str
    access_level: Optional[str] = None
    language: Optional[Language] = None


@dataclass
class BlockTag:
    """코드 블록 시작 줄 분석 결과 (block_char 는 "(" 또는 수평선 문자)"""

    block_char: str
    block_type: str
    language: Optional[Language] = None


def _indent(line: str) -> int:
    return len(line) - len(line.lstrip())


class NaturalDocsParser:
    """
    Natural Docs 형식 주석 파서

    주요 기능:
    1. 토픽 라인 인식 (접근 제한자/언어 태그, 복수 키워드)
    2. 한 주석 안의 여러 토픽 분리 (빈 줄 다음의 토픽 라인만 인정)
    3. 본문 마크업 -> NDMarkup 변환 (문단, 제목, 목록, 정의 목록, 코드 블록)
    4. 요약 생성 및 목록/열거형 항목의 포함 토픽 추출
    """

    def __init__(
        self,
        comment_type_manager: CommentTypeManager,
        language_manager: Optional[LanguageManager] = None,
    ):
        """
        NaturalDocsParser 초기화

        Args:
            comment_type_manager: 키워드 해석에 사용할 주석 타입 관리자
            language_manager: "(start Perl code)" 와 같은 언어 태그 해석용 (없으면 언어 태그 무시)
        """
        self.comment_type_manager = comment_type_manager
        self.language_manager = language_manager

    # ------------------------------------------------------------------
    # 주석 -> 토픽
    # ------------------------------------------------------------------

    def parse(
        self,
        lines: List[str],
        language: Optional[Language] = None,
        require_header: bool = True,
        first_line_number: int = 1,
    ) -> List[Topic]:
        """
        정리된 주석 줄을 토픽 목록으로 변환합니다.

        Args:
            lines: LineFinder 로 장식을 제거한 주석 줄
            language: 주석이 속한 소스 파일의 언어
            require_header: True이면 첫 줄이 토픽 라인이 아닌 주석은 무시
            first_line_number: lines[0] 의 소스 줄 번호

        Returns:
            List[Topic]: 토픽 목록. 헤더 없는 주석은 제목과 타입이 빈 토픽 하나
        """
        start = 0
        while start < len(lines) and self._is_blank(lines[start]):
            start += 1
        if start == len(lines):
            return []

        first_topic_line = self.parse_topic_line(lines[start])
        if first_topic_line is None and require_header:
            return []

        # (토픽 라인 인덱스, 분석 결과)
        sections: List[Tuple[int, Optional[TopicLine]]] = [(start, first_topic_line)]
        block_char: Optional[str] = None
        prev_line_blank = False

        for index in range(start + 1, len(lines)):
            line = lines[index]

            if block_char is not None:
                if self.parse_end_block_line(line) == block_char:
                    block_char = None
                continue

            block_tag = self.parse_start_block_line(line)
            if block_tag is not None:
                block_char = block_tag.block_char
                prev_line_blank = False
                continue

            if self._is_blank(line):
                prev_line_blank = True
                continue

            if prev_line_blank:
                topic_line = self.parse_topic_line(line)
                if topic_line is not None:
                    sections.append((index, topic_line))
            prev_line_blank = False

        topics: List[Topic] = []
        for position, (index, topic_line) in enumerate(sections):
            end = sections[position + 1][0] if position + 1 < len(sections) else len(lines)
            if topic_line is None:
                topic = Topic(title="", comment_type="")
                body_lines = lines[index:end]
            else:
                topic = Topic(
                    title=topic_line.title,
                    comment_type=topic_line.comment_type.name,
                    is_list=topic_line.is_plural,
                    is_enum=topic_line.comment_type.is_enum and not topic_line.is_plural,
                    access_level=topic_line.access_level,
                )
                body_lines = lines[index + 1:end]

            topic.comment_line_number = first_line_number + index
            topic.code_line_number = topic.comment_line_number
            tagged_language = topic_line.language if topic_line else None
            if tagged_language is not None:
                topic.language = tagged_language.name
            elif language is not None:
                topic.language = language.name

            topic.body = self.parse_body(body_lines, topic, tagged_language or language)
            self.make_summary(topic)
            topics.append(topic)
            if topic_line is not None:
                topics.extend(self.extract_embedded_topics(topic))

        return topics

    def parse_topic_line(self, line: str) -> Optional[TopicLine]:
        """
        "Keyword: Title" 형식의 토픽 라인을 분석합니다.

        콜론 바로 앞은 공백이 아니어야 하고, 콜론 뒤에는 공백과 제목이 와야 합니다.
        키워드 앞 단어는 모두 접근 제한자 또는 언어 이름이어야 합니다
        (예: "Protected Internal Function: Foo", "Perl Function: Bar").

        Args:
            line: 주석 줄

        Returns:
            Optional[TopicLine]: 토픽 라인이 아니면 None
        """
        colon = line.find(":")
        if colon <= 0 or line[colon - 1].isspace():
            return None

        after = line[colon + 1:]
        if not after or not after[0].isspace():
            return None
        title = " ".join(after.split())
        if not title:
            return None

        words = line[:colon].split()
        for first_keyword_word in range(len(words)):
            match = self.comment_type_manager.from_keyword(" ".join(words[first_keyword_word:]))
            if match is None:
                continue

            tags = self._parse_tags(words[:first_keyword_word])
            if tags is None:
                continue

            comment_type, is_plural = match
            access_level, language = tags
            return TopicLine(comment_type, is_plural, title, access_level, language)

        return None

    def _parse_tags(self, words: List[str]) -> Optional[Tuple[Optional[str], Optional[Language]]]:
        access_level: Optional[str] = None
        language: Optional[Language] = None
        index = 0

        while index < len(words):
            matched = False

            if access_level is None:
                for count in (2, 1):
                    if index + count > len(words):
                        continue
                    level = CommentTypeManager.access_level(" ".join(words[index:index + count]))
                    if level:
                        access_level = level
                        index += count
                        matched = True
                        break

            if not matched and language is None and self.language_manager is not None:
                for end in range(len(words), index, -1):
                    found = self.language_manager.from_name(" ".join(words[index:end]))
                    if found is not None:
                        language = found
                        index = end
                        matched = True
                        break

            if not matched:
                return None

        return access_level, language

    # ------------------------------------------------------------------
    # 코드 블록 태그
    # ------------------------------------------------------------------

    def parse_start_block_line(self, line: str) -> Optional[BlockTag]:
        """
        코드 블록 시작 줄을 분석합니다.

        인식 형식: "(start code)", "(code)", "(Perl)", "(start Perl code)",
        "(start text)", "--- code", "==== Perl ===="
        """
        stripped = line.strip()

        content = self._paren_tag_content(stripped)
        if content is not None:
            words = content.lower().split()
            original = content.split()
            if words and words[0] in START_BLOCK_KEYWORDS:
                words, original = words[1:], original[1:]
            if not words:
                return None
            return self._block_tag("(", words, original)

        match = _HORIZONTAL_TAG_LINE.match(stripped)
        if match and match.group(2):
            content = match.group(2)
            words = content.lower().split()
            original = content.split()
            if words[0] in START_BLOCK_KEYWORDS:
                words, original = words[1:], original[1:]
            if not words:
                return None
            return self._block_tag(match.group(1), words, original)

        return None

    def parse_end_block_line(self, line: str) -> Optional[str]:
        """
        코드 블록 종료 줄이면 블록 문자("(" 또는 수평선 문자)를 반환합니다.

        인식 형식: "(end)", "(end code)", "(end Perl code)", "---", "====="
        """
        stripped = line.strip()

        match = _END_HORIZONTAL_LINE.match(stripped)
        if match:
            return match.group(1)

        content = self._paren_tag_content(stripped)
        if content is not None:
            words = content.lower().split()
            if words and words[0] == END_BLOCK_KEYWORD:
                if len(words) == 1 or self._block_tag("(", words[1:], content.split()[1:]):
                    return "("

        return None

    @staticmethod
    def _paren_tag_content(stripped: str) -> Optional[str]:
        if len(stripped) < 3 or stripped[0] != "(" or stripped[-1] != ")":
            return None
        content = stripped[1:-1]
        if "(" in content or ")" in content:
            return None
        if content[0].isspace() or content[-1].isspace():
            return None
        return content

    def _block_tag(self, block_char: str, words: List[str], original: List[str]) -> Optional[BlockTag]:
        block_type = "code"
        language_words = original
        if words[-1] in BLOCK_TYPES:
            block_type = words[-1]
            language_words = original[:-1]

        language = None
        if language_words:
            if self.language_manager is None:
                return None
            language = self.language_manager.from_name(" ".join(language_words))
            if language is None:
                return None

        return BlockTag(block_char, block_type, language)

    # ------------------------------------------------------------------
    # 본문
    # ------------------------------------------------------------------

    @staticmethod
    def _is_blank(line: str) -> bool:
        return not line.strip() or is_horizontal_line(line)

    def parse_heading(self, line: str) -> Optional[Tuple[str, Optional[str]]]:
        """
        제목 줄을 분석합니다.

        "Heading:" 는 각 단어가 대문자(또는 기호/숫자)로 시작해야 하며, 처음과 끝이 아닌
        4글자 이하 소문자 단어("of", "the")는 허용됩니다. "heading::" 는 항상 제목입니다.

        Returns:
            Optional[Tuple[str, Optional[str]]]: (제목 텍스트, 특수 제목 타입), 아니면 None
        """
        stripped = line.strip()
        if len(stripped) < 2 or not stripped.endswith(":"):
            return None

        if stripped.endswith("::"):
            text = stripped[:-2]
            if not text or text[-1].isspace() or text.endswith(":"):
                return None
        else:
            text = stripped[:-1]
            if text[-1].isspace():
                return None
            words = text.split()
            for index, word in enumerate(words):
                if word[0].islower():
                    if index == 0 or index == len(words) - 1 or len(word) > 4:
                        return None

        heading_type = HEADING_TYPES.get(" ".join(text.lower().split()))
        return text.strip(), heading_type

    @staticmethod
    def parse_bullet_line(line: str) -> Optional[Tuple[str, int]]:
        match = _BULLET_LINE.match(line.strip())
        if match is None:
            return None
        return match.group(2), _indent(line)

    @staticmethod
    def parse_definition_line(line: str) -> Optional[Tuple[str, str, int]]:
        match = _DEFINITION_LINE.match(line.strip())
        if match is None:
            return None
        return match.group(1), match.group(2), _indent(line)

    @staticmethod
    def parse_standalone_preformatted_line(line: str) -> Optional[Tuple[str, str]]:
        """
        ">", "|", ":" 로 시작하는 한 줄 코드를 분석합니다.

        Returns:
            Optional[Tuple[str, str]]: (선행 문자, 선행 문자를 공백으로 바꾼 줄)
        """
        stripped = line.lstrip()
        if not stripped or stripped[0] not in ":|>":
            return None
        if len(stripped) > 1 and not stripped[1].isspace():
            return None
        return stripped[0], " " * (_indent(line) + 1) + stripped[1:]

    def parse_body(
        self,
        lines: List[str],
        topic: Topic,
        language: Optional[Language] = None,
    ) -> Optional[str]:
        """
        토픽 본문 줄을 NDMarkup 으로 변환합니다.

        Args:
            lines: 본문 줄 (토픽 라인 제외)
            topic: 정의 목록 항목을 <ds> 로 만들지 결정하는 데 사용 (is_enum, is_list)
            language: 태그 없는 코드 블록의 기본 언어

        Returns:
            Optional[str]: NDMarkup, 내용이 없으면 None
        """
        state = _BodyState()
        index = 0

        while index < len(lines):
            line = lines[index]

            block_tag = self.parse_start_block_line(line)
            if block_tag is not None:
                state.close_all()
                index += 1
                code_lines: List[str] = []
                while index < len(lines):
                    if self.parse_end_block_line(lines[index]) == block_tag.block_char:
                        index += 1
                        break
                    next_tag = self.parse_start_block_line(lines[index])
                    if next_tag is not None and next_tag.block_char == block_tag.block_char:
                        break
                    code_lines.append(lines[index])
                    index += 1
                state.add_code_block(code_lines, block_tag)
                state.prev_line_blank = False
                continue

            preformatted = self.parse_standalone_preformatted_line(line)
            if preformatted is not None:
                state.close_all()
                leading, _ = preformatted
                code_lines = []
                while index < len(lines):
                    next_line = self.parse_standalone_preformatted_line(lines[index])
                    if next_line is None or next_line[0] != leading:
                        break
                    code_lines.append(next_line[1])
                    index += 1
                state.add_code_block(code_lines, None)
                state.prev_line_blank = False
                continue

            bullet = None
            if state.prev_line_blank or state.bullet_indents:
                bullet = self.parse_bullet_line(line)
            if bullet is not None:
                state.add_bullet(*bullet)
                index += 1
                continue

            definition = None
            if state.prev_line_blank or state.definition_indent != -1:
                definition = self.parse_definition_line(line)
            if definition is not None:
                left, right, indent = definition
                is_symbol = topic.is_enum or (topic.is_list and state.last_heading_type != "parameters")
                state.add_definition(left, right, indent, is_symbol)
                index += 1
                continue

            heading = self.parse_heading(line) if state.prev_line_blank else None
            if heading is not None:
                state.add_heading(*heading)
                index += 1
                continue

            if self._is_blank(line):
                state.close_paragraph()
                state.prev_line_blank = True
                index += 1
                continue

            state.add_text_line(line)
            index += 1

        state.close_all()
        body = "".join(state.body)
        return body or None

    # ------------------------------------------------------------------
    # 요약 / 포함 토픽
    # ------------------------------------------------------------------

    @staticmethod
    def make_summary(topic: Topic) -> bool:
        """
        본문 첫 문단의 첫 문장으로 요약을 만듭니다.

        첫 문단 앞에는 제목과 프로토타입 블록만 올 수 있습니다.

        Returns:
            bool: 요약을 만들었으면 True
        """
        if not topic.body:
            return False

        body = topic.body
        position = 0
        while position < len(body):
            if body.startswith("<h", position):
                position = body.index("</h>", position) + len("</h>")
            elif body.startswith('<pre type="prototype"', position):
                position = body.index("</pre>", position) + len("</pre>")
            elif body.startswith("<p>", position):
                end = body.index("</p>", position)
                paragraph = body[position + len("<p>"):end]
                topic.summary = _first_sentence(paragraph)
                return True
            else:
                break
        return False

    def extract_embedded_topics(self, topic: Topic) -> List[Topic]:
        """
        목록/열거형 토픽 본문의 <ds> 항목을 별도 토픽으로 추출합니다.

        열거형 항목은 "Constant" 타입, 목록 항목은 목록과 같은 타입이 됩니다.

        Returns:
            List[Topic]: 본문 순서대로의 포함 토픽
        """
        if not topic.body or (not topic.is_list and not topic.is_enum):
            return []

        embedded_type = topic.comment_type
        if topic.is_enum and not topic.is_list:
            constant = self.comment_type_manager.from_keyword("constant")
            if constant is not None:
                embedded_type = constant[0].name

        embedded: List[Topic] = []
        for match in _EMBEDDED_ENTRY.finditer(topic.body):
            title = " ".join(decode(match.group(1)).split())
            if not title:
                continue
            member = Topic(
                title=title,
                comment_type=embedded_type,
                body=match.group(2) or None,
                language=topic.language,
                comment_line_number=topic.comment_line_number,
                code_line_number=topic.comment_line_number,
                is_embedded=True,
                access_level=topic.access_level,
                tags=list(topic.tags),
            )
            self.make_summary(member)
            embedded.append(member)

        return embedded


def _first_sentence(paragraph: str) -> str:
    """태그 밖이면서 열린 <b>/<u> 가 없는 첫 문장 경계에서 자릅니다."""
    for match in _SENTENCE_BREAK.finditer(paragraph):
        before = paragraph[:match.start()]
        if before.count("<") != before.count(">"):
            continue
        opened = len(re.findall(r"<[bu]>", before)) - len(re.findall(r"</[bu]>", before))
        if opened == 0:
            return paragraph[:match.end()].rstrip()
    return paragraph


class _BodyState:
    """parse_body 진행 중 열린 블록 상태"""

    def __init__(self):
        self.body: List[str] = []
        self.paragraph: List[str] = []
        self.prev_line_ends_sentence = False
        self.prev_line_blank = True
        self.definition_indent = -1
        self.bullet_indents: List[int] = []
        self.last_heading_type: Optional[str] = None

    def close_paragraph(self):
        if self.paragraph:
            self.body.append(format_inline("".join(self.paragraph)))
            self.body.append("</p>")
            self.paragraph = []

    def close_all(self):
        self.close_paragraph()
        if self.definition_indent != -1:
            self.body.append("</dd></dl>")
            self.definition_indent = -1
        for _ in self.bullet_indents:
            self.body.append("</li></ul>")
        self.bullet_indents = []

    def _start_paragraph_text(self, text: str):
        self.paragraph.append(text)
        self.prev_line_ends_sentence = bool(_LINE_ENDS_SENTENCE.search(text))
        self.prev_line_blank = False

    def add_code_block(self, raw_lines: List[str], block_tag: Optional[BlockTag]):
        lines = [line.rstrip() for line in raw_lines]
        while lines and not lines[0].strip():
            lines.pop(0)
        while lines and not lines[-1].strip():
            lines.pop()
        if not lines:
            return

        shared_indent = min(_indent(line) for line in lines if line.strip())
        content = "<br>".join(encode(line[shared_indent:]) for line in lines)

        if block_tag is None:
            self.body.append(f"<pre>{content}</pre>")
            return

        attributes = ""
        if block_tag.block_type == "code":
            attributes = ' type="code"'
        elif block_tag.block_type == "prototype":
            attributes = ' type="prototype"'
        if block_tag.block_type != "text" and block_tag.language is not None:
            attributes += f' language="{encode(block_tag.language.name)}"'
        self.body.append(f"<pre{attributes}>{content}</pre>")

    def add_bullet(self, text: str, indent: int):
        if not self.bullet_indents:
            self.close_all()
            self.bullet_indents.append(indent)
            self.body.append("<ul><li><p>")
        else:
            self.close_paragraph()
            if indent >= self.bullet_indents[-1] + 2:
                self.body.append("<ul><li><p>")
                self.bullet_indents.append(indent)
            else:
                while len(self.bullet_indents) >= 2 and indent <= self.bullet_indents[-2]:
                    self.body.append("</li></ul>")
                    self.bullet_indents.pop()
                # 위아래 두 단계 사이면 더 가까운 쪽으로, 같으면 바깥쪽으로
                if (
                    len(self.bullet_indents) >= 2
                    and indent - self.bullet_indents[-2] <= self.bullet_indents[-1] - indent
                ):
                    self.body.append("</li></ul>")
                    self.bullet_indents.pop()
                self.bullet_indents[-1] = indent
                self.body.append("</li><li><p>")

        self._start_paragraph_text(text)

    def add_definition(self, left: str, right: str, indent: int, is_symbol: bool):
        if self.definition_indent == -1:
            self.close_all()
            self.definition_indent = indent
            self.body.append("<dl>")
        else:
            self.close_paragraph()
            self.body.append("</dd>")

        tag = "ds" if is_symbol else "de"
        self.body.append(f"<{tag}>{format_inline(left)}</{tag}><dd><p>")
        self._start_paragraph_text(right)

    def add_heading(self, text: str, heading_type: Optional[str]):
        self.close_all()
        attribute = f' type="{heading_type}"' if heading_type else ""
        self.body.append(f"<h{attribute}>{format_inline(text)}</h>")
        # 제목 바로 다음 줄은 빈 줄 다음처럼 취급
        self.prev_line_blank = True
        self.last_heading_type = heading_type

    def add_text_line(self, line: str):
        if self.paragraph:
            self.paragraph.append("  " if self.prev_line_ends_sentence else " ")
        else:
            indent = _indent(line)
            if self.definition_indent != -1:
                if indent < self.definition_indent + 2:
                    self.close_all()
            elif self.bullet_indents:
                while self.bullet_indents and indent < self.bullet_indents[-1] + 2:
                    self.body.append("</li></ul>")
                    self.bullet_indents.pop()
            self.body.append("<p>")

        self._start_paragraph_text(line.strip())
