"""
Javadoc Parser 모듈

"/** ... */" 형식의 Javadoc 주석 본문을 NDMarkup 으로 변환합니다.
Javadoc 주석은 헤더가 없으므로 제목과 타입은 뒤따르는 코드에서 추론합니다.
설명 부분의 HTML 은 lxml.html 조각으로 읽어 요소 단위로 변환합니다.
"""

import html
import logging
import re
from collections import OrderedDict
from typing import Dict, List, Optional, Tuple

import lxml.html

from .inline_markup import encode, symbol_link, url_link
from .xml_comment_parser import ParagraphBuffer

logger = logging.getLogger(__name__)

_BLOCK_TAG = re.compile(r"^@(\w+)\s*(.*)$")
_INLINE_TAG = re.compile(r"\{@(\w+)\s*([^}]*)\}")
_BLANK_LINE = re.compile(r"\n[ \t]*\n")

_BOLD_TAGS = {"b", "strong"}
_UNDERLINE_TAGS = {"i", "em", "u", "cite", "var"}
_LIST_TAGS = {"ul", "ol"}
_PARAGRAPH_TAGS = {"p", "div", "blockquote", "dl", "dt", "dd"}

# 출력 순서와 제목
SECTION_HEADINGS = OrderedDict(
    [
        ("param", "Parameters"),
        ("return", "Returns"),
        ("throws", "Exceptions"),
        ("since", "Since"),
        ("deprecated", "Deprecated"),
        ("author", "Author"),
        ("version", "Version"),
        ("see", "See Also"),
    ]
)

_TAG_ALIASES = {"returns": "return", "exception": "throws"}
_DEFINITION_TAGS = {"param", "throws"}


def has_javadoc_tags(lines: List[str]) -> bool:
    """줄 맨 앞의 @태그 또는 인라인 {@태그} 가 있으면 True"""
    for line in lines:
        stripped = line.strip()
        if _BLOCK_TAG.match(stripped) or "{@" in stripped:
            return True
    return False


def _link_target(reference: str) -> str:
    """Javadoc 참조를 심볼로 바꿉니다 (Foo#bar(int) -> Foo.bar)."""
    reference = reference.split("(", 1)[0]
    return reference.lstrip("#").replace("#", ".")


class JavadocParser:
    """
    Javadoc 주석 파서

    주요 기능:
    1. 설명 부분의 HTML (<p>, <pre>, <ul>, <b>, <i>) 변환
    2. 블록 태그 (@param, @return, @throws, @see, @since, @deprecated) 를 제목과 정의 목록으로 변환
    3. 인라인 태그 ({@link}, {@linkplain}, {@code}, {@literal}) 변환
    """

    def parse(self, lines: List[str]) -> Optional[str]:
        """
        Javadoc 주석 줄을 NDMarkup 으로 변환합니다.

        Args:
            lines: LineFinder 로 정리한 주석 줄

        Returns:
            Optional[str]: NDMarkup, 내용이 없으면 None
        """
        description, tags = self._split_tags(lines)

        output: List[str] = [self._convert_description(description)]
        for tag, heading in SECTION_HEADINGS.items():
            entries = tags.get(tag)
            if not entries:
                continue

            output.append(f"<h>{heading}</h>")
            if tag in _DEFINITION_TAGS:
                output.append("<dl>")
                for entry in entries:
                    name, _, text = entry.partition(" ")
                    if tag == "throws":
                        name = _link_target(name)
                    output.append(f"<de>{encode(name)}</de><dd>")
                    output.append(self._convert_description(text) if text.strip() else "")
                    output.append("</dd>")
                output.append("</dl>")
            elif tag == "see":
                output.append("<p>")
                output.append(", ".join(self._see_reference(entry) for entry in entries))
                output.append("</p>")
            else:
                for entry in entries:
                    output.append(self._convert_description(entry))

        body = "".join(output)
        return body or None

    @staticmethod
    def _split_tags(lines: List[str]) -> Tuple[str, Dict[str, List[str]]]:
        description: List[str] = []
        tags: Dict[str, List[str]] = {}
        current: Optional[List[str]] = None
        current_tag = ""

        def flush():
            if current is not None:
                tags.setdefault(current_tag, []).append("\n".join(current).strip())

        for line in lines:
            match = _BLOCK_TAG.match(line.strip())
            if match:
                flush()
                current_tag = _TAG_ALIASES.get(match.group(1).lower(), match.group(1).lower())
                if current_tag not in SECTION_HEADINGS:
                    logger.debug(f"지원하지 않는 Javadoc 태그: @{match.group(1)}")
                current = [match.group(2)]
            elif current is not None:
                current.append(line)
            else:
                description.append(line)
        flush()

        return "\n".join(description), tags

    @staticmethod
    def _see_reference(entry: str) -> str:
        entry = entry.strip()
        if entry.startswith("<a"):
            anchor = lxml.html.fragment_fromstring(entry, create_parent="div").find("a")
            if anchor is not None and anchor.get("href"):
                return url_link(anchor.get("href"), " ".join(anchor.text_content().split()) or None)
        if entry.startswith('"'):
            return encode(entry.strip('"'))
        reference, _, label = entry.partition(" ")
        target = _link_target(reference)
        if label.strip():
            return symbol_link(f"<{label.strip()}: {target}>")
        return symbol_link(f"<{target}>")

    @staticmethod
    def _expand_inline_tags(text: str) -> str:
        """{@link}, {@code} 같은 인라인 태그를 HTML 요소로 바꿔 설명과 함께 읽게 합니다."""

        def replace(match) -> str:
            name, argument = match.group(1).lower(), match.group(2).strip()
            if name in ("link", "linkplain"):
                reference, _, label = argument.partition(" ")
                target = html.escape(_link_target(reference))
                return f'<a data-link="{target}">{html.escape(label.strip())}</a>'
            if name in ("code", "literal", "value"):
                return f"<code>{html.escape(argument)}</code>"
            logger.debug(f"지원하지 않는 Javadoc 인라인 태그: {{@{match.group(1)}}}")
            return ""

        return _INLINE_TAG.sub(replace, text)

    def _convert_description(self, text: str) -> str:
        if not text.strip():
            return ""
        root = lxml.html.fragment_fromstring(self._expand_inline_tags(text), create_parent="div")
        return self._convert_block(root)

    def _convert_block(self, element) -> str:
        """요소의 내용을 <p> / <pre> / <ul> 블록 NDMarkup 으로 변환합니다."""
        paragraphs = ParagraphBuffer()
        self._add_text(paragraphs, element.text)
        for child in element:
            self._convert_node(child, paragraphs)
            self._add_text(paragraphs, child.tail)
        return paragraphs.markup()

    @staticmethod
    def _add_text(paragraphs: ParagraphBuffer, text: Optional[str]):
        # HTML 밖의 빈 줄도 문단 구분
        for index, part in enumerate(_BLANK_LINE.split(text or "")):
            if index:
                paragraphs.flush()
            paragraphs.add_text(part)

    def _convert_node(self, child, paragraphs: ParagraphBuffer):
        if not isinstance(child.tag, str):
            return

        tag = child.tag.lower()
        if tag in _PARAGRAPH_TAGS:
            paragraphs.add_block(self._convert_block(child))
        elif tag == "pre":
            paragraphs.add_block(self._convert_pre(child))
        elif tag in _LIST_TAGS:
            paragraphs.add_block(self._convert_list(child))
        elif tag == "li":
            # 목록 밖에 홀로 놓인 <li>
            paragraphs.add_block(self._convert_list([child]))
        else:
            paragraphs.add_inline(self._convert_inline(child))

    def _convert_inline(self, element) -> str:
        if not isinstance(element.tag, str):
            return ""
        tag = element.tag.lower()
        if tag == "br":
            return " "
        if tag == "a" and element.get("data-link") is not None:
            target = element.get("data-link")
            label = " ".join(element.text_content().split())
            return symbol_link(f"<{label}: {target}>" if label else f"<{target}>")
        if tag == "a" and element.get("href"):
            return url_link(element.get("href"), " ".join(element.text_content().split()) or None)

        content = [encode(element.text or "")]
        for child in element:
            content.append(self._convert_inline(child))
            content.append(encode(child.tail or ""))
        inner = "".join(content)

        if tag in _BOLD_TAGS:
            return f"<b>{inner}</b>"
        if tag in _UNDERLINE_TAGS:
            return f"<u>{inner}</u>"
        return inner

    @staticmethod
    def _convert_pre(element) -> str:
        lines = element.text_content().split("\n")
        while lines and not lines[0].strip():
            lines.pop(0)
        while lines and not lines[-1].strip():
            lines.pop()
        if not lines:
            return ""

        indent = min(len(line) - len(line.lstrip()) for line in lines if line.strip())
        return '<pre type="code">' + "<br>".join(encode(line[indent:].rstrip()) for line in lines) + "</pre>"

    def _convert_list(self, items) -> str:
        # 번호 목록도 글머리 목록으로 출력
        rendered = []
        for item in items:
            if not isinstance(item.tag, str) or item.tag.lower() != "li":
                continue
            content = self._convert_block(item)
            if content:
                rendered.append(f"<li>{content}</li>")
        return "<ul>" + "".join(rendered) + "</ul>" if rendered else ""
