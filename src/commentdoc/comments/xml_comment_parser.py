"""
XML Comment Parser 모듈

"///" 형식의 XML 문서 주석(<summary>, <param> 등)을 lxml 로 읽어 NDMarkup 으로 변환합니다.
형식이 깨진 주석도 복구 파서로 가능한 만큼 읽습니다.
"""

import logging
from typing import List, Optional

from lxml import etree

from .inline_markup import encode, symbol_link, url_link

logger = logging.getLogger(__name__)


def looks_like_xml(lines: List[str]) -> bool:
    """첫 내용 줄이 "<" 로 시작하면 True"""
    for line in lines:
        if line.strip():
            return line.strip().startswith("<")
    return False


def _cref_target(cref: str) -> str:
    """cref 의 "T:", "M:" 같은 접두사와 파라미터를 제거합니다."""
    if len(cref) > 2 and cref[1] == ":":
        cref = cref[2:]
    return cref.split("(", 1)[0]


class ParagraphBuffer:
    """인라인 내용을 모아 <p> 블록으로 내보내는 버퍼"""

    def __init__(self):
        self.output: List[str] = []
        self.current: List[str] = []

    def add_inline(self, markup: str):
        self.current.append(markup)

    def add_text(self, text: Optional[str]):
        if text:
            self.current.append(encode(text))

    def flush(self):
        content = " ".join("".join(self.current).split())
        if content:
            self.output.append(f"<p>{content}</p>")
        self.current = []

    def add_block(self, markup: str):
        self.flush()
        if markup:
            self.output.append(markup)

    def markup(self) -> str:
        self.flush()
        return "".join(self.output)


class XMLCommentParser:
    """
    XML 문서 주석 파서

    주요 기능:
    1. <summary>, <remarks>, <value>, <returns>, <example> 변환
    2. <param>, <typeparam>, <exception> 을 정의 목록으로 변환
    3. <see>, <seealso>, <paramref>, <c>, <code>, <para>, <list> 처리
    """

    def __init__(self):
        self._parser = etree.XMLParser(recover=True, resolve_entities=False)

    def parse(self, lines: List[str]) -> Optional[str]:
        """
        XML 주석 줄을 NDMarkup 으로 변환합니다.

        Args:
            lines: LineFinder 로 정리한 주석 줄

        Returns:
            Optional[str]: NDMarkup, 내용이 없거나 읽을 수 없으면 None
        """
        text = "\n".join(lines)
        try:
            root = etree.fromstring(f"<doc>{text}</doc>".encode("utf-8"), self._parser)
        except etree.XMLSyntaxError as e:
            logger.debug(f"XML 주석 파싱 실패: {e}")
            return None
        if root is None:
            return None

        sections = {
            "summary": [], "remarks": [], "param": [], "typeparam": [], "returns": [],
            "value": [], "exception": [], "example": [], "seealso": [],
        }
        loose = ParagraphBuffer()
        loose.add_text(root.text)
        for child in root:
            if not isinstance(child.tag, str):
                loose.add_text(child.tail)
                continue
            tag = child.tag.lower()
            if tag in sections:
                sections[tag].append(child)
            elif tag in ("include", "inheritdoc"):
                logger.debug(f"지원하지 않는 XML 주석 태그: <{tag}>")
            else:
                self._convert_node(child, loose)
            loose.add_text(child.tail)

        output: List[str] = []
        for element in sections["summary"]:
            output.append(self._convert_block(element))
        output.append(loose.markup())
        for element in sections["remarks"]:
            output.append(self._convert_block(element))

        self._add_definitions(output, "Type Parameters", sections["typeparam"], "name")
        self._add_definitions(output, "Parameters", sections["param"], "name")

        for heading, key in (("Returns", "returns"), ("Value", "value")):
            blocks = "".join(self._convert_block(e) for e in sections[key])
            if blocks:
                output.append(f"<h>{heading}</h>{blocks}")

        self._add_definitions(output, "Exceptions", sections["exception"], "cref")

        for element in sections["example"]:
            blocks = self._convert_block(element)
            if blocks:
                output.append(f"<h>Example</h>{blocks}")

        links = [self._see_link(e) for e in sections["seealso"]]
        links = [link for link in links if link]
        if links:
            output.append(f"<h>See Also</h><p>{', '.join(links)}</p>")

        body = "".join(output)
        return body or None

    def _add_definitions(self, output: List[str], heading: str, elements: list, attribute: str):
        entries = []
        for element in elements:
            name = element.get(attribute, "").strip()
            if not name:
                continue
            if attribute == "cref":
                name = _cref_target(name)
            entries.append(f"<de>{encode(name)}</de><dd>{self._convert_block(element)}</dd>")
        if entries:
            attribute_markup = ' type="parameters"' if heading == "Parameters" else ""
            output.append(f"<h{attribute_markup}>{heading}</h><dl>")
            output.extend(entries)
            output.append("</dl>")

    def _convert_block(self, element) -> str:
        """요소의 내용을 <p> / <pre> / <ul> 블록 NDMarkup 으로 변환합니다."""
        paragraphs = ParagraphBuffer()
        paragraphs.add_text(element.text)
        for child in element:
            self._convert_node(child, paragraphs)
            paragraphs.add_text(child.tail)
        return paragraphs.markup()

    def _convert_node(self, child, paragraphs: ParagraphBuffer):
        if not isinstance(child.tag, str):
            return

        tag = child.tag.lower()
        if tag in ("para", "p", "remarks", "summary", "example"):
            paragraphs.add_block(self._convert_block(child))
        elif tag == "code":
            paragraphs.add_block(self._convert_code(child))
        elif tag == "list":
            paragraphs.add_block(self._convert_list(child))
        elif tag in ("see", "seealso"):
            paragraphs.add_inline(self._see_link(child))
        elif tag in ("paramref", "typeparamref"):
            paragraphs.add_text(child.get("name", ""))
        elif tag in ("b", "strong"):
            paragraphs.add_inline(f"<b>{encode(''.join(child.itertext()))}</b>")
        elif tag in ("i", "em"):
            paragraphs.add_inline(f"<u>{encode(''.join(child.itertext()))}</u>")
        else:
            # <c> 및 알 수 없는 태그는 텍스트만 사용
            paragraphs.add_text("".join(child.itertext()))

    @staticmethod
    def _convert_code(element) -> str:
        lines = "".join(element.itertext()).split("\n")
        while lines and not lines[0].strip():
            lines.pop(0)
        while lines and not lines[-1].strip():
            lines.pop()
        if not lines:
            return ""
        indent = min(len(line) - len(line.lstrip()) for line in lines if line.strip())
        return '<pre type="code">' + "<br>".join(encode(line[indent:].rstrip()) for line in lines) + "</pre>"

    def _convert_list(self, element) -> str:
        list_type = element.get("type", "bullet").lower()
        items = [child for child in element if isinstance(child.tag, str) and child.tag.lower() == "item"]
        if not items:
            return ""

        if list_type == "table":
            entries = []
            for item in items:
                term = item.find("term")
                description = item.find("description")
                term_text = " ".join("".join(term.itertext()).split()) if term is not None else ""
                entries.append(
                    f"<de>{encode(term_text)}</de>"
                    f"<dd>{self._convert_block(description) if description is not None else ''}</dd>"
                )
            return "<dl>" + "".join(entries) + "</dl>"

        rendered = []
        for item in items:
            description = item.find("description")
            term = item.find("term")
            content = self._convert_block(description if description is not None else item)
            if term is not None and description is not None:
                term_text = encode(" ".join("".join(term.itertext()).split()))
                content = f"<p><b>{term_text}</b></p>{content}"
            if content:
                rendered.append(f"<li>{content}</li>")
        # 번호 목록도 글머리 목록으로 출력
        return "<ul>" + "".join(rendered) + "</ul>" if rendered else ""

    @staticmethod
    def _see_link(element) -> str:
        text = " ".join("".join(element.itertext()).split())
        cref = element.get("cref")
        href = element.get("href")
        langword = element.get("langword")

        if href:
            return url_link(href, text or None)
        if cref:
            target = _cref_target(cref)
            if text:
                return symbol_link(f"<{text}: {target}>")
            return symbol_link(f"<{target}>")
        if langword:
            return encode(langword)
        return encode(text)
