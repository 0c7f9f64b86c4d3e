"""
Formatted Text 모듈

NDMarkup 본문을 HTML 조각으로 변환합니다.

- <p>, <h>, <ul>/<li>, <dl>/<de>/<ds>/<dd> -> 문단, 제목, 목록, 정의 표
- <pre type="code" language="..."> -> 구문 강조된 코드 블록
- <link type="naturaldocs"> -> 해석된 토픽 링크 (해석 실패 시 원문 텍스트)
- <link type="url">, <link type="email"> -> 외부 링크
"""

import html
import logging
import re
from typing import Callable, Dict, List, Optional

from commentdoc.languages import Language, LanguageManager
from commentdoc.links import LinkResolver
from commentdoc.models import Topic

from .syntax_highlighter import TEXT, SyntaxHighlighter

logger = logging.getLogger(__name__)

_TAG = re.compile(r"<(/?)([a-z]+)((?:\s+[a-z]+=\"[^\"]*\")*)\s*/?>")
_ATTRIBUTE = re.compile(r"([a-z]+)=\"([^\"]*)\"")

_SIMPLE_TAGS = {
    "p": ('<p class="CParagraph">', "</p>"),
    "b": ("<b>", "</b>"),
    "u": ("<u>", "</u>"),
    "ul": ('<ul class="CBulletList">', "</ul>"),
    "li": ("<li>", "</li>"),
    "dl": ('<table class="CDefinitionList">', "</table>"),
    "de": ('<tr><td class="CDLEntry">', "</td>"),
    "dd": ('<td class="CDLDefinition">', "</td></tr>"),
}

_HIGHLIGHT_CLASSES = {
    "comment": "SHComment",
    "string": "SHString",
    "number": "SHNumber",
    "keyword": "SHKeyword",
}


def _attributes(text: str) -> Dict[str, str]:
    return {name: html.unescape(value) for name, value in _ATTRIBUTE.findall(text)}


class FormattedText:
    """
    NDMarkup -> HTML 변환기

    주요 기능:
    1. 블록/인라인 태그 변환
    2. 심볼 링크 해석 (현재 토픽 컨텍스트 기준)
    3. 코드 블록 구문 강조 (태그 없는 코드 블록은 파일 언어 사용)
    4. 열거형/목록 항목(<ds>) 앵커 생성
    """

    def __init__(
        self,
        resolver: Optional[LinkResolver] = None,
        language_manager: Optional[LanguageManager] = None,
        highlight_code: bool = True,
        href_for: Optional[Callable[[Topic], str]] = None,
    ):
        """
        FormattedText 초기화

        Args:
            resolver: 심볼 링크 해석기 (None이면 모든 심볼 링크를 텍스트로 출력)
            language_manager: <pre language="..."> 언어 조회용
            highlight_code: False이면 코드 블록을 강조하지 않음
            href_for: 토픽의 링크 주소를 만드는 함수 (기본값: "#앵커")
        """
        self.resolver = resolver
        self.language_manager = language_manager
        self.highlight_code = highlight_code
        self.href_for = href_for or (lambda topic: f"#{topic.anchor}")
        self.highlighter = SyntaxHighlighter()

    def to_html(
        self,
        ndmarkup: Optional[str],
        context: str = "",
        language: Optional[Language] = None,
        member_anchors: Optional[Dict[str, str]] = None,
    ) -> str:
        """
        NDMarkup 을 HTML 로 변환합니다.

        Args:
            ndmarkup: 토픽 본문 또는 요약
            context: 링크 해석에 사용할 컨텍스트 심볼
            language: 태그 없는 코드 블록의 언어 (보통 소스 파일 언어)
            member_anchors: <ds> 항목 제목 -> 앵커 (포함 토픽의 앵커)

        Returns:
            str: HTML 조각
        """
        if not ndmarkup:
            return ""

        output: List[str] = []
        position = 0
        while position < len(ndmarkup):
            match = _TAG.search(ndmarkup, position)
            if match is None:
                output.append(ndmarkup[position:])
                break

            output.append(ndmarkup[position:match.start()])
            closing, name, attribute_text = match.group(1), match.group(2), match.group(3)
            position = match.end()

            if name == "pre" and not closing:
                end = ndmarkup.find("</pre>", position)
                if end == -1:
                    end = len(ndmarkup)
                output.append(self._code_block(ndmarkup[position:end], _attributes(attribute_text), language))
                position = end + len("</pre>")
            elif name == "link":
                output.append(self._link(_attributes(attribute_text), context))
            elif name == "h":
                output.append("</div>" if closing else '<div class="CHeading">')
            elif name == "ds":
                if closing:
                    output.append("</td>")
                else:
                    end = ndmarkup.find("</ds>", position)
                    title = " ".join(html.unescape(re.sub(r"<[^>]*>", "", ndmarkup[position:end])).split())
                    anchor = (member_anchors or {}).get(title)
                    anchor_markup = f'<a name="{html.escape(anchor)}"></a>' if anchor else ""
                    output.append(f'<tr><td class="CDLEntry">{anchor_markup}')
            elif name == "br":
                output.append("<br>")
            elif name in _SIMPLE_TAGS:
                output.append(_SIMPLE_TAGS[name][1 if closing else 0])
            else:
                logger.debug(f"알 수 없는 NDMarkup 태그: {match.group(0)}")
                output.append(html.escape(match.group(0)))

        return "".join(output)

    def _link(self, attributes: Dict[str, str], context: str) -> str:
        link_type = attributes.get("type")
        if link_type == "url":
            target = attributes.get("target", "")
            text = attributes.get("text", target)
            return f'<a href="{html.escape(target)}" class="LURL">{html.escape(text)}</a>'
        if link_type == "email":
            target = attributes.get("target", "")
            text = attributes.get("text", target)
            return f'<a href="mailto:{html.escape(target)}" class="LEMail">{html.escape(text)}</a>'

        original = attributes.get("originaltext", "")
        if self.resolver is not None:
            resolved = self.resolver.resolve_with_text(original, context)
            if resolved is not None:
                topic, text = resolved
                return f'<a href="{html.escape(self.href_for(topic))}" class="LSymbol">{html.escape(text)}</a>'
        return html.escape(original)

    def _code_block(self, content: str, attributes: Dict[str, str], default_language: Optional[Language]) -> str:
        code = "\n".join(html.unescape(line) for line in content.split("<br>"))
        block_type = attributes.get("type")
        css_class = "CPrototype" if block_type == "prototype" else "CCode"
        if block_type is None:
            return f'<pre class="CText">{html.escape(code)}</pre>'

        language = default_language
        if "language" in attributes and self.language_manager is not None:
            language = self.language_manager.from_name(attributes["language"]) or default_language
        if not self.highlight_code:
            language = None
        return f'<pre class="{css_class}">{self.highlight_html(code, language)}</pre>'

    def highlight_html(self, code: str, language: Optional[Language]) -> str:
        """구문 강조 조각을 <span> HTML 로 변환합니다."""
        parts = []
        for kind, text in self.highlighter.highlight(code, language):
            escaped = html.escape(text).replace("\n", "<br>")
            if kind == TEXT:
                parts.append(escaped)
            else:
                parts.append(f'<span class="{_HIGHLIGHT_CLASSES[kind]}">{escaped}</span>')
        return "".join(parts)
