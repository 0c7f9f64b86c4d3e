"""
Output 모듈

프로토타입 배치, 구문 강조, NDMarkup -> HTML 변환, HTML 문서 생성을 담당합니다.
"""

from .formatted_text import FormattedText
from .html_builder import BuildError, HTMLBuilder, page_name, render_template
from .prototype_layout import PrototypeLayout
from .syntax_highlighter import SyntaxHighlighter

__all__ = [
    "BuildError",
    "FormattedText",
    "HTMLBuilder",
    "PrototypeLayout",
    "SyntaxHighlighter",
    "page_name",
    "render_template",
]
