"""
Comments 모듈

소스 파일에서 문서 주석을 찾고, Natural Docs / Javadoc / XML 형식의 주석을
토픽과 NDMarkup 본문으로 변환합니다.
"""

from .comment_finder import JAVADOC, PLAIN, XML, CommentFinder, PossibleComment
from .inline_markup import InlineFormatter, decode, encode, format_inline
from .javadoc_parser import JavadocParser, has_javadoc_tags
from .line_finder import LineFinder, is_horizontal_line
from .natural_docs_parser import BlockTag, NaturalDocsParser, TopicLine
from .xml_comment_parser import XMLCommentParser, looks_like_xml

__all__ = [
    "BlockTag",
    "CommentFinder",
    "InlineFormatter",
    "JAVADOC",
    "JavadocParser",
    "LineFinder",
    "NaturalDocsParser",
    "PLAIN",
    "PossibleComment",
    "TopicLine",
    "XML",
    "XMLCommentParser",
    "decode",
    "encode",
    "format_inline",
    "has_javadoc_tags",
    "is_horizontal_line",
    "looks_like_xml",
]
