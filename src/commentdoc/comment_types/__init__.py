"""
주석 타입 모듈
"""

from .comment_type import CommentType, CommentTypeError
from .comment_type_manager import ACCESS_LEVELS, CommentTypeManager, normalize_keyword

__all__ = [
    "ACCESS_LEVELS",
    "CommentType",
    "CommentTypeError",
    "CommentTypeManager",
    "normalize_keyword",
]
