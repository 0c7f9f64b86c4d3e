"""
Tokenization 모듈
"""

from .code_scanner import CodeItem, CodeItemType, CodeScanner, line_number_at, remove_comments
from .tokenizer import Token, Tokenizer, TokenType, condense_whitespace, expand_tabs

__all__ = [
    "CodeItem",
    "CodeItemType",
    "CodeScanner",
    "Token",
    "Tokenizer",
    "TokenType",
    "condense_whitespace",
    "expand_tabs",
    "line_number_at",
    "remove_comments",
]
