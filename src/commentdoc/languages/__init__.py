"""
언어 지원 모듈
"""

from .language import LINE_BREAK_ENDER, Language, LanguageError, PrototypeEnders
from .language_manager import LanguageManager

__all__ = [
    "LINE_BREAK_ENDER",
    "Language",
    "LanguageError",
    "LanguageManager",
    "PrototypeEnders",
]
