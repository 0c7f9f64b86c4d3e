"""
심볼 모듈
"""

from .symbol_string import SEPARATOR, SymbolString

__all__ = ["SEPARATOR", "SymbolString"]
