"""
Collector 모듈
"""

from .source_file_collector import SourceFileCollector

__all__ = ["SourceFileCollector"]
