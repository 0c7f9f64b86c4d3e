"""
데이터 영속화 모듈
"""

from .cache_manager import CacheManager
from .data_persistence_manager import (
    SOURCE_FILES_FILE,
    TOPICS_FILE,
    DataPersistenceManager,
    PersistenceError,
)
from .json_decoder import CustomJSONDecoder
from .json_encoder import CustomJSONEncoder

__all__ = [
    "DataPersistenceManager",
    "PersistenceError",
    "CustomJSONEncoder",
    "CustomJSONDecoder",
    "CacheManager",
    "SOURCE_FILES_FILE",
    "TOPICS_FILE",
]
