"""
CLI 모듈
"""

from .cli_controller import CLIController
from .execution_timer import ExecutionTimer
from .status_manager import (
    BuildingStatus,
    FileSearchStatus,
    ParsingStatus,
    StatusManager,
)

__all__ = [
    "CLIController",
    "ExecutionTimer",
    "StatusManager",
    "FileSearchStatus",
    "ParsingStatus",
    "BuildingStatus",
]
