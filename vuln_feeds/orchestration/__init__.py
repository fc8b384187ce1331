# Orchestration of vendor feed runs
from .source_manager import (
    SOURCE_REGISTRY,
    FeedRun,
    RunReport,
    SourceManager,
    WorkerResult,
    WorkerStatus,
)

__all__ = [
    'SOURCE_REGISTRY',
    'FeedRun',
    'RunReport',
    'SourceManager',
    'WorkerResult',
    'WorkerStatus',
]
