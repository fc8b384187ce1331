# Config package for the vendor feed harvester
from .settings import Settings
from .source_config import DEFAULT_SOURCES, SourceConfig, SourceConfigManager

__all__ = [
    'Settings',
    'DEFAULT_SOURCES',
    'SourceConfig',
    'SourceConfigManager',
]
