"""
Base Infrastructure for the Vendor Feed Harvester

This module provides the foundational classes and utilities that all vendor pipelines use.
All vendor-specific implementations inherit from these base classes to ensure consistency.

Key Components:
- HttpTransport: Shared blocking HTTP client
- BaseFetcher: Index retrieval and reference discovery
- BaseParser: Decompression gate, JSON/XML decoding, index extraction strategies
- FileSink: Output filename derivation and persistence

Related Files:
- All vendor implementations in ../cve_compatible_os/* inherit from these classes
- orchestration/source_manager.py uses these for unified processing
"""

from .base_fetcher import BaseFetcher, FetchResult, HttpTransport
from .base_parser import BaseParser, decompress, extract_html_links, extract_xml_links
from .file_sink import KNOWN_SUFFIXES, FileSink, derive_output_filename

__all__ = [
    'BaseFetcher',
    'FetchResult',
    'HttpTransport',
    'BaseParser',
    'decompress',
    'extract_html_links',
    'extract_xml_links',
    'FileSink',
    'KNOWN_SUFFIXES',
    'derive_output_filename',
]
