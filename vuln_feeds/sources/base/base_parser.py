"""
Base Parser for the Vendor Feed Harvester

Abstract base class that all vendor record parsers inherit from.
Provides the index extraction strategies, the decompression gate and the
JSON/XML decoding helpers.

OBJECTIVE:
Common parsing infrastructure that turns fetched bytes into a typed record
and the record into the artifacts written by the file sink.

RELATIONS TO LOCAL CODES:
- Uses: Record schemas from schemas/oval.py and schemas/redhat_cve.py
- Integrates: Error handling from exceptions.py
- Feeds: orchestration/source_manager.py workers
"""

import abc
import bz2
import gzip
import io
import json
import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Tuple

from bs4 import BeautifulSoup

from ...config.source_config import SourceConfig
from ...exceptions import DecodeException

HREF_MARKER = 'href="'


def extract_html_links(text: str) -> List[str]:
    """
    Collect every href="..." value of a document by plain text scanning

    No HTML parsing takes place, so malformed listings never fail. The scan
    stops at the first marker that has no closing quote.
    """
    links = []
    position = 0
    while True:
        start = text.find(HREF_MARKER, position)
        if start == -1:
            break
        start += len(HREF_MARKER)
        end = text.find('"', start)
        if end == -1:
            break
        links.append(text[start:end])
        position = end + 1
    return links


def extract_xml_links(body: bytes) -> List[str]:
    """
    Collect the href attribute of every element, in document order

    Tokenized with lxml's HTML parser, which recovers token by token: stray
    '<', unquoted attributes, bare '&' and several top-level elements are
    skipped or repaired and the scan carries on to the end of the document.
    """
    soup = BeautifulSoup(body, 'lxml')
    return [tag['href'] for tag in soup.find_all(href=True)]


def decompress(filename: str, body: bytes) -> bytes:
    """
    Decompress a body when the filename carries a compression suffix

    Raises:
        DecodeException: When the stream is not valid for its suffix
    """
    try:
        if filename.endswith('.bz2'):
            with bz2.BZ2File(io.BytesIO(body)) as stream:
                return stream.read()
        if filename.endswith('.gz'):
            with gzip.GzipFile(fileobj=io.BytesIO(body)) as stream:
                return stream.read()
    except (OSError, EOFError, ValueError) as e:
        raise DecodeException(f"Decompression failed: {e}", reference=filename)
    return body


def _sample(data: bytes, size: int = 200) -> str:
    return data[:size].decode('utf-8', errors='replace')


class BaseParser(abc.ABC):
    """Abstract base class for all vendor record parsers"""

    def __init__(self, config: SourceConfig):
        """
        Initialize parser with source configuration

        Args:
            config: Vendor configuration from config/source_config.py
        """
        self.config = config
        self.source_name = config.name
        self.logger = logging.getLogger(f"parser.{config.name}")

    @abc.abstractmethod
    def decode(self, reference: str, data: bytes) -> Any:
        """
        Decode a (decompressed) file into the vendor record

        Raises:
            DecodeException: When the document is rejected outright
        """
        pass

    @abc.abstractmethod
    def encode(self, record: Any) -> Dict[str, bytes]:
        """
        Encode a record into output artifacts

        Returns:
            Mapping of output extension ('.json', '.xml') to payload
        """
        pass

    def encode_json(self, data: Any) -> bytes:
        return json.dumps(data, indent=4, ensure_ascii=False).encode('utf-8')

    def parse_xml(self, data: bytes, reference: str) -> Tuple[ET.Element, Dict[str, str]]:
        """
        Parse an XML document

        Returns:
            Root element and the namespace declarations of the root element

        Raises:
            DecodeException: If XML parsing fails
        """
        namespaces: Dict[str, str] = {}
        root = None
        try:
            for event, item in ET.iterparse(io.BytesIO(data), events=('start-ns', 'start')):
                if event == 'start-ns':
                    if root is None:
                        prefix, uri = item
                        namespaces.setdefault(prefix, uri)
                elif root is None:
                    root = item
        except ET.ParseError as e:
            raise DecodeException(
                f"Failed to parse XML: {e}",
                source_name=self.source_name,
                reference=reference,
                raw_data_sample=_sample(data),
            )
        if root is None:
            raise DecodeException("Empty XML document", source_name=self.source_name, reference=reference)
        return root, namespaces

    def parse_json(self, data: bytes, reference: str) -> Any:
        """
        Parse a JSON document

        Raises:
            DecodeException: If JSON parsing fails
        """
        try:
            return json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeException(
                f"Failed to parse JSON: {e}",
                source_name=self.source_name,
                reference=reference,
                raw_data_sample=_sample(data),
            )
