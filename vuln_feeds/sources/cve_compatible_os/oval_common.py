"""
Shared OVAL Pipeline Pieces

The Oracle, SUSE and Ubuntu portals all publish OVAL definitions documents
behind a directory listing. They differ only in how the listing is read and
in which artifacts are written, so the fetchers and the parser live here and
the vendor packages specialise them.
"""

from typing import Dict, List

from ...exceptions import DecodeException
from ...schemas.oval import OvalDefinitions
from ..base import BaseFetcher, BaseParser, extract_html_links, extract_xml_links

OVAL_ROOT = 'oval_definitions'


class HtmlListingFetcher(BaseFetcher):
    """Reads a directory listing by scanning for href="..." markers"""

    def extract_references(self, body: bytes) -> List[str]:
        return extract_html_links(body.decode('utf-8', errors='replace'))


class XmlListingFetcher(BaseFetcher):
    """Reads a listing or feed with the recovering lxml tokenizer"""

    def extract_references(self, body: bytes) -> List[str]:
        return extract_xml_links(body)


class OvalParser(BaseParser):
    """Decodes OVAL definitions documents and encodes them as JSON (and XML)"""

    def decode(self, reference: str, data: bytes) -> OvalDefinitions:
        root, namespaces = self.parse_xml(data, reference)
        name = root.tag.rsplit('}', 1)[-1]
        if name != OVAL_ROOT:
            raise DecodeException(
                f"Expected element type <{OVAL_ROOT}> but have <{name}>",
                source_name=self.source_name,
                reference=reference,
            )
        document = OvalDefinitions.from_element(root, namespaces)
        self.logger.debug(
            f"Decoded {reference}: {len(document.definitions)} definitions, "
            f"{len(document.tests)} tests, {len(document.objects)} objects, "
            f"{len(document.states)} states"
        )
        return document

    def encode(self, record: OvalDefinitions) -> Dict[str, bytes]:
        artifacts = {'.json': self.encode_json(record.to_dict())}
        if self.config.emit_xml:
            artifacts['.xml'] = record.to_xml()
        return artifacts
