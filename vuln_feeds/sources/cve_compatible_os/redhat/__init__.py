"""
Red Hat Security Data API Integration

OBJECTIVE:
Mirror the per-CVE documents of the Red Hat Security Data API.

DATA SOURCE: https://access.redhat.com/hydra/rest/securitydata/cve.json
ENGINE TYPE: Existing CVE engine compatible

STEPS PROGRAM WILL FOLLOW:
1. Fetch the CVE summary list and decode it into CveSummary entries
2. Take the non-empty resource_url of every entry as a reference
3. Download every CVE document; HTTP 403 answers are skipped, not failed
4. Decode into RedHatCve and write <CVE>.json

INTEGRATION WITH LOCAL CODES:
- Inherits from sources/base/
- Managed by orchestration/source_manager.py
- Configuration from config/source_config.py (key: redhat)
"""

import json
from typing import Dict, List

from ....exceptions import DecodeException
from ....schemas.redhat_cve import CveSummary, RedHatCve
from ...base import BaseFetcher, BaseParser


class RedHatFetcher(BaseFetcher):
    """Discovers CVE documents through the summary list"""

    def parse_summary(self, body: bytes) -> List[CveSummary]:
        """
        Decode the summary list

        Raises:
            DecodeException: If the body is not a JSON list
        """
        try:
            data = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeException(
                f"Failed to parse CVE summary: {e}",
                source_name=self.source_name,
                reference=self.config.index_url,
            )
        if not isinstance(data, list):
            raise DecodeException(
                f"CVE summary must be a list, got {type(data).__name__}",
                source_name=self.source_name,
                reference=self.config.index_url,
            )
        return [CveSummary.from_dict(entry) for entry in data]

    def extract_references(self, body: bytes) -> List[str]:
        summaries = self.parse_summary(body)
        references = [entry.resource_url for entry in summaries if entry.resource_url]
        if len(references) < len(summaries):
            self.logger.debug(f"{len(summaries) - len(references)} summary entries have no resource_url")
        return references


class RedHatParser(BaseParser):
    """Decodes Red Hat CVE documents"""

    def decode(self, reference: str, data: bytes) -> RedHatCve:
        document = self.parse_json(data, reference)
        if not isinstance(document, dict):
            raise DecodeException(
                f"CVE document must be an object, got {type(document).__name__}",
                source_name=self.source_name,
                reference=reference,
            )
        return RedHatCve.from_dict(document)

    def encode(self, record: RedHatCve) -> Dict[str, bytes]:
        return {'.json': self.encode_json(record.to_dict())}


__all__ = ['RedHatFetcher', 'RedHatParser']
