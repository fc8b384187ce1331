"""
Ubuntu OVAL Integration

OBJECTIVE:
Mirror the Canonical OVAL feed (per-release CVE and USN documents), served
bzip2-compressed.

DATA SOURCE: https://security-metadata.canonical.com/oval/
ENGINE TYPE: Existing CVE engine compatible

STEPS PROGRAM WILL FOLLOW:
1. Fetch the listing and tokenize it with the recovering lxml parser, collecting href attributes
2. Keep the references ending in .xml.bz2
3. Download and decompress every document, decode it as OVAL
4. Write <stem>.json

DEPENDENCIES:
- beautifulsoup4 + lxml: lxml HTML parser as the recovering listing tokenizer

INTEGRATION WITH LOCAL CODES:
- Inherits from cve_compatible_os/oval_common.py
- Managed by orchestration/source_manager.py
- Configuration from config/source_config.py (key: ubuntu)
"""

from ..oval_common import OvalParser, XmlListingFetcher


class UbuntuFetcher(XmlListingFetcher):
    """
    Discovers OVAL documents in the Canonical listing

    The listing is XHTML-ish markup that is rarely well formed, so it goes
    through the recovering tokenizer instead of a strict parser.
    """


class UbuntuParser(OvalParser):
    """Decodes Ubuntu OVAL documents"""


__all__ = ['UbuntuFetcher', 'UbuntuParser']
