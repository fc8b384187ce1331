"""
SUSE OVAL Integration

OBJECTIVE:
Mirror the SUSE security OVAL feed. Documents are served uncompressed.

DATA SOURCE: https://ftp.suse.com/pub/projects/security/oval/
ENGINE TYPE: Existing CVE engine compatible

STEPS PROGRAM WILL FOLLOW:
1. Fetch the directory listing and scan it for href="..." references
2. Keep the references ending in .xml
3. Download every document and decode it as OVAL
4. Write <stem>.json

INTEGRATION WITH LOCAL CODES:
- Inherits from cve_compatible_os/oval_common.py
- Managed by orchestration/source_manager.py
- Configuration from config/source_config.py (key: suse)
"""

from ..oval_common import HtmlListingFetcher, OvalParser


class SuseFetcher(HtmlListingFetcher):
    """Discovers OVAL documents in the SUSE listing"""


class SuseParser(OvalParser):
    """
    Decodes SUSE OVAL documents

    SUSE declares the linux-def namespace on each test, object and state
    rather than on the root, which the parser keeps per element.
    """


__all__ = ['SuseFetcher', 'SuseParser']
