"""
Oracle Linux OVAL Integration

OBJECTIVE:
Mirror the Oracle Linux Security Advisory (ELSA) OVAL feed. Every advisory is
published as a bzip2-compressed OVAL definitions document.

DATA SOURCE: https://linux.oracle.com/security/oval/
ENGINE TYPE: Existing CVE engine compatible

STEPS PROGRAM WILL FOLLOW:
1. Fetch the directory listing and scan it for href="..." references
2. Keep the references ending in .xml.bz2
3. Download and decompress every document, decode it as OVAL
4. Write <stem>.json and the re-serialized <stem>.xml

INTEGRATION WITH LOCAL CODES:
- Inherits from cve_compatible_os/oval_common.py
- Managed by orchestration/source_manager.py
- Configuration from config/source_config.py (key: oracle)
"""

from ..oval_common import HtmlListingFetcher, OvalParser


class OracleFetcher(HtmlListingFetcher):
    """
    Discovers ELSA documents in the Oracle OVAL listing

    Used by: orchestration/source_manager.py
    """


class OracleParser(OvalParser):
    """
    Decodes ELSA OVAL documents

    Oracle documents carry an <advisory> block (severity, rights, issue date)
    in the definition metadata. The config enables the XML re-serialization.
    """


__all__ = ['OracleFetcher', 'OracleParser']
