"""
CVE-Compatible Operating System Sources

Vendor pipelines for Linux distributions that publish machine-readable
advisories:
- oracle: Oracle Linux OVAL (ELSA)
- suse: SUSE OVAL
- ubuntu: Canonical OVAL
- redhat: Red Hat Security Data API

Each vendor package exposes a Fetcher (index discovery) and a Parser
(record decode and artifact encoding).
"""

from .oracle import OracleFetcher, OracleParser
from .redhat import RedHatFetcher, RedHatParser
from .suse import SuseFetcher, SuseParser
from .ubuntu import UbuntuFetcher, UbuntuParser

__all__ = [
    'OracleFetcher',
    'OracleParser',
    'RedHatFetcher',
    'RedHatParser',
    'SuseFetcher',
    'SuseParser',
    'UbuntuFetcher',
    'UbuntuParser',
]
