"""
Source Configuration Management

OBJECTIVE:
Central registry for the vendor feed pipelines. Every pipeline is described by a
SourceConfig: where its index lives, which references are accepted, which
HTTP statuses are tolerated and which artifacts are written. How the index is
read and which record the files decode into is decided by the Fetcher and
Parser classes registered for the vendor in orchestration/source_manager.py.

INTEGRATION WITH LOCAL CODES:
- Consumed by sources/base/base_fetcher.py (index URL, suffixes, tolerated statuses)
- Consumed by cve_compatible_os/oval_common.py (emit_xml)
- Consumed by orchestration/source_manager.py to build a run per vendor

SOURCES:
- oracle: Oracle Linux OVAL, HTML listing, .xml.bz2, JSON + re-serialized XML
- suse:   SUSE OVAL, HTML listing, .xml, JSON
- ubuntu: Ubuntu OVAL, listing read with the recovering tokenizer, .xml.bz2, JSON
- redhat: Red Hat CVE API, JSON summary whose resource_url entries are fetched
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Tuple

from ..exceptions import ConfigException

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class SourceConfig:
    """Configuration for a single vendor feed pipeline"""
    name: str
    display_name: str
    index_url: str
    suffixes: Tuple[str, ...]
    emit_xml: bool = False
    tolerated_statuses: FrozenSet[int] = field(default_factory=frozenset)

    def accepts(self, reference: str) -> bool:
        """Check whether a reference ends with one of the accepted suffixes"""
        return any(reference.endswith(suffix) for suffix in self.suffixes)

DEFAULT_SOURCES: Dict[str, SourceConfig] = {
    'oracle': SourceConfig(
        name='oracle',
        display_name='Oracle Linux OVAL',
        index_url='https://linux.oracle.com/security/oval/',
        suffixes=('.xml.bz2',),
        emit_xml=True,
    ),
    'suse': SourceConfig(
        name='suse',
        display_name='SUSE OVAL',
        index_url='https://ftp.suse.com/pub/projects/security/oval/',
        suffixes=('.xml',),
    ),
    'ubuntu': SourceConfig(
        name='ubuntu',
        display_name='Ubuntu OVAL',
        index_url='https://security-metadata.canonical.com/oval/',
        suffixes=('.xml.bz2',),
    ),
    'redhat': SourceConfig(
        name='redhat',
        display_name='Red Hat Security Data API',
        index_url='https://access.redhat.com/hydra/rest/securitydata/cve.json',
        suffixes=('.json',),
        # Some resource URLs are expected to be inaccessible
        tolerated_statuses=frozenset({403}),
    ),
}

class SourceConfigManager:
    """
    Registry of vendor feed configurations

    RESPONSIBILITIES:
    1. Resolve a vendor key to its SourceConfig
    2. Apply per-run overrides (mirror index URLs)
    3. Report the known vendors
    """

    def __init__(self, sources: Dict[str, SourceConfig] = None):
        self.source_configs: Dict[str, SourceConfig] = dict(sources or DEFAULT_SOURCES)

    def get_source_config(self, source_name: str) -> SourceConfig:
        """
        Get configuration for a vendor

        Raises:
            ConfigException: If the vendor is unknown
        """
        key = source_name.lower()
        if key not in self.source_configs:
            available = ', '.join(self.list_sources())
            raise ConfigException(
                f"Unknown source '{source_name}'. Available sources: {available}",
                config_key=source_name
            )
        return self.source_configs[key]

    def list_sources(self) -> List[str]:
        """Return the known vendor keys in registration order"""
        return list(self.source_configs.keys())

    def with_index_url(self, source_name: str, index_url: str) -> SourceConfig:
        """Return a copy of a vendor configuration pointing at another index URL"""
        config = self.get_source_config(source_name)
        if not index_url:
            raise ConfigException("Index URL override must not be empty",
                                  source_name=config.name, config_key='index_url')
        logger.info(f"Overriding index URL for {config.name}: {index_url}")
        return dataclasses.replace(config, index_url=index_url)
