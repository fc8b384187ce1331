"""
Base Fetcher for the Vendor Feed Harvester

Abstract base class that all vendor pipelines inherit from.
Provides the shared HTTP transport, index retrieval and reference filtering,
and enforces a consistent discovery interface.
"""

import abc
import logging
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import urljoin

import requests

from ...config.source_config import SourceConfig
from ...exceptions import FetchException


@dataclass
class FetchResult:
    """Status and body of one HTTP exchange"""
    url: str
    status_code: int
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class HttpTransport:
    """
    Blocking HTTP transport shared by every worker of a run

    The underlying requests.Session is only used for GETs, so it can be
    shared across the worker pool.
    """

    def __init__(self, user_agent: str = None, timeout: Optional[float] = None,
                 session: requests.Session = None):
        self.timeout = timeout
        self.session = session or requests.Session()
        if user_agent:
            self.session.headers.update({'User-Agent': user_agent})
        self.logger = logging.getLogger("fetcher.transport")

    def fetch(self, url: str) -> FetchResult:
        """
        Retrieve a URL

        Returns:
            FetchResult with whatever status the server answered

        Raises:
            FetchException: On connection or protocol errors
        """
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchException(f"Request failed: {e}", url=url)
        return FetchResult(url=url, status_code=response.status_code, body=response.content)

    def close(self):
        self.session.close()


class BaseFetcher(abc.ABC):
    """Abstract base class for all vendor index fetchers"""

    def __init__(self, config: SourceConfig, transport: HttpTransport):
        """
        Initialize fetcher with source configuration

        Args:
            config: Vendor configuration from config/source_config.py
            transport: Shared HTTP transport of the run
        """
        self.config = config
        self.source_name = config.name
        self.transport = transport
        self.logger = logging.getLogger(f"fetcher.{config.name}")

    @abc.abstractmethod
    def extract_references(self, body: bytes) -> List[str]:
        """
        Turn the index document into candidate references

        Args:
            body: Raw index document

        Returns:
            Every reference found, in document order, before suffix filtering
        """
        pass

    def fetch_index(self) -> bytes:
        """
        Fetch the index document

        Raises:
            FetchException: On transport errors or a non-success status
        """
        self.logger.info(f"Fetching index {self.config.index_url}")
        result = self._fetch(self.config.index_url)
        if not result.ok:
            raise FetchException(
                f"Index request returned HTTP {result.status_code}",
                source_name=self.source_name,
                status_code=result.status_code,
                url=self.config.index_url,
            )
        return result.body

    def discover(self) -> List[str]:
        """
        Fetch the index and keep the references with an accepted suffix

        Returns:
            Accepted references in document order
        """
        references = self.extract_references(self.fetch_index())
        accepted = [ref for ref in references if self.config.accepts(ref)]
        self.logger.info(
            f"Discovered {len(accepted)} of {len(references)} references "
            f"matching {', '.join(self.config.suffixes)}"
        )
        return accepted

    def resolve(self, reference: str) -> str:
        """Resolve a reference against the index URL"""
        return urljoin(self.config.index_url, reference)

    def fetch_file(self, reference: str) -> FetchResult:
        """
        Fetch one discovered file

        Returns:
            FetchResult that is either a success or carries a status the
            vendor tolerates (check result.ok)

        Raises:
            FetchException: On transport errors or a non-tolerated non-success status
        """
        url = self.resolve(reference)
        result = self._fetch(url)
        if result.ok or result.status_code in self.config.tolerated_statuses:
            return result
        raise FetchException(
            f"Request for {reference} returned HTTP {result.status_code}",
            source_name=self.source_name,
            status_code=result.status_code,
            url=url,
        )

    def _fetch(self, url: str) -> FetchResult:
        try:
            return self.transport.fetch(url)
        except FetchException as e:
            if e.source_name is None:
                e.source_name = self.source_name
            raise
