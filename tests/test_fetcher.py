"""Tests for the HTTP transport and the base fetcher."""

from unittest.mock import MagicMock

import pytest
import requests

from vuln_feeds.config import SourceConfigManager
from vuln_feeds.exceptions import FetchException
from vuln_feeds.sources.base import HttpTransport
from vuln_feeds.sources.cve_compatible_os import RedHatFetcher, SuseFetcher


class TestHttpTransport:

    def test_fetch_returns_status_and_body(self):
        session = MagicMock()
        session.headers = {}
        session.get.return_value = MagicMock(status_code=404, content=b"missing")

        result = HttpTransport(user_agent="VulnFeeds/test", timeout=5, session=session).fetch("https://example.com/a")

        session.get.assert_called_once_with("https://example.com/a", timeout=5)
        assert result.status_code == 404
        assert result.body == b"missing"
        assert not result.ok
        assert session.headers["User-Agent"] == "VulnFeeds/test"

    def test_transport_error_raises_fetch_exception(self):
        session = MagicMock()
        session.headers = {}
        session.get.side_effect = requests.ConnectionError("connection reset")

        with pytest.raises(FetchException) as exc_info:
            HttpTransport(session=session).fetch("https://example.com/a")

        assert exc_info.value.url == "https://example.com/a"
        assert "connection reset" in str(exc_info.value)


class TestBaseFetcher:

    @pytest.fixture
    def suse_config(self):
        return SourceConfigManager().get_source_config("suse")

    def test_resolve(self, suse_config, fake_transport):
        fetcher = SuseFetcher(suse_config, fake_transport)

        assert fetcher.resolve("a.xml") == "https://ftp.suse.com/pub/projects/security/oval/a.xml"
        assert fetcher.resolve("/other/b.xml") == "https://ftp.suse.com/other/b.xml"
        assert fetcher.resolve("https://mirror.example.com/c.xml") == "https://mirror.example.com/c.xml"

    def test_index_error_status(self, suse_config, fake_transport):
        fake_transport.add(suse_config.index_url, b"gone", status=503)

        with pytest.raises(FetchException) as exc_info:
            SuseFetcher(suse_config, fake_transport).discover()

        assert exc_info.value.status_code == 503
        assert exc_info.value.source_name == "suse"

    def test_index_transport_error_is_tagged_with_source(self, suse_config, fake_transport):
        with pytest.raises(FetchException) as exc_info:
            SuseFetcher(suse_config, fake_transport).fetch_index()
        assert exc_info.value.source_name == "suse"

    def test_file_error_status(self, suse_config, fake_transport):
        fake_transport.add(suse_config.index_url + "a.xml", b"", status=403)

        with pytest.raises(FetchException) as exc_info:
            SuseFetcher(suse_config, fake_transport).fetch_file("a.xml")
        assert exc_info.value.status_code == 403

    def test_tolerated_status_is_returned(self, fake_transport):
        config = SourceConfigManager().get_source_config("redhat")
        url = "https://access.redhat.com/hydra/rest/securitydata/cve/CVE-1.json"
        fake_transport.add(url, b"Forbidden", status=403)

        result = RedHatFetcher(config, fake_transport).fetch_file(url)

        assert result.status_code == 403
        assert not result.ok
