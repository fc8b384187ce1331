"""Tests for output filename derivation and the file sink."""

import pytest

from vuln_feeds.exceptions import PersistenceException
from vuln_feeds.sources.base import FileSink, derive_output_filename


class TestDeriveOutputFilename:
    """Tests for derive_output_filename"""

    @pytest.mark.parametrize("reference,expected", [
        ("com.oracle.elsa-2021.xml.bz2", "com.oracle.elsa-2021.json"),
        ("opensuse.leap.15.3.xml", "opensuse.leap.15.3.json"),
        ("feed.xml.gz", "feed.json"),
        ("CVE-2021-3156.json", "CVE-2021-3156.json"),
        ("https://access.redhat.com/hydra/rest/securitydata/cve/CVE-2021-3156.json", "CVE-2021-3156.json"),
        ("sub/dir/ELSA-2021-001.xml.bz2", "ELSA-2021-001.json"),
        ("README", "README.json"),
    ])
    def test_json_names(self, reference, expected):
        assert derive_output_filename(reference) == expected

    def test_xml_name(self):
        assert derive_output_filename("ELSA-2021-001.xml.bz2", ".xml") == "ELSA-2021-001.xml"

    def test_only_first_suffix_is_stripped(self):
        assert derive_output_filename("a.json.xml") == "a.json.json"

    def test_json_is_a_fixed_point(self):
        once = derive_output_filename("ELSA-2021-001.xml.bz2")
        assert derive_output_filename(once) == once

    def test_query_string_is_ignored(self):
        assert derive_output_filename("https://example.com/x/feed.xml?download=1") == "feed.json"


class TestFileSink:
    """Tests for FileSink"""

    def test_write_and_overwrite(self, tmp_path):
        sink = FileSink(tmp_path, source_name="oracle")

        sink.write("a.json", b"first")
        path = sink.write("a.json", b"second")

        assert path == tmp_path / "a.json"
        assert path.read_bytes() == b"second"
        assert sink.stats["files_written"] == 2
        assert sink.stats["bytes_written"] == len(b"first") + len(b"second")

    def test_write_artifacts_uses_derived_names(self, tmp_path):
        sink = FileSink(tmp_path, source_name="oracle")

        written = sink.write_artifacts("ELSA-2021-001.xml.bz2", {".json": b"{}", ".xml": b"<x/>"})

        assert written[".json"].name == "ELSA-2021-001.json"
        assert written[".xml"].name == "ELSA-2021-001.xml"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["ELSA-2021-001.json", "ELSA-2021-001.xml"]

    def test_partial_artifacts_removed_on_failure(self, tmp_path):
        (tmp_path / "ELSA-2021-001.xml").mkdir()
        sink = FileSink(tmp_path, source_name="oracle")

        with pytest.raises(PersistenceException):
            sink.write_artifacts("ELSA-2021-001.xml.bz2", {".json": b"{}", ".xml": b"<x/>"})

        assert not (tmp_path / "ELSA-2021-001.json").exists()
        assert sink.stats["errors"] == 1

    def test_write_failure_raises(self, tmp_path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("file")
        sink = FileSink(blocker, source_name="suse")

        with pytest.raises(PersistenceException) as exc_info:
            sink.write("a.json", b"{}")

        assert exc_info.value.source_name == "suse"
        assert exc_info.value.path.endswith("a.json")
        assert sink.stats["errors"] == 1

    def test_ensure_output_dir_creates_missing_directory(self, tmp_path):
        target = tmp_path / "nested" / "out"
        FileSink(target).ensure_output_dir()
        assert target.is_dir()

    def test_ensure_output_dir_failure(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")

        with pytest.raises(PersistenceException):
            FileSink(blocker / "out").ensure_output_dir()
