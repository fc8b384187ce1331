"""Shared pytest fixtures for vuln-feeds tests."""

import bz2
import json
import threading

import pytest

from vuln_feeds.config.settings import Settings
from vuln_feeds.exceptions import FetchException
from vuln_feeds.sources.base import FetchResult


ORACLE_OVAL = b"""<?xml version="1.0" encoding="UTF-8"?>
<oval_definitions xmlns="http://oval.mitre.org/XMLSchema/oval-definitions-5"
    xmlns:oval="http://oval.mitre.org/XMLSchema/oval-common-5"
    xmlns:red-def="http://oval.mitre.org/XMLSchema/oval-definitions-5#linux"
    xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
    xsi:schemaLocation="http://oval.mitre.org/XMLSchema/oval-common-5 oval-common-schema.xsd">
  <generator>
    <oval:product_name>Oracle Errata Publisher</oval:product_name>
    <oval:schema_version>5.3</oval:schema_version>
    <oval:timestamp>2021-01-05T10:00:00</oval:timestamp>
  </generator>
  <definitions>
    <definition id="oval:com.oracle.elsa:def:20210001" version="501" class="patch">
      <metadata>
        <title>ELSA-2021-0001:  glibc security update (IMPORTANT)</title>
        <affected family="unix">
          <platform>Oracle Linux 8</platform>
        </affected>
        <reference source="elsa" ref_id="ELSA-2021-0001" ref_url="https://linux.oracle.com/errata/ELSA-2021-0001.html"/>
        <reference source="CVE" ref_id="CVE-2020-29573" ref_url="https://linux.oracle.com/cve/CVE-2020-29573.html"/>
        <description>glibc security fixes</description>
        <advisory>
          <severity>IMPORTANT</severity>
          <rights>Copyright 2021 Oracle, Inc.</rights>
          <issued date="2021-01-05"/>
          <cve href="https://linux.oracle.com/cve/CVE-2020-29573.html" share="true">CVE-2020-29573</cve>
        </advisory>
      </metadata>
      <criteria operator="AND">
        <criterion test_ref="oval:com.oracle.elsa:tst:20210001001" comment="Oracle Linux 8 is installed"/>
        <criteria operator="OR">
          <criteria operator="AND">
            <criterion test_ref="oval:com.oracle.elsa:tst:20210001002" comment="glibc is earlier than 0:2.28-127.0.3.el8"/>
            <criteria operator="OR" comment="signed">
              <criterion test_ref="oval:com.oracle.elsa:tst:20210001003" comment="glibc is signed with the Oracle Linux 8 key"/>
              <extend_definition definition_ref="oval:com.oracle.elsa:def:20200001" negate="true"/>
            </criteria>
          </criteria>
        </criteria>
      </criteria>
    </definition>
  </definitions>
  <tests>
    <red-def:rpminfo_test check="at least one" comment="glibc is earlier than 0:2.28-127.0.3.el8" id="oval:com.oracle.elsa:tst:20210001002" version="501">
      <red-def:object object_ref="oval:com.oracle.elsa:obj:20210001001"/>
      <red-def:state state_ref="oval:com.oracle.elsa:ste:20210001002"/>
    </red-def:rpminfo_test>
  </tests>
  <objects>
    <red-def:rpminfo_object id="oval:com.oracle.elsa:obj:20210001001" version="501">
      <red-def:name>glibc</red-def:name>
    </red-def:rpminfo_object>
  </objects>
  <states>
    <red-def:rpminfo_state id="oval:com.oracle.elsa:ste:20210001002" version="501">
      <red-def:arch operation="pattern match">aarch64|x86_64</red-def:arch>
      <red-def:evr datatype="evr_string" operation="less than">0:2.28-127.0.3.el8</red-def:evr>
    </red-def:rpminfo_state>
  </states>
</oval_definitions>
"""

# SUSE style: no advisory block, namespace declared on each test/object/state
SUSE_OVAL = b"""<?xml version="1.0" encoding="UTF-8"?>
<oval_definitions xmlns="http://oval.mitre.org/XMLSchema/oval-definitions-5">
  <definitions>
    <definition id="oval:org.opensuse.security:def:20201971" version="1" class="vulnerability">
      <metadata>
        <title>CVE-2020-1971</title>
      </metadata>
      <criteria operator="OR">
        <criterion test_ref="oval:org.opensuse.security:tst:2009223735" comment="openssl-1_1 is installed"/>
      </criteria>
    </definition>
  </definitions>
  <tests>
    <rpminfo_test id="oval:org.opensuse.security:tst:2009223735" version="1" comment="openssl-1_1 is installed" check="at least one" xmlns="http://oval.mitre.org/XMLSchema/oval-definitions-5#linux">
      <object object_ref="oval:org.opensuse.security:obj:2009030400"/>
    </rpminfo_test>
  </tests>
</oval_definitions>
"""

REDHAT_CVE = {
    "threat_severity": "Important",
    "public_date": "2021-01-26T00:00:00Z",
    "bugzilla": {
        "description": "CVE-2021-3156 sudo: Heap buffer overflow in argument parsing",
        "id": "1917684",
        "url": "https://bugzilla.redhat.com/show_bug.cgi?id=1917684",
    },
    "cvss3": {
        "cvss3_base_score": "7.8",
        "cvss3_scoring_vector": "CVSS:3.1/AV:L/AC:L/PR:L/UI:N/S:U/C:H/I:H/A:H",
        "status": "verified",
    },
    "cwe": "CWE-193->CWE-122",
    "details": ["A flaw was found in sudo."],
    "statement": "This flaw affects sudo versions prior to 1.9.5p2.",
    "acknowledgement": "Red Hat would like to thank Qualys Research Labs.",
    "affected_release": [
        {
            "product_name": "Red Hat Enterprise Linux 8",
            "release_date": "2021-01-26T00:00:00Z",
            "advisory": "RHSA-2021:0218",
            "cpe": "cpe:/o:redhat:enterprise_linux:8",
            "package": "sudo-0:1.8.29-6.el8_3.1",
        }
    ],
    "package_state": [
        {
            "product_name": "Red Hat Enterprise Linux 5",
            "fix_state": "Out of support scope",
            "package_name": "sudo",
            "cpe": "cpe:/o:redhat:enterprise_linux:5",
        }
    ],
    "name": "CVE-2021-3156",
    "csaw": True,
}


class FakeTransport:
    """Serves canned responses per URL and records every request"""

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.requested = []
        self._lock = threading.Lock()

    def add(self, url, body=b"", status=200):
        self.responses[url] = (status, body)

    def fetch(self, url):
        with self._lock:
            self.requested.append(url)
        response = self.responses.get(url)
        if response is None:
            raise FetchException("Connection refused", url=url)
        if isinstance(response, Exception):
            raise response
        status, body = response
        return FetchResult(url=url, status_code=status, body=body)

    def close(self):
        pass


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def oracle_oval():
    return ORACLE_OVAL


@pytest.fixture
def oracle_oval_bz2():
    return bz2.compress(ORACLE_OVAL)


@pytest.fixture
def suse_oval():
    return SUSE_OVAL


@pytest.fixture
def redhat_cve():
    return json.loads(json.dumps(REDHAT_CVE))


@pytest.fixture
def settings(tmp_path):
    """Settings writing into a temporary directory, independent of the environment"""
    return Settings(_env_file=None, OUTPUT_DIR=str(tmp_path), MAX_CONCURRENCY=4)
