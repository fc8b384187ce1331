"""
Red Hat Security Data API Schema

Typed records for the Red Hat CVE summary list (cve.json) and for the full
per-CVE documents its resource_url entries point at. Decoding is permissive:
missing or mistyped fields fall back to zero values rather than failing.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


def _as_str(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


@dataclass
class CveSummary:
    """One entry of the Red Hat CVE summary list"""
    cve: str = ""
    severity: str = ""
    public_date: str = ""
    advisories: List[str] = field(default_factory=list)
    bugzilla: str = ""
    bugzilla_description: str = ""
    # Published as number, string or null depending on the entry
    cvss_score: Any = None
    cvss_scoring_vector: Any = None
    cwe: str = ""
    affected_packages: List[str] = field(default_factory=list)
    package_state: Any = None
    resource_url: str = ""
    cvss3_scoring_vector: str = ""
    cvss3_score: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CveSummary":
        data = _as_dict(data)
        return cls(
            cve=_as_str(data.get('CVE')),
            severity=_as_str(data.get('severity')),
            public_date=_as_str(data.get('public_date')),
            advisories=[_as_str(a) for a in _as_list(data.get('advisories'))],
            bugzilla=_as_str(data.get('bugzilla')),
            bugzilla_description=_as_str(data.get('bugzilla_description')),
            cvss_score=data.get('cvss_score'),
            cvss_scoring_vector=data.get('cvss_scoring_vector'),
            cwe=_as_str(data.get('CWE')),
            affected_packages=[_as_str(p) for p in _as_list(data.get('affected_packages'))],
            package_state=data.get('package_state'),
            resource_url=_as_str(data.get('resource_url')),
            cvss3_scoring_vector=_as_str(data.get('cvss3_scoring_vector')),
            cvss3_score=_as_str(data.get('cvss3_score')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'CVE': self.cve,
            'severity': self.severity,
            'public_date': self.public_date,
            'advisories': list(self.advisories),
            'bugzilla': self.bugzilla,
            'bugzilla_description': self.bugzilla_description,
            'cvss_score': self.cvss_score,
            'cvss_scoring_vector': self.cvss_scoring_vector,
            'CWE': self.cwe,
            'affected_packages': list(self.affected_packages),
            'package_state': self.package_state,
            'resource_url': self.resource_url,
            'cvss3_scoring_vector': self.cvss3_scoring_vector,
            'cvss3_score': self.cvss3_score,
        }


@dataclass
class Bugzilla:
    description: str = ""
    id: str = ""
    url: str = ""


@dataclass
class Cvss3:
    cvss3_base_score: str = ""
    cvss3_scoring_vector: str = ""
    status: str = ""


@dataclass
class AffectedRelease:
    """A shipped fix: product, erratum and fixed package"""
    product_name: str = ""
    release_date: str = ""
    advisory: str = ""
    cpe: str = ""
    package: str = ""


@dataclass
class PackageState:
    """Status of a package that has no shipped fix"""
    product_name: str = ""
    fix_state: str = ""
    package_name: str = ""
    cpe: str = ""


@dataclass
class RedHatCve:
    """Full Red Hat CVE document"""
    name: str = ""
    threat_severity: str = ""
    public_date: str = ""
    bugzilla: Bugzilla = field(default_factory=Bugzilla)
    cvss3: Cvss3 = field(default_factory=Cvss3)
    cwe: str = ""
    details: List[str] = field(default_factory=list)
    statement: str = ""
    references: List[str] = field(default_factory=list)
    acknowledgement: str = ""
    mitigation: str = ""
    affected_release: List[AffectedRelease] = field(default_factory=list)
    package_state: List[PackageState] = field(default_factory=list)
    upstream_fix: str = ""
    csaw: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RedHatCve":
        data = _as_dict(data)
        bugzilla = _as_dict(data.get('bugzilla'))
        cvss3 = _as_dict(data.get('cvss3'))
        mitigation = data.get('mitigation')
        # Newer documents wrap the mitigation text as {"value": ..., "lang": ...}
        if isinstance(mitigation, dict):
            mitigation = mitigation.get('value')
        return cls(
            name=_as_str(data.get('name')),
            threat_severity=_as_str(data.get('threat_severity')),
            public_date=_as_str(data.get('public_date')),
            bugzilla=Bugzilla(
                description=_as_str(bugzilla.get('description')),
                id=_as_str(bugzilla.get('id')),
                url=_as_str(bugzilla.get('url')),
            ),
            cvss3=Cvss3(
                cvss3_base_score=_as_str(cvss3.get('cvss3_base_score')),
                cvss3_scoring_vector=_as_str(cvss3.get('cvss3_scoring_vector')),
                status=_as_str(cvss3.get('status')),
            ),
            cwe=_as_str(data.get('cwe')),
            details=[_as_str(d) for d in _as_list(data.get('details'))],
            statement=_as_str(data.get('statement')),
            references=[_as_str(r) for r in _as_list(data.get('references'))],
            acknowledgement=_as_str(data.get('acknowledgement')),
            mitigation=_as_str(mitigation),
            affected_release=[
                AffectedRelease(
                    product_name=_as_str(item.get('product_name')),
                    release_date=_as_str(item.get('release_date')),
                    advisory=_as_str(item.get('advisory')),
                    cpe=_as_str(item.get('cpe')),
                    package=_as_str(item.get('package')),
                )
                for item in map(_as_dict, _as_list(data.get('affected_release')))
            ],
            package_state=[
                PackageState(
                    product_name=_as_str(item.get('product_name')),
                    fix_state=_as_str(item.get('fix_state')),
                    package_name=_as_str(item.get('package_name')),
                    cpe=_as_str(item.get('cpe')),
                )
                for item in map(_as_dict, _as_list(data.get('package_state')))
            ],
            upstream_fix=_as_str(data.get('upstream_fix')),
            csaw=data.get('csaw') is True,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'threat_severity': self.threat_severity,
            'public_date': self.public_date,
            'bugzilla': vars(self.bugzilla).copy(),
            'cvss3': vars(self.cvss3).copy(),
            'cwe': self.cwe,
            'details': list(self.details),
            'statement': self.statement,
            'references': list(self.references),
            'acknowledgement': self.acknowledgement,
            'mitigation': self.mitigation,
            'affected_release': [vars(item).copy() for item in self.affected_release],
            'package_state': [vars(item).copy() for item in self.package_state],
            'upstream_fix': self.upstream_fix,
            'csaw': self.csaw,
        }
