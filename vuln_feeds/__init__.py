"""
Vendor Advisory Feed Harvester

Downloads machine-readable vulnerability advisories (OVAL definitions and
Red Hat CVE documents) from Linux vendor security portals, decodes every
file into a typed record and writes a JSON copy (plus re-serialized XML for
Oracle) to a local directory.

Packages:
- config/: runtime Settings and the per-vendor SourceConfig registry
- sources/: fetchers, parsers and the file sink per vendor
- schemas/: OVAL and Red Hat record types
- orchestration/: concurrent per-vendor runs and run reports
"""

__version__ = '1.0.0'
