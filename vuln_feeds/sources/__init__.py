"""
Vendor Feed Sources

Architecture:
- base/: Common infrastructure used by all vendor pipelines
- cve_compatible_os/: Linux vendor advisory feeds (Oracle, SUSE, Ubuntu, Red Hat)

All sources follow the same pattern:
1. Fetcher: Retrieves the index and discovers file references
2. Parser: Decodes fetched files into records and encodes the output artifacts
3. FileSink: Persists the artifacts under derived filenames

Usage:
    from vuln_feeds.sources.cve_compatible_os.oracle import OracleFetcher, OracleParser
"""
