"""
Vendor Feed Orchestration

OBJECTIVE:
Run the fetch-discover-transform-persist pipeline of one or more vendors.
Discovery happens once per vendor; every accepted reference then becomes one
unit of work on a bounded thread pool and the run completes when every unit
has reported back.

ARCHITECTURE OVERVIEW:
- SourceManager: resolves vendor keys, owns the shared transport, runs vendors in sequence
- FeedRun: one vendor invocation (discover, fan out, collect, report)
- WorkerResult: tagged outcome of one reference (succeeded / skipped / failed)
- RunReport: aggregate of a FeedRun

DEPENDENCIES:
- ../sources/base/: transport, fetcher/parser base classes, file sink
- ../sources/cve_compatible_os/: vendor fetchers and parsers
- ../config/: Settings and SourceConfigManager

ERROR HANDLING:
- Discovery errors propagate out of FeedRun.run(); SourceManager records them
  on the vendor's report and moves on to the next vendor
- Worker errors never leave the worker: they are logged and recorded as a
  failed WorkerResult while the other workers continue
"""

import concurrent.futures
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Type

from tqdm import tqdm

from ..config.settings import Settings
from ..config.source_config import SourceConfig, SourceConfigManager
from ..exceptions import ConfigException, FeedSourceException
from ..sources.base import BaseFetcher, BaseParser, FileSink, HttpTransport, decompress
from ..sources.cve_compatible_os import (
    OracleFetcher,
    OracleParser,
    RedHatFetcher,
    RedHatParser,
    SuseFetcher,
    SuseParser,
    UbuntuFetcher,
    UbuntuParser,
)

logger = logging.getLogger(__name__)

# Vendor key -> (fetcher class, parser class)
SOURCE_REGISTRY: Dict[str, Tuple[Type[BaseFetcher], Type[BaseParser]]] = {
    'oracle': (OracleFetcher, OracleParser),
    'suse': (SuseFetcher, SuseParser),
    'ubuntu': (UbuntuFetcher, UbuntuParser),
    'redhat': (RedHatFetcher, RedHatParser),
}


class WorkerStatus(Enum):
    """Outcome of one unit of work"""
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class WorkerResult:
    """Result of processing one reference"""
    reference: str
    status: WorkerStatus
    outputs: List[str] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class RunReport:
    """Summary of one vendor run"""
    source_name: str
    start_time: datetime
    end_time: Optional[datetime] = None
    discovered: int = 0
    results: List[WorkerResult] = field(default_factory=list)
    discovery_error: Optional[str] = None

    def _count(self, status: WorkerStatus) -> int:
        return sum(1 for result in self.results if result.status is status)

    @property
    def succeeded(self) -> int:
        return self._count(WorkerStatus.SUCCEEDED)

    @property
    def skipped(self) -> int:
        return self._count(WorkerStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(WorkerStatus.FAILED)

    @property
    def errors(self) -> Dict[str, str]:
        return {r.reference: r.error for r in self.results if r.status is WorkerStatus.FAILED}

    @property
    def success(self) -> bool:
        """True when discovery succeeded, whatever happened to single files"""
        return self.discovery_error is None

    @property
    def duration_seconds(self) -> float:
        end = self.end_time or datetime.now()
        return (end - self.start_time).total_seconds()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'source_name': self.source_name,
            'start_time': self.start_time.isoformat(),
            'end_time': self.end_time.isoformat() if self.end_time else None,
            'duration_seconds': self.duration_seconds,
            'discovered': self.discovered,
            'succeeded': self.succeeded,
            'skipped': self.skipped,
            'failed': self.failed,
            'errors': self.errors,
            'discovery_error': self.discovery_error,
        }


class FeedRun:
    """
    One invocation of a vendor pipeline

    RESPONSIBILITIES:
    1. Discover the references of the vendor index
    2. Process every reference on a bounded worker pool
    3. Collect exactly one WorkerResult per reference into a RunReport
    """

    def __init__(self, config: SourceConfig, fetcher: BaseFetcher, parser: BaseParser,
                 sink: FileSink, max_concurrency: int = 8, show_progress: bool = False):
        if max_concurrency < 1:
            raise ConfigException("max_concurrency must be at least 1",
                                  source_name=config.name, config_key='max_concurrency')
        self.config = config
        self.fetcher = fetcher
        self.parser = parser
        self.sink = sink
        self.max_concurrency = max_concurrency
        self.show_progress = show_progress
        self.logger = logging.getLogger(f"run.{config.name}")

    def process_reference(self, reference: str) -> WorkerResult:
        """
        Fetch, decompress, decode, encode and persist one reference

        Never raises for pipeline errors; they come back as a failed result.
        """
        self.logger.info(f"Downloading {reference}...")
        try:
            fetched = self.fetcher.fetch_file(reference)
            if not fetched.ok:
                self.logger.info(f"Skipping {reference}: HTTP {fetched.status_code}")
                return WorkerResult(reference, WorkerStatus.SKIPPED)

            data = decompress(reference, fetched.body)
            record = self.parser.decode(reference, data)
            written = self.sink.write_artifacts(reference, self.parser.encode(record))
        except FeedSourceException as e:
            self.logger.error(f"Error processing {reference}: {e}")
            return WorkerResult(reference, WorkerStatus.FAILED, error=str(e))

        outputs = [path.name for path in written.values()]
        if len(outputs) == 2:
            self.logger.info(f"Files {outputs[0]} and {outputs[1]} processed successfully.")
        else:
            self.logger.info(f"File {', '.join(outputs)} processed successfully.")
        return WorkerResult(reference, WorkerStatus.SUCCEEDED, outputs=outputs)

    def dispatch(self, references: List[str]) -> List[WorkerResult]:
        """
        Process references concurrently and wait for all of them

        Returns:
            One result per reference, in completion order
        """
        results: List[WorkerResult] = []
        if not references:
            return results

        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_concurrency) as executor:
            future_refs = {
                executor.submit(self.process_reference, reference): reference
                for reference in references
            }
            completed = concurrent.futures.as_completed(future_refs)
            if self.show_progress:
                completed = tqdm(completed, total=len(future_refs), desc=self.config.name, unit='file')

            for future in completed:
                reference = future_refs[future]
                try:
                    results.append(future.result())
                except Exception as e:
                    # Anything outside the pipeline error hierarchy is a bug, record it all the same
                    self.logger.exception(f"Error processing {reference}: {e}")
                    results.append(WorkerResult(reference, WorkerStatus.FAILED, error=str(e)))
        return results

    def run(self) -> RunReport:
        """
        Execute the full pipeline for the vendor

        Raises:
            FeedSourceException: When discovery fails; no worker is started
        """
        report = RunReport(source_name=self.config.name, start_time=datetime.now())
        references = self.fetcher.discover()
        report.discovered = len(references)
        self.sink.ensure_output_dir()

        report.results = self.dispatch(references)
        report.end_time = datetime.now()
        self._log_report(report)
        return report

    def _log_report(self, report: RunReport):
        if report.failed == 0:
            self.logger.info("All files processed successfully.")
        else:
            self.logger.warning(f"{report.failed} of {report.discovered} files failed")
        self.logger.info(
            f"=== {self.config.display_name}: {report.succeeded} succeeded, "
            f"{report.skipped} skipped, {report.failed} failed "
            f"in {report.duration_seconds:.1f}s ==="
        )
        self.sink.log_statistics()


class SourceManager:
    """
    Entry point for running vendor pipelines

    RESPONSIBILITIES:
    1. Build FeedRuns from Settings and the source registry
    2. Share one HTTP transport across vendors and workers
    3. Run vendors in sequence and keep their reports
    """

    def __init__(self, settings: Settings = None, config_manager: SourceConfigManager = None,
                 transport: HttpTransport = None):
        self.settings = settings or Settings()
        self.config_manager = config_manager or SourceConfigManager()
        self.transport = transport or HttpTransport(
            user_agent=self.settings.USER_AGENT,
            timeout=self.settings.REQUEST_TIMEOUT_SECONDS,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        self.transport.close()

    def _resolve_config(self, source_name: str, index_url: str = None) -> SourceConfig:
        if index_url is not None:
            return self.config_manager.with_index_url(source_name, index_url)
        return self.config_manager.get_source_config(source_name)

    def _components(self, config: SourceConfig) -> Tuple[BaseFetcher, BaseParser]:
        if config.name not in SOURCE_REGISTRY:
            raise ConfigException(f"No pipeline registered for source '{config.name}'",
                                  config_key=config.name)
        fetcher_cls, parser_cls = SOURCE_REGISTRY[config.name]
        return fetcher_cls(config, self.transport), parser_cls(config)

    def create_run(self, source_name: str, index_url: str = None) -> FeedRun:
        """
        Build a FeedRun for a vendor

        Raises:
            ConfigException: If the vendor is unknown
        """
        config = self._resolve_config(source_name, index_url)
        fetcher, parser = self._components(config)
        return FeedRun(
            config=config,
            fetcher=fetcher,
            parser=parser,
            sink=FileSink(self.settings.OUTPUT_DIR, source_name=config.name),
            max_concurrency=self.settings.MAX_CONCURRENCY,
            show_progress=self.settings.SHOW_PROGRESS,
        )

    def discover(self, source_name: str, index_url: str = None) -> List[str]:
        """Run discovery only and return the accepted references"""
        config = self._resolve_config(source_name, index_url)
        fetcher, _ = self._components(config)
        return fetcher.discover()

    def run_source(self, source_name: str, index_url: str = None) -> RunReport:
        """
        Run one vendor, recording a discovery failure on the report

        Raises:
            ConfigException: If the vendor is unknown
        """
        feed_run = self.create_run(source_name, index_url)
        start_time = datetime.now()
        try:
            return feed_run.run()
        except FeedSourceException as e:
            logger.error(f"Discovery failed for {feed_run.config.name}: {e}")
            return RunReport(
                source_name=feed_run.config.name,
                start_time=start_time,
                end_time=datetime.now(),
                discovery_error=str(e),
            )

    def run_sources(self, source_names: List[str] = None, index_url: str = None) -> Dict[str, RunReport]:
        """
        Run vendors one after another

        Args:
            source_names: Vendor keys (default: every known vendor)
            index_url: Index URL override, only valid for a single vendor

        Raises:
            ConfigException: On unknown vendors or an ambiguous override
        """
        names = [name.lower() for name in (source_names or self.config_manager.list_sources())]
        if index_url is not None and len(names) != 1:
            raise ConfigException("An index URL override needs exactly one source", config_key='index_url')
        for name in names:
            self.config_manager.get_source_config(name)

        reports = {}
        for name in names:
            logger.info(f"🚀 Starting {name} feed run")
            reports[name] = self.run_source(name, index_url)
        return reports
