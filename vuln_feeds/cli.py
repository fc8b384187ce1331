"""
Command-line interface for the vendor feed harvester

USAGE:
    vuln-feeds run [VENDOR ...] [--output-dir DIR] [--max-concurrency N] [--index-url URL] [--timeout S]
    vuln-feeds discover VENDOR [--index-url URL]
    vuln-feeds list

Every option falls back to the VULN_FEEDS_* environment settings.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from .config.settings import Settings
from .config.source_config import SourceConfigManager
from .exceptions import FeedSourceException
from .orchestration.source_manager import SourceManager

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='vuln-feeds', description='Linux Vendor Advisory Feed Harvester')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Run command
    run_parser = subparsers.add_parser('run', help='Download and convert vendor feeds')
    run_parser.add_argument('sources', nargs='*', metavar='VENDOR', help='Vendor keys (default: all)')
    run_parser.add_argument('--output-dir', help='Directory the JSON/XML files are written to')
    run_parser.add_argument('--max-concurrency', type=int, help='Parallel downloads per vendor')
    run_parser.add_argument('--index-url', help='Alternate index URL (single vendor only)')
    run_parser.add_argument('--timeout', type=float, help='Per-request timeout in seconds')
    run_parser.add_argument('--json', action='store_true', help='Print the run reports as JSON')

    # Discover command
    discover_parser = subparsers.add_parser('discover', help='List the files a vendor run would fetch')
    discover_parser.add_argument('source', metavar='VENDOR', help='Vendor key')
    discover_parser.add_argument('--index-url', help='Alternate index URL')

    # List command
    subparsers.add_parser('list', help='Show known vendors')

    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Settings from the environment with command-line overrides applied"""
    overrides = {}
    if getattr(args, 'output_dir', None) is not None:
        overrides['OUTPUT_DIR'] = args.output_dir
    if getattr(args, 'max_concurrency', None) is not None:
        overrides['MAX_CONCURRENCY'] = args.max_concurrency
    if getattr(args, 'timeout', None) is not None:
        overrides['REQUEST_TIMEOUT_SECONDS'] = args.timeout
    return Settings(**overrides)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Command-line entry point

    Returns:
        0 when every requested vendor discovered its index, 1 otherwise
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        settings = load_settings(args)
    except ValidationError as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.command == 'list':
        for name, config in SourceConfigManager().source_configs.items():
            print(f"{name:<8} {config.index_url}")
        return 0

    try:
        with SourceManager(settings) as manager:
            if args.command == 'discover':
                for reference in manager.discover(args.source, args.index_url):
                    print(reference)
                return 0

            reports = manager.run_sources(args.sources or None, args.index_url)
    except KeyboardInterrupt:
        logger.info("Operation interrupted by user")
        return 1
    except FeedSourceException as e:
        logger.error(f"Command failed: {e}")
        return 1

    if args.json:
        print(json.dumps({name: report.to_dict() for name, report in reports.items()}, indent=2, default=str))

    failed = [name for name, report in reports.items() if not report.success]
    if failed:
        logger.error(f"Discovery failed for: {', '.join(failed)}")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
