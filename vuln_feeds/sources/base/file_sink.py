"""
File Sink for the Vendor Feed Harvester

Writes the encoded artifacts of every processed file into a flat output
directory, under a name derived from the source filename.

OBJECTIVE:
Deterministic, overwrite-in-place persistence. A derived name depends only on
the reference, so two runs over the same index produce the same file set.

RELATIONS TO LOCAL CODES:
- Called by: orchestration/source_manager.py workers
- Integrates: Error handling from exceptions.py
"""

import logging
import posixpath
import threading
from pathlib import Path
from typing import Dict, Union
from urllib.parse import urlparse

from ...exceptions import PersistenceException

# Checked in order, the first match is stripped
KNOWN_SUFFIXES = ('.xml.bz2', '.xml.gz', '.xml', '.json')


def derive_output_filename(reference: str, extension: str = '.json') -> str:
    """
    Derive the output filename of a reference

    The basename of the reference path loses its first matching known suffix
    and gains the output extension, e.g. com.oracle.elsa-2021.xml.bz2 becomes
    com.oracle.elsa-2021.json. A name already ending in .json maps to itself.
    """
    name = posixpath.basename(urlparse(reference).path)
    for suffix in KNOWN_SUFFIXES:
        if name.endswith(suffix):
            name = name[:-len(suffix)]
            break
    return name + extension


class FileSink:
    """Writes output artifacts of one vendor run"""

    def __init__(self, output_dir: Union[str, Path] = '.', source_name: str = None):
        self.output_dir = Path(output_dir)
        self.source_name = source_name
        self.logger = logging.getLogger(f"sink.{source_name or 'default'}")
        self._lock = threading.Lock()

        # Write statistics
        self.stats = {
            'files_written': 0,
            'bytes_written': 0,
            'errors': 0
        }

    def write(self, filename: str, payload: bytes) -> Path:
        """
        Write one artifact, replacing any existing file of that name

        Raises:
            PersistenceException: If the file cannot be created or written
        """
        path = self.output_dir / filename
        try:
            path.write_bytes(payload)
        except OSError as e:
            with self._lock:
                self.stats['errors'] += 1
            raise PersistenceException(
                f"Failed to write {path}: {e}",
                source_name=self.source_name,
                path=str(path),
            )
        with self._lock:
            self.stats['files_written'] += 1
            self.stats['bytes_written'] += len(payload)
        self.logger.debug(f"Wrote {len(payload)} bytes to {path}")
        return path

    def write_artifacts(self, reference: str, artifacts: Dict[str, bytes]) -> Dict[str, Path]:
        """
        Write every artifact of a reference under its derived name

        Args:
            reference: Source reference the artifacts were produced from
            artifacts: Mapping of output extension to payload

        Raises:
            PersistenceException: If any artifact fails; the artifacts already
                written for this reference are removed first
        """
        written: Dict[str, Path] = {}
        try:
            for extension, payload in artifacts.items():
                written[extension] = self.write(derive_output_filename(reference, extension), payload)
        except PersistenceException:
            for path in written.values():
                try:
                    path.unlink(missing_ok=True)
                except OSError as e:
                    self.logger.warning(f"Could not remove partial artifact {path}: {e}")
            raise
        return written

    def ensure_output_dir(self):
        """
        Create the output directory when missing

        Raises:
            PersistenceException: If the directory cannot be created
        """
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceException(
                f"Cannot create output directory {self.output_dir}: {e}",
                source_name=self.source_name,
                path=str(self.output_dir),
            )

    def log_statistics(self):
        """Log write statistics"""
        self.logger.info(f"Files Written: {self.stats['files_written']}")
        self.logger.info(f"Bytes Written: {self.stats['bytes_written']}")
        self.logger.info(f"Write Errors: {self.stats['errors']}")
