"""
Custom Exceptions for the Vendor Feed Harvester

Purpose: Standardized error handling across all vendor feed pipelines
Usage: Fetchers, parsers and the file sink raise these so the orchestrator can
       record a per-reference failure without aborting the run
Related Files: Used by config/, sources/* and orchestration/

Exception Hierarchy:
- FeedSourceException (base)
  ├── FetchException (index or file retrieval errors)
  ├── DecodeException (decompression and schema decode errors)
  ├── PersistenceException (output write errors)
  └── ConfigException (configuration errors)
"""

class FeedSourceException(Exception):
    """Base exception for all vendor feed operations"""

    def __init__(self, message: str, source_name: str = None, details: dict = None):
        self.source_name = source_name
        self.details = details or {}
        super().__init__(message)

    def __str__(self):
        if self.source_name:
            return f"[{self.source_name}] {super().__str__()}"
        return super().__str__()

class FetchException(FeedSourceException):
    """Raised when the transport fails or returns a non-success status"""

    def __init__(self, message: str, source_name: str = None,
                 status_code: int = None, url: str = None, **kwargs):
        self.status_code = status_code
        self.url = url
        details = {'status_code': status_code, 'url': url, **kwargs}
        super().__init__(message, source_name, details)

class DecodeException(FeedSourceException):
    """Raised when decompression or schema decoding fails"""

    def __init__(self, message: str, source_name: str = None,
                 reference: str = None, raw_data_sample: str = None, **kwargs):
        self.reference = reference
        self.raw_data_sample = raw_data_sample
        details = {'reference': reference, 'raw_data_sample': raw_data_sample, **kwargs}
        super().__init__(message, source_name, details)

class PersistenceException(FeedSourceException):
    """Raised when an output artifact cannot be written"""

    def __init__(self, message: str, source_name: str = None,
                 path: str = None, **kwargs):
        self.path = path
        details = {'path': path, **kwargs}
        super().__init__(message, source_name, details)

class ConfigException(FeedSourceException):
    """Raised when configuration is invalid"""

    def __init__(self, message: str, source_name: str = None,
                 config_key: str = None, **kwargs):
        self.config_key = config_key
        details = {'config_key': config_key, **kwargs}
        super().__init__(message, source_name, details)
