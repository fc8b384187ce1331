"""
Runtime settings for the vendor feed harvester
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, overridable through VULN_FEEDS_* environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="VULN_FEEDS_",
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Output
    OUTPUT_DIR: str = "."

    # Fan-out
    MAX_CONCURRENCY: int = Field(default=8, ge=1)

    # Transport
    REQUEST_TIMEOUT_SECONDS: Optional[float] = Field(default=None, gt=0)
    USER_AGENT: str = "VulnFeeds/1.0 (Vulnerability Research)"

    # Reporting
    LOG_LEVEL: str = "INFO"
    SHOW_PROGRESS: bool = False
