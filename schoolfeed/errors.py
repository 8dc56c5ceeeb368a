"""
Exception hierarchy for schoolfeed.

Transform steps never raise on upstream data; only configuration,
fetching and uploading can fail a sync.
"""
from typing import Optional


class SchoolFeedError(Exception):
    """Base exception for all schoolfeed errors."""


class ConfigError(SchoolFeedError, ValueError):
    """Missing or blank connection settings."""


class FetchError(SchoolFeedError):
    """Login or data request against the school API failed."""

    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.url = url

    def __str__(self) -> str:
        parts = [self.message]
        if self.status_code is not None:
            parts.append(f"[status={self.status_code}]")
        if self.url:
            parts.append(f"[url={self.url}]")
        return " ".join(parts)


class UploadError(SchoolFeedError):
    """The encoded payload could not be submitted."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
