"""
Error types raised by the changelog watcher.

None of these are recovered locally; they propagate to the entry point,
which logs them and exits with a non-zero status.
"""

from typing import Optional


class ChangelogWatcherError(Exception):
    """Base class for watcher errors."""


class FetchError(ChangelogWatcherError):
    """The upstream changelog could not be retrieved."""

    def __init__(self, status_code: int, url: str):
        self.status_code = status_code
        self.url = url
        super().__init__(f"Failed to fetch changelog: {status_code}")


class DeliveryError(ChangelogWatcherError):
    """The delivery channel rejected a message."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        detail = message
        if status_code is not None:
            detail = f"{detail}: {status_code}"
        if body:
            detail = f"{detail} - {body}"
        super().__init__(detail)


class ConfigurationError(ChangelogWatcherError):
    """No usable delivery credential is configured and strict mode is on."""
