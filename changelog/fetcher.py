"""
Upstream changelog fetching over HTTP.
"""

from typing import Dict, Optional

import httpx
import structlog

from changelog.errors import FetchError

CHANGELOG_URL = "https://raw.githubusercontent.com/anthropics/claude-code/main/CHANGELOG.md"

logger = structlog.get_logger(__name__)


class ChangelogFetcher:
    """Fetches the raw changelog document."""

    def __init__(
        self,
        url: str = CHANGELOG_URL,
        timeout: float = 30,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the fetcher.

        Args:
            url: Raw document URL
            timeout: Request timeout in seconds
            headers: Extra request headers
            transport: Optional httpx transport (used by tests)
        """
        self.url = url
        self.logger = logger.bind(component="changelog_fetcher")
        self.client_config = {
            "timeout": timeout,
            "headers": headers or {},
            "follow_redirects": True,
        }
        if transport is not None:
            self.client_config["transport"] = transport

    async def fetch(self) -> str:
        """
        Download the current changelog.

        Returns:
            Full document text

        Raises:
            FetchError: The server answered with a non-2xx status
        """
        self.logger.info("Fetching changelog", url=self.url)

        async with httpx.AsyncClient(**self.client_config) as client:
            response = await client.get(self.url)

        if not response.is_success:
            raise FetchError(response.status_code, self.url)

        self.logger.debug("Fetched changelog", url=self.url, chars=len(response.text))
        return response.text
