"""
Unit tests for fetching the upstream changelog.
"""

import httpx
import pytest

from changelog.errors import FetchError
from changelog.fetcher import ChangelogFetcher, CHANGELOG_URL


class TestChangelogFetcher:
    """Test cases for ChangelogFetcher."""

    @pytest.mark.asyncio
    async def test_fetch_success(self, sample_changelog):
        """Test that the body of a 200 response is returned."""
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, text=sample_changelog)

        fetcher = ChangelogFetcher(
            headers={"User-Agent": "test-agent"},
            transport=httpx.MockTransport(handler)
        )

        assert await fetcher.fetch() == sample_changelog
        assert str(requests[0].url) == CHANGELOG_URL
        assert requests[0].headers["User-Agent"] == "test-agent"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [404, 500, 503])
    async def test_fetch_non_success(self, status_code):
        """Test that non-2xx statuses raise FetchError with the status."""
        fetcher = ChangelogFetcher(
            url="https://example.com/CHANGELOG.md",
            transport=httpx.MockTransport(lambda request: httpx.Response(status_code, text="nope"))
        )

        with pytest.raises(FetchError) as exc_info:
            await fetcher.fetch()

        assert exc_info.value.status_code == status_code
        assert exc_info.value.url == "https://example.com/CHANGELOG.md"
        assert str(status_code) in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self):
        """Test that connection failures are not swallowed."""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        fetcher = ChangelogFetcher(transport=httpx.MockTransport(handler))

        with pytest.raises(httpx.ConnectError):
            await fetcher.fetch()
