"""
Pytest configuration and shared fixtures.
"""

import pytest
from unittest.mock import AsyncMock

from changelog.cache import SnapshotCache
from changelog.fetcher import ChangelogFetcher
from changelog.models import DeliveryAck, DeliveryMode, VersionEntry
from notifier.delivery import Delivery
from utilities.config import WatcherConfig


SAMPLE_CHANGELOG = """# Changelog

## 1.2.0

- Added: new widget
- Fixed: crash on load

## 1.1.0

- Fixed: old bug
"""


@pytest.fixture
def sample_changelog():
    """Two-version changelog, newest first."""
    return SAMPLE_CHANGELOG


@pytest.fixture
def older_changelog():
    """The sample changelog before 1.2.0 shipped."""
    return """# Changelog

## 1.1.0

- Fixed: old bug
"""


@pytest.fixture
def sample_entry():
    """A version entry with bullets in several categories."""
    body = "\n".join([
        "## 2.0.0",
        "",
        "- Added **plan mode** for reviewing edits",
        "- Fix crash when `CLAUDE.md` is empty",
        "- Improved startup time",
        "- Updated docs, see [the guide](https://example.com/guide)",
        "- Removed legacy flag",
        "- Changed default model",
        "Some trailing prose that is not a bullet",
    ])
    return VersionEntry(version="2.0.0", body=body)


@pytest.fixture
def watcher_config(tmp_path, monkeypatch):
    """Watcher configuration isolated from the environment and any .env file."""
    for name in ("DELIVERY_MODE", "STRICT_ON_MISSING_CREDENTIAL", "SLACK_BOT_TOKEN",
                 "SLACK_CHANNEL", "SLACK_WEBHOOK_URL", "CACHE_FILE"):
        monkeypatch.delenv(name, raising=False)
    return WatcherConfig(
        _env_file=None,
        delivery_mode="webhook",
        slack_webhook_url="https://hooks.slack.com/services/T000/B000/XXXX",
        cache_file=str(tmp_path / ".cache" / "last-changelog.md"),
    )


@pytest.fixture
def snapshot_cache(watcher_config):
    """Snapshot cache in a temporary directory."""
    return SnapshotCache(watcher_config.get_cache_file_path())


@pytest.fixture
def mock_fetcher(sample_changelog):
    """Fetcher returning the sample changelog."""
    fetcher = AsyncMock(spec=ChangelogFetcher)
    fetcher.url = "https://example.com/CHANGELOG.md"
    fetcher.fetch.return_value = sample_changelog
    return fetcher


@pytest.fixture
def mock_delivery():
    """Delivery channel that acknowledges every message."""
    delivery = AsyncMock(spec=Delivery)
    delivery.mode = DeliveryMode.WEBHOOK
    delivery.deliver.return_value = DeliveryAck(mode=DeliveryMode.WEBHOOK)
    return delivery
