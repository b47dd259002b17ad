"""
Unit tests for watcher configuration.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from utilities.config import WatcherConfig


@pytest.fixture
def clean_env(monkeypatch):
    """Remove watcher settings from the environment."""
    for name in ("DELIVERY_MODE", "STRICT_ON_MISSING_CREDENTIAL", "SLACK_BOT_TOKEN", "SLACK_CHANNEL",
                 "SLACK_WEBHOOK_URL", "CACHE_FILE", "REQUEST_TIMEOUT", "LOG_LEVEL", "LOG_FORMAT",
                 "LOG_FILE", "DEBUG"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestWatcherConfig:
    """Test cases for WatcherConfig."""

    def test_defaults(self, clean_env):
        config = WatcherConfig(_env_file=None)

        assert config.delivery_mode == "webhook"
        assert config.strict_on_missing_credential is False
        assert config.slack_webhook_url is None
        assert config.get_cache_file_path() == Path(".cache/last-changelog.md")
        assert config.get_log_file_path() is None
        assert config.has_delivery_credential() is False

    def test_reads_environment(self, clean_env):
        clean_env.setenv("DELIVERY_MODE", "API-TOKEN")
        clean_env.setenv("SLACK_BOT_TOKEN", "xoxb-token")
        clean_env.setenv("SLACK_CHANNEL", "#releases")
        clean_env.setenv("STRICT_ON_MISSING_CREDENTIAL", "true")

        config = WatcherConfig(_env_file=None)

        assert config.delivery_mode == "api-token"
        assert config.strict_on_missing_credential is True
        assert config.has_delivery_credential() is True

    def test_reads_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("SLACK_WEBHOOK_URL=https://hooks.slack.com/services/T/B/X\nUNRELATED=1\n")

        config = WatcherConfig(_env_file=str(env_file))

        assert config.slack_webhook_url == "https://hooks.slack.com/services/T/B/X"
        assert config.has_delivery_credential() is True

    def test_blank_credentials_are_missing(self, clean_env):
        config = WatcherConfig(_env_file=None, slack_webhook_url="  ")

        assert config.slack_webhook_url is None
        assert config.has_delivery_credential() is False

    def test_token_without_channel_is_missing(self, clean_env):
        config = WatcherConfig(_env_file=None, delivery_mode="api-token", slack_bot_token="xoxb-token")

        assert config.has_delivery_credential() is False

    def test_print_only_has_no_credential(self, clean_env):
        config = WatcherConfig(
            _env_file=None,
            delivery_mode="print-only",
            slack_webhook_url="https://hooks.slack.com/services/T/B/X"
        )

        assert config.has_delivery_credential() is False

    def test_invalid_delivery_mode(self, clean_env):
        with pytest.raises(ValidationError):
            WatcherConfig(_env_file=None, delivery_mode="email")

    def test_invalid_timeout(self, clean_env):
        with pytest.raises(ValidationError):
            WatcherConfig(_env_file=None, request_timeout=1)

        with pytest.raises(ValidationError):
            WatcherConfig(_env_file=None, request_timeout=301)

    def test_log_settings_normalized(self, clean_env):
        config = WatcherConfig(_env_file=None, log_level="debug", log_format="JSON", log_file="logs/watcher.log")

        assert config.log_level == "DEBUG"
        assert config.log_format == "json"
        assert config.get_log_file_path() == Path("logs/watcher.log")

    def test_invalid_log_level(self, clean_env):
        with pytest.raises(ValidationError):
            WatcherConfig(_env_file=None, log_level="VERBOSE")

    def test_headers(self, clean_env):
        headers = WatcherConfig(_env_file=None).get_headers()

        assert headers["User-Agent"].startswith("ChangelogWatcher/")
