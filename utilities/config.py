"""
Configuration management using environment variables.
Handles delivery credentials, cache location and logging settings with validation and defaults.
"""

from typing import Optional
from pydantic import Field, validator
from pydantic_settings import BaseSettings
from pathlib import Path


DELIVERY_MODES = ['api-token', 'webhook', 'print-only']


class WatcherConfig(BaseSettings):
    """
    Configuration class for the changelog watcher.
    Uses pydantic BaseSettings for environment variable management.
    """

    # Delivery Configuration
    delivery_mode: str = Field(default="webhook", env="DELIVERY_MODE")
    strict_on_missing_credential: bool = Field(default=False, env="STRICT_ON_MISSING_CREDENTIAL")
    slack_bot_token: Optional[str] = Field(default=None, env="SLACK_BOT_TOKEN")
    slack_channel: Optional[str] = Field(default=None, env="SLACK_CHANNEL")
    slack_webhook_url: Optional[str] = Field(default=None, env="SLACK_WEBHOOK_URL")

    # Snapshot Cache
    cache_file: str = Field(default=".cache/last-changelog.md", env="CACHE_FILE")

    # HTTP Configuration
    request_timeout: int = Field(default=30, env="REQUEST_TIMEOUT")

    # Logging Configuration
    log_level: str = Field(default="INFO", env="LOG_LEVEL")
    log_format: str = Field(default="console", env="LOG_FORMAT")
    log_file: Optional[str] = Field(default=None, env="LOG_FILE")

    # Development/Testing
    debug: bool = Field(default=False, env="DEBUG")

    @validator('delivery_mode')
    def validate_delivery_mode(cls, v):
        """Ensure delivery mode is one of the supported channels."""
        if v.lower() not in DELIVERY_MODES:
            raise ValueError(f'delivery_mode must be one of: {DELIVERY_MODES}')
        return v.lower()

    @validator('request_timeout')
    def validate_timeout(cls, v):
        """Ensure timeout is reasonable."""
        if v < 5 or v > 300:
            raise ValueError('request_timeout must be between 5 and 300 seconds')
        return v

    @validator('slack_bot_token', 'slack_channel', 'slack_webhook_url')
    def blank_to_none(cls, v):
        """Treat empty credentials as missing."""
        if v is not None and not v.strip():
            return None
        return v

    @validator('log_level')
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level must be one of: {valid_levels}')
        return v.upper()

    @validator('log_format')
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ['json', 'console']
        if v.lower() not in valid_formats:
            raise ValueError(f'log_format must be one of: {valid_formats}')
        return v.lower()

    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Ignore extra fields from .env

    def get_log_file_path(self) -> Optional[Path]:
        """Get log file path as Path object."""
        if self.log_file:
            return Path(self.log_file)
        return None

    def get_cache_file_path(self) -> Path:
        """Get snapshot cache path as Path object."""
        return Path(self.cache_file)

    def has_delivery_credential(self) -> bool:
        """Check whether the configured delivery mode has what it needs to send."""
        if self.delivery_mode == "api-token":
            return bool(self.slack_bot_token and self.slack_channel)
        if self.delivery_mode == "webhook":
            return bool(self.slack_webhook_url)
        return False

    def get_user_agent(self) -> str:
        """Get user agent string for requests."""
        return "ChangelogWatcher/1.0"

    def get_headers(self) -> dict:
        """Get default headers for HTTP requests."""
        return {
            "User-Agent": self.get_user_agent(),
            "Accept": "text/plain, text/markdown;q=0.9, */*;q=0.8",
        }
