"""
Delivery channels for formatted changelog messages.

This module provides:
- Bot token delivery through the chat.postMessage API
- Incoming webhook delivery
- Console delivery used when no credential is configured
- Channel selection from the watcher configuration
"""

import json
import sys
from abc import ABC, abstractmethod
from typing import Dict, Optional, TextIO

import httpx
import structlog

from changelog.errors import ConfigurationError, DeliveryError
from changelog.models import DeliveryAck, DeliveryMode, FormattedMessage
from utilities.config import WatcherConfig

SLACK_POST_MESSAGE_URL = "https://slack.com/api/chat.postMessage"

logger = structlog.get_logger(__name__)


class Delivery(ABC):
    """A destination for formatted messages."""

    mode: DeliveryMode

    @abstractmethod
    async def deliver(self, message: FormattedMessage) -> DeliveryAck:
        """
        Send one message.

        Raises:
            DeliveryError: The channel rejected the message
            ConfigurationError: Strict console delivery without a credential
        """


class _HttpDelivery(Delivery):
    """Shared httpx client setup for network channels."""

    def __init__(
        self,
        timeout: float = 30,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.client_config = {
            "timeout": timeout,
            "headers": headers or {},
        }
        if transport is not None:
            self.client_config["transport"] = transport

    async def _post(self, url: str, payload: dict, headers: Optional[Dict[str, str]] = None) -> httpx.Response:
        async with httpx.AsyncClient(**self.client_config) as client:
            return await client.post(url, json=payload, headers=headers)


class ApiTokenDelivery(_HttpDelivery):
    """Posts messages with a bot token to an explicit channel."""

    mode = DeliveryMode.API_TOKEN

    def __init__(self, token: str, channel: str, api_url: str = SLACK_POST_MESSAGE_URL, **kwargs):
        super().__init__(**kwargs)
        self.token = token
        self.channel = channel
        self.api_url = api_url
        self.logger = logger.bind(component="api_token_delivery", channel=channel)

    async def deliver(self, message: FormattedMessage) -> DeliveryAck:
        payload = {"channel": self.channel, **message.to_payload()}
        response = await self._post(
            self.api_url,
            payload,
            headers={"Authorization": f"Bearer {self.token}"}
        )

        if not response.is_success:
            raise DeliveryError("Failed to post to Slack", response.status_code, response.text)

        # The Web API answers 200 with ok=false on application errors
        try:
            data = response.json()
        except ValueError:
            raise DeliveryError("Unexpected Slack API response", response.status_code, response.text)
        if not data.get("ok"):
            raise DeliveryError("Slack API rejected message", response.status_code, data.get("error") or response.text)

        self.logger.debug("Posted to Slack", version=message.version, ts=data.get("ts"))
        return DeliveryAck(
            mode=self.mode,
            message_id=data.get("ts"),
            channel=data.get("channel", self.channel)
        )


class WebhookDelivery(_HttpDelivery):
    """Posts messages to a pre-provisioned incoming webhook."""

    mode = DeliveryMode.WEBHOOK

    def __init__(self, webhook_url: str, **kwargs):
        super().__init__(**kwargs)
        self.webhook_url = webhook_url
        self.logger = logger.bind(component="webhook_delivery")

    async def deliver(self, message: FormattedMessage) -> DeliveryAck:
        response = await self._post(self.webhook_url, message.to_payload())

        if not response.is_success:
            raise DeliveryError("Failed to post to Slack", response.status_code, response.text)

        self.logger.debug("Posted to Slack webhook", version=message.version)
        return DeliveryAck(mode=self.mode)


class ConsoleDelivery(Delivery):
    """Prints the would-be payload instead of sending it."""

    mode = DeliveryMode.PRINT_ONLY

    def __init__(self, strict: bool = False, reason: Optional[str] = None, stream: Optional[TextIO] = None):
        """
        Initialize console delivery.

        Args:
            strict: Raise ConfigurationError after printing
            reason: Why nothing is being sent, shown before the payload
            stream: Output stream, stderr by default
        """
        self.strict = strict
        self.reason = reason
        self.stream = stream
        self.logger = logger.bind(component="console_delivery")

    async def deliver(self, message: FormattedMessage) -> DeliveryAck:
        stream = self.stream or sys.stderr
        if self.reason:
            print(f"{self.reason} - printing message instead:", file=stream)
        print(json.dumps(message.to_payload(), indent=2, ensure_ascii=False), file=stream)

        if self.strict:
            raise ConfigurationError(self.reason or "No delivery credential configured")

        self.logger.warning("Message printed, not sent", version=message.version)
        return DeliveryAck(mode=self.mode)


def build_delivery(config: WatcherConfig, transport: Optional[httpx.AsyncBaseTransport] = None) -> Delivery:
    """
    Pick the delivery channel for a configuration.

    A configured channel whose credential is missing falls back to console
    delivery, strict or lenient per ``strict_on_missing_credential``.
    """
    http_options = {
        "timeout": config.request_timeout,
        "headers": {"User-Agent": config.get_user_agent()},
        "transport": transport,
    }
    mode = DeliveryMode(config.delivery_mode)

    if mode == DeliveryMode.PRINT_ONLY:
        return ConsoleDelivery(strict=False)

    if config.has_delivery_credential():
        if mode == DeliveryMode.API_TOKEN:
            return ApiTokenDelivery(config.slack_bot_token, config.slack_channel, **http_options)
        return WebhookDelivery(config.slack_webhook_url, **http_options)

    if mode == DeliveryMode.API_TOKEN:
        reason = "SLACK_BOT_TOKEN or SLACK_CHANNEL not set"
    else:
        reason = "SLACK_WEBHOOK_URL not set"
    logger.warning(
        "Delivery credential missing",
        delivery_mode=mode.value,
        strict=config.strict_on_missing_credential
    )
    return ConsoleDelivery(strict=config.strict_on_missing_credential, reason=reason)
