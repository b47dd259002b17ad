"""
Models for changelog parsing, message formatting and delivery results.

This module defines Pydantic models for:
- Version entries parsed from the changelog document
- Category buckets and rendered sections
- The structured chat message and its Block Kit payload
- Delivery acknowledgements and run results
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class Category(str, Enum):
    """Fixed classification groups, in display order."""
    ADDED = "Added"
    FIXED = "Fixed"
    CHANGED = "Changed"
    IMPROVED = "Improved"
    REMOVED = "Removed"
    UPDATES = "Updates"


class DeliveryMode(str, Enum):
    """Supported delivery channels."""
    API_TOKEN = "api-token"
    WEBHOOK = "webhook"
    PRINT_ONLY = "print-only"


class VersionEntry(BaseModel):
    """One changelog section keyed by its version string."""
    version: str = Field(..., description="Semver-like version, e.g. 1.2.3")
    body: str = Field(..., description="Raw section text including the heading line")


class CategoryBucket(BaseModel):
    """Items of one entry that share a category."""
    category: Category = Field(..., description="Classification group")
    items: List[str] = Field(default_factory=list, description="Transformed item strings in document order")

    @property
    def label(self) -> str:
        return self.category.value

    def render(self) -> str:
        """Render the bucket as a header line followed by one line per item."""
        return "\n".join([f"*{self.label}*"] + self.items)


class CategorySection(BaseModel):
    """A rendered, length-bounded category section."""
    label: str = Field(..., description="Category label")
    text: str = Field(..., description="Rendered mrkdwn text")


class FormattedMessage(BaseModel):
    """Structured chat message for one version entry."""
    version: str = Field(..., description="Version the message announces")
    header: str = Field(..., description="Plain-text header")
    intro: str = Field(..., description="Introductory sentence")
    sections: List[CategorySection] = Field(default_factory=list)
    footer: str = Field(..., description="Footer mrkdwn linking to the full changelog")

    def fallback_text(self) -> str:
        """Plain text used by clients that cannot render blocks."""
        return f"Claude Code v{self.version} released"

    def to_blocks(self) -> List[Dict[str, Any]]:
        """Build the Block Kit block list."""
        blocks: List[Dict[str, Any]] = [
            {
                "type": "header",
                "text": {"type": "plain_text", "text": self.header, "emoji": True},
            },
            {
                "type": "section",
                "text": {"type": "mrkdwn", "text": self.intro},
            },
            {"type": "divider"},
        ]
        for section in self.sections:
            blocks.append({
                "type": "section",
                "text": {"type": "mrkdwn", "text": section.text},
            })
        blocks.append({"type": "divider"})
        blocks.append({
            "type": "context",
            "elements": [{"type": "mrkdwn", "text": self.footer}],
        })
        return blocks

    def to_payload(self) -> Dict[str, Any]:
        """Full JSON body accepted by both the bot API and incoming webhooks."""
        return {"text": self.fallback_text(), "blocks": self.to_blocks()}


class DeliveryAck(BaseModel):
    """Acknowledgement returned by a delivery channel."""
    mode: DeliveryMode = Field(..., description="Channel that handled the message")
    message_id: Optional[str] = Field(default=None, description="Message timestamp/id, when the channel returns one")
    channel: Optional[str] = Field(default=None, description="Destination channel, when known")


class RunResult(BaseModel):
    """
    Model for watcher run results.
    """
    new_versions: List[str] = Field(default_factory=list, description="Novel versions in delivery order")
    acks: List[DeliveryAck] = Field(default_factory=list, description="Acknowledgements of delivered messages")
    first_run: bool = Field(default=False, description="Whether no snapshot existed before this run")
    cache_updated: bool = Field(default=False, description="Whether the snapshot was rewritten")
    duration_seconds: float = Field(default=0.0, description="Total run duration in seconds")
    start_time: datetime = Field(default_factory=datetime.utcnow, description="Run start time")
    end_time: Optional[datetime] = Field(default=None, description="Run end time")

    @property
    def messages_delivered(self) -> int:
        return len(self.acks)

    class Config:
        """Pydantic configuration."""
        json_encoders = {
            datetime: lambda v: v.isoformat()
        }
