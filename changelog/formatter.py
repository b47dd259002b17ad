"""
Chat message formatting for changelog entries.

This module provides:
- Bullet extraction from a version entry body
- Prefix-based item classification into fixed categories
- Markdown to Slack mrkdwn conversion for item text
- Length-bounded section rendering and message assembly
"""

import re
from typing import Dict, List, Tuple

from changelog.models import (
    Category, CategoryBucket, CategorySection, FormattedMessage, VersionEntry
)

CHANGELOG_PAGE_URL = "https://github.com/anthropics/claude-code/blob/main/CHANGELOG.md"

HEADER_TEMPLATE = "\U0001F680 Claude Code v{version} \U0001F680"
INTRO_TEXT = "A new version of Claude Code has been released. Here's what changed:"
FOOTER_TEXT = f"<{CHANGELOG_PAGE_URL}|View full changelog on GitHub>"

ITEM_PREFIX = "  • "

# Block Kit section text tops out at 3000 characters
SECTION_MAX_CHARS = 2900
SECTION_TRUNCATE_AT = 2850
TRUNCATION_MARKER = "\n_...and more_"

# First matching rule wins
CATEGORY_PREFIXES: List[Tuple[Category, Tuple[str, ...]]] = [
    (Category.ADDED, ("added", "add ", "new ", "introducing")),
    (Category.FIXED, ("fixed", "fix ")),
    (Category.CHANGED, ("changed", "change ")),
    (Category.IMPROVED, ("improved", "improve ")),
    (Category.REMOVED, ("removed", "remove ")),
]

BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")


def classify_item(item: str) -> Category:
    """
    Pick the category for a bullet item by case-insensitive prefix.

    Args:
        item: Bullet text without its marker

    Returns:
        Matching category, or ``Category.UPDATES`` when nothing matches
    """
    lowered = item.lower()
    for category, prefixes in CATEGORY_PREFIXES:
        if lowered.startswith(prefixes):
            return category
    return Category.UPDATES


def convert_markdown(text: str) -> str:
    """Convert bold spans and links to mrkdwn; inline code passes through."""
    text = BOLD_RE.sub(r"*\1*", text)
    return LINK_RE.sub(r"<\2|\1>", text)


def extract_items(body: str) -> List[str]:
    """Bullet items of an entry body, heading and non-bullet lines dropped."""
    items = []
    for line in body.splitlines():
        if line.startswith("## "):
            continue
        stripped = line.strip()
        if not stripped.startswith("-"):
            continue
        item = stripped[1:].strip()
        if item:
            items.append(item)
    return items


def build_buckets(items: List[str]) -> List[CategoryBucket]:
    """Group items into non-empty buckets, in fixed category order."""
    grouped: Dict[Category, List[str]] = {category: [] for category in Category}
    for item in items:
        grouped[classify_item(item)].append(ITEM_PREFIX + convert_markdown(item))

    return [
        CategoryBucket(category=category, items=grouped[category])
        for category in Category
        if grouped[category]
    ]


def render_section(bucket: CategoryBucket) -> CategorySection:
    """Render a bucket, truncating sections over the per-block budget."""
    text = bucket.render()
    if len(text) > SECTION_MAX_CHARS:
        # Cut at the last whole item so links and emphasis stay balanced
        cut = text.rfind("\n", 0, SECTION_TRUNCATE_AT + 1)
        if cut <= len(bucket.label) + 2:
            cut = SECTION_TRUNCATE_AT
        text = text[:cut] + TRUNCATION_MARKER
    return CategorySection(label=bucket.label, text=text)


class MessageFormatter:
    """Turns a version entry into a structured chat message."""

    def format(self, entry: VersionEntry) -> FormattedMessage:
        """
        Format one version entry.

        Entries without bullet items still produce header, intro and footer.

        Args:
            entry: Parsed version entry

        Returns:
            FormattedMessage ready for delivery
        """
        buckets = build_buckets(extract_items(entry.body))
        return FormattedMessage(
            version=entry.version,
            header=HEADER_TEMPLATE.format(version=entry.version),
            intro=INTRO_TEXT,
            sections=[render_section(bucket) for bucket in buckets],
            footer=FOOTER_TEXT
        )
