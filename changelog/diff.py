"""
Novelty detection between the fetched changelog and the cached snapshot.
"""

from typing import List, Optional

import structlog

from changelog.models import VersionEntry
from changelog.parser import entry_versions, parse_entries

logger = structlog.get_logger(__name__)


def find_new_entries(current: str, cached: Optional[str]) -> List[VersionEntry]:
    """
    Compute the entries of ``current`` that the cached snapshot does not have.

    On the first run (no snapshot) only the newest entry is returned so that
    setting the watcher up does not replay the whole history.

    Args:
        current: Freshly fetched document
        cached: Previous snapshot, or None when there is none

    Returns:
        Novel entries in the current document's order (newest first)
    """
    current_entries = parse_entries(current)

    # An empty snapshot file counts as no snapshot
    if not cached:
        return current_entries[:1]

    seen = entry_versions(parse_entries(cached))
    new_entries = [entry for entry in current_entries if entry.version not in seen]

    logger.debug(
        "Compared changelog against snapshot",
        current_entries=len(current_entries),
        cached_versions=len(seen),
        new_entries=len(new_entries)
    )
    return new_entries


def in_delivery_order(entries: List[VersionEntry]) -> List[VersionEntry]:
    """Oldest-first copy of a newest-first entry list."""
    return list(reversed(entries))
