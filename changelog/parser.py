"""
Version entry parsing for the changelog document.

Only level-2 headings of the form ``## 1.2.3`` or ``## [1.2.3]`` start an
entry. Anything before the first heading is ignored.
"""

import re
from typing import Iterable, List, Set

from changelog.models import VersionEntry

VERSION_HEADING_RE = re.compile(r"^## \[?(\d+\.\d+\.\d+)\]?", re.MULTILINE)


def parse_entries(document: str) -> List[VersionEntry]:
    """
    Split a changelog document into version entries.

    Args:
        document: Raw markdown text

    Returns:
        Entries in document order (newest first for this changelog)
    """
    matches = list(VERSION_HEADING_RE.finditer(document))
    entries = []

    for i, match in enumerate(matches):
        start = match.start()
        end = matches[i + 1].start() if i + 1 < len(matches) else len(document)
        entries.append(VersionEntry(
            version=match.group(1),
            body=document[start:end].strip()
        ))

    return entries


def entry_versions(entries: Iterable[VersionEntry]) -> Set[str]:
    """Version strings present in a set of entries."""
    return {entry.version for entry in entries}
