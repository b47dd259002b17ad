"""
Snapshot persistence for the last processed changelog document.
"""

from pathlib import Path
from typing import Optional, Union

import structlog

logger = structlog.get_logger(__name__)


class SnapshotCache:
    """Single-file store holding the last seen document text."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.logger = logger.bind(component="snapshot_cache", path=str(self.path))

    async def load(self) -> Optional[str]:
        """
        Read the previous snapshot.

        Returns:
            Snapshot text, or None when no snapshot has been written yet
        """
        if not self.path.exists():
            self.logger.info("No cached changelog found")
            return None

        with open(self.path, 'r', encoding='utf-8', newline='') as f:
            content = f.read()

        self.logger.info("Loaded cached changelog", chars=len(content))
        return content

    async def save(self, content: str) -> None:
        """Overwrite the snapshot with ``content``."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8', newline='') as f:
            f.write(content)
