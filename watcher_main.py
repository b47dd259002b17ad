"""
Main entry point for the changelog watcher.

Runs a single check: new changelog entries are posted to Slack and the
snapshot is updated. Scheduling is left to the caller (cron, CI job, ...).

Usage: python watcher_main.py [--dry-run]

--dry-run prints messages instead of sending them and leaves the snapshot untouched.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from pydantic import ValidationError

from changelog.models import DeliveryMode
from notifier.watcher import ChangelogWatcher
from utilities.config import WatcherConfig
from utilities.logger import setup_logging, get_logger


async def main(argv=None) -> int:
    """Run one changelog check and return the process exit status."""
    args = sys.argv[1:] if argv is None else argv

    dry_run = False
    if args:
        if args[0] == "--dry-run":
            dry_run = True
        else:
            print(f"Unknown argument: {args[0]}", file=sys.stderr)
            print("Usage: python watcher_main.py [--dry-run]", file=sys.stderr)
            return 2

    try:
        config = WatcherConfig()
    except ValidationError as e:
        # Logging is not configured yet; structlog defaults still print the event
        get_logger(__name__).error("Fatal error occurred", error=str(e), error_type=type(e).__name__)
        return 1

    if dry_run:
        config.delivery_mode = DeliveryMode.PRINT_ONLY.value

    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.get_log_file_path(),
        debug=config.debug
    )

    logger = get_logger(__name__)

    try:
        # A dry run must not mark anything as seen
        watcher = ChangelogWatcher(config, save_snapshot=not dry_run)
        result = await watcher.run()
    except Exception as e:
        logger.error("Fatal error occurred", error=str(e), error_type=type(e).__name__)
        return 1

    logger.info(
        "Done",
        new_versions=result.new_versions,
        messages_delivered=result.messages_delivered,
        first_run=result.first_run
    )
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
