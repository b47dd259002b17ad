"""
Run orchestration for the changelog watcher.

One call to ``ChangelogWatcher.run`` is one pass: fetch, load snapshot, diff,
format and deliver each novel entry oldest first, then save the snapshot.
Nothing is retried. If a delivery fails the snapshot is left untouched, so
the next run delivers the same entries again (at-least-once).
"""

from datetime import datetime
from typing import Optional

from changelog.cache import SnapshotCache
from changelog.diff import find_new_entries, in_delivery_order
from changelog.fetcher import ChangelogFetcher
from changelog.formatter import MessageFormatter
from changelog.models import RunResult
from notifier.delivery import Delivery, build_delivery
from utilities.config import WatcherConfig
from utilities.logger import RunLogger


class ChangelogWatcher:
    """Detects new changelog entries and delivers them as chat messages."""

    def __init__(
        self,
        config: WatcherConfig,
        fetcher: Optional[ChangelogFetcher] = None,
        cache: Optional[SnapshotCache] = None,
        delivery: Optional[Delivery] = None,
        formatter: Optional[MessageFormatter] = None,
        save_snapshot: bool = True
    ):
        """
        Initialize the watcher.

        Args:
            config: Watcher configuration
            fetcher: Document source, built from config when omitted
            cache: Snapshot store, built from config when omitted
            delivery: Delivery channel, chosen from config when omitted
            formatter: Message formatter
            save_snapshot: Write the fetched document back to the cache; off for dry runs
        """
        self.config = config
        self.fetcher = fetcher or ChangelogFetcher(
            timeout=config.request_timeout,
            headers=config.get_headers()
        )
        self.cache = cache or SnapshotCache(config.get_cache_file_path())
        self.delivery = delivery or build_delivery(config)
        self.formatter = formatter or MessageFormatter()
        self.save_snapshot = save_snapshot
        self.run_logger = RunLogger("changelog_watcher")

    async def run(self) -> RunResult:
        """
        Execute one watcher pass.

        Returns:
            RunResult describing what was delivered

        Raises:
            FetchError, DeliveryError, ConfigurationError, OSError: propagated unchanged
        """
        result = RunResult()
        self.run_logger.clear_context().bind_context(
            delivery=self.delivery.mode.value,
            save_snapshot=self.save_snapshot
        )
        self.run_logger.log_run_start(self.fetcher.url)

        stage = "fetch"
        try:
            current = await self.fetcher.fetch()

            stage = "load_cache"
            cached = await self.cache.load()
            result.first_run = cached is None

            stage = "diff"
            new_entries = in_delivery_order(find_new_entries(current, cached))
            result.new_versions = [entry.version for entry in new_entries]
            self.run_logger.log_new_entries(result.new_versions, result.first_run)

            stage = "deliver"
            for entry in new_entries:
                message = self.formatter.format(entry)
                ack = await self.delivery.deliver(message)
                result.acks.append(ack)
                self.run_logger.log_delivered(entry.version, ack.mode.value, ack.message_id)

            if self.save_snapshot:
                stage = "save_cache"
                await self.cache.save(current)
                result.cache_updated = True
                self.run_logger.log_cache_saved(str(self.cache.path), len(current))

        except Exception as e:
            self.run_logger.log_error(str(e), stage=stage)
            raise

        result.end_time = datetime.utcnow()
        result.duration_seconds = (result.end_time - result.start_time).total_seconds()
        self.run_logger.log_run_complete(result.messages_delivered, result.duration_seconds)
        return result
