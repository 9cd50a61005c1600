"""
Recency-ordered scanning of the date-partitioned event store.

The store has no city index, so a lookup lists the two most recent day
partitions (today and yesterday, to absorb timezone skew between the producer
and us), merges them newest first and caps the result to a scan budget before
any object body is read. Matches older than about 48 hours are missed; that is
fine for "current weather".
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, date, datetime, timedelta

from tripweather.config import DEFAULT_MAX_KEYS_PER_PARTITION, DEFAULT_SCAN_BUDGET
from tripweather.infrastructure.object_store import ObjectStore
from tripweather.observability.logging import get_logger
from tripweather.observability.telemetry import counter
from tripweather.weather.errors import TransientIOError
from tripweather.weather.types import StoreObjectRef

logger = get_logger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _sort_key(ref: StoreObjectRef) -> datetime:
    modified = ref.last_modified
    if modified is None:
        return _EPOCH
    if modified.tzinfo is None:
        return modified.replace(tzinfo=UTC)
    return modified


def partition_prefix(events_path: str, day: date) -> str:
    """``events/2025/03/07/`` style prefix for one day."""
    return f"{events_path}{day.year:04d}/{day.month:02d}/{day.day:02d}/"


class EventStoreScanner:
    """Lists and reads candidate event objects within a fixed budget."""

    def __init__(
        self,
        store: ObjectStore,
        events_path: str = "events/",
        max_keys_per_partition: int = DEFAULT_MAX_KEYS_PER_PARTITION,
        scan_budget: int = DEFAULT_SCAN_BUDGET,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.store = store
        self.events_path = events_path
        self.max_keys_per_partition = max_keys_per_partition
        self.scan_budget = scan_budget
        self._clock = clock

    def partition_prefixes(self, today: date | None = None) -> list[str]:
        """Today's and yesterday's prefixes, in that order."""
        day = today or self._clock().date()
        return [
            partition_prefix(self.events_path, day),
            partition_prefix(self.events_path, day - timedelta(days=1)),
        ]

    def list_recent(self) -> list[StoreObjectRef]:
        """
        Newest-first object refs from the recent partitions, capped to the
        scan budget.

        A partition that cannot be listed (typically today's, before the
        pipeline has written to it) contributes nothing; the other partition
        is still scanned.

        Side Effects:
            - Calls the object store list operation once per partition
            - Increments weather.scan.partition_error on listing failures
        """
        refs: list[StoreObjectRef] = []
        for prefix in self.partition_prefixes():
            try:
                refs.extend(self.store.list_objects(prefix, self.max_keys_per_partition))
            except TransientIOError as e:
                counter("weather.scan.partition_error")
                logger.warning("Skipping partition %s: %s", prefix, e)

        refs.sort(key=_sort_key, reverse=True)
        return refs[: self.scan_budget]

    def fetch(self, ref: StoreObjectRef) -> bytes | None:
        """Object bytes, or None if the read failed."""
        try:
            return self.store.get_object(ref.key)
        except TransientIOError as e:
            counter("weather.scan.object_error")
            logger.debug("Skipping unreadable object %s: %s", ref.key, e)
            return None

    def check_connection(self) -> bool:
        """List at most one key to confirm the bucket is reachable."""
        try:
            self.store.list_objects(self.events_path, 1)
        except TransientIOError as e:
            logger.error("Weather store connection test failed: %s", e)
            return False
        logger.info("Weather store connection test successful (%s)", self.store.bucket_name)
        return True
