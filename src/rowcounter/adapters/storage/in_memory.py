"""In-memory storage adapters used by the CLI and the test suite."""

import bisect
from collections.abc import AsyncIterable, Sequence

from rowcounter.core.models import LogEntry, MetricSample


class InMemoryLogStorage:
    """LogStoragePort kept in a list sorted by timestamp.

    Entries with equal timestamps stay in arrival order, so a run's log
    reads back the way it was written.
    """

    def __init__(self) -> None:
        self._entries: list[LogEntry] = []

    async def write(self, entry: LogEntry) -> None:
        self.write_sync(entry)

    def write_sync(self, entry: LogEntry) -> None:
        """Insert an entry; safe to call from a logging.Handler."""
        bisect.insort_right(self._entries, entry, key=lambda e: e.timestamp)

    async def read(self, since: float = 0) -> AsyncIterable[LogEntry]:
        """Yield entries with timestamp > since, oldest first."""
        start = bisect.bisect_right(self._entries, since, key=lambda e: e.timestamp)
        for entry in self._entries[start:]:
            yield entry


class InMemoryMetricsStorage:
    """MetricsStoragePort kept in write order.

    Samples of one publish share a timestamp; write order preserves the
    order of the measurement points that produced them.
    """

    def __init__(self) -> None:
        self._samples: list[MetricSample] = []

    async def write_many(self, samples: Sequence[MetricSample]) -> None:
        self._samples.extend(samples)

    async def read(self, since: float = 0) -> AsyncIterable[MetricSample]:
        for sample in [s for s in self._samples if s.timestamp > since]:
            yield sample
