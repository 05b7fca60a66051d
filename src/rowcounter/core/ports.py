"""Port interfaces for storage and report-parsing adapters.

These protocols define the contracts that adapters must implement.
The core domain depends only on these interfaces, not concrete implementations.
"""

from collections.abc import AsyncIterable, Sequence
from typing import Any, Protocol, runtime_checkable

from rowcounter.core.models import LogEntry, MetricSample


@runtime_checkable
class LogStoragePort(Protocol):
    """Port for log storage operations.

    Adapters implementing this protocol can store and retrieve log entries.
    Examples: InMemoryLogStorage.
    """

    async def write(self, entry: LogEntry) -> None:
        """Write a log entry to storage."""
        ...

    def write_sync(self, entry: LogEntry) -> None:
        """Write a log entry from a non-async context (logging handlers)."""
        ...

    def read(self, since: float = 0) -> AsyncIterable[LogEntry]:
        """Read log entries since the given timestamp.

        Args:
            since: Unix timestamp. Returns entries with timestamp > since.
                   Default 0 returns all entries.

        Returns:
            Async iterable of LogEntry objects, ordered by timestamp ascending.
        """
        ...


@runtime_checkable
class MetricsStoragePort(Protocol):
    """Port for the measurement sink.

    Adapters implementing this protocol receive published metric samples.
    Examples: InMemoryMetricsStorage, SQLiteMetricsStorage.
    """

    async def write_many(self, samples: Sequence[MetricSample]) -> None:
        """Store all samples of one publish, or none of them if storing fails."""
        ...

    def read(self, since: float = 0) -> AsyncIterable[MetricSample]:
        """Read metric samples with timestamp > since."""
        ...


@runtime_checkable
class ReportDocument(Protocol):
    """A parsed report that answers path queries.

    Implemented by the XML adapter; the counting engine only needs these
    two query forms.
    """

    def evaluate_count(self, expr: str, **variables: str) -> float:
        """Return the numeric result of a count() path expression."""
        ...

    def evaluate_nodes(self, expr: str, **variables: str) -> Sequence[Any]:
        """Return matching elements in document order."""
        ...

    def attribute(self, node: Any, name: str) -> str | None:
        """Return the raw attribute value of a node, None when absent."""
        ...
