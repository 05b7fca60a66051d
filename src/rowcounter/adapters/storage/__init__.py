"""Storage adapters implementing core ports."""

from rowcounter.adapters.storage.in_memory import (
    InMemoryLogStorage,
    InMemoryMetricsStorage,
)
from rowcounter.adapters.storage.sqlite_metrics import SQLiteMetricsStorage

__all__ = [
    "InMemoryLogStorage",
    "InMemoryMetricsStorage",
    "SQLiteMetricsStorage",
]
