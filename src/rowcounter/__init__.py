"""rowcounter - counts rows of server-generated XML reports and publishes them as metrics."""

from rowcounter.adapters.logging import LogStorageHandler, configure_logging, get_logger
from rowcounter.adapters.storage import (
    InMemoryLogStorage,
    InMemoryMetricsStorage,
    SQLiteMetricsStorage,
)
from rowcounter.config import ProbeConfig
from rowcounter.core.models import (
    CountingMode,
    DashboardKind,
    MeasurementPoint,
    MetricSample,
)
from rowcounter.monitor import RowCounterMonitor, Status, StatusCode

__all__ = [
    "CountingMode",
    "DashboardKind",
    "InMemoryLogStorage",
    "InMemoryMetricsStorage",
    "LogStorageHandler",
    "MeasurementPoint",
    "MetricSample",
    "ProbeConfig",
    "RowCounterMonitor",
    "SQLiteMetricsStorage",
    "Status",
    "StatusCode",
    "configure_logging",
    "get_logger",
]
