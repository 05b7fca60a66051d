"""Core domain models for report counting, published samples and log entries."""

from dataclasses import dataclass, field
from enum import Enum


class DashboardKind(Enum):
    """Which dashlet of the report is counted."""

    BUSINESS_TRANSACTION = "Business Transaction"
    CHART = "Chart"


class CountingMode(Enum):
    """Counting strategy applied to the report rows."""

    ROW_COUNT = "count rows"
    UNIQUE_ROW_COUNT = "count unique rows"
    INSTANCES_PER_UNIQUE_ROW = "count instances"


class FilterKind(Enum):
    """Optional report filters and the URL segment prefix each one uses."""

    SYSTEM_PROFILE = "source=live:"
    TRANSACTION = "filter=bt:"


@dataclass(frozen=True)
class ReportFilter:
    """A single optional report filter.

    Attributes:
        kind: Filter kind, determines the URL segment.
        value: Filter value (e.g. a system profile name).
        enabled: Whether the filter was switched on in configuration.
    """

    kind: FilterKind
    value: str
    enabled: bool = True

    @property
    def segment(self) -> str:
        return f"&{self.kind.value}{self.value}"


@dataclass(frozen=True)
class ReportQuery:
    """Parameters of a report-retrieval request.

    Attributes:
        report_name: Name of the server-side dashboard to export.
        timeframe: Offset timeframe token (e.g. LAST:30:MINUTES).
        filters: Optional filters, applied in order.
    """

    report_name: str
    timeframe: str
    filters: tuple[ReportFilter, ...] = ()


@dataclass(frozen=True)
class Credentials:
    """Basic-auth credentials for the report server."""

    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class Endpoint:
    """Report server location."""

    protocol: str
    host: str
    port: int


@dataclass(frozen=True)
class MeasurementPoint:
    """A counted value, optionally tagged with a discovered group label.

    Attributes:
        value: The counted value.
        group_label: Dynamic dimension label, None for plain counts.
    """

    value: float
    group_label: str | None = None


@dataclass(frozen=True)
class LogEntry:
    """A structured log entry.

    Attributes:
        timestamp: Unix timestamp in seconds.
        level: Log level (e.g., INFO, ERROR, DEBUG).
        message: The log message.
        attributes: Additional structured fields.
    """

    timestamp: float
    level: str
    message: str
    attributes: dict[str, str | int | float | bool] = field(default_factory=dict)


@dataclass(frozen=True)
class MetricSample:
    """A single metric measurement.

    Attributes:
        name: Metric name (e.g., Rows).
        timestamp: Unix timestamp in seconds.
        value: The metric value.
        labels: Key-value pairs for metric dimensions.
    """

    name: str
    timestamp: float
    value: float
    labels: dict[str, str] = field(default_factory=dict)
