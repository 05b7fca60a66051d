"""Core domain: models, ports and the counting engine."""

from rowcounter.core.counting import count_rows
from rowcounter.core.models import (
    CountingMode,
    Credentials,
    DashboardKind,
    Endpoint,
    FilterKind,
    LogEntry,
    MeasurementPoint,
    MetricSample,
    ReportFilter,
    ReportQuery,
)

__all__ = [
    "CountingMode",
    "Credentials",
    "DashboardKind",
    "Endpoint",
    "FilterKind",
    "LogEntry",
    "MeasurementPoint",
    "MetricSample",
    "ReportFilter",
    "ReportQuery",
    "count_rows",
]
