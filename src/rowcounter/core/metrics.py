"""Metric helper functions for creating MetricSample objects."""

import time

from rowcounter.core.models import MeasurementPoint, MetricSample

METRIC_GROUP = "Row Counter"
MSR_ROW = "Rows"

GROUP_LABEL = "metric_group"
DYNAMIC_LABEL = "unique_measure"


def gauge(
    name: str,
    value: float,
    labels: dict[str, str] | None = None,
    timestamp: float | None = None,
) -> MetricSample:
    """Create a gauge metric sample.

    Args:
        name: Metric name (e.g., "Rows")
        value: Current gauge value
        labels: Optional dimension labels
        timestamp: Sample time (default: now)

    Returns:
        MetricSample with the given or current timestamp
    """
    return MetricSample(
        name=name,
        timestamp=time.time() if timestamp is None else timestamp,
        value=value,
        labels=labels or {},
    )


def row_sample(point: MeasurementPoint, timestamp: float | None = None) -> MetricSample:
    """Convert a measurement point into the ``Rows`` gauge of the row counter group.

    Points carrying a group label become dynamic measurements, tagged with
    the label under ``unique_measure``.
    """
    labels = {GROUP_LABEL: METRIC_GROUP}
    if point.group_label is not None:
        labels[DYNAMIC_LABEL] = point.group_label
    return gauge(MSR_ROW, float(point.value), labels=labels, timestamp=timestamp)
