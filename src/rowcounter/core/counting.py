"""Counting engine: turns a parsed report into measurement points.

Every function takes its inputs explicitly and returns its outputs; nothing
is kept between calls, so one invocation can never see another's counts.
"""

import logging
from typing import assert_never

from rowcounter.core.labels import extract_group_label
from rowcounter.core.models import CountingMode, DashboardKind, MeasurementPoint
from rowcounter.core.ports import ReportDocument
from rowcounter.core.queries import ReportLayout, layout_for

logger = logging.getLogger(__name__)

ZERO = MeasurementPoint(value=0.0)


def count_rows(
    report: ReportDocument,
    mode: CountingMode,
    kind: DashboardKind,
) -> list[MeasurementPoint]:
    """Apply a counting strategy to a report.

    Args:
        report: Parsed report answering path queries.
        mode: Counting strategy.
        kind: Dashlet whose rows are counted.

    Returns:
        One point for ROW_COUNT and UNIQUE_ROW_COUNT; one point per distinct
        group label for INSTANCES_PER_UNIQUE_ROW, or a single zero point
        when the report has no qualifying rows.
    """
    layout = layout_for(kind)
    logger.debug("Counting %s rows with mode %s", kind.value, mode.value)
    match mode:
        case CountingMode.ROW_COUNT:
            return [count_all(report, layout)]
        case CountingMode.UNIQUE_ROW_COUNT:
            return [count_unique(report, layout)]
        case CountingMode.INSTANCES_PER_UNIQUE_ROW:
            return count_instances(report, layout)
        case _:
            assert_never(mode)


def count_all(report: ReportDocument, layout: ReportLayout) -> MeasurementPoint:
    """Count every qualifying row."""
    value = report.evaluate_count(layout.count)
    logger.debug("Row count: %s", value)
    return MeasurementPoint(value=value)


def count_unique(report: ReportDocument, layout: ReportLayout) -> MeasurementPoint:
    """Count distinct group labels among the qualifying rows."""
    nodes = report.evaluate_nodes(layout.rows)
    logger.debug("Qualifying rows: %d", len(nodes))
    if not nodes:
        return ZERO
    labels = unique_labels(report, nodes, layout)
    logger.debug("Number of unique rows: %d", len(labels))
    return MeasurementPoint(value=float(len(labels)))


def count_instances(report: ReportDocument, layout: ReportLayout) -> list[MeasurementPoint]:
    """Count, for each distinct group label, the rows whose attribute contains it.

    Matching is by substring: a label ``A`` also counts a row grouped as
    ``AB``.
    """
    nodes = report.evaluate_nodes(layout.rows)
    logger.debug("Qualifying rows: %d", len(nodes))
    if not nodes:
        return [ZERO]

    points = []
    for label in unique_labels(report, nodes, layout):
        value = report.evaluate_count(layout.label_count, label=label)
        logger.debug("Rows for %r: %s", label, value)
        points.append(MeasurementPoint(value=value, group_label=label))
    return points


def unique_labels(report: ReportDocument, nodes, layout: ReportLayout) -> list[str]:
    """Return distinct non-empty group labels in first-seen document order."""
    seen: dict[str, None] = {}
    for node in nodes:
        raw = report.attribute(node, layout.attribute)
        if raw is None:
            logger.warning(
                "Row has no %r attribute and is ignored from evaluation",
                layout.attribute,
            )
            continue
        label = extract_group_label(raw, layout.attribute, layout.delimiter)
        if not label:
            logger.warning("Row %r has an empty group label and is ignored", raw)
            continue
        seen.setdefault(label, None)
    return list(seen)
