"""BDD step definitions for row counting features."""

import asyncio
from dataclasses import dataclass, field
from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from rowcounter.adapters.storage.in_memory import InMemoryMetricsStorage
from rowcounter.core.models import MetricSample
from rowcounter.monitor import RowCounterMonitor, Status
from tests.reports import chart_report, transactions_report


@dataclass
class CountingScenarioContext:
    """State shared between the steps of one scenario."""

    metrics_storage: InMemoryMetricsStorage = field(default_factory=InMemoryMetricsStorage)
    config: dict[str, Any] = field(
        default_factory=lambda: {
            "username": "admin",
            "password": "admin",
            "dashboardName": "Overview",
        }
    )
    body: bytes = b""
    status: Status | None = None


@pytest.fixture
def ctx() -> CountingScenarioContext:
    """Fresh scenario context for each test."""
    return CountingScenarioContext()


def _samples(ctx: CountingScenarioContext) -> list[MetricSample]:
    async def read() -> list[MetricSample]:
        return [s async for s in ctx.metrics_storage.read()]

    return asyncio.run(read())


# === Given ===
@given("in-memory metrics storage")
def step_metrics_storage(ctx: CountingScenarioContext) -> None:
    ctx.metrics_storage = InMemoryMetricsStorage()


@given(parsers.parse('a business transaction report with groups "{groups}"'))
def step_transactions_report(ctx: CountingScenarioContext, groups: str) -> None:
    ctx.body = transactions_report(*groups.split("|"))


@given(parsers.parse('a chart report with measures "{measures}"'))
def step_chart_report(ctx: CountingScenarioContext, measures: str) -> None:
    ctx.body = chart_report(*measures.split("|"))
    ctx.config["dashboardOption"] = "Chart"


@given(parsers.parse('a report body "{body}"'))
def step_report_body(ctx: CountingScenarioContext, body: str) -> None:
    ctx.body = body.encode()


@given(parsers.parse('the counting mode "{mode}"'))
def step_counting_mode(ctx: CountingScenarioContext, mode: str) -> None:
    ctx.config["countChoice"] = mode


# === When ===
@when("the monitor executes")
def step_execute(ctx: CountingScenarioContext, mock_fetcher) -> None:
    fetcher, _ = mock_fetcher(ctx.body)
    monitor = RowCounterMonitor(ctx.metrics_storage, fetcher_factory=lambda config: fetcher)
    assert monitor.setup(ctx.config).ok
    ctx.status = asyncio.run(monitor.execute("dt.example"))


# === Then ===
@then("the execution succeeds")
def step_succeeds(ctx: CountingScenarioContext) -> None:
    assert ctx.status is not None and ctx.status.ok, ctx.status


@then("the execution fails")
def step_fails(ctx: CountingScenarioContext) -> None:
    assert ctx.status is not None and not ctx.status.ok


@then(parsers.parse("a single measurement of {value:d} is published"))
def step_single_measurement(ctx: CountingScenarioContext, value: int) -> None:
    [sample] = _samples(ctx)
    assert sample.name == "Rows"
    assert sample.value == float(value)
    assert "unique_measure" not in sample.labels


@then(parsers.parse('the measurement for "{label}" is {value:d}'))
def step_labelled_measurement(ctx: CountingScenarioContext, label: str, value: int) -> None:
    by_label = {s.labels.get("unique_measure"): s.value for s in _samples(ctx)}
    assert by_label[label] == float(value)


@then("nothing is published")
def step_nothing_published(ctx: CountingScenarioContext) -> None:
    assert _samples(ctx) == []
