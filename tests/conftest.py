"""Shared test fixtures for all test modules."""

from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from rowcounter.adapters.http.fetcher import ReportFetcher
from rowcounter.adapters.storage.in_memory import (
    InMemoryLogStorage,
    InMemoryMetricsStorage,
)


@pytest.fixture
def metrics_db_path(tmp_path: Path) -> str:
    """Provide a temporary database path for metrics storage tests."""
    return str(tmp_path / "metrics.db")


@pytest.fixture
def metrics_storage() -> InMemoryMetricsStorage:
    """Fixture providing an empty metrics storage."""
    return InMemoryMetricsStorage()


@pytest.fixture
def log_storage() -> InMemoryLogStorage:
    """Fixture providing an empty log storage."""
    return InMemoryLogStorage()


@pytest.fixture
def mock_fetcher() -> Callable[..., tuple[ReportFetcher, list[httpx.Request]]]:
    """Factory fixture for a ReportFetcher backed by httpx.MockTransport.

    Returns a callable taking either a response body (served with status
    200), a status code and body, or a handler raising an httpx error.
    The second element of the returned tuple records the requests made.

    Usage:
        fetcher, requests = mock_fetcher(b"<dashboardreport/>")
    """

    def _factory(
        body: bytes = b"",
        status_code: int = 200,
        error: Exception | None = None,
    ) -> tuple[ReportFetcher, list[httpx.Request]]:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if error is not None:
                raise error
            return httpx.Response(status_code, content=body)

        return ReportFetcher(transport=httpx.MockTransport(handler)), requests

    return _factory
