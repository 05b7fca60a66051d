"""Scheduled row counter monitor.

A host scheduler drives the monitor through ``setup`` -> ``execute`` ->
``teardown``; the three calls never overlap. Each ``execute`` fetches the
report, parses it, counts its rows and publishes the result, in that
order, and keeps nothing for the next run.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from rowcounter.adapters.http.fetcher import ReportFetcher
from rowcounter.adapters.logging import get_logger
from rowcounter.adapters.xml.parser import parse_report
from rowcounter.config import ProbeConfig
from rowcounter.core.counting import count_rows
from rowcounter.core.errors import ConfigError, RowCounterError
from rowcounter.core.models import MeasurementPoint
from rowcounter.core.ports import MetricsStoragePort
from rowcounter.core.publisher import MeasurementPublisher

logger = get_logger(__name__)


class StatusCode(Enum):
    SUCCESS = "Success"
    ERROR_INTERNAL = "ErrorInternal"


@dataclass(frozen=True)
class Status:
    """Outcome reported back to the scheduler."""

    code: StatusCode
    message: str = ""
    points: tuple[MeasurementPoint, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.code is StatusCode.SUCCESS

    @classmethod
    def success(cls, points: tuple[MeasurementPoint, ...] = ()) -> Status:
        return cls(StatusCode.SUCCESS, points=points)

    @classmethod
    def error(cls, message: str) -> Status:
        return cls(StatusCode.ERROR_INTERNAL, message=message)


class RowCounterMonitor:
    """Counts report rows and publishes them to a metrics sink.

    Args:
        metrics_storage: Measurement sink.
        fetcher_factory: Builds the fetcher for a config; tests inject one
            backed by httpx.MockTransport.
    """

    def __init__(
        self,
        metrics_storage: MetricsStoragePort,
        fetcher_factory: Callable[[ProbeConfig], ReportFetcher] | None = None,
    ) -> None:
        self._publisher = MeasurementPublisher(metrics_storage)
        self._fetcher_factory = fetcher_factory or _default_fetcher
        self._config: ProbeConfig | None = None

    @property
    def config(self) -> ProbeConfig | None:
        return self._config

    def setup(self, config: ProbeConfig | Mapping[str, Any]) -> Status:
        """Validate configuration before the first execution."""
        logger.debug("Entering setup")
        try:
            if not isinstance(config, ProbeConfig):
                config = ProbeConfig.from_mapping(config)
        except ConfigError as e:
            logger.error("Setup failed: %s", e, extra={"config_key": e.key or ""})
            self._config = None
            return Status.error(str(e))

        self._config = config
        logger.debug(
            "Configured %s %s on port %d",
            config.dashboard_kind.value,
            config.counting_mode.value,
            config.port,
            extra={"username": config.username},
        )
        return Status.success()

    async def execute(self, host: str) -> Status:
        """Run one fetch -> parse -> count -> publish cycle against ``host``.

        Every failure is logged and reported as ERROR_INTERNAL; nothing is
        published for a failed run. Cancellation propagates to the caller.
        """
        config = self._config
        if config is None:
            logger.error("execute called without a successful setup")
            return Status.error("monitor is not set up")

        try:
            fetcher = self._fetcher_factory(config)
            raw = await fetcher.fetch(config.report_query(), config.credentials, config.endpoint(host))
            report = parse_report(raw)
            points = count_rows(report, config.counting_mode, config.dashboard_kind)
            await self._publisher.publish(points)
        except RowCounterError as e:
            logger.error(
                "%s: %s",
                type(e).__name__,
                e,
                exc_info=True,
                extra={"retryable": e.retryable},
            )
            return Status.error(str(e))
        except Exception as e:
            logger.exception("Unexpected error during execution")
            return Status.error(f"{type(e).__name__}: {e}")

        logger.info(
            "Executed successfully for %s, published %d measurement(s)",
            config.dashboard_name,
            len(points),
        )
        return Status.success(tuple(points))

    def teardown(self) -> None:
        """Forget the configuration; the next run starts with setup again."""
        logger.debug("Entering teardown")
        self._config = None


def _default_fetcher(config: ProbeConfig) -> ReportFetcher:
    return ReportFetcher(timeout=config.timeout_seconds, insecure=config.ignore_certificates)
