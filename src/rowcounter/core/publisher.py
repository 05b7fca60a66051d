"""Publishes measurement points to the metrics sink."""

import logging
import time
from collections.abc import Callable, Iterable

from rowcounter.core.metrics import row_sample
from rowcounter.core.models import MeasurementPoint, MetricSample
from rowcounter.core.ports import MetricsStoragePort

logger = logging.getLogger(__name__)


class MeasurementPublisher:
    """Writes one ``Rows`` sample per measurement point.

    All samples of one publish call share a timestamp and are handed to
    the sink as a single batch, so a failed write publishes nothing.

    Args:
        storage: Sink implementing MetricsStoragePort.
        clock: Time source, defaults to time.time.
    """

    def __init__(
        self,
        storage: MetricsStoragePort,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._storage = storage
        self._clock = clock

    async def publish(self, points: Iterable[MeasurementPoint]) -> list[MetricSample]:
        """Publish points and return the samples written."""
        now = self._clock()
        samples = [row_sample(point, timestamp=now) for point in points]
        if not samples:
            return samples
        await self._storage.write_many(samples)
        for sample in samples:
            logger.debug("Published %s=%s %s", sample.name, sample.value, sample.labels)
        return samples
