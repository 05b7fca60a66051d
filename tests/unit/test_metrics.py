"""Tests for metric helpers and the measurement publisher."""

import time
from collections.abc import AsyncIterable, Sequence

import pytest

from rowcounter.adapters.storage.in_memory import InMemoryMetricsStorage
from rowcounter.core.metrics import gauge, row_sample
from rowcounter.core.models import MeasurementPoint, MetricSample
from rowcounter.core.publisher import MeasurementPublisher


class BatchRecordingSink:
    """Records each batch handed to write_many, or fails with a given error."""

    def __init__(self, error: Exception | None = None) -> None:
        self.batches: list[list[MetricSample]] = []
        self._error = error

    async def write_many(self, samples: Sequence[MetricSample]) -> None:
        if self._error is not None:
            raise self._error
        self.batches.append(list(samples))

    async def read(self, since: float = 0) -> AsyncIterable[MetricSample]:
        for batch in self.batches:
            for sample in batch:
                yield sample


class TestGauge:
    """Tests for gauge() helper function."""

    @pytest.mark.core
    def test_gauge_creates_metric_sample(self) -> None:
        sample = gauge("Rows", 4.0)
        assert isinstance(sample, MetricSample)
        assert sample.name == "Rows"
        assert sample.value == 4.0
        assert sample.labels == {}

    @pytest.mark.core
    def test_gauge_auto_captures_timestamp(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(time, "time", lambda: 1702300000.0)
        assert gauge("Rows", 1.0).timestamp == 1702300000.0

    @pytest.mark.core
    def test_gauge_explicit_timestamp(self) -> None:
        assert gauge("Rows", 1.0, timestamp=5.0).timestamp == 5.0


class TestRowSample:
    """Tests for row_sample()."""

    @pytest.mark.core
    def test_static_point(self) -> None:
        sample = row_sample(MeasurementPoint(value=3.0), timestamp=10.0)
        assert sample == MetricSample(
            name="Rows", timestamp=10.0, value=3.0, labels={"metric_group": "Row Counter"}
        )

    @pytest.mark.core
    def test_dynamic_point_carries_label(self) -> None:
        sample = row_sample(MeasurementPoint(value=2.0, group_label="Checkout"), timestamp=10.0)
        assert sample.labels == {"metric_group": "Row Counter", "unique_measure": "Checkout"}


class TestMeasurementPublisher:
    """Tests for MeasurementPublisher."""

    @pytest.mark.core
    async def test_one_sample_per_point(self) -> None:
        storage = InMemoryMetricsStorage()
        publisher = MeasurementPublisher(storage, clock=lambda: 100.0)

        samples = await publisher.publish(
            [MeasurementPoint(2.0, "A"), MeasurementPoint(1.0, "B")]
        )

        stored = [s async for s in storage.read()]
        assert stored == samples
        assert [s.labels["unique_measure"] for s in stored] == ["A", "B"]
        assert {s.timestamp for s in stored} == {100.0}

    @pytest.mark.core
    async def test_points_are_written_as_one_batch(self) -> None:
        sink = BatchRecordingSink()

        await MeasurementPublisher(sink).publish([MeasurementPoint(2.0, "A"), MeasurementPoint(1.0, "B")])

        assert [len(batch) for batch in sink.batches] == [2]

    @pytest.mark.core
    async def test_failed_batch_propagates(self) -> None:
        sink = BatchRecordingSink(error=OSError("disk full"))

        with pytest.raises(OSError, match="disk full"):
            await MeasurementPublisher(sink).publish([MeasurementPoint(2.0, "A")])
        assert sink.batches == []

    @pytest.mark.core
    async def test_nothing_to_publish(self) -> None:
        storage = InMemoryMetricsStorage()
        assert await MeasurementPublisher(storage).publish([]) == []
        assert [s async for s in storage.read()] == []
