from __future__ import annotations

from typing import Iterable, List

import pytest

from app.dedup import DedupRegistry
from app.latency_tracker import LatencyTracker
from app.pipeline import AggregationPipeline
from app.sink_queue import SinkQueue
from domain.models import LatencySummary


class FakeClock:
    def __init__(self, ticks: Iterable[int]):
        self._ticks = list(ticks)

    def now_ms(self) -> int:
        return self._ticks.pop(0)


class RecordingSink:
    def __init__(self) -> None:
        self.summaries: List[LatencySummary] = []

    def handle(self, summary: LatencySummary) -> None:
        self.summaries.append(summary)


@pytest.fixture
def report_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def queue() -> SinkQueue:
    return SinkQueue()


@pytest.fixture
def pipeline(queue, report_sink) -> AggregationPipeline:
    return AggregationPipeline(
        registry=DedupRegistry(),
        tracker=LatencyTracker(window=100),
        queue=queue,
        report_sink=report_sink,
    )


def drain_now(q: SinkQueue) -> List[str]:
    items, _ = q.drain_or_wait(timeout=0)
    return items
