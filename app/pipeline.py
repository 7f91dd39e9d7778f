from __future__ import annotations

import threading
from typing import Tuple

from domain.models import FeedMessage, annotate
from domain.ports import ReportSink

from .dedup import DedupRegistry
from .latency_tracker import LatencyTracker
from .sink_queue import SinkQueue


class AggregationPipeline:
    """
    Caminho de uma mensagem já parseada:

    - DedupRegistry: só segue se o id `u` for novo
    - LatencyTracker: registra receive_ts_ms - T na janela da conexão
    - SinkQueue: enfileira payload + `, "latency_ms":<N>` para o writer

    Cada etapa toma apenas o próprio lock, sempre nessa ordem
    (dedup -> latência -> fila), sem aninhar.
    """

    def __init__(
        self,
        registry: DedupRegistry,
        tracker: LatencyTracker,
        queue: SinkQueue,
        report_sink: ReportSink,
    ):
        self.registry = registry
        self.tracker = tracker
        self.queue = queue
        self.report_sink = report_sink

        self._tot_lock = threading.Lock()
        self.total_accepted = 0
        self.total_duplicates = 0

    def submit(self, conn_id: int, msg: FeedMessage, receive_ts_ms: int) -> bool:
        if not self.registry.observe(msg.msg_id):
            with self._tot_lock:
                self.total_duplicates += 1
            return False

        latency_ms = receive_ts_ms - msg.server_ts_ms

        summary = self.tracker.record(conn_id, latency_ms)
        if summary is not None:
            self.report_sink.handle(summary)

        self.queue.push(annotate(msg.payload, latency_ms))

        with self._tot_lock:
            self.total_accepted += 1
        return True

    def totals(self) -> Tuple[int, int]:
        with self._tot_lock:
            return self.total_accepted, self.total_duplicates
