from __future__ import annotations

import sys
from typing import TextIO

from domain.ports import ReportSink
from domain.models import LatencySummary


class PrintSink(ReportSink):
    def __init__(self, stream: TextIO | None = None):
        self._stream = stream

    def handle(self, summary: LatencySummary) -> None:
        print(
            f"[Client {summary.conn_id}] p50: {summary.p50_ms} ms, p90: {summary.p90_ms} ms",
            file=self._stream or sys.stderr,
            flush=True,
        )
