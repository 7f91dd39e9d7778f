from __future__ import annotations

from typing import Protocol

from .models import FeedMessage, LatencySummary


class Clock(Protocol):
    def now_ms(self) -> int: ...


class ReportSink(Protocol):
    def handle(self, summary: LatencySummary) -> None: ...


class MessagePipeline(Protocol):
    def submit(self, conn_id: int, msg: FeedMessage, receive_ts_ms: int) -> bool:
        """True se a mensagem foi aceita (id novo)."""
        ...


class FeedConnection(Protocol):
    conn_id: int

    def connect(self) -> None: ...

    def close(self) -> None: ...


class SinkWriter(Protocol):
    def start(self) -> None: ...

    def stop(self) -> None: ...
