from __future__ import annotations
from dataclasses import dataclass


class MessageParseError(ValueError):
    """Payload não pôde ser convertido em FeedMessage."""


@dataclass(frozen=True)
class FeedMessage:
    msg_id: int        # campo "u"
    server_ts_ms: int  # campo "T"
    payload: str       # texto original, repassado sem alteração


@dataclass(frozen=True)
class LatencySummary:
    conn_id: int
    p50_ms: int
    p90_ms: int
    window: int


def annotate(payload: str, latency_ms: int) -> str:
    # concatenação simples: a linha resultante não é JSON válido
    return f'{payload}, "latency_ms":{latency_ms}'
