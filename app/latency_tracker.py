from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Dict, List, Optional

from domain.models import LatencySummary

LATENCY_WINDOW = 100


class LatencyTracker:
    """
    Janela deslizante das últimas `window` latências (ms) por conexão.

    Quando a janela está cheia, cada nova amostra gera um LatencySummary com
    p50 = s[W/2] e p90 = s[(W*90)/100] da cópia ordenada (índices fixos,
    sem interpolação).
    """

    def __init__(self, window: int = LATENCY_WINDOW):
        if window <= 0:
            raise ValueError(f"window deve ser positivo: {window}")
        self.window = window

        self._lock = threading.Lock()
        self._windows: Dict[int, Deque[int]] = {}

    def record(self, conn_id: int, latency_ms: int) -> Optional[LatencySummary]:
        with self._lock:
            w = self._windows.get(conn_id)
            if w is None:
                # maxlen descarta a amostra mais antiga (FIFO)
                w = deque(maxlen=self.window)
                self._windows[conn_id] = w
            w.append(latency_ms)

            if len(w) < self.window:
                return None

            ordered = sorted(w)

        return LatencySummary(
            conn_id=conn_id,
            p50_ms=ordered[self.window // 2],
            p90_ms=ordered[(self.window * 90) // 100],
            window=self.window,
        )

    def samples(self, conn_id: int) -> List[int]:
        with self._lock:
            return list(self._windows.get(conn_id, ()))
