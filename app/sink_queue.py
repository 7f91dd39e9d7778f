from __future__ import annotations

import threading
from collections import deque
from typing import Deque, List, Optional, Tuple


class SinkQueue:
    """
    FIFO entre os readers (produtores) e o writer (consumidor único).

    drain_or_wait() devolve todos os itens enfileirados junto com o flag de
    stop lido sob o mesmo lock: se stop=True, todo item empurrado antes de
    stop() já está no lote devolvido.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._items: Deque[str] = deque()
        self._stopped = False

        self.total_pushed = 0

    def push(self, item: str) -> None:
        with self._cond:
            self._items.append(item)
            self.total_pushed += 1
            self._cond.notify()

    def drain_or_wait(self, timeout: Optional[float] = None) -> Tuple[List[str], bool]:
        with self._cond:
            self._cond.wait_for(lambda: self._items or self._stopped, timeout)
            items = list(self._items)
            self._items.clear()
            return items, self._stopped

    def stop(self) -> None:
        with self._cond:
            self._stopped = True
            self._cond.notify_all()

    @property
    def stopped(self) -> bool:
        with self._cond:
            return self._stopped

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)
