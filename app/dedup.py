from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Optional, Set


class DedupRegistry:
    """
    Conjunto global de ids (`u`) já vistos por qualquer conexão.

    - observe() faz consulta + inserção sob o mesmo lock: de duas conexões
      que recebem o mesmo id, exatamente uma vê o id como novo.
    - max_ids=None: cresce sem limite (padrão).
    - max_ids=N: mantém só os N ids mais recentes (ordem de inserção).
    """

    def __init__(self, max_ids: Optional[int] = None):
        if max_ids is not None and max_ids <= 0:
            raise ValueError(f"max_ids deve ser positivo: {max_ids}")
        self.max_ids = max_ids

        self._lock = threading.Lock()
        self._seen: Set[int] = set()
        self._order: Deque[int] = deque()
        self.total_evicted = 0

    def observe(self, msg_id: int) -> bool:
        with self._lock:
            if msg_id in self._seen:
                return False
            self._seen.add(msg_id)

            if self.max_ids is not None:
                self._order.append(msg_id)
                while len(self._order) > self.max_ids:
                    self._seen.discard(self._order.popleft())
                    self.total_evicted += 1
            return True

    def __contains__(self, msg_id: int) -> bool:
        with self._lock:
            return msg_id in self._seen

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)
