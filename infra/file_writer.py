from __future__ import annotations

import sys
import threading
from typing import List, Optional, TextIO

from app.sink_queue import SinkQueue


class FileSinkWriter:
    """
    Writer único: drena a SinkQueue para um arquivo texto, uma linha por item.

    - Abre truncando (padrão) ou em append.
    - Falha ao abrir: loga e a thread termina (os readers seguem enfileirando).
    - Falha ao escrever: loga, conta o lote como perdido e segue.
    - Termina quando o lote drenado veio com stop=True.
    """

    def __init__(
        self,
        path: str,
        queue: SinkQueue,
        *,
        truncate: bool = True,
        join_timeout_sec: Optional[float] = 10.0,
    ):
        self.path = path
        self.queue = queue
        self.truncate = truncate
        self.join_timeout_sec = join_timeout_sec

        self._t = threading.Thread(target=self._worker, name="writer", daemon=True)

        self.total_written = 0
        self.total_failed = 0

    def start(self) -> None:
        self._t.start()

    def stop(self) -> None:
        self.queue.stop()
        if self._t.is_alive():
            self._t.join(timeout=self.join_timeout_sec)
            if self._t.is_alive():
                print(f"[writer] still running after {self.join_timeout_sec}s", file=sys.stderr, flush=True)

    def is_alive(self) -> bool:
        return self._t.is_alive()

    def _open(self) -> Optional[TextIO]:
        mode = "w" if self.truncate else "a"
        try:
            return open(self.path, mode, encoding="utf-8", newline="\n")
        except OSError as e:
            print(f"Failed to open output file: {self.path} ({e})", file=sys.stderr, flush=True)
            return None

    def _write(self, f: TextIO, batch: List[str]) -> None:
        try:
            for item in batch:
                f.write(item)
                f.write("\n")
            f.flush()
            self.total_written += len(batch)
        except OSError as e:
            self.total_failed += len(batch)
            print(f"[writer] write failed, dropped {len(batch)} line(s): {e}", file=sys.stderr, flush=True)

    def _worker(self) -> None:
        f = self._open()
        if f is None:
            return

        with f:
            while True:
                batch, stopped = self.queue.drain_or_wait()
                if batch:
                    self._write(f, batch)
                if stopped:
                    break
