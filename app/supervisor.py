from __future__ import annotations

import sys
import threading
from typing import Callable, List

from domain.ports import FeedConnection, SinkWriter


class Supervisor:
    """
    Sobe o writer, abre N readers (ids 1..N, uma thread cada), espera todos
    terminarem e só então sinaliza stop e faz join do writer.
    """

    def __init__(
        self,
        *,
        num_connections: int,
        reader_factory: Callable[[int], FeedConnection],
        writer: SinkWriter,
        poll_sec: float = 0.5,
    ):
        if num_connections <= 0:
            raise ValueError(f"num_connections deve ser positivo: {num_connections}")
        self.num_connections = num_connections
        self.reader_factory = reader_factory
        self.writer = writer
        self.poll_sec = poll_sec

        self.readers: List[FeedConnection] = []
        self.threads: List[threading.Thread] = []

    def run(self) -> int:
        self.writer.start()
        try:
            for conn_id in range(1, self.num_connections + 1):
                reader = self.reader_factory(conn_id)
                t = threading.Thread(
                    target=reader.connect,
                    name=f"reader-{conn_id}",
                    daemon=True,
                )
                self.readers.append(reader)
                self.threads.append(t)
                t.start()

            try:
                self._join_readers()
            except KeyboardInterrupt:
                print("[supervisor] interrupted, closing connections...", file=sys.stderr, flush=True)
                self.shutdown()
                self._join_readers()
        finally:
            self.writer.stop()
        return 0

    def shutdown(self) -> None:
        for reader in self.readers:
            try:
                reader.close()
            except Exception as e:
                print(f"[Client {reader.conn_id}] close failed: {e}", file=sys.stderr, flush=True)

    def _join_readers(self) -> None:
        # join com timeout para o Ctrl-C chegar na thread principal
        for t in self.threads:
            while t.is_alive():
                t.join(timeout=self.poll_sec)
