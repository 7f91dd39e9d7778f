import threading
import time

import pytest

from app.sink_queue import SinkQueue
from app.supervisor import Supervisor
from conftest import FakeClock
from infra.file_writer import FileSinkWriter
from infra.ws_reader import FeedReader


class ScriptedReader(FeedReader):
    """Reader que entrega payloads fixos em vez de abrir uma sessão."""

    def __init__(self, conn_id, pipeline, payloads):
        super().__init__(
            "wss://example.invalid/ws",
            conn_id,
            pipeline=pipeline,
            clock=FakeClock([1_000 + i for i in range(len(payloads))]),
        )
        self.payloads = payloads

    def connect(self):
        self._on_open(None)
        for p in self.payloads:
            self._on_message(None, p)
        self._on_close(None)


def _lines(path):
    with open(path, encoding="utf-8") as f:
        return f.read().splitlines()


def test_run_writes_each_id_once(tmp_path, pipeline, queue):
    out = tmp_path / "agg.txt"
    shared = ['{"u":%d,"T":900}' % u for u in range(1, 21)]

    sup = Supervisor(
        num_connections=3,
        reader_factory=lambda cid: ScriptedReader(cid, pipeline, shared),
        writer=FileSinkWriter(str(out), queue),
    )
    assert sup.run() == 0

    lines = _lines(out)
    assert len(lines) == 20
    ids = [int(line.split('"u":')[1].split(",")[0]) for line in lines]
    assert sorted(ids) == list(range(1, 21))
    assert [r.conn_id for r in sup.readers] == [1, 2, 3]
    assert not sup.writer.is_alive()


def test_disjoint_connections_yield_union(tmp_path, pipeline, queue):
    out = tmp_path / "agg.txt"
    per_conn = {
        1: ['{"u":%d,"T":900}' % u for u in range(1, 11)],
        2: ['{"u":%d,"T":900}' % u for u in range(11, 21)],
    }
    sup = Supervisor(
        num_connections=2,
        reader_factory=lambda cid: ScriptedReader(cid, pipeline, per_conn[cid]),
        writer=FileSinkWriter(str(out), queue),
    )
    sup.run()

    lines = _lines(out)
    assert len(lines) == 20
    assert pipeline.totals() == (20, 0)


def test_shutdown_closes_every_reader(tmp_path):
    closed = []

    class BlockingReader:
        def __init__(self, conn_id):
            self.conn_id = conn_id
            self._done = threading.Event()

        def connect(self):
            self._done.wait(timeout=5)

        def close(self):
            closed.append(self.conn_id)
            self._done.set()

    sup = Supervisor(
        num_connections=2,
        reader_factory=BlockingReader,
        writer=FileSinkWriter(str(tmp_path / "agg.txt"), SinkQueue()),
        poll_sec=0.01,
    )
    t = threading.Thread(target=sup.run)
    t.start()
    while len(sup.threads) < 2:
        time.sleep(0.001)
    sup.shutdown()
    t.join(timeout=5)

    assert not t.is_alive()
    assert sorted(closed) == [1, 2]


def test_rejects_non_positive_connection_count(tmp_path):
    with pytest.raises(ValueError):
        Supervisor(
            num_connections=0,
            reader_factory=lambda cid: None,
            writer=FileSinkWriter(str(tmp_path / "x"), SinkQueue()),
        )
