import io

from app.latency_tracker import LatencyTracker
from domain.models import LatencySummary
from infra.sinks import PrintSink


def test_window_summary_line_goes_to_stderr(capsys):
    tracker = LatencyTracker()
    sink = PrintSink()
    for lat in range(1, 101):
        summary = tracker.record(1, lat)
        if summary is not None:
            sink.handle(summary)

    out = capsys.readouterr()
    assert out.err == "[Client 1] p50: 51 ms, p90: 91 ms\n"
    assert out.out == ""


def test_negative_percentiles_are_printed_as_is():
    buf = io.StringIO()
    PrintSink(buf).handle(LatencySummary(conn_id=7, p50_ms=-4, p90_ms=-1, window=100))
    assert buf.getvalue() == "[Client 7] p50: -4 ms, p90: -1 ms\n"
