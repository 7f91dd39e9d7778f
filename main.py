from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from config import load_config
from app.dedup import DedupRegistry
from app.latency_tracker import LatencyTracker
from app.pipeline import AggregationPipeline
from app.sink_queue import SinkQueue
from app.supervisor import Supervisor
from infra.clock import SystemClock
from infra.file_writer import FileSinkWriter
from infra.sinks import PrintSink
from infra.tls import get_ssl_context
from infra.ws_reader import FeedReader


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="feed-aggregator",
        description="Redundant WebSocket feed aggregator with dedup and latency stats.",
    )
    parser.add_argument("number_of_connections", type=int)
    parser.add_argument("--config", default="config.yaml", help="YAML config path (default: config.yaml)")

    args = parser.parse_args(argv)
    if args.number_of_connections <= 0:
        parser.error("Number of connections must be a positive integer.")
    return args


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)

    try:
        cfg = load_config(args.config)
    except (OSError, ValueError) as e:
        raise SystemExit(str(e))

    print(
        f"[config] uri={cfg.uri} connections={args.number_of_connections} "
        f"output={cfg.output_path} window={cfg.latency_window} dedup_max_ids={cfg.dedup_max_ids}",
        file=sys.stderr,
        flush=True,
    )

    # ---- estado compartilhado ----
    registry = DedupRegistry(max_ids=cfg.dedup_max_ids)
    tracker = LatencyTracker(window=cfg.latency_window)
    queue = SinkQueue()

    pipeline = AggregationPipeline(
        registry=registry,
        tracker=tracker,
        queue=queue,
        report_sink=PrintSink(),
    )

    writer = FileSinkWriter(
        cfg.output_path,
        queue,
        truncate=cfg.truncate_output,
        join_timeout_sec=cfg.writer_join_timeout_sec,
    )

    clock = SystemClock()
    ssl_context = get_ssl_context() if cfg.uri.startswith("wss://") else None

    def make_reader(conn_id: int) -> FeedReader:
        return FeedReader(
            cfg.uri,
            conn_id,
            pipeline=pipeline,
            clock=clock,
            ssl_context=ssl_context,
            ping_interval_sec=cfg.ping_interval_sec,
            ping_timeout_sec=cfg.ping_timeout_sec,
        )

    supervisor = Supervisor(
        num_connections=args.number_of_connections,
        reader_factory=make_reader,
        writer=writer,
    )

    rc = supervisor.run()

    accepted, duplicates = pipeline.totals()
    parse_errors = sum(r.total_parse_errors for r in supervisor.readers)
    print(
        f"[totals] accepted={accepted:,} duplicates={duplicates:,} parse_errors={parse_errors:,} "
        f"written={writer.total_written:,} write_failures={writer.total_failed:,}",
        file=sys.stderr,
        flush=True,
    )
    return rc


if __name__ == "__main__":
    sys.exit(main())
