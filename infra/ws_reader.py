from __future__ import annotations

import ssl
import sys
import threading
from typing import Optional, Union

import websocket

from domain.models import MessageParseError
from domain.parsing import parse_message
from domain.ports import Clock, MessagePipeline


class FeedReader:
    """
    Uma sessão WebSocket (wss) com o upstream.

    Callbacks da mesma conexão são serializados pela thread do run_forever;
    conexões diferentes rodam em paralelo e só se encontram no pipeline.
    Não reconecta: encerrada a sessão, o reader termina.
    """

    def __init__(
        self,
        uri: str,
        conn_id: int,
        *,
        pipeline: MessagePipeline,
        clock: Clock,
        ssl_context: Optional[ssl.SSLContext] = None,
        ping_interval_sec: float = 0.0,
        ping_timeout_sec: Optional[float] = None,
    ):
        self.uri = uri
        self.conn_id = conn_id
        self.pipeline = pipeline
        self.clock = clock
        self.ssl_context = ssl_context
        self.ping_interval_sec = ping_interval_sec
        self.ping_timeout_sec = ping_timeout_sec

        # RLock: close() pode ser chamado de dentro do próprio connect()
        self._lock = threading.RLock()
        self._ws: Optional[websocket.WebSocketApp] = None
        self._closing = False

        self.total_received = 0
        self.total_parse_errors = 0

    def _log(self, msg: str) -> None:
        print(f"[Client {self.conn_id}] {msg}", file=sys.stderr, flush=True)

    def connect(self) -> None:
        with self._lock:
            if self._closing:
                return
            ws = websocket.WebSocketApp(
                self.uri,
                on_open=self._on_open,
                on_message=self._on_message,
                on_error=self._on_error,
                on_close=self._on_close,
            )
            self._ws = ws
            # close() pode ter chegado durante a construção
            if self._closing:
                return

        sslopt = {"context": self.ssl_context} if self.ssl_context is not None else None
        try:
            ws.run_forever(
                sslopt=sslopt,
                ping_interval=self.ping_interval_sec,
                ping_timeout=self.ping_timeout_sec,
                reconnect=0,
            )
        except Exception as e:
            self._log(f"Connection error: {e}")

    def close(self) -> None:
        with self._lock:
            self._closing = True
            ws = self._ws
        if ws is not None:
            ws.close()

    def handle_message(self, payload: Union[str, bytes], receive_ts_ms: int) -> bool:
        self.total_received += 1
        try:
            msg = parse_message(payload)
        except MessageParseError as e:
            self.total_parse_errors += 1
            self._log(f"Error parsing message: {e}")
            return False

        return self.pipeline.submit(self.conn_id, msg, receive_ts_ms)

    # -----------------------------
    # callbacks do websocket-client
    # -----------------------------
    def _on_message(self, _ws, message) -> None:
        # timestamp antes de qualquer parse
        receive_ts_ms = self.clock.now_ms()
        self.handle_message(message, receive_ts_ms)

    def _on_open(self, ws) -> None:
        self._log("Connection opened.")
        # close() entre o re-check e o run_forever: run_forever religa keep_running
        with self._lock:
            closing = self._closing
        if closing:
            ws.close()

    def _on_error(self, _ws, error) -> None:
        self._log(f"Connection error: {error}")

    def _on_close(self, _ws, close_status_code=None, close_msg=None) -> None:
        if close_status_code is None:
            self._log("Connection closed.")
        else:
            self._log(f"Connection closed. code={close_status_code} reason={close_msg!r}")
