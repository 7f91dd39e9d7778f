from __future__ import annotations

from typing import Any, Union

import orjson

from .models import FeedMessage, MessageParseError

U64_MAX = 2**64 - 1
I64_MIN = -(2**63)
I64_MAX = 2**63 - 1


def _int_field(doc: dict, name: str, lo: int, hi: int) -> int:
    if name not in doc:
        raise MessageParseError(f"missing field '{name}'")
    v: Any = doc[name]
    # bool é subclasse de int
    if isinstance(v, bool) or not isinstance(v, int):
        raise MessageParseError(f"field '{name}' is not an integer: {v!r}")
    if v < lo or v > hi:
        raise MessageParseError(f"field '{name}' out of range: {v}")
    return v


def parse_message(payload: Union[str, bytes]) -> FeedMessage:
    """
    Extrai `u` (id da atualização, uint64) e `T` (timestamp do servidor em ms,
    int64) do payload. O restante do objeto não é validado.
    """
    if isinstance(payload, (bytes, bytearray)):
        try:
            payload = bytes(payload).decode("utf-8")
        except UnicodeDecodeError as e:
            raise MessageParseError(f"payload is not utf-8: {e}") from e

    try:
        doc = orjson.loads(payload)
    except orjson.JSONDecodeError as e:
        raise MessageParseError(str(e)) from e

    if not isinstance(doc, dict):
        raise MessageParseError(f"payload is not a JSON object: {type(doc).__name__}")

    return FeedMessage(
        msg_id=_int_field(doc, "u", 0, U64_MAX),
        server_ts_ms=_int_field(doc, "T", I64_MIN, I64_MAX),
        payload=payload,
    )
