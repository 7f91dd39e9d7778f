from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

DEFAULT_URI = "wss://fstream.binance.com/ws/btcusdt@bookTicker"
DEFAULT_OUTPUT_PATH = "aggregated_data.txt"


@dataclass(frozen=True)
class AppConfig:
    uri: str = DEFAULT_URI
    output_path: str = DEFAULT_OUTPUT_PATH
    truncate_output: bool = True

    latency_window: int = 100
    dedup_max_ids: Optional[int] = None  # None = sem limite

    # 0 = sem ping do cliente (o upstream pinga e o websocket-client responde)
    ping_interval_sec: float = 0.0
    ping_timeout_sec: float | None = None

    writer_join_timeout_sec: float = 10.0


def _opt(d: Mapping[str, Any], path: str, default: Any) -> Any:
    cur: Any = d
    for part in path.split("."):
        if not isinstance(cur, Mapping) or part not in cur:
            return default
        cur = cur[part]
    return cur


def _to_int(x: Any, path: str) -> int:
    if isinstance(x, bool):
        raise ValueError(f"Config inválida: '{path}' deve ser inteiro, veio {x!r}.")
    try:
        return int(x)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Config inválida: '{path}' deve ser inteiro, veio {x!r}.") from e


def _to_bool(x: Any, path: str) -> bool:
    if not isinstance(x, bool):
        raise ValueError(f"Config inválida: '{path}' deve ser true/false, veio {x!r}.")
    return x


def _to_float(x: Any, path: str) -> float:
    try:
        return float(x)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Config inválida: '{path}' deve ser numérico, veio {x!r}.") from e


def load_config(path: str = "config.yaml") -> AppConfig:
    """
    Lê o YAML de configuração. Arquivo ausente = tudo no padrão.

    Exemplo:
      uri: "wss://fstream.binance.com/ws/btcusdt@bookTicker"
      output_path: "aggregated_data.txt"
      latency_window: 100
      dedup_max_ids: null
    """
    p = Path(path)
    if not p.exists():
        return AppConfig()

    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Config inválida: '{path}' não é YAML válido: {e}") from e
    if not isinstance(data, Mapping):
        raise ValueError(f"Config inválida: '{path}' deve conter um mapa (dict).")

    uri = str(_opt(data, "uri", DEFAULT_URI))
    if not uri.startswith(("wss://", "ws://")):
        raise ValueError(f"Config inválida: 'uri' deve ser ws:// ou wss://, veio {uri!r}.")

    output_path = str(_opt(data, "output_path", DEFAULT_OUTPUT_PATH))
    truncate_output = _to_bool(_opt(data, "truncate_output", True), "truncate_output")

    latency_window = _to_int(_opt(data, "latency_window", 100), "latency_window")
    if latency_window <= 0:
        raise ValueError(f"Config inválida: 'latency_window' deve ser positivo, veio {latency_window}.")

    dedup_raw = _opt(data, "dedup_max_ids", None)
    dedup_max_ids = None
    if dedup_raw is not None:
        dedup_max_ids = _to_int(dedup_raw, "dedup_max_ids")
        if dedup_max_ids <= 0:
            raise ValueError(f"Config inválida: 'dedup_max_ids' deve ser positivo, veio {dedup_max_ids}.")

    ping_interval_sec = _to_float(_opt(data, "ping_interval_sec", 0.0), "ping_interval_sec")
    pt_raw = _opt(data, "ping_timeout_sec", None)
    ping_timeout_sec = None if pt_raw is None else _to_float(pt_raw, "ping_timeout_sec")

    # websocket-client exige ping_timeout < ping_interval
    if ping_interval_sec and ping_timeout_sec and ping_timeout_sec >= ping_interval_sec:
        raise ValueError(
            "Config inválida: 'ping_timeout_sec' deve ser menor que 'ping_interval_sec' "
            f"({ping_timeout_sec} >= {ping_interval_sec})."
        )

    writer_join_timeout_sec = _to_float(_opt(data, "writer_join_timeout_sec", 10.0), "writer_join_timeout_sec")

    return AppConfig(
        uri=uri,
        output_path=output_path,
        truncate_output=truncate_output,
        latency_window=latency_window,
        dedup_max_ids=dedup_max_ids,
        ping_interval_sec=ping_interval_sec,
        ping_timeout_sec=ping_timeout_sec,
        writer_join_timeout_sec=writer_join_timeout_sec,
    )
