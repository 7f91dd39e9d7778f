import pytest

from config import DEFAULT_OUTPUT_PATH, DEFAULT_URI, AppConfig, load_config


def test_missing_file_yields_defaults(tmp_path):
    cfg = load_config(str(tmp_path / "nope.yaml"))
    assert cfg == AppConfig()
    assert cfg.uri == DEFAULT_URI
    assert cfg.output_path == DEFAULT_OUTPUT_PATH
    assert cfg.latency_window == 100
    assert cfg.dedup_max_ids is None


def test_reads_values(tmp_path):
    p = tmp_path / "config.yaml"
    p.write_text(
        "uri: wss://example.com/ws/x\n"
        "output_path: out.txt\n"
        "truncate_output: false\n"
        "latency_window: 10\n"
        "dedup_max_ids: 5000\n"
        "ping_interval_sec: 20\n"
        "ping_timeout_sec: 10\n",
        encoding="utf-8",
    )
    cfg = load_config(str(p))
    assert cfg.uri == "wss://example.com/ws/x"
    assert cfg.output_path == "out.txt"
    assert cfg.truncate_output is False
    assert cfg.latency_window == 10
    assert cfg.dedup_max_ids == 5000
    assert cfg.ping_interval_sec == 20.0
    assert cfg.ping_timeout_sec == 10.0


def test_empty_file_yields_defaults(tmp_path):
    p = tmp_path / "config.yaml"
    p.write_text("", encoding="utf-8")
    assert load_config(str(p)) == AppConfig()


@pytest.mark.parametrize(
    "body",
    [
        "latency_window: 0\n",
        "latency_window: abc\n",
        "dedup_max_ids: -1\n",
        "uri: https://example.com\n",
        "ping_interval_sec: 5\nping_timeout_sec: 5\n",
        "- just\n- a list\n",
        "uri: [unclosed\n",
        "truncate_output: \"false\"\n",
    ],
)
def test_invalid_values_raise(tmp_path, body):
    p = tmp_path / "config.yaml"
    p.write_text(body, encoding="utf-8")
    with pytest.raises(ValueError, match="Config inválida"):
        load_config(str(p))
