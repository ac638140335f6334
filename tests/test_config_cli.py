import pytest

from perp_metrics import cli
from perp_metrics.config import Config
from perp_metrics.metrics import analyze_positions, group_sessions


def test_config_defaults(monkeypatch):
    names = ("HOST", "PORT", "SESSION_GAP_MS", "UNKNOWN_SIDE_POLICY", "LOG_LEVEL", "AGGREGATE_FILLS_BY_TIME")
    for name in names:
        monkeypatch.delenv(name, raising=False)
    config = Config.from_env()
    assert config.port == 8000
    assert config.session_gap_ms == 300_000
    assert config.unknown_side_policy == "sign"
    assert config.log_level == "INFO"
    assert config.aggregate_fills_by_time is False


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("PORT", "9100")
    monkeypatch.setenv("SESSION_GAP_MS", "60000")
    monkeypatch.setenv("UNKNOWN_SIDE_POLICY", "BUY")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("AGGREGATE_FILLS_BY_TIME", "true")
    monkeypatch.setenv("HYPERLIQUID_API_URL", "https://api.hyperliquid-testnet.xyz")

    config = Config.from_env()
    assert config.port == 9100
    assert config.session_gap_ms == 60_000
    assert config.unknown_side_policy == "buy"
    assert config.log_level == "DEBUG"
    assert config.aggregate_fills_by_time is True
    assert config.hyperliquid_api_url == "https://api.hyperliquid-testnet.xyz"


def test_format_amount():
    assert cli.format_amount(1234.5) == "+$1,234.50"
    assert cli.format_amount(-2) == "-$2.00"


def test_format_timestamp():
    assert cli.format_timestamp(0) == "1970-01-01 00:00:00"


def test_print_sessions_and_positions(capsys, scenario_fills, clearinghouse_state):
    cli.print_sessions(group_sessions(scenario_fills), max_show=1)
    cli.print_positions(analyze_positions(clearinghouse_state["assetPositions"], 10000.0))
    out = capsys.readouterr().out

    assert "TRADE SESSIONS (2 total, showing 1)" in out
    assert "ETH" in out
    assert "71% Long" in out
    assert "$11,200.00" in out


def test_print_sessions_empty(capsys):
    cli.print_sessions([])
    assert "No trade history available" in capsys.readouterr().out


def test_cli_rejects_bad_address(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["not-an-address"])
    assert exc.value.code == 1
    assert "Invalid address format" in capsys.readouterr().out
