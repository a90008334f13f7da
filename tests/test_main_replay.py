"""Tests for the trade replay command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from app.config import AppSettings
from app.main import main_replay_trades


def _write_trades(tmp_path: Path, trades: object) -> Path:
    trades_file = tmp_path / "trades.json"
    trades_file.write_text(json.dumps(trades), encoding="utf-8")
    return trades_file


def _trade(trade_id: str, side: str, quantity: str, price: str) -> dict[str, str]:
    return {
        "trade_id": trade_id,
        "order_id": f"order-{trade_id}",
        "symbol": "ETH",
        "side": side,
        "price": price,
        "quantity": quantity,
        "execution_timestamp": "2026-01-05T10:00:00+00:00",
    }


def test_main_replay_trades_prints_pnl_breakdown(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Record every trade in order and print the final PnL breakdown as JSON.

    Returns:
        None: Assertions validate replay output.

    Raises:
        AssertionError: Raised when replay output deviates.
    """

    trades_file = _write_trades(
        tmp_path,
        [
            _trade("t1", "BUY", "0.5", "2000"),
            _trade("t2", "BUY", "1.75", "2400"),
            _trade("t3", "SELL", "0.8", "2600"),
        ],
    )

    accepted = main_replay_trades(AppSettings(environment_name="test"), trades_file)

    printed_payload = json.loads(capsys.readouterr().out)
    assert accepted is True
    assert printed_payload["total_realized_pnl"] == "360.00"
    assert printed_payload["total_unrealized_pnl"] == "145.00"
    assert printed_payload["net_pnl"] == "505.00"


def test_main_replay_trades_stops_at_first_rejected_trade(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Return False without printing when a trade is rejected.

    Returns:
        None: Assertions validate rejection handling.

    Raises:
        AssertionError: Raised when rejected replays report success.
    """

    trades_file = _write_trades(tmp_path, [_trade("t1", "BUY", "1", "2000"), _trade("t2", "SELL", "2", "2100")])

    accepted = main_replay_trades(AppSettings(environment_name="test"), trades_file)

    assert accepted is False
    assert capsys.readouterr().out == ""


def test_main_replay_trades_requires_a_json_array(tmp_path: Path) -> None:
    """Raise ValueError when the trades file is not a JSON array.

    Returns:
        None: Assertions validate input shape checks.

    Raises:
        AssertionError: Raised when non-array input is accepted.
    """

    trades_file = _write_trades(tmp_path, {"trade_id": "t1"})

    with pytest.raises(ValueError):
        main_replay_trades(AppSettings(environment_name="test"), trades_file)
