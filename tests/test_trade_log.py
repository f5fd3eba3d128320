"""Tests for trade log formatting and writing."""

import os
import sys
from pathlib import Path

import pandas

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from trend_backtest.simulator import BUY, SELL, TradeEvent
from trend_backtest.trade_log import (
    format_final_net_worth,
    format_trade_event,
    trade_log_path,
    write_trade_log,
)


def make_event(day_index: int, side: str, amount: float, shares_delta: float) -> TradeEvent:
    return TradeEvent(
        day_index=day_index,
        date=pandas.Timestamp("2021-03-01") + pandas.Timedelta(days=day_index),
        symbol="AAA",
        side=side,
        amount=amount,
        shares_delta=shares_delta,
        price=102.0,
    )


def test_format_trade_event_buy() -> None:
    trade_event = make_event(15, BUY, 2000.0, 2000.0 / 102.0)
    assert format_trade_event(trade_event) == (
        "Day 15 (2021-03-16): BUY 2000.00 currency of AAA (19.6078 shares @ 102.00)"
    )


def test_format_trade_event_sell() -> None:
    trade_event = make_event(3, SELL, 408.0, 4.0)
    assert format_trade_event(trade_event) == (
        "Day 3 (2021-03-04): SELL 408.00 currency of AAA (4.0000 shares @ 102.00)"
    )


def test_format_final_net_worth() -> None:
    assert format_final_net_worth("AAA", 10234.567) == "Final Net Worth for AAA: 10234.57"


def test_write_trade_log_orders_events_by_day(tmp_path: Path) -> None:
    event_list = [make_event(9, SELL, 10.0, 0.1), make_event(4, BUY, 20.0, 0.2)]
    log_path = write_trade_log(event_list, "AAA", tmp_path / "out")
    assert log_path == tmp_path / "out" / "AAA_trading_log.txt"
    line_list = log_path.read_text(encoding="utf-8").splitlines()
    assert len(line_list) == 2
    assert line_list[0].startswith("Day 4 ")
    assert line_list[1].startswith("Day 9 ")


def test_write_trade_log_without_trades_creates_empty_file(tmp_path: Path) -> None:
    log_path = write_trade_log([], "AAA", tmp_path)
    assert log_path.read_text(encoding="utf-8") == ""


def test_trade_log_path_is_named_after_symbol(tmp_path: Path) -> None:
    assert trade_log_path(tmp_path, "HDFCBANK") == tmp_path / "HDFCBANK_trading_log.txt"
