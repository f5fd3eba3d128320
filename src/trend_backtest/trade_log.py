"""Human-readable records of simulated trades."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

import pandas

from .errors import IOFailureError
from .simulator import TradeEvent

LOGGER = logging.getLogger(__name__)


def _format_date(date_value: object) -> str:
    if isinstance(date_value, pandas.Timestamp):
        return date_value.strftime("%Y-%m-%d")
    return str(date_value)


def format_trade_event(trade_event: TradeEvent) -> str:
    """Return the log line for ``trade_event``.

    Example: ``Day 15 (2021-03-04): BUY 2000.00 currency of AAA (19.6078 shares @ 102.00)``
    """
    return (
        f"Day {trade_event.day_index} ({_format_date(trade_event.date)}): "
        f"{trade_event.side} {trade_event.amount:.2f} currency of {trade_event.symbol} "
        f"({trade_event.shares_delta:.4f} shares @ {trade_event.price:.2f})"
    )


def format_final_net_worth(symbol: str, final_net_worth: float) -> str:
    """Return the summary line reported once a symbol finishes."""
    return f"Final Net Worth for {symbol}: {final_net_worth:.2f}"


def trade_log_path(output_directory: Path, symbol: str) -> Path:
    """Return the trade log location for ``symbol`` inside ``output_directory``."""
    return output_directory / f"{symbol}_trading_log.txt"


def write_trade_log(
    trade_events: Iterable[TradeEvent], symbol: str, output_directory: Path
) -> Path:
    """Write one line per trade, in day order, to ``<symbol>_trading_log.txt``.

    An empty file is written when no trades occurred.

    Raises
    ------
    IOFailureError
        If the file cannot be written.
    """
    log_path = trade_log_path(output_directory, symbol)
    ordered_events = sorted(trade_events, key=lambda trade_event: trade_event.day_index)
    try:
        output_directory.mkdir(parents=True, exist_ok=True)
        with log_path.open("w", encoding="utf-8") as log_file:
            for trade_event in ordered_events:
                log_file.write(format_trade_event(trade_event) + "\n")
    except OSError as write_error:
        raise IOFailureError(f"Could not write trade log {log_path}: {write_error}") from write_error
    LOGGER.info("Wrote %d trades for %s to %s", len(ordered_events), symbol, log_path)
    return log_path
