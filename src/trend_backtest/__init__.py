"""trend_backtest package.

Expose commonly used functions for convenience."""

from .config import BacktestConfig
from .indicators import compute_indicator_frame, ema, macd, sma
from .simulator import simulate_strategy

__all__ = [
    "BacktestConfig",
    "compute_indicator_frame",
    "ema",
    "macd",
    "sma",
    "simulate_strategy",
]
