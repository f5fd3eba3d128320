"""Exception types raised while computing indicators and running backtests.

Every error is a :class:`BacktestError` so that the per-symbol loop in
:mod:`trend_backtest.runner` can isolate a failing symbol and continue with
the rest.
"""

from __future__ import annotations


class BacktestError(Exception):
    """Base class for errors raised while processing a single symbol."""


class InvalidInputError(BacktestError, ValueError):
    """Raised for empty, malformed, or out-of-range input data and settings."""


class NumericDegeneracyError(BacktestError, ArithmeticError):
    """Raised when a calculation would divide by zero or use a zero-length window."""


class IOFailureError(BacktestError, OSError):
    """Raised when price data cannot be read or results cannot be written."""
