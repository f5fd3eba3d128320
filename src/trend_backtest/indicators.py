"""Trend indicators calculated from a daily price series.

Every function returns a series aligned one-to-one with the input index so
indicator values can be compared with prices day by day. Volume weighted
average prices are the recommended input.
"""

from __future__ import annotations

import logging

import pandas

from .config import BacktestConfig
from .errors import InvalidInputError, NumericDegeneracyError

LOGGER = logging.getLogger(__name__)


def _require_prices(price_series: pandas.Series) -> None:
    if len(price_series) == 0:
        raise InvalidInputError("Price series is empty")


def smoothing_factor_from_period(period: int) -> float:
    """Return the EMA smoothing factor equivalent to ``period`` days.

    Uses the standard relation ``alpha = 2 / (period + 1)``.
    """
    if period < 1:
        raise InvalidInputError(f"EMA period must be at least 1, got {period}")
    return 2 / (period + 1)


def sma(price_series: pandas.Series, window_size: int) -> pandas.Series:
    """Calculate the Simple Moving Average (SMA).

    Parameters
    ----------
    price_series: pandas.Series
        Series of daily prices.
    window_size: int
        Number of days in each fixed-width average.

    Returns
    -------
    pandas.Series
        Mean of the last ``window_size`` prices for each day. Days before the
        window is filled hold ``0.0``. When the window is longer than the
        series, every value is ``0.0``.

    Raises
    ------
    InvalidInputError
        If ``price_series`` is empty.
    NumericDegeneracyError
        If ``window_size`` is below one.
    """
    _require_prices(price_series)
    if window_size < 1:
        raise NumericDegeneracyError(
            f"SMA window size must be at least 1, got {window_size}"
        )
    if window_size > len(price_series):
        LOGGER.warning(
            "SMA window of %d exceeds %d available prices; series left unwarmed",
            window_size,
            len(price_series),
        )
    average_series = price_series.astype(float).rolling(window=window_size).mean()
    return average_series.fillna(0.0)


def ema(price_series: pandas.Series, smoothing_factor: float) -> pandas.Series:
    """Calculate the Exponential Moving Average (EMA).

    The first value equals the first price; each following value is
    ``smoothing_factor * price + (1 - smoothing_factor) * previous``.

    Parameters
    ----------
    price_series: pandas.Series
        Series of daily prices.
    smoothing_factor: float
        Weight given to the newest price, in ``(0, 1]``.

    Returns
    -------
    pandas.Series
        Exponential moving average with the same index as ``price_series``.
    """
    _require_prices(price_series)
    if not 0 < smoothing_factor <= 1:
        raise InvalidInputError(
            f"Smoothing factor must be in (0, 1], got {smoothing_factor}"
        )
    return price_series.astype(float).ewm(alpha=smoothing_factor, adjust=False).mean()


def macd(
    price_series: pandas.Series,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> pandas.DataFrame:
    """Calculate the Moving Average Convergence Divergence (MACD).

    Parameters
    ----------
    price_series: pandas.Series
        Series of daily prices.
    fast_period: int
        Period of the fast EMA.
    slow_period: int
        Period of the slow EMA.
    signal_period: int
        Period of the EMA applied to the MACD line.

    Returns
    -------
    pandas.DataFrame
        Data frame with ``ema_fast``, ``ema_slow``, ``macd``, ``signal`` and
        ``histogram`` columns.
    """
    fast_ema_series = ema(price_series, smoothing_factor_from_period(fast_period))
    slow_ema_series = ema(price_series, smoothing_factor_from_period(slow_period))
    macd_line_series = fast_ema_series - slow_ema_series
    signal_line_series = ema(
        macd_line_series, smoothing_factor_from_period(signal_period)
    )
    histogram_series = macd_line_series - signal_line_series
    return pandas.DataFrame(
        {
            "ema_fast": fast_ema_series,
            "ema_slow": slow_ema_series,
            "macd": macd_line_series,
            "signal": signal_line_series,
            "histogram": histogram_series,
        }
    )


def compute_indicator_frame(
    price_series: pandas.Series, config: BacktestConfig | None = None
) -> pandas.DataFrame:
    """Calculate every indicator used by the trading simulation.

    Returns
    -------
    pandas.DataFrame
        Data frame indexed like ``price_series`` with ``price``, ``sma``,
        ``ema``, ``macd``, ``signal`` and ``histogram`` columns.
    """
    settings = config or BacktestConfig()
    _require_prices(price_series)
    macd_frame = macd(
        price_series,
        fast_period=settings.fast_period,
        slow_period=settings.slow_period,
        signal_period=settings.signal_period,
    )
    return pandas.DataFrame(
        {
            "price": price_series.astype(float),
            "sma": sma(price_series, settings.window_size),
            "ema": ema(price_series, settings.smoothing_factor),
            "macd": macd_frame["macd"],
            "signal": macd_frame["signal"],
            "histogram": macd_frame["histogram"],
        },
        index=price_series.index,
    )
