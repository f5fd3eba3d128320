"""PNG charts of prices, moving averages and MACD for a trailing window."""

from __future__ import annotations

import logging
from pathlib import Path

import matplotlib

matplotlib.use("Agg")  # allow headless environments
import matplotlib.pyplot as plt
import pandas

from .errors import IOFailureError

LOGGER = logging.getLogger(__name__)


def _save_figure(figure: plt.Figure, chart_path: Path) -> Path:
    try:
        chart_path.parent.mkdir(parents=True, exist_ok=True)
        figure.savefig(chart_path)
    except OSError as write_error:
        raise IOFailureError(f"Could not write chart {chart_path}: {write_error}") from write_error
    finally:
        plt.close(figure)
    LOGGER.info("Saved chart %s", chart_path)
    return chart_path


def plot_price_averages(
    indicator_frame: pandas.DataFrame,
    symbol: str,
    output_directory: Path,
    analysis_days: int = 1000,
    window_size: int = 20,
    smoothing_factor: float = 0.1,
) -> Path:
    """Plot price, SMA and EMA for the last ``analysis_days`` rows.

    Returns the path of the written ``<symbol>_analysis.png`` file.
    """
    display_frame = indicator_frame.tail(analysis_days)
    figure, axis = plt.subplots(figsize=(10, 6))
    axis.plot(display_frame.index, display_frame["price"], "b-", linewidth=1, label="Original Price")
    axis.plot(
        display_frame.index,
        display_frame["sma"],
        "r-",
        linewidth=2,
        label=f"SMA ({window_size}-day)",
    )
    axis.plot(
        display_frame.index,
        display_frame["ema"],
        "g-",
        linewidth=2,
        label=f"EMA (α={smoothing_factor})",
    )
    axis.set_title(f"{symbol} - Last {len(display_frame)} Trading Days")
    axis.set_xlabel("Date")
    axis.set_ylabel("Price")
    axis.legend(loc="best")
    axis.grid(True)
    return _save_figure(figure, output_directory / f"{symbol}_analysis.png")


def plot_macd(
    indicator_frame: pandas.DataFrame,
    symbol: str,
    output_directory: Path,
    analysis_days: int = 1000,
) -> Path:
    """Plot the MACD line, signal line and histogram for the last ``analysis_days`` rows.

    Returns the path of the written ``<symbol>_macd_analysis.png`` file.
    """
    display_frame = indicator_frame.tail(analysis_days)
    figure, axis = plt.subplots(figsize=(10, 5))
    axis.plot(display_frame.index, display_frame["macd"], "b-", linewidth=1.5, label="MACD Line")
    axis.plot(display_frame.index, display_frame["signal"], "r--", linewidth=1.5, label="Signal Line")
    axis.bar(
        display_frame.index,
        display_frame["histogram"],
        color=(0.6, 0.6, 0.6),
        edgecolor="none",
        label="MACD Histogram",
    )
    axis.set_title(f"{symbol} - MACD (Last {len(display_frame)} Days)")
    axis.set_xlabel("Date")
    axis.set_ylabel("MACD Value")
    axis.legend(loc="best")
    axis.grid(True)
    return _save_figure(figure, output_directory / f"{symbol}_macd_analysis.png")
