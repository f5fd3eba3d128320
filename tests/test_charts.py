"""Tests for chart rendering."""

import os
import sys
from pathlib import Path

import pandas

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from trend_backtest.charts import plot_macd, plot_price_averages
from trend_backtest.config import BacktestConfig
from trend_backtest.indicators import compute_indicator_frame


def build_indicator_frame() -> pandas.DataFrame:
    price_series = pandas.Series(
        [10.0 + (day_offset % 7) * 0.5 for day_offset in range(60)],
        index=pandas.date_range("2021-01-01", periods=60, freq="B"),
    )
    return compute_indicator_frame(price_series, BacktestConfig(window_size=5))


def test_plot_price_averages_writes_png(tmp_path: Path) -> None:
    chart_path = plot_price_averages(
        build_indicator_frame(), "AAA", tmp_path / "charts", analysis_days=30
    )
    assert chart_path == tmp_path / "charts" / "AAA_analysis.png"
    assert chart_path.read_bytes().startswith(b"\x89PNG")


def test_plot_macd_writes_png(tmp_path: Path) -> None:
    chart_path = plot_macd(build_indicator_frame(), "AAA", tmp_path, analysis_days=1000)
    assert chart_path == tmp_path / "AAA_macd_analysis.png"
    assert chart_path.stat().st_size > 0
