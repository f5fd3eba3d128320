"""Tests for loading backtest configuration."""

import logging
import os
import sys
from pathlib import Path

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from trend_backtest.config import BacktestConfig, load_backtest_config
from trend_backtest.errors import InvalidInputError, NumericDegeneracyError


def test_defaults_match_reference_analysis() -> None:
    config = BacktestConfig()
    assert config.window_size == 20
    assert config.smoothing_factor == 0.1
    assert (config.fast_period, config.slow_period, config.signal_period) == (12, 26, 9)
    assert config.analysis_days == 1000
    assert config.simulation_days == 600
    assert config.initial_balance == 10000.0
    assert config.trade_fraction == 0.2
    assert config.validate() is config


def test_load_backtest_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    assert load_backtest_config(tmp_path / "absent.csv") == BacktestConfig()
    assert load_backtest_config(None) == BacktestConfig()


def test_load_backtest_config_applies_typed_overrides(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    config_path = tmp_path / "backtest.csv"
    config_path.write_text(
        "parameter,value\n"
        "window_size,50\n"
        "smoothing_factor,0.05\n"
        "price_column,close\n"
        "unknown_setting,3\n",
        encoding="utf-8",
    )
    with caplog.at_level(logging.WARNING):
        config = load_backtest_config(config_path)
    assert config.window_size == 50
    assert isinstance(config.window_size, int)
    assert config.smoothing_factor == pytest.approx(0.05)
    assert config.price_column == "close"
    assert config.simulation_days == 600
    assert "unknown_setting" in caplog.text


def test_load_backtest_config_rejects_bad_value(tmp_path: Path) -> None:
    config_path = tmp_path / "backtest.csv"
    config_path.write_text("parameter,value\nwindow_size,twenty\n", encoding="utf-8")
    with pytest.raises(InvalidInputError):
        load_backtest_config(config_path)


def test_with_overrides_skips_none_values() -> None:
    config = BacktestConfig().with_overrides(window_size=10, smoothing_factor=None)
    assert config.window_size == 10
    assert config.smoothing_factor == 0.1


@pytest.mark.parametrize(
    "overrides",
    [
        {"smoothing_factor": 0.0},
        {"trade_fraction": 1.5},
        {"initial_balance": 0.0},
        {"simulation_days": 0},
        {"fast_period": 0},
    ],
)
def test_validate_rejects_out_of_range_values(overrides: dict) -> None:
    with pytest.raises(InvalidInputError):
        BacktestConfig(**overrides).validate()


def test_validate_rejects_zero_window() -> None:
    with pytest.raises(NumericDegeneracyError):
        BacktestConfig(window_size=0).validate()
