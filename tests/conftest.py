"""Shared fixtures for the backtest tests."""

from pathlib import Path
from typing import List

import pytest


def write_price_csv(csv_path: Path, price_list: List[float], symbol: str = "AAA") -> Path:
    """Write a CSV laid out like an exchange bhavcopy history."""
    date_list = [
        f"2020-{1 + day_offset // 28:02d}-{1 + day_offset % 28:02d}"
        for day_offset in range(len(price_list))
    ]
    row_list = ["Date,Symbol,Series,Prev Close,Close,VWAP"]
    for date_text, price in zip(date_list, price_list):
        row_list.append(f"{date_text},{symbol},EQ,{price},{price},{price}")
    csv_path.write_text("\n".join(row_list) + "\n", encoding="utf-8")
    return csv_path


@pytest.fixture
def step_prices() -> List[float]:
    """Return a falling series that jumps upward on day 15."""
    return [10.0 - 0.1 * day_offset for day_offset in range(14)] + [20.0] * 6


@pytest.fixture
def price_directory(tmp_path: Path, step_prices: List[float]) -> Path:
    """Create a data directory holding one valid and one invalid history."""
    data_directory = tmp_path / "data"
    data_directory.mkdir()
    write_price_csv(data_directory / "AAA.csv", step_prices, symbol="AAA")
    write_price_csv(data_directory / "BAD.csv", [10.0, 0.0, 11.0], symbol="BAD")
    return data_directory
