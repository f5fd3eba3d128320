"""Tests for symbol list helpers."""

import os
import sys
from pathlib import Path

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from trend_backtest.errors import InvalidInputError, IOFailureError
from trend_backtest.symbols import DEFAULT_SYMBOLS, load_symbols, normalize_symbols


def test_normalize_symbols_strips_extension_and_duplicates() -> None:
    assert normalize_symbols(["KOTAKBANK.csv", " hdfcbank ", "KOTAKBANK", ""]) == [
        "KOTAKBANK",
        "HDFCBANK",
    ]


def test_default_symbols_are_bank_histories() -> None:
    assert DEFAULT_SYMBOLS == ("KOTAKBANK", "HDFCBANK", "ICICIBANK", "INDUSINDBK")


def test_load_symbols_reads_lines(tmp_path: Path) -> None:
    symbol_file_path = tmp_path / "symbols.txt"
    symbol_file_path.write_text("AAA\n\nBBB.csv\n", encoding="utf-8")
    assert load_symbols(symbol_file_path) == ["AAA", "BBB"]


def test_load_symbols_reads_json_list(tmp_path: Path) -> None:
    symbol_file_path = tmp_path / "symbols.json"
    symbol_file_path.write_text('["AAA", "BBB"]', encoding="utf-8")
    assert load_symbols(symbol_file_path) == ["AAA", "BBB"]


def test_load_symbols_rejects_invalid_json(tmp_path: Path) -> None:
    symbol_file_path = tmp_path / "symbols.json"
    symbol_file_path.write_text('{"symbols": ["AAA"]}', encoding="utf-8")
    with pytest.raises(InvalidInputError):
        load_symbols(symbol_file_path)


def test_load_symbols_reports_missing_file(tmp_path: Path) -> None:
    with pytest.raises(IOFailureError):
        load_symbols(tmp_path / "absent.txt")
