"""Lists of symbols to backtest.

A symbol file may contain one symbol per line or a JSON encoded list of
strings. Each symbol names a ``<SYMBOL>.csv`` history file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, List

from .errors import InvalidInputError, IOFailureError

LOGGER = logging.getLogger(__name__)

DEFAULT_SYMBOLS = ("KOTAKBANK", "HDFCBANK", "ICICIBANK", "INDUSINDBK")


def normalize_symbols(raw_symbols: Iterable[str]) -> List[str]:
    """Strip, upper-case and deduplicate symbols while preserving order.

    A trailing ``.csv`` extension is removed, so ``KOTAKBANK.csv`` and
    ``kotakbank`` both become ``KOTAKBANK``.
    """
    normalized_symbols: List[str] = []
    for raw_symbol in raw_symbols:
        symbol = raw_symbol.strip()
        if symbol.lower().endswith(".csv"):
            symbol = symbol[: -len(".csv")]
        symbol = symbol.upper()
        if not symbol or symbol in normalized_symbols:
            continue
        normalized_symbols.append(symbol)
    return normalized_symbols


def load_symbols(symbol_file_path: Path) -> List[str]:
    """Return the symbols listed in ``symbol_file_path``.

    Raises
    ------
    IOFailureError
        If the file cannot be read.
    InvalidInputError
        If the file holds JSON that is not a list of strings.
    """
    try:
        file_content = symbol_file_path.read_text(encoding="utf-8")
    except OSError as read_error:
        raise IOFailureError(
            f"Could not read symbol file {symbol_file_path}: {read_error}"
        ) from read_error
    try:
        parsed_symbols = json.loads(file_content)
    except json.JSONDecodeError:
        symbol_list = [line for line in file_content.splitlines() if line.strip()]
    else:
        if not isinstance(parsed_symbols, list) or not all(
            isinstance(symbol, str) for symbol in parsed_symbols
        ):
            raise InvalidInputError("Symbol file JSON must be a list of strings.")
        symbol_list = parsed_symbols
    symbols = normalize_symbols(symbol_list)
    LOGGER.info("Loaded %d symbols from %s", len(symbols), symbol_file_path)
    return symbols
