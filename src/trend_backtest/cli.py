"""Command line interface for running trend indicator backtests.

Each symbol is read from ``<data-directory>/<SYMBOL>.csv``. Charts, trade
logs and the final net worth of every symbol are written to the output
directory and the log.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import runner, symbols
from .config import load_backtest_config
from .errors import BacktestError

LOGGER = logging.getLogger(__name__)


def configure_logging(log_path: Path | None = None, level: int = logging.INFO) -> None:
    """Configure logging to emit to stderr and optionally to ``log_path``."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root_logger.handlers.clear()
    root_logger.addHandler(stream_handler)
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the command line interface."""
    parser = argparse.ArgumentParser(
        description="Compute SMA, EMA and MACD and backtest a MACD crossover strategy."
    )
    parser.add_argument(
        "symbols",
        nargs="*",
        help="Symbols to process. Defaults to the built-in bank symbol list.",
    )
    parser.add_argument(
        "--symbols-file",
        type=Path,
        help="Text or JSON file listing symbols to process.",
    )
    parser.add_argument(
        "--data-directory",
        type=Path,
        default=Path("."),
        help="Directory containing <SYMBOL>.csv price histories.",
    )
    parser.add_argument(
        "--output-directory",
        type=Path,
        default=Path("output"),
        help="Directory for charts and trade logs.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="CSV file with parameter,value overrides.",
    )
    parser.add_argument("--price-column", help="Column holding the traded price.")
    parser.add_argument("--window-size", type=int, help="SMA window in days.")
    parser.add_argument("--smoothing-factor", type=float, help="EMA smoothing factor.")
    parser.add_argument(
        "--simulation-days", type=int, help="Number of trailing days to simulate."
    )
    parser.add_argument(
        "--analysis-days", type=int, help="Number of trailing days to chart."
    )
    parser.add_argument(
        "--initial-balance", type=float, help="Starting cash for the simulation."
    )
    parser.add_argument(
        "--no-charts",
        action="store_true",
        help="Skip writing chart images.",
    )
    parser.add_argument(
        "--download",
        action="store_true",
        help=(
            "Download missing histories from Yahoo Finance. Downloaded data has "
            "no vwap column, so combine with --price-column close."
        ),
    )
    parser.add_argument("--log-file", type=Path, help="Optional log file path.")
    return parser


def run_cli(argument_list: Optional[List[str]] = None) -> int:
    """Parse command line arguments and run the backtests.

    Returns
    -------
    int
        ``0`` when at least one symbol completed, otherwise ``1``.
    """
    parser = create_parser()
    parsed_arguments = parser.parse_args(argument_list)
    configure_logging(parsed_arguments.log_file)

    try:
        config = load_backtest_config(parsed_arguments.config).with_overrides(
            price_column=parsed_arguments.price_column,
            window_size=parsed_arguments.window_size,
            smoothing_factor=parsed_arguments.smoothing_factor,
            simulation_days=parsed_arguments.simulation_days,
            analysis_days=parsed_arguments.analysis_days,
            initial_balance=parsed_arguments.initial_balance,
        )
        config.validate()
        symbol_list = list(parsed_arguments.symbols)
        if parsed_arguments.symbols_file is not None:
            symbol_list.extend(symbols.load_symbols(parsed_arguments.symbols_file))
    except BacktestError as setup_error:
        LOGGER.error("Invalid setup: %s", setup_error)
        return 1
    symbol_list = symbols.normalize_symbols(symbol_list) or list(symbols.DEFAULT_SYMBOLS)

    symbol_reports = runner.run_backtests(
        symbol_list,
        config,
        parsed_arguments.data_directory,
        parsed_arguments.output_directory,
        render_charts=not parsed_arguments.no_charts,
        download=parsed_arguments.download,
    )
    LOGGER.info(
        "Completed %d of %d symbols", len(symbol_reports), len(symbol_list)
    )
    return 0 if symbol_reports else 1


def main() -> None:
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
