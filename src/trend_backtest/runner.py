"""Run the indicator and trading pipeline for one or more symbols.

Symbols are processed one at a time and share no state. A failure while
processing one symbol is logged and the remaining symbols still run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List

import pandas

from . import charts, data_loader, indicators, report, simulator, trade_log
from .config import BacktestConfig
from .errors import BacktestError

LOGGER = logging.getLogger(__name__)


@dataclass
class SymbolReport:
    """Everything produced for a successfully processed symbol."""

    symbol: str
    indicator_frame: pandas.DataFrame
    simulation: simulator.SimulationResult
    summary: report.SimulationSummary
    trade_log_path: Path
    chart_paths: List[Path]


def process_symbol(
    symbol: str,
    config: BacktestConfig,
    data_directory: Path,
    output_directory: Path,
    render_charts: bool = True,
    download: bool = False,
) -> SymbolReport:
    """Load, analyse and backtest a single symbol.

    Raises
    ------
    BacktestError
        Any of its subclasses when loading, calculation or reporting fails.
    """
    price_frame = data_loader.load_symbol_history(
        symbol, data_directory, config=config, download=download
    )
    indicator_frame = indicators.compute_indicator_frame(
        price_frame[config.price_column], config
    )

    simulation_result = simulator.simulate_strategy(
        indicator_frame,
        symbol,
        simulation_days=config.simulation_days,
        initial_cash=config.initial_balance,
        trade_fraction=config.trade_fraction,
    )
    summary = report.summarize_simulation(simulation_result, config.initial_balance)

    chart_paths: List[Path] = []
    if render_charts:
        chart_paths.append(
            charts.plot_price_averages(
                indicator_frame,
                symbol,
                output_directory,
                analysis_days=config.analysis_days,
                window_size=config.window_size,
                smoothing_factor=config.smoothing_factor,
            )
        )
        chart_paths.append(
            charts.plot_macd(
                indicator_frame,
                symbol,
                output_directory,
                analysis_days=config.analysis_days,
            )
        )

    log_path = trade_log.write_trade_log(
        simulation_result.trades, symbol, output_directory
    )
    LOGGER.info("%s", trade_log.format_final_net_worth(symbol, summary.final_net_worth))
    return SymbolReport(
        symbol=symbol,
        indicator_frame=indicator_frame,
        simulation=simulation_result,
        summary=summary,
        trade_log_path=log_path,
        chart_paths=chart_paths,
    )


def run_backtests(
    symbols: Iterable[str],
    config: BacktestConfig,
    data_directory: Path,
    output_directory: Path,
    render_charts: bool = True,
    download: bool = False,
) -> Dict[str, SymbolReport]:
    """Process every symbol and return reports for those that succeeded.

    Failed symbols are logged with their error message and left out of the
    returned mapping.
    """
    config.validate()
    symbol_reports: Dict[str, SymbolReport] = {}
    for symbol in symbols:
        try:
            symbol_reports[symbol] = process_symbol(
                symbol,
                config,
                data_directory,
                output_directory,
                render_charts=render_charts,
                download=download,
            )
        except BacktestError as processing_error:
            LOGGER.error(
                "Error processing %s (%s): %s",
                symbol,
                type(processing_error).__name__,
                processing_error,
            )
        except Exception:  # noqa: BLE001
            LOGGER.exception("Unexpected error processing %s; continuing", symbol)
    return symbol_reports
