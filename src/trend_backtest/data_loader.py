"""Functions for loading daily price history.

Histories are read from per-symbol CSV files such as ``KOTAKBANK.csv``. Column
names are normalized to ``snake_case`` so that a ``VWAP`` column becomes
``vwap`` and ``Prev Close`` becomes ``prev_close``. Missing files can
optionally be fetched through :mod:`yfinance` and cached in place.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any

import pandas
import yfinance

from .config import BacktestConfig
from .errors import InvalidInputError, IOFailureError

LOGGER = logging.getLogger(__name__)


def _normalize_columns(frame: pandas.DataFrame) -> pandas.DataFrame:
    """Return ``frame`` with flattened, snake_case column names."""
    if isinstance(frame.columns, pandas.MultiIndex):
        frame.columns = frame.columns.get_level_values(0)
    frame.columns = [
        str(column_name).strip().lower().replace(" ", "_")
        for column_name in frame.columns
    ]
    return frame


def validate_price_series(price_series: pandas.Series, source: str = "price series") -> None:
    """Check that ``price_series`` holds usable prices.

    Raises
    ------
    InvalidInputError
        If the series is empty, contains missing or non-numeric values, or
        contains prices that are zero or negative.
    """
    if price_series.empty:
        raise InvalidInputError(f"{source} is empty")
    numeric_series = pandas.to_numeric(price_series, errors="coerce")
    if numeric_series.isna().any():
        first_bad_label = numeric_series[numeric_series.isna()].index[0]
        raise InvalidInputError(
            f"{source} has a missing or non-numeric price at {first_bad_label}"
        )
    if (numeric_series <= 0).any():
        first_bad_label = numeric_series[numeric_series <= 0].index[0]
        raise InvalidInputError(
            f"{source} has a non-positive price at {first_bad_label}"
        )


def load_price_history(
    csv_path: Path,
    price_column: str = "vwap",
    date_column: str = "date",
) -> pandas.DataFrame:
    """Load a daily price history from a CSV file.

    Parameters
    ----------
    csv_path: Path
        Location of the CSV file.
    price_column: str, default "vwap"
        Normalized name of the column holding the traded price.
    date_column: str, default "date"
        Normalized name of the column holding trading dates. When the column
        is absent the first column is assumed to be the date index.

    Returns
    -------
    pandas.DataFrame
        Chronologically sorted data frame indexed by date with normalized
        column names and a float ``price_column``.

    Raises
    ------
    IOFailureError
        If the file is missing or cannot be parsed.
    InvalidInputError
        If the price column is absent or contains unusable values.
    """
    try:
        frame = pandas.read_csv(csv_path)
    except (OSError, pandas.errors.ParserError, pandas.errors.EmptyDataError) as read_error:
        raise IOFailureError(f"Failed to read {csv_path}: {read_error}") from read_error
    frame = _normalize_columns(frame)
    if frame.empty:
        raise InvalidInputError(f"{csv_path} contains no rows")
    if price_column not in frame.columns:
        raise InvalidInputError(
            f"{csv_path} has no {price_column!r} column; found {list(frame.columns)}"
        )
    index_column = date_column if date_column in frame.columns else frame.columns[0]
    frame[index_column] = pandas.to_datetime(frame[index_column], errors="coerce")
    if frame[index_column].isna().any():
        raise InvalidInputError(f"{csv_path} has unparseable dates in {index_column!r}")
    frame = frame.set_index(index_column).sort_index()
    frame.index.name = date_column
    validate_price_series(frame[price_column], source=f"{csv_path} column {price_column!r}")
    frame[price_column] = pandas.to_numeric(frame[price_column]).astype(float)
    LOGGER.info("Loaded %d rows from %s", len(frame), csv_path)
    return frame


def download_history(
    symbol: str,
    start: str,
    end: str,
    cache_path: Path | None = None,
    **download_options: Any,
) -> pandas.DataFrame:
    """Download daily price history for ``symbol`` from Yahoo Finance.

    Parameters
    ----------
    symbol: str
        Ticker symbol understood by :func:`yfinance.download`.
    start: str
        Start date in ISO format (``YYYY-MM-DD``).
    end: str
        End date in ISO format (``YYYY-MM-DD``).
    cache_path: Path | None, optional
        When given, the downloaded data is written to this CSV file.
    **download_options
        Additional keyword arguments forwarded to :func:`yfinance.download`.
        ``auto_adjust`` defaults to ``True``.

    Returns
    -------
    pandas.DataFrame
        Data frame with normalized column names, indexed by date.

    Raises
    ------
    IOFailureError
        If every download attempt fails or returns no rows.
    """
    if "auto_adjust" not in download_options:
        download_options["auto_adjust"] = True
    maximum_attempts = 3
    for attempt_number in range(1, maximum_attempts + 1):
        try:
            downloaded_frame = yfinance.download(
                symbol,
                start=start,
                end=end,
                progress=False,
                **download_options,
            )
        except Exception as download_error:  # noqa: BLE001
            LOGGER.warning(
                "Attempt %d to download data for %s failed: %s",
                attempt_number,
                symbol,
                download_error,
            )
            if attempt_number == maximum_attempts:
                LOGGER.error(
                    "Failed to download data for %s after %d attempts",
                    symbol,
                    maximum_attempts,
                )
                raise IOFailureError(
                    f"Failed to download data for {symbol}: {download_error}"
                ) from download_error
            time.sleep(1)
            continue
        if downloaded_frame.empty:
            raise IOFailureError(f"No data returned for {symbol}")
        downloaded_frame = _normalize_columns(downloaded_frame)
        downloaded_frame.index.name = "date"
        if cache_path is not None:
            cache_path.parent.mkdir(parents=True, exist_ok=True)
            downloaded_frame.to_csv(cache_path)
            LOGGER.info("Cached %d rows for %s at %s", len(downloaded_frame), symbol, cache_path)
        return downloaded_frame
    raise IOFailureError(f"Failed to download data for {symbol}")


def load_symbol_history(
    symbol: str,
    data_directory: Path,
    config: BacktestConfig | None = None,
    download: bool = False,
    start: str = "2000-01-01",
    end: str | None = None,
) -> pandas.DataFrame:
    """Return the price history stored at ``<data_directory>/<symbol>.csv``.

    When the file is missing and ``download`` is ``True`` the history is
    fetched with :func:`download_history` and cached at that path first.
    """
    settings = config or BacktestConfig()
    csv_path = data_directory / f"{symbol}.csv"
    if not csv_path.exists():
        if not download:
            raise IOFailureError(f"Price history for {symbol} not found at {csv_path}")
        end_date = end or pandas.Timestamp.today().strftime("%Y-%m-%d")
        LOGGER.info("Downloading %s history into %s", symbol, csv_path)
        download_history(symbol, start, end_date, cache_path=csv_path)
    return load_price_history(
        csv_path,
        price_column=settings.price_column,
        date_column=settings.date_column,
    )
