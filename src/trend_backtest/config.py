"""Configuration values for indicator calculations and the trading backtest.

Overrides can be stored in a CSV file with a ``parameter,value`` header.
Example CSV contents:

    parameter,value
    window_size,20
    smoothing_factor,0.1
    simulation_days,600

"""

from __future__ import annotations

import csv
import dataclasses
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from .errors import InvalidInputError, IOFailureError, NumericDegeneracyError

LOGGER = logging.getLogger(__name__)

# A smoothing factor of 0.1 corresponds to roughly a 19-day window
# (alpha = 2 / (N + 1)), which keeps the EMA comparable to the 20-day SMA.
DEFAULT_WINDOW_SIZE = 20
DEFAULT_SMOOTHING_FACTOR = 0.1
DEFAULT_FAST_PERIOD = 12
DEFAULT_SLOW_PERIOD = 26
DEFAULT_SIGNAL_PERIOD = 9
DEFAULT_ANALYSIS_DAYS = 1000
DEFAULT_SIMULATION_DAYS = 600
DEFAULT_INITIAL_BALANCE = 10000.0
DEFAULT_TRADE_FRACTION = 0.2


@dataclass(frozen=True)
class BacktestConfig:
    """Settings shared by every symbol processed in a run."""

    window_size: int = DEFAULT_WINDOW_SIZE
    smoothing_factor: float = DEFAULT_SMOOTHING_FACTOR
    fast_period: int = DEFAULT_FAST_PERIOD
    slow_period: int = DEFAULT_SLOW_PERIOD
    signal_period: int = DEFAULT_SIGNAL_PERIOD
    analysis_days: int = DEFAULT_ANALYSIS_DAYS
    simulation_days: int = DEFAULT_SIMULATION_DAYS
    initial_balance: float = DEFAULT_INITIAL_BALANCE
    trade_fraction: float = DEFAULT_TRADE_FRACTION
    price_column: str = "vwap"
    date_column: str = "date"

    def validate(self) -> "BacktestConfig":
        """Return ``self`` after checking that every value is usable.

        Raises
        ------
        NumericDegeneracyError
            If ``window_size`` is below one.
        InvalidInputError
            If any other value is outside its permitted range.
        """
        if self.window_size < 1:
            raise NumericDegeneracyError(
                f"SMA window size must be at least 1, got {self.window_size}"
            )
        if not 0 < self.smoothing_factor <= 1:
            raise InvalidInputError(
                f"Smoothing factor must be in (0, 1], got {self.smoothing_factor}"
            )
        if not 0 < self.trade_fraction <= 1:
            raise InvalidInputError(
                f"Trade fraction must be in (0, 1], got {self.trade_fraction}"
            )
        if self.initial_balance <= 0:
            raise InvalidInputError(
                f"Initial balance must be positive, got {self.initial_balance}"
            )
        for field_name in (
            "fast_period",
            "slow_period",
            "signal_period",
            "analysis_days",
            "simulation_days",
        ):
            if getattr(self, field_name) < 1:
                raise InvalidInputError(
                    f"{field_name} must be at least 1, got {getattr(self, field_name)}"
                )
        return self

    def with_overrides(self, **overrides: Any) -> "BacktestConfig":
        """Return a copy with every non-``None`` override applied."""
        applied_overrides = {
            name: value for name, value in overrides.items() if value is not None
        }
        return dataclasses.replace(self, **applied_overrides)


def _coerce_value(field_type: Any, raw_value: str) -> Any:
    """Convert ``raw_value`` to the type declared for a config field."""
    type_name = field_type if isinstance(field_type, str) else field_type.__name__
    if type_name == "int":
        return int(raw_value)
    if type_name == "float":
        return float(raw_value)
    return raw_value


def load_backtest_config(path: Path | None = None) -> BacktestConfig:
    """Load configuration overrides from a ``parameter,value`` CSV file.

    Returns the default configuration when ``path`` is ``None`` or the file
    does not exist. Unknown parameter names are logged and skipped.

    Raises
    ------
    IOFailureError
        If the file exists but cannot be read.
    InvalidInputError
        If a value cannot be converted to the field's type.
    """
    if path is None or not path.exists():
        return BacktestConfig()
    field_type_by_name: Dict[str, Any] = {
        config_field.name: config_field.type
        for config_field in dataclasses.fields(BacktestConfig)
    }
    overrides: Dict[str, Any] = {}
    try:
        with path.open("r", encoding="utf-8") as config_file:
            reader = csv.DictReader(config_file)
            for row in reader:
                parameter_name = (row.get("parameter") or "").strip()
                raw_value = (row.get("value") or "").strip()
                if not parameter_name:
                    continue
                if parameter_name not in field_type_by_name:
                    LOGGER.warning(
                        "Ignoring unknown parameter %s in %s", parameter_name, path
                    )
                    continue
                try:
                    overrides[parameter_name] = _coerce_value(
                        field_type_by_name[parameter_name], raw_value
                    )
                except ValueError as conversion_error:
                    raise InvalidInputError(
                        f"Invalid value {raw_value!r} for {parameter_name}"
                    ) from conversion_error
    except OSError as read_error:
        raise IOFailureError(f"Could not read config file {path}: {read_error}") from read_error
    LOGGER.info("Loaded %d configuration overrides from %s", len(overrides), path)
    return BacktestConfig(**overrides)
