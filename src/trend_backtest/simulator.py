"""Day-by-day replay of the MACD crossover strategy.

A BUY fires when the MACD line crosses above its signal line while the price
trades above both the EMA and the SMA. A SELL fires on the opposite crossover
with the price below both averages. Each trade moves a fixed fraction of the
current cash (BUY) or of the current shares (SELL).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

import pandas

from .errors import InvalidInputError, NumericDegeneracyError

LOGGER = logging.getLogger(__name__)

BUY = "BUY"
SELL = "SELL"

REQUIRED_COLUMNS = ("price", "macd", "signal", "ema", "sma")


@dataclass(frozen=True)
class DaySignals:
    """Price and indicator values observed on one day."""

    price: float
    macd: float
    signal: float
    ema: float
    sma: float


@dataclass(frozen=True)
class TradeAction:
    """Decision to trade ``fraction`` of the relevant holding."""

    side: str
    fraction: float


@dataclass(frozen=True)
class PortfolioState:
    """Cash and shares held at the end of a day."""

    cash: float
    shares: float = 0.0

    def value(self, price: float) -> float:
        """Return the cash plus the market value of the shares at ``price``."""
        return self.cash + self.shares * price


@dataclass(frozen=True)
class TradeEvent:
    """Record of a single executed trade.

    ``day_index`` is one-based within the simulated window, while ``date`` is
    the label of that day in the full price history. ``amount`` is the cash
    spent on a BUY or received on a SELL.
    """

    day_index: int
    date: pandas.Timestamp
    symbol: str
    side: str
    amount: float
    shares_delta: float
    price: float


@dataclass
class SimulationResult:
    """Outcome of replaying the strategy over the trailing window."""

    symbol: str
    trades: List[TradeEvent]
    portfolio_values: pandas.Series
    final_state: PortfolioState
    final_net_worth: float
    last_price: float = 0.0
    dates: List[pandas.Timestamp] = field(default_factory=list)


def decide_action(
    previous: DaySignals, current: DaySignals, fraction: float = 0.2
) -> TradeAction | None:
    """Return the trade implied by two consecutive days, if any.

    The BUY rule is checked first so a day never produces both trades.
    """
    crossed_above = previous.macd < previous.signal and current.macd > current.signal
    if crossed_above and current.price > current.ema and current.price > current.sma:
        return TradeAction(side=BUY, fraction=fraction)
    crossed_below = previous.macd > previous.signal and current.macd < current.signal
    if crossed_below and current.price < current.ema and current.price < current.sma:
        return TradeAction(side=SELL, fraction=fraction)
    return None


def apply_action(
    state: PortfolioState, action: TradeAction, price: float
) -> tuple[PortfolioState, float, float]:
    """Execute ``action`` at ``price``.

    Returns
    -------
    tuple[PortfolioState, float, float]
        New portfolio state, cash amount moved, and number of shares traded.

    Raises
    ------
    NumericDegeneracyError
        If a BUY is sized at a price that is not positive.
    """
    if not 0 < action.fraction <= 1:
        raise InvalidInputError(
            f"Trade fraction must be in (0, 1], got {action.fraction}"
        )
    if action.side == BUY:
        if price <= 0:
            raise NumericDegeneracyError(f"Cannot buy shares at price {price}")
        invest_amount = action.fraction * state.cash
        shares_bought = invest_amount / price
        new_state = PortfolioState(
            cash=state.cash - invest_amount, shares=state.shares + shares_bought
        )
        return new_state, invest_amount, shares_bought
    if action.side == SELL:
        shares_sold = action.fraction * state.shares
        cash_gain = shares_sold * price
        new_state = PortfolioState(
            cash=state.cash + cash_gain, shares=state.shares - shares_sold
        )
        return new_state, cash_gain, shares_sold
    raise InvalidInputError(f"Unknown trade side: {action.side}")


def _day_signals(window_frame: pandas.DataFrame, position: int) -> DaySignals:
    row = window_frame.iloc[position]
    return DaySignals(
        price=float(row["price"]),
        macd=float(row["macd"]),
        signal=float(row["signal"]),
        ema=float(row["ema"]),
        sma=float(row["sma"]),
    )


def simulate_strategy(
    indicator_frame: pandas.DataFrame,
    symbol: str,
    simulation_days: int = 600,
    initial_cash: float = 10000.0,
    trade_fraction: float = 0.2,
) -> SimulationResult:
    """Replay the crossover strategy over the last ``simulation_days`` rows.

    Parameters
    ----------
    indicator_frame: pandas.DataFrame
        Output of :func:`trend_backtest.indicators.compute_indicator_frame`
        covering the full history.
    symbol: str
        Symbol used to label trade events.
    simulation_days: int, default 600
        Length of the trailing window to simulate.
    initial_cash: float, default 10000.0
        Cash available on the first simulated day.
    trade_fraction: float, default 0.2
        Fraction of cash invested on a BUY and of shares sold on a SELL.

    Returns
    -------
    SimulationResult
        Trades, daily portfolio values and final net worth. The value for the
        first simulated day is left at ``0.0`` because no decision is made on
        that day.

    Raises
    ------
    InvalidInputError
        If columns are missing or the history is shorter than the window.
    """
    missing_columns = [
        column_name
        for column_name in REQUIRED_COLUMNS
        if column_name not in indicator_frame.columns
    ]
    if missing_columns:
        raise InvalidInputError(f"Indicator frame lacks columns: {missing_columns}")
    if simulation_days < 1:
        raise InvalidInputError(
            f"Simulation window must be at least 1 day, got {simulation_days}"
        )
    if len(indicator_frame) < simulation_days:
        raise InvalidInputError(
            f"{symbol} has {len(indicator_frame)} days of history, "
            f"fewer than the {simulation_days}-day simulation window"
        )

    window_frame = indicator_frame.iloc[-simulation_days:]
    window_dates = list(window_frame.index)
    state = PortfolioState(cash=initial_cash)
    trades: List[TradeEvent] = []
    portfolio_value_list = [0.0] * simulation_days

    previous_signals = _day_signals(window_frame, 0)
    for position in range(1, simulation_days):
        current_signals = _day_signals(window_frame, position)
        action = decide_action(previous_signals, current_signals, trade_fraction)
        if action is not None:
            state, amount, shares_traded = apply_action(
                state, action, current_signals.price
            )
            trade_event = TradeEvent(
                day_index=position + 1,
                date=window_dates[position],
                symbol=symbol,
                side=action.side,
                amount=amount,
                shares_delta=shares_traded,
                price=current_signals.price,
            )
            trades.append(trade_event)
            LOGGER.debug(
                "%s day %d: %s %.2f (%.4f shares @ %.2f)",
                symbol,
                trade_event.day_index,
                trade_event.side,
                amount,
                shares_traded,
                current_signals.price,
            )
        portfolio_value_list[position] = state.value(current_signals.price)
        previous_signals = current_signals

    last_price = float(window_frame["price"].iloc[-1])
    final_net_worth = state.value(last_price)
    return SimulationResult(
        symbol=symbol,
        trades=trades,
        portfolio_values=pandas.Series(portfolio_value_list, index=window_frame.index),
        final_state=state,
        final_net_worth=final_net_worth,
        last_price=last_price,
        dates=window_dates,
    )
