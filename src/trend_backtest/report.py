"""Summary statistics derived from a finished simulation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .simulator import BUY, SELL, PortfolioState, SimulationResult


@dataclass(frozen=True)
class SimulationSummary:
    """Headline figures reported for one symbol."""

    symbol: str
    initial_balance: float
    final_net_worth: float
    total_return: float
    buy_count: int
    sell_count: int
    max_drawdown: float


def calculate_final_net_worth(state: PortfolioState, last_price: float) -> float:
    """Return the value of ``state`` at the last closing price."""
    return state.value(last_price)


def calculate_max_drawdown(portfolio_values: Iterable[float]) -> float:
    """Return the largest fractional decline from a running peak.

    Values that are not positive are skipped; the first simulated day is
    never valued and holds ``0.0``. A result of ``0.25`` denotes a
    twenty-five percent drop.
    """
    maximum_portfolio_value = 0.0
    maximum_drawdown_value = 0.0
    for portfolio_value in portfolio_values:
        if portfolio_value <= 0:
            continue
        if portfolio_value > maximum_portfolio_value:
            maximum_portfolio_value = portfolio_value
            continue
        drawdown = (maximum_portfolio_value - portfolio_value) / maximum_portfolio_value
        if drawdown > maximum_drawdown_value:
            maximum_drawdown_value = drawdown
    return maximum_drawdown_value


def summarize_simulation(
    simulation_result: SimulationResult, initial_balance: float
) -> SimulationSummary:
    """Build a :class:`SimulationSummary` from ``simulation_result``."""
    final_net_worth = calculate_final_net_worth(
        simulation_result.final_state, simulation_result.last_price
    )
    return SimulationSummary(
        symbol=simulation_result.symbol,
        initial_balance=initial_balance,
        final_net_worth=final_net_worth,
        total_return=(final_net_worth - initial_balance) / initial_balance,
        buy_count=sum(1 for trade in simulation_result.trades if trade.side == BUY),
        sell_count=sum(1 for trade in simulation_result.trades if trade.side == SELL),
        max_drawdown=calculate_max_drawdown(simulation_result.portfolio_values),
    )
