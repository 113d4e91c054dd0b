# -*- coding: utf-8 -*-
"""
Backtest aggregation.

Reduces a ledger to accuracy, final balances and returns.
"""

import math

from algota.exceptions import (
    DegenerateSeriesError, InsufficientDataError, InvalidConfigurationError
)
from algota.signals.direction import predicted_direction
from algota.types import BacktestSummary, Direction, IndicatorOverlay, Ledger


def summarize(ledger: Ledger, starting_balance: float) -> BacktestSummary:
    """
    Summarize a ledger produced by SignalEngine.run.

    Parameters
    ----------
    ledger : Ledger
        Ordered ledger; entry 0 is the seed and is not scored
    starting_balance : float
        Balance the simulation started with, must be > 0

    Returns
    -------
    BacktestSummary
        Hit-rate accuracy, final balances and fractional returns

    Raises
    ------
    InsufficientDataError
        If the ledger has fewer than 2 entries (nothing to score)
    InvalidConfigurationError
        If starting_balance is not finite and > 0
    """
    if len(ledger) <= 1:
        raise InsufficientDataError(
            f"At least 2 ledger entries are required, got {len(ledger)}"
        )
    if not (math.isfinite(starting_balance) and starting_balance > 0):
        raise InvalidConfigurationError(
            f"starting_balance must be finite and > 0, got {starting_balance}"
        )

    hits = sum(1 for entry in ledger[1:] if entry.is_hit)
    last = ledger[-1]

    return BacktestSummary(
        accuracy=hits / (len(ledger) - 1),
        hold_balance=last.hold_balance,
        signal_balance=last.signal_balance,
        hold_return=(last.hold_balance - starting_balance) / starting_balance,
        signal_return=(last.signal_balance - starting_balance) / starting_balance,
    )


def latest_signal(ledger: Ledger) -> Direction:
    """Predicted direction of the last simulated bar."""
    if not ledger:
        raise InsufficientDataError("Ledger is empty")
    return ledger[-1].predicted_direction


def next_signal(overlay: IndicatorOverlay) -> Direction:
    """Direction the last completed bar implies for the bar after it."""
    if not overlay.points:
        raise InsufficientDataError("Overlay is empty")
    last = overlay.points[-1]
    if not math.isfinite(last.indicator_value):
        raise DegenerateSeriesError(f"Indicator value at {last.timestamp} is {last.indicator_value}")
    return predicted_direction(last.close, last.indicator_value)
