# -*- coding: utf-8 -*-
"""
Direction rules for the indicator signal.

The actual direction is what the market did on a bar; the predicted direction
is what the previous bar's close-vs-indicator relationship implied for it.
Both are pure functions of completed bars.
"""

from algota.types import BUY, SELL, Direction


def actual_direction(prev_close: float, close: float) -> Direction:
    """Return 'buy' if the close strictly increased, else 'sell'."""
    return BUY if close > prev_close else SELL


def predicted_direction(prev_close: float, prev_indicator_value: float) -> Direction:
    """
    Direction implied by the prior completed bar.

    Parameters
    ----------
    prev_close : float
        Close of the bar before the one being predicted
    prev_indicator_value : float
        Indicator value of that same prior bar

    Returns
    -------
    Direction
        'buy' if the prior close was above its indicator value, else 'sell'
    """
    return BUY if prev_close > prev_indicator_value else SELL
