# -*- coding: utf-8 -*-
"""
Signal engine.

Walks an indicator overlay bar by bar and simulates two accounts: one that
stays invested every bar (hold) and one that is invested only when the prior
bar closed above its indicator value (signal).
"""

import logging
import math
from typing import List

from algota.exceptions import (
    DegenerateSeriesError, InsufficientDataError, InvalidConfigurationError
)
from algota.signals.direction import actual_direction, predicted_direction
from algota.types import BUY, SELL, IndicatorOverlay, Ledger, LedgerEntry
from algota.validation import validate_overlay


logger = logging.getLogger(__name__)


class SignalEngine:
    """Produces the per-bar ledger for an indicator overlay."""

    def run(self, overlay: IndicatorOverlay, starting_balance: float) -> Ledger:
        """
        Simulate hold and signal balances over the overlay.

        Parameters
        ----------
        overlay : IndicatorOverlay
            Aligned close/indicator points, ascending by timestamp
        starting_balance : float
            Balance both accounts start with, must be > 0

        Returns
        -------
        Ledger
            One entry per overlay point. Entry 0 is the seed record.

        Raises
        ------
        InvalidConfigurationError
            If starting_balance is not finite and > 0
        InsufficientDataError
            If the overlay has fewer than 2 points
        MisalignedSeriesError
            If overlay timestamps are not strictly increasing
        DegenerateSeriesError
            If a ratio or decision would involve a zero or non-finite value
        """
        if not (math.isfinite(starting_balance) and starting_balance > 0):
            raise InvalidConfigurationError(
                f"starting_balance must be finite and > 0, got {starting_balance}"
            )
        if len(overlay) < 2:
            raise InsufficientDataError(
                f"At least 2 aligned points are required, got {len(overlay)}"
            )
        validate_overlay(overlay)

        points = overlay.points
        first = points[0]
        entries: List[LedgerEntry] = [
            LedgerEntry(
                timestamp=first.timestamp,
                close=first.close,
                indicator_value=first.indicator_value,
                hold_balance=starting_balance,
                signal_balance=starting_balance,
                actual_direction=SELL,
                predicted_direction=SELL,
            )
        ]

        hits = 0
        for i in range(1, len(points)):
            prev, point = points[i - 1], points[i]
            prev_entry = entries[-1]

            if not math.isfinite(prev.close) or prev.close == 0:
                raise DegenerateSeriesError(
                    f"Prior close at {prev.timestamp} is {prev.close}; cannot compute a return"
                )
            if not math.isfinite(point.close):
                raise DegenerateSeriesError(f"Close at {point.timestamp} is {point.close}")
            if not math.isfinite(prev.indicator_value):
                raise DegenerateSeriesError(
                    f"Indicator value at {prev.timestamp} is {prev.indicator_value}"
                )

            ratio = point.close / prev.close
            actual = actual_direction(prev.close, point.close)
            predicted = predicted_direction(prev.close, prev.indicator_value)

            hold_balance = prev_entry.hold_balance * ratio
            if predicted == BUY:
                signal_balance = prev_entry.signal_balance * ratio
            else:
                signal_balance = prev_entry.signal_balance

            if actual == predicted:
                hits += 1

            entries.append(LedgerEntry(
                timestamp=point.timestamp,
                close=point.close,
                indicator_value=point.indicator_value,
                hold_balance=hold_balance,
                signal_balance=signal_balance,
                actual_direction=actual,
                predicted_direction=predicted,
            ))

        logger.debug(f"Simulated {len(entries)} bars of {overlay.name}({overlay.period}), {hits} hits")
        return tuple(entries)
