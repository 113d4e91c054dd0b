# -*- coding: utf-8 -*-
"""
Data-contract validation.

Checks the ordering and value invariants of price series and indicator
overlays before they reach the signal engine.
"""

import numpy as np

from algota.exceptions import DegenerateSeriesError, MisalignedSeriesError
from algota.types import IndicatorOverlay, PriceSeries


def _check_strictly_increasing(timestamps, what: str):
    for i in range(1, len(timestamps)):
        if not timestamps[i] > timestamps[i - 1]:
            raise MisalignedSeriesError(
                f"{what} timestamps must be strictly increasing: "
                f"{timestamps[i - 1]} followed by {timestamps[i]} at position {i}"
            )


def validate_price_series(series: PriceSeries) -> PriceSeries:
    """
    Validate ordering and values of a price series.

    Parameters
    ----------
    series : PriceSeries
        Series to validate

    Returns
    -------
    PriceSeries
        The same series, for chaining

    Raises
    ------
    MisalignedSeriesError
        If timestamps are not strictly increasing
    DegenerateSeriesError
        If any OHLCV value is negative or non-finite
    """
    _check_strictly_increasing(series.timestamps, "Price series")

    if len(series) == 0:
        return series

    values = series.to_frame().to_numpy()
    bad_rows = ~np.isfinite(values).all(axis=1) | (values < 0).any(axis=1)
    if bad_rows.any():
        position = int(np.argmax(bad_rows))
        raise DegenerateSeriesError(
            f"Bar at {series.bars[position].timestamp} has a negative or non-finite value"
        )

    return series


def validate_overlay(overlay: IndicatorOverlay) -> IndicatorOverlay:
    """Check that overlay points are in strictly increasing timestamp order."""
    _check_strictly_increasing(overlay.timestamps, "Indicator overlay")
    return overlay


def validate_overlay_alignment(series: PriceSeries, overlay: IndicatorOverlay) -> IndicatorOverlay:
    """
    Check that an overlay is a contiguous suffix of the series.

    The overlay may be shorter than the series (indicator warm-up), but its
    timestamps must equal the series' last ``len(overlay)`` timestamps in the
    same order, and each point's close must match the aligned bar.

    Raises
    ------
    MisalignedSeriesError
        If the overlay is longer than the series, skips or reorders bars, or
        carries a close that differs from the aligned bar
    """
    if len(overlay) > len(series):
        raise MisalignedSeriesError(
            f"Overlay has {len(overlay)} points but series only has {len(series)} bars"
        )

    offset = len(series) - len(overlay)
    for i, point in enumerate(overlay.points):
        bar = series.bars[offset + i]
        if point.timestamp != bar.timestamp:
            raise MisalignedSeriesError(
                f"Overlay point {i} at {point.timestamp} does not align with bar at {bar.timestamp}"
            )
        if point.close != bar.close:
            raise MisalignedSeriesError(
                f"Overlay close {point.close} at {point.timestamp} differs from bar close {bar.close}"
            )

    return overlay
