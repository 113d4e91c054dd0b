# -*- coding: utf-8 -*-
"""
Indicator overlay calculation.

Computes a named moving-average indicator over the closing prices of a
PriceSeries and aligns the result to the bars it is defined for. Warm-up
follows the TA-Lib conventions: the first value appears once ``period`` bars
(or more, for compound indicators) have been seen, and the EMA is seeded with
the simple average of its first window.
"""

import logging
from typing import Callable, Dict

import numpy as np
import pandas as pd

from algota.exceptions import InsufficientDataError, InvalidConfigurationError
from algota.types import IndicatorOverlay, IndicatorPoint, PriceSeries


logger = logging.getLogger(__name__)


def _sma(close: pd.Series, period: int) -> pd.Series:
    return close.rolling(window=period, min_periods=period).mean()


def _wma(close: pd.Series, period: int) -> pd.Series:
    weights = np.arange(1, period + 1, dtype=float)
    return close.rolling(window=period, min_periods=period).apply(
        lambda window: np.dot(window, weights) / weights.sum(), raw=True
    )


def _ema(close: pd.Series, period: int) -> pd.Series:
    """EMA seeded with the SMA of the first full window; leading NaNs are skipped."""
    valid = close.dropna()
    out = pd.Series(np.nan, index=close.index, dtype=float)
    if len(valid) < period:
        return out

    seeded = valid.iloc[period - 1:].copy()
    seeded.iloc[0] = valid.iloc[:period].mean()
    alpha = 2.0 / (period + 1)
    out.loc[seeded.index] = seeded.ewm(alpha=alpha, adjust=False).mean()
    return out


def _dema(close: pd.Series, period: int) -> pd.Series:
    ema1 = _ema(close, period)
    ema2 = _ema(ema1, period)
    return 2.0 * ema1 - ema2


INDICATORS: Dict[str, Callable[[pd.Series, int], pd.Series]] = {
    'SMA': _sma,
    'EMA': _ema,
    'WMA': _wma,
    'DEMA': _dema,
}


def calculate_indicator(name: str, period: int, series: PriceSeries) -> IndicatorOverlay:
    """
    Calculate a named indicator over the closes of a price series.

    Parameters
    ----------
    name : str
        Indicator name, case-insensitive (SMA, EMA, WMA, DEMA)
    period : int
        Lookback period, must be > 0
    series : PriceSeries
        Validated, ascending price series

    Returns
    -------
    IndicatorOverlay
        One point per bar from the first defined indicator value onward

    Raises
    ------
    InvalidConfigurationError
        If the name is unknown or period <= 0
    InsufficientDataError
        If the series is too short to produce a single value
    """
    key = name.upper()
    if key not in INDICATORS:
        raise InvalidConfigurationError(
            f"Unknown indicator: {name}. Must be one of {sorted(INDICATORS)}"
        )
    if period <= 0:
        raise InvalidConfigurationError(f"period must be > 0, got {period}")

    close = pd.Series(series.closes, dtype=float)
    values = INDICATORS[key](close, period)

    defined = values.notna().to_numpy()
    if not defined.any():
        raise InsufficientDataError(
            f"{key}({period}) needs more than {len(series)} bars to produce a value"
        )
    begin = int(np.argmax(defined))

    points = tuple(
        IndicatorPoint(
            timestamp=series.bars[i].timestamp,
            close=series.bars[i].close,
            indicator_value=float(values.iloc[i]),
        )
        for i in range(begin, len(series))
    )

    logger.debug(f"Calculated {key}({period}) over {len(series)} bars, warm-up {begin} bars")
    return IndicatorOverlay(name=key, period=period, points=points)
