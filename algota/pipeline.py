# -*- coding: utf-8 -*-
"""
Backtest pipeline.

Runs load -> analyze -> backtest -> summarize exactly once per call and
returns every intermediate value. Nothing is cached between calls.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from algota.backtesting.aggregator import summarize
from algota.backtesting.engine import SignalEngine
from algota.config import AppConfig
from algota.signals.indicators import calculate_indicator
from algota.types import BacktestSummary, IndicatorOverlay, Ledger, PriceSeries
from algota.validation import validate_overlay_alignment, validate_price_series


logger = logging.getLogger(__name__)


class PriceSource(Protocol):
    async def fetch(self, symbol: str, interval: int) -> PriceSeries:
        ...


@dataclass(frozen=True)
class BacktestRun:
    """All values produced by one pipeline run."""

    series: PriceSeries
    overlay: IndicatorOverlay
    ledger: Ledger
    summary: BacktestSummary
    starting_balance: float


def run_backtest(series: PriceSeries, indicator_name: str, indicator_period: int,
                 starting_balance: float, engine: Optional[SignalEngine] = None) -> BacktestRun:
    """
    Analyze, simulate and summarize an already-loaded price series.

    Parameters
    ----------
    series : PriceSeries
        Historical bars, ascending
    indicator_name : str
        Indicator to overlay (e.g., "EMA")
    indicator_period : int
        Indicator lookback period
    starting_balance : float
        Starting balance for both simulated accounts
    engine : SignalEngine or None, optional
        Engine instance to use; a new one is created if None

    Returns
    -------
    BacktestRun
    """
    validate_price_series(series)
    overlay = calculate_indicator(indicator_name, indicator_period, series)
    validate_overlay_alignment(series, overlay)

    ledger = (engine or SignalEngine()).run(overlay, starting_balance)
    summary = summarize(ledger, starting_balance)

    logger.info(
        f"{series.symbol} {overlay.name}({overlay.period}): accuracy {summary.accuracy:.2%}, "
        f"hold return {summary.hold_return:.2%}, signal return {summary.signal_return:.2%}"
    )
    return BacktestRun(
        series=series,
        overlay=overlay,
        ledger=ledger,
        summary=summary,
        starting_balance=starting_balance,
    )


async def run_pipeline(config: AppConfig, source: PriceSource) -> BacktestRun:
    """
    Load prices from a source and backtest them with the configured indicator.

    Raises
    ------
    AlgotaError
        Any stage failure; no partial run is returned
    """
    config.validate()
    series = await source.fetch(config.symbol, config.interval)
    return run_backtest(
        series,
        indicator_name=config.indicator_name,
        indicator_period=config.indicator_period,
        starting_balance=config.starting_balance,
    )
