# -*- coding: utf-8 -*-
"""
Indicator signal backtester.

Evaluates a moving-average signal against historical prices and compares it
with buy-and-hold.
"""

from algota.backtesting import SignalEngine, summarize
from algota.config import AppConfig
from algota.exceptions import (
    AlgotaError, DataProviderError, DegenerateSeriesError, InsufficientDataError,
    InvalidConfigurationError, MisalignedSeriesError
)
from algota.pipeline import BacktestRun, run_backtest, run_pipeline

__version__ = "0.1.0"

__all__ = [
    'SignalEngine',
    'summarize',
    'AppConfig',
    'AlgotaError',
    'DataProviderError',
    'DegenerateSeriesError',
    'InsufficientDataError',
    'InvalidConfigurationError',
    'MisalignedSeriesError',
    'BacktestRun',
    'run_backtest',
    'run_pipeline'
]
