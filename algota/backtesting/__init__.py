# -*- coding: utf-8 -*-
"""
Backtesting engine module.

Simulates hold and signal-following balances over an indicator overlay and
reduces the resulting ledger to summary statistics.
"""

from algota.backtesting.engine import SignalEngine
from algota.backtesting.aggregator import summarize, latest_signal, next_signal

__all__ = [
    'SignalEngine',
    'summarize',
    'latest_signal',
    'next_signal'
]
