# -*- coding: utf-8 -*-
"""
Signal modules.

Indicator overlays and the direction rules derived from them. These modules
know nothing about balances or accounting.
"""

from algota.signals.direction import actual_direction, predicted_direction
from algota.signals.indicators import INDICATORS, calculate_indicator

__all__ = [
    'actual_direction',
    'predicted_direction',
    'INDICATORS',
    'calculate_indicator'
]
