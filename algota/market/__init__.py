# -*- coding: utf-8 -*-
"""
Market data sources.

Each source exposes ``async fetch(symbol, interval) -> PriceSeries``.
"""

from algota.market.binance_source import BinancePriceSource, klines_to_frame
from algota.market.csv_source import CsvPriceSource, load_price_series_csv

__all__ = [
    'BinancePriceSource',
    'klines_to_frame',
    'CsvPriceSource',
    'load_price_series_csv'
]
