# -*- coding: utf-8 -*-
"""
Binance historical price source.

Retrieves kline history through python-binance and converts it into a
PriceSeries. The blocking client runs in a worker thread so callers can await
the result; transient network and server errors are retried with backoff.
"""

import asyncio
import logging
from typing import Any, List, Optional

import pandas as pd
import requests
from binance.client import Client
from binance.exceptions import BinanceAPIException, BinanceRequestException

from algota.config import kline_interval
from algota.exceptions import DataProviderError
from algota.types import OHLCV_COLUMNS, PriceSeries
from algota.validation import validate_price_series


logger = logging.getLogger(__name__)


KLINE_COLUMNS = [
    'open_time', 'open', 'high', 'low', 'close', 'volume',
    'close_time', 'quote_volume', 'trades', 'taker_buy_base',
    'taker_buy_quote', 'ignore'
]


def klines_to_frame(klines: List[List[Any]]) -> pd.DataFrame:
    """
    Convert raw Binance kline rows to an OHLCV DataFrame.

    Parameters
    ----------
    klines : list of list
        Rows of [open_time, open, high, low, close, volume, close_time, ...]

    Returns
    -------
    pd.DataFrame
        Indexed by UTC open time, ascending, without duplicate timestamps
    """
    df = pd.DataFrame(klines, columns=KLINE_COLUMNS)

    df['open_time'] = pd.to_datetime(df['open_time'], unit='ms', utc=True)
    for col in OHLCV_COLUMNS:
        df[col] = df[col].astype(float)

    df = (
        df
        .drop_duplicates(subset=['open_time'])
        .sort_values('open_time')
        .set_index('open_time')
    )
    df.index.name = 'timestamp'
    return df[OHLCV_COLUMNS]


def _is_transient(error: Exception) -> bool:
    if isinstance(error, (requests.exceptions.RequestException, BinanceRequestException)):
        return True
    if isinstance(error, BinanceAPIException):
        return error.status_code == 429 or error.status_code >= 500
    return False


class BinancePriceSource:
    """Loads historical bars for a symbol from Binance."""

    def __init__(self, client: Optional[Client] = None, testnet: bool = False,
                 max_retries: int = 3, retry_delay: float = 1.0, limit: int = 300):
        """
        Initialize price source.

        Parameters
        ----------
        client : Client or None, optional
            python-binance client. Created on first fetch if None (public
            endpoints need no API key).
        testnet : bool, default False
            Whether a created client should use Binance Testnet
        max_retries : int, default 3
            Retries after the first failed attempt on transient errors
        retry_delay : float, default 1.0
            Seconds before the first retry, doubled for each further retry
        limit : int, default 300
            Number of most recent bars to request (max 1000)
        """
        self.client = client
        self.testnet = testnet
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.limit = limit

    def _get_client(self) -> Client:
        if self.client is None:
            self.client = Client(testnet=self.testnet)
        return self.client

    def _get_klines(self, symbol: str, interval: str) -> List[List[Any]]:
        return self._get_client().get_klines(symbol=symbol, interval=interval, limit=self.limit)

    async def fetch(self, symbol: str, interval: int) -> PriceSeries:
        """
        Fetch the most recent bars for a symbol.

        Parameters
        ----------
        symbol : str
            Trading pair symbol (e.g., "BTCUSDT")
        interval : int
            Bar interval in seconds

        Returns
        -------
        PriceSeries
            Validated series, ascending by timestamp

        Raises
        ------
        InvalidConfigurationError
            If the interval is not supported
        DataProviderError
            If the request fails permanently or retries are exhausted
        """
        binance_interval = kline_interval(interval)

        attempt = 0
        while True:
            try:
                klines = await asyncio.to_thread(self._get_klines, symbol, binance_interval)
                break
            except (requests.exceptions.RequestException, BinanceRequestException,
                    BinanceAPIException) as e:
                if not _is_transient(e) or attempt >= self.max_retries:
                    logger.error(f"Error getting klines for {symbol} {binance_interval}: {e}")
                    raise DataProviderError(
                        f"Failed to load {symbol} {binance_interval} klines after {attempt + 1} attempt(s): {e}"
                    ) from e
                delay = self.retry_delay * (2 ** attempt)
                attempt += 1
                logger.warning(
                    f"Transient error getting klines ({e}), retry {attempt}/{self.max_retries} in {delay:.1f}s"
                )
                await asyncio.sleep(delay)

        df = klines_to_frame(klines)
        series = validate_price_series(PriceSeries.from_frame(df, symbol=symbol, interval=interval))
        logger.info(f"Loaded {len(series)} {binance_interval} bars for {symbol}")
        return series
