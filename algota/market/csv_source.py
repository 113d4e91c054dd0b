# -*- coding: utf-8 -*-
"""
Offline price source.

Loads Binance kline CSV exports, either headerless (the raw 12-column dump)
or with a header row naming the open time and OHLCV columns.
"""

import logging
from pathlib import Path
from typing import Union

import pandas as pd

from algota.exceptions import DataProviderError
from algota.market.binance_source import KLINE_COLUMNS
from algota.types import OHLCV_COLUMNS, PriceSeries
from algota.validation import validate_price_series


logger = logging.getLogger(__name__)


def parse_epoch(x) -> pd.Timestamp:
    """Parse an epoch timestamp in s, ms, us or ns to UTC."""
    x = int(x)
    if x > 1e17:
        return pd.to_datetime(x, unit="ns", utc=True)
    elif x > 1e14:
        return pd.to_datetime(x, unit="us", utc=True)
    elif x > 1e11:
        return pd.to_datetime(x, unit="ms", utc=True)
    else:
        return pd.to_datetime(x, unit="s", utc=True)


def parse_timestamp(value) -> pd.Timestamp:
    """Parse an epoch number or a datetime string to a UTC timestamp."""
    try:
        return parse_epoch(value)
    except (ValueError, TypeError):
        pass
    return pd.to_datetime(value, errors='coerce', utc=True)


def _has_header(path: Path) -> bool:
    with open(path, 'r') as f:
        first_line = f.readline().strip()
    if not first_line:
        return False
    first_col = first_line.split(',')[0].strip()
    try:
        float(first_col)
        return False
    except ValueError:
        return True


def load_price_series_csv(path: Union[str, Path], symbol: str, interval: int) -> PriceSeries:
    """
    Load a Binance klines CSV file into a PriceSeries.

    Parameters
    ----------
    path : str or Path
        CSV file path
    symbol : str
        Instrument identifier to attach to the series
    interval : int
        Bar interval in seconds

    Returns
    -------
    PriceSeries
        Validated series, ascending, duplicates dropped (first kept)

    Raises
    ------
    DataProviderError
        If the file cannot be read or lacks required columns
    """
    path = Path(path)
    try:
        if _has_header(path):
            df = pd.read_csv(path)
            col_mapping = {}
            for col in df.columns:
                col_lower = col.lower().strip()
                if 'open time' in col_lower or 'open_time' in col_lower:
                    col_mapping[col] = 'open_time'
                elif col_lower in OHLCV_COLUMNS:
                    col_mapping[col] = col_lower
            df = df.rename(columns=col_mapping)
        else:
            df = pd.read_csv(path, header=None, names=KLINE_COLUMNS)
    except (OSError, pd.errors.ParserError, UnicodeDecodeError) as e:
        raise DataProviderError(f"Could not read {path}: {e}") from e

    required_cols = ["open_time"] + OHLCV_COLUMNS
    missing_cols = [col for col in required_cols if col not in df.columns]
    if missing_cols:
        raise DataProviderError(
            f"CSV file missing required columns: {missing_cols}. Found columns: {list(df.columns)}"
        )

    try:
        df[OHLCV_COLUMNS] = df[OHLCV_COLUMNS].astype(float)
    except ValueError as e:
        raise DataProviderError(f"Non-numeric price data in {path}: {e}") from e

    df["timestamp"] = df["open_time"].apply(parse_timestamp)
    df = (
        df
        .dropna(subset=["timestamp"])
        .drop_duplicates(subset=["timestamp"])
        .sort_values("timestamp")
        .set_index("timestamp")
    )

    series = validate_price_series(PriceSeries.from_frame(df, symbol=symbol, interval=interval))
    logger.info(f"Loaded {len(series)} bars for {symbol} from {path}")
    return series


class CsvPriceSource:
    """Price source that reads a fixed CSV file on every fetch."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    async def fetch(self, symbol: str, interval: int) -> PriceSeries:
        return load_price_series_csv(self.path, symbol=symbol, interval=interval)
