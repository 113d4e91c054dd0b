# -*- coding: utf-8 -*-
"""
Data contracts shared by the backtester components.

Every record is a frozen dataclass. A run allocates fresh values and passes
them forward: PriceSeries -> IndicatorOverlay -> Ledger -> BacktestSummary.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Literal, Tuple
import pandas as pd


Direction = Literal['buy', 'sell']
BUY: Direction = 'buy'
SELL: Direction = 'sell'

OHLCV_COLUMNS = ['open', 'high', 'low', 'close', 'volume']


@dataclass(frozen=True)
class Bar:
    """One OHLCV observation for a fixed time interval."""

    timestamp: Any
    open: float
    high: float
    low: float
    close: float
    volume: float


@dataclass(frozen=True)
class PriceSeries:
    """Chronologically ordered bars for one instrument and interval."""

    symbol: str
    interval: int  # seconds
    bars: Tuple[Bar, ...]

    def __len__(self) -> int:
        return len(self.bars)

    @property
    def timestamps(self) -> List[Any]:
        return [bar.timestamp for bar in self.bars]

    @property
    def closes(self) -> List[float]:
        return [bar.close for bar in self.bars]

    def to_frame(self) -> pd.DataFrame:
        """
        Convert bars to a DataFrame indexed by timestamp.

        Returns
        -------
        pd.DataFrame
            Columns: open, high, low, close, volume
        """
        df = pd.DataFrame(
            [[bar.open, bar.high, bar.low, bar.close, bar.volume] for bar in self.bars],
            columns=OHLCV_COLUMNS,
            index=pd.Index(self.timestamps, name='timestamp'),
            dtype=float,
        )
        return df

    @classmethod
    def from_frame(cls, df: pd.DataFrame, symbol: str, interval: int) -> 'PriceSeries':
        """
        Build a series from a DataFrame indexed by timestamp.

        Parameters
        ----------
        df : pd.DataFrame
            Must have columns open, high, low, close, volume
        symbol : str
            Instrument identifier (e.g., "BTCUSDT")
        interval : int
            Bar interval in seconds
        """
        bars = tuple(
            Bar(
                timestamp=ts,
                open=float(row.open),
                high=float(row.high),
                low=float(row.low),
                close=float(row.close),
                volume=float(row.volume),
            )
            for ts, row in zip(df.index, df[OHLCV_COLUMNS].itertuples(index=False))
        )
        return cls(symbol=symbol, interval=interval, bars=bars)


@dataclass(frozen=True)
class IndicatorPoint:
    """Indicator value aligned to one bar."""

    timestamp: Any
    close: float
    indicator_value: float


@dataclass(frozen=True)
class IndicatorOverlay:
    """Indicator values aligned to a suffix of a PriceSeries."""

    name: str
    period: int
    points: Tuple[IndicatorPoint, ...]

    def __len__(self) -> int:
        return len(self.points)

    @property
    def timestamps(self) -> List[Any]:
        return [point.timestamp for point in self.points]


@dataclass(frozen=True)
class LedgerEntry:
    """Per-bar simulation record produced by the signal engine."""

    timestamp: Any
    close: float
    indicator_value: float
    hold_balance: float
    signal_balance: float
    actual_direction: Direction
    predicted_direction: Direction

    @property
    def is_hit(self) -> bool:
        return self.actual_direction == self.predicted_direction


Ledger = Tuple[LedgerEntry, ...]


@dataclass(frozen=True)
class BacktestSummary:
    """Aggregate statistics over a ledger."""

    accuracy: float
    hold_balance: float
    signal_balance: float
    hold_return: float
    signal_return: float

    def to_dict(self) -> Dict[str, float]:
        """Convert summary to dictionary."""
        return asdict(self)
