# tests/conftest.py
from typing import List, Sequence

import pandas as pd
import pytest

from algota.types import Bar, IndicatorOverlay, IndicatorPoint, PriceSeries


def make_timestamps(n: int) -> List[pd.Timestamp]:
    return list(pd.date_range("2024-01-01", periods=n, freq="D", tz="UTC"))


def make_series(closes: Sequence[float], symbol: str = "BTCUSDT", interval: int = 86400) -> PriceSeries:
    bars = tuple(
        Bar(timestamp=ts, open=c, high=c, low=c, close=c, volume=1.0)
        for ts, c in zip(make_timestamps(len(closes)), closes)
    )
    return PriceSeries(symbol=symbol, interval=interval, bars=bars)


def make_overlay(closes: Sequence[float], values: Sequence[float],
                 name: str = "EMA", period: int = 20) -> IndicatorOverlay:
    points = tuple(
        IndicatorPoint(timestamp=ts, close=c, indicator_value=v)
        for ts, c, v in zip(make_timestamps(len(closes)), closes, values)
    )
    return IndicatorOverlay(name=name, period=period, points=points)


@pytest.fixture
def scenario_a() -> IndicatorOverlay:
    return make_overlay([100.0, 110.0, 105.0], [100.0, 108.0, 107.0])


@pytest.fixture
def trending_series() -> PriceSeries:
    closes = [100, 102, 101, 105, 107, 106, 110, 108, 112, 115, 113, 118]
    return make_series([float(c) for c in closes])


def kline_row(open_time_ms: int, close: float) -> list:
    return [
        open_time_ms, str(close), str(close + 1), str(close - 1), str(close), "10.0",
        open_time_ms + 86_399_999, "1000.0", 42, "5.0", "500.0", "0",
    ]


class FakeKlineClient:
    """Stands in for binance.client.Client; replays queued responses."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def get_klines(self, symbol, interval, limit):
        self.calls.append({"symbol": symbol, "interval": interval, "limit": limit})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


DAY_MS = 86_400_000
START_MS = 1_704_067_200_000  # 2024-01-01 00:00:00 UTC


def make_klines(closes: Sequence[float]) -> list:
    return [kline_row(START_MS + i * DAY_MS, c) for i, c in enumerate(closes)]
