# -*- coding: utf-8 -*-
"""
Backtester configuration.

Defaults are overridden by environment variables, which may come from a
``.env`` file in the working directory or an explicit path.
"""

import math
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from algota.exceptions import InvalidConfigurationError
from algota.signals.indicators import INDICATORS


# Bar interval in seconds -> Binance kline interval
INTERVALS = {
    60: "1m",
    300: "5m",
    900: "15m",
    3600: "1h",
    21600: "6h",
    86400: "1d",
}

_TRUE_VALUES = ("true", "1", "yes")


def kline_interval(seconds: int) -> str:
    """Map an interval in seconds to a Binance kline interval string."""
    try:
        return INTERVALS[seconds]
    except KeyError:
        raise InvalidConfigurationError(
            f"Unsupported interval: {seconds}s. Must be one of {sorted(INTERVALS)}"
        ) from None


@dataclass
class AppConfig:
    """Configuration for one backtest run (and for polling re-runs)."""

    # Instrument
    symbol: str = "BTCUSDT"
    interval: int = 86400  # Bar interval in seconds (60, 300, 900, 3600, 21600, 86400)
    history_limit: int = 300  # Number of bars requested from the provider

    # Indicator
    indicator_name: str = "EMA"
    indicator_period: int = 20

    # Simulation
    starting_balance: float = 10000.0

    # Output / scheduling
    print_report: bool = True
    poll_continuously: bool = False

    # Market data provider
    testnet: bool = False
    max_retries: int = 3
    retry_delay: float = 1.0  # Seconds before the first retry, doubled each attempt

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def validate(self) -> 'AppConfig':
        """
        Check the configuration surface.

        Raises
        ------
        InvalidConfigurationError
            If any value is out of range
        """
        if not self.symbol:
            raise InvalidConfigurationError("symbol must not be empty")
        kline_interval(self.interval)
        if self.indicator_name.upper() not in INDICATORS:
            raise InvalidConfigurationError(
                f"Unknown indicator: {self.indicator_name}. Must be one of {sorted(INDICATORS)}"
            )
        if self.indicator_period <= 0:
            raise InvalidConfigurationError(
                f"indicator_period must be > 0, got {self.indicator_period}"
            )
        if not (math.isfinite(self.starting_balance) and self.starting_balance > 0):
            raise InvalidConfigurationError(
                f"starting_balance must be finite and > 0, got {self.starting_balance}"
            )
        if self.history_limit < 2:
            raise InvalidConfigurationError(
                f"history_limit must be >= 2, got {self.history_limit}"
            )
        if self.max_retries < 0:
            raise InvalidConfigurationError(f"max_retries must be >= 0, got {self.max_retries}")
        return self

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return asdict(self)

    @classmethod
    def from_env(cls, env_file: Optional[Union[str, Path]] = None) -> 'AppConfig':
        """
        Create config from environment variables.

        Parameters
        ----------
        env_file : str, Path or None, optional
            ``.env`` file to load first. If None, a ``.env`` in the current
            directory is used when present. Variables already set in the
            environment take precedence over the file.
        """
        env_path = Path(env_file) if env_file is not None else Path.cwd() / ".env"
        if env_path.exists():
            load_dotenv(env_path)

        config = cls()

        config.symbol = os.getenv("TRADING_SYMBOL", config.symbol)
        config.indicator_name = os.getenv("INDICATOR_NAME", config.indicator_name)
        config.log_level = os.getenv("LOG_LEVEL", config.log_level)
        config.log_file = os.getenv("LOG_FILE", config.log_file)

        try:
            if os.getenv("TRADING_INTERVAL"):
                config.interval = int(os.getenv("TRADING_INTERVAL"))
            if os.getenv("INDICATOR_PERIOD"):
                config.indicator_period = int(os.getenv("INDICATOR_PERIOD"))
            if os.getenv("STARTING_BALANCE"):
                config.starting_balance = float(os.getenv("STARTING_BALANCE"))
            if os.getenv("HISTORY_LIMIT"):
                config.history_limit = int(os.getenv("HISTORY_LIMIT"))
        except ValueError as e:
            raise InvalidConfigurationError(f"Invalid numeric environment value: {e}") from e

        if os.getenv("PRINT_REPORT"):
            config.print_report = os.getenv("PRINT_REPORT").lower() in _TRUE_VALUES
        if os.getenv("POLL_CONTINUOUSLY"):
            config.poll_continuously = os.getenv("POLL_CONTINUOUSLY").lower() in _TRUE_VALUES
        if os.getenv("BINANCE_TESTNET"):
            config.testnet = os.getenv("BINANCE_TESTNET").lower() in _TRUE_VALUES

        return config
