# -*- coding: utf-8 -*-
"""
Main entry point for the indicator signal backtester.

Loads historical prices (Binance or a kline CSV), backtests the configured
indicator signal against buy-and-hold, and prints the report. With --poll the
whole pipeline is re-run once per bar interval.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from rich.console import Console

from algota.config import AppConfig
from algota.exceptions import AlgotaError
from algota.logging_setup import setup_logging
from algota.market import BinancePriceSource, CsvPriceSource
from algota.pipeline import run_pipeline
from algota.reporting import format_ledger_tsv, format_signal_line, print_report
from algota.scheduler import Poller


logger = logging.getLogger("algota.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Indicator signal backtester')

    parser.add_argument('--symbol', type=str, default=None,
                        help='Trading pair symbol (default: from TRADING_SYMBOL env var or BTCUSDT)')
    parser.add_argument('--interval', type=int, default=None,
                        help='Bar interval in seconds: 60, 300, 900, 3600, 21600, 86400 '
                             '(default: from TRADING_INTERVAL env var or 86400)')
    parser.add_argument('--indicator', type=str, default=None,
                        help='Indicator name: EMA, SMA, WMA, DEMA (default: from INDICATOR_NAME env var or EMA)')
    parser.add_argument('--period', type=int, default=None,
                        help='Indicator period (default: from INDICATOR_PERIOD env var or 20)')
    parser.add_argument('--balance', type=float, default=None,
                        help='Starting balance (default: from STARTING_BALANCE env var or 10000)')
    parser.add_argument('--csv', type=str, default=None,
                        help='Read prices from a Binance klines CSV instead of the API')
    parser.add_argument('--tsv', type=str, default=None,
                        help='Also write the ledger as tab-delimited text to this file')
    parser.add_argument('--no-report', action='store_true',
                        help='Do not print the ledger and summary tables')
    parser.add_argument('--poll', action='store_true',
                        help='Re-run the backtest once per bar interval')
    parser.add_argument('--testnet', action='store_true',
                        help='Use Binance Testnet for price data')
    parser.add_argument('--env-file', type=str, default=None,
                        help='.env file to load (default: ./.env if present)')
    return parser


def build_config(args: argparse.Namespace) -> AppConfig:
    """Defaults < environment / .env < command line."""
    config = AppConfig.from_env(args.env_file)

    if args.symbol:
        config.symbol = args.symbol
    if args.interval is not None:
        config.interval = args.interval
    if args.indicator:
        config.indicator_name = args.indicator
    if args.period is not None:
        config.indicator_period = args.period
    if args.balance is not None:
        config.starting_balance = args.balance
    if args.no_report:
        config.print_report = False
    if args.poll:
        config.poll_continuously = True
    if args.testnet:
        config.testnet = True

    return config.validate()


async def _run(config: AppConfig, args: argparse.Namespace) -> int:
    console = Console()
    if args.csv:
        source = CsvPriceSource(args.csv)
    else:
        source = BinancePriceSource(
            testnet=config.testnet,
            max_retries=config.max_retries,
            retry_delay=config.retry_delay,
            limit=config.history_limit,
        )

    async def poll():
        run = await run_pipeline(config, source)
        if config.print_report:
            print_report(run)
        if args.tsv:
            Path(args.tsv).write_text(format_ledger_tsv(run.ledger))
        console.print(format_signal_line(run), soft_wrap=True)
        return run

    if config.poll_continuously:
        await Poller(poll, interval_seconds=config.interval).run()
        return 0

    await poll()
    return 0


def main() -> int:
    """Main entry point."""
    args = build_parser().parse_args()

    try:
        config = build_config(args)
    except AlgotaError as e:
        print(f"Error: {e}")
        return 1

    setup_logging(config.log_level, config.log_file)
    logger.info(
        f"Backtesting {config.symbol} {config.interval}s with "
        f"{config.indicator_name}({config.indicator_period}), balance ${config.starting_balance:.2f}"
    )

    try:
        return asyncio.run(_run(config, args))
    except KeyboardInterrupt:
        print("\nReceived interrupt signal, stopping...")
        return 0
    except AlgotaError as e:
        logger.error(f"Backtest failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
