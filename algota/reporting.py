# -*- coding: utf-8 -*-
"""
Backtest report output.

Renders a ledger and its summary as a tab-delimited table (for pasting into a
spreadsheet) or as rich console tables.
"""

from datetime import datetime, timezone
from typing import Optional

import pandas as pd
from rich import box
from rich.console import Console
from rich.table import Table

from algota.backtesting.aggregator import latest_signal, next_signal
from algota.pipeline import BacktestRun
from algota.types import BacktestSummary, Ledger


LEDGER_COLUMNS = [
    'time', 'close', 'indicator', 'hold_balance', 'signal_balance', 'actual', 'signal'
]


def ledger_to_frame(ledger: Ledger) -> pd.DataFrame:
    """Convert a ledger to a DataFrame with one row per bar."""
    return pd.DataFrame(
        [
            [
                entry.timestamp, entry.close, entry.indicator_value,
                entry.hold_balance, entry.signal_balance,
                entry.actual_direction, entry.predicted_direction,
            ]
            for entry in ledger
        ],
        columns=LEDGER_COLUMNS,
    )


def format_ledger_tsv(ledger: Ledger) -> str:
    """Tab-delimited ledger with a header row."""
    return ledger_to_frame(ledger).to_csv(sep='\t', index=False)


def _ledger_table(run: BacktestRun) -> Table:
    name = f"{run.overlay.name}({run.overlay.period})"
    table = Table(title=f"{run.series.symbol} Backtest", box=box.ROUNDED)
    table.add_column("Time", style="cyan")
    table.add_column("Close", justify="right")
    table.add_column(name, justify="right")
    table.add_column("Hold Balance", justify="right")
    table.add_column("Signal Balance", justify="right")
    table.add_column("Actual", style="magenta")
    table.add_column("Signal", style="yellow")

    for entry in run.ledger:
        color = "green" if entry.is_hit else "red"
        table.add_row(
            str(entry.timestamp),
            f"{entry.close:.2f}",
            f"{entry.indicator_value:.2f}",
            f"${entry.hold_balance:.2f}",
            f"${entry.signal_balance:.2f}",
            entry.actual_direction,
            f"[{color}]{entry.predicted_direction}[/{color}]",
        )
    return table


def _summary_table(summary: BacktestSummary) -> Table:
    table = Table(title="Summary", box=box.ROUNDED, show_header=False)
    table.add_column(style="cyan")
    table.add_column(style="white", justify="right")

    table.add_row("Accuracy:", f"{summary.accuracy:.2%}")
    table.add_row("Hold Balance:", f"${summary.hold_balance:.2f}")
    table.add_row("Signal Balance:", f"${summary.signal_balance:.2f}")
    for label, value in (("Hold Return:", summary.hold_return),
                         ("Signal Return:", summary.signal_return)):
        color = "green" if value >= 0 else "red"
        table.add_row(label, f"[{color}]{value:+.2%}[/{color}]")
    return table


def print_report(run: BacktestRun, console: Optional[Console] = None):
    """Print the ledger and summary tables."""
    console = console or Console()
    console.print(_ledger_table(run))
    console.print(_summary_table(run.summary))


def format_signal_line(run: BacktestRun, now: Optional[datetime] = None) -> str:
    """One-line status with the current and next-bar signals, printed on every poll."""
    now = now or datetime.now(timezone.utc)
    return (
        f"{now.strftime('%Y-%m-%d %H:%M:%S')} - {run.series.symbol} "
        f"current signal: {latest_signal(run.ledger)}, "
        f"next bar: {next_signal(run.overlay)}"
    )
