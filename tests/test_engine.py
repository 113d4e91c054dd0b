import math
from dataclasses import replace

import pytest

from algota.backtesting import SignalEngine, summarize
from algota.exceptions import (
    DegenerateSeriesError, InsufficientDataError, InvalidConfigurationError, MisalignedSeriesError
)
from algota.types import IndicatorOverlay

from conftest import make_overlay


def test_scenario_a_balances_and_directions(scenario_a):
    ledger = SignalEngine().run(scenario_a, 10000)

    assert [e.hold_balance for e in ledger] == pytest.approx([10000, 11000, 10500])
    assert [e.signal_balance for e in ledger] == pytest.approx([10000, 10000, 10000 * 105 / 110])
    assert ledger[2].signal_balance == pytest.approx(9545.4545, rel=1e-6)

    assert [e.actual_direction for e in ledger[1:]] == ["buy", "sell"]
    # bar 1 uses bar 0 (100 <= 100), bar 2 uses bar 1 (110 > 108)
    assert [e.predicted_direction for e in ledger[1:]] == ["sell", "buy"]


def test_scenario_a_accuracy_follows_lagged_prediction(scenario_a):
    ledger = SignalEngine().run(scenario_a, 10000)
    summary = summarize(ledger, 10000)

    # both non-seed bars miss: buy/sell and sell/buy
    assert summary.accuracy == 0.0


def test_one_hit_out_of_two():
    overlay = make_overlay([100.0, 110.0, 105.0], [100.0, 112.0, 107.0])
    ledger = SignalEngine().run(overlay, 10000)
    summary = summarize(ledger, 10000)

    assert [e.predicted_direction for e in ledger[1:]] == ["sell", "sell"]
    assert summary.accuracy == 0.5
    assert summary.signal_balance == 10000
    assert summary.signal_return == 0.0


def test_scenario_b_flat_closes():
    overlay = make_overlay([100.0, 100.0], [99.0, 99.0])
    ledger = SignalEngine().run(overlay, 10000)
    summary = summarize(ledger, 10000)

    assert ledger[1].actual_direction == "sell"
    assert summary.hold_return == 0.0


def test_seed_entry(scenario_a):
    seed = SignalEngine().run(scenario_a, 2500.0)[0]

    assert seed.hold_balance == seed.signal_balance == 2500.0
    assert seed.actual_direction == "sell"
    assert seed.predicted_direction == "sell"
    assert seed.timestamp == scenario_a.points[0].timestamp
    assert seed.close == 100.0
    assert seed.indicator_value == 100.0


def test_hold_balance_compounds_price_return_regardless_of_signal(trending_series):
    closes = trending_series.closes
    overlay = make_overlay(closes, [c + 1 if i % 2 else c - 1 for i, c in enumerate(closes)])
    ledger = SignalEngine().run(overlay, 1000.0)

    for i in range(1, len(ledger)):
        expected = ledger[i - 1].hold_balance * (closes[i] / closes[i - 1])
        assert ledger[i].hold_balance == expected


def test_signal_balance_flat_when_predicted_sell():
    overlay = make_overlay([100.0, 90.0, 120.0], [150.0, 150.0, 150.0])
    ledger = SignalEngine().run(overlay, 1000.0)

    assert all(e.predicted_direction == "sell" for e in ledger[1:])
    assert [e.signal_balance for e in ledger] == [1000.0, 1000.0, 1000.0]


def test_signal_balance_invested_when_predicted_buy():
    overlay = make_overlay([100.0, 90.0, 120.0], [50.0, 50.0, 50.0])
    ledger = SignalEngine().run(overlay, 1000.0)

    assert [e.signal_balance for e in ledger] == [e.hold_balance for e in ledger]


@pytest.mark.parametrize("i", [1, 2, 3])
def test_prediction_ignores_current_bar(i):
    closes = [100.0, 104.0, 99.0, 103.0, 101.0]
    values = [101.0, 102.0, 100.0, 102.0, 100.0]
    base = SignalEngine().run(make_overlay(closes, values), 1000.0)

    perturbed_closes = list(closes)
    perturbed_values = list(values)
    perturbed_closes[i] = closes[i] * 3
    perturbed_values[i] = -1000.0
    perturbed = SignalEngine().run(make_overlay(perturbed_closes, perturbed_values), 1000.0)

    assert perturbed[i].predicted_direction == base[i].predicted_direction


def test_accuracy_is_one_when_every_prediction_matches():
    closes = [100.0, 105.0, 110.0, 104.0, 99.0]
    # close above indicator before each rise, below before each fall
    values = [99.0, 104.0, 111.0, 105.0, 100.0]
    ledger = SignalEngine().run(make_overlay(closes, values), 1000.0)
    summary = summarize(ledger, 1000.0)

    assert summary.accuracy == 1.0
    assert 0.0 <= summary.accuracy <= 1.0


def test_run_is_idempotent(trending_series):
    closes = trending_series.closes
    overlay = make_overlay(closes, [sum(closes[: i + 1]) / (i + 1) for i in range(len(closes))])
    engine = SignalEngine()

    first = engine.run(overlay, 10000)
    second = engine.run(overlay, 10000)

    assert first == second
    assert summarize(first, 10000) == summarize(second, 10000)


def test_single_point_raises_insufficient_data():
    with pytest.raises(InsufficientDataError):
        SignalEngine().run(make_overlay([100.0], [100.0]), 10000)


def test_empty_overlay_raises_insufficient_data():
    with pytest.raises(InsufficientDataError):
        SignalEngine().run(IndicatorOverlay(name="EMA", period=20, points=()), 10000)


@pytest.mark.parametrize("balance", [0, -1, -0.01, math.inf, math.nan])
def test_invalid_balance_raises_before_computation(balance):
    # the single-point overlay would also fail; the balance check comes first
    with pytest.raises(InvalidConfigurationError):
        SignalEngine().run(make_overlay([100.0], [100.0]), balance)


def test_zero_prior_close_is_degenerate():
    with pytest.raises(DegenerateSeriesError):
        SignalEngine().run(make_overlay([100.0, 0.0, 50.0], [1.0, 1.0, 1.0]), 1000.0)


@pytest.mark.parametrize("closes, values", [
    ([100.0, math.nan, 50.0], [1.0, 1.0, 1.0]),
    ([100.0, math.inf, 50.0], [1.0, 1.0, 1.0]),
    ([100.0, 101.0, 102.0], [math.nan, 1.0, 1.0]),
])
def test_non_finite_values_are_degenerate(closes, values):
    with pytest.raises(DegenerateSeriesError):
        SignalEngine().run(make_overlay(closes, values), 1000.0)


def test_unordered_overlay_is_misaligned(scenario_a):
    points = scenario_a.points
    swapped = replace(scenario_a, points=(points[0], points[2], points[1]))

    with pytest.raises(MisalignedSeriesError):
        SignalEngine().run(swapped, 1000.0)
