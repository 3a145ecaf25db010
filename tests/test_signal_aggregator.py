import pytest

from cognition.signal_aggregator import aggregate_signals
from shared.models import SignalAggregates


def test_empty_input_yields_zero_aggregate():
    aggregates = aggregate_signals([])
    assert aggregates == SignalAggregates()
    assert aggregates.session_duration == 0
    assert aggregates.keystroke_latency.count == 0


def test_keystroke_mean_and_population_variance(sample):
    samples = [sample("keystroke_latency", v, i) for i, v in enumerate([100, 110, 120, 130])]
    stats = aggregate_signals(samples).keystroke_latency
    assert stats.count == 4
    assert stats.mean == pytest.approx(115.0)
    assert stats.variance == pytest.approx(125.0)


def test_scroll_stats_use_coarse_direction_changes(sample):
    samples = [sample("scroll_velocity", v, i) for i, v in enumerate([0.5, 1.0, 3.0, 1.5] * 3)]
    stats = aggregate_signals(samples).scroll_velocity
    assert stats.max == 3.0
    assert stats.mean == pytest.approx(1.5)
    assert stats.direction_changes == 2  # floor(12 / 5)


def test_recent_is_last_in_order(sample):
    samples = [
        sample("mouse_entropy", 0.2, 0),
        sample("click_hesitation", 1000, 1),
        sample("mouse_entropy", 0.6, 2),
        sample("click_hesitation", 4000, 3),
    ]
    aggregates = aggregate_signals(samples)
    assert aggregates.mouse_entropy.mean == pytest.approx(0.4)
    assert aggregates.mouse_entropy.recent == 0.6
    assert aggregates.click_hesitation.mean == pytest.approx(2500.0)
    assert aggregates.click_hesitation.recent == 4000


def test_sums_and_periods(sample):
    samples = [
        sample("focus_duration", 60_000, 0),
        sample("focus_duration", 30_000, 1),
        sample("idle_time", 20_000, 2),
        sample("idle_time", 40_000, 3),
        sample("tab_switches", 2, 4),
        sample("tab_switches", 1, 5),
    ]
    aggregates = aggregate_signals(samples)
    assert aggregates.focus_duration.total == 90_000
    assert aggregates.idle_time.total == 60_000
    assert aggregates.idle_time.periods == 2
    assert aggregates.tab_switches == 3


def test_session_duration_spans_all_types_in_any_order(sample):
    samples = [
        sample("tab_switches", 1, 30),
        sample("keystroke_latency", 100, 0),
        sample("idle_time", 1000, 90),
    ]
    assert aggregate_signals(samples).session_duration == pytest.approx(90_000.0)


def test_unknown_signal_types_are_ignored(sample):
    samples = [
        sample("keystroke_latency", 100, 0),
        sample("eye_tracking", 42, 10),
    ]
    aggregates = aggregate_signals(samples)
    assert aggregates.keystroke_latency.count == 1
    # Still part of the window span
    assert aggregates.session_duration == pytest.approx(10_000.0)


def test_single_sample_has_zero_duration(sample):
    assert aggregate_signals([sample("idle_time", 5000, 0)]).session_duration == 0
