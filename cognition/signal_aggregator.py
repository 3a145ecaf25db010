"""
Signal Aggregator Module

Reduces a window of raw behavioral samples into one SignalAggregates
snapshot. Only numerical summaries leave this module; no individual sample
is retained in the result.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List

from shared.models import (
    FocusStats,
    IdleStats,
    LatencyStats,
    RecentStats,
    ScrollStats,
    SignalAggregates,
    SignalSample,
    SignalType,
)

logger = logging.getLogger(__name__)

# Scroll direction changes are approximated as one per this many samples.
SCROLL_SAMPLES_PER_DIRECTION_CHANGE = 5

_KNOWN_TYPES = {t.value for t in SignalType}


def _mean(values: List[float]) -> float:
    return sum(values) / len(values)


def _latency_stats(values: List[float]) -> LatencyStats:
    if not values:
        return LatencyStats()
    mean = _mean(values)
    # Population variance
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return LatencyStats(mean=mean, variance=variance, count=len(values))


def _scroll_stats(values: List[float]) -> ScrollStats:
    if not values:
        return ScrollStats()
    return ScrollStats(
        mean=_mean(values),
        max=max(values),
        direction_changes=len(values) // SCROLL_SAMPLES_PER_DIRECTION_CHANGE,
    )


def _recent_stats(values: List[float]) -> RecentStats:
    if not values:
        return RecentStats()
    return RecentStats(mean=_mean(values), recent=values[-1])


def aggregate_signals(samples: Iterable[SignalSample]) -> SignalAggregates:
    """
    Group samples by signal type and compute per-type statistics.

    Args:
        samples: Samples of one aggregate window, in capture order. "Recent"
                 values are taken from the last sample of each type in this
                 order.

    Returns:
        SignalAggregates. An empty input yields the all-zero aggregate.
    """
    samples = list(samples)
    if not samples:
        return SignalAggregates()

    by_type: Dict[str, List[float]] = defaultdict(list)
    ignored = 0
    for sample in samples:
        if sample.signal_type in _KNOWN_TYPES:
            by_type[sample.signal_type].append(sample.value)
        else:
            ignored += 1

    if ignored:
        logger.debug(f"Ignored {ignored} samples with unrecognized signal types")

    idle_values = by_type[SignalType.IDLE_TIME.value]
    times = [s.created_at for s in samples]
    session_duration = (max(times) - min(times)).total_seconds() * 1000.0

    aggregates = SignalAggregates(
        keystroke_latency=_latency_stats(by_type[SignalType.KEYSTROKE_LATENCY.value]),
        scroll_velocity=_scroll_stats(by_type[SignalType.SCROLL_VELOCITY.value]),
        mouse_entropy=_recent_stats(by_type[SignalType.MOUSE_ENTROPY.value]),
        click_hesitation=_recent_stats(by_type[SignalType.CLICK_HESITATION.value]),
        focus_duration=FocusStats(total=sum(by_type[SignalType.FOCUS_DURATION.value])),
        idle_time=IdleStats(total=sum(idle_values), periods=len(idle_values)),
        tab_switches=round(sum(by_type[SignalType.TAB_SWITCHES.value])),
        session_duration=session_duration,
    )

    logger.debug(f"Aggregated {len(samples)} samples over {session_duration / 1000.0:.1f}s")
    return aggregates
