"""
Metric Calculators

Three independent formulas deriving focus level, stress index and cognitive
budget from a SignalAggregates window. The constants below define the
classification boundaries used downstream and must not be retuned casually.
"""

import logging
from typing import Optional

from shared.models import SignalAggregates

logger = logging.getLogger(__name__)

MS_PER_HOUR = 3_600_000.0

# Focus
FOCUS_BASE = 0.5
KEYSTROKE_CONSISTENCY_WEIGHT = 0.3
KEYSTROKE_VARIANCE_SCALE = 200.0
KEYSTROKE_MIN_COUNT = 10           # Below this, consistency is unknown (0.5)
TAB_PENALTY_DIVISOR = 10.0
TAB_PENALTY_CAP = 0.5
IDLE_PENALTY_DIVISOR = 5.0
IDLE_PENALTY_CAP = 0.3
FOCUS_BONUS_FULL_MS = 1_800_000.0  # 30 minutes of focus
FOCUS_BONUS_CAP = 0.2

# Stress
STRESS_BASE = 0.3
LATENCY_INCREASE_WEIGHT = 0.3
SCROLL_MAX_THRESHOLD = 2.0          # px/ms
SCROLL_MAX_STRESS = 0.15
DIRECTION_CHANGES_THRESHOLD = 10
DIRECTION_CHANGES_STRESS = 0.1
CLICK_HESITATION_THRESHOLD = 3000.0  # ms
CLICK_HESITATION_STRESS = 0.1

# Budget
BUDGET_FLOOR = 0.1
SESSION_DEPLETION_HOURS = 4.0
SESSION_DEPLETION_CAP = 0.5
TAB_SWITCH_COST = 0.02
IDLE_RECOVERY_FULL_MS = 600_000.0   # 10 minutes idle
IDLE_RECOVERY_CAP = 0.2


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def calculate_focus_level(aggregates: SignalAggregates) -> float:
    """
    Focus rises with consistent keystrokes and sustained focus time, and
    falls with tab switching and idle periods. Returns a value in [0, 1].
    """
    latency = aggregates.keystroke_latency
    if latency.count > KEYSTROKE_MIN_COUNT:
        consistency = max(0.0, 1.0 - latency.variance / KEYSTROKE_VARIANCE_SCALE)
    else:
        consistency = 0.5

    tab_penalty = min(aggregates.tab_switches / TAB_PENALTY_DIVISOR, TAB_PENALTY_CAP)
    idle_penalty = min(aggregates.idle_time.periods / IDLE_PENALTY_DIVISOR, IDLE_PENALTY_CAP)
    duration_bonus = min(aggregates.focus_duration.total / FOCUS_BONUS_FULL_MS, FOCUS_BONUS_CAP)

    focus = FOCUS_BASE + consistency * KEYSTROKE_CONSISTENCY_WEIGHT - tab_penalty - idle_penalty + duration_bonus
    return clamp(focus, 0.0, 1.0)


def latency_increase_ratio(aggregates: SignalAggregates, baseline: Optional[SignalAggregates]) -> Optional[float]:
    """Relative keystroke latency change against the baseline, or None without one."""
    if baseline is None or baseline.keystroke_latency.mean <= 0:
        return None
    base_mean = baseline.keystroke_latency.mean
    return (aggregates.keystroke_latency.mean - base_mean) / base_mean


def calculate_stress_index(aggregates: SignalAggregates, baseline: Optional[SignalAggregates] = None) -> float:
    """
    Stress from slowed typing (relative to baseline), rushed scrolling,
    back-and-forth scrolling and click hesitation. Returns a value in [0, 1].
    """
    stress = STRESS_BASE

    ratio = latency_increase_ratio(aggregates, baseline)
    if ratio is not None:
        stress += max(0.0, ratio) * LATENCY_INCREASE_WEIGHT

    if aggregates.scroll_velocity.max > SCROLL_MAX_THRESHOLD:
        stress += SCROLL_MAX_STRESS

    if aggregates.scroll_velocity.direction_changes > DIRECTION_CHANGES_THRESHOLD:
        stress += DIRECTION_CHANGES_STRESS

    if aggregates.click_hesitation.recent > CLICK_HESITATION_THRESHOLD:
        stress += CLICK_HESITATION_STRESS

    return clamp(stress, 0.0, 1.0)


def calculate_cognitive_budget(aggregates: SignalAggregates, baseline: Optional[SignalAggregates] = None) -> float:
    """
    Remaining cognitive budget in [0.1, 1]. Session length and tab switching
    deplete it, idle time partially restores it. The baseline is accepted for
    symmetry with the other calculators and is currently unused.
    """
    session_hours = aggregates.session_duration / MS_PER_HOUR
    depletion = min(session_hours / SESSION_DEPLETION_HOURS, SESSION_DEPLETION_CAP)
    activity_cost = aggregates.tab_switches * TAB_SWITCH_COST
    recovery = min(aggregates.idle_time.total / IDLE_RECOVERY_FULL_MS, IDLE_RECOVERY_CAP)

    return clamp(1.0 - depletion - activity_cost + recovery, BUDGET_FLOOR, 1.0)
