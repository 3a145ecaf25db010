"""
State Classifier Module

Rule-based scorer selecting one of seven cognitive states. Every state
accumulates additive partial scores when its conditions hold; the state with
the highest score wins. This is a weighted checklist, not a trained model, so
each constant below is part of the observable behaviour.

State rules:
- Flow: high focus with low stress, few tab switches, steady typing
- Distracted: low focus, frequent tab switching, erratic scrolling
- Overload: high stress, depleted budget, slowed typing vs. baseline
- Fatigued: long session, slowed typing vs. baseline, low focus and budget
- Hyperfocus: very high focus with no tab switches over a long session
- Recovery: long idle time with little typing
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from shared.models import CognitiveState, SignalAggregates

logger = logging.getLogger(__name__)

MS_PER_MINUTE = 60_000.0

NEUTRAL_BASE_SCORE = 0.3

STATE_THRESHOLDS = {
    CognitiveState.FLOW: {
        "focus_min": 0.7,
        "stress_max": 0.3,
        "latency_variance_max": 50.0,
        "tab_switches_max": 2,
    },
    CognitiveState.DISTRACTED: {
        "focus_max": 0.4,
        "tab_switches_min": 5,
        "scroll_direction_changes_min": 10,
    },
    CognitiveState.OVERLOAD: {
        "stress_min": 0.7,
        "budget_max": 0.3,
        "latency_ratio": 1.3,
    },
    CognitiveState.FATIGUED: {
        "session_minutes": 90.0,
        "latency_ratio": 1.2,
        "focus_max": 0.5,
        "budget_max": 0.5,
    },
    CognitiveState.HYPERFOCUS: {
        "focus_min": 0.9,
        "tab_switches_max": 0,
        "session_minutes": 60.0,
        "idle_time_max": 120_000.0,   # 2 minutes
    },
    CognitiveState.RECOVERY: {
        "idle_time_min": 300_000.0,   # 5 minutes
        "keystroke_count_max": 10,
    },
}


@dataclass(frozen=True)
class ScoringContext:
    """Inputs shared by every state scorer."""
    aggregates: SignalAggregates
    focus_level: float
    stress_index: float
    cognitive_budget: float
    baseline: Optional[SignalAggregates] = None

    @property
    def session_minutes(self) -> float:
        return self.aggregates.session_duration / MS_PER_MINUTE

    def latency_exceeds_baseline(self, ratio: float) -> bool:
        if self.baseline is None:
            return False
        return self.aggregates.keystroke_latency.mean > self.baseline.keystroke_latency.mean * ratio


def _score_neutral(ctx: ScoringContext) -> float:
    return NEUTRAL_BASE_SCORE


def _score_flow(ctx: ScoringContext) -> float:
    t = STATE_THRESHOLDS[CognitiveState.FLOW]
    if not (ctx.focus_level >= t["focus_min"] and ctx.stress_index <= t["stress_max"]):
        return 0.0
    score = 0.5
    if ctx.aggregates.tab_switches <= t["tab_switches_max"]:
        score += 0.3
    if ctx.aggregates.keystroke_latency.variance < t["latency_variance_max"]:
        score += 0.2
    return score


def _score_distracted(ctx: ScoringContext) -> float:
    t = STATE_THRESHOLDS[CognitiveState.DISTRACTED]
    score = 0.0
    if ctx.focus_level <= t["focus_max"]:
        score += 0.3
    if ctx.aggregates.tab_switches >= t["tab_switches_min"]:
        score += 0.4
    if ctx.aggregates.scroll_velocity.direction_changes >= t["scroll_direction_changes_min"]:
        score += 0.2
    return score


def _score_overload(ctx: ScoringContext) -> float:
    t = STATE_THRESHOLDS[CognitiveState.OVERLOAD]
    score = 0.0
    if ctx.stress_index >= t["stress_min"]:
        score += 0.4
    if ctx.cognitive_budget <= t["budget_max"]:
        score += 0.4
    if ctx.latency_exceeds_baseline(t["latency_ratio"]):
        score += 0.2
    return score


def _score_fatigued(ctx: ScoringContext) -> float:
    t = STATE_THRESHOLDS[CognitiveState.FATIGUED]
    if ctx.session_minutes < t["session_minutes"]:
        return 0.0
    score = 0.3
    if ctx.latency_exceeds_baseline(t["latency_ratio"]):
        score += 0.4
    if ctx.focus_level < t["focus_max"] and ctx.cognitive_budget < t["budget_max"]:
        score += 0.3
    return score


def _score_hyperfocus(ctx: ScoringContext) -> float:
    t = STATE_THRESHOLDS[CognitiveState.HYPERFOCUS]
    if not (ctx.focus_level >= t["focus_min"] and ctx.aggregates.tab_switches <= t["tab_switches_max"]):
        return 0.0
    score = 0.4
    if ctx.session_minutes >= t["session_minutes"]:
        score += 0.3
    if ctx.aggregates.idle_time.total < t["idle_time_max"]:
        score += 0.2
    return score


def _score_recovery(ctx: ScoringContext) -> float:
    t = STATE_THRESHOLDS[CognitiveState.RECOVERY]
    if ctx.aggregates.idle_time.total < t["idle_time_min"]:
        return 0.0
    score = 0.6
    if ctx.aggregates.keystroke_latency.count < t["keystroke_count_max"]:
        score += 0.3
    return score


# Iteration order doubles as the tie-break order: on equal scores the state
# listed first wins, so neutral holds against any tie.
STATE_SCORERS: Dict[CognitiveState, Callable[[ScoringContext], float]] = {
    CognitiveState.NEUTRAL: _score_neutral,
    CognitiveState.FLOW: _score_flow,
    CognitiveState.DISTRACTED: _score_distracted,
    CognitiveState.OVERLOAD: _score_overload,
    CognitiveState.FATIGUED: _score_fatigued,
    CognitiveState.HYPERFOCUS: _score_hyperfocus,
    CognitiveState.RECOVERY: _score_recovery,
}


def score_states(
    aggregates: SignalAggregates,
    focus_level: float,
    stress_index: float,
    cognitive_budget: float,
    baseline: Optional[SignalAggregates] = None,
) -> Dict[CognitiveState, float]:
    """Return the score of every state, in tie-break order."""
    ctx = ScoringContext(aggregates, focus_level, stress_index, cognitive_budget, baseline)
    return {state: scorer(ctx) for state, scorer in STATE_SCORERS.items()}


def detect_state(
    aggregates: SignalAggregates,
    focus_level: float,
    stress_index: float,
    cognitive_budget: float,
    baseline: Optional[SignalAggregates] = None,
) -> Tuple[CognitiveState, float]:
    """
    Select the highest scoring state.

    Returns:
        (state, confidence) where confidence is the winning score capped at 1.
    """
    scores = score_states(aggregates, focus_level, stress_index, cognitive_budget, baseline)

    best_state = CognitiveState.NEUTRAL
    best_score = scores[CognitiveState.NEUTRAL]
    for state, score in scores.items():
        if score > best_score:
            best_state, best_score = state, score

    logger.debug(
        "State scores: " + ", ".join(f"{s.value}={v:.2f}" for s, v in scores.items())
        + f" -> {best_state.value}"
    )
    return best_state, min(best_score, 1.0)
