"""
Transition Predictor Module

Forecasts the next likely cognitive state and a rough time to onset from the
current state and trend signals. An ordered list of rules is checked and the
first match wins; when none applies there is no forecast.
"""

import logging
import math
from typing import Optional

from shared.models import CognitiveState, SignalAggregates, StatePrediction

logger = logging.getLogger(__name__)

MS_PER_MINUTE = 60_000.0


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def predict_next_state(
    state: CognitiveState,
    aggregates: SignalAggregates,
    focus_level: float,
    stress_index: float,
    cognitive_budget: float,
) -> Optional[StatePrediction]:
    """
    Apply the transition rules in order:

    1. Long flow sessions drift into fatigue.
    2. Very long hyperfocus burns out into overload.
    3. Elevated (but not yet critical) stress climbs into overload.
    4. A low budget runs out into fatigue.
    5. Scattered attention may turn into recovery if the user steps away.

    Returns:
        StatePrediction, or None when no rule matches.
    """
    state = CognitiveState(state)
    session_minutes = aggregates.session_duration / MS_PER_MINUTE
    prediction = None

    if state == CognitiveState.FLOW and session_minutes > 45:
        prediction = StatePrediction(
            next_state=CognitiveState.FATIGUED,
            time_to_onset_minutes=max(15.0, 90.0 - session_minutes),
            confidence=0.6 + session_minutes / 180.0,
        )
    elif state == CognitiveState.HYPERFOCUS and session_minutes > 90:
        prediction = StatePrediction(
            next_state=CognitiveState.OVERLOAD,
            time_to_onset_minutes=max(10.0, 120.0 - session_minutes),
            confidence=0.7,
        )
    elif 0.5 < stress_index < 0.7:
        prediction = StatePrediction(
            next_state=CognitiveState.OVERLOAD,
            time_to_onset_minutes=_round_half_up((0.7 - stress_index) / 0.1 * 10),
            confidence=0.5 + stress_index * 0.3,
        )
    elif 0.2 < cognitive_budget < 0.4:
        prediction = StatePrediction(
            next_state=CognitiveState.FATIGUED,
            time_to_onset_minutes=_round_half_up(cognitive_budget * 30),
            confidence=0.6,
        )
    elif state == CognitiveState.DISTRACTED and focus_level < 0.3:
        prediction = StatePrediction(
            next_state=CognitiveState.RECOVERY,
            time_to_onset_minutes=5,
            confidence=0.4,
        )

    if prediction is not None:
        logger.debug(
            f"Predicted {state.value} -> {prediction.next_state.value} "
            f"in ~{prediction.time_to_onset_minutes:.0f} min (conf={prediction.confidence:.2f})"
        )
    return prediction
