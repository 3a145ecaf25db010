"""
Inference entry point: aggregates in, CognitiveStateResult out.
"""

import logging
from typing import Optional

from cognition.metrics import (
    calculate_cognitive_budget,
    calculate_focus_level,
    calculate_stress_index,
)
from cognition.state_classifier import detect_state
from cognition.transition_predictor import predict_next_state
from shared.models import CognitiveStateResult, SignalAggregates

logger = logging.getLogger(__name__)


def infer_cognitive_state(
    aggregates: SignalAggregates,
    baseline: Optional[SignalAggregates] = None,
) -> CognitiveStateResult:
    """
    Run metrics, classification and transition prediction for one window.

    Args:
        aggregates: Snapshot of the current window.
        baseline: Historical norm for relative comparisons. Without it the
                  latency-based rules simply do not fire.
    """
    focus_level = calculate_focus_level(aggregates)
    stress_index = calculate_stress_index(aggregates, baseline)
    cognitive_budget = calculate_cognitive_budget(aggregates, baseline)

    state, confidence = detect_state(aggregates, focus_level, stress_index, cognitive_budget, baseline)
    prediction = predict_next_state(state, aggregates, focus_level, stress_index, cognitive_budget)

    logger.debug(
        f"Inferred {state.value} (conf={confidence:.2f}) focus={focus_level:.2f} "
        f"stress={stress_index:.2f} budget={cognitive_budget:.2f}"
    )

    return CognitiveStateResult(
        state=state,
        confidence=confidence,
        stress_index=stress_index,
        focus_level=focus_level,
        cognitive_budget=cognitive_budget,
        prediction=prediction,
    )
