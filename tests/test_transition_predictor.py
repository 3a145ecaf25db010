import pytest

from cognition.transition_predictor import predict_next_state
from shared.models import CognitiveState, SignalAggregates

MINUTE = 60_000


def session(minutes):
    return SignalAggregates(session_duration=minutes * MINUTE)


def test_long_flow_predicts_fatigue():
    prediction = predict_next_state(CognitiveState.FLOW, session(60), 0.8, 0.3, 0.8)
    assert prediction.next_state == CognitiveState.FATIGUED
    assert prediction.time_to_onset_minutes == pytest.approx(30.0)
    assert prediction.confidence == pytest.approx(0.6 + 60 / 180)


def test_flow_onset_has_a_floor():
    prediction = predict_next_state(CognitiveState.FLOW, session(85), 0.8, 0.3, 0.8)
    assert prediction.time_to_onset_minutes == 15.0


def test_long_hyperfocus_predicts_overload():
    prediction = predict_next_state(CognitiveState.HYPERFOCUS, session(100), 0.95, 0.3, 0.8)
    assert prediction.next_state == CognitiveState.OVERLOAD
    assert prediction.time_to_onset_minutes == pytest.approx(20.0)
    assert prediction.confidence == pytest.approx(0.7)


def test_rising_stress_predicts_overload():
    prediction = predict_next_state(CognitiveState.NEUTRAL, session(10), 0.6, 0.6, 0.8)
    assert prediction.next_state == CognitiveState.OVERLOAD
    assert prediction.time_to_onset_minutes == 10
    assert prediction.confidence == pytest.approx(0.68)


def test_low_budget_predicts_fatigue():
    prediction = predict_next_state(CognitiveState.NEUTRAL, session(10), 0.6, 0.3, 0.25)
    assert prediction.next_state == CognitiveState.FATIGUED
    assert prediction.time_to_onset_minutes == 8  # 7.5 rounds up
    assert prediction.confidence == pytest.approx(0.6)


def test_scattered_attention_predicts_recovery():
    prediction = predict_next_state(CognitiveState.DISTRACTED, session(10), 0.2, 0.3, 0.8)
    assert prediction.next_state == CognitiveState.RECOVERY
    assert prediction.time_to_onset_minutes == 5
    assert prediction.confidence == pytest.approx(0.4)


def test_first_matching_rule_wins():
    # Flow rule precedes the stress rule
    prediction = predict_next_state(CognitiveState.FLOW, session(50), 0.8, 0.6, 0.3)
    assert prediction.next_state == CognitiveState.FATIGUED
    assert prediction.time_to_onset_minutes == pytest.approx(40.0)


@pytest.mark.parametrize("state,minutes,focus,stress,budget", [
    (CognitiveState.NEUTRAL, 0, 0.65, 0.3, 1.0),
    (CognitiveState.FLOW, 45, 0.8, 0.3, 0.8),          # not strictly over 45 minutes
    (CognitiveState.NEUTRAL, 10, 0.6, 0.7, 0.8),       # stress at the overload threshold
    (CognitiveState.NEUTRAL, 10, 0.6, 0.3, 0.4),       # budget at the upper bound
    (CognitiveState.DISTRACTED, 10, 0.3, 0.3, 0.8),
])
def test_no_prediction(state, minutes, focus, stress, budget):
    assert predict_next_state(state, session(minutes), focus, stress, budget) is None
