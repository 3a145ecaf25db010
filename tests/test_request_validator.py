from datetime import datetime, timezone

from server.request_validator import RequestValidator
from shared.models import EvaluationRequest, IdleStats, SignalAggregates, SignalSample


def _sample(value, created_at=datetime(2024, 3, 1, 9, 0)):
    return SignalSample(signal_type="keystroke_latency", value=value, created_at=created_at)


def test_accepts_plain_request():
    ok, reason = RequestValidator().validate(EvaluationRequest(samples=[_sample(120)]))
    assert ok
    assert reason == ""


def test_rejects_oversized_batch():
    validator = RequestValidator(max_samples=3)
    ok, reason = validator.validate(EvaluationRequest(samples=[_sample(120)] * 4))
    assert not ok
    assert "Too many samples" in reason


def test_rejects_non_finite_value():
    ok, reason = RequestValidator().validate(EvaluationRequest(samples=[_sample(float("nan"))]))
    assert not ok
    assert "non-finite" in reason


def test_rejects_mixed_timezones():
    samples = [
        _sample(120),
        _sample(120, datetime(2024, 3, 1, 9, 1, tzinfo=timezone.utc)),
    ]
    ok, reason = RequestValidator().validate(EvaluationRequest(samples=samples))
    assert not ok
    assert "timezone" in reason


def test_rejects_negative_baseline():
    baseline = SignalAggregates(idle_time=IdleStats(total=-1, periods=0))
    ok, reason = RequestValidator().validate(EvaluationRequest(samples=[], baseline=baseline))
    assert not ok
    assert "idle_time.total" in reason
