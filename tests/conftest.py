from datetime import datetime, timedelta

import pytest

from shared.models import SignalSample

T0 = datetime(2024, 3, 1, 9, 0, 0)


def make_sample(signal_type, value, offset_seconds=0.0):
    return SignalSample(
        signal_type=signal_type,
        value=value,
        created_at=T0 + timedelta(seconds=offset_seconds),
    )


@pytest.fixture
def sample():
    """Factory fixture: sample(type, value, offset_seconds=0)."""
    return make_sample
