"""
Synthetic Signal Source

SYNTHETIC sample generator for demos and development only. Produces
plausible behavioral samples for a few canned user profiles without any
real capture hooks.

NOT for production use!
"""

import logging
import random
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from shared.models import SignalSample, SignalType

logger = logging.getLogger(__name__)

# Per-profile generation parameters.
#   weights:   relative frequency of each signal type
#   <type>:    (mean, spread) of generated values
PROFILES: Dict[str, Dict] = {
    "focused": {
        "weights": {
            SignalType.KEYSTROKE_LATENCY: 0.75,
            SignalType.FOCUS_DURATION: 0.15,
            SignalType.MOUSE_ENTROPY: 0.1,
        },
        SignalType.KEYSTROKE_LATENCY: (120.0, 4.0),
        SignalType.FOCUS_DURATION: (120_000.0, 10_000.0),
        SignalType.MOUSE_ENTROPY: (0.3, 0.05),
    },
    "distracted": {
        "weights": {
            SignalType.KEYSTROKE_LATENCY: 0.3,
            SignalType.TAB_SWITCHES: 0.25,
            SignalType.SCROLL_VELOCITY: 0.35,
            SignalType.MOUSE_ENTROPY: 0.1,
        },
        SignalType.KEYSTROKE_LATENCY: (180.0, 40.0),
        SignalType.TAB_SWITCHES: (1.0, 0.0),
        SignalType.SCROLL_VELOCITY: (1.2, 0.6),
        SignalType.MOUSE_ENTROPY: (0.8, 0.1),
    },
    "stressed": {
        "weights": {
            SignalType.KEYSTROKE_LATENCY: 0.4,
            SignalType.SCROLL_VELOCITY: 0.4,
            SignalType.CLICK_HESITATION: 0.2,
        },
        SignalType.KEYSTROKE_LATENCY: (260.0, 60.0),
        SignalType.SCROLL_VELOCITY: (2.5, 0.8),
        SignalType.CLICK_HESITATION: (3500.0, 500.0),
    },
    "idle": {
        "weights": {
            SignalType.IDLE_TIME: 0.8,
            SignalType.MOUSE_ENTROPY: 0.2,
        },
        SignalType.IDLE_TIME: (90_000.0, 15_000.0),
        SignalType.MOUSE_ENTROPY: (0.1, 0.05),
    },
}


class SyntheticSignalSource:
    """Generates time-ordered SignalSample batches for one profile."""

    def __init__(self, profile: str = "focused", seed: Optional[int] = None, interval_seconds: float = 2.0):
        """
        Args:
            profile: One of PROFILES.
            seed: Seed for reproducible output.
            interval_seconds: Mean spacing between generated samples.

        Raises:
            ValueError: if the profile is unknown.
        """
        if profile not in PROFILES:
            raise ValueError(f"Unknown profile '{profile}', expected one of {sorted(PROFILES)}")
        self.profile = profile
        self.interval_seconds = interval_seconds
        self._params = PROFILES[profile]
        self._rng = random.Random(seed)
        self._clock: Optional[datetime] = None
        logger.info(f"SyntheticSignalSource initialized (profile={profile}, SYNTHETIC DATA)")

    def _value(self, signal_type: SignalType) -> float:
        mean, spread = self._params[signal_type]
        # Keep every generated measurement non-negative
        return max(0.0, self._rng.gauss(mean, spread))

    def generate(self, count: int, start: Optional[datetime] = None) -> List[SignalSample]:
        """
        Generate `count` samples continuing from the previous batch, or from
        `start` (default: now, UTC) on the first call.
        """
        if start is not None:
            self._clock = start
        elif self._clock is None:
            self._clock = datetime.now(timezone.utc)

        weights = self._params["weights"]
        types = list(weights)
        samples = []
        for signal_type in self._rng.choices(types, weights=[weights[t] for t in types], k=count):
            samples.append(
                SignalSample(
                    signal_type=signal_type.value,
                    value=self._value(signal_type),
                    created_at=self._clock,
                )
            )
            self._clock += timedelta(seconds=self._rng.expovariate(1.0 / self.interval_seconds))
        return samples
