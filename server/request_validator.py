# server/request_validator.py
"""
Request Validator Module

Plausibility checks on incoming evaluation requests. The cognition engine
trusts its inputs, so obviously malformed batches are rejected here before
they reach it. Only simple range and size checks are performed.
"""

import math
from typing import Tuple

from shared.models import EvaluationRequest, SignalAggregates


class RequestValidator:
    """
    Validates evaluation payloads against a set of sanity rules.
    """

    def __init__(self, max_samples: int = 10_000):
        self.max_samples = max_samples

    def validate(self, payload: EvaluationRequest) -> Tuple[bool, str]:
        """
        Check if the incoming request is plausible.

        Returns:
            Tuple (is_valid, reason). If valid, reason is empty string.
        """
        # 1. Batch size
        if len(payload.samples) > self.max_samples:
            return False, f"Too many samples: {len(payload.samples)} > {self.max_samples}"

        # 2. Sample values must be finite, non-negative measurements
        for i, sample in enumerate(payload.samples):
            if not math.isfinite(sample.value):
                return False, f"Sample {i} ({sample.signal_type}) has non-finite value"
            if sample.value < 0:
                return False, f"Sample {i} ({sample.signal_type}) has negative value {sample.value}"

        # 3. Timestamps must be comparable (all naive or all timezone-aware)
        aware = {s.created_at.tzinfo is not None for s in payload.samples}
        if len(aware) > 1:
            return False, "Samples mix naive and timezone-aware timestamps"

        # 4. Baseline sanity
        if payload.baseline is not None:
            ok, reason = self._validate_baseline(payload.baseline)
            if not ok:
                return False, reason

        return True, ""

    def _validate_baseline(self, baseline: SignalAggregates) -> Tuple[bool, str]:
        numbers = [
            ("keystroke_latency.mean", baseline.keystroke_latency.mean),
            ("keystroke_latency.variance", baseline.keystroke_latency.variance),
            ("idle_time.total", baseline.idle_time.total),
            ("focus_duration.total", baseline.focus_duration.total),
            ("tab_switches", baseline.tab_switches),
        ]
        for name, value in numbers:
            if not math.isfinite(value) or value < 0:
                return False, f"Baseline {name}: {value} out of range"
        return True, ""
