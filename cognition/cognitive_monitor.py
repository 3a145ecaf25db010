"""
Cognitive Monitor Module

Owns the host-side state around the pure inference pipeline: a sliding
window of recent signal samples, the optional historical baseline, user
adaptation preferences and the last computed result. The host calls
refresh() periodically (e.g. every two minutes) and reads tokens and
explanations from the monitor between refreshes.
"""

import logging
from collections import deque
from datetime import datetime, timedelta
from typing import Deque, Dict, Iterable, List, Optional

from cognition.adaptive_tokens import (
    explain_adaptation,
    get_adaptive_tokens,
    tokens_to_css_variables,
)
from cognition.inference import infer_cognitive_state
from cognition.signal_aggregator import aggregate_signals
from shared.models import (
    AdaptationMode,
    AdaptiveTokens,
    CognitiveState,
    CognitiveStateResult,
    SignalAggregates,
    SignalSample,
    StatePrediction,
)

logger = logging.getLogger(__name__)

LET_ME_STRUGGLE_EXPLANATION = "Let Me Struggle mode is active. All adaptations are disabled."

# States worth surfacing at WARNING level
_HIGH_LOAD_STATES = {CognitiveState.OVERLOAD, CognitiveState.FATIGUED}


class CognitiveMonitor:
    """
    Maintains a time-ordered sample buffer and the last known cognitive state.
    Not thread-safe; each host owns its own instance.
    """

    def __init__(
        self,
        window_minutes: float = 30.0,
        min_samples: int = 5,
        adaptation_mode: AdaptationMode = AdaptationMode.SUBTLE,
        let_me_struggle: bool = False,
        baseline: Optional[SignalAggregates] = None,
    ):
        """
        Args:
            window_minutes: Lookback period used for each refresh.
            min_samples: Below this many samples in the window the state
                         falls back to neutral.
            adaptation_mode: Initial adaptation intensity preference.
            let_me_struggle: Disable all inference and adaptations.
            baseline: Historical aggregate for relative comparisons.
        """
        self.window = timedelta(minutes=window_minutes)
        self.min_samples = min_samples
        self.adaptation_mode = AdaptationMode(adaptation_mode)
        self.let_me_struggle = let_me_struggle
        self._baseline = baseline
        self._buffer: Deque[SignalSample] = deque()
        self._current_state = CognitiveState.NEUTRAL
        self._result: Optional[CognitiveStateResult] = None
        logger.info(f"CognitiveMonitor initialized with {window_minutes:g} min window")

    # ------------------------------------------------------------------
    # Sample intake
    # ------------------------------------------------------------------

    def add_sample(self, sample: SignalSample) -> None:
        """Insert a sample, keeping the buffer ordered by capture time."""
        if not self._buffer or sample.created_at >= self._buffer[-1].created_at:
            self._buffer.append(sample)
            return
        # Rare out-of-order sample: insert before the first later one
        for i, existing in enumerate(self._buffer):
            if sample.created_at < existing.created_at:
                self._buffer.insert(i, sample)
                break

    def add_samples(self, samples: Iterable[SignalSample]) -> None:
        for sample in samples:
            self.add_sample(sample)

    def _prune_buffer(self, now: datetime) -> None:
        cutoff = now - self.window
        while self._buffer and self._buffer[0].created_at < cutoff:
            self._buffer.popleft()

    @property
    def sample_count(self) -> int:
        return len(self._buffer)

    def window_samples(self) -> List[SignalSample]:
        """Samples currently in the window, oldest first."""
        return list(self._buffer)

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    def refresh(self, now: Optional[datetime] = None) -> Optional[CognitiveStateResult]:
        """
        Re-evaluate the cognitive state from the samples inside the window.

        Args:
            now: End of the window. Defaults to the newest buffered sample.

        Returns:
            The new result, or None when disabled or when there is too little
            data (the state is then reset to neutral).
        """
        if self.let_me_struggle:
            logger.debug("Let Me Struggle active, skipping refresh")
            return None

        if now is None and self._buffer:
            now = self._buffer[-1].created_at
        if now is not None:
            self._prune_buffer(now)

        if len(self._buffer) < self.min_samples:
            logger.debug(f"Only {len(self._buffer)} samples in window, need {self.min_samples}; staying neutral")
            self._set_state(CognitiveState.NEUTRAL)
            self._result = None
            return None

        aggregates = aggregate_signals(self._buffer)
        result = infer_cognitive_state(aggregates, self._baseline)
        self._result = result
        self._set_state(result.state)
        return result

    def _set_state(self, state: CognitiveState) -> None:
        if state == self._current_state:
            return
        previous = self._current_state
        self._current_state = state
        if state in _HIGH_LOAD_STATES:
            logger.warning(f"Cognitive state changed {previous.value} -> {state.value}")
        else:
            logger.info(f"Cognitive state changed {previous.value} -> {state.value}")

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def baseline(self) -> Optional[SignalAggregates]:
        return self._baseline

    @baseline.setter
    def baseline(self, value: Optional[SignalAggregates]) -> None:
        self._baseline = value
        if value is None:
            logger.info("Baseline cleared")
        else:
            logger.info(
                f"Baseline set: latency={value.keystroke_latency.mean:.1f}ms, "
                f"tab_switches={value.tab_switches}"
            )

    @property
    def current_state(self) -> CognitiveState:
        return self._current_state

    @property
    def state_result(self) -> Optional[CognitiveStateResult]:
        return self._result

    @property
    def confidence(self) -> float:
        return self._result.confidence if self._result else 0.0

    @property
    def prediction(self) -> Optional[StatePrediction]:
        return self._result.prediction if self._result else None

    @property
    def adaptive_tokens(self) -> AdaptiveTokens:
        if self.let_me_struggle:
            return get_adaptive_tokens(CognitiveState.NEUTRAL, AdaptationMode.INVISIBLE)
        return get_adaptive_tokens(self._current_state, self.adaptation_mode)

    @property
    def css_variables(self) -> Dict[str, str]:
        return tokens_to_css_variables(self.adaptive_tokens)

    def explain_why(self) -> str:
        """Explain which adaptations are active and why."""
        if self.let_me_struggle:
            return LET_ME_STRUGGLE_EXPLANATION
        return explain_adaptation(self._current_state, self.adaptive_tokens)

    def reset(self) -> None:
        """Drop buffered samples and the last result; keep baseline and preferences."""
        self._buffer.clear()
        self._result = None
        self._current_state = CognitiveState.NEUTRAL
        logger.info("CognitiveMonitor reset")
