# shared/models.py
"""
Shared Data Models (Pydantic)

Defines the data structures exchanged between the cognition engine, the
HTTP service and the demo client. Every model is an immutable value type
that is recomputed on each evaluation cycle; nothing here is persisted.

These models are used for:
- Serialization/deserialization in the API
- Type safety in cognition modules
- Validation of incoming signal batches
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SignalType(str, Enum):
    """Behavioral signal types understood by the aggregator."""
    KEYSTROKE_LATENCY = "keystroke_latency"
    SCROLL_VELOCITY = "scroll_velocity"
    MOUSE_ENTROPY = "mouse_entropy"
    CLICK_HESITATION = "click_hesitation"
    FOCUS_DURATION = "focus_duration"
    IDLE_TIME = "idle_time"
    TAB_SWITCHES = "tab_switches"


class CognitiveState(str, Enum):
    """Mutually exclusive attentional states."""
    NEUTRAL = "neutral"
    FLOW = "flow"
    DISTRACTED = "distracted"
    OVERLOAD = "overload"
    FATIGUED = "fatigued"
    HYPERFOCUS = "hyperfocus"
    RECOVERY = "recovery"


class AdaptationMode(str, Enum):
    """How strongly state-specific adaptations are applied."""
    INVISIBLE = "invisible"
    SUBTLE = "subtle"
    VISIBLE = "visible"


class NotificationFrequency(str, Enum):
    NONE = "none"
    CRITICAL = "critical"
    IMPORTANT = "important"
    ALL = "all"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ----------------------------------------------------------------------
# Signal input
# ----------------------------------------------------------------------

class SignalSample(_Frozen):
    """
    One observed behavioral measurement.
    signal_type is kept as a plain string so that types added later by the
    capture side pass validation and are simply ignored by the aggregator.
    """
    signal_type: str = Field(..., description="Signal type, see SignalType")
    value: float = Field(..., description="Measured value (ms, px/ms, count...)")
    created_at: datetime = Field(..., description="Capture timestamp")


# ----------------------------------------------------------------------
# Aggregates
# ----------------------------------------------------------------------

class LatencyStats(_Frozen):
    mean: float = 0.0
    variance: float = 0.0
    count: int = Field(0, ge=0)


class ScrollStats(_Frozen):
    mean: float = 0.0
    max: float = 0.0
    direction_changes: int = Field(0, ge=0)


class RecentStats(_Frozen):
    """Mean over the window plus the last observed value."""
    mean: float = 0.0
    recent: float = 0.0


class FocusStats(_Frozen):
    total: float = Field(0.0, description="Total focused time (ms)")
    breaks: int = Field(0, ge=0)


class IdleStats(_Frozen):
    total: float = Field(0.0, description="Total idle time (ms)")
    periods: int = Field(0, ge=0)


class SignalAggregates(_Frozen):
    """
    Snapshot of one aggregate window. Also used as the shape of the
    historical baseline.
    """
    keystroke_latency: LatencyStats = Field(default_factory=LatencyStats)
    scroll_velocity: ScrollStats = Field(default_factory=ScrollStats)
    mouse_entropy: RecentStats = Field(default_factory=RecentStats)
    click_hesitation: RecentStats = Field(default_factory=RecentStats)
    focus_duration: FocusStats = Field(default_factory=FocusStats)
    idle_time: IdleStats = Field(default_factory=IdleStats)
    tab_switches: int = 0
    session_duration: float = Field(0.0, ge=0.0, description="Window span (ms)")


# ----------------------------------------------------------------------
# Classification output
# ----------------------------------------------------------------------

class StatePrediction(_Frozen):
    next_state: CognitiveState
    time_to_onset_minutes: float = Field(..., ge=0.0)
    confidence: float


class CognitiveStateResult(_Frozen):
    """Classified state with the metrics it was derived from."""
    state: CognitiveState
    confidence: float = Field(..., ge=0.0, le=1.0)
    stress_index: float = Field(..., ge=0.0, le=1.0)
    focus_level: float = Field(..., ge=0.0, le=1.0)
    cognitive_budget: float = Field(..., ge=0.1, le=1.0)
    prediction: Optional[StatePrediction] = None


# ----------------------------------------------------------------------
# Presentation tokens
# ----------------------------------------------------------------------

class AdaptiveTokens(_Frozen):
    """Presentation parameters consumed by the rendering layer."""
    # Animation
    animation_duration: str
    animation_ease: str
    # Visual intensity
    ui_opacity: float
    glow_intensity: float
    # Typography
    font_scale: float
    line_height_scale: float
    # Spacing
    density_scale: float
    touch_target_scale: float
    # Colors
    accent_saturation: float
    contrast_boost: float
    # Behavior
    notification_frequency: NotificationFrequency
    auto_hide_chrome: bool
    simplify_layout: bool
    suggest_break: bool


# ----------------------------------------------------------------------
# API payloads
# ----------------------------------------------------------------------

class EvaluationRequest(BaseModel):
    """Payload sent to POST /evaluate."""
    samples: List[SignalSample] = Field(default_factory=list)
    baseline: Optional[SignalAggregates] = None
    adaptation_mode: AdaptationMode = AdaptationMode.SUBTLE


class EvaluationResponse(BaseModel):
    aggregates: SignalAggregates
    result: CognitiveStateResult
    tokens: AdaptiveTokens
    css_variables: Dict[str, str]
    explanation: str


class TokenResponse(BaseModel):
    state: CognitiveState
    adaptation_mode: AdaptationMode
    tokens: AdaptiveTokens
    css_variables: Dict[str, str]
    explanation: str
