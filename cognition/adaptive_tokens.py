"""
Adaptive Tokens Module

Maps a cognitive state and an adaptation mode onto the AdaptiveTokens vector
consumed by the rendering layer, and projects tokens into CSS custom
properties and a human-readable explanation.

Blending rule:
- Continuous fields (opacity, glow, font/density/touch-target scale) are
  interpolated from the base value towards the state override by the mode
  intensity.
- Discrete fields (animation timing, notification gating, layout flags) switch
  to the override only when the intensity exceeds 0.5, so "subtle" mode
  already switches them fully while blending continuous fields partially.
- Line height, accent saturation and contrast boost overrides are never
  applied and stay at their base values.
"""

import logging
from typing import Any, Dict

from shared.models import (
    AdaptationMode,
    AdaptiveTokens,
    CognitiveState,
    NotificationFrequency,
)

logger = logging.getLogger(__name__)

MODE_INTENSITY = {
    AdaptationMode.INVISIBLE: 0.0,
    AdaptationMode.SUBTLE: 0.6,
    AdaptationMode.VISIBLE: 1.0,
}

DISCRETE_SWITCH_INTENSITY = 0.5

INTERPOLATED_FIELDS = (
    "ui_opacity",
    "glow_intensity",
    "font_scale",
    "density_scale",
    "touch_target_scale",
)

SWITCHED_FIELDS = (
    "animation_duration",
    "animation_ease",
    "notification_frequency",
    "auto_hide_chrome",
    "simplify_layout",
    "suggest_break",
)

# Neutral defaults
BASE_TOKENS = AdaptiveTokens(
    animation_duration="300ms",
    animation_ease="cubic-bezier(0.16, 1, 0.3, 1)",
    ui_opacity=1.0,
    glow_intensity=1.0,
    font_scale=1.0,
    line_height_scale=1.0,
    density_scale=1.0,
    touch_target_scale=1.0,
    accent_saturation=1.0,
    contrast_boost=0.0,
    notification_frequency=NotificationFrequency.ALL,
    auto_hide_chrome=False,
    simplify_layout=False,
    suggest_break=False,
)

# Partial overrides per state
STATE_TOKENS: Dict[CognitiveState, Dict[str, Any]] = {
    CognitiveState.NEUTRAL: {},
    CognitiveState.FLOW: {
        "animation_duration": "150ms",
        "animation_ease": "cubic-bezier(0.25, 0.1, 0.25, 1)",
        "ui_opacity": 1.0,
        "glow_intensity": 0.8,
        "density_scale": 1.1,          # more information visible
        "auto_hide_chrome": True,
        "notification_frequency": NotificationFrequency.CRITICAL,
    },
    CognitiveState.DISTRACTED: {
        "animation_duration": "400ms",
        "ui_opacity": 0.95,
        "glow_intensity": 0.6,
        "density_scale": 0.85,
        "notification_frequency": NotificationFrequency.CRITICAL,
        "simplify_layout": True,
    },
    CognitiveState.OVERLOAD: {
        "animation_duration": "600ms",
        "animation_ease": "cubic-bezier(0.4, 0, 0.2, 1)",
        "ui_opacity": 0.7,             # dim the UI
        "glow_intensity": 0.3,
        "font_scale": 1.1,
        "line_height_scale": 1.2,
        "density_scale": 0.7,
        "touch_target_scale": 1.25,
        "accent_saturation": 0.7,
        "contrast_boost": 0.1,
        "notification_frequency": NotificationFrequency.NONE,
        "simplify_layout": True,
        "suggest_break": True,
    },
    CognitiveState.FATIGUED: {
        "animation_duration": "500ms",
        "ui_opacity": 0.9,
        "glow_intensity": 0.5,
        "font_scale": 1.15,
        "line_height_scale": 1.25,
        "density_scale": 0.8,
        "touch_target_scale": 1.2,
        "contrast_boost": 0.15,
        "notification_frequency": NotificationFrequency.IMPORTANT,
        "suggest_break": True,
    },
    CognitiveState.HYPERFOCUS: {
        "animation_duration": "100ms",
        "animation_ease": "cubic-bezier(0, 0, 0.2, 1)",
        "ui_opacity": 1.0,
        "glow_intensity": 0.6,
        "density_scale": 1.15,
        "auto_hide_chrome": True,
        "notification_frequency": NotificationFrequency.NONE,
    },
    CognitiveState.RECOVERY: {
        "animation_duration": "800ms",  # slow, calming
        "animation_ease": "cubic-bezier(0.4, 0, 0.2, 1)",
        "ui_opacity": 0.85,
        "glow_intensity": 0.4,
        "font_scale": 1.05,
        "density_scale": 0.9,
        "accent_saturation": 0.8,
        "notification_frequency": NotificationFrequency.NONE,
        "simplify_layout": True,
    },
}

EXPLANATIONS = {
    CognitiveState.NEUTRAL: "Operating in standard mode.",
    CognitiveState.FLOW: "You're in a focused flow state. I've minimized distractions and speeded up responses.",
    CognitiveState.DISTRACTED: "I've noticed some scattered attention. I've simplified the layout to help you refocus.",
    CognitiveState.OVERLOAD: (
        "You seem overwhelmed. I've dimmed the interface, enlarged touch targets, "
        "and paused notifications. Consider a short break."
    ),
    CognitiveState.FATIGUED: "Signs of fatigue detected. I've made text larger and increased contrast for easier reading.",
    CognitiveState.HYPERFOCUS: "Deep focus mode. All non-essential UI is hidden. I won't interrupt unless critical.",
    CognitiveState.RECOVERY: "Recovery mode active. Slow, calming animations. Take your time.",
}

BREAK_SUGGESTION = " A 5-minute break might help."

CSS_VARIABLE_NAMES = {
    "animation_duration": "--adaptive-animation-duration",
    "animation_ease": "--adaptive-animation-ease",
    "ui_opacity": "--adaptive-ui-opacity",
    "glow_intensity": "--adaptive-glow-intensity",
    "font_scale": "--adaptive-font-scale",
    "line_height_scale": "--adaptive-line-height-scale",
    "density_scale": "--adaptive-density-scale",
    "touch_target_scale": "--adaptive-touch-target-scale",
    "accent_saturation": "--adaptive-accent-saturation",
    "contrast_boost": "--adaptive-contrast-boost",
    "notification_frequency": "--adaptive-notification-frequency",
    "auto_hide_chrome": "--adaptive-auto-hide-chrome",
    "simplify_layout": "--adaptive-simplify-layout",
    "suggest_break": "--adaptive-suggest-break",
}


def get_adaptive_tokens(
    state: CognitiveState,
    adaptation_mode: AdaptationMode = AdaptationMode.SUBTLE,
) -> AdaptiveTokens:
    """
    Blend the state's overrides onto BASE_TOKENS at the mode's intensity.

    Raises:
        ValueError: if state or adaptation_mode is not a known value.
    """
    state = CognitiveState(state)
    intensity = MODE_INTENSITY[AdaptationMode(adaptation_mode)]
    overrides = STATE_TOKENS[state]

    updates: Dict[str, Any] = {}
    for field in INTERPOLATED_FIELDS:
        if field in overrides:
            base = getattr(BASE_TOKENS, field)
            updates[field] = base + (overrides[field] - base) * intensity

    if intensity > DISCRETE_SWITCH_INTENSITY:
        for field in SWITCHED_FIELDS:
            if field in overrides:
                updates[field] = overrides[field]

    return BASE_TOKENS.model_copy(update=updates)


def _css_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, NotificationFrequency):
        return value.value
    if isinstance(value, float):
        # 1.0 -> "1", 0.88 -> "0.88"; repr keeps full precision
        return str(int(value)) if value.is_integer() else repr(value)
    return str(value)


def tokens_to_css_variables(tokens: AdaptiveTokens) -> Dict[str, str]:
    """Project every token onto its namespaced CSS custom property."""
    return {name: _css_value(getattr(tokens, field)) for field, name in CSS_VARIABLE_NAMES.items()}


def explain_adaptation(state: CognitiveState, tokens: AdaptiveTokens) -> str:
    """One sentence describing the active adaptations, for the transparency panel."""
    explanation = EXPLANATIONS[CognitiveState(state)]
    if tokens.suggest_break:
        explanation += BREAK_SUGGESTION
    return explanation
