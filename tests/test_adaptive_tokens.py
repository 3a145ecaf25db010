import pytest

from cognition.adaptive_tokens import (
    BASE_TOKENS,
    BREAK_SUGGESTION,
    CSS_VARIABLE_NAMES,
    explain_adaptation,
    get_adaptive_tokens,
    tokens_to_css_variables,
)
from shared.models import AdaptationMode, AdaptiveTokens, CognitiveState, NotificationFrequency


@pytest.mark.parametrize("state", list(CognitiveState))
def test_invisible_mode_returns_base_tokens(state):
    assert get_adaptive_tokens(state, AdaptationMode.INVISIBLE) == BASE_TOKENS


@pytest.mark.parametrize("mode", list(AdaptationMode))
def test_neutral_never_changes_tokens(mode):
    assert get_adaptive_tokens(CognitiveState.NEUTRAL, mode) == BASE_TOKENS


def test_overload_visible_applies_full_overrides():
    tokens = get_adaptive_tokens(CognitiveState.OVERLOAD, AdaptationMode.VISIBLE)
    assert tokens.notification_frequency == NotificationFrequency.NONE
    assert tokens.simplify_layout is True
    assert tokens.suggest_break is True
    assert tokens.ui_opacity == 0.7
    assert tokens.touch_target_scale == pytest.approx(1.25)
    assert tokens.animation_duration == "600ms"
    assert tokens.animation_ease == "cubic-bezier(0.4, 0, 0.2, 1)"


def test_unblended_fields_stay_at_base():
    tokens = get_adaptive_tokens(CognitiveState.OVERLOAD, AdaptationMode.VISIBLE)
    assert tokens.line_height_scale == BASE_TOKENS.line_height_scale
    assert tokens.accent_saturation == BASE_TOKENS.accent_saturation
    assert tokens.contrast_boost == BASE_TOKENS.contrast_boost


def test_subtle_mode_switches_discrete_but_blends_continuous():
    tokens = get_adaptive_tokens(CognitiveState.FLOW, AdaptationMode.SUBTLE)
    # Discrete fields switch fully at intensity 0.6
    assert tokens.animation_duration == "150ms"
    assert tokens.notification_frequency == NotificationFrequency.CRITICAL
    assert tokens.auto_hide_chrome is True
    # Continuous fields move 60% of the way
    assert tokens.glow_intensity == pytest.approx(0.88)
    assert tokens.density_scale == pytest.approx(1.06)
    assert tokens.ui_opacity == pytest.approx(1.0)


def test_subtle_fatigue_suggests_break():
    tokens = get_adaptive_tokens(CognitiveState.FATIGUED, AdaptationMode.SUBTLE)
    assert tokens.suggest_break is True
    assert tokens.font_scale == pytest.approx(1.09)
    assert tokens.notification_frequency == NotificationFrequency.IMPORTANT


def test_default_mode_is_subtle():
    assert get_adaptive_tokens(CognitiveState.RECOVERY) == get_adaptive_tokens(
        CognitiveState.RECOVERY, AdaptationMode.SUBTLE
    )


def test_string_arguments_are_accepted():
    assert get_adaptive_tokens("distracted", "visible") == get_adaptive_tokens(
        CognitiveState.DISTRACTED, AdaptationMode.VISIBLE
    )


def test_unknown_mode_is_rejected():
    with pytest.raises(ValueError):
        get_adaptive_tokens(CognitiveState.FLOW, "loud")


def _parse_css(value: str, field: str):
    annotation = AdaptiveTokens.model_fields[field].annotation
    if annotation is bool:
        return value == "true"
    if annotation is float:
        return float(value)
    if annotation is NotificationFrequency:
        return NotificationFrequency(value)
    return value


@pytest.mark.parametrize("state", list(CognitiveState))
@pytest.mark.parametrize("mode", list(AdaptationMode))
def test_css_variables_cover_every_field_losslessly(state, mode):
    tokens = get_adaptive_tokens(state, mode)
    css = tokens_to_css_variables(tokens)

    assert len(css) == len(AdaptiveTokens.model_fields)
    assert set(CSS_VARIABLE_NAMES) == set(AdaptiveTokens.model_fields)
    assert all(isinstance(v, str) for v in css.values())

    restored = {field: _parse_css(css[name], field) for field, name in CSS_VARIABLE_NAMES.items()}
    assert AdaptiveTokens(**restored) == tokens


def test_css_formatting():
    css = tokens_to_css_variables(get_adaptive_tokens(CognitiveState.OVERLOAD, AdaptationMode.VISIBLE))
    assert css["--adaptive-animation-duration"] == "600ms"
    assert css["--adaptive-ui-opacity"] == "0.7"
    assert css["--adaptive-font-scale"] == "1.1"
    assert css["--adaptive-line-height-scale"] == "1"
    assert css["--adaptive-contrast-boost"] == "0"
    assert css["--adaptive-notification-frequency"] == "none"
    assert css["--adaptive-suggest-break"] == "true"
    assert css["--adaptive-auto-hide-chrome"] == "false"


def test_explanations():
    neutral = get_adaptive_tokens(CognitiveState.NEUTRAL)
    assert explain_adaptation(CognitiveState.NEUTRAL, neutral) == "Operating in standard mode."

    overload = get_adaptive_tokens(CognitiveState.OVERLOAD, AdaptationMode.VISIBLE)
    text = explain_adaptation(CognitiveState.OVERLOAD, overload)
    assert text.startswith("You seem overwhelmed.")
    assert text.endswith(BREAK_SUGGESTION)

    # No break clause when the flag was not switched on
    quiet = get_adaptive_tokens(CognitiveState.OVERLOAD, AdaptationMode.INVISIBLE)
    assert not explain_adaptation(CognitiveState.OVERLOAD, quiet).endswith(BREAK_SUGGESTION)


@pytest.mark.parametrize("state", list(CognitiveState))
def test_every_state_has_an_explanation(state):
    assert explain_adaptation(state, BASE_TOKENS)
