# server/api.py
"""
FastAPI Service Module

Thin HTTP adapter over the cognition engine. Exposes:
- POST /evaluate       samples (+ optional baseline) -> state, tokens, explanation
- GET  /tokens/{state} token vector for a state and adaptation mode
- GET  /health

The service is stateless: nothing is stored between requests. CORS is
enabled so the rendering layer can call it directly.
"""

import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from cognition.adaptive_tokens import (
    explain_adaptation,
    get_adaptive_tokens,
    tokens_to_css_variables,
)
from cognition.inference import infer_cognitive_state
from cognition.signal_aggregator import aggregate_signals
from server.request_validator import RequestValidator
from shared.models import (
    AdaptationMode,
    CognitiveState,
    EvaluationRequest,
    EvaluationResponse,
    TokenResponse,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="CogAdapt API", version="1.0.0")

# CORS – allow the rendering origin (adjust in production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

validator = RequestValidator()


@app.post("/evaluate", response_model=EvaluationResponse)
def evaluate(payload: EvaluationRequest):
    """
    Classify the cognitive state of one sample window and return the
    matching adaptation tokens.

    Steps:
    1. Validate the incoming batch.
    2. Aggregate samples and run inference (with the baseline if given).
    3. Map the state to tokens for the requested adaptation mode.
    """
    is_valid, reason = validator.validate(payload)
    if not is_valid:
        logger.warning(f"Rejected evaluation request: {reason}")
        raise HTTPException(status_code=400, detail=reason)

    aggregates = aggregate_signals(payload.samples)
    result = infer_cognitive_state(aggregates, payload.baseline)
    tokens = get_adaptive_tokens(result.state, payload.adaptation_mode)

    logger.info(
        f"Evaluated {len(payload.samples)} samples -> {result.state.value} "
        f"(conf={result.confidence:.2f}, mode={payload.adaptation_mode.value})"
    )

    return EvaluationResponse(
        aggregates=aggregates,
        result=result,
        tokens=tokens,
        css_variables=tokens_to_css_variables(tokens),
        explanation=explain_adaptation(result.state, tokens),
    )


@app.get("/tokens/{state}", response_model=TokenResponse)
def tokens_for_state(state: CognitiveState, mode: AdaptationMode = AdaptationMode.SUBTLE):
    """Token vector for a given state, e.g. for previewing adaptations in settings."""
    tokens = get_adaptive_tokens(state, mode)
    return TokenResponse(
        state=state,
        adaptation_mode=mode,
        tokens=tokens,
        css_variables=tokens_to_css_variables(tokens),
        explanation=explain_adaptation(state, tokens),
    )


@app.get("/health")
def health_check():
    """Simple health endpoint."""
    return {"status": "healthy"}
