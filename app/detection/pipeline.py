"""
Top-level analysis pipeline, the public entry point for every /analyze route.

`analyze` validates the request, runs the modality's extractors, the
consistency checker where it applies, the decision rule and the
explanation builder, and returns the AnalysisResult envelope with a fresh
report ID:

  media     → media scorer (+ image model when configured)
  voice     → voice scorer (+ speech-rate model when configured)
  text      → AI-authorship fingerprint (+ text detectors when configured)
  location  → text/OCR claims vs filename landmarks → consistency checker
  combined  → per sub-mode plan (media / misinformation / cross-reference)

Validation failures raise HTTPException before anything is scored. Any
other exception inside a run is logged and answered with the low-confidence
fallback result.
"""

import logging
import random
import time
from typing import List, NamedTuple, Optional

from app.config import settings
from app.core.file_validator import sanitize_log_message, validate_analysis_request
from app.detection.aggregator import (
    COMBINED_PLANS,
    combined_decision,
    cross_reference,
    fallback_decision,
    location_decision,
    media_decision,
    merge_model_verdict,
    text_decision,
    voice_decision,
)
from app.detection.consistency import check_consistency
from app.detection.constants import (
    MODEL_ASSISTED_LABELS,
    MODEL_DEFAULT_CONFIDENCE,
    MODEL_FAKE_ISSUE,
    MODEL_FAKE_THRESHOLD,
    MODEL_LABELS,
    MODEL_REAL_THRESHOLD,
    SPEECH_RATE_BAND,
    SPEECH_RATE_CONFIDENCE,
    SPEECH_RATE_ISSUE,
    STANDARD_MEDIA_POLICY,
    MediaPolicy,
)
from app.detection.explanation import (
    build_result,
    combined_explanation,
    fallback_explanation,
    location_explanation,
    media_explanation,
    text_explanation,
    voice_explanation,
)
from app.detection.location_scorer import (
    detect_visual_landmarks,
    extract_locations_from_text,
    simulate_ocr_extraction,
)
from app.detection.media_scorer import (
    build_attention_regions,
    build_frame_probabilities,
    get_media_suspicion_score,
)
from app.detection.misinformation_scorer import get_misinformation_score
from app.detection.rng import resolve_rng
from app.detection.text_scorer import get_ai_fingerprint
from app.detection.voice_scorer import estimate_duration, get_voice_suspicion_score
from app.integrations import inference
from app.schemas.analysis import (
    AnalysisRequest,
    AnalysisResult,
    AttentionRegion,
    CombinedMode,
    Decision,
    LocationAnalysis,
    MediaAsset,
    Modality,
    SuspicionSignal,
)
from app.services.analysis_service import generate_report_id

logger = logging.getLogger(__name__)


def _elapsed(started: float) -> float:
    return round(time.perf_counter() - started, 4)


# ---------------------------------------------------------------------------
# Specialized-model verdicts (optional)
# ---------------------------------------------------------------------------

async def _image_model_decision(asset: MediaAsset) -> Optional[Decision]:
    if not settings.inference_enabled or not asset.is_image or not asset.content:
        return None

    payload = await inference.classify_bytes(settings.inference_image_model, asset.content)
    if payload is None:
        return None

    fake = inference.find_label(payload, "fake", "generated")
    if fake and fake["score"] > MODEL_FAKE_THRESHOLD:
        return Decision(result="deepfake", confidence=int(fake["score"] * 100), issues=[MODEL_FAKE_ISSUE])

    real = inference.find_label(payload, "real", "authentic")
    if real and real["score"] > MODEL_REAL_THRESHOLD:
        return Decision(result="real", confidence=int(real["score"] * 100), issues=[])

    return Decision(result="real", confidence=MODEL_DEFAULT_CONFIDENCE, issues=[])


async def _speech_rate_decision(asset: MediaAsset, duration: float) -> Optional[Decision]:
    if not settings.inference_enabled or not asset.content:
        return None

    payload = await inference.classify_bytes(settings.inference_voice_model, asset.content)
    if payload is None:
        return None

    transcription = inference.extract_transcription(payload)
    if transcription:
        words_per_minute = len(transcription.split(" ")) / duration * 60
        low, high = SPEECH_RATE_BAND
        logger.info(f"[INFERENCE] Speech rate {words_per_minute:.0f} wpm")
        if words_per_minute < low or words_per_minute > high:
            return Decision(
                result="deepfake",
                confidence=max(MODEL_DEFAULT_CONFIDENCE, SPEECH_RATE_CONFIDENCE),
                issues=[SPEECH_RATE_ISSUE],
            )

    return Decision(result="real", confidence=MODEL_DEFAULT_CONFIDENCE, issues=[])


async def _text_model_probability(text: str) -> Optional[float]:
    """Highest AI-label score across the configured detectors, or None."""
    if not settings.inference_enabled:
        return None

    best = None
    for model in settings.inference_text_models:
        payload = await inference.classify_text(model, text)
        hit = inference.find_label(payload, "generated", "ai", "fake")
        if hit and (best is None or hit["score"] > best):
            best = hit["score"]
    return best


# ---------------------------------------------------------------------------
# Modality runs
# ---------------------------------------------------------------------------

class MediaRun(NamedTuple):
    score: float
    signals: List[SuspicionSignal]
    regions: List[AttentionRegion]
    decision: Decision
    model_used: str


async def _score_media(
    asset: MediaAsset,
    policy: MediaPolicy,
    rng: random.Random,
    use_model: bool = True,
) -> MediaRun:
    score, signals = get_media_suspicion_score(asset.mime_type, asset.name, asset.size, policy)
    regions = build_attention_regions(score, policy, rng)
    decision = media_decision(score, signals, policy)
    model_used = MODEL_LABELS["media"]

    if use_model:
        model_decision = await _image_model_decision(asset)
        if model_decision is not None:
            decision = merge_model_verdict(model_decision, decision)
            model_used = MODEL_ASSISTED_LABELS["media"]

    logger.info(f"[ANALYZE] media score={score} -> {decision.result} ({decision.confidence})")
    return MediaRun(score, signals, regions, decision, model_used)


async def run_media(asset: MediaAsset, rng: random.Random, started: float) -> AnalysisResult:
    media = await _score_media(asset, STANDARD_MEDIA_POLICY, rng)
    elapsed = _elapsed(started)
    explanation = media_explanation(media.regions, elapsed, media.model_used)
    return build_result(Modality.MEDIA, media.decision, explanation, elapsed)


async def run_voice(asset: MediaAsset, rng: random.Random, started: float) -> AnalysisResult:
    duration = estimate_duration(asset.size)
    score, signals, engine, segments = get_voice_suspicion_score(asset.name, asset.size, duration, rng=rng)
    decision = voice_decision(score, signals)
    model_used = MODEL_LABELS["voice"]

    model_decision = await _speech_rate_decision(asset, duration)
    if model_decision is not None:
        decision = merge_model_verdict(model_decision, decision)
        model_used = MODEL_ASSISTED_LABELS["voice"]

    logger.info(f"[ANALYZE] voice score={score:.1f} engine={engine.detected_engine} -> {decision.result}")
    elapsed = _elapsed(started)
    explanation = voice_explanation(segments, engine, elapsed, model_used)
    return build_result(Modality.VOICE, decision, explanation, elapsed)


async def run_text(text: str, started: float) -> AnalysisResult:
    fingerprint, issues = get_ai_fingerprint(text)
    external = await _text_model_probability(text)
    decision = text_decision(fingerprint, issues, external)
    model_used = MODEL_LABELS["text"] if external is None else MODEL_ASSISTED_LABELS["text"]

    logger.info(
        f"[ANALYZE] text generation={fingerprint.generation_confidence:.2f} "
        f"external={external} -> {decision.result}"
    )
    elapsed = _elapsed(started)
    return build_result(Modality.TEXT, decision, text_explanation(fingerprint, elapsed, model_used), elapsed)


def _location_analysis(
    asset: MediaAsset,
    text: Optional[str],
    rng: random.Random,
    include_ocr: bool = True,
) -> LocationAnalysis:
    claims = extract_locations_from_text(text, source="transcript") if text else []
    if include_ocr:
        claims.extend(simulate_ocr_extraction(rng))
    landmarks = detect_visual_landmarks(asset.name, rng)
    score, discrepancies = check_consistency(claims, landmarks)
    return LocationAnalysis(
        extracted_locations=claims,
        visual_landmarks=landmarks,
        consistency_score=score,
        discrepancies=discrepancies,
    )


async def run_location(
    asset: MediaAsset,
    text: Optional[str],
    rng: random.Random,
    started: float,
) -> AnalysisResult:
    analysis = _location_analysis(asset, text, rng)
    decision = location_decision(analysis.consistency_score, analysis.discrepancies)

    logger.info(
        f"[ANALYZE] location claims={len(analysis.extracted_locations)} "
        f"landmarks={len(analysis.visual_landmarks)} consistency={analysis.consistency_score} -> {decision.result}"
    )
    elapsed = _elapsed(started)
    return build_result(Modality.LOCATION, decision, location_explanation(analysis, elapsed), elapsed)


async def run_combined(
    asset: Optional[MediaAsset],
    text: Optional[str],
    sub_mode: CombinedMode,
    rng: random.Random,
    started: float,
) -> AnalysisResult:
    plan = COMBINED_PLANS[sub_mode]

    media: Optional[MediaRun] = None
    media_confidence = 0.0
    media_issues: List[str] = []
    frames = []

    if plan.media_policy is not None:
        # Without the text side the standard media run is reported as is.
        media = await _score_media(asset, plan.media_policy, rng, use_model=not plan.run_text)
        if plan.run_text:
            media_confidence = min(media.score / 100, plan.media_policy.confidence_cap / 100)
            media_issues = [s.evidence for s in media.signals]
        else:
            media_confidence = media.decision.confidence / 100
        if asset.is_video:
            frames = build_frame_probabilities(
                media_confidence,
                settings.combined_frame_samples,
                settings.combined_assumed_fps,
                rng,
            )

    text_confidence = 0.0
    highlights = []
    text_issues: List[str] = []
    if plan.run_text:
        text_confidence, highlights, text_issues = get_misinformation_score(text)

    cross_score = 0.0
    cross_issues: List[str] = []
    location = None
    location_issues: List[str] = []
    if plan.cross_reference:
        cross_score, cross_issues = cross_reference(asset, text, media_confidence, text_confidence)
        location = _location_analysis(asset, text, rng, include_ocr=False)
        location_issues = [d.description for d in location.discrepancies]

    if plan.run_text:
        issues = (
            media_issues
            + text_issues
            + cross_issues
            + [h.reason for h in highlights]
            + location_issues
        )
        decision = combined_decision(plan, media_confidence, text_confidence, cross_score, issues)
    else:
        decision = media.decision

    logger.info(
        f"[ANALYZE] combined ({sub_mode.value}) media={media_confidence:.2f} "
        f"text={text_confidence:.2f} cross={cross_score} -> {decision.result} ({decision.confidence})"
    )
    elapsed = _elapsed(started)
    explanation = combined_explanation(
        sub_mode,
        elapsed,
        media_confidence=media_confidence,
        text_confidence=text_confidence,
        regions=media.regions if media else [],
        frames=frames,
        highlights=highlights,
        location_analysis=location,
    )
    return build_result(Modality.COMBINED, decision, explanation, elapsed)


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------

async def analyze(
    modality,
    asset: Optional[MediaAsset] = None,
    text: Optional[str] = None,
    sub_mode=None,
    *,
    rng: Optional[random.Random] = None,
) -> AnalysisResult:
    """
    Single entry point for every modality.

    Args:
        modality: Modality or its string value.
        asset: Uploaded file (name, MIME type, size, bytes); None for text.
        text: Free text; required for text, location and combined with text.
        sub_mode: Combined-mode sub-mode; defaults to `both`.
        rng: Random source for the demo artifacts; one generator is threaded
            through the whole run.
    """
    modality, sub_mode = validate_analysis_request(modality, asset, text, sub_mode)
    request = AnalysisRequest(modality=modality, asset=asset, text=text, sub_mode=sub_mode)
    return await dispatch(request, rng=rng)


async def dispatch(request: AnalysisRequest, *, rng: Optional[random.Random] = None) -> AnalysisResult:
    """Runs an already-validated request and stamps a fresh report ID."""
    modality, asset, text = request.modality, request.asset, request.text
    rng = resolve_rng(rng)
    started = time.perf_counter()

    if asset is not None:
        logger.info(sanitize_log_message(
            f"[ANALYZE] {modality.value}: {asset.name} ({asset.mime_type}, {asset.size} bytes)"
        ))
    else:
        logger.info(f"[ANALYZE] {modality.value}: text only ({len(text or '')} chars)")

    try:
        if modality == Modality.MEDIA:
            result = await run_media(asset, rng, started)
        elif modality == Modality.VOICE:
            result = await run_voice(asset, rng, started)
        elif modality == Modality.TEXT:
            result = await run_text(text, started)
        elif modality == Modality.LOCATION:
            result = await run_location(asset, text, rng, started)
        else:
            result = await run_combined(asset, text, request.sub_mode or CombinedMode.BOTH, rng, started)
    except Exception as e:
        logger.error(f"[ANALYZE] {modality.value} analysis failed: {e}", exc_info=True)
        elapsed = _elapsed(started)
        result = build_result(
            modality,
            fallback_decision(modality.value),
            fallback_explanation(modality, elapsed, request.sub_mode),
            elapsed,
        )

    result.report_id = generate_report_id()
    return result
