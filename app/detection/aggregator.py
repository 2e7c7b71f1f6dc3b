"""
Decision rules: turn extractor scores into a verdict, a confidence and the
reported issue list.

Every single-modality rule reports issues only for a `deepfake` verdict.
Confidence is suspicion magnitude (see AnalysisResult), so a `real`
verdict can still carry a high number.
"""

import logging
from typing import Iterable, List, NamedTuple, Optional

from app.detection.constants import (
    COMBINED_MEDIA_POLICY,
    COMBINED_WEIGHTS,
    COORDINATED_PENALTY,
    COORDINATED_THRESHOLD,
    FALLBACK_CONFIDENCE,
    FALLBACK_SUBJECTS,
    LOCATION_SUSPICION_THRESHOLD,
    LOCATION_SUSPICIOUS_FLOOR,
    LOCATION_VERIFIED_CEILING,
    MISSING_MEDIA_MENTION_PENALTY,
    STANDARD_MEDIA_POLICY,
    TEXT_DEEPFAKE_THRESHOLD,
    VOICE_POLICY,
    CombinedWeights,
    MediaPolicy,
    VoicePolicy,
)
from app.schemas.analysis import (
    AIFingerprint,
    CombinedMode,
    Decision,
    Discrepancy,
    MediaAsset,
    SuspicionSignal,
)

logger = logging.getLogger(__name__)


class ModePlan(NamedTuple):
    """
    What one combined sub-mode runs.

    media_policy is None when the media extractor is skipped. Without the
    text side the standard media decision is reported unchanged.
    """
    media_policy: Optional[MediaPolicy]
    run_text: bool
    cross_reference: bool


COMBINED_PLANS = {
    CombinedMode.BOTH: ModePlan(media_policy=COMBINED_MEDIA_POLICY, run_text=True, cross_reference=True),
    CombinedMode.MEDIA_ONLY: ModePlan(media_policy=STANDARD_MEDIA_POLICY, run_text=False, cross_reference=False),
    CombinedMode.TEXT_ONLY: ModePlan(media_policy=None, run_text=True, cross_reference=False),
}


def _dedupe(items: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(items))


def _evidence(signals: List[SuspicionSignal]) -> List[str]:
    return _dedupe(s.evidence for s in signals)


# ---------------------------------------------------------------------------
# Single-modality rules
# ---------------------------------------------------------------------------

def media_decision(
    score: float,
    signals: List[SuspicionSignal],
    policy: MediaPolicy = STANDARD_MEDIA_POLICY,
) -> Decision:
    is_deepfake = score > policy.deepfake_threshold
    return Decision(
        result="deepfake" if is_deepfake else "real",
        confidence=int(min(policy.base_confidence + score, policy.confidence_cap)),
        issues=_evidence(signals)[:policy.max_issues] if is_deepfake else [],
    )


def voice_decision(
    score: float,
    signals: List[SuspicionSignal],
    policy: VoicePolicy = VOICE_POLICY,
) -> Decision:
    is_deepfake = score > policy.deepfake_threshold
    return Decision(
        result="deepfake" if is_deepfake else "real",
        confidence=int(min(policy.base_confidence + score, policy.confidence_cap)),
        issues=_evidence(signals)[:policy.max_issues] if is_deepfake else [],
    )


def text_decision(
    fingerprint: AIFingerprint,
    universal_issues: List[str],
    external_probability: Optional[float] = None,
) -> Decision:
    """
    deepfake iff the (optionally model-boosted) generation confidence is
    above TEXT_DEEPFAKE_THRESHOLD. A deepfake verdict with no universal
    issue names the leading family so the list is never empty.
    """
    confidence = fingerprint.generation_confidence
    if external_probability is not None:
        confidence = max(confidence, external_probability)

    is_deepfake = confidence > TEXT_DEEPFAKE_THRESHOLD
    issues: List[str] = []
    if is_deepfake:
        issues = list(universal_issues)
        if not issues:
            if fingerprint.detected_models:
                top = fingerprint.detected_models[0].model_name
                issues.append(f"Text patterns consistent with {top}")
            else:
                issues.append("AI-generated text detected by specialized model")

    return Decision(
        result="deepfake" if is_deepfake else "real",
        confidence=round(confidence * 100),
        issues=issues,
    )


def location_decision(consistency_score: float, discrepancies: List[Discrepancy]) -> Decision:
    suspicious = (
        consistency_score < LOCATION_SUSPICION_THRESHOLD
        or any(d.severity == "high" for d in discrepancies)
    )
    confidence = round((1 - consistency_score) * 100)

    if suspicious:
        return Decision(
            result="deepfake",
            confidence=max(confidence, LOCATION_SUSPICIOUS_FLOOR),
            issues=_dedupe(d.description for d in discrepancies) or ["Location claims could not be verified"],
        )
    return Decision(result="real", confidence=min(confidence, LOCATION_VERIFIED_CEILING), issues=[])


def merge_model_verdict(model: Decision, heuristic: Decision, cap: int = 95) -> Decision:
    """
    Overlay a heuristic verdict on a specialized-model verdict: a heuristic
    deepfake always wins and lifts the confidence to the larger of the two.
    """
    result = model.result
    confidence = model.confidence
    issues = list(model.issues)

    if heuristic.result == "deepfake":
        result = "deepfake"
        confidence = max(confidence, heuristic.confidence)
        issues.extend(heuristic.issues)

    return Decision(result=result, confidence=min(confidence, cap), issues=_dedupe(issues))


# ---------------------------------------------------------------------------
# Combined mode
# ---------------------------------------------------------------------------

def cross_reference(
    asset: Optional[MediaAsset],
    text: str,
    media_confidence: float,
    text_confidence: float,
) -> tuple:
    """Returns (cross_reference_score, issues) for the `both` sub-mode."""
    score = 0.0
    issues: List[str] = []
    text_lower = text.lower()

    if asset is not None and asset.is_video and "video" not in text_lower and "footage" not in text_lower:
        issues.append("Text does not mention video content")
        score += MISSING_MEDIA_MENTION_PENALTY

    if asset is not None and asset.is_image and not any(
        word in text_lower for word in ("photo", "image", "picture")
    ):
        issues.append("Text does not reference image content")
        score += MISSING_MEDIA_MENTION_PENALTY

    if media_confidence > COORDINATED_THRESHOLD and text_confidence > COORDINATED_THRESHOLD:
        issues.append("Coordinated misinformation campaign detected")
        score += COORDINATED_PENALTY

    return score, issues


def combined_decision(
    plan: ModePlan,
    media_confidence: float,
    text_confidence: float,
    cross_reference_score: float,
    issues: List[str],
    weights: CombinedWeights = COMBINED_WEIGHTS,
) -> Decision:
    """
    Confidences are fractions in [0, 0.95]. `both` blends media, text and the
    cross-reference score; text-only reports the text side alone.
    """
    if plan.cross_reference:
        blended = (
            media_confidence * weights.media
            + text_confidence * weights.text
            + (cross_reference_score / 100) * weights.cross_reference
        )
    else:
        blended = text_confidence

    is_deepfake = blended > weights.deepfake_threshold
    reported = _dedupe(issues)[:weights.max_issues] if is_deepfake else []
    if is_deepfake and not reported:
        reported = ["Combined signals exceed the misinformation threshold"]

    logger.debug(
        f"[COMBINED] media={media_confidence:.2f} text={text_confidence:.2f} "
        f"cross={cross_reference_score} blended={blended:.3f}"
    )

    return Decision(
        result="deepfake" if is_deepfake else "real",
        confidence=round(min(blended * 100, weights.confidence_cap)),
        issues=reported,
    )


def fallback_decision(modality: str) -> Decision:
    """Low-confidence answer returned when a scoring run fails internally."""
    subject = FALLBACK_SUBJECTS.get(modality, "Analysis")
    return Decision(result="real", confidence=FALLBACK_CONFIDENCE, issues=[f"{subject} failed"])
