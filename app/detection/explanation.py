"""
Explanation payload assembly, one builder per modality.

Each builder returns the variant tagged with its `analysis_type`, and
`build_result` wraps a Decision plus its payload into the AnalysisResult
envelope, mirroring the fingerprint / engine / location blocks at the top
level the way clients expect them.
"""

from typing import List, Optional

from app.detection.constants import MODEL_LABELS
from app.schemas.analysis import (
    AIFingerprint,
    AnalysisResult,
    AttentionRegion,
    AudioSegment,
    CombinedExplanation,
    CombinedMode,
    Decision,
    FrameProbability,
    LocationAnalysis,
    LocationExplanation,
    MediaExplanation,
    Modality,
    TextExplanation,
    TextHighlight,
    VoiceEngineDetection,
    VoiceExplanation,
)


def combined_label(sub_mode: CombinedMode) -> str:
    return f"{MODEL_LABELS['combined']} ({sub_mode.value})"


def media_explanation(
    regions: List[AttentionRegion],
    processing_time: float,
    model_used: str = MODEL_LABELS["media"],
) -> MediaExplanation:
    return MediaExplanation(
        model_used=model_used,
        processing_time=processing_time,
        attention_regions=regions,
    )


def voice_explanation(
    segments: List[AudioSegment],
    engine: VoiceEngineDetection,
    processing_time: float,
    model_used: str = MODEL_LABELS["voice"],
) -> VoiceExplanation:
    return VoiceExplanation(
        model_used=model_used,
        processing_time=processing_time,
        audio_segments=segments,
        voice_engine=engine,
    )


def text_explanation(
    fingerprint: AIFingerprint,
    processing_time: float,
    model_used: str = MODEL_LABELS["text"],
) -> TextExplanation:
    return TextExplanation(
        model_used=model_used,
        processing_time=processing_time,
        ai_fingerprint=fingerprint,
    )


def location_explanation(analysis: LocationAnalysis, processing_time: float) -> LocationExplanation:
    return LocationExplanation(
        model_used=MODEL_LABELS["location"],
        processing_time=processing_time,
        location_analysis=analysis,
    )


def combined_explanation(
    sub_mode: CombinedMode,
    processing_time: float,
    media_confidence: float = 0.0,
    text_confidence: float = 0.0,
    regions: Optional[List[AttentionRegion]] = None,
    frames: Optional[List[FrameProbability]] = None,
    highlights: Optional[List[TextHighlight]] = None,
    location_analysis: Optional[LocationAnalysis] = None,
) -> CombinedExplanation:
    """Confidences arrive as fractions and are reported as integer percentages."""
    return CombinedExplanation(
        model_used=combined_label(sub_mode),
        processing_time=processing_time,
        sub_mode=sub_mode,
        attention_regions=regions or [],
        frame_probabilities=frames or [],
        text_highlights=highlights or [],
        media_confidence=round(media_confidence * 100),
        text_confidence=round(text_confidence * 100),
        location_analysis=location_analysis,
    )


def empty_voice_engine() -> VoiceEngineDetection:
    return VoiceEngineDetection(
        detected_engine="Unknown",
        confidence=0.0,
        engine_probabilities=[],
        signature_patterns=[],
        synthesis_artifacts=[],
    )


def empty_fingerprint() -> AIFingerprint:
    return AIFingerprint(
        detected_models=[],
        linguistic_patterns=[],
        generation_confidence=0.0,
        human_likelihood=1.0,
    )


def empty_location_analysis() -> LocationAnalysis:
    return LocationAnalysis(
        extracted_locations=[],
        visual_landmarks=[],
        consistency_score=1.0,
        discrepancies=[],
    )


def fallback_explanation(
    modality: Modality,
    processing_time: float,
    sub_mode: Optional[CombinedMode] = None,
):
    """Empty payload of the right variant, labelled as a fallback run."""
    if modality == Modality.COMBINED:
        mode = sub_mode or CombinedMode.BOTH
        return CombinedExplanation(
            model_used=f"{MODEL_LABELS['combined']} (Fallback)",
            processing_time=processing_time,
            sub_mode=mode,
        )

    label = f"{MODEL_LABELS[modality.value]} (Fallback)"
    if modality == Modality.VOICE:
        return voice_explanation([], empty_voice_engine(), processing_time, model_used=label)
    if modality == Modality.TEXT:
        return text_explanation(empty_fingerprint(), processing_time, model_used=label)
    if modality == Modality.LOCATION:
        return LocationExplanation(
            model_used=label,
            processing_time=processing_time,
            location_analysis=empty_location_analysis(),
        )
    return media_explanation([], processing_time, model_used=label)


def build_result(
    modality: Modality,
    decision: Decision,
    explanation,
    processing_time: float,
) -> AnalysisResult:
    result = AnalysisResult(
        result=decision.result,
        confidence=decision.confidence,
        issues_detected=decision.issues,
        analysis_type=modality,
        explanation_data=explanation,
        processing_time=processing_time,
    )

    if isinstance(explanation, TextExplanation):
        result.ai_fingerprint = explanation.ai_fingerprint
    elif isinstance(explanation, VoiceExplanation):
        result.voice_engine = explanation.voice_engine
    elif isinstance(explanation, LocationExplanation):
        result.location_analysis = explanation.location_analysis
    elif isinstance(explanation, CombinedExplanation) and explanation.location_analysis is not None:
        result.location_analysis = explanation.location_analysis

    return result
