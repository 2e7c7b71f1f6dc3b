"""
Voice synthesis scoring from filename, size and an estimated duration.

Functions:
  - estimate_duration / estimate_bitrate: Size-derived audio properties.
  - detect_voice_engine: Per-engine probabilities with bounded jitter.
  - get_voice_suspicion_score: Overall suspicion plus the segment table.
"""

import logging
import math
import random
from typing import List, Optional

from app.config import settings
from app.detection.constants import (
    AI_VOICE_PATTERNS,
    ENGINE_FILENAME_WEIGHT,
    ENGINE_JITTER,
    ENGINE_LISTING_FLOOR,
    ENGINE_PROBABILITY_CAP,
    GENERIC_VOICE_ARTIFACTS,
    SEGMENT_ISSUE_LADDER,
    VOICE_ENGINES,
    VOICE_POLICY,
    VoicePolicy,
)
from app.detection.rng import resolve_rng
from app.schemas.analysis import (
    AudioSegment,
    EngineProbability,
    FrequencyRange,
    SignaturePattern,
    SuspicionSignal,
    VoiceEngineDetection,
)

logger = logging.getLogger(__name__)


def estimate_duration(file_size: int) -> float:
    """Seconds of uncompressed mono PCM the byte count would hold (min 1 s)."""
    bytes_per_sec = settings.voice_sample_rate * settings.voice_bytes_per_sample
    return max(file_size / bytes_per_sec, 1.0)


def estimate_bitrate(file_size: int, duration: float) -> float:
    """Approximate bitrate in kbps."""
    return (file_size * 8) / duration / 1000


def _engine_rules(engine: str, bitrate: float, duration: float) -> tuple:
    probability = 0.0
    characteristics: List[str] = []

    if engine == "ElevenLabs":
        if 128 < bitrate < 320:
            probability += 0.3
            characteristics.append("High-quality bitrate typical of ElevenLabs")
        if duration < 60:
            probability += 0.2
            characteristics.append("Short duration typical of ElevenLabs usage")
    elif engine == "Google TTS":
        if 64 < bitrate < 192:
            probability += 0.25
            characteristics.append("Standard quality typical of Google TTS")
    elif engine == "Coqui TTS":
        if bitrate < 128:
            probability += 0.3
            characteristics.append("Variable quality typical of Coqui TTS")

    return probability, characteristics


def detect_voice_engine(
    filename: str,
    file_size: int,
    duration: float,
    rng: Optional[random.Random] = None,
) -> VoiceEngineDetection:
    """Scores every catalogued engine; the highest probability is 'detected'."""
    rng = resolve_rng(rng)
    filename_lower = filename.lower()
    bitrate = estimate_bitrate(file_size, duration)

    probabilities: List[EngineProbability] = []
    detected_engine = "Unknown"
    max_probability = 0.0

    for engine, signature in VOICE_ENGINES.items():
        probability = 0.0
        characteristics: List[str] = []

        if engine.lower().replace(" ", "") in filename_lower:
            probability += ENGINE_FILENAME_WEIGHT
            characteristics.append("Filename suggests this engine")

        rule_probability, rule_chars = _engine_rules(engine, bitrate, duration)
        probability += rule_probability
        characteristics.extend(rule_chars)

        probability = min(probability + rng.random() * ENGINE_JITTER, ENGINE_PROBABILITY_CAP)

        if probability > ENGINE_LISTING_FLOOR:
            probabilities.append(EngineProbability(
                engine_name=engine,
                probability=probability,
                characteristics=characteristics or signature["characteristics"][:2],
            ))
            if probability > max_probability:
                max_probability = probability
                detected_engine = engine

    signature_patterns: List[SignaturePattern] = []
    artifacts: List[str] = []

    if detected_engine != "Unknown":
        signature = VOICE_ENGINES[detected_engine]
        low, high = signature["frequency_range"]
        signature_patterns.append(SignaturePattern(
            pattern_name="Frequency Analysis",
            description=f"Frequency range consistent with {detected_engine}",
            confidence=max_probability,
            frequency_range=FrequencyRange(min=low, max=high),
        ))
        signature_patterns.append(SignaturePattern(
            pattern_name="Synthesis Artifacts",
            description=f"Detected artifacts typical of {detected_engine}",
            confidence=max_probability * 0.8,
        ))
        artifacts.extend(signature["artifacts"])

    if max_probability > VOICE_POLICY.engine_floor:
        artifacts.extend(GENERIC_VOICE_ARTIFACTS)

    probabilities.sort(key=lambda p: p.probability, reverse=True)

    return VoiceEngineDetection(
        detected_engine=detected_engine,
        confidence=max_probability,
        engine_probabilities=probabilities,
        signature_patterns=signature_patterns,
        synthesis_artifacts=artifacts,
    )


def build_audio_segments(
    duration: float,
    running_score: float,
    engine: VoiceEngineDetection,
    policy: VoicePolicy = VOICE_POLICY,
    rng: Optional[random.Random] = None,
) -> List[AudioSegment]:
    rng = resolve_rng(rng)
    window = settings.voice_segment_sec
    count = min(math.ceil(duration / window), settings.voice_max_segments)
    segments: List[AudioSegment] = []

    for i in range(count):
        start = (duration / count) * i
        end = min(start + window, duration)
        confidence = min(rng.random() * 0.4 + running_score / 100, 1.0)

        issues = [label for floor, label in SEGMENT_ISSUE_LADDER if confidence > floor]
        if engine.confidence > policy.segment_tag_floor:
            issues.append(f"{engine.detected_engine} synthesis markers")

        segments.append(AudioSegment(
            start_time=start,
            end_time=end,
            confidence=confidence,
            issues=issues,
        ))

    return segments


def get_voice_suspicion_score(
    filename: str,
    file_size: int,
    duration: Optional[float] = None,
    policy: VoicePolicy = VOICE_POLICY,
    rng: Optional[random.Random] = None,
) -> tuple:
    """
    Returns (score, signals, engine_detection, segments).

    Segment confidences are drawn against the score accumulated from bitrate,
    filename and engine signals; duration signals are added afterwards.
    """
    rng = resolve_rng(rng)
    if duration is None:
        duration = estimate_duration(file_size)

    score = 0.0
    signals: List[SuspicionSignal] = []

    bitrate = estimate_bitrate(file_size, duration)
    if bitrate < policy.bitrate_min_kbps or bitrate > policy.bitrate_max_kbps:
        score += policy.bitrate_weight
        signals.append(SuspicionSignal(
            name="bitrate_outlier",
            weight=policy.bitrate_weight,
            evidence="Unusual audio bitrate detected",
        ))

    for pattern in AI_VOICE_PATTERNS:
        if pattern.search(filename):
            score += policy.filename_weight
            signals.append(SuspicionSignal(
                name="ai_voice_filename",
                weight=policy.filename_weight,
                evidence="Filename suggests AI-generated voice",
            ))
            break

    engine = detect_voice_engine(filename, file_size, duration, rng=rng)
    if engine.confidence > policy.engine_floor:
        weight = engine.confidence * policy.engine_weight
        score += weight
        signals.append(SuspicionSignal(
            name="voice_engine",
            weight=weight,
            evidence=f"Detected {engine.detected_engine} voice synthesis patterns",
        ))

    segments = build_audio_segments(duration, score, engine, policy, rng=rng)

    if duration < policy.short_duration_sec:
        score += policy.short_duration_weight
        signals.append(SuspicionSignal(
            name="short_duration",
            weight=policy.short_duration_weight,
            evidence="Very short audio duration",
        ))

    if duration > policy.long_duration_sec:
        score += policy.long_duration_weight
        signals.append(SuspicionSignal(
            name="long_duration",
            weight=policy.long_duration_weight,
            evidence="Unusually long audio file",
        ))

    if engine.confidence > policy.engine_issue_floor:
        for evidence in (
            "AI voice engine signature detected",
            "Spectral analysis anomalies",
            "Prosody inconsistencies",
        ):
            signals.append(SuspicionSignal(name="engine_signature", weight=0, evidence=evidence))

    logger.debug(
        f"[VOICE] score={score:.1f} bitrate={bitrate:.0f}kbps duration={duration:.1f}s "
        f"engine={engine.detected_engine}@{engine.confidence:.2f}"
    )

    return score, signals, engine, segments
