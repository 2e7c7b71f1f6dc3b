"""
Unit tests for app/detection/voice_scorer.py and the voice decision rule.

PCM at 44.1 kHz / 16-bit is 88,200 bytes per second, so sizes below are
picked as whole seconds of audio.
"""

import random

import pytest

from app.detection.aggregator import voice_decision
from app.detection.constants import ENGINE_PROBABILITY_CAP
from app.detection.voice_scorer import (
    build_audio_segments,
    detect_voice_engine,
    estimate_bitrate,
    estimate_duration,
    get_voice_suspicion_score,
)

BYTES_PER_SEC = 88_200


# ---------------------------------------------------------------------------
# Size-derived properties
# ---------------------------------------------------------------------------


def test_estimate_duration():
    assert estimate_duration(BYTES_PER_SEC * 10) == pytest.approx(10.0)


def test_estimate_duration_has_one_second_floor():
    assert estimate_duration(1000) == 1.0


def test_estimate_bitrate():
    assert estimate_bitrate(BYTES_PER_SEC * 10, 10.0) == pytest.approx(705.6)


# ---------------------------------------------------------------------------
# Engine detection
# ---------------------------------------------------------------------------


def test_engine_named_in_filename_wins():
    engine = detect_voice_engine("elevenlabs_clip.wav", BYTES_PER_SEC * 10, 10.0, rng=random.Random(1))

    assert engine.detected_engine == "ElevenLabs"
    assert engine.confidence >= 0.6
    assert engine.confidence <= ENGINE_PROBABILITY_CAP
    assert engine.signature_patterns[0].pattern_name == "Frequency Analysis"
    assert engine.signature_patterns[0].frequency_range.min == 80
    assert engine.signature_patterns[1].confidence == pytest.approx(engine.confidence * 0.8)
    assert "Lack of breathing sounds" in engine.synthesis_artifacts


def test_engine_probabilities_sorted_and_bounded():
    rng = random.Random(5)
    for _ in range(20):
        engine = detect_voice_engine("sample.wav", BYTES_PER_SEC * 30, 30.0, rng=rng)
        probabilities = [p.probability for p in engine.engine_probabilities]
        assert probabilities == sorted(probabilities, reverse=True)
        assert all(0.1 < p <= ENGINE_PROBABILITY_CAP for p in probabilities)
        if engine.engine_probabilities:
            assert engine.detected_engine == engine.engine_probabilities[0].engine_name


def test_no_engine_reported_as_unknown():
    class _Zero(random.Random):
        def random(self):
            return 0.0

    # Long file: no short-duration bonus, bitrate too high for the catalog rules.
    engine = detect_voice_engine("sample.wav", BYTES_PER_SEC * 120, 120.0, rng=_Zero())

    assert engine.detected_engine == "Unknown"
    assert engine.confidence == 0.0
    assert engine.engine_probabilities == []
    assert engine.synthesis_artifacts == []


# ---------------------------------------------------------------------------
# Segments
# ---------------------------------------------------------------------------


def test_segments_cover_duration():
    engine = detect_voice_engine("sample.wav", BYTES_PER_SEC * 10, 10.0, rng=random.Random(2))
    segments = build_audio_segments(10.0, 0, engine, rng=random.Random(2))

    assert [(s.start_time, s.end_time) for s in segments] == [(0.0, 5.0), (5.0, 10.0)]


def test_segment_count_is_capped():
    engine = detect_voice_engine("sample.wav", BYTES_PER_SEC * 120, 120.0, rng=random.Random(2))
    segments = build_audio_segments(120.0, 0, engine, rng=random.Random(2))

    assert len(segments) == 10
    assert segments[1].start_time == pytest.approx(12.0)
    assert segments[1].end_time == pytest.approx(17.0)


def test_segment_confidence_is_capped_at_one():
    engine = detect_voice_engine("sample.wav", BYTES_PER_SEC * 10, 10.0, rng=random.Random(2))
    segments = build_audio_segments(10.0, 95, engine, rng=random.Random(2))

    for s in segments:
        assert s.confidence <= 1.0
        assert "Digital compression artifacts" in s.issues


# ---------------------------------------------------------------------------
# Suspicion score and decision
# ---------------------------------------------------------------------------


def test_named_engine_file_is_flagged():
    score, signals, engine, segments = get_voice_suspicion_score(
        "elevenlabs_clip.wav", BYTES_PER_SEC * 10, rng=random.Random(1)
    )
    decision = voice_decision(score, signals)

    assert decision.result == "deepfake"
    assert decision.confidence == 95
    assert decision.issues[:3] == [
        "Unusual audio bitrate detected",
        "Filename suggests AI-generated voice",
        "Detected ElevenLabs voice synthesis patterns",
    ]
    assert len(decision.issues) == 5
    assert len(segments) == 2


def test_short_clip_gets_duration_signal():
    _, signals, _, _ = get_voice_suspicion_score("memo.wav", 1000, rng=random.Random(3))
    names = [s.name for s in signals]

    assert "short_duration" in names
    assert "bitrate_outlier" in names


def test_long_clip_gets_duration_signal():
    _, signals, _, _ = get_voice_suspicion_score("podcast.wav", BYTES_PER_SEC * 400, rng=random.Random(3))
    assert "long_duration" in [s.name for s in signals]


def test_real_voice_decision_has_no_issues():
    decision = voice_decision(20, [])
    assert decision.result == "real"
    assert decision.confidence == 80
    assert decision.issues == []
