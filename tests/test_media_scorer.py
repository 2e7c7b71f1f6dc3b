"""
Unit tests for app/detection/media_scorer.py and the media decision rule.

Scores are driven by MIME type, filename and size only, so every case here
is deterministic apart from region placement.
"""

import random

from app.detection.aggregator import media_decision
from app.detection.constants import COMBINED_MEDIA_POLICY, STANDARD_MEDIA_POLICY, VIDEO_BIAS_ISSUES
from app.detection.media_scorer import (
    build_attention_regions,
    build_frame_probabilities,
    get_media_suspicion_score,
    matches_ai_tool,
)
from tests.conftest import MB


# ---------------------------------------------------------------------------
# Suspicion score
# ---------------------------------------------------------------------------


def test_plain_video_carries_structural_bias_only():
    score, signals = get_media_suspicion_score("video/mp4", "clip.mp4", MB)

    assert score == 30
    assert [s.evidence for s in signals] == VIDEO_BIAS_ISSUES


def test_plain_video_is_flagged_by_bias_alone():
    score, signals = get_media_suspicion_score("video/mp4", "clip.mp4", MB)
    decision = media_decision(score, signals)

    assert decision.result == "deepfake"
    assert decision.confidence == 80
    assert decision.issues == VIDEO_BIAS_ISSUES


def test_plain_image_stays_real():
    score, signals = get_media_suspicion_score("image/jpeg", "vacation.jpg", MB)
    decision = media_decision(score, signals)

    assert score == 20
    assert decision.result == "real"
    assert decision.confidence == 70
    assert decision.issues == []


def test_ai_tool_filename_adds_weight_first():
    score, signals = get_media_suspicion_score("image/png", "sora_generated.png", MB)
    decision = media_decision(score, signals)

    assert score == 45
    assert decision.result == "deepfake"
    assert decision.confidence == 95
    assert decision.issues[0] == "Filename suggests AI generation"


def test_tiny_video_gets_compression_signal_and_issue_cap():
    score, signals = get_media_suspicion_score("video/mp4", "clip.mp4", 100 * 1024)
    decision = media_decision(score, signals)

    assert score == 45
    assert decision.issues[0] == "Unusual compression ratio detected"
    assert len(decision.issues) == STANDARD_MEDIA_POLICY.max_issues


def test_oversized_video_gets_compression_signal():
    score, _ = get_media_suspicion_score("video/mp4", "clip.mp4", 60 * MB)
    assert score == 45


def test_combined_policy_weights_filename_higher():
    standard, _ = get_media_suspicion_score("image/png", "midjourney.png", MB)
    combined, _ = get_media_suspicion_score("image/png", "midjourney.png", MB, COMBINED_MEDIA_POLICY)
    assert combined - standard == 5


def test_matches_ai_tool_is_case_insensitive():
    assert matches_ai_tool("My_DALLE_render.png") is not None
    assert matches_ai_tool("holiday.jpg") is None


def test_confidence_never_exceeds_cap():
    score, signals = get_media_suspicion_score("video/mp4", "deepfake_sora.mp4", 10 * 1024)
    assert media_decision(score, signals).confidence == 95


# ---------------------------------------------------------------------------
# Attention regions and frames
# ---------------------------------------------------------------------------


def test_no_regions_at_or_below_threshold():
    assert build_attention_regions(25, rng=random.Random(0)) == []


def test_one_region_above_threshold():
    regions = build_attention_regions(30, rng=random.Random(0))
    assert len(regions) == 1
    assert regions[0].reason == "Facial inconsistencies detected"
    assert 0.7 <= regions[0].confidence <= 1.0


def test_second_region_above_higher_threshold():
    regions = build_attention_regions(45, rng=random.Random(0))
    assert [r.reason for r in regions] == ["Facial inconsistencies detected", "Unnatural lighting patterns"]


def test_region_values_are_fractions():
    rng = random.Random(42)
    for _ in range(50):
        for r in build_attention_regions(60, rng=rng):
            for value in (r.x, r.y, r.width, r.height, r.confidence):
                assert 0 <= value <= 1


def test_same_seed_same_regions():
    first = build_attention_regions(60, rng=random.Random(7))
    second = build_attention_regions(60, rng=random.Random(7))
    assert first == second


def test_frame_probabilities_layout():
    frames = build_frame_probabilities(0.8, 10, 30, rng=random.Random(3))

    assert [f.frame for f in frames] == [i * 30 for i in range(10)]
    assert [f.timestamp for f in frames] == [float(i) for i in range(10)]
    for f in frames:
        assert 0.7 <= f.probability <= 0.9
        assert "Temporal inconsistency between frames" in f.issues


def test_frame_probabilities_are_clamped():
    frames = build_frame_probabilities(0.0, 10, 30, rng=random.Random(3))
    assert all(0.0 <= f.probability <= 0.1 for f in frames)
    assert all(f.issues == [] for f in frames)
