"""
Unit tests for app/detection/pipeline.py: analyze().

Inference is disabled by default (conftest clears INFERENCE_API_KEY); the
model-assisted cases enable it and mock the inference calls.
"""

import random
import re
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import HTTPException

from app.config import settings
from app.detection.constants import MODEL_FAKE_ISSUE
from app.detection.pipeline import analyze, dispatch
from app.schemas.analysis import AnalysisRequest, CombinedMode, Modality
from tests.conftest import FORMAL_TEXT, HUMAN_TEXT, MB, make_asset

REPORT_ID = re.compile(r"^[A-Z0-9]{9}$")

MISINFO_TEXT = "BREAKING: leaked video shows the hidden truth. Scientists say it is 100% real."


@pytest.fixture
def inference_on(monkeypatch):
    monkeypatch.setattr(settings, "inference_api_key", "hf_test")


# ---------------------------------------------------------------------------
# Validation happens before scoring
# ---------------------------------------------------------------------------


async def test_short_text_is_rejected():
    with pytest.raises(HTTPException) as exc:
        await analyze("text", text="too short")

    assert exc.value.status_code == 400
    assert exc.value.detail["code"] == "TEXT_TOO_SHORT"


async def test_unknown_modality_is_rejected():
    with pytest.raises(HTTPException) as exc:
        await analyze("smell", text=HUMAN_TEXT)
    assert exc.value.detail["code"] == "INVALID_MODALITY"


async def test_media_without_file_is_rejected():
    with pytest.raises(HTTPException) as exc:
        await analyze("media")
    assert exc.value.detail["code"] == "MISSING_FILE"


async def test_dispatch_runs_validated_request():
    request = AnalysisRequest(modality=Modality.COMBINED, text=MISINFO_TEXT, sub_mode=CombinedMode.TEXT_ONLY)
    result = await dispatch(request)

    assert result.analysis_type == Modality.COMBINED
    assert result.explanation_data.sub_mode == "text-only"
    assert result.confidence == 67
    assert REPORT_ID.match(result.report_id)


async def test_analyze_hands_dispatch_a_typed_request():
    asset = make_asset("clip.mp4", "video/mp4")
    with patch("app.detection.pipeline.dispatch", new_callable=AsyncMock) as mock_dispatch:
        await analyze("combined", asset, MISINFO_TEXT, "media-only")

    request = mock_dispatch.await_args.args[0]
    assert request == AnalysisRequest(
        modality=Modality.COMBINED, asset=asset, text=MISINFO_TEXT, sub_mode=CombinedMode.MEDIA_ONLY
    )


# ---------------------------------------------------------------------------
# Single-modality runs
# ---------------------------------------------------------------------------


async def test_media_run():
    result = await analyze("media", make_asset("clip.mp4", "video/mp4"), rng=random.Random(1))

    assert result.analysis_type == Modality.MEDIA
    assert result.result == "deepfake"
    assert result.confidence == 80
    assert result.explanation_data.analysis_type == "media"
    assert result.explanation_data.model_used == "Media Heuristic Detection v2.0"
    assert len(result.explanation_data.attention_regions) == 1
    assert REPORT_ID.match(result.report_id)
    assert result.processing_time >= 0


async def test_voice_run_mirrors_engine():
    asset = make_asset("elevenlabs_clip.wav", "audio/wav", size=88_200 * 10)
    result = await analyze("voice", asset, rng=random.Random(1))

    assert result.result == "deepfake"
    assert result.voice_engine is not None
    assert result.voice_engine.detected_engine == "ElevenLabs"
    assert result.voice_engine == result.explanation_data.voice_engine
    assert len(result.explanation_data.audio_segments) == 2


async def test_text_run_mirrors_fingerprint():
    result = await analyze("text", text=FORMAL_TEXT)

    assert result.result == "deepfake"
    assert result.confidence == 45
    assert result.ai_fingerprint == result.explanation_data.ai_fingerprint
    assert result.explanation_data.model_used == "Advanced AI Text Detection v2.0"


async def test_location_run_flags_impossible_geography():
    asset = make_asset("statueofliberty.jpg", "image/jpeg")
    text = "Live pictures from the Eiffel Tower in Paris, France tonight."
    result = await analyze("location", asset, text, rng=random.Random(8))

    assert result.result == "deepfake"
    assert result.confidence >= 60
    types = [d.type for d in result.location_analysis.discrepancies]
    assert "impossible_geography" in types
    assert result.location_analysis == result.explanation_data.location_analysis


async def test_location_run_consistent_claim():
    asset = make_asset("eiffeltower.jpg", "image/jpeg")
    text = "Evening view of the Eiffel Tower from the river bank."

    class _NoOcr(random.Random):
        def random(self):
            return 0.0

    result = await analyze("location", asset, text, rng=_NoOcr())

    assert result.result == "real"
    assert result.issues_detected == []
    assert result.location_analysis.consistency_score == 1.0


async def test_location_run_consistent_claim_survives_ocr_overlays():
    asset = make_asset("eiffeltower.jpg", "image/jpeg")
    text = "Evening view of the Eiffel Tower from the river bank."

    ocr_seen = 0
    for seed in range(200):
        result = await analyze("location", asset, text, rng=random.Random(seed))
        ocr_seen += any(c.source == "ocr" for c in result.location_analysis.extracted_locations)

        assert result.result == "real", f"seed {seed}: {result.issues_detected}"
        assert result.location_analysis.discrepancies == []

    assert ocr_seen > 0


# ---------------------------------------------------------------------------
# Combined
# ---------------------------------------------------------------------------


async def test_combined_both():
    asset = make_asset("deepfake_clip.mp4", "video/mp4")
    result = await analyze("combined", asset, MISINFO_TEXT, "both", rng=random.Random(2))
    explanation = result.explanation_data

    assert result.result == "deepfake"
    assert result.confidence == 59
    assert result.issues_detected[0] == "Filename suggests AI generation"
    assert "Coordinated misinformation campaign detected" in result.issues_detected
    assert len(result.issues_detected) == 5
    assert explanation.sub_mode == "both"
    assert explanation.media_confidence == 60
    assert explanation.text_confidence == 67
    assert len(explanation.frame_probabilities) == 10
    assert explanation.model_used == "Combined Analysis v3.0 (both)"
    assert explanation.location_analysis is not None


async def test_combined_defaults_to_both():
    asset = make_asset("clip.mp4", "video/mp4")
    result = await analyze("combined", asset, MISINFO_TEXT, rng=random.Random(2))
    assert result.explanation_data.sub_mode == "both"


async def test_combined_media_only_matches_media_run():
    asset = make_asset("sora_generated.png", "image/png")
    media = await analyze("media", asset, rng=random.Random(3))
    combined = await analyze("combined", asset, sub_mode="media-only", rng=random.Random(3))

    assert combined.result == media.result
    assert combined.confidence == media.confidence
    assert combined.issues_detected == media.issues_detected
    assert combined.explanation_data.media_confidence == media.confidence
    assert combined.explanation_data.text_highlights == []


async def test_combined_text_only():
    result = await analyze("combined", text=MISINFO_TEXT, sub_mode="text-only")

    assert result.result == "deepfake"
    assert result.confidence == 67
    assert result.explanation_data.media_confidence == 0
    assert result.explanation_data.attention_regions == []
    assert len(result.explanation_data.text_highlights) == 5


async def test_combined_invalid_sub_mode():
    with pytest.raises(HTTPException) as exc:
        await analyze("combined", make_asset("clip.mp4", "video/mp4"), MISINFO_TEXT, "audio-only")
    assert exc.value.detail["code"] == "INVALID_SUB_MODE"


# ---------------------------------------------------------------------------
# Result invariants
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "modality,name,mime,text",
    [
        ("media", "clip.mp4", "video/mp4", None),
        ("media", "vacation.jpg", "image/jpeg", None),
        ("voice", "memo.wav", "audio/wav", None),
        ("location", "img.jpg", "image/jpeg", "Greetings from Rome, Italy"),
        ("combined", "clip.mp4", "video/mp4", "Calm footage of the harbour at dawn."),
    ],
)
async def test_issues_reported_only_for_deepfake(modality, name, mime, text):
    for seed in range(15):
        result = await analyze(modality, make_asset(name, mime, size=2 * MB), text, rng=random.Random(seed))
        assert 0 <= result.confidence <= 100
        assert (result.result == "real") == (result.issues_detected == [])


# ---------------------------------------------------------------------------
# Fallback
# ---------------------------------------------------------------------------


async def test_internal_error_returns_fallback():
    with patch("app.detection.pipeline.get_media_suspicion_score", side_effect=RuntimeError("boom")):
        result = await analyze("media", make_asset("clip.mp4", "video/mp4"))

    assert result.result == "real"
    assert result.confidence == 50
    assert result.issues_detected == ["Media analysis failed"]
    assert result.explanation_data.model_used.endswith("(Fallback)")
    assert REPORT_ID.match(result.report_id)


async def test_text_fallback_keeps_variant():
    with patch("app.detection.pipeline.get_ai_fingerprint", side_effect=ValueError("bad")):
        result = await analyze("text", text=FORMAL_TEXT)

    assert result.explanation_data.analysis_type == "text"
    assert result.ai_fingerprint.generation_confidence == 0.0
    assert result.issues_detected == ["Text analysis failed"]


# ---------------------------------------------------------------------------
# Model-assisted runs
# ---------------------------------------------------------------------------


async def test_image_model_verdict(inference_on):
    asset = make_asset("vacation.jpg", "image/jpeg", content=b"\xff\xd8fake-jpeg")
    payload = [{"label": "Fake", "score": 0.92}, {"label": "Real", "score": 0.08}]

    with patch("app.detection.pipeline.inference.classify_bytes", new=AsyncMock(return_value=payload)):
        result = await analyze("media", asset, rng=random.Random(0))

    assert result.result == "deepfake"
    assert result.confidence == 92
    assert result.issues_detected == [MODEL_FAKE_ISSUE]
    assert result.explanation_data.model_used == "Specialized Model + Media Heuristics"


async def test_image_model_unavailable_falls_back_to_heuristics(inference_on):
    asset = make_asset("vacation.jpg", "image/jpeg", content=b"\xff\xd8fake-jpeg")

    with patch("app.detection.pipeline.inference.classify_bytes", new=AsyncMock(return_value=None)):
        result = await analyze("media", asset, rng=random.Random(0))

    assert result.result == "real"
    assert result.confidence == 70
    assert result.explanation_data.model_used == "Media Heuristic Detection v2.0"


async def test_video_skips_image_model(inference_on):
    mock = AsyncMock(return_value=[{"label": "fake", "score": 0.99}])
    with patch("app.detection.pipeline.inference.classify_bytes", new=mock):
        await analyze("media", make_asset("clip.mp4", "video/mp4", content=b"\x00" * 16))
    mock.assert_not_called()


async def test_speech_rate_verdict(inference_on):
    asset = make_asset("memo.wav", "audio/wav", size=88_200 * 60, content=b"RIFF")
    payload = {"text": "hello there"}

    with patch("app.detection.pipeline.inference.classify_bytes", new=AsyncMock(return_value=payload)):
        result = await analyze("voice", asset, rng=random.Random(0))

    # Two words in a minute is far below the natural band.
    assert result.result == "deepfake"
    assert "Unnatural speech rate detected" in result.issues_detected
    assert result.explanation_data.model_used == "Wav2Vec2 + Voice Engine Detection"


async def test_text_model_probability(inference_on):
    payload = [[{"label": "AI-generated", "score": 0.88}, {"label": "Human", "score": 0.12}]]

    with patch("app.detection.pipeline.inference.classify_text", new=AsyncMock(return_value=payload)):
        result = await analyze("text", text=HUMAN_TEXT)

    assert result.result == "deepfake"
    assert result.confidence == 88
    assert result.explanation_data.model_used == "Hugging Face + Local Analysis"
