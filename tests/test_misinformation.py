"""Unit tests for app/detection/misinformation_scorer.py."""

import pytest

from app.detection.misinformation_scorer import get_misinformation_score


def test_sensational_text_scores_and_highlights():
    text = "BREAKING: leaked footage shows the hidden truth. Scientists say it is 100% real."
    confidence, highlights, issues = get_misinformation_score(text)

    reasons = [h.reason for h in highlights]
    assert reasons.count("Sensationalist language") == 2
    assert "Conspiracy language" in reasons
    assert "Vague authority claims" in reasons
    assert "Absolute claims without evidence" in reasons
    # 10 + 10 + 20 + 15 + 12
    assert confidence == pytest.approx(0.67)
    assert issues == []


def test_highlight_offsets_point_at_match():
    text = "This is a shocking turn of events for the whole town. Nobody expected it."
    _, highlights, _ = get_misinformation_score(text)

    assert len(highlights) == 1
    h = highlights[0]
    assert text[h.start:h.end] == "shocking"
    assert h.confidence == pytest.approx(8 / 20)


def test_structural_issues():
    text = "Video and photo from 2019 and 2021 of the event"
    confidence, _, issues = get_misinformation_score(text)

    assert issues == [
        "Inconsistent media type references",
        "Multiple conflicting dates mentioned",
        "Suspiciously short description",
        "Lack of detailed context",
    ]
    assert confidence == pytest.approx(0.38)


def test_neutral_text_scores_zero():
    text = "The council met on Tuesday to discuss the new park. Residents shared their views."
    confidence, highlights, issues = get_misinformation_score(text)

    assert confidence == 0.0
    assert highlights == []
    assert issues == []


def test_confidence_is_capped():
    text = "Breaking urgent exclusive leaked shocking miracle deep state fake news cover up. " * 3
    confidence, _, _ = get_misinformation_score(text)
    assert confidence == 0.95
