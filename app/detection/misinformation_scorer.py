"""
Misinformation scoring for the text half of combined analysis.

Lighter than the AI-authorship fingerprinting in text_scorer.py: it looks for
sensational / conspiratorial phrasing, conflicting references and thin
context, and marks every matched span for highlighting.
"""

import logging
from typing import List

from app.detection.constants import DATE_PATTERN, MISINFORMATION_RULES
from app.schemas.analysis import TextHighlight

logger = logging.getLogger(__name__)


def get_misinformation_score(text: str) -> tuple:
    """Returns (confidence in [0, 0.95], highlights, issues)."""
    score = 0.0
    highlights: List[TextHighlight] = []
    issues: List[str] = []

    for rule in MISINFORMATION_RULES:
        for match in rule.pattern.finditer(text):
            highlights.append(TextHighlight(
                start=match.start(),
                end=match.end(),
                text=match.group(0),
                confidence=rule.weight / 20,
                reason=rule.reason,
            ))
            score += rule.weight

    text_lower = text.lower()
    if "video" in text_lower and "photo" in text_lower:
        issues.append("Inconsistent media type references")
        score += 15

    dates = DATE_PATTERN.findall(text)
    if len(dates) > 1:
        issues.append("Multiple conflicting dates mentioned")
        score += 10

    if len(text) < 50:
        issues.append("Suspiciously short description")
        score += 5

    if len(text.split(".")) < 2:
        issues.append("Lack of detailed context")
        score += 8

    logger.debug(f"[MISINFO] score={score} highlights={len(highlights)} issues={issues}")

    return min(score / 100, 0.95), highlights, issues
