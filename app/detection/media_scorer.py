"""
Media suspicion scoring from request attributes (MIME type, filename, size).

Functions:
  - get_media_suspicion_score: Sums weighted filename / structure / size signals.
  - build_attention_regions: Synthetic attention boxes for the explanation view.
  - build_frame_probabilities: Synthetic per-frame table for video assets.

Nothing here looks at pixels. Region placement and frame jitter are drawn
from the supplied random generator and exist only for display.
"""

import logging
import random
from typing import List, Optional

from app.detection.constants import (
    AI_TOOL_PATTERNS,
    ATTENTION_REASONS,
    IMAGE_BIAS_ISSUES,
    VIDEO_BIAS_ISSUES,
    MediaPolicy,
    STANDARD_MEDIA_POLICY,
)
from app.detection.rng import resolve_rng
from app.schemas.analysis import AttentionRegion, FrameProbability, SuspicionSignal

logger = logging.getLogger(__name__)


def matches_ai_tool(filename: str) -> Optional[str]:
    """Return the first AI-tool pattern found in the filename, if any."""
    for pattern in AI_TOOL_PATTERNS:
        if pattern.search(filename):
            return pattern.pattern
    return None


def get_media_suspicion_score(
    mime_type: str,
    filename: str,
    file_size: int,
    policy: MediaPolicy = STANDARD_MEDIA_POLICY,
) -> tuple:
    """
    Returns (score, signals). Each signal carries the evidence strings that
    end up in `issues_detected`, in the order they were raised.
    """
    score = 0.0
    signals: List[SuspicionSignal] = []

    is_video = mime_type.startswith("video/")
    is_image = mime_type.startswith("image/")

    # Size per estimated second; the estimate is one second per asset.
    if is_video:
        size_mb = file_size / 1024 / 1024
        if size_mb < policy.compression_min_mb or size_mb > policy.compression_max_mb:
            score += policy.compression_weight
            signals.append(SuspicionSignal(
                name="compression_ratio",
                weight=policy.compression_weight,
                evidence="Unusual compression ratio detected",
            ))

    hit = matches_ai_tool(filename)
    if hit:
        score += policy.filename_weight
        signals.append(SuspicionSignal(
            name="ai_tool_filename",
            weight=policy.filename_weight,
            evidence="Filename suggests AI generation",
        ))
        logger.debug(f"[MEDIA] Filename '{filename}' matched AI-tool pattern '{hit}'")

    if is_video and policy.video_bias:
        score += policy.video_bias
        for i, issue in enumerate(VIDEO_BIAS_ISSUES):
            signals.append(SuspicionSignal(
                name="video_structure_bias",
                weight=policy.video_bias if i == 0 else 0,
                evidence=issue,
            ))

    if is_image and policy.image_bias:
        score += policy.image_bias
        for i, issue in enumerate(IMAGE_BIAS_ISSUES):
            signals.append(SuspicionSignal(
                name="image_structure_bias",
                weight=policy.image_bias if i == 0 else 0,
                evidence=issue,
            ))

    return score, signals


def build_attention_regions(
    score: float,
    policy: MediaPolicy = STANDARD_MEDIA_POLICY,
    rng: Optional[random.Random] = None,
) -> List[AttentionRegion]:
    rng = resolve_rng(rng)
    regions: List[AttentionRegion] = []

    if score <= policy.attention_threshold:
        return regions

    regions.append(AttentionRegion(
        x=rng.random() * 0.3,
        y=rng.random() * 0.3,
        width=0.2 + rng.random() * 0.3,
        height=0.2 + rng.random() * 0.3,
        confidence=0.7 + rng.random() * 0.3,
        reason=ATTENTION_REASONS[0],
    ))

    if score > policy.second_region_threshold:
        regions.append(AttentionRegion(
            x=0.5 + rng.random() * 0.3,
            y=0.4 + rng.random() * 0.3,
            width=0.15 + rng.random() * 0.2,
            height=0.15 + rng.random() * 0.2,
            confidence=0.6 + rng.random() * 0.3,
            reason=ATTENTION_REASONS[1],
        ))

    return regions


def build_frame_probabilities(
    media_confidence: float,
    samples: int,
    fps: int,
    rng: Optional[random.Random] = None,
) -> List[FrameProbability]:
    """One row per sampled second, jittered ±0.1 around the media confidence."""
    rng = resolve_rng(rng)
    frames: List[FrameProbability] = []

    for i in range(samples):
        probability = min(max(media_confidence + (rng.random() - 0.5) * 0.2, 0.0), 1.0)
        issues = []
        if probability > 0.5:
            issues.append("Temporal inconsistency between frames")
        if probability > 0.7:
            issues.append("Blending artifacts around face boundary")
        frames.append(FrameProbability(
            frame=i * fps,
            timestamp=float(i),
            probability=round(probability, 4),
            issues=issues,
        ))

    return frames
