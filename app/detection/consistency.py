"""
Cross-modal geographic consistency between text-derived location claims and
visually-detected landmarks.
"""

import logging
import math
from itertools import combinations
from typing import List

from app.detection.constants import (
    EARTH_RADIUS_KM,
    IMPOSSIBLE_DISTANCE_KM,
    IMPOSSIBLE_GEOGRAPHY_PENALTY,
    LANDMARK_INCONSISTENCY_PENALTY,
    LANDMARK_SPREAD_KM,
    MATCH_DISTANCE_KM,
    TEXT_VISUAL_MISMATCH_PENALTY,
)
from app.schemas.analysis import Coordinates, Discrepancy, LocationClaim, VisualLandmark

logger = logging.getLogger(__name__)


def haversine_km(a: Coordinates, b: Coordinates) -> float:
    """Great-circle distance in km."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = math.radians(b.latitude - a.latitude)
    d_lon = math.radians(b.longitude - a.longitude)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def check_consistency(claims: List[LocationClaim], landmarks: List[VisualLandmark]) -> tuple:
    """
    Returns (consistency_score, discrepancies).

    Score starts at 1.0 and loses a fixed penalty per discrepancy, floored at 0.
    Claims or landmarks without coordinates only take part in the
    text/visual "no match" check.
    """
    score = 1.0
    discrepancies: List[Discrepancy] = []

    if not claims and not landmarks:
        return score, discrepancies

    if claims and landmarks:
        has_match = False
        for claim in claims:
            for landmark in landmarks:
                if claim.coordinates is None or landmark.coordinates is None:
                    continue
                distance = haversine_km(claim.coordinates, landmark.coordinates)
                if distance < MATCH_DISTANCE_KM:
                    has_match = True
                elif distance > IMPOSSIBLE_DISTANCE_KM:
                    text_name = claim.location_name.lower()
                    visual_name = landmark.landmark_name.lower()
                    km = round(distance)
                    discrepancies.append(Discrepancy(
                        type="impossible_geography",
                        description=f"Text claims {text_name} but visual shows {visual_name} ({km}km apart)",
                        severity="high",
                        evidence=[f"Distance: {km}km", f"Text: {text_name}", f"Visual: {visual_name}"],
                    ))
                    score -= IMPOSSIBLE_GEOGRAPHY_PENALTY

        if not has_match:
            discrepancies.append(Discrepancy(
                type="text_visual_mismatch",
                description="Text and visual content reference different locations",
                severity="medium",
                evidence=[
                    "Text locations: " + ", ".join(c.location_name.lower() for c in claims),
                    "Visual landmarks: " + ", ".join(l.landmark_name.lower() for l in landmarks),
                ],
            ))
            score -= TEXT_VISUAL_MISMATCH_PENALTY

    for first, second in combinations(landmarks, 2):
        if first.coordinates is None or second.coordinates is None:
            continue
        distance = haversine_km(first.coordinates, second.coordinates)
        if distance > LANDMARK_SPREAD_KM:
            discrepancies.append(Discrepancy(
                type="landmark_inconsistency",
                description="Multiple distant landmarks detected in same frame",
                severity="high",
                evidence=[
                    f"{first.landmark_name} and {second.landmark_name}",
                    f"Distance: {round(distance)}km",
                ],
            ))
            score -= LANDMARK_INCONSISTENCY_PENALTY

    score = round(max(score, 0.0), 4)
    logger.debug(f"[LOCATION] consistency={score} discrepancies={len(discrepancies)}")
    return score, discrepancies
