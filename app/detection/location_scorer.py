"""
Location claim extraction (text and simulated OCR) and visual landmark detection.

Both sides resolve against the LANDMARKS gazetteer. Visual detection is
filename-driven; the OCR pass and the landmark fallback are demo draws from
the supplied random generator.
"""

import logging
import random
import re
from typing import Dict, List, Optional

from app.detection.constants import (
    LANDMARK_FALLBACK_PROBABILITY,
    LANDMARKS,
    MATCHED_CLAIM_CONFIDENCE,
    OCR_OVERLAYS,
    OCR_PRESENCE_PROBABILITY,
    UNMATCHED_CLAIM_CONFIDENCE,
)
from app.detection.rng import resolve_rng
from app.schemas.analysis import BoundingBox, Coordinates, LocationClaim, VisualLandmark

logger = logging.getLogger(__name__)

_CITY_COUNTRY = re.compile(r"([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*),\s*([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)")
_STREET_ADDRESS = re.compile(
    r"\d+\s+[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\s+(?:Street|St|Avenue|Ave|Road|Rd|Boulevard|Blvd)\b",
    re.IGNORECASE,
)
_NAMED_PLACE = re.compile(
    r"\b(?:at|in|near|from)\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*"
    r"\s+(?:Tower|Bridge|Building|Center|Square|Park|Museum|Cathedral|Church))\b",
    re.IGNORECASE,
)
_LEADING_FILLER = re.compile(r"^(?:(?:at|in|near|from)\s+)?(?:the\s+)?", re.IGNORECASE)

_GAZETTEER_NAMES = {
    key: re.compile(rf"\b{re.escape(key)}\b", re.IGNORECASE) for key in LANDMARKS
}


def _coordinates(entry: Dict) -> Coordinates:
    return Coordinates(latitude=entry["lat"], longitude=entry["lng"])


def clean_place_name(raw: str) -> str:
    return _LEADING_FILLER.sub("", raw.strip()).strip()


def resolve_place(name: str) -> Optional[Dict]:
    """Gazetteer entry for a landmark name, or a name ending in one. Cities alone never resolve."""
    key = name.lower()
    if key in LANDMARKS:
        return LANDMARKS[key]
    for landmark, entry in LANDMARKS.items():
        if key.endswith(" " + landmark):
            return entry
    return None


def _claim(span: str, name: str, source: str) -> LocationClaim:
    entry = resolve_place(name)
    return LocationClaim(
        text=span,
        location_name=name,
        coordinates=_coordinates(entry) if entry else None,
        confidence=MATCHED_CLAIM_CONFIDENCE if entry else UNMATCHED_CLAIM_CONFIDENCE,
        source=source,
    )


def extract_locations_from_text(text: str, source: str = "transcript") -> List[LocationClaim]:
    """
    Pattern pass (city/country, street address, "at/in/near <Place>") followed
    by a direct scan for gazetteer landmark names. One claim per distinct
    place name; only landmarks carry coordinates.
    """
    claims: List[LocationClaim] = []
    seen = set()

    def add(span: str, name: str) -> None:
        if not name or name.lower() in seen:
            return
        seen.add(name.lower())
        claims.append(_claim(span, name, source))

    for match in _CITY_COUNTRY.finditer(text):
        add(match.group(0), clean_place_name(match.group(1)))

    for match in _STREET_ADDRESS.finditer(text):
        add(match.group(0), clean_place_name(match.group(0)))

    for match in _NAMED_PLACE.finditer(text):
        add(match.group(0), clean_place_name(match.group(1)))

    # Names the patterns cannot see ("Statue of Liberty", bare "Eiffel Tower").
    for key, pattern in _GAZETTEER_NAMES.items():
        match = pattern.search(text)
        if match and not any(c.location_name.lower().endswith(key) for c in claims):
            add(match.group(0), match.group(0))

    return claims


def simulate_ocr_extraction(rng: Optional[random.Random] = None) -> List[LocationClaim]:
    """Stands in for text burned into the asset: one canned overlay, most of the time."""
    rng = resolve_rng(rng)
    if rng.random() > 1 - OCR_PRESENCE_PROBABILITY:
        overlay = rng.choice(OCR_OVERLAYS)
        logger.debug(f"[LOCATION] Simulated OCR overlay: '{overlay}'")
        return extract_locations_from_text(overlay, source="ocr")
    return []


def detect_visual_landmarks(filename: str, rng: Optional[random.Random] = None) -> List[VisualLandmark]:
    """
    Landmarks whose name, city or country appears in the filename. When none
    match, a random gazetteer entry is reported about half of the time.
    """
    rng = resolve_rng(rng)
    filename_lower = filename.lower()
    landmarks: List[VisualLandmark] = []

    for key, entry in LANDMARKS.items():
        if (key.replace(" ", "") in filename_lower
                or entry["city"].lower() in filename_lower
                or entry["country"].lower() in filename_lower):
            landmarks.append(VisualLandmark(
                landmark_name=key,
                confidence=0.8 + rng.random() * 0.15,
                coordinates=_coordinates(entry),
                bounding_box=BoundingBox(
                    x=rng.random() * 0.3,
                    y=rng.random() * 0.3,
                    width=0.3 + rng.random() * 0.4,
                    height=0.3 + rng.random() * 0.4,
                ),
            ))

    if not landmarks and rng.random() > LANDMARK_FALLBACK_PROBABILITY:
        key, entry = rng.choice(list(LANDMARKS.items()))
        landmarks.append(VisualLandmark(
            landmark_name=key,
            confidence=0.6 + rng.random() * 0.2,
            coordinates=_coordinates(entry),
            bounding_box=BoundingBox(
                x=rng.random() * 0.4,
                y=rng.random() * 0.4,
                width=0.2 + rng.random() * 0.3,
                height=0.2 + rng.random() * 0.3,
            ),
        ))

    return landmarks
