"""
Input validation for analysis requests and log sanitization utilities.

Each modality has its own MIME allow-list and size ceilings. Failures raise
HTTPException with a structured `{"code", "message"}` detail before any
scoring runs.
"""

import re
import logging
from typing import Optional

from fastapi import HTTPException

from app.config import settings
from app.schemas.analysis import CombinedMode, MediaAsset, Modality

logger = logging.getLogger(__name__)

MEDIA_TYPES = {"image/jpeg", "image/jpg", "image/png", "video/mp4"}
VISUAL_TYPES = MEDIA_TYPES | {"video/mov", "video/avi", "video/quicktime"}
VOICE_TYPES = {"audio/wav", "audio/mp3", "audio/mpeg", "audio/m4a", "audio/ogg"}

ALLOWED_TYPES = {
    Modality.MEDIA: MEDIA_TYPES,
    Modality.VOICE: VOICE_TYPES,
    Modality.LOCATION: VISUAL_TYPES,
    Modality.COMBINED: VISUAL_TYPES,
}


def _reject(status_code: int, code: str, message: str) -> HTTPException:
    logger.info(f"[VALIDATION] {code}: {message}")
    return HTTPException(status_code=status_code, detail={"code": code, "message": message})


def max_bytes_for(modality: Modality, mime_type: str) -> int:
    if modality == Modality.MEDIA:
        if mime_type.startswith("video/"):
            return settings.max_media_video_bytes
        return settings.max_media_image_bytes
    if modality == Modality.VOICE:
        return settings.max_voice_bytes
    if modality == Modality.LOCATION:
        return settings.max_location_bytes
    return settings.max_combined_bytes


def validate_asset(modality: Modality, asset: Optional[MediaAsset]) -> MediaAsset:
    """Presence, MIME allow-list and size ceiling for the modality."""
    if asset is None or not asset.name:
        raise _reject(400, "MISSING_FILE", f"No file provided for {modality.value} analysis")

    mime_type = asset.mime_type.lower()
    if mime_type not in ALLOWED_TYPES[modality]:
        allowed = ", ".join(sorted(ALLOWED_TYPES[modality]))
        raise _reject(415, "UNSUPPORTED_TYPE", f"Unsupported file type '{asset.mime_type}'. Supported: {allowed}")

    limit = max_bytes_for(modality, mime_type)
    if asset.size > limit:
        raise _reject(413, "FILE_TOO_LARGE", f"File too large. Max {limit // 1024 // 1024}MB allowed.")

    return asset


def _require_text(text: Optional[str], purpose: str) -> str:
    if not text or not text.strip():
        raise _reject(400, "MISSING_TEXT", f"No text content provided for {purpose}")
    return text


def resolve_sub_mode(sub_mode) -> CombinedMode:
    if sub_mode is None or sub_mode == "":
        return CombinedMode.BOTH
    try:
        return CombinedMode(sub_mode)
    except ValueError:
        allowed = ", ".join(m.value for m in CombinedMode)
        raise _reject(400, "INVALID_SUB_MODE", f"Unknown sub_analysis_type '{sub_mode}'. Expected one of: {allowed}")


def resolve_modality(modality) -> Modality:
    try:
        return Modality(modality)
    except ValueError:
        allowed = ", ".join(m.value for m in Modality)
        raise _reject(400, "INVALID_MODALITY", f"Unknown analysis_type '{modality}'. Expected one of: {allowed}")


def validate_analysis_request(
    modality,
    asset: Optional[MediaAsset] = None,
    text: Optional[str] = None,
    sub_mode=None,
) -> tuple:
    """
    Returns (modality, sub_mode) once the inputs satisfy the modality's
    minimum requirements. sub_mode is None for everything but combined.
    """
    modality = resolve_modality(modality)

    if modality == Modality.TEXT:
        text = _require_text(text, "text analysis")
        if len(text.strip()) < settings.min_text_length:
            raise _reject(
                400,
                "TEXT_TOO_SHORT",
                f"Text must be at least {settings.min_text_length} characters long",
            )
        return modality, None

    if modality == Modality.COMBINED:
        mode = resolve_sub_mode(sub_mode)
        if mode == CombinedMode.TEXT_ONLY:
            _require_text(text, "text-only analysis")
            return modality, mode
        validate_asset(modality, asset)
        if mode == CombinedMode.BOTH:
            _require_text(text, "combined analysis")
        return modality, mode

    validate_asset(modality, asset)
    if modality == Modality.LOCATION:
        _require_text(text, "location verification")
    return modality, None


def sanitize_log_message(message: str) -> str:
    """Strip sensitive file paths from log messages."""
    msg = re.sub(r'\/[^\s]+\/tmp[a-zA-Z0-9_]+', '[TEMP_FILE]', message)
    msg = re.sub(r'\/[^\s]+\/([^\/\s]+)', r'.../\1', msg)
    return msg
