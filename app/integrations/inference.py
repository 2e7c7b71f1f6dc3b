"""
Optional hosted-model inference (Hugging Face style endpoints).

Disabled unless INFERENCE_API_KEY is set. Every call is best-effort: any
non-2xx status, network error, timeout or unparseable body is logged at
WARNING and returned as None so callers fall back to heuristics.
"""

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from app.config import settings
from app.integrations import http_client as http_module

logger = logging.getLogger(__name__)


def _url(model: str) -> str:
    return f"{settings.inference_base_url.rstrip('/')}/{model}"


def _headers(content_type: str) -> dict:
    return {
        "Authorization": f"Bearer {settings.inference_api_key}",
        "Content-Type": content_type,
    }


async def _post(model: str, **kwargs) -> Optional[Any]:
    if not settings.inference_enabled:
        return None

    try:
        async with http_module.request_session() as sess:
            async with sess.post(_url(model), **kwargs) as response:
                if response.status != 200:
                    body = await response.text()
                    logger.warning(f"[INFERENCE] {model} returned {response.status}: {body[:200]}")
                    return None
                return await response.json(content_type=None)
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        logger.warning(f"[INFERENCE] {model} call failed: {e}")
        return None


async def classify_bytes(model: str, data: bytes) -> Optional[Any]:
    """POST raw bytes (image or audio) to `model`."""
    return await _post(model, data=data, headers=_headers("application/octet-stream"))


async def classify_text(model: str, text: str) -> Optional[Any]:
    """POST `{"inputs": text}` to `model`."""
    return await _post(model, json={"inputs": text}, headers=_headers("application/json"))


def find_label(payload: Any, *fragments: str) -> Optional[dict]:
    """
    First `{label, score}` entry whose label contains any fragment.
    Accepts the flat list and the nested `[[...]]` shapes the endpoints return.
    """
    if not isinstance(payload, list) or not payload:
        return None
    entries = payload[0] if isinstance(payload[0], list) else payload

    for entry in entries:
        if not isinstance(entry, dict):
            continue
        label = str(entry.get("label", "")).lower()
        if any(fragment in label for fragment in fragments):
            try:
                return {"label": label, "score": float(entry.get("score", 0.0))}
            except (TypeError, ValueError):
                return None
    return None


def extract_transcription(payload: Any) -> str:
    """ASR payloads come back as `{"text": ...}`; anything else reads as empty."""
    if isinstance(payload, dict):
        text = payload.get("text") or payload.get("transcription") or ""
        return text if isinstance(text, str) else ""
    return ""
