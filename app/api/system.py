"""
Health and crawler routes.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from app.config import settings
from app.integrations import firebase, redis_client
from app.schemas.analysis import Modality

router = APIRouter(tags=["System"])


@router.get("/health")
async def health():
    return {
        "status": "healthy",
        "modalities": [m.value for m in Modality],
        "inference": "enabled" if settings.inference_enabled else "heuristics-only",
        "history": firebase.backend_name(),
        "cache": redis_client.backend_name(),
    }


@router.get("/robots.txt", response_class=PlainTextResponse)
def robots():
    return "User-agent: *\nDisallow: /api/\n"
