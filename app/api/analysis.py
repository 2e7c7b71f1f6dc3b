"""
Analysis routes.

  POST /api/v1/analyze/{media,voice,text,location,combined}
      multipart/form-data: file, text_content, analysis_type, sub_analysis_type.
      Optional X-User-ID header; anonymous callers are rate-limited per IP.

  POST /api/v1/analyze
      Browser-extension surface. Requires `Authorization: Bearer <token>`;
      `analysis_type` picks the modality (default media).

  GET /api/v1/token/test
      Checks a bearer token without running an analysis.

Every successful analysis is cached under its report ID and recorded to
history in the background.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, File, Form, Header, Request, UploadFile

from app.core.auth import caller_identifier, require_api_token
from app.core.file_validator import sanitize_log_message
from app.core.rate_limiter import check_rate_limit
from app.detection.pipeline import analyze
from app.schemas.analysis import AnalysisResult, MediaAsset, Modality, TokenTestResponse
from app.services.analysis_service import log_memory
from app.services.history_service import record_analysis
from app.services.reports_service import cache_report

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Analysis"])


async def _read_asset(file: Optional[UploadFile]) -> Optional[MediaAsset]:
    if file is None or not file.filename:
        return None
    content = await file.read()
    return MediaAsset(
        name=file.filename,
        mime_type=file.content_type or "application/octet-stream",
        size=len(content),
        content=content,
    )


async def _handle(
    modality,
    file: Optional[UploadFile],
    text_content: Optional[str],
    sub_analysis_type: Optional[str],
    user_id: Optional[str],
    background_tasks: BackgroundTasks,
) -> AnalysisResult:
    asset = await _read_asset(file)
    log_memory(f"Pre-Analyze: {modality}")

    result = await analyze(modality, asset, text_content, sub_analysis_type)

    cache_report(result)
    asset_meta = {"name": asset.name, "mime_type": asset.mime_type, "size": asset.size} if asset else None
    background_tasks.add_task(record_analysis, result.report_id, user_id, asset_meta, text_content, result)

    log_memory(f"Post-Analyze: {modality}")
    logger.info(sanitize_log_message(
        f"[ROUTE] Final Response: {result.analysis_type.value} {result.result} "
        f"({result.confidence}) report={result.report_id}"
    ))
    return result


async def _public_analysis(
    modality: Modality,
    request: Request,
    file: Optional[UploadFile],
    text_content: Optional[str],
    sub_analysis_type: Optional[str],
    user_id: Optional[str],
    background_tasks: BackgroundTasks,
) -> AnalysisResult:
    check_rate_limit(caller_identifier(request, user_id))
    return await _handle(modality, file, text_content, sub_analysis_type, user_id, background_tasks)


@router.post("/api/v1/analyze/media", response_model=AnalysisResult)
async def analyze_media(
    request: Request,
    background_tasks: BackgroundTasks,
    file: Optional[UploadFile] = File(None),
    user_id: Optional[str] = Header(None, alias="X-User-ID"),
):
    """Image/video deepfake heuristics."""
    return await _public_analysis(Modality.MEDIA, request, file, None, None, user_id, background_tasks)


@router.post("/api/v1/analyze/voice", response_model=AnalysisResult)
async def analyze_voice(
    request: Request,
    background_tasks: BackgroundTasks,
    file: Optional[UploadFile] = File(None),
    user_id: Optional[str] = Header(None, alias="X-User-ID"),
):
    """Synthetic-voice heuristics and engine fingerprinting."""
    return await _public_analysis(Modality.VOICE, request, file, None, None, user_id, background_tasks)


@router.post("/api/v1/analyze/text", response_model=AnalysisResult)
async def analyze_text(
    request: Request,
    background_tasks: BackgroundTasks,
    text_content: Optional[str] = Form(None),
    user_id: Optional[str] = Header(None, alias="X-User-ID"),
):
    """AI-authorship fingerprinting for free text."""
    return await _public_analysis(Modality.TEXT, request, None, text_content, None, user_id, background_tasks)


@router.post("/api/v1/analyze/location", response_model=AnalysisResult)
async def analyze_location(
    request: Request,
    background_tasks: BackgroundTasks,
    file: Optional[UploadFile] = File(None),
    text_content: Optional[str] = Form(None),
    user_id: Optional[str] = Header(None, alias="X-User-ID"),
):
    """Geographic consistency between the claimed and the depicted location."""
    return await _public_analysis(Modality.LOCATION, request, file, text_content, None, user_id, background_tasks)


@router.post("/api/v1/analyze/combined", response_model=AnalysisResult)
async def analyze_combined(
    request: Request,
    background_tasks: BackgroundTasks,
    file: Optional[UploadFile] = File(None),
    text_content: Optional[str] = Form(None),
    sub_analysis_type: Optional[str] = Form(None),
    user_id: Optional[str] = Header(None, alias="X-User-ID"),
):
    """Media and accompanying text, blended per sub-mode (both, media-only, text-only)."""
    return await _public_analysis(
        Modality.COMBINED, request, file, text_content, sub_analysis_type, user_id, background_tasks
    )


@router.post("/api/v1/analyze", response_model=AnalysisResult)
async def analyze_with_token(
    background_tasks: BackgroundTasks,
    file: Optional[UploadFile] = File(None),
    text_content: Optional[str] = Form(None),
    analysis_type: Optional[str] = Form(None),
    sub_analysis_type: Optional[str] = Form(None),
    authorization: Optional[str] = Header(None),
):
    """
    Token-authenticated analysis for the browser extension.
    Rate-limited per token owner.
    """
    user_id = require_api_token(authorization)
    check_rate_limit(f"user:{user_id}")
    modality = analysis_type or Modality.MEDIA.value
    logger.info(f"[ROUTE] API-token analysis ({modality}) for user {user_id}")
    return await _handle(modality, file, text_content, sub_analysis_type, user_id, background_tasks)


@router.get("/api/v1/token/test", response_model=TokenTestResponse)
async def test_token(authorization: Optional[str] = Header(None)):
    require_api_token(authorization)
    return TokenTestResponse(
        valid=True,
        message="API token is valid",
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
