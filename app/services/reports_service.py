"""
Report lookup by report ID: Redis cache first, then Firestore history.

Firebase and Redis clients are accessed at call-time via integration modules
so they pick up instances initialized during the FastAPI lifespan.
"""

import json
import logging
import re
from typing import Optional

from fastapi import HTTPException

from app.config import settings
from app.integrations import redis_client as redis_module
from app.schemas.analysis import AnalysisResult
from app.services.history_service import get_recorded_analysis

logger = logging.getLogger(__name__)

_REPORT_ID_RE = re.compile(r"^[A-Z0-9]{4,32}$")


def _store(report_id: str, payload: dict) -> None:
    rc = redis_module.client
    if not rc:
        return
    try:
        rc.setex(f"report:{report_id}", settings.report_cache_ttl_sec, json.dumps(payload))
    except Exception as e:
        logger.error(f"[REPORT] Failed to cache report {report_id}: {e}")


def cache_report(result: AnalysisResult) -> None:
    """Store the result under report:{report_id}. No-op without Redis or an ID."""
    if result.report_id:
        _store(result.report_id, result.model_dump(mode="json"))


def get_cached_report(report_id: str) -> Optional[dict]:
    rc = redis_module.client
    if not rc:
        return None
    try:
        raw = rc.get(f"report:{report_id}")
    except Exception as e:
        logger.error(f"[REPORT] Redis lookup failed for {report_id}: {e}")
        return None
    if not raw:
        return None
    return json.loads(raw) if isinstance(raw, str) else raw


def get_report(report_id: str) -> dict:
    """
    Verifies a report ID and returns the stored result envelope.
    Raises 404 for malformed or unknown IDs, 503 when only Firestore could
    answer and it is unavailable.
    """
    report_id = report_id.upper()
    if not _REPORT_ID_RE.match(report_id):
        raise HTTPException(status_code=404, detail="Report not found.")

    cached = get_cached_report(report_id)
    if cached:
        return cached

    recorded = get_recorded_analysis(report_id)
    if not recorded:
        raise HTTPException(status_code=404, detail="Report not found.")

    _store(report_id, recorded)
    return recorded
