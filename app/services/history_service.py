"""
Analysis history in Firestore (`analyses` collection, keyed by report ID).

The Firebase `db` client is accessed at call-time via the integration module
so it picks up the instance initialized during the FastAPI lifespan.

`record_analysis` is record-and-continue: routes schedule it as a
background task and a failed write is logged, never raised.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException

from app.integrations import firebase as firebase_module
from app.schemas.analysis import AnalysisResult

logger = logging.getLogger(__name__)

COLLECTION = "analyses"


def _get_db():
    db = firebase_module.db
    if not db:
        raise HTTPException(status_code=503, detail="Database service unavailable.")
    return db


def record_analysis(
    report_id: str,
    user_id: Optional[str],
    asset_meta: Optional[dict],
    text_content: Optional[str],
    result: AnalysisResult,
) -> None:
    """
    Persist one completed analysis.

    Args:
        report_id: ID handed back to the caller.
        user_id: X-User-ID header or API-token owner; None for anonymous calls.
        asset_meta: {"name", "mime_type", "size"} of the upload, if any.
        text_content: Submitted text, if any.
        result: The envelope returned to the caller.
    """
    db = firebase_module.db
    if not db:
        logger.warning("[HISTORY] Firebase not initialized; skipping history write.")
        return
    try:
        db.collection(COLLECTION).document(report_id).set({
            "report_id": report_id,
            "user_id": user_id,
            "analysis_type": result.analysis_type.value,
            "file_name": asset_meta.get("name") if asset_meta else None,
            "file_type": asset_meta.get("mime_type") if asset_meta else None,
            "file_size": asset_meta.get("size") if asset_meta else None,
            "text_content": text_content,
            "result": result.model_dump(mode="json"),
            "created_at": datetime.now(timezone.utc),
        })
        logger.info(f"[HISTORY] Recorded {result.analysis_type.value} analysis {report_id}")
    except Exception as e:
        logger.error(f"[HISTORY] Failed to record analysis {report_id}: {e}")


def get_recorded_analysis(report_id: str) -> Optional[dict]:
    """Stored result envelope for `report_id`, or None when unknown."""
    db = _get_db()
    doc = db.collection(COLLECTION).document(report_id).get()
    if not doc.exists:
        return None
    return doc.to_dict().get("result")
