"""
API token validation for the browser-extension surface.

Tokens are stored in the `api_tokens` collection under the SHA-256 of the
token, so the raw secret never becomes a document ID. A document looks like
{"user_id": ..., "active": true, "last_used": ...}.
"""

import hashlib
import logging
from datetime import datetime, timezone
from typing import Optional

from app.integrations import firebase as firebase_module

logger = logging.getLogger(__name__)

COLLECTION = "api_tokens"


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def validate_api_token(token: str) -> Optional[str]:
    """
    Returns the owning user_id for an active token, else None.
    Touches `last_used` on success; a failed touch does not invalidate the token.
    """
    db = firebase_module.db
    if not db:
        logger.warning("[TOKEN] Firebase not initialized; rejecting API token.")
        return None

    try:
        ref = db.collection(COLLECTION).document(hash_token(token))
        doc = ref.get()
    except Exception as e:
        logger.error(f"[TOKEN] Token lookup failed: {e}")
        return None
    if not doc.exists:
        return None

    data = doc.to_dict()
    if not data.get("active", True) or not data.get("user_id"):
        return None

    try:
        ref.update({"last_used": datetime.now(timezone.utc)})
    except Exception as e:
        logger.error(f"[TOKEN] Failed to update last_used: {e}")

    return data["user_id"]
