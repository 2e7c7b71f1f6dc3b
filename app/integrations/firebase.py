"""
Firestore access for the `analyses` history and the `api_tokens` collection.

`db` is None until `initialize()` runs in the lifespan. If credentials are
missing or invalid it stays None: history writes are skipped and every API
token is rejected.
"""

import json
import logging
import firebase_admin
from firebase_admin import credentials, firestore

from app.config import settings

logger = logging.getLogger(__name__)

db = None  # firestore.Client | None


def _credentials():
    if settings.firebase_service_account:
        return credentials.Certificate(json.loads(settings.firebase_service_account))
    return None


def initialize() -> None:
    global db

    try:
        if not firebase_admin._apps:
            firebase_admin.initialize_app(_credentials())
        db = firestore.client()
        logger.info("[STARTUP] Firestore ready (analyses, api_tokens)")
    except Exception as e:
        db = None
        logger.error(f"[STARTUP] Firestore unavailable, history and API tokens disabled: {e}")


def backend_name() -> str:
    return "firestore" if db is not None else "disabled"
