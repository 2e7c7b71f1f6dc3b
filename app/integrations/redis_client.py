"""
Upstash Redis: cached report payloads and rate-limit counters.

`client` is None until `initialize()` runs in the lifespan, and stays None
when Redis is not configured. Callers read `redis_client.client` at call time
and fall back to Firestore history (reports) or process memory (rate limits).
"""

import logging
from upstash_redis import Redis

from app.config import settings

logger = logging.getLogger(__name__)

client = None  # Redis | None


def initialize() -> None:
    global client

    if not settings.redis_configured:
        client = None
        logger.warning("[STARTUP] Redis not configured: rate limits kept in memory, reports read from history")
        return

    try:
        client = Redis(url=settings.upstash_redis_host, token=settings.upstash_redis_password)
        logger.info(f"[STARTUP] Redis ready (report TTL {settings.report_cache_ttl_sec}s)")
    except Exception as e:
        client = None
        logger.error(f"[STARTUP] Redis client init failed: {e}")


def backend_name() -> str:
    """Label for the health endpoint: which store backs cache and rate limits."""
    return "redis" if client is not None else "memory"
