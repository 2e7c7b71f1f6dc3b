"""
Shared aiohttp ClientSession, initialized once during the FastAPI lifespan.

The only outbound calls are to the optional inference endpoint, so the
session timeout comes from `settings.inference_http_timeout_sec`.

Usage:
    async with http_client.request_session() as sess:
        async with sess.post(url, data=payload) as response:
            ...

The context manager yields the shared session when available, otherwise
creates and closes a temporary one (covers tests and pre-init calls).
"""

import logging
from contextlib import asynccontextmanager

import aiohttp

from app.config import settings

logger = logging.getLogger(__name__)

session: aiohttp.ClientSession | None = None


def _timeout() -> aiohttp.ClientTimeout:
    return aiohttp.ClientTimeout(total=settings.inference_http_timeout_sec)


async def initialize() -> None:
    global session
    session = aiohttp.ClientSession(timeout=_timeout())
    logger.info("[STARTUP] Shared HTTP session initialized")


async def close() -> None:
    global session
    if session and not session.closed:
        await session.close()
        session = None
        logger.info("[SHUTDOWN] Shared HTTP session closed")


@asynccontextmanager
async def request_session():
    """
    Yields the shared session if available, otherwise a temporary one that
    is closed on exit. Never closes the shared session.
    """
    if session and not session.closed:
        yield session
    else:
        tmp = aiohttp.ClientSession(timeout=_timeout())
        try:
            yield tmp
        finally:
            await tmp.close()
