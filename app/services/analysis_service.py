"""
Analysis request helpers: report ID generation and memory usage logging.
"""

import logging
import os
import secrets
import string

import psutil

from app.config import settings

logger = logging.getLogger(__name__)

_REPORT_ALPHABET = string.ascii_uppercase + string.digits


def generate_report_id(length: int = settings.report_id_length) -> str:
    """Opaque report ID, uppercase letters and digits."""
    return ''.join(secrets.choice(_REPORT_ALPHABET) for _ in range(length))


def log_memory(stage: str) -> None:
    """Log current process and system memory usage. Only runs when DEBUG logging is active."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    process = psutil.Process(os.getpid())
    mem_info = process.memory_info()
    sys_mem = psutil.virtual_memory()
    logger.debug(
        f"[MEMORY] {stage} | "
        f"PID: {os.getpid()} | "
        f"Process RSS: {mem_info.rss / 1024 / 1024:.2f} MB | "
        f"System Available: {sys_mem.available / 1024 / 1024:.2f} MB / {sys_mem.total / 1024 / 1024:.2f} MB"
    )

