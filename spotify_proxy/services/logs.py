"""
Goal: Set up loguru logging for the proxy.
Console always; a rolling file under SP_LOG_DIR only when configured.
Never let bearer tokens or client secrets reach a sink.
"""

import re
import sys
from pathlib import Path

from loguru import logger

from spotify_proxy.settings import LOG_DIR, LOG_LEVEL

_AUTH_HEADER = re.compile(r"\b(Bearer|Basic)\s+[A-Za-z0-9._~+/=-]+")
_SECRET_FIELD = re.compile(
    r"""(access_token|refresh_token|client_secret)(["']?\s*[=:]\s*["']?)[^\s"',&}]+""",
    re.IGNORECASE,
)


def _sanitize_log_message(msg: str) -> str:
    """Remove credentials from a formatted log line."""
    msg = _AUTH_HEADER.sub(r"\1 [REDACTED]", msg)
    return _SECRET_FIELD.sub(r"\1\2[REDACTED]", msg)


def _redact(record) -> bool:
    record["message"] = _sanitize_log_message(record["message"])
    return True


def configure_logging() -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=LOG_LEVEL,
        colorize=False,
        backtrace=False,
        diagnose=False,
        filter=_redact,
    )
    if LOG_DIR is None:
        return
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    logger.add(
        str(Path(LOG_DIR) / "{time:YYYY-MM-DD}.log"),
        rotation="00:00",
        retention="14 days",
        level=LOG_LEVEL,
        backtrace=False,
        diagnose=False,
        serialize=False,
        enqueue=True,
        filter=_redact,
    )
