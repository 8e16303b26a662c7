"""
Logging configuration for the submission portal.

Console output is human readable unless ``log_format`` is ``json``, in
which case loguru serializes each record. Outside debug mode records are
also written to a rotating file.
"""

import sys
from typing import Any, Dict, Optional

from loguru import logger

from ..config import Settings, get_settings

TEXT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{module}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def _sink_options(settings: Settings, level: str) -> Dict[str, Any]:
    return {
        "format": TEXT_FORMAT,
        "level": level,
        "serialize": settings.log_format == "json",
    }


def setup_logging(log_level: Optional[str] = None) -> None:
    """
    Replace loguru's sinks with the portal's.

    The Streamlit page calls this on every rerun, so it must stay idempotent.

    Args:
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR)
    """
    settings = get_settings()
    level = log_level or settings.log_level
    options = _sink_options(settings, level)

    logger.remove()
    logger.add(
        sys.stderr,
        colorize=not options["serialize"],
        backtrace=settings.debug_mode,
        diagnose=settings.debug_mode,
        **options,
    )
    if not settings.debug_mode:
        logger.add(
            settings.log_file,
            rotation="1 day",
            retention="30 days",
            compression="gz",
            **options,
        )

    logger.debug(f"Logging to stderr at {level}" + ("" if settings.debug_mode else f" and {settings.log_file}"))
