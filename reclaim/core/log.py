"""Logging setup (loguru) and redaction helpers.

Recovery phrases and passwords are never passed to the logger. Wallet
addresses are masked before they are logged.
"""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def setup_logging(
    level: str = "WARNING",
    log_file: str | Path | None = None,
    *,
    console: bool = True,
) -> None:
    """Configure loguru sinks.

    The TUI passes ``console=False``: anything written to stderr while
    Textual owns the terminal corrupts the screen.
    """
    logger.remove()
    if console:
        logger.add(sys.stderr, level=level, format="<level>{level: <8}</level> {message}")
    if log_file:
        logger.add(
            str(log_file),
            rotation="1 day",
            retention="7 days",
            level=level,
            encoding="utf-8",
        )


def mask_address(address: str) -> str:
    """``0x1234567890abcdef`` -> ``0x1234...cdef``."""
    address = address.strip()
    if len(address) <= 10:
        return "***"
    return f"{address[:6]}...{address[-4:]}"
