# lazy_tiff/logging.py
"""
Logging setup using Loguru.

Library modules only emit records; sinks are configured here, by the CLI.
Field loads may run on several threads, so the thread id is part of each line.
"""
from __future__ import annotations

import sys
from typing import Any

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> "
    "| <level>{level: <8}</level> "
    "| tid={thread} "
    "<cyan>{module}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> "
    "- <level>{message}</level>"
)


def configure_logging(*, debug: bool = False, sink: Any = None) -> int:
    """Replace loguru's sinks with a single formatted one.

    Args:
        debug: Log header detection, every IFD parsed and every field load.
        sink: Destination accepted by ``logger.add``; defaults to stderr.

    Returns:
        The loguru handler id.
    """
    logger.remove()
    level = "DEBUG" if debug else "INFO"
    return logger.add(
        sink if sink is not None else sys.stderr,
        level=level,
        format=LOG_FORMAT,
        enqueue=sink is None,
        backtrace=debug,
        diagnose=debug,
    )
