"""Loguru configuration.

``setup_logging`` replaces loguru's default sink with one at the configured
level, optionally adds a rotating file sink, and routes records emitted
through the standard ``logging`` module (werkzeug, sqlalchemy, httpx) into
loguru so that all output shares one format.
"""
from __future__ import annotations

import inspect
import logging
import sys
from typing import Optional

from loguru import logger

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

_configured = False


class InterceptHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk back to the frame that issued the logging call.
        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    global _configured
    if _configured:
        return

    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=_FORMAT, backtrace=False)
    if logfile:
        logger.add(logfile, level=level.upper(), format=_FORMAT, rotation="10 MB", encoding="utf-8")

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    _configured = True
