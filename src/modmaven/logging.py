from __future__ import annotations

import contextlib
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
import os
from typing import Iterator


_configured = False

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


def _ensure_base_logger() -> None:
    global _configured
    if _configured:
        return
    level = os.getenv("MODMAVEN_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
    )
    _configured = True


class NestedLogger(logging.LoggerAdapter):
    """Logger that indents messages by a nesting depth.

    The depth is owned by this adapter, not by the module, so it travels with
    whoever holds the logger. Use `nested()` around a block of work so the
    depth is restored even when the block raises.

    Not safe for concurrent writers.
    """

    indent = "  "

    def __init__(self, logger: logging.Logger, depth: int = 0):
        super().__init__(logger, {})
        self.depth = depth

    def process(self, msg, kwargs):
        return f"{self.indent * self.depth}{msg}", kwargs

    def push(self) -> None:
        self.depth += 1

    def pop(self) -> None:
        if self.depth == 0:
            raise RuntimeError("Unbalanced log pop")
        self.depth -= 1

    @contextlib.contextmanager
    def nested(self) -> Iterator["NestedLogger"]:
        self.push()
        try:
            yield self
        finally:
            self.pop()


def get_logger(name: str, log_file: Path | None = None) -> NestedLogger:
    _ensure_base_logger()
    logger = logging.getLogger(name)
    # Do not duplicate handlers if already set
    if log_file and not any(
        isinstance(h, RotatingFileHandler) for h in logger.handlers
    ):
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=3)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return NestedLogger(logger)
