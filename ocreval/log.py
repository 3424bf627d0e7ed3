"""structlog wiring shared by the CLI and the HTTP app."""
from __future__ import annotations

import logging
import os
import sys
from typing import Optional

import structlog

LOG_LEVEL_ENV = "OCREVAL_LOG_LEVEL"


def configure_logging(level: Optional[str] = None) -> None:
    """Route structlog events through stdlib logging on stderr."""

    level_name = (level or os.environ.get(LOG_LEVEL_ENV, "INFO")).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=numeric_level, format="%(message)s", stream=sys.stderr)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
