"""
Logging helpers built on structlog.

The library only asks for loggers; configuring output is left to the
application. ``setup_logging`` is a convenience for scripts and tests.

Usage:
    from bambou.core.logging import get_logger, setup_logging

    setup_logging(level="DEBUG", format_type="console")
    logger = get_logger(__name__)
    logger.info("Session started", url="https://vsd:8443")
"""

import logging
import sys
from typing import Any

import structlog
from structlog.typing import Processor


def setup_logging(level: str = "INFO", format_type: str = "console") -> None:
    """
    Configure structlog on top of the standard logging module.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Output format ('json' or 'console')

    Raises:
        ValueError: If format_type is not recognized

    """
    if format_type not in ("json", "console"):
        raise ValueError(f"Unknown log format: {format_type}")

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if format_type == "console":
        renderer: Processor = structlog.dev.ConsoleRenderer(colors=False)
    else:
        renderer = structlog.processors.JSONRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def get_logger(name: str) -> Any:
    """Get a structlog logger for the given module name."""
    return structlog.get_logger(name)
