"""Structured logging configuration using structlog.

JSON lines in production, colored console output on a terminal.  Modules
keep logging through ``logging.getLogger(__name__)``; structlog renders the
records through the root handler's formatter, ``extra`` fields included.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from medintake.core.config import ObservabilityConfig


def setup_logging(config: ObservabilityConfig) -> None:
    """Install the structlog formatter on the root logger."""
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    json_logs = config.json_logs if config.json_logs is not None else not sys.stderr.isatty()
    render_chain: list = [structlog.stdlib.ProcessorFormatter.remove_processors_meta]
    if json_logs:
        render_chain += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        render_chain.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=render_chain,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    logging.getLogger("medintake").setLevel(level)
    # LiteLLM logs every request at INFO
    logging.getLogger("LiteLLM").setLevel(max(level, logging.WARNING))
    structlog.contextvars.bind_contextvars(service=config.service_name)
