"""Structured logging setup."""

import logging
import sys

import structlog

from src.infrastructure.observability.structlog_processor import redact_secrets

# Module-level state for cleanup
_handler: logging.Handler | None = None


def configure_logging(level: str = "INFO", *, json_logs: bool = False) -> None:
    """Configure structlog on top of the standard library logging module.

    Installs a single stderr handler on the root logger whose formatter
    runs the structlog processor chain, so both structlog events and
    plain stdlib records render the same way. Calling it again replaces
    the previous handler.

    Args:
        level: Minimum log level name (e.g., "DEBUG", "INFO").
        json_logs: If True, render events as JSON lines; otherwise use the
            human-readable console renderer.
    """
    global _handler

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        redact_secrets,  # Mask secrets before anything renders them
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    renderer: structlog.types.Processor
    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )

    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)

    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(formatter)
    root.addHandler(_handler)
    root.setLevel(level.upper())


def reset_logging() -> None:
    """Remove the installed handler and restore structlog defaults."""
    global _handler

    if _handler is not None:
        logging.getLogger().removeHandler(_handler)
        _handler = None

    structlog.reset_defaults()
