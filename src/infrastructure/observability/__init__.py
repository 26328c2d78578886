"""Observability module providing structlog configuration."""

from src.infrastructure.observability.setup import configure_logging, reset_logging
from src.infrastructure.observability.structlog_processor import redact_secrets

__all__ = [
    "configure_logging",
    "redact_secrets",
    "reset_logging",
]
