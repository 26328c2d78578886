"""Structlog processor that keeps secrets out of log events."""

from typing import Any

REDACTED = "[redacted]"

# Event keys that may carry secret material
SENSITIVE_KEYS = frozenset(
    {
        "password",
        "password_hash",
        "plaintext",
        "token",
        "hash",
        "credential",
    }
)


def redact_secrets(
    logger: Any,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Structlog processor that masks sensitive values in log events.

    Plaintext passwords, password hashes and tokens must never reach a
    log sink. Any event key listed in SENSITIVE_KEYS is replaced with a
    fixed marker before rendering.

    Args:
        logger: The logger instance (unused, required by structlog API).
        method_name: The log method name (unused, required by structlog API).
        event_dict: The log event dictionary to scrub.

    Returns:
        The event dictionary with sensitive values masked.
    """
    for key in SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED

    return event_dict
