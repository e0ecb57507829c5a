"""Logging configuration using structlog."""

import logging
import sys
from typing import Any

import structlog

from dot_deploy.config import Settings

REDACTED = "***"

# Values registered through the secret sink; never rendered in a log line
_masked_values: set[str] = set()


def register_secret(value: str) -> None:
    """Redact ``value`` from every log line emitted from now on."""
    if value:
        _masked_values.add(value)


def clear_secrets() -> None:
    """Forget all registered secrets."""
    _masked_values.clear()


def _redact(value: Any) -> Any:
    if isinstance(value, str):
        for secret in _masked_values:
            if secret in value:
                value = value.replace(secret, REDACTED)
        return value
    if isinstance(value, dict):
        return {k: _redact(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(_redact(v) for v in value)
    return value


def redact_secrets(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """structlog processor replacing registered secrets with ``***``."""
    if not _masked_values:
        return event_dict
    return {key: _redact(value) for key, value in event_dict.items()}


def configure_logging(settings: Settings) -> None:
    """Configure structured logging for the action."""
    # Everything goes to stdout so the runner's masking applies to it too
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, settings.log_level),
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        redact_secrets,
    ]

    # Add renderer based on format
    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
