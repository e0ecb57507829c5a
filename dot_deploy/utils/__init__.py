"""Utility functions for dot-deploy."""

from dot_deploy.utils.logging import (
    clear_secrets,
    configure_logging,
    get_logger,
    redact_secrets,
    register_secret,
)

__all__ = [
    "clear_secrets",
    "configure_logging",
    "get_logger",
    "redact_secrets",
    "register_secret",
]
