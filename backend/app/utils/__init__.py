"""
Utilities Package for the video embed service.

Modules:
--------
logger:
    Structured logging configuration including:
    - JSONFormatter for structured log output
    - StandardFormatter for human-readable development logs
    - setup_logging for application-wide configuration
    - add_log_context for per-video context fields
"""

from app.utils.logger import (
    add_log_context,
    setup_logging,
)


__all__ = [
    "add_log_context",
    "setup_logging",
]
