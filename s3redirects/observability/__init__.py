"""
Observability module: Structured logging.
"""

from s3redirects.observability.logging import (
    ConsoleFormatter,
    JsonFormatter,
    LogLevel,
    StructuredLogger,
    setup_logging,
)

__all__ = [
    "ConsoleFormatter",
    "JsonFormatter",
    "LogLevel",
    "StructuredLogger",
    "setup_logging",
]
