"""
Core Infrastructure - Logging and build console output

Usage:
    from hygieia_publisher.core import get_logger, BuildConsole

    logger = get_logger(__name__)
    console = BuildConsole(stream, enabled=config.show_console_output)
"""

from .console import BuildConsole
from .logging_config import (
    ContextFormatter,
    JSONFormatter,
    get_logger,
    log_with_context,
    setup_logging,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    "log_with_context",
    "JSONFormatter",
    "ContextFormatter",
    # Build console
    "BuildConsole",
]
