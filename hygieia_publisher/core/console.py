"""
Build console sink.

The build runtime hands every event a console stream (the build log). The
publisher appends one line per notable event to it and must never fail the
build because that stream is broken or closed.
"""

import sys
from typing import TextIO

from hygieia_publisher.core.logging_config import get_logger

logger = get_logger(__name__)

PREFIX = "Hygieia: "


class BuildConsole:
    """
    Line-oriented writer over a build's console stream.

    Lines are written only when console output is enabled, but are always
    mirrored to the module logger so the process log keeps a record.

    Example:
        console = BuildConsole(sys.stdout, enabled=True)
        console.println("Hygieia: Auto Published Build Complete Data.")
    """

    def __init__(self, stream: TextIO | None = None, enabled: bool = True):
        self.stream = stream if stream is not None else sys.stdout
        self.enabled = enabled

    def println(self, message: str) -> None:
        """Append one line; write errors are logged, never raised."""
        logger.info(message)
        if not self.enabled:
            return
        try:
            self.stream.write(message + "\n")
            self.stream.flush()
        except (OSError, ValueError) as e:
            logger.warning(f"Could not write to build console: {e}")

    def hygieia(self, message: str) -> None:
        """Append a line prefixed with "Hygieia: "."""
        self.println(PREFIX + message)
