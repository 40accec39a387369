"""
Workspace artifact extraction for generic collector items.

Finds files in the build workspace matching a configured glob pattern and
turns each one into a GenericCollectorItemCreateRequest whose rawData is the
file's text.
"""

from pathlib import Path

from hygieia_publisher.core import get_logger
from hygieia_publisher.domain.build import BuildEventContext
from hygieia_publisher.domain.requests import GenericCollectorItemCreateRequest
from hygieia_publisher.errors import ExtractionError
from hygieia_publisher.utils.error_handling import log_and_return_default

logger = get_logger(__name__)


class WorkspaceArtifactExtractor:
    """
    Default ArtifactExtractor: one request per matching workspace file.

    Unreadable files are logged and skipped; a missing workspace yields no
    requests.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def extract(
        self,
        build: BuildEventContext,
        tool_name: str,
        pattern: str,
        correlation_token: str | None,
    ) -> list[GenericCollectorItemCreateRequest]:
        """
        Build generic item requests for files matching a pattern.

        Args:
            build: Build snapshot (workspace is read from it)
            tool_name: Tool name reported to Hygieia
            pattern: Glob relative to the workspace (e.g., "reports/**/*.json")
            correlation_token: "{id},{collectorItemId}" of the build, if known

        Returns:
            One request per readable matching file, sorted by path

        Raises:
            ExtractionError: If the pattern itself is invalid
        """
        workspace = build.workspace
        if workspace is None or not workspace.is_dir():
            logger.info(f"No workspace available for {tool_name} artifacts")
            return []

        try:
            matches = sorted(path for path in workspace.glob(pattern) if path.is_file())
        except (ValueError, NotImplementedError) as e:
            raise ExtractionError(f"Invalid artifact pattern '{pattern}': {e}") from e

        requests = []
        for path in matches:
            raw_data = self._read(path)
            if raw_data is None:
                continue
            requests.append(
                GenericCollectorItemCreateRequest(
                    tool_name=tool_name,
                    raw_data=raw_data,
                    source=path.relative_to(workspace).as_posix(),
                    build_id=correlation_token,
                    build_url=build.build_url,
                )
            )
        return requests

    def _read(self, path: Path) -> str | None:
        try:
            return path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            return log_and_return_default(logger, e, {"path": str(path)}, None, "Artifact read")
