"""
Publisher Exceptions

Exception hierarchy shared by the service client, the stage enrichment
pipeline and the artifact extractors. The listener catches these at the
endpoint boundary; none of them ever reach the build runtime.

Usage:
    from hygieia_publisher.errors import HygieiaTransportError

    try:
        response = service.publish_build_data(request)
    except HygieiaTransportError as e:
        logger.warning(f"Build publish failed: {e}")
"""


class HygieiaError(Exception):
    """Base class for all publishing errors."""


class HygieiaTransportError(HygieiaError):
    """
    Raised when an HTTP call could not be completed.

    Covers connection errors, timeouts and, for build runtime reads,
    unexpected status codes.

    Attributes:
        url: Target URL of the failed call
        status_code: HTTP status when a response was received, else None
    """

    def __init__(self, message: str, url: str, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ResponseParseError(HygieiaError):
    """Raised when a successful response body cannot be interpreted."""


class StageEnrichmentError(HygieiaError):
    """
    Raised when pipeline stage enrichment has to be abandoned.

    Attributes:
        phase: Enrichment phase that failed ("discovery", "node_links", "logs")
        stages: Stages enriched before the failure (None if discovery failed)
    """

    def __init__(self, message: str, phase: str, stages: list | None = None):
        super().__init__(message)
        self.phase = phase
        self.stages = stages

    @property
    def root_cause(self) -> str:
        """Innermost cause formatted as "ClassName: message"."""
        error: BaseException = self
        while error.__cause__ is not None:
            error = error.__cause__
        return f"{error.__class__.__name__}: {error}"


class ExtractionError(HygieiaError):
    """Raised by quality and artifact extractors when a payload cannot be built."""
