"""
Code quality publisher.

The quality payload itself comes from a pluggable QualityMetricExtractor
(a static analysis integration). This module only decides whether to
publish, correlates the payload with the build and reports the outcome.
"""

from typing import Protocol

from hygieia_publisher.collectors.hygieia_service import HygieiaService
from hygieia_publisher.core import get_logger
from hygieia_publisher.domain.build import BuildEventContext, ReferencePair
from hygieia_publisher.domain.requests import CodeQualityCreateRequest
from hygieia_publisher.errors import HygieiaTransportError
from hygieia_publisher.publishers.results import PublishOutcome
from hygieia_publisher.secure_config import PublisherConfig
from hygieia_publisher.utils.error_handling import log_and_continue

logger = get_logger(__name__)


class QualityMetricExtractor(Protocol):
    """Source of code quality payloads for a build."""

    def extract(
        self,
        build: BuildEventContext,
        instance_name: str,
        correlation_token: str | None,
        use_proxy: bool,
    ) -> CodeQualityCreateRequest | None:
        """
        Build the quality payload for a build, or None if there is none.

        correlation_token is the "{id},{collectorItemId}" string of the
        build record; extractors store it as the payload's hygieiaId.

        Raises:
            ExtractionError: If analysis results exist but cannot be read
        """
        ...


class NullQualityExtractor:
    """Extractor used when no static analysis integration is installed."""

    def extract(
        self,
        build: BuildEventContext,
        instance_name: str,
        correlation_token: str | None,
        use_proxy: bool,
    ) -> CodeQualityCreateRequest | None:
        return None


class QualityPublisher:
    """Publishes code quality data correlated with a build record."""

    def __init__(self, config: PublisherConfig, extractor: QualityMetricExtractor):
        self.config = config
        self.extractor = extractor

    def publish(
        self,
        service: HygieiaService,
        build: BuildEventContext,
        reference: ReferencePair | None,
    ) -> PublishOutcome:
        """
        Extract and publish quality data to one endpoint.

        Args:
            service: Client for the target endpoint
            build: Build snapshot
            reference: Build identifiers from this endpoint, None if unavailable

        Returns:
            PublishOutcome; not attempted when disabled or nothing to publish
        """
        if not self.config.publish_quality_data:
            return PublishOutcome.not_attempted()

        token = reference.correlation_token if reference else None
        try:
            request = self.extractor.extract(build, self.config.instance_name, token, self.config.use_proxy)
        except Exception as e:  # extractors are pluggable and may raise anything
            log_and_continue(logger, e, {"build_url": build.build_url}, "Code quality extraction")
            return PublishOutcome(success=False, message=f"Error Auto Publishing Code Quality Data.\n{e}")

        if request is None:
            return PublishOutcome.not_attempted("Auto Published Code Quality Result. Nothing to publish")

        if reference is not None:
            # Server-side correlation wins over whatever the extractor guessed
            reference.attach_to(request)

        try:
            response = service.publish_code_quality(request)
        except HygieiaTransportError as e:
            log_and_continue(logger, e, {"endpoint": service.api_url}, "Code quality publish")
            return PublishOutcome(success=False, message=f"Failed Auto Publishing Code Quality Data. {e}")

        if response.is_created:
            return PublishOutcome(success=True, message=f"Auto Published Code Quality Data. {response}")
        return PublishOutcome(success=False, message=f"Failed Auto Publishing Code Quality Data. {response}")
