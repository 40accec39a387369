"""
Generic collector item publisher.

Publishes user-configured workspace artifacts (security scan reports, test
summaries, ...) as Hygieia generic collector items. Each configured item is
published either on build start or on completion, never both.
"""

from typing import Protocol

from hygieia_publisher.collectors.hygieia_service import HygieiaService
from hygieia_publisher.core import get_logger
from hygieia_publisher.domain.build import BuildEventContext, ReferencePair
from hygieia_publisher.domain.requests import GenericCollectorItemCreateRequest
from hygieia_publisher.errors import HygieiaTransportError
from hygieia_publisher.publishers.results import PublishOutcome
from hygieia_publisher.secure_config import GenericCollectorItemConfig, PublisherConfig
from hygieia_publisher.utils.error_handling import log_and_continue

logger = get_logger(__name__)


class ArtifactExtractor(Protocol):
    """Source of generic collector item payloads for a build."""

    def extract(
        self,
        build: BuildEventContext,
        tool_name: str,
        pattern: str,
        correlation_token: str | None,
    ) -> list[GenericCollectorItemCreateRequest]: ...


class GenericItemPublisher:
    """
    Publishes configured generic collector items to one endpoint.

    Failures are isolated per artifact and per configured item: one bad
    report never stops the others.
    """

    def __init__(self, config: PublisherConfig, extractor: ArtifactExtractor):
        self.config = config
        self.extractor = extractor

    def items_for(self, on_start: bool) -> list[GenericCollectorItemConfig]:
        """Configured items belonging to the start (True) or completion (False) event."""
        return [item for item in self.config.generic_items if item.publish_on_start is on_start]

    def publish_on_start(
        self, service: HygieiaService, build: BuildEventContext, reference: ReferencePair | None
    ) -> list[PublishOutcome]:
        return self._publish(service, build, reference, self.items_for(on_start=True))

    def publish_on_end(
        self, service: HygieiaService, build: BuildEventContext, reference: ReferencePair | None
    ) -> list[PublishOutcome]:
        return self._publish(service, build, reference, self.items_for(on_start=False))

    def _publish(
        self,
        service: HygieiaService,
        build: BuildEventContext,
        reference: ReferencePair | None,
        items: list[GenericCollectorItemConfig],
    ) -> list[PublishOutcome]:
        outcomes: list[PublishOutcome] = []
        token = reference.correlation_token if reference else None

        for item in items:
            try:
                requests = self.extractor.extract(build, item.tool_name, item.pattern, token)
            except Exception as e:  # extractors are pluggable and may raise anything
                log_and_continue(logger, e, {"tool": item.tool_name, "pattern": item.pattern}, "Artifact extraction")
                outcomes.append(
                    PublishOutcome(success=False, message=f"Error Auto Publishing Generic Collector Item data.\n{e}")
                )
                continue

            for request in requests or []:
                if reference is not None:
                    reference.attach_to(request)
                outcomes.append(self._send(service, request))

        return outcomes

    def _send(self, service: HygieiaService, request: GenericCollectorItemCreateRequest) -> PublishOutcome:
        try:
            response = service.publish_generic_item(request)
        except HygieiaTransportError as e:
            log_and_continue(logger, e, {"tool": request.tool_name, "source": request.source}, "Generic item publish")
            return PublishOutcome(success=False, message=f"Failed Auto Publishing {request.tool_name} Data. {e}")

        if response.is_created:
            return PublishOutcome(success=True, message=f"Auto Published {request.tool_name} Data. {response}")
        return PublishOutcome(success=False, message=f"Failed Auto Publishing {request.tool_name} Data. {response}")
