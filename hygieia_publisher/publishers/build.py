"""
Build Publisher

Creates the build record on one Hygieia endpoint and turns a 201 response
into the ReferencePair that the quality and generic item publishers attach
to their own calls.

Usage:
    publisher = BuildPublisher(config)
    outcome = publisher.publish_completed(service, build, stages, "jdoe", "https://hygieia.example.com")
    if outcome.published:
        print(outcome.reference.correlation_token)  # "5,9"
        print(outcome.dashboard_link)               # ".../dashboards/3"
"""

from hygieia_publisher.collectors.hygieia_service import HygieiaService
from hygieia_publisher.core import get_logger
from hygieia_publisher.domain.build import BuildEventContext, BuildStatus, Stage
from hygieia_publisher.domain.requests import BuildDataCreateRequest, BuildDataCreateResponse
from hygieia_publisher.errors import HygieiaTransportError, ResponseParseError
from hygieia_publisher.publishers.results import BuildPublishOutcome, BuildPublishStatus
from hygieia_publisher.secure_config import PublisherConfig

logger = get_logger(__name__)

DASHBOARD_URI = "/dashboards/"


def build_dashboard_link(dashboard_url: str | None, dashboard_id: str | None) -> str | None:
    """
    Deep link to a dashboard, or None unless both parts are known.

    Example:
        >>> build_dashboard_link("http://a/dash", "3")
        'http://a/dash/dashboards/3'
    """
    if not dashboard_url or not dashboard_id:
        return None
    return f"{dashboard_url.rstrip('/')}{DASHBOARD_URI}{dashboard_id}"


class BuildPublisher:
    """Builds and submits build create requests for start and completion events."""

    def __init__(self, config: PublisherConfig):
        self.config = config

    def publish_started(self, service: HygieiaService, build: BuildEventContext) -> BuildPublishOutcome:
        """
        Publish an in-progress build record on build start.

        Args:
            service: Client for the target endpoint
            build: Build snapshot

        Returns:
            BuildPublishOutcome; SKIPPED when build data publishing is disabled
        """
        if not self.config.publish_build_data:
            return BuildPublishOutcome.skipped()

        request = BuildDataCreateRequest(
            job_name=build.job_name,
            job_url=build.job_url,
            build_url=build.build_url,
            instance_url=build.instance_url,
            number=build.build_number,
            build_status=BuildStatus.IN_PROGRESS,
            start_time=build.start_time_millis,
            nice_name=self.config.instance_name,
            # No client reference is known this early in the build
            client_reference=None,
        )
        return self._submit(service, request, dashboard_url=None, label="Build Started Data")

    def publish_completed(
        self,
        service: HygieiaService,
        build: BuildEventContext,
        stages: list[Stage] | None,
        started_by: str | None,
        dashboard_url: str | None = None,
    ) -> BuildPublishOutcome:
        """
        Publish the completed build with its stage breakdown.

        Args:
            service: Client for the target endpoint
            build: Build snapshot
            stages: Enriched stages, a partial list, or None
            started_by: User that triggered the build
            dashboard_url: Dashboard UI base URL paired with this endpoint

        Returns:
            BuildPublishOutcome with reference and dashboard link on success
        """
        if not self.config.publish_build_data:
            return BuildPublishOutcome.skipped()

        request = BuildDataCreateRequest(
            job_name=build.job_name,
            job_url=build.job_url,
            build_url=build.build_url,
            instance_url=build.instance_url,
            number=build.build_number,
            build_status=build.status,
            start_time=build.start_time_millis,
            end_time=build.end_time_millis,
            duration=build.duration_millis,
            nice_name=self.config.instance_name,
            started_by=started_by,
            stages=stages,
        )
        return self._submit(service, request, dashboard_url=dashboard_url, label="Build Complete Data")

    def _submit(
        self,
        service: HygieiaService,
        request: BuildDataCreateRequest,
        dashboard_url: str | None,
        label: str,
    ) -> BuildPublishOutcome:
        endpoint = service.api_url
        try:
            response = service.publish_build_data(request)
        except HygieiaTransportError as e:
            logger.warning(f"Build publish to {endpoint} failed: {e}")
            return BuildPublishOutcome.failure(f"Failed Publishing {label} to {endpoint}. {e}")

        if not response.is_created:
            return BuildPublishOutcome.failure(f"Failed Publishing {label} to {endpoint}. {response}")

        try:
            parsed = BuildDataCreateResponse.from_json(response.body)
        except ResponseParseError as e:
            logger.warning(f"Unreadable build response from {endpoint}: {e}")
            return BuildPublishOutcome.failure(
                f"Publishing {label} to {endpoint}, however error reading response: {e}"
            )

        reference = parsed.to_reference()
        return BuildPublishOutcome(
            status=BuildPublishStatus.PUBLISHED,
            reference=reference,
            dashboard_link=build_dashboard_link(dashboard_url, parsed.dashboard_id),
            message=(
                f"Auto Published {label} to {endpoint}. Response Code: {response.status_code}. "
                f"{reference.correlation_token}"
            ),
        )
