"""
Hygieia Build Listener

Entry point called by the build runtime on build start and completion.
For every configured Hygieia endpoint, in order, it runs:

    start:       build record (InProgress) -> on-start generic items
    completion:  stage enrichment -> build record -> code quality
                 -> on-end generic items -> dashboard link

Every failure is reported as a console line; neither method ever raises
into the build runtime, and nothing is remembered between events.

Usage:
    from hygieia_publisher.listener import HygieiaBuildListener
    from hygieia_publisher.secure_config import get_config

    listener = HygieiaBuildListener(get_config().get_publisher_config())
    listener.on_build_started(build, sys.stdout)
    ...
    listener.on_build_completed(build, sys.stdout)
"""

from collections.abc import Callable
from datetime import datetime
from typing import TextIO

from hygieia_publisher.collectors.hygieia_service import HygieiaService, create_hygieia_service
from hygieia_publisher.collectors.jenkins_stages import StageEnrichmentPipeline
from hygieia_publisher.collectors.workspace_artifacts import WorkspaceArtifactExtractor
from hygieia_publisher.core import BuildConsole, get_logger, log_with_context
from hygieia_publisher.domain.build import BuildEventContext, Stage
from hygieia_publisher.endpoints import Endpoint, resolve_endpoints
from hygieia_publisher.errors import StageEnrichmentError
from hygieia_publisher.publishers import (
    ArtifactExtractor,
    BuildPublisher,
    GenericItemPublisher,
    NullQualityExtractor,
    PublishOutcome,
    QualityMetricExtractor,
    QualityPublisher,
)
from hygieia_publisher.secure_config import PublisherConfig
from hygieia_publisher.utils.error_handling import log_and_continue

logger = get_logger(__name__)

ServiceFactory = Callable[[PublisherConfig, str], HygieiaService]


class HygieiaBuildListener:
    """
    Publishes build events to every configured Hygieia endpoint.

    Configuration is injected once; the listener holds no per-build state,
    so calling it twice for the same build behaves the same both times.

    Attributes:
        config: Publisher configuration
        service_factory: Builds the client for one endpoint URL
        clock: Wall clock used for the completion timing line
    """

    def __init__(
        self,
        config: PublisherConfig,
        service_factory: ServiceFactory = create_hygieia_service,
        quality_extractor: QualityMetricExtractor | None = None,
        artifact_extractor: ArtifactExtractor | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = config
        self.service_factory = service_factory
        self.clock = clock
        self.build_publisher = BuildPublisher(config)
        self.quality_publisher = QualityPublisher(config, quality_extractor or NullQualityExtractor())
        self.generic_item_publisher = GenericItemPublisher(config, artifact_extractor or WorkspaceArtifactExtractor())

    # ==============================
    # Build events
    # ==============================

    def on_build_started(self, build: BuildEventContext, log_stream: TextIO) -> None:
        """
        Publish the build start to every endpoint.

        Args:
            build: Build snapshot
            log_stream: The build's console stream
        """
        console = BuildConsole(log_stream, enabled=self.config.show_console_output)

        endpoints = resolve_endpoints(self.config.api_urls, self.config.app_urls)
        if not endpoints:
            console.hygieia("Skipping Automatic publish to Hygieia as no service endpoints were configured.")
            return

        if not self.config.publish_enabled:
            console.hygieia("Skipping Automatic publish to Hygieia as publish is disabled in Global Configuration.")
            return

        if self.config.is_job_excluded(build.job_name, build.display_name):
            console.hygieia("Skipping Automatic publish to Hygieia as the job was excluded in global configuration.")
            return

        for endpoint in endpoints:
            self._run_for_endpoint(self._publish_started, endpoint, build, console)

    def on_build_completed(self, build: BuildEventContext, log_stream: TextIO) -> None:
        """
        Publish the completed build to every endpoint.

        Args:
            build: Build snapshot
            log_stream: The build's console stream
        """
        if not self.config.publish_enabled:
            logger.debug(f"Publishing disabled, ignoring completion of {build.build_url}")
            return

        started_at = self.clock()
        console = BuildConsole(log_stream, enabled=self.config.show_console_output)
        console.println(f"Finished: {build.result}")

        if self.config.is_job_excluded(build.job_name, build.display_name):
            console.hygieia("Skipping Automatic publish to Hygieia as the job was excluded in global configuration.")
            return

        console.hygieia(
            f"Automatically publishing build data to Hygieia using {self.config.plugin_version_info}, "
            "Please refresh your browser to see the status."
        )

        endpoints = resolve_endpoints(self.config.api_urls, self.config.app_urls)
        if not endpoints:
            console.hygieia("Skipping Automatic publish to Hygieia as no service endpoints were configured.")
            return

        for endpoint in endpoints:
            self._run_for_endpoint(self._publish_completed, endpoint, build, console)

        finished_at = self.clock()
        elapsed = int((finished_at - started_at).total_seconds())
        console.hygieia(
            f"*** Hygieia publish completed in {elapsed} seconds at "
            f"{finished_at.isoformat(timespec='milliseconds')} ***"
        )

    # ==============================
    # Per-endpoint sequences
    # ==============================

    def _run_for_endpoint(
        self,
        sequence: Callable[[HygieiaService, Endpoint, BuildEventContext, BuildConsole], None],
        endpoint: Endpoint,
        build: BuildEventContext,
        console: BuildConsole,
    ) -> None:
        """Run one endpoint's publish sequence; a failure there never reaches the next endpoint."""
        try:
            service = self.service_factory(self.config, endpoint.service_url)
        except Exception as e:  # service factories are pluggable
            log_and_continue(logger, e, {"endpoint": endpoint.service_url}, "Hygieia client setup")
            console.hygieia(f"Skipping API Endpoint {endpoint.display_number}: {e}")
            return

        try:
            sequence(service, endpoint, build, console)
        except Exception as e:  # last-resort isolation per endpoint
            logger.exception(f"Unexpected error publishing to {endpoint.service_url}")
            console.hygieia(f"Unexpected error publishing to {endpoint.service_url}: {e}")
        finally:
            service.close()

    def _publish_started(
        self, service: HygieiaService, endpoint: Endpoint, build: BuildEventContext, console: BuildConsole
    ) -> None:
        outcome = self.build_publisher.publish_started(service, build)
        if outcome.message:
            console.hygieia(outcome.message)
        if outcome.failed:
            return

        self._report(console, self.generic_item_publisher.publish_on_start(service, build, outcome.reference))

    def _publish_completed(
        self, service: HygieiaService, endpoint: Endpoint, build: BuildEventContext, console: BuildConsole
    ) -> None:
        stages = None
        if self.config.publish_build_data:
            stages = self._enrich_stages(service, build, console)
            console.hygieia(f"This build was initiated by {build.triggering_user}")

        outcome = self.build_publisher.publish_completed(
            service, build, stages, build.triggering_user, endpoint.dashboard_url
        )
        if outcome.message:
            console.hygieia(outcome.message)

        log_with_context(
            logger,
            "info",
            "Endpoint build publish finished",
            endpoint=endpoint.service_url,
            build_url=build.build_url,
            status=outcome.status.value,
        )
        if outcome.failed:
            return

        self._report(console, [self.quality_publisher.publish(service, build, outcome.reference)])
        self._report(console, self.generic_item_publisher.publish_on_end(service, build, outcome.reference))

        if outcome.dashboard_link:
            console.hygieia(
                f"Link to the Hygieia Dashboard for API Endpoint {endpoint.display_number} - {outcome.dashboard_link}"
            )

    def _enrich_stages(
        self, service: HygieiaService, build: BuildEventContext, console: BuildConsole
    ) -> list[Stage] | None:
        """Stage breakdown for pipeline builds; partial or None when enrichment fails."""
        if not build.is_pipeline:
            return None

        pipeline = StageEnrichmentPipeline(
            service,
            build.instance_url,
            self.config.jenkins_user_id,
            self.config.jenkins_token,
            capture_logs=self.config.capture_logs,
        )
        try:
            return pipeline.enrich(build)
        except StageEnrichmentError as e:
            log_and_continue(logger, e, {"build_url": build.build_url, "phase": e.phase}, "Stage enrichment")
            console.hygieia(f"Cause for Jenkins API call failure : {e.root_cause}")
            return e.stages

    @staticmethod
    def _report(console: BuildConsole, outcomes: list[PublishOutcome]) -> None:
        for outcome in outcomes:
            if outcome.message:
                console.hygieia(outcome.message)
