"""
Pipeline Stage Enrichment

Reads the stage breakdown of a pipeline build from the build runtime's
workflow API (wfapi) and enriches it in three sequential phases:

    1. discover_stages       GET {build_url}/wfapi/describe
    2. resolve_node_links    GET each stage's "self" link, record its log URL
    3. capture_failure_logs  GET the log of each FAILED stage (if enabled)

Every phase is a no-op on an empty stage list. Any failure aborts the whole
enrichment with a StageEnrichmentError that carries the stages enriched so
far, so the build can still be published with partial stage data.

Usage:
    pipeline = StageEnrichmentPipeline(
        service, build.instance_url, user_id, token, capture_logs=True
    )
    try:
        stages = pipeline.enrich(build)
    except StageEnrichmentError as e:
        stages = e.stages
"""

import json
from typing import Any

from hygieia_publisher.collectors.hygieia_service import HygieiaService
from hygieia_publisher.core import get_logger
from hygieia_publisher.domain.build import BuildEventContext, Stage
from hygieia_publisher.errors import HygieiaTransportError, StageEnrichmentError

logger = get_logger(__name__)

WFAPI_DESCRIBE = "/wfapi/describe"

# Malformed upstream data surfaces as one of these while walking the JSON
_ENRICHMENT_ERRORS = (HygieiaTransportError, ValueError, KeyError, TypeError, AttributeError)


class StageEnrichmentPipeline:
    """
    Stage discovery and enrichment for one build against one build runtime.

    Attributes:
        service: Client used for the authenticated build runtime reads
        instance_url: Build runtime base URL that relative links resolve against
        capture_logs: Fetch log text for failed stages
    """

    def __init__(
        self,
        service: HygieiaService,
        instance_url: str,
        user_id: str,
        token: str,
        capture_logs: bool = False,
    ):
        self.service = service
        self.instance_url = (instance_url or "").rstrip("/")
        self.user_id = user_id
        self.token = token
        self.capture_logs = capture_logs

    def enrich(self, build: BuildEventContext) -> list[Stage]:
        """
        Run all three phases for a build.

        Args:
            build: Build snapshot

        Returns:
            Enriched stages in pipeline order (empty for non-pipeline builds)

        Raises:
            StageEnrichmentError: If any phase fails; e.stages holds partial data
        """
        stages = self.discover_stages(build)
        self.resolve_node_links(stages)
        self.capture_failure_logs(stages)
        return stages

    # ==============================
    # Phases
    # ==============================

    def discover_stages(self, build: BuildEventContext) -> list[Stage]:
        """
        Fetch the flat stage list of a pipeline build.

        Freestyle builds have no stages and are skipped without a call.

        Raises:
            StageEnrichmentError: If the describe call or its parsing fails
        """
        if not build.is_pipeline:
            return []

        url = build.build_url.rstrip("/") + WFAPI_DESCRIBE
        try:
            response = self.service.get_stage_response(url, self.user_id, self.token)
            describe = json.loads(response.body)
            if not isinstance(describe, dict) or not isinstance(describe.get("stages"), list):
                logger.info(f"No stage data for {build.build_url}")
                return []
            stages = [Stage.from_describe(entry) for entry in describe["stages"]]
        except _ENRICHMENT_ERRORS as e:
            raise StageEnrichmentError(f"Stage discovery failed - {e}", phase="discovery", stages=None) from e

        logger.debug(f"Discovered {len(stages)} stages for {build.build_url}")
        return stages

    def resolve_node_links(self, stages: list[Stage]) -> list[Stage]:
        """
        Populate exec_node_log_url of each stage from its execution node.

        Raises:
            StageEnrichmentError: On a missing self link or a failed node read
        """
        if not stages:
            return stages

        for stage in stages:
            try:
                node_url = self._resolve(self._self_href(stage))
                response = self.service.get_stage_response(node_url, self.user_id, self.token)
                stage.exec_node_log_url = self._parse_log_href(json.loads(response.body))
            except _ENRICHMENT_ERRORS as e:
                raise StageEnrichmentError(
                    f"Node link resolution failed for stage '{stage.name}' - {e}", phase="node_links", stages=stages
                ) from e
        return stages

    def capture_failure_logs(self, stages: list[Stage]) -> list[Stage]:
        """
        Store the log text of failed stages when log capture is enabled.

        Raises:
            StageEnrichmentError: If a log read fails
        """
        if not stages or not self.capture_logs:
            return stages

        for stage in stages:
            if not stage.is_failed:
                continue
            if not stage.exec_node_log_url:
                logger.info(f"Failed stage '{stage.name}' has no log link")
                continue
            try:
                response = self.service.get_stage_response(
                    self._resolve(stage.exec_node_log_url), self.user_id, self.token
                )
                stage.log = self._parse_log_text(response.body)
            except _ENRICHMENT_ERRORS as e:
                raise StageEnrichmentError(
                    f"Log capture failed for stage '{stage.name}' - {e}", phase="logs", stages=stages
                ) from e
        return stages

    # ==============================
    # Helpers
    # ==============================

    def _resolve(self, href: str) -> str:
        if href.startswith(("http://", "https://")):
            return href
        return f"{self.instance_url}/{href.lstrip('/')}"

    @staticmethod
    def _self_href(stage: Stage) -> str:
        href = stage.links["self"]["href"]
        if not isinstance(href, str) or not href:
            raise ValueError(f"stage '{stage.name}' has an empty self link")
        return href

    @staticmethod
    def _parse_log_href(node: dict[str, Any]) -> str | None:
        """
        Pick the log link from an execution node document.

        The first FAILED flow node wins; otherwise the last flow node with a
        log link; otherwise the node's own log link.
        """
        candidates = []
        for flow_node in node.get("stageFlowNodes") or []:
            href = ((flow_node.get("_links") or {}).get("log") or {}).get("href")
            if href:
                if str(flow_node.get("status", "")).upper() == "FAILED":
                    return href
                candidates.append(href)
        if candidates:
            return candidates[-1]
        return ((node.get("_links") or {}).get("log") or {}).get("href")

    @staticmethod
    def _parse_log_text(body: str) -> str:
        try:
            data = json.loads(body)
        except json.JSONDecodeError:
            return body
        if isinstance(data, dict) and isinstance(data.get("text"), str):
            return data["text"]
        return body
