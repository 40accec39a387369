"""
Request and response models for the Hygieia API

Each request model knows how to render its JSON body (to_payload); the
field names follow the Hygieia API contract.
"""

import json
from dataclasses import dataclass, field
from typing import Any

from hygieia_publisher.domain.build import BuildStatus, ReferencePair, Stage
from hygieia_publisher.errors import ResponseParseError

HTTP_CREATED = 201


@dataclass
class HygieiaResponse:
    """
    Status code and raw body of one Hygieia API call.

    Attributes:
        status_code: HTTP status code
        body: Raw response body
    """

    status_code: int
    body: str = ""

    @property
    def is_created(self) -> bool:
        return self.status_code == HTTP_CREATED

    def __str__(self) -> str:
        return f"HygieiaResponse{{responseCode={self.status_code}, responseValue='{self.body}'}}"


@dataclass
class BuildDataCreateRequest:
    """Body of POST /v3/builds."""

    job_name: str
    job_url: str
    build_url: str
    instance_url: str
    number: str
    build_status: BuildStatus
    start_time: int
    nice_name: str = ""
    end_time: int | None = None
    duration: int | None = None
    started_by: str | None = None
    stages: list[Stage] | None = None
    client_reference: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "jobName": self.job_name,
            "jobUrl": self.job_url,
            "buildUrl": self.build_url,
            "instanceUrl": self.instance_url,
            "number": self.number,
            "niceName": self.nice_name,
            "buildStatus": self.build_status.value,
            "startTime": self.start_time,
            "clientReference": self.client_reference,
        }
        if self.end_time is not None:
            payload["endTime"] = self.end_time
        if self.duration is not None:
            payload["duration"] = self.duration
        if self.started_by is not None:
            payload["startedBy"] = self.started_by
        if self.stages is not None:
            payload["stages"] = [stage.to_payload() for stage in self.stages]
        return payload


@dataclass
class CodeQualityCreateRequest:
    """
    Body of POST /quality/static-analysis.

    hygieia_id carries the "{id},{collectorItemId}" token of the build the
    analysis belongs to.
    """

    project_name: str
    project_url: str = ""
    server_url: str = ""
    nice_name: str = ""
    project_version: str = ""
    hygieia_id: str | None = None
    timestamp: int | None = None
    metrics: list[dict[str, Any]] = field(default_factory=list)
    client_reference: str | None = None
    build_url: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "projectName": self.project_name,
            "projectUrl": self.project_url,
            "serverUrl": self.server_url,
            "niceName": self.nice_name,
            "projectVersion": self.project_version,
            "hygieiaId": self.hygieia_id,
            "timestamp": self.timestamp,
            "metrics": self.metrics,
            "clientReference": self.client_reference,
            "buildUrl": self.build_url,
        }


@dataclass
class GenericCollectorItemCreateRequest:
    """Body of POST /generic-item."""

    tool_name: str
    raw_data: str
    source: str = ""
    build_id: str | None = None
    client_reference: str | None = None
    build_url: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "toolName": self.tool_name,
            "rawData": self.raw_data,
            "source": self.source,
            "buildId": self.build_id,
            "clientReference": self.client_reference,
            "buildUrl": self.build_url,
        }


@dataclass
class BuildDataCreateResponse:
    """Parsed body of a 201 response from POST /v3/builds."""

    id: str
    collector_item_id: str
    dashboard_id: str | None = None
    client_reference: str | None = None
    build_url: str | None = None

    @classmethod
    def from_json(cls, body: str) -> "BuildDataCreateResponse":
        """
        Parse a build create response body.

        Args:
            body: Raw JSON body

        Returns:
            Parsed response

        Raises:
            ResponseParseError: If the body is not a JSON object or lacks
                id / collectorItemId
        """
        try:
            data = json.loads(body)
        except (json.JSONDecodeError, TypeError) as e:
            raise ResponseParseError(f"Build response is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ResponseParseError(f"Build response must be a JSON object, got {type(data).__name__}")

        created_id = data.get("id")
        collector_item_id = data.get("collectorItemId")
        if created_id in (None, "") or collector_item_id in (None, ""):
            raise ResponseParseError("Build response is missing id or collectorItemId")

        dashboard_id = data.get("dashboardId")
        return cls(
            id=str(created_id),
            collector_item_id=str(collector_item_id),
            dashboard_id=str(dashboard_id) if dashboard_id not in (None, "") else None,
            client_reference=data.get("clientReference"),
            build_url=data.get("buildUrl"),
        )

    def to_reference(self) -> ReferencePair:
        return ReferencePair(
            created_entity_id=self.id,
            collector_item_id=self.collector_item_id,
            client_reference=self.client_reference,
            build_url=self.build_url,
        )
