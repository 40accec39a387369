"""
Build domain models - Build events, pipeline stages and correlation

Represents what the publisher knows about a build:
    - BuildEventContext: read-only snapshot taken once per event
    - BuildStatus: Hygieia build status vocabulary
    - Stage: one pipeline stage, enriched in place during publishing
    - ReferencePair: identifiers returned by a successful build create
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

FAILED = "FAILED"


class BuildStatus(str, Enum):
    """Build status values accepted by the Hygieia build API."""

    SUCCESS = "Success"
    FAILURE = "Failure"
    UNSTABLE = "Unstable"
    ABORTED = "Aborted"
    NOT_BUILT = "NotBuilt"
    IN_PROGRESS = "InProgress"
    UNKNOWN = "Unknown"

    @classmethod
    def from_result(cls, result: str | None) -> "BuildStatus":
        """
        Map a build runtime result to a Hygieia status.

        Args:
            result: Runtime result (SUCCESS, FAILURE, ...) or None while running

        Returns:
            Matching BuildStatus; UNKNOWN for unrecognised results

        Example:
            >>> BuildStatus.from_result("UNSTABLE")
            <BuildStatus.UNSTABLE: 'Unstable'>
            >>> BuildStatus.from_result(None)
            <BuildStatus.IN_PROGRESS: 'InProgress'>
        """
        if result is None:
            return cls.IN_PROGRESS
        return _RESULT_TO_STATUS.get(result.strip().upper(), cls.UNKNOWN)


_RESULT_TO_STATUS = {
    "SUCCESS": BuildStatus.SUCCESS,
    "FAILURE": BuildStatus.FAILURE,
    "UNSTABLE": BuildStatus.UNSTABLE,
    "ABORTED": BuildStatus.ABORTED,
    "NOT_BUILT": BuildStatus.NOT_BUILT,
}


@dataclass(frozen=True)
class BuildEventContext:
    """
    Snapshot of a build as delivered with a start or completion event.

    Attributes:
        job_name: Full job path (e.g., "team/service/main")
        job_url: Absolute URL of the job
        build_url: Absolute URL of this build
        instance_url: Base URL of the build runtime (no trailing slash needed)
        build_number: Build number as reported by the runtime
        start_time_millis: Build start, epoch milliseconds
        result: SUCCESS / FAILURE / UNSTABLE / ABORTED / NOT_BUILT, None while running
        triggering_user: User (or cause) that started the build
        duration_millis: Build duration, 0 while running
        is_pipeline: True if the build exposes pipeline stages
        workspace: Build workspace directory, if available on this host
        display_name: Short job name, also matched against exclusions

    Example:
        build = BuildEventContext(
            job_name="payments/api",
            job_url="https://ci.example.com/job/payments/job/api/",
            build_url="https://ci.example.com/job/payments/job/api/42/",
            instance_url="https://ci.example.com",
            build_number="42",
            start_time_millis=1760000000000,
            result="SUCCESS",
            triggering_user="jdoe",
            is_pipeline=True,
        )
    """

    job_name: str
    job_url: str
    build_url: str
    instance_url: str
    build_number: str
    start_time_millis: int
    result: str | None = None
    triggering_user: str | None = None
    duration_millis: int = 0
    is_pipeline: bool = False
    workspace: Path | None = None
    display_name: str | None = None

    @property
    def status(self) -> BuildStatus:
        return BuildStatus.from_result(self.result)

    @property
    def end_time_millis(self) -> int:
        return self.start_time_millis + self.duration_millis

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BuildEventContext":
        """
        Build a context from its camelCase JSON description.

        Raises:
            KeyError: If a required field is missing
        """
        workspace = data.get("workspace")
        return cls(
            job_name=data["jobName"],
            job_url=data["jobUrl"],
            build_url=data["buildUrl"],
            instance_url=data["instanceUrl"],
            build_number=str(data["number"]),
            start_time_millis=int(data["startTime"]),
            result=data.get("result"),
            triggering_user=data.get("startedBy"),
            duration_millis=int(data.get("duration", 0)),
            is_pipeline=bool(data.get("pipeline", False)),
            workspace=Path(workspace) if workspace else None,
            display_name=data.get("displayName"),
        )


@dataclass
class Stage:
    """
    One stage of a pipeline build.

    Created by stage discovery; exec_node_log_url and log are filled in
    place by the later enrichment phases.
    """

    stage_id: str
    name: str
    status: str
    links: dict[str, Any] = field(default_factory=dict)
    start_time_millis: int | None = None
    duration_millis: int | None = None
    exec_node_log_url: str | None = None
    log: str | None = None

    @property
    def is_failed(self) -> bool:
        return (self.status or "").upper() == FAILED

    @classmethod
    def from_describe(cls, data: dict[str, Any]) -> "Stage":
        """Build a stage from one entry of a wfapi describe document."""
        return cls(
            stage_id=str(data.get("id", "")),
            name=data.get("name", ""),
            status=data.get("status", ""),
            links=data.get("_links") or {},
            start_time_millis=data.get("startTimeMillis"),
            duration_millis=data.get("durationMillis"),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "stageId": self.stage_id,
            "name": self.name,
            "status": self.status,
            "startTimeMillis": self.start_time_millis,
            "durationMillis": self.duration_millis,
            "_links": self.links,
            "exec_node_logUrl": self.exec_node_log_url,
            "log": self.log,
        }


@dataclass(frozen=True)
class ReferencePair:
    """
    Identifiers returned by Hygieia for a created build.

    Shared by the quality and generic item publishers of the same endpoint so
    that the dashboard can associate their data with this build.

    Attributes:
        created_entity_id: Id of the created build record
        collector_item_id: Id of the collector item the build belongs to
        client_reference: Client reference echoed by the service, if any
        build_url: Build URL echoed by the service, if any
    """

    created_entity_id: str
    collector_item_id: str
    client_reference: str | None = None
    build_url: str | None = None

    @property
    def correlation_token(self) -> str:
        """Composite "{id},{collectorItemId}" string expected by extractors."""
        return f"{self.created_entity_id},{self.collector_item_id}"

    def attach_to(self, request) -> None:
        """
        Copy the echoed client reference and build URL onto a quality or
        generic item request. Fields the service did not echo leave the
        request's own values in place.
        """
        if self.client_reference is not None:
            request.client_reference = self.client_reference
        if self.build_url is not None:
            request.build_url = self.build_url
