"""
Publish outcomes.

Publishers report what happened as values; the listener decides what to
print and whether the next step for the endpoint runs.
"""

from dataclasses import dataclass
from enum import Enum

from hygieia_publisher.domain.build import ReferencePair


class BuildPublishStatus(str, Enum):
    PUBLISHED = "published"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class BuildPublishOutcome:
    """
    Result of a build create call against one endpoint.

    Attributes:
        status: PUBLISHED, FAILED (call made, no usable response) or SKIPPED
        reference: Identifiers of the created build (PUBLISHED only)
        dashboard_link: Deep link to the dashboard showing the build, if any
        message: Console line describing the outcome
    """

    status: BuildPublishStatus
    reference: ReferencePair | None = None
    dashboard_link: str | None = None
    message: str | None = None

    @property
    def published(self) -> bool:
        return self.status is BuildPublishStatus.PUBLISHED

    @property
    def failed(self) -> bool:
        return self.status is BuildPublishStatus.FAILED

    @classmethod
    def skipped(cls, message: str | None = None) -> "BuildPublishOutcome":
        return cls(status=BuildPublishStatus.SKIPPED, message=message)

    @classmethod
    def failure(cls, message: str) -> "BuildPublishOutcome":
        return cls(status=BuildPublishStatus.FAILED, message=message)


@dataclass(frozen=True)
class PublishOutcome:
    """
    Result of one quality or generic item publish step.

    attempted is False when nothing was sent (disabled, or no payload).
    """

    success: bool
    message: str | None = None
    attempted: bool = True

    @classmethod
    def not_attempted(cls, message: str | None = None) -> "PublishOutcome":
        return cls(success=True, message=message, attempted=False)
