"""
Publishers - Build, code quality and generic collector item publishing

Each publisher targets one endpoint per call and reports an outcome value;
the listener prints outcomes and decides what runs next.
"""

from .build import BuildPublisher, build_dashboard_link
from .generic_items import ArtifactExtractor, GenericItemPublisher
from .quality import NullQualityExtractor, QualityMetricExtractor, QualityPublisher
from .results import BuildPublishOutcome, BuildPublishStatus, PublishOutcome

__all__ = [
    "BuildPublisher",
    "build_dashboard_link",
    "QualityPublisher",
    "QualityMetricExtractor",
    "NullQualityExtractor",
    "GenericItemPublisher",
    "ArtifactExtractor",
    "BuildPublishOutcome",
    "BuildPublishStatus",
    "PublishOutcome",
]
