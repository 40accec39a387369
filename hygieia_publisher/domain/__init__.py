"""
Domain Models - Type-safe data structures for build publishing

This package contains dataclasses for:
    - build: BuildEventContext, BuildStatus, Stage, ReferencePair
    - requests: Hygieia request bodies and responses

Usage:
    from hygieia_publisher.domain import BuildEventContext, ReferencePair

    pair = ReferencePair(created_entity_id="5", collector_item_id="9")
    print(pair.correlation_token)  # "5,9"
"""

from .build import FAILED, BuildEventContext, BuildStatus, ReferencePair, Stage
from .requests import (
    HTTP_CREATED,
    BuildDataCreateRequest,
    BuildDataCreateResponse,
    CodeQualityCreateRequest,
    GenericCollectorItemCreateRequest,
    HygieiaResponse,
)

__all__ = [
    # Build domain
    "FAILED",
    "BuildEventContext",
    "BuildStatus",
    "Stage",
    "ReferencePair",
    # Hygieia API
    "HTTP_CREATED",
    "HygieiaResponse",
    "BuildDataCreateRequest",
    "BuildDataCreateResponse",
    "CodeQualityCreateRequest",
    "GenericCollectorItemCreateRequest",
]
