"""
Data Collectors - Read data from external systems

This package contains:
    - hygieia_service: Hygieia API client (also used for build runtime reads)
    - jenkins_stages: Pipeline stage discovery and enrichment
    - workspace_artifacts: Generic collector item extraction from the workspace
"""

__all__ = []
