"""
Pytest configuration and shared fixtures

Provides builds, configuration and a URL-routed mock HTTP client so tests
can drive the real service client without any network access.
"""

import pytest

from hygieia_publisher.collectors.hygieia_service import HygieiaService
from hygieia_publisher.domain.build import BuildEventContext
from hygieia_publisher.secure_config import GenericCollectorItemConfig, PublisherConfig
from tests.fakes import BUILD_URL, INSTANCE_URL, RoutedHTTPClient


# ===== Domain Fixtures =====


@pytest.fixture
def pipeline_build():
    """A completed, failed pipeline build"""
    return BuildEventContext(
        job_name="payments/api",
        job_url="https://ci.example.com/job/payments/job/api/",
        build_url=BUILD_URL,
        instance_url=INSTANCE_URL,
        build_number="42",
        start_time_millis=1_760_000_000_000,
        result="FAILURE",
        triggering_user="jdoe",
        duration_millis=93_000,
        is_pipeline=True,
        display_name="api",
    )


@pytest.fixture
def freestyle_build():
    """A completed freestyle build (no stage support)"""
    return BuildEventContext(
        job_name="legacy-nightly",
        job_url="https://ci.example.com/job/legacy-nightly/",
        build_url="https://ci.example.com/job/legacy-nightly/7/",
        instance_url=INSTANCE_URL,
        build_number="7",
        start_time_millis=1_760_000_000_000,
        result="SUCCESS",
        triggering_user="timer",
        duration_millis=5_000,
        is_pipeline=False,
    )


@pytest.fixture
def publisher_config():
    """Configuration with every kind of publishing enabled"""
    return PublisherConfig(
        api_urls="http://a/api,http://b/api",
        app_urls="http://a/dash,",
        api_token="hygieia-token",
        instance_name="ci-main",
        jenkins_user_id="svc-hygieia",
        jenkins_token="jenkins-token",
        publish_build_data=True,
        publish_quality_data=True,
        capture_logs=True,
        show_console_output=True,
        generic_items=[
            GenericCollectorItemConfig(tool_name="Checkmarx", pattern="reports/cx-*.json", publish_on_start=True),
            GenericCollectorItemConfig(tool_name="JUnit", pattern="reports/junit-*.xml", publish_on_start=False),
        ],
    )


# ===== HTTP Fixtures =====


@pytest.fixture
def http_client():
    """Empty routed HTTP client; tests add routes as needed"""
    return RoutedHTTPClient()


@pytest.fixture
def service(http_client):
    """Real HygieiaService for http://a/api over the routed mock client"""
    return HygieiaService(api_url="http://a/api", token="hygieia-token", instance_name="ci-main", http_client=http_client)


@pytest.fixture
def created_body():
    """Body of a successful build create on endpoint a"""
    return {
        "id": "5",
        "collectorItemId": "9",
        "dashboardId": "3",
        "clientReference": "client-ref-1",
        "buildUrl": BUILD_URL,
    }
