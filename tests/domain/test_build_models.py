"""
Tests for build domain models

Tests BuildStatus mapping, BuildEventContext, Stage and ReferencePair.
"""

from pathlib import Path

import pytest

from hygieia_publisher.domain.build import BuildEventContext, BuildStatus, ReferencePair, Stage
from hygieia_publisher.domain.requests import GenericCollectorItemCreateRequest


class TestBuildStatus:
    """Test runtime result to Hygieia status mapping"""

    @pytest.mark.parametrize(
        "result,expected",
        [
            ("SUCCESS", BuildStatus.SUCCESS),
            ("FAILURE", BuildStatus.FAILURE),
            ("UNSTABLE", BuildStatus.UNSTABLE),
            ("ABORTED", BuildStatus.ABORTED),
            ("NOT_BUILT", BuildStatus.NOT_BUILT),
            ("success", BuildStatus.SUCCESS),
        ],
    )
    def test_known_results(self, result, expected):
        assert BuildStatus.from_result(result) is expected

    def test_running_build_is_in_progress(self):
        assert BuildStatus.from_result(None) is BuildStatus.IN_PROGRESS

    def test_unrecognised_result_is_unknown(self):
        assert BuildStatus.from_result("CANCELLED_BY_BOT") is BuildStatus.UNKNOWN

    def test_values_match_api_vocabulary(self):
        assert BuildStatus.IN_PROGRESS.value == "InProgress"
        assert BuildStatus.NOT_BUILT.value == "NotBuilt"


class TestBuildEventContext:
    """Test build snapshot behaviour"""

    def test_status_and_end_time(self, pipeline_build):
        assert pipeline_build.status is BuildStatus.FAILURE
        assert pipeline_build.end_time_millis == 1_760_000_000_000 + 93_000

    def test_is_immutable(self, pipeline_build):
        with pytest.raises(AttributeError):
            pipeline_build.result = "SUCCESS"

    def test_from_dict(self):
        build = BuildEventContext.from_dict(
            {
                "jobName": "payments/api",
                "jobUrl": "https://ci.example.com/job/payments/job/api/",
                "buildUrl": "https://ci.example.com/job/payments/job/api/42/",
                "instanceUrl": "https://ci.example.com",
                "number": 42,
                "startTime": "1760000000000",
                "duration": 93000,
                "result": "SUCCESS",
                "startedBy": "jdoe",
                "pipeline": True,
                "workspace": "/var/lib/ci/ws",
                "displayName": "api",
            }
        )

        assert build.build_number == "42"
        assert build.start_time_millis == 1_760_000_000_000
        assert build.triggering_user == "jdoe"
        assert build.is_pipeline is True
        assert build.workspace == Path("/var/lib/ci/ws")
        assert build.display_name == "api"

    def test_from_dict_defaults(self):
        build = BuildEventContext.from_dict(
            {"jobName": "j", "jobUrl": "u", "buildUrl": "b", "instanceUrl": "i", "number": 1, "startTime": 0}
        )

        assert build.result is None
        assert build.status is BuildStatus.IN_PROGRESS
        assert build.duration_millis == 0
        assert build.workspace is None

    def test_from_dict_missing_field_raises(self):
        with pytest.raises(KeyError):
            BuildEventContext.from_dict({"jobName": "j"})


class TestStage:
    """Test pipeline stage model"""

    def test_from_describe(self):
        stage = Stage.from_describe(
            {
                "id": 6,
                "name": "Build",
                "status": "SUCCESS",
                "startTimeMillis": 100,
                "durationMillis": 20,
                "_links": {"self": {"href": "/job/x/1/execution/node/6/wfapi/describe"}},
            }
        )

        assert stage.stage_id == "6"
        assert stage.links["self"]["href"].endswith("/node/6/wfapi/describe")
        assert stage.exec_node_log_url is None
        assert stage.log is None

    @pytest.mark.parametrize("status,failed", [("FAILED", True), ("failed", True), ("SUCCESS", False), ("", False)])
    def test_is_failed(self, status, failed):
        assert Stage(stage_id="1", name="Test", status=status).is_failed is failed

    def test_to_payload(self):
        stage = Stage(stage_id="6", name="Test", status="FAILED", exec_node_log_url="/log/7", log="boom")

        payload = stage.to_payload()

        assert payload["stageId"] == "6"
        assert payload["exec_node_logUrl"] == "/log/7"
        assert payload["log"] == "boom"
        assert payload["_links"] == {}


class TestReferencePair:
    """Test build correlation identifiers"""

    def test_correlation_token(self):
        reference = ReferencePair(created_entity_id="5", collector_item_id="9")

        assert reference.correlation_token == "5,9"

    def test_attach_to_copies_echoed_fields(self):
        request = GenericCollectorItemCreateRequest(tool_name="JUnit", raw_data="{}", source="a.xml", build_url="own")
        reference = ReferencePair(created_entity_id="5", collector_item_id="9", client_reference="ref-1", build_url="echo")

        reference.attach_to(request)

        assert request.client_reference == "ref-1"
        assert request.build_url == "echo"

    def test_attach_to_keeps_values_not_echoed(self):
        request = GenericCollectorItemCreateRequest(
            tool_name="JUnit", raw_data="{}", source="a.xml", client_reference="own-ref", build_url="own"
        )

        ReferencePair(created_entity_id="5", collector_item_id="9").attach_to(request)

        assert request.client_reference == "own-ref"
        assert request.build_url == "own"
