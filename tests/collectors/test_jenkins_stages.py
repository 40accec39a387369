"""
Tests for pipeline stage enrichment

Test Coverage:
- Discovery (non-pipeline short-circuit, describe parsing, failures)
- Node link resolution (log link choice, partial results on failure)
- Failure log capture (enabled/disabled, failed stages only)
- Full enrich() sequence
"""

import dataclasses

import pytest

from hygieia_publisher.collectors.jenkins_stages import WFAPI_DESCRIBE, StageEnrichmentPipeline
from hygieia_publisher.domain.build import Stage
from hygieia_publisher.errors import StageEnrichmentError
from tests.fakes import BUILD_URL, INSTANCE_URL, make_response

DESCRIBE_URL = BUILD_URL.rstrip("/") + WFAPI_DESCRIBE
NODE_PATH = "/job/payments/job/api/42/execution/node"


def stage_entry(stage_id, name, status):
    return {
        "id": stage_id,
        "name": name,
        "status": status,
        "startTimeMillis": 1000,
        "durationMillis": 50,
        "_links": {"self": {"href": f"{NODE_PATH}/{stage_id}/wfapi/describe"}},
    }


def node_document(log_node_id, status="SUCCESS"):
    return {
        "stageFlowNodes": [
            {"id": log_node_id, "status": status, "_links": {"log": {"href": f"{NODE_PATH}/{log_node_id}/wfapi/log"}}}
        ]
    }


@pytest.fixture
def routes(http_client):
    """Describe document with a passing Build stage and a failing Test stage"""
    http_client.routes.update(
        {
            DESCRIBE_URL: make_response(
                200, {"stages": [stage_entry("6", "Build", "SUCCESS"), stage_entry("12", "Test", "FAILED")]}
            ),
            f"{INSTANCE_URL}{NODE_PATH}/6/wfapi/describe": make_response(200, node_document("8")),
            f"{INSTANCE_URL}{NODE_PATH}/12/wfapi/describe": make_response(200, node_document("14", "FAILED")),
            f"{INSTANCE_URL}{NODE_PATH}/14/wfapi/log": make_response(200, {"text": "AssertionError: expected 2"}),
        }
    )
    return http_client.routes


def make_pipeline(service, capture_logs=True):
    return StageEnrichmentPipeline(service, INSTANCE_URL, "svc-hygieia", "jenkins-token", capture_logs=capture_logs)


class TestDiscoverStages:
    """Test stage discovery"""

    def test_non_pipeline_build_makes_no_call(self, service, http_client, freestyle_build):
        assert make_pipeline(service).discover_stages(freestyle_build) == []

        http_client.get.assert_not_called()

    def test_parses_describe_document(self, service, http_client, routes, pipeline_build):
        stages = make_pipeline(service).discover_stages(pipeline_build)

        assert [(s.stage_id, s.name, s.status) for s in stages] == [("6", "Build", "SUCCESS"), ("12", "Test", "FAILED")]
        assert http_client.urls("GET") == [DESCRIBE_URL]
        assert http_client.get.call_args.kwargs["auth"] == ("svc-hygieia", "jenkins-token")

    def test_document_without_stages_gives_empty_list(self, service, http_client, pipeline_build):
        http_client.routes[DESCRIBE_URL] = make_response(200, {"id": "42", "status": "NOT_EXECUTED"})

        assert make_pipeline(service).discover_stages(pipeline_build) == []

    def test_unreachable_runtime_raises_without_stages(self, service, pipeline_build):
        with pytest.raises(StageEnrichmentError) as exc_info:
            make_pipeline(service).discover_stages(pipeline_build)

        assert exc_info.value.phase == "discovery"
        assert exc_info.value.stages is None
        assert exc_info.value.root_cause.startswith("ConnectionError:")

    def test_invalid_json_raises(self, service, http_client, pipeline_build):
        http_client.routes[DESCRIBE_URL] = make_response(200, "<html>login</html>")

        with pytest.raises(StageEnrichmentError, match="Stage discovery failed"):
            make_pipeline(service).discover_stages(pipeline_build)


class TestResolveNodeLinks:
    """Test execution node log link resolution"""

    def test_empty_list_makes_no_call(self, service, http_client):
        assert make_pipeline(service).resolve_node_links([]) == []

        http_client.get.assert_not_called()

    def test_records_log_urls(self, service, routes, pipeline_build):
        pipeline = make_pipeline(service)
        stages = pipeline.resolve_node_links(pipeline.discover_stages(pipeline_build))

        assert stages[0].exec_node_log_url == f"{NODE_PATH}/8/wfapi/log"
        assert stages[1].exec_node_log_url == f"{NODE_PATH}/14/wfapi/log"

    def test_failed_flow_node_wins(self):
        node = {
            "stageFlowNodes": [
                {"status": "SUCCESS", "_links": {"log": {"href": "/log/1"}}},
                {"status": "FAILED", "_links": {"log": {"href": "/log/2"}}},
                {"status": "SUCCESS", "_links": {"log": {"href": "/log/3"}}},
            ]
        }

        assert StageEnrichmentPipeline._parse_log_href(node) == "/log/2"

    def test_last_flow_node_without_failure(self):
        node = {
            "stageFlowNodes": [
                {"status": "SUCCESS", "_links": {"log": {"href": "/log/1"}}},
                {"status": "SUCCESS", "_links": {}},
                {"status": "SUCCESS", "_links": {"log": {"href": "/log/3"}}},
            ]
        }

        assert StageEnrichmentPipeline._parse_log_href(node) == "/log/3"

    def test_falls_back_to_node_log_link(self):
        assert StageEnrichmentPipeline._parse_log_href({"_links": {"log": {"href": "/log/9"}}}) == "/log/9"
        assert StageEnrichmentPipeline._parse_log_href({}) is None

    def test_absolute_links_are_not_rewritten(self, service, http_client):
        absolute = "https://other.example.com/node/6/wfapi/describe"
        http_client.routes[absolute] = make_response(200, node_document("8"))
        stage = Stage(stage_id="6", name="Build", status="SUCCESS", links={"self": {"href": absolute}})

        make_pipeline(service).resolve_node_links([stage])

        assert http_client.urls("GET") == [absolute]

    def test_failure_carries_partial_stages(self, service, http_client, routes, pipeline_build):
        pipeline = make_pipeline(service)
        stages = pipeline.discover_stages(pipeline_build)
        del http_client.routes[f"{INSTANCE_URL}{NODE_PATH}/12/wfapi/describe"]

        with pytest.raises(StageEnrichmentError) as exc_info:
            pipeline.resolve_node_links(stages)

        error = exc_info.value
        assert error.phase == "node_links"
        assert error.stages[0].exec_node_log_url == f"{NODE_PATH}/8/wfapi/log"
        assert error.stages[1].exec_node_log_url is None

    def test_missing_self_link_raises(self, service):
        stage = Stage(stage_id="6", name="Build", status="SUCCESS", links={})

        with pytest.raises(StageEnrichmentError, match="stage 'Build'"):
            make_pipeline(service).resolve_node_links([stage])


class TestCaptureFailureLogs:
    """Test failed stage log capture"""

    def failed_stage(self, log_url=f"{NODE_PATH}/14/wfapi/log"):
        return Stage(stage_id="12", name="Test", status="FAILED", exec_node_log_url=log_url)

    def test_disabled_makes_no_call(self, service, http_client, routes):
        stages = make_pipeline(service, capture_logs=False).capture_failure_logs([self.failed_stage()])

        http_client.get.assert_not_called()
        assert stages[0].log is None

    def test_enabled_fetches_only_failed_stages(self, service, http_client, routes):
        passed = Stage(stage_id="6", name="Build", status="SUCCESS", exec_node_log_url=f"{NODE_PATH}/8/wfapi/log")

        stages = make_pipeline(service).capture_failure_logs([passed, self.failed_stage()])

        assert http_client.get.call_count == 1
        assert stages[0].log is None
        assert stages[1].log == "AssertionError: expected 2"

    def test_plain_text_log_is_kept(self, service, http_client):
        http_client.routes[f"{INSTANCE_URL}/log/raw"] = make_response(200, "plain console text")

        stages = make_pipeline(service).capture_failure_logs([self.failed_stage("/log/raw")])

        assert stages[0].log == "plain console text"

    def test_failed_stage_without_log_link_is_skipped(self, service, http_client):
        stages = make_pipeline(service).capture_failure_logs([self.failed_stage(None)])

        http_client.get.assert_not_called()
        assert stages[0].log is None

    def test_failure_raises_with_stages(self, service):
        stages = [self.failed_stage("/log/missing")]

        with pytest.raises(StageEnrichmentError) as exc_info:
            make_pipeline(service).capture_failure_logs(stages)

        assert exc_info.value.phase == "logs"
        assert exc_info.value.stages is stages


class TestEnrich:
    """Test the full three-phase sequence"""

    def test_enriches_all_phases(self, service, http_client, routes, pipeline_build):
        stages = make_pipeline(service).enrich(pipeline_build)

        assert [s.log for s in stages] == [None, "AssertionError: expected 2"]
        assert http_client.get.call_count == 4

    def test_without_log_capture(self, service, http_client, routes, pipeline_build):
        stages = make_pipeline(service, capture_logs=False).enrich(pipeline_build)

        assert all(s.log is None for s in stages)
        assert http_client.get.call_count == 3

    def test_freestyle_build(self, service, http_client, freestyle_build):
        assert make_pipeline(service).enrich(freestyle_build) == []
        http_client.get.assert_not_called()

    def test_does_not_mutate_build(self, service, routes, pipeline_build):
        before = dataclasses.asdict(pipeline_build)

        make_pipeline(service).enrich(pipeline_build)

        assert dataclasses.asdict(pipeline_build) == before
