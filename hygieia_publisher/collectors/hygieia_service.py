"""
Hygieia REST API Client

Provides the four calls the publisher makes for one endpoint:

    - publish_build_data     POST {api}/v3/builds
    - publish_code_quality   POST {api}/quality/static-analysis
    - publish_generic_item   POST {api}/generic-item
    - get_stage_response     GET  {build runtime}/... (HTTP basic auth)

Dashboard calls return a HygieiaResponse whatever the status code; callers
decide what counts as success. Transport failures raise
HygieiaTransportError. There is no retry.

Usage:
    from hygieia_publisher.collectors.hygieia_service import create_hygieia_service

    service = create_hygieia_service(config, "https://hygieia.example.com/api")
    response = service.publish_build_data(request)
    if response.is_created:
        ...
"""

from typing import Any

import requests

from hygieia_publisher.core import get_logger
from hygieia_publisher.domain.requests import (
    BuildDataCreateRequest,
    CodeQualityCreateRequest,
    GenericCollectorItemCreateRequest,
    HygieiaResponse,
)
from hygieia_publisher.errors import HygieiaTransportError
from hygieia_publisher.http_client import SecureHTTPClient
from hygieia_publisher.secure_config import PublisherConfig

logger = get_logger(__name__)

HTTP_OK = 200


class HygieiaService:
    """
    Client for a single Hygieia API endpoint.

    Features:
    - apiUser / apiToken authentication headers
    - JSON request bodies rendered from domain request models
    - Build runtime reads with basic authentication for stage data
    """

    BUILD_PATH = "/v3/builds"
    QUALITY_PATH = "/quality/static-analysis"
    GENERIC_ITEM_PATH = "/generic-item"

    def __init__(self, api_url: str, token: str, instance_name: str, http_client: SecureHTTPClient):
        """
        Initialize Hygieia client.

        Args:
            api_url: Hygieia API base URL (e.g., https://hygieia.example.com/api)
            token: API token; sent as "apiToken <token>"
            instance_name: Name of this build runtime as known to Hygieia
            http_client: Shared secure HTTP client

        Raises:
            ValueError: If api_url is empty
        """
        if not api_url:
            raise ValueError("api_url is required")

        self.api_url = api_url.rstrip("/")
        self.instance_name = instance_name
        self.http_client = http_client
        self.headers = self._build_headers(instance_name, token)

    def _build_headers(self, instance_name: str, token: str) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if instance_name:
            headers["apiUser"] = instance_name
        if token:
            headers["Authorization"] = f"apiToken {token}"
        return headers

    def _build_url(self, path: str) -> str:
        return f"{self.api_url}{path}"

    def _post(self, path: str, payload: dict[str, Any]) -> HygieiaResponse:
        """
        POST a JSON payload to the Hygieia API.

        Args:
            path: API path (e.g., "/v3/builds")
            payload: JSON body

        Returns:
            HygieiaResponse with status code and raw body

        Raises:
            HygieiaTransportError: If the request could not be completed
        """
        url = self._build_url(path)
        try:
            response = self.http_client.post(url, json=payload, headers=self.headers)
        except requests.RequestException as e:
            raise HygieiaTransportError(f"POST {url} failed: {e}", url=url) from e

        logger.debug(f"POST {url} -> HTTP {response.status_code}")
        return HygieiaResponse(status_code=response.status_code, body=response.text)

    # ==============================
    # Hygieia APIs
    # ==============================

    def publish_build_data(self, request: BuildDataCreateRequest) -> HygieiaResponse:
        """
        Create a build record.

        REST Endpoint: POST {api}/v3/builds

        Returns:
            Response; 201 body:
            {"id": "5", "collectorItemId": "9", "dashboardId": "3",
             "clientReference": "...", "buildUrl": "..."}
        """
        return self._post(self.BUILD_PATH, request.to_payload())

    def publish_code_quality(self, request: CodeQualityCreateRequest) -> HygieiaResponse:
        """
        Create a static analysis (code quality) record.

        REST Endpoint: POST {api}/quality/static-analysis
        """
        return self._post(self.QUALITY_PATH, request.to_payload())

    def publish_generic_item(self, request: GenericCollectorItemCreateRequest) -> HygieiaResponse:
        """
        Create a generic collector item.

        REST Endpoint: POST {api}/generic-item
        """
        return self._post(self.GENERIC_ITEM_PATH, request.to_payload())

    # ==============================
    # Build runtime APIs
    # ==============================

    def get_stage_response(self, url: str, user_id: str, token: str) -> HygieiaResponse:
        """
        Read pipeline stage data from the build runtime.

        Args:
            url: Absolute build runtime URL (wfapi describe / node / log)
            user_id: Build runtime user; no auth is sent when empty
            token: Build runtime API token

        Returns:
            HygieiaResponse with HTTP 200 and the raw body

        Raises:
            HygieiaTransportError: On transport failure or a non-200 status
        """
        auth = (user_id, token) if user_id else None
        try:
            response = self.http_client.get(url, auth=auth, headers={"Accept": "application/json"})
        except requests.RequestException as e:
            raise HygieiaTransportError(f"GET {url} failed: {e}", url=url) from e

        if response.status_code != HTTP_OK:
            raise HygieiaTransportError(
                f"GET {url} returned HTTP {response.status_code}", url=url, status_code=response.status_code
            )
        return HygieiaResponse(status_code=response.status_code, body=response.text)

    def close(self) -> None:
        self.http_client.close()


def create_hygieia_service(config: PublisherConfig, api_url: str) -> HygieiaService:
    """
    Build a Hygieia client for one endpoint from publisher configuration.

    Args:
        config: Publisher configuration (token, instance name, proxy, timeout)
        api_url: Endpoint API base URL

    Returns:
        HygieiaService: Client with its own HTTP session
    """
    http_client = SecureHTTPClient(timeout=config.http_timeout, use_proxy=config.use_proxy)
    return HygieiaService(
        api_url=api_url,
        token=config.api_token,
        instance_name=config.instance_name,
        http_client=http_client,
    )
