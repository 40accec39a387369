"""
Secure HTTP Client Wrapper

Provides the HTTP methods used by the publisher with enforced SSL
verification and timeouts.

Usage:
    from hygieia_publisher.http_client import SecureHTTPClient

    client = SecureHTTPClient(timeout=30, use_proxy=False)
    response = client.get(url, auth=("user", "token"))
    response = client.post(url, json=payload)

Security Features:
    - SSL verification always enabled (verify=True)
    - Default 30-second timeout on all requests
    - Proxy environment variables honoured only when use_proxy is set
"""

import requests


class SecureHTTPClient:
    """
    Secure HTTP client with enforced SSL verification and timeouts.

    One instance is shared by every call made against a single endpoint.
    There is no retry: a failed call is reported to the caller as is.
    """

    DEFAULT_TIMEOUT = 30  # seconds

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, use_proxy: bool = False):
        """
        Args:
            timeout: Default timeout in seconds for every request
            use_proxy: Honour HTTP(S)_PROXY / NO_PROXY environment settings
        """
        self.timeout = timeout
        self.use_proxy = use_proxy
        self.session = requests.Session()
        self.session.trust_env = use_proxy

    def get(self, url: str, **kwargs) -> requests.Response:
        """
        Secure GET request with SSL verification enforced.

        Args:
            url: URL to fetch
            **kwargs: Additional arguments to pass to requests.Session.get()

        Returns:
            requests.Response: HTTP response

        Raises:
            requests.RequestException: On connection errors and timeouts
        """
        # CRITICAL: Force SSL verification (prevent man-in-the-middle attacks)
        kwargs["verify"] = True
        kwargs.setdefault("timeout", self.timeout)
        return self.session.get(url, **kwargs)

    def post(self, url: str, **kwargs) -> requests.Response:
        """
        Secure POST request with SSL verification enforced.

        Args:
            url: URL to post to
            **kwargs: Additional arguments to pass to requests.Session.post()

        Returns:
            requests.Response: HTTP response

        Raises:
            requests.RequestException: On connection errors and timeouts
        """
        kwargs["verify"] = True
        kwargs.setdefault("timeout", self.timeout)
        return self.session.post(url, **kwargs)

    def close(self) -> None:
        """Release pooled connections."""
        self.session.close()
