"""
Endpoint resolution.

Turns the configured comma-separated API URL list and dashboard URL list into
an ordered list of Endpoint values. Dashboard URLs pair with API URLs by raw
slot position, so "a,,b" with dashboards "x,y,z" pairs b with z.
"""

from dataclasses import dataclass

from hygieia_publisher.secure_config import SEPARATOR


@dataclass(frozen=True)
class Endpoint:
    """
    One Hygieia service to publish to.

    Attributes:
        service_url: Hygieia API base URL
        dashboard_url: Dashboard UI base URL for deep links, if configured
        index: Raw slot position in the configured list (0-based)
    """

    service_url: str
    dashboard_url: str | None
    index: int

    @property
    def display_number(self) -> int:
        return self.index + 1


def split_delimited(raw: str | None, separator: str = SEPARATOR) -> list[str]:
    """
    Split a delimited string, trimming each slot but keeping blank ones.

    Example:
        >>> split_delimited(" a , ,b ")
        ['a', '', 'b']
        >>> split_delimited("")
        []
    """
    raw = (raw or "").strip()
    if not raw:
        return []
    return [part.strip() for part in raw.split(separator)]


def resolve_endpoints(api_urls: str | None, app_urls: str | None, separator: str = SEPARATOR) -> list[Endpoint]:
    """
    Resolve configured endpoints in order, skipping blank API slots.

    Args:
        api_urls: Delimited Hygieia API URLs
        app_urls: Delimited dashboard URLs, paired by raw slot index
        separator: Delimiter for both lists

    Returns:
        Endpoints in configured order; empty if nothing is configured

    Example:
        >>> resolve_endpoints("http://a/api,http://b/api", "http://a/dash,")
        [Endpoint(service_url='http://a/api', dashboard_url='http://a/dash', index=0),
         Endpoint(service_url='http://b/api', dashboard_url=None, index=1)]
    """
    service_slots = split_delimited(api_urls, separator)
    dashboard_slots = split_delimited(app_urls, separator)

    endpoints = []
    for index, service_url in enumerate(service_slots):
        if not service_url:
            continue
        dashboard_url = dashboard_slots[index] if index < len(dashboard_slots) else ""
        endpoints.append(Endpoint(service_url=service_url, dashboard_url=dashboard_url or None, index=index))
    return endpoints
