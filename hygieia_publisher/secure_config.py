"""
Secure Configuration Management

Provides validated configuration for the build publisher.
Replaces ad-hoc os.getenv() calls with a single dataclass that is checked
once, at load time, so that a misconfiguration never surfaces in the middle
of a build event.

Usage:
    from hygieia_publisher.secure_config import get_config

    config = get_config().get_publisher_config()
    print(config.api_urls)
    print(config.publish_enabled)

Environment variables:
    HYGIEIA_API_URLS              Comma-separated Hygieia API base URLs
    HYGIEIA_APP_URLS              Comma-separated dashboard UI URLs (positional)
    HYGIEIA_API_TOKEN             Token sent to the Hygieia API
    HYGIEIA_JENKINS_NAME          Name identifying this build runtime to Hygieia
    HYGIEIA_JENKINS_USER_ID       Build runtime user for stage API reads
    HYGIEIA_JENKINS_TOKEN         Build runtime API token for stage API reads
    HYGIEIA_PUBLISH_BUILD_DATA    true/false
    HYGIEIA_PUBLISH_QUALITY_DATA  true/false
    HYGIEIA_CAPTURE_LOGS          true/false
    HYGIEIA_SHOW_CONSOLE_OUTPUT   true/false (default true)
    HYGIEIA_USE_PROXY             true/false
    HYGIEIA_EXCLUDE_JOB_NAMES     Comma-separated job name patterns
    HYGIEIA_GENERIC_ITEMS         JSON list of {"toolName", "pattern", "publishOnStart"}
    HYGIEIA_HTTP_TIMEOUT          Seconds (default 30)

Raises:
    ConfigurationError: If configuration is invalid
"""

import json
import os
import re
from dataclasses import dataclass, field
from typing import Any

from dotenv import load_dotenv

from hygieia_publisher import __version__

SEPARATOR = ","

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off", ""}


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""

    pass


@dataclass(frozen=True)
class GenericCollectorItemConfig:
    """
    One user-defined artifact to publish as a generic collector item.

    Attributes:
        tool_name: Tool name reported to Hygieia (e.g., "Checkmarx")
        pattern: Glob pattern matched against files in the build workspace
        publish_on_start: True to publish on build start, False on completion
    """

    tool_name: str
    pattern: str
    publish_on_start: bool = False

    def __post_init__(self) -> None:
        if not self.tool_name or not self.tool_name.strip():
            raise ConfigurationError("Generic collector item requires a toolName")
        if not self.pattern or not self.pattern.strip():
            raise ConfigurationError(f"Generic collector item '{self.tool_name}' requires a pattern")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GenericCollectorItemConfig":
        """
        Build from the JSON shape used in HYGIEIA_GENERIC_ITEMS.

        Args:
            data: {"toolName": ..., "pattern": ..., "publishOnStart": ...}

        Raises:
            ConfigurationError: If the entry is not an object or fields are missing
        """
        if not isinstance(data, dict):
            raise ConfigurationError(f"Generic collector item must be an object, got {type(data).__name__}")
        publish_on_start = data.get("publishOnStart", False)
        if isinstance(publish_on_start, str):
            publish_on_start = _parse_bool("publishOnStart", publish_on_start)
        return cls(
            tool_name=str(data.get("toolName") or ""),
            pattern=str(data.get("pattern") or ""),
            publish_on_start=bool(publish_on_start),
        )


@dataclass
class PublisherConfig:
    """
    Validated publisher configuration.

    Injected into HygieiaBuildListener; read-only during event handling.
    """

    api_urls: str = ""
    app_urls: str = ""
    api_token: str = ""
    instance_name: str = ""
    jenkins_user_id: str = ""
    jenkins_token: str = ""
    publish_build_data: bool = False
    publish_quality_data: bool = False
    capture_logs: bool = False
    show_console_output: bool = True
    use_proxy: bool = False
    exclude_job_names: str = ""
    generic_items: list[GenericCollectorItemConfig] = field(default_factory=list)
    http_timeout: float = 30.0
    plugin_version_info: str = f"hygieia-publisher {__version__}"

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        """
        Validate publisher configuration.

        Endpoint URLs are not validated here; a bad URL fails at
        the transport call for that endpoint only.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if self.http_timeout <= 0:
            raise ConfigurationError(f"HYGIEIA_HTTP_TIMEOUT must be positive: {self.http_timeout}")

        for item in self.generic_items:
            if not isinstance(item, GenericCollectorItemConfig):
                raise ConfigurationError(f"Invalid generic collector item: {item!r}")

        if self.jenkins_token and not self.jenkins_user_id:
            raise ConfigurationError("HYGIEIA_JENKINS_TOKEN is set but HYGIEIA_JENKINS_USER_ID is missing")

    @property
    def publish_enabled(self) -> bool:
        """True when any kind of data is configured to be published."""
        return self.publish_build_data or self.publish_quality_data or bool(self.generic_items)

    def is_job_excluded(self, *job_names: str | None) -> bool:
        """
        Check whether any of the given job names matches an exclusion pattern.

        Patterns are comma-separated regular expressions matched against the
        whole name. A pattern that is not a valid expression is compared
        literally.

        Args:
            *job_names: Candidate names (full path, display name); None is ignored

        Returns:
            True if publishing should be skipped for this job
        """
        patterns = [p.strip() for p in self.exclude_job_names.split(SEPARATOR) if p.strip()]
        names = [n for n in job_names if n]
        for pattern in patterns:
            for name in names:
                try:
                    if re.fullmatch(pattern, name):
                        return True
                except re.error:
                    if pattern == name:
                        return True
        return False


def _parse_bool(name: str, raw: str | None, default: bool = False) -> bool:
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return default if value == "" else False
    raise ConfigurationError(f"{name} must be true or false: {raw!r}")


def _parse_generic_items(raw: str | None) -> list[GenericCollectorItemConfig]:
    if not raw or not raw.strip():
        return []
    try:
        entries = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"HYGIEIA_GENERIC_ITEMS is not valid JSON: {e}") from e
    if not isinstance(entries, list):
        raise ConfigurationError("HYGIEIA_GENERIC_ITEMS must be a JSON list")
    return [GenericCollectorItemConfig.from_dict(entry) for entry in entries]


def _parse_timeout(raw: str | None) -> float:
    if raw is None or not raw.strip():
        return 30.0
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"HYGIEIA_HTTP_TIMEOUT must be a number: {raw!r}") from e


class SecureConfig:
    """
    Centralized configuration loader.

    Loads and validates publisher configuration from environment variables.
    """

    def __init__(self):
        """Initialize configuration (loads .env file)."""
        load_dotenv()

    def get_publisher_config(self) -> PublisherConfig:
        """
        Get validated publisher configuration.

        Returns:
            PublisherConfig: Validated configuration

        Raises:
            ConfigurationError: If configuration is invalid
        """
        return PublisherConfig(
            api_urls=os.getenv("HYGIEIA_API_URLS", ""),
            app_urls=os.getenv("HYGIEIA_APP_URLS", ""),
            api_token=os.getenv("HYGIEIA_API_TOKEN", ""),
            instance_name=os.getenv("HYGIEIA_JENKINS_NAME", ""),
            jenkins_user_id=os.getenv("HYGIEIA_JENKINS_USER_ID", ""),
            jenkins_token=os.getenv("HYGIEIA_JENKINS_TOKEN", ""),
            publish_build_data=_parse_bool("HYGIEIA_PUBLISH_BUILD_DATA", os.getenv("HYGIEIA_PUBLISH_BUILD_DATA")),
            publish_quality_data=_parse_bool(
                "HYGIEIA_PUBLISH_QUALITY_DATA", os.getenv("HYGIEIA_PUBLISH_QUALITY_DATA")
            ),
            capture_logs=_parse_bool("HYGIEIA_CAPTURE_LOGS", os.getenv("HYGIEIA_CAPTURE_LOGS")),
            show_console_output=_parse_bool(
                "HYGIEIA_SHOW_CONSOLE_OUTPUT", os.getenv("HYGIEIA_SHOW_CONSOLE_OUTPUT"), default=True
            ),
            use_proxy=_parse_bool("HYGIEIA_USE_PROXY", os.getenv("HYGIEIA_USE_PROXY")),
            exclude_job_names=os.getenv("HYGIEIA_EXCLUDE_JOB_NAMES", ""),
            generic_items=_parse_generic_items(os.getenv("HYGIEIA_GENERIC_ITEMS")),
            http_timeout=_parse_timeout(os.getenv("HYGIEIA_HTTP_TIMEOUT")),
        )


# Convenience function for getting configuration
_config_instance = None


def get_config() -> SecureConfig:
    """
    Get the global configuration loader (singleton pattern).

    Returns:
        SecureConfig: The configuration loader
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = SecureConfig()
    return _config_instance
