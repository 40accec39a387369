#!/usr/bin/env python3
"""
Replay a build event against the configured Hygieia endpoints.

Reads publisher configuration from the environment (.env supported) and a
build description from a JSON file, then fires the start or completion
event. The build console is written to stdout, the process log to stderr.

Usage:
    hygieia-publish --event completed --build build.json
    python -m hygieia_publisher.cli --event started --build build.json --log-level DEBUG

Build file:
    {
        "jobName": "payments/api",
        "jobUrl": "https://ci.example.com/job/payments/job/api/",
        "buildUrl": "https://ci.example.com/job/payments/job/api/42/",
        "instanceUrl": "https://ci.example.com",
        "number": 42,
        "startTime": 1760000000000,
        "duration": 93000,
        "result": "SUCCESS",
        "startedBy": "jdoe",
        "pipeline": true,
        "workspace": "/var/lib/ci/workspace/payments-api"
    }
"""

import argparse
import json
import sys
from pathlib import Path

from hygieia_publisher.core import get_logger, setup_logging
from hygieia_publisher.domain.build import BuildEventContext
from hygieia_publisher.listener import HygieiaBuildListener
from hygieia_publisher.secure_config import ConfigurationError, get_config

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_INVALID_INPUT = 2


def load_build(path: Path) -> BuildEventContext:
    """
    Load a build description file.

    Raises:
        ValueError: If the file is not valid JSON or lacks required fields
        OSError: If the file cannot be read
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("build file must contain a JSON object")
    try:
        return BuildEventContext.from_dict(data)
    except KeyError as e:
        raise ValueError(f"build file is missing {e}") from e
    except TypeError as e:
        raise ValueError(f"build file has an invalid field: {e}") from e


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Publish a build event to Hygieia")
    parser.add_argument("--event", choices=["started", "completed"], required=True, help="Build event to publish")
    parser.add_argument("--build", type=Path, required=True, help="Path to the build description JSON file")
    parser.add_argument("--log-level", default="INFO", help="Process log level (default: INFO)")
    parser.add_argument("--json-logs", action="store_true", help="Emit the process log as JSON")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point"""
    args = parse_args(argv)
    setup_logging(level=args.log_level, json_output=args.json_logs)

    try:
        config = get_config().get_publisher_config()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_INVALID_INPUT

    try:
        build = load_build(args.build)
    except (OSError, ValueError) as e:
        logger.error(f"Cannot load build file {args.build}: {e}")
        return EXIT_INVALID_INPUT

    listener = HygieiaBuildListener(config)
    if args.event == "started":
        listener.on_build_started(build, sys.stdout)
    else:
        listener.on_build_completed(build, sys.stdout)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
