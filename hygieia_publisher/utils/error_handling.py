"""
Error Handling Utility Module

Logging helpers for the expected, non-fatal failures of a publish run: one
artifact that cannot be read, one endpoint that is down, one stage API that
answers garbage. The caller always carries on with the next item.

1. log_and_continue() - Record the failure, return nothing
2. log_and_return_default() - Record the failure, hand back a fallback value

Both log at WARNING with the same structured fields (error_type,
exception_class, context) so failures can be filtered in the JSON log.
"""

import logging
from typing import Any


def _failure_fields(error: Exception, context: dict[str, Any], error_type: str) -> dict[str, Any]:
    return {
        "error_type": error_type,
        "exception_class": type(error).__name__,
        "context": context,
    }


def log_and_continue(
    logger: logging.Logger,
    error: Exception,
    context: dict[str, Any],
    error_type: str = "Operation",
) -> None:
    """
    Record a failure of one item and let the caller move on.

    Args:
        logger: Module logger
        error: The caught exception
        context: What was being processed (endpoint, tool, path, ...)
        error_type: Name of the failed operation, used as the message prefix

    Example:
        try:
            response = service.publish_generic_item(request)
        except HygieiaTransportError as e:
            log_and_continue(logger, e, {"tool": request.tool_name}, "Generic item publish")
    """
    logger.warning(f"{error_type} failed: {error}", extra=_failure_fields(error, context, error_type))


def log_and_return_default(
    logger: logging.Logger,
    error: Exception,
    context: dict[str, Any],
    default_value: Any = None,
    error_type: str = "Operation",
) -> Any:
    """
    Record a failure and return default_value in place of the lost result.

    Example:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return log_and_return_default(logger, e, {"path": str(path)}, None, "Artifact read")
    """
    fields = _failure_fields(error, context, error_type)
    fields["default_value"] = str(default_value)
    logger.warning(f"{error_type} failed, returning default value: {error}", extra=fields)
    return default_value
