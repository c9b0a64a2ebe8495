"""
Logging utilities for safe structured logging.

Provides helpers for logging degraded external calls without leaking
payloads (search results, prompts) into log lines.

Dependencies: logging (stdlib), agribot.observability.correlation
System role: Logging helper functions
"""

import logging
from typing import Any

from agribot.observability.correlation import get_correlation_id


def safe_log_value(value: Any, max_length: int = 300) -> str:
    """
    Safely convert any value to a short string for logging.

    Collections are summarized by size, long strings truncated.

    Args:
        value: Value to convert
        max_length: Maximum length before truncating

    Returns:
        str: Safe string representation
    """
    try:
        if value is None:
            return "None"
        if isinstance(value, str):
            val_str = value
        elif isinstance(value, (list, tuple)):
            val_str = f"{type(value).__name__}({len(value)} items)"
        elif isinstance(value, dict):
            val_str = f"dict({len(value)} keys)"
        else:
            val_str = str(value)

        if len(val_str) > max_length:
            return val_str[:max_length] + f"... (truncated, {len(val_str)} total)"
        return val_str
    except Exception as e:
        return f"<unable to log: {type(e).__name__}>"


def _safe_context(context: dict[str, Any]) -> dict[str, str]:
    safe = {key: safe_log_value(val) for key, val in context.items()}
    safe.setdefault("correlation_id", get_correlation_id())
    return safe


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context,
) -> None:
    """
    Log a message with structured context, safely converting all values.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Context dict with arbitrary key-value pairs
    """
    logger.log(level, message, extra=_safe_context(context))


def log_degradation(
    logger: logging.Logger,
    component: str,
    exc: BaseException,
    **context,
) -> None:
    """
    Log an external dependency failure that the caller absorbed.

    Emitted at WARNING with the traceback so degraded turns stay visible
    without being reported as request failures.

    Args:
        logger: Logger instance
        component: Pipeline step that degraded (search, summarizer, ...)
        exc: The absorbed exception
        **context: Additional context dict
    """
    safe = _safe_context(context)
    safe.update({
        "component": component,
        "error_type": type(exc).__name__,
        "error_msg": safe_log_value(str(exc)),
    })
    logger.warning(
        f"{component} degraded: {type(exc).__name__}: {safe['error_msg']}",
        exc_info=exc,
        extra=safe,
    )


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context,
) -> None:
    """
    Log an exception with full context.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance
        **context: Additional context dict
    """
    safe = _safe_context(context)
    safe.update({
        "error_type": type(exc).__name__,
        "error_msg": safe_log_value(str(exc)),
    })
    logger.error(message, exc_info=exc, extra=safe)
