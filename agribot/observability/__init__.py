"""
Observability module.

Request-scoped log context (correlation id, farmer id), logging setup and
helpers for logging absorbed failures.
"""

from agribot.observability.correlation import (
    bind_user_id,
    clear_correlation_id,
    correlation_scope,
    get_correlation_id,
    set_correlation_id,
)
from agribot.observability.log_utils import (
    log_degradation,
    log_exception_with_context,
    log_with_context,
)
from agribot.observability.logger import configure_logging

__all__ = [
    "bind_user_id",
    "clear_correlation_id",
    "configure_logging",
    "correlation_scope",
    "get_correlation_id",
    "log_degradation",
    "log_exception_with_context",
    "log_with_context",
    "set_correlation_id",
]
