"""
Request-scoped logging context.

Holds the correlation id of the current HTTP request and the farmer the
request acts for, propagated across awaits with contextvars. Detached
tasks (profile cache writes) inherit a copy of both at creation.

Dependencies: contextvars
System role: Request tracing across service boundaries
"""

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

CORRELATION_HEADER = "X-Correlation-ID"
UNSET = "-"

correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")
user_id_ctx: ContextVar[str] = ContextVar("user_id", default="")


def new_correlation_id() -> str:
    """Short random id for requests that arrive without one."""
    return uuid.uuid4().hex[:16]


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Bind a correlation id to the current context.

    Args:
        correlation_id: Incoming id; a new one is generated when empty

    Returns:
        str: The bound id
    """
    value = (correlation_id or "").strip() or new_correlation_id()
    correlation_id_ctx.set(value)
    return value


def get_correlation_id() -> str:
    """Current correlation id, "-" outside a request."""
    return correlation_id_ctx.get() or UNSET


def clear_correlation_id() -> None:
    """Unbind correlation id and farmer from the current context."""
    correlation_id_ctx.set("")
    user_id_ctx.set("")


def bind_user_id(user_id: int | None) -> None:
    """Tag subsequent log records of this request with the farmer id."""
    user_id_ctx.set(str(user_id) if user_id else "")


def get_user_id() -> str:
    """Farmer bound to the current context, "-" when none."""
    return user_id_ctx.get() or UNSET


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """
    Bind a correlation id for the duration of a block.

    Usage:
        with correlation_scope(request.headers.get(CORRELATION_HEADER)) as cid:
            ...
    """
    value = set_correlation_id(correlation_id)
    try:
        yield value
    finally:
        clear_correlation_id()
