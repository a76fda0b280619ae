# portfolio_journal/utils/context.py
"""
Request-scoped context for log enrichment.

Holds the correlation ID set by CorrelationIdMiddleware and the
authenticated user ID set by get_current_user. Backed by contextvars, so
values follow the request through async code and into the threadpool that
runs sync endpoints.

Usage:
    from portfolio_journal.utils.context import get_correlation_id

    correlation_id = get_correlation_id()
"""

from contextvars import ContextVar

_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_user_id_var: ContextVar[int | None] = ContextVar("user_id", default=None)


# =============================================================================
# CORRELATION ID
# =============================================================================

def get_correlation_id() -> str | None:
    """The current request's correlation ID, or None outside a request."""
    return _correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    _correlation_id_var.set(correlation_id)


def clear_correlation_id() -> None:
    _correlation_id_var.set(None)


# =============================================================================
# AUTHENTICATED USER
# =============================================================================

def get_current_user_id() -> int | None:
    """The authenticated user of the current request, if already resolved."""
    return _user_id_var.get()


def set_current_user_id(user_id: int) -> None:
    _user_id_var.set(user_id)


def clear_request_context() -> None:
    """Reset everything; called by middleware at the end of each request."""
    _correlation_id_var.set(None)
    _user_id_var.set(None)
